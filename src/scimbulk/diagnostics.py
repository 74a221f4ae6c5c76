"""Findings reported by the bulk request validator.

Each ``Diagnostic`` points at one operation of a request by its
position, or at the request as a whole when ``index`` is ``None``.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels, ordered like LSP's."""

    ERROR = auto()
    WARNING = auto()
    INFORMATION = auto()
    HINT = auto()


@dataclass(frozen=True)
class Diagnostic:
    """One validation finding.

    Parameters
    ----------
    severity:
        How serious the finding is.
    code:
        Stable identifier such as ``"BULK002"``.
    message:
        What is wrong, for humans.
    index:
        0-based position of the offending operation; ``None`` for
        request-level findings.
    suggestion:
        Optional fix hint.
    rule:
        Name of the rule that reported it.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    index: int | None = field(default=None)
    suggestion: str | None = field(default=None)
    rule: str = field(default="")

    @property
    def location(self) -> str:
        """``"request"`` or ``"operation N"``, counting from 1."""
        if self.index is None:
            return "request"
        return f"operation {self.index + 1}"

    @property
    def is_error(self) -> bool:
        """True if the finding makes the request unusable."""
        return self.severity == DiagnosticSeverity.ERROR

    def with_severity(self, severity: DiagnosticSeverity) -> "Diagnostic":
        return replace(self, severity=severity)

    def __str__(self) -> str:
        hint = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"[{self.code}] {self.severity.name} at {self.location}: {self.message}{hint}"
