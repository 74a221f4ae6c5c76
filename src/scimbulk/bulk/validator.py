"""Structural validation of bulk requests.

Each rule is a callable ``(BulkRequest, BulkLimits) -> list[Diagnostic]``.
``BulkValidator`` runs them all and aggregates the results.  Validation
only looks at the shape of the request; whether the referenced resources
exist is up to the service.

Rule codes:

    BULK001  Duplicate bulk id
    BULK002  Reference to an undefined bulk id
    BULK003  Forward reference to a bulk id defined later in the request
    BULK004  Operation references its own bulk id
    BULK005  Empty request
    BULK006  POST operation without a bulk id
    BULK007  More operations than the service accepts
    BULK008  Failure count larger than the number of operations
    BULK009  Serialized request larger than the service accepts
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from scimbulk.bulk.operation import BulkMethod, BulkOperation, BulkRef
from scimbulk.bulk.references import find_bulk_references, is_bulk_reference, strip_bulk_prefix
from scimbulk.bulk.request import BulkRequest
from scimbulk.diagnostics import Diagnostic, DiagnosticSeverity
from scimbulk.resources import resource_to_dict


@dataclass(frozen=True)
class BulkLimits:
    """Service-side limits, as advertised in ``ServiceProviderConfig.bulk``.

    ``None`` disables the corresponding check.
    """

    max_operations: int | None = None
    max_payload_size: int | None = None


Rule = Callable[[BulkRequest, BulkLimits], list[Diagnostic]]


def referenced_bulk_ids(operation: BulkOperation) -> list[str]:
    """Return the bulk id tokens ``operation`` depends on, in order.

    Covers the target of a PUT, PATCH or DELETE that carries a bulk id,
    path segments in ``bulkId:<token>`` form, and references anywhere in
    the payload.
    """
    tokens: list[str] = []
    if operation.method is not BulkMethod.POST and isinstance(operation.identity, BulkRef):
        tokens.append(operation.identity.token)
    for segment in operation.path.split("/"):
        if is_bulk_reference(segment):
            token = strip_bulk_prefix(segment)
            if token not in tokens:
                tokens.append(token)
    if operation.data is not None:
        for token in find_bulk_references(resource_to_dict(operation.data)):
            if token not in tokens:
                tokens.append(token)
    return tokens


def _make(
    code: str,
    severity: DiagnosticSeverity,
    message: str,
    index: int | None,
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        code=code,
        message=message,
        index=index,
        suggestion=suggestion,
        rule=rule,
    )


# ---------------------------------------------------------------------------
# BULK001 — duplicate bulk ids
# ---------------------------------------------------------------------------

def rule_duplicate_bulk_ids(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK001: A bulk id may be defined by at most one POST."""
    diagnostics: list[Diagnostic] = []
    seen: dict[str, int] = {}
    for index, operation in enumerate(request):
        token = operation.bulk_id
        if operation.method is not BulkMethod.POST or token is None:
            continue
        if token in seen:
            diagnostics.append(_make(
                "BULK001",
                DiagnosticSeverity.ERROR,
                f"Duplicate bulk id {token!r}; first defined by operation {seen[token] + 1}",
                index,
                suggestion="Give every POST in the request a unique bulk id",
                rule="duplicate_bulk_ids",
            ))
        else:
            seen[token] = index
    return diagnostics


# ---------------------------------------------------------------------------
# BULK002 / BULK003 / BULK004 — reference resolution order
# ---------------------------------------------------------------------------

def rule_undefined_references(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK002: Every referenced bulk id must be defined in the request."""
    diagnostics: list[Diagnostic] = []
    defined = request.bulk_ids()
    for index, operation in enumerate(request):
        for token in referenced_bulk_ids(operation):
            if token not in defined:
                diagnostics.append(_make(
                    "BULK002",
                    DiagnosticSeverity.ERROR,
                    f"{operation.method.value} {operation.path} references undefined bulk id {token!r}",
                    index,
                    suggestion=f"Add a POST with bulk id '{token}' earlier in the request",
                    rule="undefined_references",
                ))
    return diagnostics


def rule_forward_references(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK003: A bulk id can only be referenced after the POST that defines it."""
    diagnostics: list[Diagnostic] = []
    defined = request.bulk_ids()
    for index, operation in enumerate(request):
        for token in referenced_bulk_ids(operation):
            position = defined.get(token)
            if position is not None and position > index:
                diagnostics.append(_make(
                    "BULK003",
                    DiagnosticSeverity.ERROR,
                    f"Bulk id {token!r} is referenced before it is defined "
                    f"by operation {position + 1}",
                    index,
                    suggestion="Move the defining POST before this operation",
                    rule="forward_references",
                ))
    return diagnostics


def rule_self_references(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK004: A POST cannot reference the resource it is creating."""
    diagnostics: list[Diagnostic] = []
    for index, operation in enumerate(request):
        token = operation.bulk_id
        if operation.method is BulkMethod.POST and token in referenced_bulk_ids(operation):
            diagnostics.append(_make(
                "BULK004",
                DiagnosticSeverity.ERROR,
                f"Operation references its own bulk id {token!r}",
                index,
                rule="self_references",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# BULK005 — empty request
# ---------------------------------------------------------------------------

def rule_empty_request(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK005: A request without operations does nothing."""
    if len(request) == 0:
        return [_make(
            "BULK005",
            DiagnosticSeverity.WARNING,
            "Bulk request contains no operations",
            None,
            rule="empty_request",
        )]
    return []


# ---------------------------------------------------------------------------
# BULK006 — POST without bulk id
# ---------------------------------------------------------------------------

def rule_post_without_bulk_id(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK006: RFC 7644 requires a bulk id on every POST."""
    diagnostics: list[Diagnostic] = []
    for index, operation in enumerate(request):
        if operation.method is BulkMethod.POST and operation.bulk_id is None:
            diagnostics.append(_make(
                "BULK006",
                DiagnosticSeverity.WARNING,
                f"POST {operation.path} has no bulk id",
                index,
                suggestion="Call with_bulk_id() so the response can be correlated",
                rule="post_without_bulk_id",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# BULK007 / BULK009 — service limits
# ---------------------------------------------------------------------------

def rule_max_operations(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK007: The request must not exceed ``limits.max_operations``."""
    if limits.max_operations is not None and len(request) > limits.max_operations:
        return [_make(
            "BULK007",
            DiagnosticSeverity.ERROR,
            f"Request has {len(request)} operations; the service accepts at most "
            f"{limits.max_operations}",
            None,
            suggestion="Split the work across several bulk requests",
            rule="max_operations",
        )]
    return []


def rule_max_payload_size(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK009: The serialized request must not exceed ``limits.max_payload_size`` bytes."""
    if limits.max_payload_size is None:
        return []
    from scimbulk.bulk.serializer import BulkSerializer

    size = len(BulkSerializer().to_json(request, indent=None).encode("utf-8"))
    if size > limits.max_payload_size:
        return [_make(
            "BULK009",
            DiagnosticSeverity.ERROR,
            f"Serialized request is {size} bytes; the service accepts at most "
            f"{limits.max_payload_size}",
            None,
            suggestion="Split the work across several bulk requests",
            rule="max_payload_size",
        )]
    return []


# ---------------------------------------------------------------------------
# BULK008 — failure count sanity
# ---------------------------------------------------------------------------

def rule_failure_count(request: BulkRequest, limits: BulkLimits) -> list[Diagnostic]:
    """BULK008: A failure count above the operation count never triggers."""
    count = request.failure_count
    if count is not None and len(request) > 0 and count > len(request):
        return [_make(
            "BULK008",
            DiagnosticSeverity.HINT,
            f"failureCount {count} exceeds the {len(request)} operation(s) in the request",
            None,
            suggestion="Omit failureCount to mean 'no limit'",
            rule="failure_count",
        )]
    return []


DEFAULT_RULES: list[Rule] = [
    rule_duplicate_bulk_ids,
    rule_undefined_references,
    rule_forward_references,
    rule_self_references,
    rule_empty_request,
    rule_post_without_bulk_id,
    rule_max_operations,
    rule_failure_count,
    rule_max_payload_size,
]


class BulkValidator:
    """Structural validator for bulk requests.

    Parameters
    ----------
    rules:
        The rules to run.  Defaults to ``DEFAULT_RULES``.
    strict:
        When ``True``, WARNING diagnostics are promoted to ERROR.
    limits:
        Service limits checked by BULK007 and BULK009.
    """

    def __init__(
        self,
        rules: list[Rule] | None = None,
        strict: bool = False,
        limits: BulkLimits | None = None,
    ) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._strict = strict
        self._limits = limits if limits is not None else BulkLimits()

    def validate(self, request: BulkRequest) -> list[Diagnostic]:
        """Run every rule against ``request``.

        Returns
        -------
        list[Diagnostic]
            Request-level findings first, then findings ordered by
            operation index.
        """
        all_diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            try:
                all_diagnostics.extend(rule(request, self._limits))
            except Exception as exc:  # noqa: BLE001
                all_diagnostics.append(_make(
                    "BULK999",
                    DiagnosticSeverity.ERROR,
                    f"Internal validator error in rule {rule.__name__!r}: {exc}",
                    None,
                    suggestion="Please report this as a bug",
                    rule=rule.__name__,
                ))

        if self._strict:
            all_diagnostics = [
                d.with_severity(DiagnosticSeverity.ERROR)
                if d.severity == DiagnosticSeverity.WARNING
                else d
                for d in all_diagnostics
            ]

        all_diagnostics.sort(key=lambda d: -1 if d.index is None else d.index)
        return all_diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        return len(self._rules)


def validate(
    request: BulkRequest, strict: bool = False, limits: BulkLimits | None = None
) -> list[Diagnostic]:
    """Validate ``request`` with the default rules."""
    return BulkValidator(strict=strict, limits=limits).validate(request)
