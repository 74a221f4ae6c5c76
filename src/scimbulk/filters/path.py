"""Attribute paths referenced by filter nodes.

Only the small subset of the SCIM attribute-path grammar needed to name
an attribute is modelled: an optional schema URN followed by a dotted
attribute / sub-attribute chain, e.g. ``meta.created`` or
``urn:ietf:params:scim:schemas:core:2.0:User:name.familyName``.
"""
from __future__ import annotations

from dataclasses import dataclass

from scimbulk.errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class AttributePath:
    """An attribute reference such as ``name.familyName``.

    Parameters
    ----------
    parts:
        Attribute name followed by any sub-attribute names.
    schema:
        Optional schema URN the attribute belongs to.
    """

    parts: tuple[str, ...]
    schema: str | None = None

    def __post_init__(self) -> None:
        if not self.parts or any(not part for part in self.parts):
            raise InvalidArgumentError(f"Invalid attribute path: {self.parts!r}")

    @classmethod
    def of(cls, text: "str | AttributePath") -> "AttributePath":
        """Build a path from its textual form.

        A leading ``urn:`` prefix is split off at its last colon as the
        schema.
        """
        if isinstance(text, AttributePath):
            return text
        if not isinstance(text, str) or not text:
            raise InvalidArgumentError("An attribute path must be a non-empty string")
        schema: str | None = None
        attribute = text
        if text.lower().startswith("urn:"):
            schema, _, attribute = text.rpartition(":")
        return cls(parts=tuple(attribute.split(".")), schema=schema or None)

    @property
    def attribute(self) -> str:
        """The top-level attribute name."""
        return self.parts[0]

    @property
    def sub_attributes(self) -> tuple[str, ...]:
        return self.parts[1:]

    def __str__(self) -> str:
        dotted = ".".join(self.parts)
        if self.schema:
            return f"{self.schema}:{dotted}"
        return dotted
