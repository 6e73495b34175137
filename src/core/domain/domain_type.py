"""Rule kinds understood by the routing engine.

The values mirror `Domain.Type` of the external GeoSite schema, so the enum
can be passed straight to the encoder. Keeping it in the domain layer lets
the settings, the encoder and the CLI share one definition without circular
imports.
"""

from __future__ import annotations

from enum import Enum


class DomainType(str, Enum):
    """Supported rule kinds for a domain entry."""

    PLAIN = "plain"
    REGEX = "regex"
    ROOT_DOMAIN = "root_domain"
    FULL = "full"

    @classmethod
    def default(cls) -> "DomainType":
        """Rule kind produced by the build pipeline."""

        return cls.FULL

    @classmethod
    def from_wire(cls, value: int) -> "DomainType":
        """Map a schema enum number back to the rule kind."""

        return _BY_NUMBER[value]

    @property
    def wire_value(self) -> int:
        """Enum number used by the binary schema."""

        return _NUMBERS[self]

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return self.value.replace("_", "-")


_NUMBERS: dict[DomainType, int] = {
    DomainType.PLAIN: 0,
    DomainType.REGEX: 1,
    DomainType.ROOT_DOMAIN: 2,
    DomainType.FULL: 3,
}
_BY_NUMBER: dict[int, DomainType] = {number: kind for kind, number in _NUMBERS.items()}
