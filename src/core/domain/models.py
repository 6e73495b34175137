"""Domain models (Pydantic v2 and dataclasses).

- Pydantic models validate values at the boundary (configuration lines,
  fetched lines).
- Dataclasses carry pipeline results, which may hold exception values.

These models describe *what* the data is, not *how* it is obtained.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.errors import FetchFailed, MalformedSource


class Source(BaseModel):
    """One configured `(label, url)` pair describing a remote domain list."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(
        ...,
        min_length=1,
        description="Category code; stored upper-cased.",
    )
    url: str = Field(
        ...,
        min_length=1,
        description="Location of the plain-text list.",
    )
    line_number: int | None = Field(
        default=None,
        ge=1,
        description="1-based line in the source list file (diagnostics only).",
    )

    @field_validator("label")
    @classmethod
    def _upper_label(cls, value: str) -> str:
        return value.upper()


class DomainWarning(BaseModel):
    """A fetched line that failed domain validation and was dropped."""

    model_config = ConfigDict(frozen=True)

    line_number: int = Field(..., ge=1, description="1-based line number in the list.")
    text: str = Field(..., description="Original (trimmed) text of the line.")
    url: str = Field(..., description="List the line came from.")


@dataclass
class FetchResult:
    """Return value of a single list download."""

    domains: list[str] = field(default_factory=list)
    warnings: list[DomainWarning] = field(default_factory=list)
    error: FetchFailed | None = None


@dataclass
class FetchOutcome:
    """Per-source result produced by one concurrent fetch."""

    label: str
    url: str
    domains: list[str] = field(default_factory=list)
    warnings: list[DomainWarning] = field(default_factory=list)
    error: FetchFailed | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SourceLoadResult:
    """Parsed source list: the valid sources plus the rejected lines."""

    sources: list[Source] = field(default_factory=list)
    errors: list[MalformedSource] = field(default_factory=list)


@dataclass
class OrchestrationResult:
    """Every outcome of a fetch batch plus the batch error list."""

    outcomes: list[FetchOutcome] = field(default_factory=list)
    errors: list[FetchFailed] = field(default_factory=list)


@dataclass(frozen=True)
class AggregatedDatabase:
    """Label -> ordered validated domains, built once after the barrier."""

    groups: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {label: tuple(domains) for label, domains in self.groups.items()}
        object.__setattr__(self, "groups", MappingProxyType(frozen))

    def labels(self) -> list[str]:
        """Labels in serialization order (lexicographic)."""

        return sorted(self.groups)

    @property
    def domain_count(self) -> int:
        return sum(len(domains) for domains in self.groups.values())


@dataclass
class BuildReport:
    """Summary of a successful build."""

    output_path: Path
    groups: dict[str, int] = field(default_factory=dict)
    domain_count: int = 0
    warnings: list[DomainWarning] = field(default_factory=list)
