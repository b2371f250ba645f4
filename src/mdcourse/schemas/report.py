"""Validation report models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class InconsistencyKind(str, Enum):
    """Categories of problems found in the navigation chain."""

    DUPLICATE_SEQUENCE = "duplicate-sequence"
    DANGLING_LINK = "dangling-link"
    ORDER_MISMATCH = "order-mismatch"
    MISSING_NEXT = "missing-next"
    CYCLE = "cycle"
    UNREACHABLE = "unreachable"
    SEQUENCE_GAP = "sequence-gap"
    UNPARSEABLE = "unparseable"


class Inconsistency(BaseModel):
    """A single validator finding."""

    kind: InconsistencyKind
    message: str
    filenames: list[str] = Field(default_factory=list)
    sequence: int | None = None

    def as_line(self) -> str:
        return f"{self.kind.value}: {self.message}"


class ValidationReport(BaseModel):
    """Result of validating a corpus.

    Attributes:
        inconsistencies: Findings in the order they were detected.
        chain: Filenames visited while following "Next" links from the first
            document.
    """

    inconsistencies: list[Inconsistency] = Field(default_factory=list)
    chain: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.inconsistencies

    def lines(self) -> list[str]:
        """One warning line per inconsistency; empty when the corpus is clean."""
        return [item.as_line() for item in self.inconsistencies]

    def of_kind(self, kind: InconsistencyKind) -> list[Inconsistency]:
        return [item for item in self.inconsistencies if item.kind == kind]
