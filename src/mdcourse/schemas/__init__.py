"""Shared schemas for mdcourse."""

from mdcourse.schemas.document import (
    Document,
    LoadResult,
    NavigationLink,
    ParseFailure,
    SectionHeading,
)
from mdcourse.schemas.index import CourseIndex, Level, LevelConfig, LevelRange
from mdcourse.schemas.report import Inconsistency, InconsistencyKind, ValidationReport

__all__ = [
    "CourseIndex",
    "Document",
    "Inconsistency",
    "InconsistencyKind",
    "Level",
    "LevelConfig",
    "LevelRange",
    "LoadResult",
    "NavigationLink",
    "ParseFailure",
    "SectionHeading",
    "ValidationReport",
]
