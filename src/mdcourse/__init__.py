"""mdcourse: validate and index a numbered Markdown course corpus."""

from mdcourse.exceptions import ConfigError, CorpusIOError, MdcourseError, ParseError
from mdcourse.index_generator import build_course_index, generate_manifest, render_manifest
from mdcourse.levels import default_level_config, load_level_config
from mdcourse.loader import load_corpus, load_document, parse_document
from mdcourse.schemas import (
    CourseIndex,
    Document,
    Inconsistency,
    InconsistencyKind,
    LevelConfig,
    LevelRange,
    LoadResult,
    NavigationLink,
    ValidationReport,
)
from mdcourse.validator import validate_directory, validate_documents, walk_chain

__all__ = [
    "ConfigError",
    "CorpusIOError",
    "CourseIndex",
    "Document",
    "Inconsistency",
    "InconsistencyKind",
    "LevelConfig",
    "LevelRange",
    "LoadResult",
    "MdcourseError",
    "NavigationLink",
    "ParseError",
    "ValidationReport",
    "build_course_index",
    "default_level_config",
    "generate_manifest",
    "load_corpus",
    "load_document",
    "load_level_config",
    "parse_document",
    "render_manifest",
    "validate_directory",
    "validate_documents",
    "walk_chain",
]
