"""Group documents into levels and render the course manifest."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence
from urllib.parse import quote

from mdcourse.config import MDCOURSE_MANIFEST_TITLE
from mdcourse.exceptions import ConfigError
from mdcourse.schemas import CourseIndex, Document, Level, LevelConfig
from mdcourse.utils.logging_config import get_logger

logger = get_logger(__name__)


def build_course_index(documents: Sequence[Document], levels: LevelConfig) -> CourseIndex:
    """Place every document in the level whose range covers its sequence.

    Levels keep their configured order; documents inside a level are sorted
    by ``(sequence, filename)``.

    Raises:
        ConfigError: If a document's sequence falls outside every level.
    """
    grouped = [
        Level(name=level.name, start=level.start, end=level.end) for level in levels.levels
    ]
    uncovered: list[str] = []
    for document in sorted(documents, key=lambda document: (document.sequence, document.filename)):
        for level_range, level in zip(levels.levels, grouped):
            if level_range.contains(document.sequence):
                level.documents.append(document)
                break
        else:
            uncovered.append(f"{document.filename} (sequence {document.sequence})")

    if uncovered:
        raise ConfigError("No level covers " + ", ".join(uncovered))
    return CourseIndex(levels=grouped)


def render_manifest(
    index: CourseIndex,
    *,
    title: str = MDCOURSE_MANIFEST_TITLE,
    link_root: Path | None = None,
) -> str:
    """Render the index as a Markdown nested list.

    Args:
        index: Grouped documents.
        title: Top-level heading of the manifest.
        link_root: Directory the manifest will be written to. Links are made
            relative to it; when None, bare filenames are used.

    Returns:
        Manifest text ending with a single newline.
    """
    lines = [f"# {title}", ""]
    for level in index.levels:
        if not level.documents:
            logger.debug("Omitting empty level", extra={"level": level.name})
            continue
        lines.append(f"- {level.name}")
        for document in level.documents:
            lines.append(f"  - [{_escape_label(document.title)}]({_link_for(document, link_root)})")
    return "\n".join(lines).rstrip() + "\n"


def generate_manifest(
    documents: Sequence[Document],
    levels: LevelConfig,
    *,
    title: str = MDCOURSE_MANIFEST_TITLE,
    link_root: Path | None = None,
) -> str:
    """Build the course index and render it in one step."""
    index = build_course_index(documents, levels)
    return render_manifest(index, title=title, link_root=link_root)


def _link_for(document: Document, link_root: Path | None) -> str:
    if link_root is None:
        return quote(document.filename)
    relative = os.path.relpath(document.path.resolve(), link_root.resolve())
    return quote(Path(relative).as_posix())


def _escape_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
