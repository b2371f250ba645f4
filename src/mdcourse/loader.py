"""Load numbered Markdown documents and their navigation links."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable
from urllib.parse import unquote, urlsplit

import yaml

from mdcourse.config import MDCOURSE_ENCODING
from mdcourse.exceptions import CorpusIOError, ParseError
from mdcourse.markdown_utils import clean_inline, iter_headings, iter_unfenced_lines
from mdcourse.schemas import (
    Document,
    LoadResult,
    NavigationLink,
    ParseFailure,
    SectionHeading,
)
from mdcourse.utils.logging_config import get_logger

logger = get_logger(__name__)

_FILENAME_RE = re.compile(r"^(\d+)-(.+)\.md$", re.IGNORECASE)
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?\r?\n)---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_NAV_KEYWORD_RE = re.compile(r"\b(next|prev(?:ious)?)\b", re.IGNORECASE)
_LINK_RE = re.compile(r"!?\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")
_BARE_TARGET_RE = re.compile(r"(?<![\w/(])(\d+-[\w.%-]+?\.md)\b", re.IGNORECASE)


def parse_filename(name: str) -> tuple[int, str] | None:
    """Split ``<NN>-<Slug>.md`` into ``(sequence, slug)``.

    Returns None for names that do not follow the pattern.
    """
    match = _FILENAME_RE.match(name)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def parse_document(text: str, *, filename: str, path: Path | None = None) -> Document:
    """Build a Document from Markdown text.

    Raises:
        ParseError: If the filename is not numbered, the sequence is not
            positive, or no title can be found.
    """
    parsed_name = parse_filename(filename)
    if parsed_name is None:
        raise ParseError(f"{filename}: name does not match <NN>-<Slug>.md", filename=filename)
    sequence, slug = parsed_name
    if sequence < 1:
        raise ParseError(f"{filename}: sequence number must be positive", filename=filename)

    front_matter, body = _split_front_matter(text, filename=filename)
    title = _front_matter_title(front_matter)

    sections: list[SectionHeading] = []
    for _, level, raw_title in iter_headings(body):
        heading = clean_inline(raw_title)
        if not heading:
            continue
        if title is None:
            title = heading
            continue
        sections.append(SectionHeading(title=heading, level=level))

    if not title:
        raise ParseError(f"{filename}: no title heading found", filename=filename)

    next_link, previous_link = extract_navigation(body)
    return Document(
        sequence=sequence,
        slug=slug,
        filename=filename,
        path=path or Path(filename),
        title=title,
        sections=sections,
        next_link=next_link,
        previous_link=previous_link,
    )


def extract_navigation(text: str) -> tuple[NavigationLink | None, NavigationLink | None]:
    """Find the trailing "Next" and "Previous" references in a document.

    Markdown links and bare ``NN-Slug.md`` tokens are located first as whole
    units and blanked out, so words inside a link target or filename (such
    as ``03-Whats-Next.md``) are never read as keywords. Each remaining
    ``next``/``previous`` keyword claims the first unit after it, before the
    next keyword. A link no keyword claims falls back to a keyword in its
    own text, as in ``[Next: Streams](14-Streams.md)``. Both
    ``[Previous](01-A.md) | [Next](03-C.md)`` and
    ``Previous: 01-A.md  Next: 03-C.md`` yield two links. The last
    reference found in each direction wins.
    """
    next_link: NavigationLink | None = None
    previous_link: NavigationLink | None = None
    for number, line in iter_unfenced_lines(text):
        for direction, target in _line_navigation(line):
            link = NavigationLink(direction=direction, target=target, line=number)
            if direction == "next":
                next_link = link
            else:
                previous_link = link
    return next_link, previous_link


def normalize_target(raw: str) -> str | None:
    """Reduce a link target to a bare ``.md`` basename, or None if it is not one."""
    parts = urlsplit(raw.strip())
    if parts.scheme in ("http", "https", "mailto"):
        return None
    name = unquote(parts.path).replace("\\", "/").rsplit("/", 1)[-1]
    if not name.lower().endswith(".md"):
        return None
    return name


def load_document(path: Path, *, encoding: str = MDCOURSE_ENCODING) -> Document:
    """Read and parse a single document.

    Raises:
        ParseError: If the file cannot be decoded or has no title.
        CorpusIOError: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding=encoding)
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path.name}: not valid {encoding} text", filename=path.name) from exc
    except OSError as exc:
        raise CorpusIOError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    return parse_document(text, filename=path.name, path=path)


def load_corpus(
    directory: Path,
    *,
    encoding: str = MDCOURSE_ENCODING,
    exclude: Iterable[str] = (),
) -> LoadResult:
    """Load every numbered Markdown file in ``directory``.

    Files without a ``<NN>-`` prefix are skipped. Files that fail to parse
    or cannot be read are collected as failures and do not stop the batch.

    Raises:
        CorpusIOError: If the directory is missing or unreadable.
    """
    if not directory.is_dir():
        raise CorpusIOError(f"Source directory not found: {directory}")
    try:
        entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise CorpusIOError(f"Cannot read source directory {directory}: {exc.strerror or exc}") from exc

    excluded = set(exclude)
    result = LoadResult()
    for entry in entries:
        if entry.name in excluded or not entry.is_file():
            continue
        if parse_filename(entry.name) is None:
            logger.debug("Skipping unnumbered file", extra={"document": entry.name})
            continue
        try:
            document = load_document(entry, encoding=encoding)
        except (ParseError, CorpusIOError) as exc:
            logger.warning("Failed to load document", extra={"document": entry.name, "error": str(exc)})
            result.failures.append(ParseFailure(filename=entry.name, path=entry, reason=str(exc)))
            continue
        result.documents.append(document)

    result.documents.sort(key=lambda document: (document.sequence, document.filename))
    logger.info(
        "Loaded corpus",
        extra={
            "directory": str(directory),
            "documents": len(result.documents),
            "failures": len(result.failures),
        },
    )
    return result


@dataclass
class _TargetUnit:
    """A Markdown link or bare filename found on a navigation line."""

    start: int
    end: int
    target: str
    label: str = ""


def _line_navigation(line: str) -> list[tuple[str, str]]:
    """Return ``(direction, target)`` pairs for one line, in line order."""
    units = _target_units(line)
    if not units:
        return []

    masked = list(line)
    for unit in units:
        masked[unit.start:unit.end] = " " * (unit.end - unit.start)
    keywords = list(_NAV_KEYWORD_RE.finditer("".join(masked)))

    claimed: dict[int, str] = {}
    for index, keyword in enumerate(keywords):
        end = keywords[index + 1].start() if index + 1 < len(keywords) else len(line)
        for position, unit in enumerate(units):
            if position not in claimed and keyword.end() <= unit.start < end:
                claimed[position] = _direction(keyword.group(1))
                break

    found: list[tuple[str, str]] = []
    for position, unit in enumerate(units):
        direction = claimed.get(position)
        if direction is None:
            own = _NAV_KEYWORD_RE.search(unit.label)
            if own is None:
                continue
            direction = _direction(own.group(1))
        found.append((direction, unit.target))
    return found


def _target_units(line: str) -> list[_TargetUnit]:
    units: list[_TargetUnit] = []
    for match in _LINK_RE.finditer(line):
        target = normalize_target(match.group(2))
        if target:
            units.append(_TargetUnit(match.start(), match.end(), target, label=match.group(1)))

    def _covered(offset: int) -> bool:
        return any(unit.start <= offset < unit.end for unit in units)

    for match in _BARE_TARGET_RE.finditer(line):
        if _covered(match.start(1)):
            continue
        target = normalize_target(match.group(1))
        if target:
            units.append(_TargetUnit(match.start(1), match.end(1), target))
    return sorted(units, key=lambda unit: unit.start)


def _direction(keyword: str) -> str:
    return "next" if keyword.lower() == "next" else "previous"


def _split_front_matter(text: str, *, filename: str) -> tuple[dict | None, str]:
    """Separate a leading YAML block, keeping line numbers of the body intact."""
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return None, text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise ParseError(f"{filename}: invalid front matter: {exc}", filename=filename) from exc
    blank = "\n" * match.group(0).count("\n")
    body = blank + text[match.end():]
    return (data if isinstance(data, dict) else None), body


def _front_matter_title(front_matter: dict | None) -> str | None:
    if not front_matter:
        return None
    title = front_matter.get("title")
    if title is None:
        return None
    return clean_inline(str(title)) or None
