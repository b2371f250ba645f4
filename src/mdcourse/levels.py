"""Level grouping configuration."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from mdcourse.config import DEFAULT_LEVEL_NAME, MDCOURSE_ENCODING
from mdcourse.exceptions import ConfigError
from mdcourse.schemas import Document, LevelConfig, LevelRange

_RANGE_TEXT_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")


def load_level_config(path: Path, *, encoding: str = MDCOURSE_ENCODING) -> LevelConfig:
    """Read a YAML level grouping file.

    The file holds a ``levels`` list; each entry names a level and gives its
    inclusive range as ``range: [1, 10]``, ``range: "1-10"`` or
    ``start``/``end`` keys::

        levels:
          - name: Fundamentals
            range: [1, 8]
          - name: Collections and Generics
            start: 9
            end: 14

    Raises:
        ConfigError: If the file is unreadable, malformed, or its ranges overlap.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding=encoding))
    except OSError as exc:
        raise ConfigError(f"Cannot read level config {path}: {exc.strerror or exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in level config {path}: {exc}") from exc
    return parse_level_config(raw, source=str(path))


def parse_level_config(raw: Any, *, source: str = "<config>") -> LevelConfig:
    """Validate already-decoded level configuration data."""
    if not isinstance(raw, dict) or not isinstance(raw.get("levels"), list):
        raise ConfigError(f"{source}: expected a mapping with a 'levels' list")

    entries = [_normalize_entry(entry, index=index, source=source) for index, entry in enumerate(raw["levels"])]
    try:
        return LevelConfig(levels=entries)
    except ValidationError as exc:
        raise ConfigError(f"{source}: {_first_error(exc)}") from exc


def default_level_config(documents: Sequence[Document], *, name: str = DEFAULT_LEVEL_NAME) -> LevelConfig:
    """A single level spanning every loaded document."""
    sequences = [document.sequence for document in documents] or [1]
    return LevelConfig(levels=[LevelRange(name=name, start=min(sequences), end=max(sequences))])


def _normalize_entry(entry: Any, *, index: int, source: str) -> dict[str, Any]:
    if not isinstance(entry, dict) or "name" not in entry:
        raise ConfigError(f"{source}: level #{index + 1} must be a mapping with a 'name'")

    bounds = entry.get("range")
    if bounds is None:
        start, end = entry.get("start"), entry.get("end")
    elif isinstance(bounds, str):
        match = _RANGE_TEXT_RE.match(bounds)
        if not match:
            raise ConfigError(f"{source}: level {entry['name']!r} has malformed range {bounds!r}")
        start, end = int(match.group(1)), int(match.group(2))
    elif isinstance(bounds, list) and len(bounds) == 2:
        start, end = bounds
    else:
        raise ConfigError(f"{source}: level {entry['name']!r} range must be [start, end] or 'start-end'")

    if start is None or end is None:
        raise ConfigError(f"{source}: level {entry['name']!r} is missing start or end")
    return {"name": str(entry["name"]), "start": start, "end": end}


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", str(exc))
    return f"{location}: {message}" if location else message
