"""Test setup for mdcourse."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def write_corpus(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{filename: text}`` into a fresh notes directory and return it."""

    def _write(files: dict[str, str]) -> Path:
        source = tmp_path / "notes"
        source.mkdir(exist_ok=True)
        for name, text in files.items():
            (source / name).write_text(text, encoding="utf-8")
        return source

    return _write


@pytest.fixture
def linked_files() -> Callable[[int], dict[str, str]]:
    """Build a well-formed corpus of ``count`` documents with Next/Previous lines."""

    def _build(count: int) -> dict[str, str]:
        names = [f"{number:02d}-Topic-{number}.md" for number in range(1, count + 1)]
        files: dict[str, str] = {}
        for index, name in enumerate(names):
            number = index + 1
            nav: list[str] = []
            if index > 0:
                nav.append(f"[Previous: Topic {number - 1}]({names[index - 1]})")
            if index + 1 < count:
                nav.append(f"[Next: Topic {number + 1}]({names[index + 1]})")
            files[name] = (
                f"# Topic {number}\n\n"
                "## Overview\n\n"
                f"Notes for topic {number}.\n\n"
                "```java\n"
                "// # not a heading\n"
                "System.out.println(\"next\");\n"
                "```\n\n"
                "---\n\n"
                + " | ".join(nav)
                + "\n"
            )
        return files

    return _build


@pytest.fixture(autouse=True)
def _reset_mdcourse_logging() -> Iterator[None]:
    """Drop the CLI's stderr handler so it never outlives a captured stream."""
    yield
    logger = logging.getLogger("mdcourse")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
