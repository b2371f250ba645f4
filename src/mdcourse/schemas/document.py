"""Document models for a numbered Markdown corpus."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class SectionHeading(BaseModel):
    """A heading found in a document body."""

    title: str
    level: int = Field(..., ge=1, le=6)


class NavigationLink(BaseModel):
    """A "Next"/"Previous" reference to another document in the corpus.

    Attributes:
        direction: Which way the link points in the course order.
        target: Referenced file name, reduced to a bare basename.
        line: 1-based line number the link was found on.
    """

    direction: Literal["next", "previous"]
    target: str
    line: int = Field(..., ge=1)


class Document(BaseModel):
    """A single numbered Markdown file in the corpus.

    Attributes:
        sequence: Position in the course taken from the filename prefix.
        slug: Filename remainder after the sequence prefix, without extension.
        filename: Basename of the file (e.g. ``01-Java-Basics-Fundamentals.md``).
        path: Location the document was loaded from.
        title: First heading (or front-matter title), stripped of markup.
        sections: Headings following the title, in document order.
        next_link: Trailing "Next" reference, if any.
        previous_link: Trailing "Previous" reference, if any.
    """

    sequence: int = Field(..., ge=1)
    slug: str
    filename: str
    path: Path
    title: str = Field(..., min_length=1)
    sections: list[SectionHeading] = Field(default_factory=list)
    next_link: NavigationLink | None = None
    previous_link: NavigationLink | None = None

    @property
    def next_target(self) -> str | None:
        return self.next_link.target if self.next_link else None

    @property
    def previous_target(self) -> str | None:
        return self.previous_link.target if self.previous_link else None


class ParseFailure(BaseModel):
    """A corpus file that could not be turned into a Document."""

    filename: str
    path: Path
    reason: str


class LoadResult(BaseModel):
    """Documents loaded from a directory plus the files that failed to parse."""

    documents: list[Document] = Field(default_factory=list)
    failures: list[ParseFailure] = Field(default_factory=list)
