"""Course index models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from mdcourse.schemas.document import Document


class LevelRange(BaseModel):
    """A named, inclusive range of sequence numbers."""

    name: str = Field(..., min_length=1)
    start: int = Field(..., ge=1)
    end: int = Field(..., ge=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "LevelRange":
        if self.start > self.end:
            raise ValueError(f"level {self.name!r}: start {self.start} is after end {self.end}")
        return self

    def contains(self, sequence: int) -> bool:
        return self.start <= sequence <= self.end


class LevelConfig(BaseModel):
    """Ordered level grouping used to build the manifest."""

    levels: list[LevelRange] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_overlap(self) -> "LevelConfig":
        ordered = sorted(self.levels, key=lambda level: level.start)
        for previous, current in zip(ordered, ordered[1:]):
            if current.start <= previous.end:
                raise ValueError(
                    f"levels {previous.name!r} and {current.name!r} overlap"
                )
        return self

    def level_for(self, sequence: int) -> LevelRange | None:
        for level in self.levels:
            if level.contains(sequence):
                return level
        return None


class Level(BaseModel):
    """A learning stage and the documents that belong to it."""

    name: str
    start: int
    end: int
    documents: list[Document] = Field(default_factory=list)


class CourseIndex(BaseModel):
    """Documents grouped into levels, in course order."""

    levels: list[Level] = Field(default_factory=list)

    def documents(self) -> list[Document]:
        return [document for level in self.levels for document in level.documents]

    def titles(self) -> list[str]:
        return [document.title for document in self.documents()]
