"""Custom exceptions for mdcourse."""


class MdcourseError(Exception):
    """Base exception for mdcourse operations."""


class ParseError(MdcourseError):
    """A document could not be parsed (no title, bad sequence, bad encoding)."""

    def __init__(self, message: str, *, filename: str | None = None) -> None:
        super().__init__(message)
        self.filename = filename


class ConfigError(MdcourseError):
    """Level configuration is invalid or does not cover a document."""


class CorpusIOError(MdcourseError):
    """Source directory unreadable or output path unwritable."""
