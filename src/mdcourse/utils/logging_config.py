"""Logging setup shared by the library and the CLI."""

from __future__ import annotations

import logging
import sys

# Attributes present on every LogRecord; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

_HANDLER_NAME = "mdcourse-stderr"


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not extras:
            return base
        rendered = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{base} [{rendered}]"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the ``mdcourse`` namespace."""
    return logging.getLogger(name)


def configure_logging(level: str | int = "WARNING") -> None:
    """Install a single stderr handler on the ``mdcourse`` logger.

    Calling this again replaces the handler, picking up the current
    ``sys.stderr``.
    """
    logger = logging.getLogger("mdcourse")
    logger.setLevel(level)
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(ExtraFieldsFormatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
