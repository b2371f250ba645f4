"""Local configuration for mdcourse."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_ENCODING = "utf-8"
DEFAULT_MANIFEST_TITLE = "Course Index"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LEVEL_NAME = "Course"

MDCOURSE_ENCODING = os.getenv("MDCOURSE_ENCODING", DEFAULT_ENCODING)
MDCOURSE_MANIFEST_TITLE = os.getenv("MDCOURSE_MANIFEST_TITLE", DEFAULT_MANIFEST_TITLE)
MDCOURSE_LOG_LEVEL = os.getenv("MDCOURSE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

# Optional default level grouping file, used when --levels is not given.
_levels_file = os.getenv("MDCOURSE_LEVELS_FILE")
MDCOURSE_LEVELS_FILE = Path(_levels_file).expanduser() if _levels_file else None
