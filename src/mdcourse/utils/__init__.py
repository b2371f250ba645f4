"""Internal helpers for mdcourse."""
