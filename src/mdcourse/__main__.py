"""Module entry point for running with python -m mdcourse."""

from mdcourse.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
