"""Command-line entry point: load, validate, and write the manifest."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from mdcourse.config import (
    MDCOURSE_ENCODING,
    MDCOURSE_LEVELS_FILE,
    MDCOURSE_LOG_LEVEL,
    MDCOURSE_MANIFEST_TITLE,
)
from mdcourse.exceptions import ConfigError, CorpusIOError
from mdcourse.index_generator import generate_manifest
from mdcourse.levels import default_level_config, load_level_config
from mdcourse.loader import load_corpus
from mdcourse.schemas import ValidationReport
from mdcourse.utils.logging_config import configure_logging, get_logger
from mdcourse.validator import validate_documents

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INCONSISTENT = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdcourse",
        description="Validate the Next/Previous chain of a numbered Markdown corpus and generate its index.",
    )
    parser.add_argument("--source-dir", required=True, type=Path, help="Directory of <NN>-<Slug>.md files")
    parser.add_argument("--output", type=Path, help="Manifest path (printed to stdout when omitted)")
    parser.add_argument(
        "--levels",
        type=Path,
        default=MDCOURSE_LEVELS_FILE,
        help="YAML level grouping file (defaults to a single level covering every document)",
    )
    parser.add_argument("--title", default=MDCOURSE_MANIFEST_TITLE, help="Manifest heading")
    parser.add_argument("--report", type=Path, help="Write the validation report here instead of stderr")
    parser.add_argument(
        "--report-format",
        choices=("text", "json"),
        default="text",
        help="Validation report format",
    )
    parser.add_argument("--check", action="store_true", help="Validate only; do not generate the manifest")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else MDCOURSE_LOG_LEVEL)

    source_dir: Path = args.source_dir
    output: Path | None = args.output
    exclude = [output.name] if output is not None and _same_dir(output.parent, source_dir) else []

    try:
        loaded = load_corpus(source_dir, encoding=MDCOURSE_ENCODING, exclude=exclude)
    except CorpusIOError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    report = validate_documents(loaded.documents, loaded.failures)
    try:
        _emit_report(report, destination=args.report, fmt=args.report_format)
    except CorpusIOError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    if not args.check:
        try:
            levels = (
                load_level_config(args.levels, encoding=MDCOURSE_ENCODING)
                if args.levels is not None
                else default_level_config(loaded.documents)
            )
            manifest = generate_manifest(
                loaded.documents,
                levels,
                title=args.title,
                link_root=output.parent if output is not None else None,
            )
            _write_text(output, manifest)
        except (ConfigError, CorpusIOError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_FATAL

    if report.ok:
        logger.info("Corpus is consistent", extra={"documents": len(loaded.documents)})
        return EXIT_OK
    return EXIT_INCONSISTENT


def _emit_report(report: ValidationReport, *, destination: Path | None, fmt: str) -> None:
    if fmt == "json":
        text = report.model_dump_json(indent=2) + "\n"
    else:
        text = "".join(f"{line}\n" for line in report.lines())

    if destination is None:
        sys.stderr.write(text)
        return
    _write_text(destination, text)


def _write_text(path: Path | None, text: str) -> None:
    if path is None:
        sys.stdout.write(text)
        return
    try:
        path.write_text(text, encoding=MDCOURSE_ENCODING)
    except OSError as exc:
        raise CorpusIOError(f"Cannot write {path}: {exc.strerror or exc}") from exc


def _same_dir(left: Path, right: Path) -> bool:
    try:
        return left.resolve() == right.resolve()
    except OSError:
        return False


if __name__ == "__main__":
    raise SystemExit(main())
