"""Check that "Next"/"Previous" links form a single chain in sequence order."""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Iterable, Sequence

from mdcourse.config import MDCOURSE_ENCODING
from mdcourse.loader import load_corpus
from mdcourse.schemas import (
    Document,
    Inconsistency,
    InconsistencyKind,
    ParseFailure,
    ValidationReport,
)
from mdcourse.utils.logging_config import get_logger

logger = get_logger(__name__)


def validate_documents(
    documents: Sequence[Document],
    failures: Iterable[ParseFailure] = (),
) -> ValidationReport:
    """Validate the navigation chain of a loaded corpus.

    Findings are accumulated in the returned report; this function never
    raises for an inconsistent corpus.

    Args:
        documents: Parsed documents, in any order.
        failures: Files the loader could not parse; each becomes an
            ``unparseable`` finding.

    Returns:
        The report, including the filenames visited by the chain walk.
    """
    report = ValidationReport()
    for failure in failures:
        _add(report, InconsistencyKind.UNPARSEABLE, failure.reason, [failure.filename])

    ordered = sorted(documents, key=lambda document: (document.sequence, document.filename))
    if not ordered:
        return report

    by_sequence: dict[int, list[Document]] = defaultdict(list)
    for document in ordered:
        by_sequence[document.sequence].append(document)
    by_filename = {document.filename: document for document in ordered}

    sequences = sorted(by_sequence)
    successor = dict(zip(sequences, sequences[1:]))
    predecessor = dict(zip(sequences[1:], sequences))

    for sequence in sequences:
        shared = by_sequence[sequence]
        if len(shared) > 1:
            names = [document.filename for document in shared]
            _add(
                report,
                InconsistencyKind.DUPLICATE_SEQUENCE,
                f"sequence {sequence} is shared by {', '.join(names)}",
                names,
                sequence=sequence,
            )

    for current, following in successor.items():
        if following - current > 1:
            missing = (
                str(current + 1)
                if following - current == 2
                else f"{current + 1}-{following - 1}"
            )
            _add(
                report,
                InconsistencyKind.SEQUENCE_GAP,
                f"sequence jumps from {current} to {following} (missing {missing})",
                [by_sequence[current][0].filename, by_sequence[following][0].filename],
                sequence=current + 1,
            )

    chain, revisited = _walk(ordered[0], by_filename)
    report.chain = [document.filename for document in chain]

    for document in ordered:
        _check_link(report, document, "next", by_filename, successor.get(document.sequence))
        _check_link(report, document, "previous", by_filename, predecessor.get(document.sequence))

    if revisited is not None:
        last = chain[-1]
        _add(
            report,
            InconsistencyKind.CYCLE,
            f"{last.filename}: Next link to {revisited.filename} revisits an earlier document",
            [last.filename, revisited.filename],
            sequence=last.sequence,
        )

    visited = set(report.chain)
    start = ordered[0].filename
    for document in ordered:
        if document.filename not in visited:
            _add(
                report,
                InconsistencyKind.UNREACHABLE,
                f"{document.filename}: not reachable by following Next links from {start}",
                [document.filename],
                sequence=document.sequence,
            )

    logger.info(
        "Validated corpus",
        extra={
            "documents": len(ordered),
            "chain_length": len(chain),
            "inconsistencies": len(report.inconsistencies),
        },
    )
    return report


def walk_chain(documents: Sequence[Document]) -> list[Document]:
    """Follow "Next" links from the lowest-numbered document.

    The walk stops at a document without a resolvable Next link or before
    revisiting a document. For a well-formed corpus of N documents the
    result holds all N documents (N-1 hops).
    """
    if not documents:
        return []
    ordered = sorted(documents, key=lambda document: (document.sequence, document.filename))
    chain, _ = _walk(ordered[0], {document.filename: document for document in ordered})
    return chain


def validate_directory(
    directory: Path,
    *,
    encoding: str = MDCOURSE_ENCODING,
    exclude: Iterable[str] = (),
) -> ValidationReport:
    """Load a corpus from disk and validate it.

    Raises:
        CorpusIOError: If the directory cannot be read.
    """
    result = load_corpus(directory, encoding=encoding, exclude=exclude)
    return validate_documents(result.documents, result.failures)


def _walk(
    start: Document, by_filename: dict[str, Document]
) -> tuple[list[Document], Document | None]:
    chain: list[Document] = []
    seen: set[str] = set()
    current: Document | None = start
    while current is not None:
        chain.append(current)
        seen.add(current.filename)
        target = current.next_target
        if target is None:
            break
        following = by_filename.get(target)
        if following is None:
            break
        if following.filename in seen:
            return chain, following
        current = following
    return chain, None


def _check_link(
    report: ValidationReport,
    document: Document,
    direction: str,
    by_filename: dict[str, Document],
    expected: int | None,
) -> None:
    """Compare one navigation link against the neighbouring sequence number.

    ``expected`` is None when ``document`` sits at the end of the corpus in
    ``direction``, where no link should exist.
    """
    if direction == "next":
        label, boundary, target = "Next", "last", document.next_target
    else:
        label, boundary, target = "Previous", "first", document.previous_target

    if target is None:
        if direction == "next" and expected is not None:
            _add(
                report,
                InconsistencyKind.MISSING_NEXT,
                f"{document.filename}: no Next link, expected one to sequence {expected}",
                [document.filename],
                sequence=document.sequence,
            )
        return

    resolved = by_filename.get(target)
    if resolved is None:
        _add(
            report,
            InconsistencyKind.DANGLING_LINK,
            f"{document.filename}: {label} link points to missing file {target}",
            [document.filename],
            sequence=document.sequence,
        )
        return

    if expected is None:
        _add(
            report,
            InconsistencyKind.ORDER_MISMATCH,
            f"{document.filename}: {boundary} document has a {label} link to {resolved.filename}",
            [document.filename, resolved.filename],
            sequence=document.sequence,
        )
    elif resolved.sequence != expected:
        _add(
            report,
            InconsistencyKind.ORDER_MISMATCH,
            f"{document.filename}: {label} link points to {resolved.filename} "
            f"(sequence {resolved.sequence}), expected sequence {expected}",
            [document.filename, resolved.filename],
            sequence=document.sequence,
        )


def _add(
    report: ValidationReport,
    kind: InconsistencyKind,
    message: str,
    filenames: list[str],
    *,
    sequence: int | None = None,
) -> None:
    report.inconsistencies.append(
        Inconsistency(kind=kind, message=message, filenames=filenames, sequence=sequence)
    )
