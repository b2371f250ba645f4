"""Inspect heading and navigation patterns in a Markdown corpus to aid authoring."""

from __future__ import annotations

import argparse
import re
from collections import Counter
from pathlib import Path

from mdcourse.config import MDCOURSE_ENCODING
from mdcourse.loader import load_corpus
from mdcourse.markdown_utils import iter_unfenced_lines
from mdcourse.schemas import LoadResult

_NAV_LINE_RE = re.compile(r"\b(next|prev(?:ious)?)\b", re.IGNORECASE)
_TARGET_RE = re.compile(r"\(?[^\s()]+\.md\)?", re.IGNORECASE)


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect corpus headings and navigation lines.")
    parser.add_argument("--source-dir", required=True, type=Path, help="Directory of <NN>-<Slug>.md files")
    parser.add_argument("--top", type=int, default=10, help="How many navigation line shapes to show")
    args = parser.parse_args()

    loaded = load_corpus(args.source_dir)
    levels, shapes, sequences = collect_stats(loaded)

    print(f"Documents: {len(loaded.documents)}")
    print(f"Unparseable: {len(loaded.failures)}")
    for failure in loaded.failures:
        print(f"  {failure.reason}")

    print("\nSection heading levels (titles excluded):")
    for level, count in sorted(levels.items()):
        print(f"h{level}: {count}")

    print("\nShared sequence numbers:")
    shared = {sequence: count for sequence, count in sequences.items() if count > 1}
    if not shared:
        print("(none)")
    for sequence, count in sorted(shared.items()):
        print(f"{sequence:02d}: {count} files")

    print("\nNavigation line shapes:")
    for shape, count in shapes.most_common(args.top):
        print(f"{count:4d}  {shape}")


def collect_stats(loaded: LoadResult) -> tuple[Counter, Counter, Counter]:
    levels: Counter = Counter()
    shapes: Counter = Counter()
    sequences: Counter = Counter()

    for document in loaded.documents:
        sequences[document.sequence] += 1
        for section in document.sections:
            levels[section.level] += 1
        text = document.path.read_text(encoding=MDCOURSE_ENCODING)
        for _, line in iter_unfenced_lines(text):
            if _NAV_LINE_RE.search(line) and _TARGET_RE.search(line):
                shapes[_TARGET_RE.sub("<target>", line.strip())] += 1
    return levels, shapes, sequences


if __name__ == "__main__":
    main()
