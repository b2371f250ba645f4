"""Tests for the document loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdcourse.exceptions import CorpusIOError, ParseError
from mdcourse.loader import (
    extract_navigation,
    load_corpus,
    load_document,
    normalize_target,
    parse_document,
    parse_filename,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("01-Java-Basics-Fundamentals.md", (1, "Java-Basics-Fundamentals")),
        ("12-Design-Patterns.MD", (12, "Design-Patterns")),
        ("100-Appendix.md", (100, "Appendix")),
        ("README.md", None),
        ("01-Notes.txt", None),
        ("Java-01.md", None),
    ],
)
def test_parse_filename(name: str, expected: tuple[int, str] | None) -> None:
    assert parse_filename(name) == expected


class TestParseDocument:
    """Tests for parse_document."""

    def test_extracts_title_sections_and_links(self) -> None:
        """Reads title, section headings, and both navigation links."""
        text = (
            "# Java Basics\n\n"
            "## Variables\n\ntext\n\n"
            "### Primitive Types\n\n"
            "**Previous:** [Intro](00-Intro.md) | **Next:** [OOP](02-OOP.md)\n"
        )
        document = parse_document(text, filename="01-Java-Basics.md")

        assert document.sequence == 1
        assert document.slug == "Java-Basics"
        assert document.title == "Java Basics"
        assert [(s.title, s.level) for s in document.sections] == [
            ("Variables", 2),
            ("Primitive Types", 3),
        ]
        assert document.next_target == "02-OOP.md"
        assert document.previous_target == "00-Intro.md"
        assert document.next_link is not None
        assert document.next_link.line == 9

    def test_title_strips_inline_markup(self) -> None:
        """Removes emphasis, links, code spans, and inline HTML."""
        text = "# **01.** [Java](x.md) `Basics` <span>Intro</span>\n"
        document = parse_document(text, filename="01-Java.md")
        assert document.title == "01. Java Basics Intro"

    def test_title_keeps_generic_type_parameters_in_code(self) -> None:
        """Keeps <T> inside code spans."""
        document = parse_document("# Generics: `List<T>`\n", filename="09-Generics.md")
        assert document.title == "Generics: List<T>"

    def test_setext_title(self) -> None:
        """Accepts an underlined title."""
        document = parse_document("Streams API\n===========\n\nBody\n", filename="14-Streams.md")
        assert document.title == "Streams API"

    def test_front_matter_title_wins(self) -> None:
        """Front matter title takes precedence over the first heading."""
        text = "---\ntitle: Concurrency in Depth\n---\n# Threads\n\nNext: 21-Executors.md\n"
        document = parse_document(text, filename="20-Concurrency.md")

        assert document.title == "Concurrency in Depth"
        assert [s.title for s in document.sections] == ["Threads"]
        assert document.next_link is not None
        assert document.next_link.line == 6

    def test_front_matter_with_crlf_line_endings(self) -> None:
        """Detects front matter in files with CRLF line endings."""
        text = "---\r\ntitle: Collections Framework\r\n---\r\n# Lists\r\n\r\nNext: 10-Maps.md\r\n"
        document = parse_document(text, filename="09-Collections.md")

        assert document.title == "Collections Framework"
        assert [s.title for s in document.sections] == ["Lists"]
        assert document.next_link is not None
        assert document.next_link.line == 6

    def test_headings_inside_code_fences_are_ignored(self) -> None:
        """Lines in fenced code never become headings."""
        text = "```bash\n# not a title\n```\n\n# Real Title\n"
        document = parse_document(text, filename="03-Shell.md")
        assert document.title == "Real Title"
        assert document.sections == []

    def test_missing_title_raises(self) -> None:
        """Raises ParseError when no heading exists."""
        with pytest.raises(ParseError, match="no title"):
            parse_document("Just prose, no heading.\n", filename="05-Untitled.md")

    def test_empty_heading_is_not_a_title(self) -> None:
        """Headings that clean to nothing are skipped."""
        with pytest.raises(ParseError):
            parse_document("#\n\n# <br>\n", filename="05-Empty.md")

    def test_zero_sequence_rejected(self) -> None:
        """Rejects a 00 prefix."""
        with pytest.raises(ParseError, match="positive"):
            parse_document("# Intro\n", filename="00-Intro.md")

    def test_unnumbered_filename_rejected(self) -> None:
        """Rejects names without a numeric prefix."""
        with pytest.raises(ParseError):
            parse_document("# Readme\n", filename="README.md")


class TestExtractNavigation:
    """Tests for extract_navigation."""

    def test_bare_filenames(self) -> None:
        """Reads plain "Next: NN-Slug.md" references."""
        next_link, previous_link = extract_navigation("Previous: 01-A.md\nNext: 03-C.md\n")
        assert next_link is not None and next_link.target == "03-C.md"
        assert previous_link is not None and previous_link.target == "01-A.md"

    def test_both_directions_on_one_line_without_separator(self) -> None:
        """Splits Previous and Next sharing one line."""
        next_link, previous_link = extract_navigation(
            "⬅️ Previous: [A](./01-A.md)   Next ➡️ [C](./03-C.md#top)\n"
        )
        assert previous_link is not None and previous_link.target == "01-A.md"
        assert next_link is not None and next_link.target == "03-C.md"

    def test_last_reference_wins(self) -> None:
        """A later Next line replaces an earlier one."""
        text = "Next: 02-Draft.md\n\nsome text\n\n**Next:** [B](02-B.md)\n"
        next_link, _ = extract_navigation(text)
        assert next_link is not None
        assert next_link.target == "02-B.md"
        assert next_link.line == 5

    def test_ignores_lines_without_keyword_or_markdown_target(self) -> None:
        """Prose mentions and external URLs are not links."""
        text = "See [Streams](14-Streams.md).\nNext we discuss lambdas.\n[Next](https://example.com/next)\n"
        assert extract_navigation(text) == (None, None)

    def test_ignores_fenced_code(self) -> None:
        """Navigation inside code fences is ignored."""
        text = "```\nNext: 02-B.md\n```\n"
        assert extract_navigation(text) == (None, None)

    def test_keyword_inside_next_link_text_and_filename(self) -> None:
        """"Next" inside link text or a filename keeps the Next link."""
        next_link, previous_link = extract_navigation(
            "Previous: [Intro](01-Intro.md) | Next: [What's Next in Java](03-Whats-Next.md)\n"
        )
        assert previous_link is not None and previous_link.target == "01-Intro.md"
        assert next_link is not None and next_link.target == "03-Whats-Next.md"

    def test_outer_keyword_beats_keyword_in_link_text(self) -> None:
        """The keyword before a link decides its direction."""
        next_link, previous_link = extract_navigation("Next: [Previous Topics Review](10-Review.md)\n")
        assert previous_link is None
        assert next_link is not None and next_link.target == "10-Review.md"

    def test_keyword_inside_bare_filename_is_not_a_keyword(self) -> None:
        """Keywords inside bare filenames are ignored."""
        next_link, previous_link = extract_navigation("Previous: 04-Next-Steps.md  Next: 06-Prev-Work.md\n")
        assert previous_link is not None and previous_link.target == "04-Next-Steps.md"
        assert next_link is not None and next_link.target == "06-Prev-Work.md"

    def test_keyword_only_in_link_text(self) -> None:
        """Falls back to the keyword in the link's own text."""
        next_link, previous_link = extract_navigation(
            "[Previous: Next-Gen Collections](07-Collections.md) | [Next: Streams](09-Streams.md)\n"
        )
        assert previous_link is not None and previous_link.target == "07-Collections.md"
        assert next_link is not None and next_link.target == "09-Streams.md"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("02-B.md", "02-B.md"),
        ("./notes/02-B.md#summary", "02-B.md"),
        ("02-Java%20Basics.md", "02-Java Basics.md"),
        ("https://example.com/02-B.md", None),
        ("02-B.html", None),
    ],
)
def test_normalize_target(raw: str, expected: str | None) -> None:
    assert normalize_target(raw) == expected


class TestLoadCorpus:
    """Tests for load_corpus and load_document."""

    def test_loads_sorted_documents_and_skips_unnumbered(self, write_corpus) -> None:
        """Sorts by sequence and skips files like README.md."""
        source = write_corpus(
            {
                "02-B.md": "# B\n",
                "01-A.md": "# A\n",
                "README.md": "# Index\n",
            }
        )
        result = load_corpus(source)

        assert [d.filename for d in result.documents] == ["01-A.md", "02-B.md"]
        assert result.failures == []
        assert result.documents[0].path == source / "01-A.md"

    def test_parse_failures_do_not_abort(self, write_corpus) -> None:
        """Untitled files become failures; the rest still load."""
        source = write_corpus({"01-A.md": "# A\n", "02-B.md": "no title here\n"})
        result = load_corpus(source)

        assert [d.filename for d in result.documents] == ["01-A.md"]
        assert [f.filename for f in result.failures] == ["02-B.md"]
        assert "no title" in result.failures[0].reason

    def test_duplicate_sequences_are_both_kept(self, write_corpus) -> None:
        """Two files with the same number are both loaded."""
        source = write_corpus(
            {
                "12-Design-Patterns.md": "# Design Patterns\n",
                "12-Design-Patterns-Creational.md": "# Creational Patterns\n",
            }
        )
        result = load_corpus(source)
        assert [d.sequence for d in result.documents] == [12, 12]
        assert len({d.filename for d in result.documents}) == 2

    def test_exclude_skips_named_files(self, write_corpus) -> None:
        """Excluded names are never loaded."""
        source = write_corpus({"01-A.md": "# A\n", "99-Index.md": "# Index\n"})
        result = load_corpus(source, exclude=["99-Index.md"])
        assert [d.filename for d in result.documents] == ["01-A.md"]

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        """Raises CorpusIOError for a missing directory."""
        with pytest.raises(CorpusIOError, match="not found"):
            load_corpus(tmp_path / "absent")

    def test_unreadable_file_does_not_abort(self, write_corpus, monkeypatch: pytest.MonkeyPatch) -> None:
        """A file that cannot be read becomes a failure."""
        source = write_corpus({"01-A.md": "# A\n", "02-B.md": "# B\n"})
        original_read_text = Path.read_text

        def _read_text(self: Path, *args, **kwargs) -> str:
            if self.name == "02-B.md":
                raise PermissionError(13, "Permission denied")
            return original_read_text(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", _read_text)
        result = load_corpus(source)

        assert [d.filename for d in result.documents] == ["01-A.md"]
        assert [f.filename for f in result.failures] == ["02-B.md"]
        assert "Permission denied" in result.failures[0].reason

    def test_undecodable_file_is_a_parse_error(self, tmp_path: Path) -> None:
        """Invalid UTF-8 raises ParseError."""
        path = tmp_path / "01-Binary.md"
        path.write_bytes(b"# Title \xff\xfe\n")
        with pytest.raises(ParseError, match="not valid"):
            load_document(path)
