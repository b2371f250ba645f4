"""Shared Markdown helpers for reading corpus documents."""

from __future__ import annotations

import re
from typing import Iterator

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for stripping inline HTML (pip install beautifulsoup4)."
    ) from exc

_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_ATX_RE = re.compile(r"^\s{0,3}(#{1,6})(?:\s+(.*?))?\s*$")
_CLOSING_HASHES_RE = re.compile(r"\s+#+\s*$")
_SETEXT_RE = re.compile(r"^\s{0,3}(=+|-+)\s*$")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_CODE_SPAN_RE = re.compile(r"(`+)(.+?)\1")
_EMPHASIS_RE = re.compile(r"(\*{1,3}|~~)(\S(?:.*?\S)?)\1")
_UNDERSCORE_RE = re.compile(r"(?<!\w)(_{1,3})(\S(?:.*?\S)?)\1(?!\w)")
# Lowercase inline tags only; Java type parameters such as <T> or <S> must survive.
_HTML_TAG_RE = re.compile(
    r"</?(?:a|abbr|b|br|center|code|del|div|em|font|i|img|kbd|mark|p|s|small|span|strong|sub|sup|u)\b[^>]*>",
)


def iter_unfenced_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` for lines outside fenced code blocks."""
    fence: str | None = None
    for number, line in enumerate(text.splitlines(), start=1):
        match = _FENCE_RE.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker[0] * len(marker)
                continue
            if marker.startswith(fence):
                fence = None
                continue
        if fence is None:
            yield number, line


def iter_headings(text: str) -> Iterator[tuple[int, int, str]]:
    """Yield ``(line_number, level, raw_title)`` for ATX and setext headings."""
    previous: tuple[int, str] | None = None
    for number, line in iter_unfenced_lines(text):
        atx = _ATX_RE.match(line)
        if atx:
            title = _CLOSING_HASHES_RE.sub("", atx.group(2) or "")
            yield number, len(atx.group(1)), title.strip()
            previous = None
            continue
        setext = _SETEXT_RE.match(line)
        if (
            setext
            and previous is not None
            and previous[0] == number - 1
            and previous[1].strip()
        ):
            level = 1 if setext.group(1).startswith("=") else 2
            yield previous[0], level, previous[1].strip()
            previous = None
            continue
        previous = (number, line)


def clean_inline(text: str) -> str:
    """Strip inline Markdown and HTML from a heading, leaving plain text.

    Code span contents are kept verbatim so headings such as
    ``Generics: `List<T>` `` keep their type parameters.
    """
    text = _IMAGE_RE.sub(r"\1", text)
    text = _LINK_RE.sub(r"\1", text)
    parts: list[str] = []
    last = 0
    for match in _CODE_SPAN_RE.finditer(text):
        parts.append(_strip_markup(text[last:match.start()]))
        parts.append(match.group(2).strip())
        last = match.end()
    parts.append(_strip_markup(text[last:]))
    return re.sub(r"\s+", " ", "".join(parts)).strip()


def _strip_markup(text: str) -> str:
    if _HTML_TAG_RE.search(text):
        text = BeautifulSoup(text, "html.parser").get_text(" ")
    text = _EMPHASIS_RE.sub(r"\2", text)
    return _UNDERSCORE_RE.sub(r"\2", text)
