"""Book parsing: normalised text, title, author and word count."""

from __future__ import annotations

import re

from paperlib.storage.models import Book

_NEWLINES_RE = re.compile(r"[\r\n]+")
_WHITESPACE_RE = re.compile(r"\s+")
_BOOK_SUFFIX_RE = re.compile(r"\.(pdf|epub|txt|md)$", re.IGNORECASE)
_AUTHOR_RE = re.compile(r"(?i:\bby|\bauthor:)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)")

TITLE_SCAN_LINES = 10


def clean_text(text: str) -> str:
    """Collapse all whitespace runs to single spaces."""
    return _WHITESPACE_RE.sub(" ", _NEWLINES_RE.sub("\n", text)).strip()


def extract_title(filename: str, raw_text: str) -> str:
    """First of the opening lines that looks like a title, else the filename."""
    for line in raw_text.splitlines()[:TITLE_SCAN_LINES]:
        line = line.strip()
        if 10 < len(line) < 100 and "©" not in line:
            return line
    return _BOOK_SUFFIX_RE.sub("", filename)


def extract_author(text: str) -> str:
    """Capitalised name after "by" / "author:"; "Unknown" when absent."""
    match = _AUTHOR_RE.search(text)
    return match.group(1) if match else "Unknown"


def parse_book(filename: str, content: str) -> Book:
    text = clean_text(content)
    return Book(
        filename=filename,
        title=extract_title(filename, content),
        author=extract_author(text),
        word_count=len(text.split()),
        content=text,
    )
