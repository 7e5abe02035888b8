import re
from typing import NamedTuple

_REFERENCE_RE = re.compile(r"^(?P<book>\S.*?)\s+(?P<chapter>\d+)\s*:\s*(?P<verse>\d+)$")


class VerseReference(NamedTuple):
    book: str
    chapter: int
    verse: int

    def __str__(self) -> str:
        return format_reference(self.book, self.chapter, self.verse)


def format_reference(book: str, chapter: int, verse: int) -> str:
    """Canonical "<Book> <Chapter>:<Verse>" form."""
    return f"{book} {chapter}:{verse}"


def parse_reference(reference: str) -> VerseReference:
    """Split a reference like "1 John 4:8" into book, chapter and verse.

    Whitespace inside the book name is collapsed. Raises ValueError when the
    string is not in "<Book> <Chapter>:<Verse>" form or numbers are not positive.
    """
    cleaned = " ".join((reference or "").split())
    match = _REFERENCE_RE.match(cleaned)
    if not match:
        raise ValueError(f"Invalid verse reference: {reference!r}")
    chapter = int(match.group("chapter"))
    verse = int(match.group("verse"))
    if chapter < 1 or verse < 1:
        raise ValueError(f"Invalid verse reference: {reference!r}")
    return VerseReference(match.group("book"), chapter, verse)


def normalize_reference(reference: str) -> str:
    return str(parse_reference(reference))
