import pytest

from utils.references import VerseReference, normalize_reference, parse_reference


def test_parse_simple_reference():
    assert parse_reference("John 3:16") == VerseReference("John", 3, 16)


def test_parse_numbered_and_multiword_books():
    assert parse_reference("1 John 4:8") == VerseReference("1 John", 4, 8)
    assert parse_reference("Song of Solomon 2:1").book == "Song of Solomon"


def test_normalize_collapses_whitespace():
    assert normalize_reference("  Psalm   23 : 1 ") == "Psalm 23:1"


@pytest.mark.parametrize("value", ["", "John", "John 3", "John 3:x", "3:16", "John 0:1", "John 3:0"])
def test_parse_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_reference(value)
