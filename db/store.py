from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator, List, Optional, Protocol

from config import load_config
from models.card import MemoryCard
from models.review import ReviewRecord
from services.errors import DuplicateKeyError, StoreConflict, StoreUnavailable

from .database import get_conn, get_db_path

CARD_COLUMNS = (
    "user_id",
    "verse_reference",
    "book",
    "chapter",
    "verse",
    "verse_text",
    "notes",
    "mastery_level",
    "review_count",
    "last_reviewed_at",
    "next_review_date",
    "review_interval_days",
    "added_at",
)

# Columns a review owns; notes and verse identity are left alone.
SCHEDULE_COLUMNS = (
    "mastery_level",
    "review_count",
    "last_reviewed_at",
    "next_review_date",
    "review_interval_days",
)


class MemoryCardStore(Protocol):
    """Durable keyed storage for memory cards."""

    def insert(self, card: MemoryCard) -> int: ...

    def find_by_user_and_reference(self, user_id: str, verse_reference: str) -> Optional[MemoryCard]: ...

    def find_by_id(self, card_id: int) -> Optional[MemoryCard]: ...

    def update(self, card: MemoryCard, expected_review_count: Optional[int] = None) -> bool: ...

    def delete(self, card_id: int) -> bool: ...

    def query_due(self, user_id: str, as_of: date) -> List[MemoryCard]: ...

    def list_for_user(self, user_id: str) -> List[MemoryCard]: ...

    def apply_review(
        self, card: MemoryCard, review: ReviewRecord, expected_review_count: int
    ) -> Optional[MemoryCard]: ...

    def update_notes(self, card_id: int, notes: Optional[str]) -> Optional[MemoryCard]: ...

    def list_reviews(self, card_id: int) -> List[ReviewRecord]: ...


def _to_db(value):
    if isinstance(value, date):
        return value.isoformat()
    return value


def _card_values(card: MemoryCard) -> tuple:
    return tuple(_to_db(getattr(card, column)) for column in CARD_COLUMNS)


def _row_to_card(row: sqlite3.Row) -> MemoryCard:
    return MemoryCard.model_validate(dict(row))


def _raise_if_exists(conn: sqlite3.Connection, card_id: Optional[int]) -> None:
    if conn.execute("SELECT 1 FROM memory_cards WHERE id = ?", (card_id,)).fetchone():
        raise StoreConflict(f"memory card {card_id} was modified concurrently")


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise StoreUnavailable(f"memory card store failed: {exc}") from exc


class SQLiteMemoryCardStore:
    """MemoryCardStore backed by the memory_cards/memory_reviews tables.

    Each call opens its own connection to a path and timeout fixed when the
    store is built. Reviews and notes edits write only the columns they own,
    and a review is applied only if review_count still matches what the caller
    read, so racing writers cannot silently overwrite each other.
    """

    def __init__(self, db_path: Optional[Path] = None, timeout: Optional[float] = None):
        self.db_path = Path(db_path) if db_path is not None else get_db_path()
        if timeout is None:
            timeout = load_config()["database"]["timeout"]
        self.timeout = float(timeout)

    def _connect(self):
        return get_conn(self.db_path, self.timeout)

    def insert(self, card: MemoryCard) -> int:
        placeholders = ", ".join("?" for _ in CARD_COLUMNS)
        with _store_errors(), self._connect() as conn:
            try:
                cursor = conn.execute(
                    f"INSERT INTO memory_cards ({', '.join(CARD_COLUMNS)}) VALUES ({placeholders})",
                    _card_values(card),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateKeyError(f"{card.user_id}/{card.verse_reference}") from exc
            conn.commit()
            return int(cursor.lastrowid)

    def find_by_user_and_reference(self, user_id: str, verse_reference: str) -> Optional[MemoryCard]:
        with _store_errors(), self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM memory_cards WHERE user_id = ? AND verse_reference = ?",
                (user_id, verse_reference),
            ).fetchone()
        return _row_to_card(row) if row else None

    def find_by_id(self, card_id: int) -> Optional[MemoryCard]:
        with _store_errors(), self._connect() as conn:
            row = conn.execute("SELECT * FROM memory_cards WHERE id = ?", (card_id,)).fetchone()
        return _row_to_card(row) if row else None

    def update(self, card: MemoryCard, expected_review_count: Optional[int] = None) -> bool:
        """Write every mutable column; False when the card no longer exists."""
        assignments = ", ".join(f"{column} = ?" for column in CARD_COLUMNS)
        sql = f"UPDATE memory_cards SET {assignments} WHERE id = ?"
        params = list(_card_values(card)) + [card.id]
        if expected_review_count is not None:
            sql += " AND review_count = ?"
            params.append(expected_review_count)
        with _store_errors(), self._connect() as conn:
            cursor = conn.execute(sql, params)
            if cursor.rowcount == 0:
                _raise_if_exists(conn, card.id)
                return False
            conn.commit()
        return True

    def apply_review(
        self,
        card: MemoryCard,
        review: ReviewRecord,
        expected_review_count: int,
    ) -> Optional[MemoryCard]:
        """Write the scheduling columns and the review log in one transaction.

        Returns the stored card, or None when it no longer exists. Nothing is
        committed if either write fails.
        """
        assignments = ", ".join(f"{column} = ?" for column in SCHEDULE_COLUMNS)
        with _store_errors(), self._connect() as conn:
            cursor = conn.execute(
                f"UPDATE memory_cards SET {assignments} WHERE id = ? AND review_count = ?",
                [_to_db(getattr(card, column)) for column in SCHEDULE_COLUMNS]
                + [card.id, expected_review_count],
            )
            if cursor.rowcount == 0:
                _raise_if_exists(conn, card.id)
                return None
            conn.execute(
                """
                INSERT INTO memory_reviews
                    (card_id, user_id, outcome, mastery_before, mastery_after, interval_days, reviewed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    review.card_id,
                    review.user_id,
                    review.outcome.value,
                    review.mastery_before,
                    review.mastery_after,
                    review.interval_days,
                    review.reviewed_at.isoformat(),
                ),
            )
            row = conn.execute("SELECT * FROM memory_cards WHERE id = ?", (card.id,)).fetchone()
            conn.commit()
        return _row_to_card(row)

    def update_notes(self, card_id: int, notes: Optional[str]) -> Optional[MemoryCard]:
        """Write only the notes column; None when the card does not exist."""
        with _store_errors(), self._connect() as conn:
            cursor = conn.execute("UPDATE memory_cards SET notes = ? WHERE id = ?", (notes, card_id))
            if cursor.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM memory_cards WHERE id = ?", (card_id,)).fetchone()
            conn.commit()
        return _row_to_card(row)

    def delete(self, card_id: int) -> bool:
        with _store_errors(), self._connect() as conn:
            cursor = conn.execute("DELETE FROM memory_cards WHERE id = ?", (card_id,))
            conn.commit()
            return cursor.rowcount > 0

    def query_due(self, user_id: str, as_of: date) -> List[MemoryCard]:
        with _store_errors(), self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM memory_cards
                WHERE user_id = ? AND next_review_date <= ?
                ORDER BY next_review_date ASC, verse_reference ASC
                """,
                (user_id, as_of.isoformat()),
            ).fetchall()
        return [_row_to_card(row) for row in rows]

    def list_for_user(self, user_id: str) -> List[MemoryCard]:
        with _store_errors(), self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM memory_cards
                WHERE user_id = ?
                ORDER BY added_at DESC, verse_reference ASC
                """,
                (user_id,),
            ).fetchall()
        return [_row_to_card(row) for row in rows]

    def list_reviews(self, card_id: int) -> List[ReviewRecord]:
        with _store_errors(), self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM memory_reviews WHERE card_id = ? ORDER BY reviewed_at ASC, id ASC",
                (card_id,),
            ).fetchall()
        return [ReviewRecord.model_validate(dict(row)) for row in rows]
