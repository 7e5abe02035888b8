from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from config import load_config
from db.database import get_db_path
from db.store import MemoryCardStore, SQLiteMemoryCardStore
from models.card import MemoryCard
from models.review import ReviewOutcome, ReviewRecord
from utils.logging import logger
from utils.references import parse_reference
from utils.scheduler import MAX_MASTERY, ReviewScheduler, clamp_mastery, due_date_after

from .errors import CardAlreadyExists, CardNotFound, DuplicateKeyError, InvalidReference


def _resolve_now(now: Optional[datetime]) -> datetime:
    return now or datetime.now().astimezone()


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    return notes.strip() or None


class MemoryCardService:
    """Add, review, annotate and remove a user's memory verses.

    Every method takes the user (or card id) explicitly and does a single
    read-modify-write against the store. Lookups that find nothing return
    None; mutations on a missing card raise CardNotFound.
    """

    def __init__(self, store: MemoryCardStore, scheduler: Optional[ReviewScheduler] = None):
        self.store = store
        self.scheduler = scheduler or ReviewScheduler()

    def get_card(self, user_id: str, verse_reference: str) -> Optional[MemoryCard]:
        try:
            reference = str(parse_reference(verse_reference))
        except ValueError:
            return None
        return self.store.find_by_user_and_reference(user_id, reference)

    def get_card_by_id(self, card_id: int) -> Optional[MemoryCard]:
        return self.store.find_by_id(card_id)

    def add_card(
        self,
        user_id: str,
        verse_reference: str,
        verse_text: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> MemoryCard:
        try:
            parsed = parse_reference(verse_reference)
        except ValueError as exc:
            raise InvalidReference(str(exc)) from exc
        reference = str(parsed)
        if self.store.find_by_user_and_reference(user_id, reference) is not None:
            logger.info("card_add_rejected", user_id=user_id, verse_reference=reference)
            raise CardAlreadyExists(user_id, reference)
        now = _resolve_now(now)
        card = MemoryCard(
            user_id=user_id,
            verse_reference=reference,
            book=parsed.book,
            chapter=parsed.chapter,
            verse=parsed.verse,
            verse_text=verse_text,
            notes=_clean_notes(notes),
            mastery_level=0,
            review_count=0,
            last_reviewed_at=None,
            next_review_date=now.date(),
            review_interval_days=1,
            added_at=now,
        )
        try:
            card_id = self.store.insert(card)
        except DuplicateKeyError as exc:
            logger.info("card_add_rejected", user_id=user_id, verse_reference=reference)
            raise CardAlreadyExists(user_id, reference) from exc
        card = card.model_copy(update={"id": card_id})
        logger.info("card_added", card_id=card_id, user_id=user_id, verse_reference=reference)
        return card

    def record_review(
        self,
        card_id: int,
        outcome: ReviewOutcome,
        now: Optional[datetime] = None,
    ) -> MemoryCard:
        card = self.store.find_by_id(card_id)
        if card is None:
            raise CardNotFound(card_id=card_id)
        outcome = ReviewOutcome(outcome)
        now = _resolve_now(now)
        mastery_before = clamp_mastery(card.mastery_level)
        new_level, interval_days = self.scheduler.next_state(mastery_before, outcome)
        updated = card.model_copy(
            update={
                "mastery_level": new_level,
                "review_interval_days": interval_days,
                "last_reviewed_at": now,
                "next_review_date": due_date_after(now, interval_days),
                "review_count": card.review_count + 1,
            }
        )
        review = ReviewRecord(
            card_id=card_id,
            user_id=card.user_id,
            outcome=outcome,
            mastery_before=mastery_before,
            mastery_after=new_level,
            interval_days=interval_days,
            reviewed_at=now,
        )
        stored = self.store.apply_review(updated, review, expected_review_count=card.review_count)
        if stored is None:
            raise CardNotFound(card_id=card_id)
        logger.info(
            "card_reviewed",
            card_id=card_id,
            user_id=card.user_id,
            outcome=outcome.value,
            mastery_level=new_level,
            interval_days=interval_days,
            next_review_date=stored.next_review_date.isoformat(),
        )
        return stored

    def update_notes(self, card_id: int, notes: Optional[str]) -> MemoryCard:
        updated = self.store.update_notes(card_id, _clean_notes(notes))
        if updated is None:
            raise CardNotFound(card_id=card_id)
        logger.info("card_notes_updated", card_id=card_id, user_id=updated.user_id)
        return updated

    def remove_card(self, card_id: int) -> None:
        if not self.store.delete(card_id):
            raise CardNotFound(card_id=card_id)
        logger.info("card_removed", card_id=card_id)

    def list_due_cards(self, user_id: str, as_of: Optional[date] = None) -> List[MemoryCard]:
        """Cards due on or before ``as_of`` (default today), earliest first."""
        as_of = as_of or _resolve_now(None).date()
        cards = [card for card in self.store.query_due(user_id, as_of) if card.next_review_date <= as_of]
        return sorted(cards, key=lambda card: (card.next_review_date, card.verse_reference))

    def list_cards(self, user_id: str) -> List[MemoryCard]:
        return self.store.list_for_user(user_id)

    def review_history(self, card_id: int) -> List[ReviewRecord]:
        if self.store.find_by_id(card_id) is None:
            raise CardNotFound(card_id=card_id)
        return self.store.list_reviews(card_id)

    def mastery_summary(self, user_id: str, as_of: Optional[date] = None) -> Dict:
        as_of = as_of or _resolve_now(None).date()
        cards = self.store.list_for_user(user_id)
        by_level = {level: 0 for level in range(MAX_MASTERY + 1)}
        for card in cards:
            by_level[clamp_mastery(card.mastery_level)] += 1
        return {
            "user_id": user_id,
            "total_cards": len(cards),
            "due_cards": sum(1 for card in cards if card.next_review_date <= as_of),
            "total_reviews": sum(card.review_count for card in cards),
            "mastered_cards": by_level[MAX_MASTERY],
            "by_level": by_level,
        }


def get_service() -> MemoryCardService:
    """Build a service over the SQLite store; config is read once here."""
    config = load_config()
    store = SQLiteMemoryCardStore(get_db_path(config), config["database"]["timeout"])
    scheduler = ReviewScheduler(config["scheduler"]["intervals"])
    return MemoryCardService(store, scheduler)
