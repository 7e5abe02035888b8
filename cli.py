"""Command line access to a user's memory verses.

    python cli.py add alice "John 3:16" "For God so loved the world..."
    python cli.py due alice
    python cli.py review 1 success
"""
import argparse
import json
import sys
from datetime import date
from typing import List, Optional

from config import load_config
from db.database import init_db
from models.card import MemoryCard
from models.review import ReviewOutcome
from services.errors import MemoryCardError
from services.memory_cards import MemoryCardService, get_service
from utils.logging import configure_logging


def format_card(card: MemoryCard) -> str:
    last = card.last_reviewed_at.date().isoformat() if card.last_reviewed_at else "never"
    line = (
        f"[{card.id}] {card.verse_reference}  level {card.mastery_level}  "
        f"reviewed {card.review_count}x (last {last})  next {card.next_review_date.isoformat()}"
    )
    if card.notes:
        line += f"\n    notes: {card.notes}"
    return line


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="versecoach", description="Memorize scripture with spaced repetition")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Initialize DB and config")

    add = sub.add_parser("add", help="Add a verse to a user's list")
    add.add_argument("user")
    add.add_argument("reference")
    add.add_argument("text")
    add.add_argument("--notes")

    show = sub.add_parser("show", help="Show a user's card for a verse")
    show.add_argument("user")
    show.add_argument("reference")

    listing = sub.add_parser("list", help="List all of a user's cards")
    listing.add_argument("user")

    due = sub.add_parser("due", help="List cards due for review")
    due.add_argument("user")
    due.add_argument("--as-of", type=date.fromisoformat, default=None)

    review = sub.add_parser("review", help="Record a review outcome")
    review.add_argument("card_id", type=int)
    review.add_argument("outcome", choices=[outcome.value for outcome in ReviewOutcome])

    notes = sub.add_parser("notes", help="Replace a card's notes")
    notes.add_argument("card_id", type=int)
    notes.add_argument("notes")

    remove = sub.add_parser("remove", help="Delete a card")
    remove.add_argument("card_id", type=int)

    history = sub.add_parser("history", help="Show a card's review log")
    history.add_argument("card_id", type=int)
    return parser


def _emit(args, cards: List[MemoryCard]) -> None:
    if args.json:
        print(json.dumps([card.model_dump(mode="json") for card in cards], indent=2))
        return
    for card in cards:
        print(format_card(card))


def run(args, service: MemoryCardService) -> int:
    if args.command == "add":
        _emit(args, [service.add_card(args.user, args.reference, args.text, args.notes)])
    elif args.command == "show":
        card = service.get_card(args.user, args.reference)
        if card is None:
            print(f"{args.reference} is not in {args.user}'s list", file=sys.stderr)
            return 1
        _emit(args, [card])
    elif args.command == "list":
        _emit(args, service.list_cards(args.user))
    elif args.command == "due":
        cards = service.list_due_cards(args.user, args.as_of)
        if not cards and not args.json:
            print("No verses due.")
        _emit(args, cards)
    elif args.command == "review":
        _emit(args, [service.record_review(args.card_id, ReviewOutcome(args.outcome))])
    elif args.command == "notes":
        _emit(args, [service.update_notes(args.card_id, args.notes)])
    elif args.command == "remove":
        service.remove_card(args.card_id)
        if args.json:
            print(json.dumps({"removed": args.card_id}))
        else:
            print(f"Removed card {args.card_id}")
    elif args.command == "history":
        records = service.review_history(args.card_id)
        if args.json:
            print(json.dumps([record.model_dump(mode="json") for record in records], indent=2))
            return 0
        for record in records:
            print(
                f"{record.reviewed_at.isoformat()}  {record.outcome.value:<7}  "
                f"level {record.mastery_before} -> {record.mastery_after}  +{record.interval_days}d"
            )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    configure_logging(config["logging"]["level"], config["logging"]["json"])
    init_db()
    if args.command == "init":
        print("DB initialized and config copied to ~/.versecoach/")
        return 0
    try:
        return run(args, get_service())
    except MemoryCardError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
