class MemoryCardError(Exception):
    """Base class for memory card failures reported to callers."""


class CardNotFound(MemoryCardError):
    def __init__(self, card_id=None, reference=None):
        self.card_id = card_id
        self.reference = reference
        target = f"id {card_id}" if card_id is not None else f"reference {reference!r}"
        super().__init__(f"Memory card with {target} not found")


class CardAlreadyExists(MemoryCardError):
    def __init__(self, user_id: str, reference: str):
        self.user_id = user_id
        self.reference = reference
        super().__init__(f"{reference} is already in the memorization list for {user_id}")


class InvalidReference(MemoryCardError, ValueError):
    pass


class StoreUnavailable(MemoryCardError):
    """The persistence layer failed; the operation did not complete."""


class StoreConflict(StoreUnavailable):
    """A concurrent write changed the card between read and update."""


class DuplicateKeyError(MemoryCardError):
    """Raised by stores when (user, verse reference) is already taken."""
