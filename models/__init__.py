from .card import MemoryCard, CardCreate, NotesUpdate
from .review import ReviewOutcome, ReviewCreate, ReviewRecord

__all__ = ['MemoryCard', 'CardCreate', 'NotesUpdate', 'ReviewOutcome', 'ReviewCreate', 'ReviewRecord']
