from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime

class CardBase(BaseModel):
    verse_reference: str
    verse_text: str
    notes: Optional[str] = None

class CardCreate(CardBase):
    pass

class NotesUpdate(BaseModel):
    notes: Optional[str] = None

class MemoryCard(CardBase):
    id: Optional[int] = None
    user_id: str
    book: str
    chapter: int
    verse: int
    mastery_level: int = 0
    review_count: int = 0
    last_reviewed_at: Optional[datetime] = None
    next_review_date: date
    review_interval_days: int = 1
    added_at: datetime

    class Config:
        from_attributes = True
