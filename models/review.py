from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

class ReviewOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"

class ReviewCreate(BaseModel):
    outcome: ReviewOutcome

class ReviewRecord(BaseModel):
    id: Optional[int] = None
    card_id: int
    user_id: str
    outcome: ReviewOutcome
    mastery_before: int
    mastery_after: int
    interval_days: int
    reviewed_at: datetime

    class Config:
        from_attributes = True
