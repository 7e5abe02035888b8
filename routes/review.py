from typing import List

from fastapi import APIRouter, Depends, HTTPException

from models.card import MemoryCard
from models.review import ReviewCreate, ReviewRecord
from routes.cards import store_unavailable
from services.errors import CardNotFound, StoreUnavailable
from services.memory_cards import MemoryCardService, get_service

router = APIRouter()


@router.post("/{card_id}", response_model=MemoryCard)
async def submit_review(card_id: int, payload: ReviewCreate, service: MemoryCardService = Depends(get_service)):
    """Record a success/failure review and return the rescheduled card."""
    try:
        return service.record_review(card_id, payload.outcome)
    except CardNotFound:
        raise HTTPException(status_code=404, detail="Card not found")
    except StoreUnavailable as exc:
        raise store_unavailable(exc)


@router.get("/{card_id}/history", response_model=List[ReviewRecord])
async def review_history(card_id: int, service: MemoryCardService = Depends(get_service)):
    try:
        return service.review_history(card_id)
    except CardNotFound:
        raise HTTPException(status_code=404, detail="Card not found")
    except StoreUnavailable as exc:
        raise store_unavailable(exc)
