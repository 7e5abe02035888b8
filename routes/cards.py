from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from models.card import CardCreate, MemoryCard, NotesUpdate
from services.errors import CardAlreadyExists, CardNotFound, InvalidReference, StoreUnavailable
from services.memory_cards import MemoryCardService, get_service

router = APIRouter()


def store_unavailable(exc: StoreUnavailable) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("/item/{card_id}", response_model=MemoryCard)
async def get_card_by_id(card_id: int, service: MemoryCardService = Depends(get_service)):
    try:
        card = service.get_card_by_id(card_id)
    except StoreUnavailable as exc:
        raise store_unavailable(exc)
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@router.patch("/item/{card_id}/notes", response_model=MemoryCard)
async def update_notes(card_id: int, payload: NotesUpdate, service: MemoryCardService = Depends(get_service)):
    """Replace a card's notes; scheduling fields are untouched."""
    try:
        return service.update_notes(card_id, payload.notes)
    except CardNotFound:
        raise HTTPException(status_code=404, detail="Card not found")
    except StoreUnavailable as exc:
        raise store_unavailable(exc)


@router.delete("/item/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_card(card_id: int, service: MemoryCardService = Depends(get_service)):
    try:
        service.remove_card(card_id)
    except CardNotFound:
        raise HTTPException(status_code=404, detail="Card not found")
    except StoreUnavailable as exc:
        raise store_unavailable(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}", response_model=List[MemoryCard])
async def list_cards(user_id: str, service: MemoryCardService = Depends(get_service)):
    """All of a user's memory verses, most recently added first."""
    try:
        return service.list_cards(user_id)
    except StoreUnavailable as exc:
        raise store_unavailable(exc)


@router.post("/{user_id}", response_model=MemoryCard, status_code=status.HTTP_201_CREATED)
async def add_card(user_id: str, payload: CardCreate, service: MemoryCardService = Depends(get_service)):
    """Add a verse to the user's memorization list; it is due immediately."""
    try:
        return service.add_card(user_id, payload.verse_reference, payload.verse_text, payload.notes)
    except InvalidReference as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except CardAlreadyExists as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except StoreUnavailable as exc:
        raise store_unavailable(exc)


@router.get("/{user_id}/lookup", response_model=MemoryCard)
async def lookup_card(
    user_id: str,
    reference: str = Query(..., description="Verse reference, e.g. John 3:16"),
    service: MemoryCardService = Depends(get_service),
):
    try:
        card = service.get_card(user_id, reference)
    except StoreUnavailable as exc:
        raise store_unavailable(exc)
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@router.get("/{user_id}/due", response_model=List[MemoryCard])
async def due_cards(
    user_id: str,
    as_of: Optional[date] = Query(None, description="ISO date; defaults to today"),
    service: MemoryCardService = Depends(get_service),
):
    """Cards due on or before as_of, earliest due first."""
    try:
        return service.list_due_cards(user_id, as_of)
    except StoreUnavailable as exc:
        raise store_unavailable(exc)


@router.get("/{user_id}/summary")
async def mastery_summary(
    user_id: str,
    as_of: Optional[date] = Query(None),
    service: MemoryCardService = Depends(get_service),
):
    try:
        return service.mastery_summary(user_id, as_of)
    except StoreUnavailable as exc:
        raise store_unavailable(exc)
