import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from flashy.db.sqlite import (
    create_deck,
    delete_deck,
    get_db,
    get_deck,
    list_decks,
    update_deck,
)
from flashy.models.card import DeleteResult
from flashy.models.deck import DeckCreate, DeckEnvelope, DeckList, DeckUpdate
from flashy.services.access import can_create
from flashy.services.identity import get_caller_id

logger = logging.getLogger(__name__)
router = APIRouter()


def _required(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise HTTPException(400, message)
    return value.strip()


@router.get("", response_model=DeckList)
async def list_all(
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
):
    return DeckList(decks=await list_decks(db, caller_id))


@router.post("", response_model=DeckEnvelope, status_code=201)
async def create(
    body: DeckCreate,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
):
    if not can_create(caller_id):
        raise HTTPException(400, "Invalid device id")
    title = _required(body.title, "Title required")
    deck = await create_deck(db, caller_id, title, body.description, body.color)
    logger.info("Deck %s created by %s", deck.id, caller_id)
    return DeckEnvelope(deck=deck)


@router.get("/{deck_id}", response_model=DeckEnvelope)
async def get_one(
    deck_id: str,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
):
    deck = await get_deck(db, deck_id, caller_id)
    if not deck:
        raise HTTPException(404, "Not found")
    return DeckEnvelope(deck=deck)


@router.put("/{deck_id}", response_model=DeckEnvelope)
async def update(
    deck_id: str,
    body: DeckUpdate,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
):
    title = _required(body.title, "Title required")
    deck = await update_deck(db, deck_id, caller_id, title, body.description)
    if not deck:
        raise HTTPException(404, "Not found")
    return DeckEnvelope(deck=deck)


@router.delete("/{deck_id}", response_model=DeleteResult)
async def remove(
    deck_id: str,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
):
    deleted = await delete_deck(db, deck_id, caller_id)
    if not deleted:
        raise HTTPException(404, "Not found")
    logger.info("Deck %s deleted by %s", deck_id, caller_id)
    return DeleteResult()
