"""
Card endpoints, nested under a deck.

Endpoints:
  GET    /decks/{deck_id}/cards            — cards in creation order (readable decks)
  POST   /decks/{deck_id}/cards            — add a card (owned decks only)
  PUT    /decks/{deck_id}/cards/{card_id}  — edit front / back
  DELETE /decks/{deck_id}/cards/{card_id}  — delete card

A deck the caller cannot access answers 404 exactly like a missing one.
"""
from __future__ import annotations

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from flashy.db.sqlite import (
    create_card,
    deck_writable,
    delete_card,
    get_db,
    list_cards,
    update_card,
)
from flashy.models.card import CardEnvelope, CardList, CardWrite, DeleteResult
from flashy.services.identity import get_caller_id

router = APIRouter()


def _sides(body: CardWrite) -> tuple[str, str]:
    front = (body.front or "").strip()
    back = (body.back or "").strip()
    if not front or not back:
        raise HTTPException(400, "Front/back required")
    return front, back


@router.get("/{deck_id}/cards", response_model=CardList)
async def list_deck_cards(
    deck_id: str,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
) -> CardList:
    cards = await list_cards(db, deck_id, caller_id)
    if cards is None:
        raise HTTPException(404, "Not found")
    return CardList(cards=cards)


@router.post("/{deck_id}/cards", response_model=CardEnvelope, status_code=201)
async def add_card(
    deck_id: str,
    body: CardWrite,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
) -> CardEnvelope:
    if not await deck_writable(db, deck_id, caller_id):
        raise HTTPException(404, "Not found")
    front, back = _sides(body)
    card = await create_card(db, deck_id, caller_id, front, back)
    if not card:
        raise HTTPException(404, "Not found")
    return CardEnvelope(card=card)


@router.put("/{deck_id}/cards/{card_id}", response_model=CardEnvelope)
async def edit_card(
    deck_id: str,
    card_id: str,
    body: CardWrite,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
) -> CardEnvelope:
    if not await deck_writable(db, deck_id, caller_id):
        raise HTTPException(404, "Not found")
    front, back = _sides(body)
    card = await update_card(db, deck_id, card_id, caller_id, front, back)
    if not card:
        raise HTTPException(404, "Card not found")
    return CardEnvelope(card=card)


@router.delete("/{deck_id}/cards/{card_id}", response_model=DeleteResult)
async def remove_card(
    deck_id: str,
    card_id: str,
    caller_id: str = Depends(get_caller_id),
    db: aiosqlite.Connection = Depends(get_db),
) -> DeleteResult:
    if not await deck_writable(db, deck_id, caller_id):
        raise HTTPException(404, "Not found")
    deleted = await delete_card(db, deck_id, card_id, caller_id)
    if not deleted:
        raise HTTPException(404, "Card not found")
    return DeleteResult()
