from __future__ import annotations

from pydantic import BaseModel


class Card(BaseModel):
    id: str
    deck_id: str
    front: str
    back: str
    created_at: str


class CardWrite(BaseModel):
    """Body of card create and update; both sides are required after trimming."""

    front: str | None = None
    back: str | None = None


class CardEnvelope(BaseModel):
    card: Card


class CardList(BaseModel):
    cards: list[Card]


class DeleteResult(BaseModel):
    success: bool = True
