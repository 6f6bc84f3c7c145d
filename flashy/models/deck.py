from pydantic import BaseModel


class DeckCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    color: str | None = None


class DeckUpdate(BaseModel):
    title: str | None = None
    description: str | None = None


class Deck(BaseModel):
    id: str
    device_id: str
    title: str
    description: str | None
    color: str
    created_at: str
    card_count: int = 0
    is_starter: bool = False


class DeckEnvelope(BaseModel):
    deck: Deck


class DeckList(BaseModel):
    decks: list[Deck]
