from flashy.models.card import (
    Card,
    CardEnvelope,
    CardList,
    CardWrite,
    DeleteResult,
)
from flashy.models.deck import (
    Deck,
    DeckCreate,
    DeckEnvelope,
    DeckList,
    DeckUpdate,
)
from flashy.models.health import HealthStatus

__all__ = [
    "Card",
    "CardEnvelope",
    "CardList",
    "CardWrite",
    "Deck",
    "DeckCreate",
    "DeckEnvelope",
    "DeckList",
    "DeckUpdate",
    "DeleteResult",
    "HealthStatus",
]
