from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field

import aiosqlite

from flashy.config import settings
from flashy.db import init_all_databases
from flashy.db.sqlite import (
    create_deck,
    delete_owned_decks,
    find_deck_ids_by_title,
    insert_cards,
    open_db,
)

logger = logging.getLogger(__name__)


@dataclass
class StarterDeck:
    title: str
    description: str
    color: str
    cards: list[tuple[str, str]] = field(default_factory=list)


STARTER_CATALOG: list[StarterDeck] = [
    StarterDeck(
        title="French Greetings",
        description="Essential French greetings and polite expressions",
        color="#3B82F6",
        cards=[
            ("Hello", "Bonjour"),
            ("Thank you", "Merci"),
            ("Goodbye", "Au revoir"),
            ("Please", "S'il vous plaît"),
            ("Good morning", "Bonjour"),
            ("Good evening", "Bonsoir"),
        ],
    ),
    StarterDeck(
        title="Spanish Travel",
        description="Key Spanish phrases for travelers and tourists",
        color="#EF4444",
        cards=[
            ("Where is the bathroom?", "¿Dónde está el baño?"),
            ("How much does it cost?", "¿Cuánto cuesta?"),
            ("I would like...", "Me gustaría..."),
            ("Can you help me?", "¿Me puede ayudar?"),
            ("The check, please", "La cuenta, por favor"),
            ("I don't understand", "No entiendo"),
        ],
    ),
    StarterDeck(
        title="German Basic Greetings",
        description="Common German greetings for everyday use",
        color="#F59E0B",
        cards=[
            ("Hello", "Hallo"),
            ("Good morning", "Guten Morgen"),
            ("Good night", "Gute Nacht"),
            ("Thank you", "Danke"),
            ("Goodbye", "Auf Wiedersehen"),
        ],
    ),
]


async def seed_starter_decks(
    db: aiosqlite.Connection, catalog: list[StarterDeck] | None = None
) -> int:
    """Insert catalog decks missing for the system owner. Returns the number created."""
    created = 0
    for entry in catalog if catalog is not None else STARTER_CATALOG:
        if await find_deck_ids_by_title(db, settings.system_owner_id, entry.title):
            continue
        deck = await create_deck(
            db,
            settings.system_owner_id,
            entry.title,
            entry.description,
            entry.color,
        )
        await insert_cards(db, deck.id, entry.cards)
        logger.info("Seeded starter deck %r (%d cards)", entry.title, len(entry.cards))
        created += 1
    return created


async def remove_starter_decks(db: aiosqlite.Connection, titles: list[str]) -> int:
    """Delete starter decks by title, with their cards. Returns the number removed."""
    removed = 0
    for title in titles:
        deck_ids = await find_deck_ids_by_title(db, settings.system_owner_id, title)
        if not deck_ids:
            logger.warning("Starter deck %r not found", title)
            continue
        removed += await delete_owned_decks(db, settings.system_owner_id, deck_ids)
        logger.info("Removed starter deck %r", title)
    return removed


async def remove_from_store(titles: list[str]) -> int:
    """Open the configured store and remove the named starter decks."""
    await init_all_databases(settings.data_dir)
    async with open_db() as db:
        return await remove_starter_decks(db, titles)


if __name__ == "__main__":
    # python -m flashy.services.starter_decks "Spanish Travel" "World Capitals"
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )
    if len(sys.argv) < 2:
        print("usage: python -m flashy.services.starter_decks TITLE [TITLE ...]")
        sys.exit(2)
    removed = asyncio.run(remove_from_store(sys.argv[1:]))
    print(f"Removed {removed} starter deck(s)", flush=True)
