import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from flashy.config import settings
from flashy.models.card import Card
from flashy.models.deck import Deck
from flashy.services.access import readable_clause, writable_clause

logger = logging.getLogger(__name__)

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS decks (
    id          TEXT PRIMARY KEY,
    device_id   TEXT NOT NULL,
    title       TEXT NOT NULL,
    description TEXT,
    color       TEXT NOT NULL DEFAULT '#6B4EFF',
    created_at  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_decks_device ON decks(device_id);

CREATE TABLE IF NOT EXISTS cards (
    id          TEXT PRIMARY KEY,
    deck_id     TEXT NOT NULL REFERENCES decks(id) ON DELETE CASCADE,
    front       TEXT NOT NULL,
    back        TEXT NOT NULL,
    created_at  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_cards_deck ON cards(deck_id, created_at);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
"""

_DECK_COLUMNS = """d.id, d.device_id, d.title, d.description, d.color, d.created_at,
       COUNT(c.id) AS card_count,
       CASE WHEN d.device_id = ? THEN 1 ELSE 0 END AS is_starter"""


async def init_sqlite(data_dir: Path) -> None:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()
    logger.info("SQLite ready at %s", _db_path)


@asynccontextmanager
async def open_db() -> AsyncIterator[aiosqlite.Connection]:
    if _db_path is None:
        raise RuntimeError("SQLite not initialized")
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys=ON")
        yield db


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    async with open_db() as db:
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _row_to_deck(row: aiosqlite.Row) -> Deck:
    d = dict(row)
    d["is_starter"] = bool(d["is_starter"])
    return Deck(**d)


def _row_to_card(row: aiosqlite.Row) -> Card:
    return Card(**dict(row))


async def db_time(db: aiosqlite.Connection) -> str:
    cursor = await db.execute("SELECT datetime('now')")
    row = await cursor.fetchone()
    return row[0]


# --- Decks ---


async def list_decks(db: aiosqlite.Connection, caller_id: str) -> list[Deck]:
    """Caller's own decks plus starter decks; starters first, newest first within each."""
    clause, params = readable_clause(caller_id)
    cursor = await db.execute(
        f"""SELECT {_DECK_COLUMNS}
              FROM decks d
         LEFT JOIN cards c ON c.deck_id = d.id
             WHERE {clause}
          GROUP BY d.id
          ORDER BY is_starter DESC, d.created_at DESC, d.rowid DESC""",  # noqa: S608
        [settings.system_owner_id, *params],
    )
    rows = await cursor.fetchall()
    return [_row_to_deck(r) for r in rows]


async def get_deck(
    db: aiosqlite.Connection, deck_id: str, caller_id: str
) -> Deck | None:
    clause, params = readable_clause(caller_id)
    cursor = await db.execute(
        f"""SELECT {_DECK_COLUMNS}
              FROM decks d
         LEFT JOIN cards c ON c.deck_id = d.id
             WHERE d.id = ? AND {clause}
          GROUP BY d.id""",  # noqa: S608
        [settings.system_owner_id, deck_id, *params],
    )
    row = await cursor.fetchone()
    if row is None:
        return None
    return _row_to_deck(row)


async def deck_readable(
    db: aiosqlite.Connection, deck_id: str, caller_id: str
) -> bool:
    clause, params = readable_clause(caller_id)
    cursor = await db.execute(
        f"SELECT 1 FROM decks d WHERE d.id = ? AND {clause}",  # noqa: S608
        [deck_id, *params],
    )
    return await cursor.fetchone() is not None


async def deck_writable(
    db: aiosqlite.Connection, deck_id: str, caller_id: str
) -> bool:
    clause, params = writable_clause(caller_id)
    cursor = await db.execute(
        f"SELECT 1 FROM decks d WHERE d.id = ? AND {clause}",  # noqa: S608
        [deck_id, *params],
    )
    return await cursor.fetchone() is not None


async def create_deck(
    db: aiosqlite.Connection,
    owner_id: str,
    title: str,
    description: str | None = None,
    color: str | None = None,
) -> Deck:
    deck_id = str(uuid.uuid4())
    await db.execute(
        """INSERT INTO decks (id, device_id, title, description, color, created_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (
            deck_id,
            owner_id,
            title.strip(),
            description,
            color if color is not None else settings.default_deck_color,
            _now(),
        ),
    )
    await db.commit()
    return await get_deck(db, deck_id, owner_id)  # type: ignore[return-value]


async def update_deck(
    db: aiosqlite.Connection,
    deck_id: str,
    caller_id: str,
    title: str,
    description: str | None = None,
) -> Deck | None:
    """Replace title and description. An omitted description clears it."""
    clause, params = writable_clause(caller_id, alias="decks")
    cursor = await db.execute(
        f"UPDATE decks SET title = ?, description = ? WHERE decks.id = ? AND {clause}",  # noqa: S608
        [title.strip(), description, deck_id, *params],
    )
    await db.commit()
    if cursor.rowcount == 0:
        return None
    return await get_deck(db, deck_id, caller_id)


async def delete_deck(
    db: aiosqlite.Connection, deck_id: str, caller_id: str
) -> bool:
    """Delete a deck and all of its cards in a single transaction."""
    clause, params = writable_clause(caller_id)
    owner_clause, owner_params = writable_clause(caller_id, alias="decks")
    try:
        await db.execute("BEGIN")
        await db.execute(
            f"""DELETE FROM cards WHERE deck_id IN (
                    SELECT d.id FROM decks d WHERE d.id = ? AND {clause}
                )""",  # noqa: S608
            [deck_id, *params],
        )
        cursor = await db.execute(
            f"DELETE FROM decks WHERE decks.id = ? AND {owner_clause}",  # noqa: S608
            [deck_id, *owner_params],
        )
        deleted = cursor.rowcount > 0
        await db.commit()
    except aiosqlite.Error:
        await db.rollback()
        raise
    return deleted


async def find_deck_ids_by_title(
    db: aiosqlite.Connection, owner_id: str, title: str
) -> list[str]:
    cursor = await db.execute(
        "SELECT id FROM decks WHERE device_id = ? AND title = ?", (owner_id, title)
    )
    rows = await cursor.fetchall()
    return [r[0] for r in rows]


async def delete_owned_decks(
    db: aiosqlite.Connection, owner_id: str, deck_ids: list[str]
) -> int:
    """Delete decks of a given owner regardless of write policy (maintenance only)."""
    if not deck_ids:
        return 0
    placeholders = ", ".join("?" for _ in deck_ids)
    try:
        await db.execute("BEGIN")
        await db.execute(
            f"""DELETE FROM cards WHERE deck_id IN (
                    SELECT id FROM decks WHERE device_id = ? AND id IN ({placeholders})
                )""",  # noqa: S608
            [owner_id, *deck_ids],
        )
        cursor = await db.execute(
            f"DELETE FROM decks WHERE device_id = ? AND id IN ({placeholders})",  # noqa: S608
            [owner_id, *deck_ids],
        )
        removed = cursor.rowcount
        await db.commit()
    except aiosqlite.Error:
        await db.rollback()
        raise
    return removed


# --- Cards ---


async def list_cards(
    db: aiosqlite.Connection, deck_id: str, caller_id: str
) -> list[Card] | None:
    """Cards of a readable deck in creation order, or None if the deck is not readable."""
    if not await deck_readable(db, deck_id, caller_id):
        return None
    cursor = await db.execute(
        """SELECT id, deck_id, front, back, created_at FROM cards
           WHERE deck_id = ? ORDER BY created_at ASC, rowid ASC""",
        (deck_id,),
    )
    rows = await cursor.fetchall()
    return [_row_to_card(r) for r in rows]


async def get_card(
    db: aiosqlite.Connection, deck_id: str, card_id: str
) -> Card | None:
    cursor = await db.execute(
        "SELECT id, deck_id, front, back, created_at FROM cards WHERE id = ? AND deck_id = ?",
        (card_id, deck_id),
    )
    row = await cursor.fetchone()
    return _row_to_card(row) if row else None


async def create_card(
    db: aiosqlite.Connection, deck_id: str, caller_id: str, front: str, back: str
) -> Card | None:
    clause, params = writable_clause(caller_id)
    card_id = str(uuid.uuid4())
    cursor = await db.execute(
        f"""INSERT INTO cards (id, deck_id, front, back, created_at)
            SELECT ?, d.id, ?, ?, ? FROM decks d WHERE d.id = ? AND {clause}""",  # noqa: S608
        [card_id, front.strip(), back.strip(), _now(), deck_id, *params],
    )
    await db.commit()
    if cursor.rowcount == 0:
        return None
    return await get_card(db, deck_id, card_id)


async def insert_cards(
    db: aiosqlite.Connection, deck_id: str, pairs: list[tuple[str, str]]
) -> int:
    """Bulk insert used for seeding; no ownership check."""
    for front, back in pairs:
        await db.execute(
            "INSERT INTO cards (id, deck_id, front, back, created_at) VALUES (?, ?, ?, ?, ?)",
            (str(uuid.uuid4()), deck_id, front.strip(), back.strip(), _now()),
        )
    await db.commit()
    return len(pairs)


async def update_card(
    db: aiosqlite.Connection,
    deck_id: str,
    card_id: str,
    caller_id: str,
    front: str,
    back: str,
) -> Card | None:
    clause, params = writable_clause(caller_id)
    cursor = await db.execute(
        f"""UPDATE cards SET front = ?, back = ?
            WHERE id = ? AND deck_id = ?
              AND deck_id IN (SELECT d.id FROM decks d WHERE d.id = ? AND {clause})""",  # noqa: S608
        [front.strip(), back.strip(), card_id, deck_id, deck_id, *params],
    )
    await db.commit()
    if cursor.rowcount == 0:
        return None
    return await get_card(db, deck_id, card_id)


async def delete_card(
    db: aiosqlite.Connection, deck_id: str, card_id: str, caller_id: str
) -> bool:
    clause, params = writable_clause(caller_id)
    cursor = await db.execute(
        f"""DELETE FROM cards
            WHERE id = ? AND deck_id = ?
              AND deck_id IN (SELECT d.id FROM decks d WHERE d.id = ? AND {clause})""",  # noqa: S608
        [card_id, deck_id, deck_id, *params],
    )
    await db.commit()
    return (cursor.rowcount or 0) > 0
