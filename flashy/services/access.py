"""
Deck ownership policy.

Two predicates decide every deck-scoped operation:

  readable  := owner == caller OR owner == system owner
  writable  := owner == caller AND owner != system owner

They are applied as SQL filters so that an inaccessible deck is
indistinguishable from a missing one. This is scoping, not security: the
caller id is whatever the client asserts in its X-Device-Id header.
"""
from __future__ import annotations

from flashy.config import settings


def readable_clause(caller_id: str, alias: str = "d") -> tuple[str, list[str]]:
    """SQL predicate (and its parameters) selecting decks the caller may read."""
    return (
        f"({alias}.device_id = ? OR {alias}.device_id = ?)",
        [caller_id, settings.system_owner_id],
    )


def writable_clause(caller_id: str, alias: str = "d") -> tuple[str, list[str]]:
    """SQL predicate (and its parameters) selecting decks the caller may mutate."""
    return (
        f"({alias}.device_id = ? AND {alias}.device_id <> ?)",
        [caller_id, settings.system_owner_id],
    )


def can_read(owner_id: str, caller_id: str) -> bool:
    return owner_id == caller_id or owner_id == settings.system_owner_id


def can_write(owner_id: str, caller_id: str) -> bool:
    return owner_id == caller_id and owner_id != settings.system_owner_id


def can_create(caller_id: str) -> bool:
    # Starter decks are seeded, never created through the API
    return caller_id != settings.system_owner_id
