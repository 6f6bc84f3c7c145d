"""
Shared fixtures.

Every test gets its own SQLite file under pytest's tmp_path; the FastAPI app
is driven through TestClient so lifespan startup runs exactly as in production.
"""
import sqlite3

import pytest
from fastapi.testclient import TestClient

from flashy import create_app
from flashy.config import settings

SYSTEM = "starter-decks-system"


def device(device_id: str) -> dict:
    return {"X-Device-Id": device_id}


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    monkeypatch.setattr(settings, "system_owner_id", SYSTEM)
    monkeypatch.setattr(settings, "seed_starter_decks", False)
    return tmp_path


@pytest.fixture()
def client(data_dir):
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture()
def seeded_client(data_dir, monkeypatch):
    monkeypatch.setattr(settings, "seed_starter_decks", True)
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture()
def raw(data_dir):
    """Run a raw query against the test DB and return rows as dicts."""

    def _raw(sql: str, params=()):
        conn = sqlite3.connect(data_dir / settings.sqlite_filename)
        conn.row_factory = sqlite3.Row
        rows = [dict(r) for r in conn.execute(sql, params).fetchall()]
        conn.close()
        return rows

    return _raw


@pytest.fixture()
def make_deck(client):
    def _make(owner: str, title: str = "Deck", **extra) -> dict:
        res = client.post("/decks", json={"title": title, **extra}, headers=device(owner))
        assert res.status_code == 201, res.text
        return res.json()["deck"]

    return _make


@pytest.fixture()
def make_card(client):
    def _make(owner: str, deck_id: str, front: str, back: str) -> dict:
        res = client.post(
            f"/decks/{deck_id}/cards",
            json={"front": front, "back": back},
            headers=device(owner),
        )
        assert res.status_code == 201, res.text
        return res.json()["card"]

    return _make
