"""
HTTP client for the Flashy API.

Every request carries the caller's device id in the X-Device-Id header. The
id is generated once per machine and kept in a small file, standing in for
the browser storage the web client uses.

Usage:
    client = FlashyClient("http://127.0.0.1:8000")
    deck = client.create_deck("French Basics")
    client.create_card(deck["id"], "Hello", "Bonjour")
    session = client.start_review(deck["id"])
"""
from __future__ import annotations

import logging
import random
import uuid
from pathlib import Path
from typing import Any

import httpx

from flashy.config import settings
from flashy.models.card import Card
from flashy.services.identity import DEVICE_ID_HEADER
from flashy.services.review_session import ReviewSession

logger = logging.getLogger(__name__)


class FlashyAPIError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def load_or_create_device_id(path: Path | None = None) -> str:
    path = path or settings.device_id_file
    if path.exists():
        device_id = path.read_text(encoding="utf-8").strip()
        if device_id:
            return device_id
    device_id = str(uuid.uuid4())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(device_id, encoding="utf-8")
    logger.info("Generated device id %s", device_id)
    return device_id


class FlashyClient:
    def __init__(
        self,
        base_url: str = "",
        device_id: str | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self.device_id = device_id or load_or_create_device_id()
        self._http = http or httpx.Client(base_url=base_url)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FlashyClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _request(self, method: str, url: str, json: dict | None = None) -> dict:
        res = self._http.request(
            method, url, json=json, headers={DEVICE_ID_HEADER: self.device_id}
        )
        try:
            payload = res.json()
        except ValueError:
            payload = {}
        if res.status_code >= 400:
            raise FlashyAPIError(res.status_code, payload.get("error", res.reason_phrase))
        return payload

    # --- Decks ---

    def list_decks(self) -> list[dict]:
        return self._request("GET", "/decks")["decks"]

    def get_deck(self, deck_id: str) -> dict:
        return self._request("GET", f"/decks/{deck_id}")["deck"]

    def create_deck(
        self, title: str, description: str | None = None, color: str | None = None
    ) -> dict:
        body = {"title": title, "description": description, "color": color}
        return self._request("POST", "/decks", json=body)["deck"]

    def update_deck(self, deck_id: str, title: str, description: str | None = None) -> dict:
        body = {"title": title, "description": description}
        return self._request("PUT", f"/decks/{deck_id}", json=body)["deck"]

    def delete_deck(self, deck_id: str) -> None:
        self._request("DELETE", f"/decks/{deck_id}")

    # --- Cards ---

    def list_cards(self, deck_id: str) -> list[dict]:
        return self._request("GET", f"/decks/{deck_id}/cards")["cards"]

    def create_card(self, deck_id: str, front: str, back: str) -> dict:
        body = {"front": front, "back": back}
        return self._request("POST", f"/decks/{deck_id}/cards", json=body)["card"]

    def update_card(self, deck_id: str, card_id: str, front: str, back: str) -> dict:
        body = {"front": front, "back": back}
        return self._request("PUT", f"/decks/{deck_id}/cards/{card_id}", json=body)["card"]

    def delete_card(self, deck_id: str, card_id: str) -> None:
        self._request("DELETE", f"/decks/{deck_id}/cards/{card_id}")

    # --- Review ---

    def start_review(self, deck_id: str, rng: random.Random | None = None) -> ReviewSession:
        cards = [Card(**c) for c in self.list_cards(deck_id)]
        return ReviewSession(cards, rng=rng)

    def health(self) -> dict:
        res = self._http.get("/health")
        return res.json()
