"""Deck endpoints: identity header, validation, ownership scoping, ordering."""
import aiosqlite

from conftest import SYSTEM, device


# ── Identity ──────────────────────────────────────────────────

class TestDeviceId:
    def test_missing_header_is_rejected(self, client):
        res = client.get("/decks")
        assert res.status_code == 400
        assert res.json() == {"error": "Missing device id"}

    def test_blank_header_is_rejected(self, client):
        res = client.get("/decks", headers=device("   "))
        assert res.status_code == 400
        assert res.json()["error"] == "Missing device id"

    def test_every_deck_endpoint_requires_header(self, client, make_deck):
        deck = make_deck("device-A")
        for method, url in [
            ("POST", "/decks"),
            ("GET", f"/decks/{deck['id']}"),
            ("PUT", f"/decks/{deck['id']}"),
            ("DELETE", f"/decks/{deck['id']}"),
        ]:
            res = client.request(method, url, json={"title": "x"})
            assert res.status_code == 400, (method, url)


# ── Create / get / update ────────────────────────────────────

class TestCreate:
    def test_create_trims_title_and_defaults_color(self, client):
        res = client.post("/decks", json={"title": "  French Basics  "}, headers=device("device-A"))
        assert res.status_code == 201
        deck = res.json()["deck"]
        assert deck["title"] == "French Basics"
        assert deck["device_id"] == "device-A"
        assert deck["color"] == "#6B4EFF"
        assert deck["description"] is None
        assert deck["card_count"] == 0
        assert deck["is_starter"] is False

    def test_create_keeps_description_and_color(self, client):
        res = client.post(
            "/decks",
            json={"title": "Capitals", "description": "Europe", "color": "#000000"},
            headers=device("device-A"),
        )
        deck = res.json()["deck"]
        assert deck["description"] == "Europe"
        assert deck["color"] == "#000000"

    def test_only_missing_color_gets_default(self, client):
        res = client.post(
            "/decks", json={"title": "Blank", "color": ""}, headers=device("device-A")
        )
        assert res.json()["deck"]["color"] == ""
        res = client.post(
            "/decks", json={"title": "Null", "color": None}, headers=device("device-A")
        )
        assert res.json()["deck"]["color"] == "#6B4EFF"

    def test_empty_title_rejected(self, client, raw):
        for body in ({}, {"title": ""}, {"title": "   "}, {"title": None}):
            res = client.post("/decks", json=body, headers=device("device-A"))
            assert res.status_code == 400
            assert res.json() == {"error": "Title required"}
        assert raw("SELECT * FROM decks") == []

    def test_malformed_body_is_client_error(self, client):
        res = client.post(
            "/decks",
            content="not json",
            headers={**device("device-A"), "Content-Type": "application/json"},
        )
        assert res.status_code == 400
        assert res.json() == {"error": "Invalid request body"}

    def test_system_identity_cannot_create(self, client, raw):
        res = client.post("/decks", json={"title": "Sneaky"}, headers=device(SYSTEM))
        assert res.status_code == 400
        assert raw("SELECT * FROM decks") == []


class TestRoundTrip:
    def test_create_get_update_get(self, client, make_deck):
        deck = make_deck("device-A", "Old", description="first")
        got = client.get(f"/decks/{deck['id']}", headers=device("device-A")).json()["deck"]
        assert got["id"] == deck["id"]

        res = client.put(
            f"/decks/{deck['id']}",
            json={"title": " New ", "description": "second"},
            headers=device("device-A"),
        )
        assert res.status_code == 200
        assert res.json()["deck"]["title"] == "New"

        got = client.get(f"/decks/{deck['id']}", headers=device("device-A")).json()["deck"]
        assert got["id"] == deck["id"]
        assert got["title"] == "New"
        assert got["description"] == "second"
        assert got["created_at"] == deck["created_at"]

    def test_update_without_description_clears_it(self, client, make_deck):
        deck = make_deck("device-A", description="to be cleared")
        res = client.put(f"/decks/{deck['id']}", json={"title": "T"}, headers=device("device-A"))
        assert res.json()["deck"]["description"] is None

    def test_update_empty_title_rejected(self, client, make_deck):
        deck = make_deck("device-A", "Keep")
        res = client.put(f"/decks/{deck['id']}", json={"title": " "}, headers=device("device-A"))
        assert res.status_code == 400
        got = client.get(f"/decks/{deck['id']}", headers=device("device-A")).json()["deck"]
        assert got["title"] == "Keep"

    def test_get_reports_card_count(self, client, make_deck, make_card):
        deck = make_deck("device-A")
        make_card("device-A", deck["id"], "a", "b")
        make_card("device-A", deck["id"], "c", "d")
        got = client.get(f"/decks/{deck['id']}", headers=device("device-A")).json()["deck"]
        assert got["card_count"] == 2


# ── Ownership ─────────────────────────────────────────────────

class TestOwnership:
    def test_other_caller_gets_not_found(self, client, make_deck):
        deck = make_deck("device-A", "Private")
        url = f"/decks/{deck['id']}"
        other = device("device-B")

        assert client.get(url, headers=other).status_code == 404
        assert client.put(url, json={"title": "Mine"}, headers=other).status_code == 404
        assert client.delete(url, headers=other).status_code == 404

        got = client.get(url, headers=device("device-A")).json()["deck"]
        assert got["title"] == "Private"

    def test_not_found_matches_missing_deck(self, client, make_deck):
        deck = make_deck("device-A")
        hidden = client.get(f"/decks/{deck['id']}", headers=device("device-B"))
        missing = client.get("/decks/does-not-exist", headers=device("device-B"))
        assert hidden.status_code == missing.status_code == 404
        assert hidden.json() == missing.json()

    def test_owner_can_delete(self, client, make_deck):
        deck = make_deck("device-A")
        res = client.delete(f"/decks/{deck['id']}", headers=device("device-A"))
        assert res.status_code == 200
        assert res.json() == {"success": True}
        assert client.get(f"/decks/{deck['id']}", headers=device("device-A")).status_code == 404
        assert client.delete(f"/decks/{deck['id']}", headers=device("device-A")).status_code == 404


class TestStarterDecks:
    def _starters(self, client, caller):
        decks = client.get("/decks", headers=device(caller)).json()["decks"]
        return [d for d in decks if d["is_starter"]]

    def test_any_caller_reads_starters(self, seeded_client):
        for caller in ("device-A", "device-B"):
            starters = self._starters(seeded_client, caller)
            assert len(starters) == 3
            assert all(d["device_id"] == SYSTEM for d in starters)
            deck_id = starters[0]["id"]
            res = seeded_client.get(f"/decks/{deck_id}", headers=device(caller))
            assert res.status_code == 200
            assert res.json()["deck"]["card_count"] > 0

    def test_nobody_writes_starters(self, seeded_client):
        deck = self._starters(seeded_client, "device-A")[0]
        url = f"/decks/{deck['id']}"
        for caller in ("device-A", SYSTEM):
            assert seeded_client.put(url, json={"title": "Hacked"}, headers=device(caller)).status_code == 404
            assert seeded_client.delete(url, headers=device(caller)).status_code == 404
        got = seeded_client.get(url, headers=device("device-A")).json()["deck"]
        assert got["title"] == deck["title"]


# ── Listing ───────────────────────────────────────────────────

class TestListing:
    def test_list_is_own_plus_starters_in_order(self, seeded_client):
        def create(owner, title):
            res = seeded_client.post("/decks", json={"title": title}, headers=device(owner))
            return res.json()["deck"]["id"]

        a1 = create("device-A", "A1")
        create("device-B", "B1")
        a2 = create("device-A", "A2")
        a3 = create("device-A", "A3")

        decks = seeded_client.get("/decks", headers=device("device-A")).json()["decks"]
        titles = [d["title"] for d in decks]

        assert titles[:3] == ["German Basic Greetings", "Spanish Travel", "French Greetings"]
        assert [d["id"] for d in decks[3:]] == [a3, a2, a1]
        assert "B1" not in titles

        starters_first = [d["is_starter"] for d in decks]
        assert starters_first == sorted(starters_first, reverse=True)

    def test_list_includes_card_counts(self, client, make_deck, make_card):
        deck = make_deck("device-A")
        make_card("device-A", deck["id"], "q", "a")
        decks = client.get("/decks", headers=device("device-A")).json()["decks"]
        assert decks == [{**deck, "card_count": 1}]

    def test_empty_list(self, client):
        res = client.get("/decks", headers=device("device-A"))
        assert res.status_code == 200
        assert res.json() == {"decks": []}


# ── Store failures ────────────────────────────────────────────

def test_store_error_is_generic_500(client, monkeypatch):
    async def broken(db, caller_id):
        raise aiosqlite.OperationalError("disk I/O error")

    monkeypatch.setattr("flashy.routers.decks.list_decks", broken)
    res = client.get("/decks", headers=device("device-A"))
    assert res.status_code == 500
    assert res.json() == {"error": "Database error"}
