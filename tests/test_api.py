"""Tests for the FastAPI surface: auth, error mapping, response shape."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from backend.core.interfaces import GameLogEntry
from backend.main import app, get_evaluator, get_repository
from backend.services.box_scores import InMemoryGameLogRepository

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}


def _games(orb, drb, rebs):
    start = date(2025, 1, 2)
    return [
        GameLogEntry(game_date=start + timedelta(days=4 * i), orb=o, drb=d, rebs=r,
                     opponent=f"Opp {i}", minutes=30.0, starter=True)
        for i, (o, d, r) in enumerate(zip(orb, drb, rebs))
    ]


@pytest.fixture
def repo():
    return InMemoryGameLogRepository({
        "Johni Broome": _games([3, 4, 5], [6, 7, 8], [9, 11, 13]),
        "Chaz Lanier": _games([None, None], [2, 3], [2, 3]),
    })


@pytest.fixture
def client(repo, monkeypatch):
    monkeypatch.setenv("API_KEY_USER1", API_KEY)
    for i in range(2, 6):
        monkeypatch.delenv(f"API_KEY_USER{i}", raising=False)

    app.dependency_overrides[get_repository] = lambda: repo
    app.state.repository = repo
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.repository = None


class TestPublicEndpoints:

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["app"] == "Rebound Edge"

    def test_health_reports_athletes(self, client):
        r = client.get("/health")
        assert r.json() == {"status": "healthy", "athletes_loaded": 2}


class TestAuth:

    def test_missing_key(self, client):
        r = client.post("/api/rebounds/evaluate", json={"athlete": "Johni Broome", "threshold": 10})
        assert r.status_code == 401

    def test_wrong_key(self, client):
        r = client.get("/api/athletes", headers={"X-API-Key": "nope"})
        assert r.status_code == 401

    def test_dev_key_in_development(self, client, monkeypatch):
        monkeypatch.delenv("API_KEY_USER1")
        monkeypatch.setenv("ENVIRONMENT", "development")
        r = client.get("/api/athletes", headers={"X-API-Key": "dev-key-insecure"})
        assert r.status_code == 200

    def test_no_keys_configured(self, client, monkeypatch):
        monkeypatch.delenv("API_KEY_USER1")
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        r = client.get("/api/athletes", headers=HEADERS)
        assert r.status_code == 503


class TestAthletes:

    def test_search(self, client):
        r = client.get("/api/athletes", params={"q": "BROOME"}, headers=HEADERS)
        assert r.status_code == 200
        assert r.json() == {"query": "BROOME", "total": 1, "athletes": ["Johni Broome"]}

    def test_search_limit(self, client):
        r = client.get("/api/athletes", params={"limit": 1}, headers=HEADERS)
        body = r.json()
        assert body["total"] == 2
        assert body["athletes"] == ["Chaz Lanier"]

    def test_game_log(self, client):
        r = client.get("/api/athletes/Johni Broome/games", headers=HEADERS)
        assert r.status_code == 200
        games = r.json()["games"]
        assert [g["rebs"] for g in games] == [9, 11, 13]
        assert games[0]["game_date"] == "2025-01-02"
        assert games[0]["orb"] == 3

    def test_game_log_unknown(self, client):
        r = client.get("/api/athletes/Nobody/games", headers=HEADERS)
        assert r.status_code == 404
        assert r.json()["error"] == "athlete_not_found"


class TestEvaluate:

    def test_full_result(self, client):
        r = client.post(
            "/api/rebounds/evaluate",
            json={"athlete": "Johni Broome", "threshold": 10, "sportsbook_odds": -120},
            headers=HEADERS,
        )
        assert r.status_code == 200
        body = r.json()
        prob = body["probability"]
        assert prob["threshold"] == 10
        assert prob["max_trb_considered"] == 23
        assert prob["rates"] == {"lambda_orb": 4.0, "lambda_drb": 7.0}
        assert 0 < prob["probability"] < 1
        assert [g["met_threshold"] for g in prob["games"]] == [False, True, True]
        assert body["odds"]["decimal_odds"] == pytest.approx(1 / prob["probability"])
        assert body["stake"]["sportsbook_american_odds"] == -120
        assert body["stake"]["implied_probability"] == pytest.approx(120 / 220)

    def test_without_quote(self, client):
        r = client.post(
            "/api/rebounds/evaluate",
            json={"athlete": "Johni Broome", "threshold": 10},
            headers=HEADERS,
        )
        assert r.status_code == 200
        assert r.json()["stake"] is None

    def test_unknown_athlete_is_404(self, client):
        r = client.post(
            "/api/rebounds/evaluate",
            json={"athlete": "Nobody", "threshold": 5},
            headers=HEADERS,
        )
        assert r.status_code == 404
        assert "not found" in r.json()["message"]

    def test_insufficient_data_is_422(self, client):
        r = client.post(
            "/api/rebounds/evaluate",
            json={"athlete": "Chaz Lanier", "threshold": 2},
            headers=HEADERS,
        )
        assert r.status_code == 422
        assert r.json()["error"] == "insufficient_data"

    def test_undefined_odds_is_422(self, client):
        r = client.post(
            "/api/rebounds/evaluate",
            json={"athlete": "Johni Broome", "threshold": 40},
            headers=HEADERS,
        )
        assert r.status_code == 422
        assert r.json()["error"] == "undefined_odds"

    @pytest.mark.parametrize("payload", [
        {"athlete": "Johni Broome", "threshold": 0},
        {"athlete": "Johni Broome", "threshold": 9.5},
        {"athlete": "Johni Broome", "threshold": "10"},
        {"athlete": "   ", "threshold": 10},
        {"athlete": "Johni Broome", "threshold": 10, "sportsbook_odds": 0},
    ])
    def test_request_validation(self, client, payload):
        r = client.post("/api/rebounds/evaluate", json=payload, headers=HEADERS)
        assert r.status_code == 422

    @pytest.mark.parametrize("quote", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_quote_is_422(self, client, quote):
        # NaN / Infinity are not strict JSON, so send the literal body
        body = '{"athlete": "Johni Broome", "threshold": 10, "sportsbook_odds": %s}' % quote
        r = client.post(
            "/api/rebounds/evaluate",
            content=body,
            headers={**HEADERS, "Content-Type": "application/json"},
        )
        assert r.status_code == 422

    def test_plain_value_error_is_422(self, client):
        class _Broken:
            def evaluate(self, athlete, threshold, sportsbook_odds=None):
                raise ValueError("probability must be in [0, 1], got 1.5.")

        app.dependency_overrides[get_evaluator] = lambda: _Broken()
        r = client.post(
            "/api/rebounds/evaluate",
            json={"athlete": "Johni Broome", "threshold": 10},
            headers=HEADERS,
        )
        assert r.status_code == 422
        assert r.json() == {
            "error": "invalid_input",
            "message": "probability must be in [0, 1], got 1.5.",
        }
