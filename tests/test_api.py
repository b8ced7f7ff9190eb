"""
Tests for the HTTP API.

Routes run against a temporary SQLite database; the API key is patched onto
the config module so verify_api_key sees it at request time.
"""

import sqlite3
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_mapping_store
from api.main import app
from core import config
from core.database import MappingStore, create_tables, get_connection

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "api.db"
    conn = get_connection(path)
    create_tables(conn)
    conn.close()
    monkeypatch.setattr(config, "DB_PATH", path)
    return path


@pytest.fixture
def client(db_path, monkeypatch):
    monkeypatch.setattr(config, "PET_SCHEDULE_API_KEY", API_KEY)
    app.dependency_overrides[get_mapping_store] = lambda: MappingStore(db_path)
    yield TestClient(app)
    app.dependency_overrides.clear()


def entry_json(entry_id, title, start, end, **extra):
    return {"id": entry_id, "title": title, "start": start, "end": end, **extra}


CLIENTS = [
    {"id": "c1", "name": "Johnson Family", "pets": [{"name": "Max"}]},
    {"id": "c2", "name": "Smith", "pets": [{"name": "Tucker"}]},
]


class TestHealthAndAuth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == config.API_VERSION

    def test_health_without_database(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "DB_PATH", tmp_path / "missing.db")
        response = TestClient(app).get("/health")
        assert response.status_code == 503
        assert response.json()["database_available"] is False

    def test_missing_key(self, client):
        response = client.post("/v1/entries/classify", json={"entries": []})
        assert response.status_code == 422

    def test_wrong_key(self, client):
        response = client.post(
            "/v1/entries/classify", json={"entries": []}, headers={"X-API-Key": "nope"}
        )
        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "UNAUTHORIZED"

    def test_unconfigured_key(self, client, monkeypatch):
        monkeypatch.setattr(config, "PET_SCHEDULE_API_KEY", "")
        response = client.post("/v1/entries/classify", json={"entries": []}, headers=HEADERS)
        assert response.status_code == 500


class TestEntries:
    def test_classify(self, client, db_path):
        payload = {
            "entries": [
                entry_json("1", "Fluffy - 30", "2024-01-08T09:00:00", "2024-01-08T09:30:00"),
                entry_json("2", "Tucker - HS", "2024-01-08T09:00:00-05:00", "2024-01-09T09:00:00-05:00"),
                entry_json("3", "Dentist", "2024-01-08T13:00:00", "2024-01-08T14:00:00"),
            ]
        }

        response = client.post("/v1/entries/classify", json=payload, headers=HEADERS)

        assert response.status_code == 200
        fluffy, tucker, dentist = response.json()
        assert fluffy["service_type"] == "drop-in"
        assert fluffy["extracted_client_label"] == "Fluffy"
        assert tucker["is_overnight"] is True
        assert tucker["service_duration_minutes"] == 1440
        assert dentist["is_work"] is False

        conn = sqlite3.connect(db_path)
        try:
            row = conn.execute("SELECT endpoint, status_code, item_count FROM api_requests").fetchone()
        finally:
            conn.close()
        assert row == ("/v1/entries/classify", 200, 3)


class TestWorkload:
    ENTRIES = [
        entry_json("1", "Walk Rex 60", "2024-01-08T09:00:00", "2024-01-08T10:00:00", location="12 Oak"),
        entry_json("2", "Fluffy - 30", "2024-01-08T11:00:00", "2024-01-08T11:30:00", location="12 Oak"),
    ]

    def test_daily(self, client):
        payload = {
            "date": "2024-01-08",
            "entries": self.ENTRIES,
            "options": {"include_travel_time": True, "travel_minutes_per_leg": 10},
        }

        response = client.post("/v1/workload/daily", json=payload, headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["work_minutes"] == 90
        assert body["travel_minutes"] == 30
        assert body["event_count"] == 2

    def test_inverted_range(self, client):
        payload = {"start_date": "2024-01-10", "end_date": "2024-01-08", "entries": []}

        response = client.post("/v1/workload/range", json=payload, headers=HEADERS)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["code"] == "VALIDATION_ERROR"
        assert detail["details"] == ["Start date 2024-01-10 must not be after end date 2024-01-08"]

    def test_summary(self, client):
        payload = {
            "period": "weekly",
            "reference_date": "2024-01-10",
            "entries": self.ENTRIES,
            "options": {"include_travel_time": False},
        }

        response = client.post("/v1/workload/summary", json=payload, headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["start_date"] == "2024-01-07"
        assert body["total_work_hours"] == 1.5
        assert body["busiest_day"]["date"] == "2024-01-08"
        assert len(body["metrics"]) == 7

    def test_warnings(self, client):
        payload = {
            "date": "2024-01-08",
            "entries": self.ENTRIES,
            "options": {"include_travel_time": False},
            "limits": {"max_visits_per_day": 2},
        }

        response = client.post("/v1/workload/warnings", json=payload, headers=HEADERS)

        assert response.status_code == 200
        assert [(w["kind"], w["severity"]) for w in response.json()] == [
            ("daily-visit-count", "critical")
        ]


class TestVisits:
    CONFIG = {
        "client_label": "Fluffy",
        "start_date": "2024-01-08",
        "end_date": "2024-01-09",
        "visits": [{"time": "10:00", "template_id": "t1"}],
    }
    TEMPLATES = [{"id": "t1", "name": "Visit", "duration_minutes": 60}]

    def test_validate(self, client):
        config_json = {**self.CONFIG, "client_label": "", "visits": []}

        response = client.post("/v1/visits/validate", json=config_json, headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is False
        assert len(body["errors"]) == 2

    def test_generate_with_conflict(self, client):
        payload = {
            "config": self.CONFIG,
            "templates": self.TEMPLATES,
            "existing": [entry_json("x", "Dentist", "2024-01-08T10:30:00", "2024-01-08T11:30:00")],
        }

        response = client.post("/v1/visits/generate", json=payload, headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert len(body["entries"]) == 2
        assert body["summary"]["total_minutes"] == 120
        assert len(body["conflicts"]) == 1
        assert body["conflicts"][0]["existing"]["id"] == "x"
        assert body["preview"].startswith("Mon, Jan 8:")

    def test_generate_invalid_config(self, client):
        payload = {"config": {**self.CONFIG, "end_date": "2024-01-01"}, "templates": self.TEMPLATES}

        response = client.post("/v1/visits/generate", json=payload, headers=HEADERS)

        assert response.status_code == 422
        assert response.json()["detail"]["details"] == [
            "Start date 2024-01-08 must not be after end date 2024-01-01"
        ]


class TestClients:
    def test_suggest(self, client):
        payload = {"title": "Max - 30", "label": "Max", "clients": CLIENTS}

        response = client.post("/v1/clients/suggest", json=payload, headers=HEADERS)

        assert response.status_code == 200
        (suggestion,) = response.json()
        assert suggestion["client_id"] == "c1"
        assert suggestion["confidence"] >= 0.6

    def test_mapping_lifecycle(self, client):
        response = client.put(
            "/v1/clients/mappings", json={"label": "Max", "client_id": "c2"}, headers=HEADERS
        )
        assert response.status_code == 200
        assert response.json()["mapping_count"] == 1

        response = client.get("/v1/clients/mappings/max", headers=HEADERS)
        assert response.json()["client_id"] == "c2"

        payload = {"title": "Max - 30", "label": "Max", "clients": CLIENTS}
        suggestions = client.post("/v1/clients/suggest", json=payload, headers=HEADERS).json()
        assert [s["source"] for s in suggestions] == ["existing-mapping", "auto-match"]

        response = client.delete("/v1/clients/c2/mappings", headers=HEADERS)
        assert response.json()["mapping_count"] == 0

        response = client.get("/v1/clients/mappings/max", headers=HEADERS)
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "CLIENT_NOT_FOUND"

    def test_remove_mapping(self, client):
        client.put("/v1/clients/mappings", json={"label": "Bella", "client_id": "c1"}, headers=HEADERS)

        response = client.delete("/v1/clients/mappings/Bella", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["mapping_count"] == 0

    def test_mapping_store_calls_run_off_the_event_loop(self, client, monkeypatch):
        offloaded = []

        async def to_thread(func, *args, **kwargs):
            offloaded.append(func.__name__)
            return func(*args, **kwargs)

        monkeypatch.setattr("api.routes.clients.asyncio", SimpleNamespace(to_thread=to_thread))

        response = client.put(
            "/v1/clients/mappings", json={"label": "Max", "client_id": "c2"}, headers=HEADERS
        )

        assert response.status_code == 200
        assert offloaded == ["load", "set_mapping"]
