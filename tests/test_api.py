"""
Tests for the FastAPI Application

Every test points DATA_DIR at its own temporary directory, so the
store starts empty and a test generates the data it needs.

Run with: pytest tests/test_api.py -v
"""

import json

import pytest
from fastapi.testclient import TestClient

from api.main import app

GENERATE_PAYLOAD = {
    "components": ["Generator", "Rotor"],
    "turbine_ids": [1, 2],
    "years": 3,
    "seed": 7,
    "end_date": "2024-01-01",
}


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def client(data_dir):
    return TestClient(app)


@pytest.fixture
def generated(client):
    response = client.post("/api/v1/generate", json=GENERATE_PAYLOAD)
    assert response.status_code == 201
    return response.json()


class TestSystemEndpoints:
    """Test root, health and probes."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["api_base"] == "/api/v1"

    def test_live(self, client):
        assert client.get("/live").json() == {"alive": True}

    def test_health_without_data(self, client):
        data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["data_store"] == "empty"

    def test_health_after_generation(self, client, generated):
        data = client.get("/health").json()

        assert data["status"] == "ok"
        assert data["data_store"] == "healthy"

    def test_ready_without_data(self, client):
        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["error"] is True

    def test_ready_after_generation(self, client, generated):
        assert client.get("/ready").json() == {"ready": True}


class TestGeneration:
    """Test the generation trigger and metadata."""

    def test_metadata_missing(self, client):
        response = client.get("/api/v1/metadata")

        assert response.status_code == 404
        assert response.json()["status_code"] == 404

    def test_generate(self, generated):
        assert generated["success"] is True
        assert generated["files_written"] == 4
        assert generated["metadata"]["total_days"] == 1095
        assert generated["metadata"]["start_date"] == "2021-01-01"
        assert generated["validation_status"] in ("accepted", "accepted_with_warnings")

    def test_generate_writes_files(self, data_dir, generated):
        metadata = json.loads((data_dir / "metadata.json").read_text())

        assert metadata["turbineIds"] == [1, 2]
        assert (data_dir / "turbine2.json").exists()
        assert (data_dir / "events.json").exists()

    def test_metadata_after_generation(self, client, generated):
        data = client.get("/api/v1/metadata").json()

        assert data["end_date"] == "2024-01-01"
        assert data["components"] == ["Generator", "Rotor"]

    def test_duplicate_components_rejected(self, client):
        payload = dict(GENERATE_PAYLOAD, components=["Rotor", "rotor"])
        response = client.post("/api/v1/generate", json=payload)

        assert response.status_code == 400

    def test_invalid_years(self, client):
        payload = dict(GENERATE_PAYLOAD, years=0)
        assert client.post("/api/v1/generate", json=payload).status_code == 422

    def test_regenerate_with_fewer_turbines(self, client, data_dir, generated):
        payload = dict(GENERATE_PAYLOAD, turbine_ids=[1], end_date="2023-01-01", years=1)
        assert client.post("/api/v1/generate", json=payload).status_code == 201

        assert not (data_dir / "turbine2.json").exists()
        assert client.get("/api/v1/series/2/rotor").json()["points"] == []
        assert client.get("/api/v1/series/2").json()["components"] == []

    def test_patterns(self, client):
        patterns = client.get("/api/v1/patterns").json()["patterns"]

        assert [p["severity"] for p in patterns] == ["maintenance", "minor", "major"]
        assert patterns[2]["event_kind"] == "alarm"


class TestSeriesEndpoints:
    """Test chart data."""

    def test_series_without_data(self, client):
        response = client.get("/api/v1/series/1/generator")

        assert response.status_code == 200
        assert response.json()["points"] == []
        assert response.json()["message"] == "No generated data available"

    def test_turbine_components(self, client, generated):
        data = client.get("/api/v1/series/1").json()

        assert data["components"] == ["generator", "rotor"]
        assert data["total_days"] == 1095

    def test_unknown_turbine_components(self, client, generated):
        assert client.get("/api/v1/series/9").json()["components"] == []

    def test_default_monthly_view(self, client, generated):
        data = client.get("/api/v1/series/1/generator").json()

        assert data["granularity"] == "month"
        assert data["point_count"] == 36
        assert data["points"][0]["date"] == "2021-01-15"

    def test_yearly_view(self, client, generated):
        data = client.get("/api/v1/series/1/Generator", params={"granularity": "year"}).json()

        assert [p["date"] for p in data["points"]] == ["2021-07-01", "2022-07-01", "2023-07-01"]

    def test_explicit_range(self, client, generated):
        params = {"start": "2022-03-01", "end": "2022-03-10", "granularity": "day"}
        data = client.get("/api/v1/series/2/rotor", params=params).json()

        assert data["point_count"] == 10
        assert data["points"][0]["date"] == "2022-03-01"
        assert data["points"][-1]["date"] == "2022-03-10"

    def test_week_preset(self, client, generated):
        data = client.get("/api/v1/series/1/generator", params={"preset": "week"}).json()

        assert data["granularity"] == "day"
        assert data["point_count"] == 7

    def test_preset_granularity_override(self, client, generated):
        params = {"preset": "all", "granularity": "year"}
        data = client.get("/api/v1/series/1/generator", params=params).json()

        assert data["granularity"] == "year"
        assert data["point_count"] == 3

    def test_markers_belong_to_selection(self, client, generated):
        data = client.get("/api/v1/series/2/rotor").json()

        for event in data["alarms"] + data["warnings"]:
            assert event["turbine_id"] == 2
            assert event["component"] == "Rotor"
        assert all(e["kind"] == "alarm" for e in data["alarms"])

    def test_unknown_component(self, client, generated):
        data = client.get("/api/v1/series/1/gearbox").json()

        assert data["points"] == []
        assert data["message"] is not None

    def test_end_before_start(self, client, generated):
        params = {"start": "2022-03-10", "end": "2022-03-01"}
        response = client.get("/api/v1/series/1/generator", params=params)

        assert response.status_code == 400

    def test_invalid_granularity(self, client, generated):
        response = client.get("/api/v1/series/1/generator", params={"granularity": "hour"})
        assert response.status_code == 422

    def test_undecodable_metadata_file(self, client, data_dir):
        (data_dir / "metadata.json").write_bytes(b'{"startDate": "\xff\xfe"}')

        response = client.get("/api/v1/metadata")

        assert response.status_code == 422
        assert response.json()["error"] is True

    def test_malformed_turbine_file(self, client, data_dir, generated):
        (data_dir / "turbine1.json").write_text("{broken")

        assert client.get("/api/v1/series/1/generator").status_code == 422
        assert client.get("/api/v1/series/2/generator").status_code == 200
        assert client.get("/api/v1/metadata").status_code == 200


class TestEventEndpoints:
    """Test event queries."""

    def test_events_without_data(self, client):
        assert client.get("/api/v1/events").json() == {
            "count": 0,
            "alarm_count": 0,
            "warning_count": 0,
            "events": [],
        }

    def test_event_counts(self, client, generated):
        data = client.get("/api/v1/events").json()

        assert data["count"] == generated["alarms"] + generated["warnings"]
        assert data["alarm_count"] == generated["alarms"]
        assert data["warning_count"] == generated["warnings"]

    def test_events_sorted_by_date(self, client, generated):
        dates = [e["date"] for e in client.get("/api/v1/events").json()["events"]]
        assert dates == sorted(dates)

    def test_kind_filter(self, client, generated):
        data = client.get("/api/v1/events", params={"kind": "alarm"}).json()

        assert data["warning_count"] == 0
        assert all(e["kind"] == "alarm" for e in data["events"])

    def test_turbine_and_component_filter(self, client, generated):
        params = {"turbine_id": 1, "component": "generator"}
        events = client.get("/api/v1/events", params=params).json()["events"]

        assert all(e["turbine_id"] == 1 and e["component"] == "Generator" for e in events)
