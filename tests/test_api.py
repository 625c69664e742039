"""Tests for the HTTP API."""

import time
import pytest
from fastapi.testclient import TestClient

from shiftplanner.config import Settings
from shiftplanner.main import create_app
from shiftplanner.services import singleton
from shiftplanner.services.optimization_service import OptimizationService


@pytest.fixture
def client(monkeypatch):
    """Test client backed by a fresh service."""
    settings = Settings(LOG_FILE="", HISTORY_FILE=None, EXPENSES_CSV=None, DEPOSITS_CSV=None, SHIFT_TYPES_CSV=None)
    monkeypatch.setattr(singleton, "_optimization_service", OptimizationService(settings))
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def example_payload():
    return {
        "config": {
            "starting_balance": 1000.0,
            "target_ending_balance": 1200.0,
            "minimum_balance": 500.0,
            "population_size": 30,
            "generations": 50,
            "seed": 42,
        },
        "shift_types": {"large": {"net": 86.5}},
    }


def wait_for_status(client, expected, timeout=30.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        status = client.get("/api/status").json()
        if status["status"] == expected:
            return status
        time.sleep(0.05)
    raise AssertionError(f"Status never reached {expected}")


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_optimize(client, example_payload):
    """Test the synchronous optimize endpoint."""
    response = client.post("/api/optimize", json=example_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["error"] is None
    assert body["result"]["violations"] == 0
    assert len(body["result"]["schedule"]) == 30
    assert set(body["performance_metrics"]) == {"start_time", "end_time", "total_time"}


def test_optimize_infeasible_constraint(client, example_payload):
    """Test that infeasible constraints come back as an unsuccessful result."""
    example_payload["config"]["manual_constraints"] = [{"day": 31, "shifts": []}]

    body = client.post("/api/optimize", json=example_payload).json()

    assert body["success"] is False
    assert body["result"] is None
    assert "31" in body["error"]


def test_optimize_invalid_payload(client):
    """Test request validation."""
    response = client.post("/api/optimize", json={"config": {"starting_balance": "lots"}})
    assert response.status_code == 422


def test_result_before_any_run(client):
    """Test that there is no result before a run."""
    assert client.get("/api/result").status_code == 404


def test_controls_without_run(client):
    """Test that pause/resume/cancel need a run in progress."""
    for action in ("pause", "resume", "cancel"):
        response = client.post(f"/api/{action}")
        assert response.status_code == 400


def test_status_idle(client):
    """Test status before any run."""
    body = client.get("/api/status").json()
    assert body["status"] == "idle"
    assert body["progress"] is None


def test_background_run(client, example_payload):
    """Test starting a background run and reading its result and history."""
    response = client.post("/api/start", json=example_payload)
    assert response.status_code == 200
    assert response.json() == {"message": "Optimization started", "status": "running"}

    status = wait_for_status(client, "completed")
    assert status["progress"]["generation"] >= 1

    result = client.get("/api/result")
    assert result.status_code == 200
    assert result.json()["result"]["violations"] == 0

    history = client.get("/api/history", params={"limit": 5}).json()
    assert len(history["generations"]) == 5
    assert history["total_generations"] >= 5

    everything = client.get("/api/history", params={"limit": 0}).json()
    assert len(everything["generations"]) == everything["total_generations"]


def test_background_run_clamp_warning(client, example_payload):
    """Test that clamped config values are reported in the status."""
    example_payload["config"]["minimum_balance"] = 5000.0
    example_payload["config"]["generations"] = 5
    client.post("/api/start", json=example_payload)

    status = wait_for_status(client, "completed")

    assert any("minimum_balance" in warning for warning in status["warnings"])


def test_optimize_accepts_camel_case(client):
    """Test that the optimize endpoint takes camelCase request keys."""
    payload = {
        "config": {
            "startingBalance": 1000.0,
            "targetEndingBalance": 1000.0,
            "minimumBalance": 0.0,
            "populationSize": 10,
            "generations": 3,
            "seed": 5,
            "manualConstraints": {"2": {"shifts": "large"}},
        },
        "shiftTypes": {"large": {"net": 86.5}},
    }
    body = client.post("/api/optimize", json=payload).json()

    assert body["success"] is True
    assert body["result"]["genome"][1] == ["large"]


def test_schedule_constraints_endpoint(client):
    """Test turning edits into manual constraints over HTTP."""
    response = client.post("/api/schedule/constraints", json={
        "edits": [
            {"day": 4, "field": "earnings", "newValue": 86.5},
            {"day": 9, "field": "expenses", "new_value": 12.0},
        ],
    })

    assert response.status_code == 200
    assert response.json()["constraints"] == [
        {"day": 4, "shifts": ["large"], "fixed_expenses": None, "fixed_balance": None},
        {"day": 9, "shifts": None, "fixed_expenses": 12.0, "fixed_balance": None},
    ]


def test_schedule_constraints_bad_amount(client):
    """Test that a non-numeric edit is a client error."""
    response = client.post("/api/schedule/constraints", json={
        "edits": [{"day": 4, "field": "balance", "newValue": "soon"}],
    })
    assert response.status_code == 400


def test_schedule_validate_endpoint(client, example_payload):
    """Test re-checking an optimized schedule over HTTP."""
    result = client.post("/api/optimize", json=example_payload).json()["result"]

    response = client.post("/api/schedule/validate", json={
        "schedule": result["schedule"],
        "config": example_payload["config"],
    })

    assert response.status_code == 200
    body = response.json()
    assert body["is_valid"] is True
    assert body["violations"] == []
    assert body["metrics"]["total_work_days"] == len(result["work_days"])
