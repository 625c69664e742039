"""Tests for the optimization service."""

import json
import time
import pytest

from shiftplanner.config import Settings
from shiftplanner.models import ManualConstraint, OptimizationConfig, StartCommand
from shiftplanner.optimizer.config import FAST_CONFIG, GeneticConfig
from shiftplanner.services.optimization_service import OptimizationService


def wait_until(predicate, timeout=30.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return False


@pytest.fixture
def settings():
    """Settings without files or environment defaults."""
    return Settings(
        LOG_FILE="",
        HISTORY_FILE=None,
        EXPENSES_CSV=None,
        DEPOSITS_CSV=None,
        SHIFT_TYPES_CSV=None,
        DEFAULT_POPULATION_SIZE=20,
        DEFAULT_GENERATIONS=15,
    )


@pytest.fixture
def service(settings):
    """Create a service and shut it down afterwards."""
    service = OptimizationService(settings)
    yield service
    service.shutdown()


def test_build_start_command_defaults(service):
    """Test that omitted sizing comes from settings."""
    config = OptimizationConfig(
        starting_balance=1000.0,
        target_ending_balance=1200.0,
        minimum_balance=500.0,
    )
    command = service.build_start_command(config)

    assert command.config.population_size == 20
    assert command.config.generations == 15
    assert command.expenses == []
    assert command.shift_types is None


def test_build_start_command_keeps_explicit_sizing(service, example_config):
    """Test that explicit sizing is kept."""
    command = service.build_start_command(example_config)

    assert command.config.population_size == 30
    assert command.config.generations == 50


def test_build_start_command_csv_tables(settings, example_config, tmp_path):
    """Test that configured CSV files fill omitted tables."""
    expenses_csv = tmp_path / "expenses.csv"
    expenses_csv.write_text("day,name,amount\n1,Rent,300\n")
    shifts_csv = tmp_path / "shifts.csv"
    shifts_csv.write_text("name,net\nlarge,86.5\n")
    settings = settings.model_copy(update={
        "EXPENSES_CSV": str(expenses_csv),
        "SHIFT_TYPES_CSV": str(shifts_csv),
    })
    service = OptimizationService(settings)

    command = service.build_start_command(example_config)

    assert [e.amount for e in command.expenses] == [300.0]
    assert command.deposits == []
    assert set(command.shift_types) == {"large"}


def test_optimize_now(service, example_command):
    """Test a synchronous run."""
    response = service.optimize_now(example_command)

    assert response["success"] is True
    assert response["error"] is None
    assert response["result"].violations == 0
    metrics = response["performance_metrics"]
    assert metrics["total_time"] > 0
    assert metrics["start_time"] <= metrics["end_time"]


def test_optimize_now_error(service, example_config):
    """Test that an infeasible constraint is reported, not raised."""
    config = example_config.model_copy(update={
        "manual_constraints": [ManualConstraint(day=40, shifts=[])],
    })
    response = service.optimize_now(StartCommand(config=config))

    assert response["success"] is False
    assert response["result"] is None
    assert "40" in response["error"]


def test_controls_without_run(service):
    """Test that controls need a run in progress."""
    with pytest.raises(ValueError):
        service.pause()
    with pytest.raises(ValueError):
        service.resume()
    with pytest.raises(ValueError):
        service.cancel()
    assert service.get_status()["status"] == "idle"
    assert service.get_result() is None
    assert service.get_history() == {"generations": [], "total_generations": 0}


def test_background_run(service, example_command):
    """Test a background run through to its result and history."""
    service.start(example_command)
    assert service.get_status()["status"] in ("running", "completed")

    assert wait_until(lambda: service.get_result() is not None)
    assert wait_until(lambda: service.get_status()["status"] == "completed")

    status = service.get_status()
    assert status["progress"] is not None
    assert status["run_id"]
    history = service.get_history(limit=5)
    assert len(history["generations"]) == 5
    assert history["total_generations"] == service.get_result().generations_run


def test_background_error_status(service, example_config):
    """Test that a failed background run reports its error."""
    config = example_config.model_copy(update={
        "manual_constraints": [ManualConstraint(day=0, shifts=[])],
    })
    service.start(StartCommand(config=config))

    assert wait_until(lambda: service.get_status()["status"] == "error")
    assert service.get_status()["error"]


def test_history_file(settings, example_command, tmp_path):
    """Test that generation statistics go to the configured history file."""
    history_file = tmp_path / "history" / "generations.jsonl"
    service = OptimizationService(settings.model_copy(update={"HISTORY_FILE": str(history_file)}))

    response = service.optimize_now(example_command)
    service.shutdown()

    lines = history_file.read_text().splitlines()
    assert len(lines) == response["result"].generations_run
    assert {"generation", "fitness", "run_id"} <= set(json.loads(lines[-1]))


def test_ga_preset_from_settings(settings):
    """Test that the GA_PRESET setting picks the engine hyperparameters."""
    service = OptimizationService(settings.model_copy(update={"GA_PRESET": "Fast"}))

    assert service.ga_config is FAST_CONFIG
    assert OptimizationService(settings).ga_config == GeneticConfig()


def test_explicit_ga_config_wins(settings):
    """Test that a GA config passed in overrides the preset."""
    custom = GeneticConfig(stagnation_limit=7)
    service = OptimizationService(settings.model_copy(update={"GA_PRESET": "thorough"}), custom)

    assert service.ga_config is custom


def test_unknown_ga_preset(settings):
    """Test that an unknown preset name is rejected."""
    with pytest.raises(ValueError, match="Unknown GA preset"):
        OptimizationService(settings.model_copy(update={"GA_PRESET": "turbo"}))
