"""Shared fixtures for the shift planner tests."""

import pytest

from shiftplanner.models import Deposit, Expense, OptimizationConfig, ShiftType, StartCommand
from shiftplanner.optimizer.config import GeneticConfig
from shiftplanner.optimizer.precompute import build_context, default_shift_types


@pytest.fixture
def shift_types():
    """Default shift table (large/medium/small)."""
    return default_shift_types()


@pytest.fixture
def large_only():
    """Shift table with a single large shift."""
    return {"large": ShiftType(net=86.5, gross=94.5)}


@pytest.fixture
def example_config():
    """1000 -> 1200 with a 500 minimum, small GA."""
    return OptimizationConfig(
        starting_balance=1000.0,
        target_ending_balance=1200.0,
        minimum_balance=500.0,
        population_size=30,
        generations=50,
        seed=42,
    )


@pytest.fixture
def example_command(example_config, large_only):
    """Start command for the example run."""
    return StartCommand(config=example_config, shift_types=large_only)


@pytest.fixture
def sample_expenses():
    """A month of fixed expenses."""
    return [
        Expense(day=1, name="Rent", amount=800.0),
        Expense(day=10, name="Phone", amount=60.0),
        Expense(day=15, name="Groceries", amount=250.0),
        Expense(day=30, name="Insurance", amount=120.0),
    ]


@pytest.fixture
def sample_deposits():
    """One paycheck mid-month."""
    return [Deposit(day=15, amount=500.0, name="Paycheck")]


@pytest.fixture
def example_context(example_config, large_only):
    """Planning context of the example run."""
    return build_context(example_config, [], [], large_only)


@pytest.fixture
def quick_ga():
    """GA config that reports often and gives up early."""
    return GeneticConfig(progress_interval=10, stagnation_limit=30)
