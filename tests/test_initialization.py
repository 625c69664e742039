"""Tests for shift catalogs and population initialization."""

import random
import pytest

from shiftplanner.errors import InfeasibleConstraintError
from shiftplanner.models import Expense, ManualConstraint, OptimizationConfig, ShiftType
from shiftplanner.optimizer.config import GeneticConfig
from shiftplanner.optimizer.initialization import (
    initialize_population,
    random_genome,
    use_crisis_mode,
    weighted_choice,
    work_probability,
)
from shiftplanner.optimizer.precompute import build_catalog, build_context


def test_catalog_exact_names(shift_types):
    """Test that tier names present in the table map to themselves."""
    catalog = build_catalog(shift_types)
    assert catalog.tiers == {"small": "small", "medium": "medium", "large": "large"}
    assert catalog.largest_net == 86.5


def test_catalog_ranked_by_net():
    """Test that custom tables map tiers by net value."""
    catalog = build_catalog({
        "night": ShiftType(net=120.0),
        "morning": ShiftType(net=50.0),
        "evening": ShiftType(net=80.0),
    })
    assert catalog.resolve("small") == "morning"
    assert catalog.resolve("medium") == "evening"
    assert catalog.resolve("large") == "night"


def test_catalog_single_entry(large_only):
    """Test that a one-entry table serves every tier."""
    catalog = build_catalog(large_only)
    assert {catalog.resolve(tier) for tier in ("small", "medium", "large")} == {"large"}


def test_catalog_empty_table():
    """Test that an empty shift table is infeasible."""
    with pytest.raises(InfeasibleConstraintError):
        build_catalog({})


def test_weighted_choice_only_returns_keys():
    """Test weighted choice over a distribution."""
    rng = random.Random(1)
    weights = {"a": 0.7, "b": 0.3, "never": 0.0}
    picks = {weighted_choice(rng, weights) for _ in range(200)}
    assert picks <= {"a", "b"}
    assert "a" in picks


def test_random_genome_shape(example_context):
    """Test genome length and shift names."""
    rng = random.Random(3)
    for _ in range(20):
        genome = random_genome(example_context, GeneticConfig(), rng)
        assert len(genome) == 30
        assert all(isinstance(day, tuple) for day in genome)
        assert all(name == "large" for day in genome for name in day)


def test_work_probability_bounds(example_context):
    """Test that the work probability stays within its clamps."""
    ga_config = GeneticConfig()
    rng = random.Random(5)
    for _ in range(50):
        probability = work_probability(example_context, ga_config, rng)
        assert ga_config.min_work_probability <= probability <= ga_config.max_work_probability


def test_forced_days_respected(shift_types):
    """Test that manual shift constraints are applied to every genome."""
    config = OptimizationConfig(
        starting_balance=500.0,
        target_ending_balance=3000.0,
        minimum_balance=0.0,
        population_size=40,
        manual_constraints=[
            ManualConstraint(day=5, shifts=[]),
            ManualConstraint(day=10, shifts=["small", "small"]),
        ],
    )
    context = build_context(config, [], [], shift_types)

    population = initialize_population(context, GeneticConfig(), random.Random(11))

    assert len(population) == 40
    for individual in population:
        assert individual.genome[4] == ()
        assert individual.genome[9] == ("small", "small")
        assert not individual.evaluated


def test_initialization_is_reproducible(example_context):
    """Test that the same seed yields the same population."""
    first = initialize_population(example_context, GeneticConfig(), random.Random(99))
    second = initialize_population(example_context, GeneticConfig(), random.Random(99))
    assert [ind.genome for ind in first] == [ind.genome for ind in second]


def test_no_crisis_without_critical_days(example_context):
    """Test that normal mode is used when the balance never gets tight."""
    rng = random.Random(0)
    assert not any(use_crisis_mode(example_context, GeneticConfig(), rng) for _ in range(50))


def test_extreme_deficit_uses_double_shifts(shift_types):
    """Test that extreme deficits produce dense double-shift genomes."""
    config = OptimizationConfig(
        starting_balance=0.0,
        target_ending_balance=5000.0,
        minimum_balance=0.0,
    )
    context = build_context(config, [], [], shift_types)
    rng = random.Random(21)

    genome = random_genome(context, GeneticConfig(), rng)

    doubles = sum(1 for day in genome if len(day) == 2)
    assert doubles >= int(30 * 0.9) - 1


def test_crisis_window_before_critical_day(shift_types):
    """Test that crisis mode works the days leading up to a big expense."""
    config = OptimizationConfig(
        starting_balance=800.0,
        target_ending_balance=800.0,
        minimum_balance=500.0,
    )
    context = build_context(config, [Expense(day=20, amount=700.0)], [], shift_types)
    ga_config = GeneticConfig(crisis_mode_probability=1.0, min_work_probability=0.0)
    rng = random.Random(8)

    # 100 left after day 20, below the 700 buffer line
    assert context.crisis_deadlines == (20,)
    genome = random_genome(context, ga_config, rng)
    assert any(len(genome[day - 1]) == 2 for day in range(15, 21))
