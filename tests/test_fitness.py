"""Tests for fitness evaluation."""

import math
import pytest

from shiftplanner.models import Expense, ManualConstraint, OptimizationConfig
from shiftplanner.optimizer.config import DEFAULT_WEIGHTS, FitnessWeights
from shiftplanner.optimizer.decoder import decode
from shiftplanner.optimizer.fitness import evaluate_fitness, fitness_breakdown
from shiftplanner.optimizer.precompute import build_context
from shiftplanner.optimizer.types import make_genome


def genome_on(days, shift="large"):
    return make_genome([[shift] if day in days else [] for day in range(1, 31)])


def context_for(large_only, **overrides):
    values = dict(
        starting_balance=1000.0,
        target_ending_balance=1000.0,
        minimum_balance=0.0,
    )
    values.update(overrides)
    return build_context(OptimizationConfig(**values), [], [], large_only)


def breakdown(genome, context, weights=DEFAULT_WEIGHTS):
    return fitness_breakdown(decode(genome, context), context, weights)


def test_fitness_is_pure(example_context):
    """Test that fitness depends only on its inputs."""
    schedule = decode(genome_on({5, 15, 25}), example_context)

    first = evaluate_fitness(schedule, example_context, DEFAULT_WEIGHTS)
    second = evaluate_fitness(schedule, example_context, DEFAULT_WEIGHTS)

    assert first == second
    assert first == fitness_breakdown(schedule, example_context, DEFAULT_WEIGHTS).total


def test_perfect_schedule_scores_zero(large_only):
    """Test that a rest month at target with no work needed costs nothing."""
    context = context_for(large_only)
    assert evaluate_fitness(decode(genome_on(set()), context), context, DEFAULT_WEIGHTS) == 0.0


def test_well_spaced_schedule_beats_clustered(example_context):
    """Test that spreading the same number of shifts is cheaper."""
    spread = breakdown(genome_on({5, 15, 25}), example_context)
    clustered = breakdown(genome_on({1, 2, 3}), example_context)

    assert spread.final_balance == clustered.final_balance
    assert spread.total < clustered.total


def test_overshoot_costs_more_than_undershoot(large_only):
    """Test that ending above target is penalized harder than below."""
    over = breakdown(genome_on(set()), context_for(large_only, starting_balance=1300.0, target_ending_balance=1200.0))
    under = breakdown(genome_on(set()), context_for(large_only, starting_balance=1100.0, target_ending_balance=1200.0))

    assert under.final_balance == pytest.approx(100 * 100)
    assert over.final_balance == pytest.approx(100 * 100 * (1 + 100 / 1200 * 2))
    assert over.final_balance > under.final_balance


def test_overshoot_within_tolerance_is_linear(large_only):
    """Test that small overshoots are not multiplied."""
    result = breakdown(genome_on(set()), context_for(large_only, starting_balance=1004.0))
    assert result.final_balance == pytest.approx(400.0)


def test_violations_penalized(large_only):
    """Test violation days and depth of the worst shortfall."""
    config = OptimizationConfig(
        starting_balance=1000.0,
        target_ending_balance=1000.0,
        minimum_balance=1000.0,
    )
    context = build_context(config, [Expense(day=29, amount=50.0)], [], large_only)

    result = breakdown(genome_on(set()), context)

    assert result.violations == pytest.approx(2 * 5000 + 50 * 100)


def test_near_minimum_penalty(large_only):
    """Test the soft penalty for balances just above the minimum."""
    context = context_for(large_only, minimum_balance=900.0)
    result = breakdown(genome_on(set()), context)

    # Every day ends at 1000, 100 below the 1100 buffer line
    assert result.violations == 0
    assert result.near_minimum == pytest.approx(30 * 100)


def test_work_day_distribution_penalties(large_only):
    """Test consecutive run, small gap, and clustering components."""
    context = context_for(large_only)
    result = breakdown(genome_on(set(range(1, 8))), context)

    assert result.work_day_count == pytest.approx(7 * 200)
    assert result.consecutive_days == pytest.approx(2 * 500)
    assert result.small_gaps == pytest.approx(6 * 150)
    assert result.gap_variance == 0.0
    # Windows 1-5, 2-6 and 3-7 hold 5 work days, 4-8 holds 4
    assert result.clustering == pytest.approx(7 * 300)


def test_even_spacing_has_no_distribution_penalty(large_only):
    """Test that evenly spaced work days only pay for the count."""
    context = context_for(large_only)
    result = breakdown(genome_on({1, 6, 11, 16, 21, 26}), context)

    assert result.consecutive_days == 0
    assert result.small_gaps == 0
    assert result.gap_variance == 0.0
    assert result.clustering == 0


def test_gap_variance(large_only):
    """Test that uneven gaps add their standard deviation."""
    context = context_for(large_only)
    result = breakdown(genome_on({1, 3, 13}), context)

    # Gaps 2 and 10: std = 4
    assert result.gap_variance == pytest.approx(4 * 150)


def test_fixed_balance_penalty(large_only):
    """Test deviation from a requested end balance."""
    config = OptimizationConfig(
        starting_balance=1000.0,
        target_ending_balance=1000.0,
        minimum_balance=0.0,
        manual_constraints=[ManualConstraint(day=1, fixed_balance=1000.0)],
    )
    context = build_context(config, [], [], large_only)

    assert breakdown(genome_on(set()), context).fixed_balance == 0.0
    assert breakdown(genome_on({1}), context).fixed_balance == pytest.approx(86.5 * 1000)


def test_weight_overrides(example_context):
    """Test that weight overrides change the score and unknown names are ignored."""
    weights = DEFAULT_WEIGHTS.with_overrides({"clustering_penalty": 0, "no_such_weight": 3})
    genome = genome_on({1, 2, 3, 4})

    assert isinstance(weights, FitnessWeights)
    assert weights.clustering_penalty == 0.0
    assert breakdown(genome, example_context, weights).clustering == 0.0
    assert breakdown(genome, example_context).clustering > 0


def test_fitness_is_finite(large_only):
    """Test that extreme schedules still score finite values."""
    context = context_for(large_only, starting_balance=0.0, target_ending_balance=100000.0)
    every_day = make_genome([["large", "large"] for _ in range(30)])

    assert math.isfinite(evaluate_fitness(decode(every_day, context), context, DEFAULT_WEIGHTS))
