"""Fitness evaluation for the genetic algorithm.

Evaluates decoded schedules as a cost (lower is better) built from:
- Final balance distance from target (with extra weight on overshoot)
- Minimum balance violations, depth of the worst shortfall, and a softer
  penalty for ending days just above the minimum
- Work day distribution: distance from the ideal count, long runs of
  consecutive work days, short gaps, uneven gap lengths
- Clustering: too many work days inside any sliding window
- Requested end balances from manual constraints

Every component is finite for any decoded schedule.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import List

from ..models.schedule import DaySchedule
from .config import FitnessWeights
from .precompute import PlanningContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitnessBreakdown:
    """Individual penalty components of a fitness score."""

    final_balance: float
    violations: float
    near_minimum: float
    work_day_count: float
    consecutive_days: float
    small_gaps: float
    gap_variance: float
    clustering: float
    fixed_balance: float

    @property
    def total(self) -> float:
        return sum(asdict(self).values())


def _final_balance_penalty(final_balance: float, target: float, weights: FitnessWeights) -> float:
    penalty = abs(final_balance - target) * weights.final_balance_penalty
    overshoot = final_balance - target
    if overshoot > weights.balance_tolerance:
        overshoot_ratio = overshoot / max(abs(target), 1.0)
        penalty *= 1 + overshoot_ratio * weights.overshoot_multiplier
    return penalty


def _work_runs(work_days: List[int]) -> List[int]:
    """Lengths of every run of consecutive work days."""
    runs = []
    length = 0
    previous = None
    for day in work_days:
        if previous is not None and day == previous + 1:
            length += 1
        else:
            if length:
                runs.append(length)
            length = 1
        previous = day
    if length:
        runs.append(length)
    return runs


def _clustering_excess(worked: List[bool], window: int, max_in_window: int) -> int:
    """Sum over all sliding windows of work days beyond the allowed count."""
    if window <= 0 or len(worked) < window:
        return max(0, sum(worked) - max_in_window) if worked else 0
    excess = 0
    in_window = sum(worked[:window])
    excess += max(0, in_window - max_in_window)
    for start in range(1, len(worked) - window + 1):
        in_window += worked[start + window - 1] - worked[start - 1]
        excess += max(0, in_window - max_in_window)
    return excess


def fitness_breakdown(
    schedule: List[DaySchedule],
    context: PlanningContext,
    weights: FitnessWeights,
) -> FitnessBreakdown:
    """
    Compute every penalty component of a decoded schedule.

    Args:
        schedule: Decoded schedule (one entry per day)
        context: Precomputed run data (config, ideal work days, fixed balances)
        weights: Penalty coefficients

    Returns:
        FitnessBreakdown whose total is the fitness
    """
    config = context.config
    minimum = config.minimum_balance
    final_balance = schedule[-1].end_balance if schedule else config.starting_balance

    # Balance
    final_penalty = _final_balance_penalty(final_balance, config.target_ending_balance, weights)

    violation_days = 0
    worst_shortfall = 0.0
    near_minimum = 0.0
    buffer_line = minimum + weights.critical_day_buffer
    for day in schedule:
        if day.end_balance < minimum:
            violation_days += 1
            worst_shortfall = max(worst_shortfall, minimum - day.end_balance)
        elif day.end_balance < buffer_line:
            near_minimum += buffer_line - day.end_balance
    violation_penalty = (
        violation_days * weights.violation_penalty
        + worst_shortfall * weights.shortfall_penalty
    )

    # Work day distribution
    worked = [bool(day.shifts) for day in schedule]
    work_days = [day.day for day in schedule if day.shifts]
    work_day_penalty = abs(len(work_days) - context.ideal_work_days) * weights.work_day_diff_penalty

    consecutive_excess = sum(
        max(0, run - weights.max_consecutive_days) for run in _work_runs(work_days)
    )

    gaps = [b - a for a, b in zip(work_days, work_days[1:])]
    small_gaps = sum(1 for gap in gaps if gap < weights.min_gap_days)
    gap_std = 0.0
    if gaps:
        mean_gap = sum(gaps) / len(gaps)
        gap_std = math.sqrt(sum((gap - mean_gap) ** 2 for gap in gaps) / len(gaps))

    # Clustering
    cluster_excess = _clustering_excess(
        worked, weights.clustering_window, weights.max_work_days_in_window
    )

    # Requested balances
    fixed_penalty = 0.0
    if context.fixed_balances:
        for day in schedule:
            requested = context.fixed_balances.get(day.day)
            if requested is None:
                continue
            diff = abs(day.end_balance - requested)
            if diff > 0.01:
                fixed_penalty += diff * weights.fixed_balance_penalty

    return FitnessBreakdown(
        final_balance=final_penalty,
        violations=violation_penalty,
        near_minimum=near_minimum * weights.near_minimum_penalty,
        work_day_count=work_day_penalty,
        consecutive_days=consecutive_excess * weights.consecutive_day_penalty,
        small_gaps=small_gaps * weights.small_gap_penalty,
        gap_variance=gap_std * weights.gap_variance_weight,
        clustering=cluster_excess * weights.clustering_penalty,
        fixed_balance=fixed_penalty,
    )


def evaluate_fitness(
    schedule: List[DaySchedule],
    context: PlanningContext,
    weights: FitnessWeights,
) -> float:
    """Fitness of a decoded schedule (lower is better). Pure."""
    return fitness_breakdown(schedule, context, weights).total


def log_breakdown(schedule: List[DaySchedule], context: PlanningContext, weights: FitnessWeights) -> None:
    """Log the fitness components of a schedule at DEBUG level."""
    breakdown = fitness_breakdown(schedule, context, weights)
    parts = ", ".join(f"{name}={value:.1f}" for name, value in asdict(breakdown).items())
    logger.debug(f"Fitness {breakdown.total:.2f}: {parts}")
