"""Genome decoding: per-day shift assignment -> balance-projected schedule."""

import logging
from typing import Dict, List, Optional

from ..config import (
    BALANCE_MISMATCH_TOLERANCE,
    FINAL_BALANCE_TARGET_RATIO,
    HORIZON_DAYS,
    MIN_DAY,
)
from ..models.ledger import Deposit, Expense
from ..models.optimization import OptimizationConfig
from ..models.schedule import DaySchedule, ScheduleMetrics
from ..models.shift import ShiftType
from ..utils import format_currency
from ..validator import ValidationReport
from .precompute import PlanningContext, build_context
from .types import Genome, ScheduleSummary

logger = logging.getLogger(__name__)


def decode(genome: Genome, context: PlanningContext) -> List[DaySchedule]:
    """
    Walk the horizon in day order and compute the running balance.

    Each day: end = start + earnings - expenses + deposit, and the next day
    starts from that end balance. Days that go below the minimum are decoded
    as they are; penalizing them is the fitness function's job.

    Args:
        genome: One shift assignment per day
        context: Precomputed run data

    Returns:
        One DaySchedule per day of the horizon

    Raises:
        ValueError: If the genome length differs from the horizon
        KeyError: If the genome names a shift missing from the table
    """
    if len(genome) != HORIZON_DAYS:
        raise ValueError(f"Genome has {len(genome)} days, expected {HORIZON_DAYS}")

    nets = context.catalog.nets
    balance = context.config.starting_balance
    schedule = []

    for index, shifts in enumerate(genome):
        earnings = sum(nets[name] for name in shifts)
        expenses = context.expenses_by_day[index]
        deposit = context.deposits_by_day[index]
        end_balance = balance + earnings - expenses + deposit

        schedule.append(DaySchedule(
            day=index + MIN_DAY,
            shifts=list(shifts),
            earnings=earnings,
            expenses=expenses,
            deposit=deposit,
            start_balance=balance,
            end_balance=end_balance,
        ))
        balance = end_balance

    return schedule


def decode_schedule(
    genome: Genome,
    config: OptimizationConfig,
    expenses: List[Expense],
    deposits: List[Deposit],
    shift_types: Optional[Dict[str, ShiftType]] = None,
) -> List[DaySchedule]:
    """Decode a genome straight from host-level tables (builds a throwaway context)."""
    return decode(genome, build_context(config, expenses, deposits, shift_types))


def work_day_indices(schedule: List[DaySchedule]) -> List[int]:
    """1-based days with at least one shift."""
    return [day.day for day in schedule if day.shifts]


def count_violations(schedule: List[DaySchedule], minimum_balance: float) -> int:
    """Days whose end balance is below the minimum."""
    return sum(1 for day in schedule if day.end_balance < minimum_balance)


def summarize(schedule: List[DaySchedule], minimum_balance: float) -> ScheduleSummary:
    """Reduce a decoded schedule to the figures cached on an Individual."""
    if not schedule:
        raise ValueError("Cannot summarize an empty schedule")
    return ScheduleSummary(
        final_balance=schedule[-1].end_balance,
        min_balance=min(schedule[0].start_balance, min(day.end_balance for day in schedule)),
        total_earnings=sum(day.earnings for day in schedule),
        work_days=len(work_day_indices(schedule)),
        violations=count_violations(schedule, minimum_balance),
    )


def validate_schedule(schedule: List[DaySchedule], config: OptimizationConfig) -> ValidationReport:
    """
    Re-check a schedule (e.g. after user edits) against the run configuration.

    Reports days below the minimum, days whose end balance does not follow
    from the previous day, and a final balance more than 10% away from target.

    Args:
        schedule: Decoded or edited schedule
        config: Run configuration the schedule should satisfy

    Returns:
        ValidationReport whose errors are the violations found
    """
    if not schedule:
        raise ValueError("Cannot validate an empty schedule")

    violations = []
    balance = config.starting_balance
    for day in schedule:
        if day.end_balance < config.minimum_balance:
            violations.append(
                f"Day {day.day}: Balance ({format_currency(day.end_balance)}) "
                f"below minimum ({format_currency(config.minimum_balance)})"
            )
        expected = balance + day.deposit + day.earnings - day.expenses
        if abs(expected - day.end_balance) > BALANCE_MISMATCH_TOLERANCE:
            violations.append(f"Day {day.day}: Balance calculation mismatch")
        balance = day.end_balance

    final_balance = schedule[-1].end_balance
    target = config.target_ending_balance
    if abs(final_balance - target) > target * FINAL_BALANCE_TARGET_RATIO:
        violations.append(
            f"Final balance ({format_currency(final_balance)}) "
            f"significantly differs from target ({format_currency(target)})"
        )

    if violations:
        logger.warning(f"Schedule validation failed: {len(violations)} violations")
    return ValidationReport(errors=violations, warnings=[])


def schedule_metrics(schedule: List[DaySchedule]) -> ScheduleMetrics:
    """Totals and end-balance range of a schedule."""
    if not schedule:
        raise ValueError("Cannot measure an empty schedule")
    end_balances = [day.end_balance for day in schedule]
    return ScheduleMetrics(
        total_work_days=len(work_day_indices(schedule)),
        total_earnings=sum(day.earnings for day in schedule),
        total_expenses=sum(day.expenses for day in schedule),
        average_balance=sum(end_balances) / len(end_balances),
        min_balance=min(end_balances),
        max_balance=max(end_balances),
    )
