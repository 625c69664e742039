"""Precomputation of static run data.

Everything the decoder, fitness function and generators read repeatedly is
computed once per run into an immutable PlanningContext.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import HORIZON_DAYS, MAX_DAY, MIN_DAY, SHIFT_TIERS, SHIFT_VALUES
from ..errors import InfeasibleConstraintError
from ..models.ledger import Deposit, Expense
from ..models.optimization import OptimizationConfig
from ..models.shift import ShiftType
from .config import DEFAULT_WEIGHTS, FitnessWeights
from .types import DayAssignment

logger = logging.getLogger(__name__)


def default_shift_types() -> Dict[str, ShiftType]:
    """Shift table used when the host does not supply one."""
    return {name: ShiftType(**values) for name, values in SHIFT_VALUES.items()}


@dataclass(frozen=True)
class ShiftCatalog:
    """Shift nets by name plus the tier (small/medium/large) -> name mapping."""

    nets: Dict[str, float]
    tiers: Dict[str, str]

    def resolve(self, tier: str) -> str:
        """Name of the table entry standing in for a tier."""
        return self.tiers[tier]

    def net(self, name: str) -> float:
        return self.nets[name]

    @property
    def largest_net(self) -> float:
        return max(self.nets.values())


def build_catalog(shift_types: Dict[str, ShiftType]) -> ShiftCatalog:
    """
    Resolve shift tiers against a host-supplied table.

    Exact names win; missing tiers map to the table ranked by net value
    (lowest = small, highest = large, middle entry = medium).

    Args:
        shift_types: Shift table keyed by name

    Returns:
        ShiftCatalog for the table

    Raises:
        InfeasibleConstraintError: If the table is empty
    """
    if not shift_types:
        raise InfeasibleConstraintError("No shift types supplied")

    nets = {name: float(shift.net) for name, shift in shift_types.items()}
    ranked = sorted(nets, key=lambda name: nets[name])
    by_rank = {
        "small": ranked[0],
        "medium": ranked[len(ranked) // 2],
        "large": ranked[-1],
    }
    tiers = {tier: (tier if tier in nets else by_rank[tier]) for tier in SHIFT_TIERS}
    return ShiftCatalog(nets=nets, tiers=tiers)


@dataclass(frozen=True)
class PlanningContext:
    """Static data for one run - computed once, used many times."""

    config: OptimizationConfig
    catalog: ShiftCatalog
    weights: FitnessWeights

    # Per-day tables, index 0 is day 1
    expenses_by_day: Tuple[float, ...]
    deposits_by_day: Tuple[float, ...]

    # Manual constraints
    forced_shifts: Dict[int, DayAssignment]
    fixed_balances: Dict[int, float]
    free_days: Tuple[int, ...]

    # Derived targets
    required_earnings: float
    ideal_work_days: int
    critical_days: Tuple[int, ...]
    crisis_deadlines: Tuple[int, ...]
    extreme_deficit: bool

    def expenses_on(self, day: int) -> float:
        return self.expenses_by_day[day - MIN_DAY]

    def deposit_on(self, day: int) -> float:
        return self.deposits_by_day[day - MIN_DAY]


def _sum_by_day(entries: Iterable, label: str) -> List[float]:
    totals = [0.0] * HORIZON_DAYS
    for entry in entries:
        if MIN_DAY <= entry.day <= MAX_DAY:
            totals[entry.day - MIN_DAY] += entry.amount
        else:
            logger.warning(f"Ignoring {label} on day {entry.day} (outside {MIN_DAY}..{MAX_DAY})")
    return totals


def find_critical_days(
    starting_balance: float,
    expenses_by_day: Tuple[float, ...],
    deposits_by_day: Tuple[float, ...],
    threshold: float,
) -> List[int]:
    """Days whose no-shift projected end balance falls below threshold."""
    critical = []
    balance = starting_balance
    for index in range(HORIZON_DAYS):
        balance += deposits_by_day[index] - expenses_by_day[index]
        if balance < threshold:
            critical.append(index + MIN_DAY)
    return critical


def first_days_of_runs(days: List[int]) -> List[int]:
    """First day of every run of consecutive days, e.g. [3,4,5,9] -> [3,9]."""
    starts = []
    previous: Optional[int] = None
    for day in days:
        if previous is None or day != previous + 1:
            starts.append(day)
        previous = day
    return starts


def build_context(
    config: OptimizationConfig,
    expenses: List[Expense],
    deposits: List[Deposit],
    shift_types: Optional[Dict[str, ShiftType]] = None,
    weights: FitnessWeights = DEFAULT_WEIGHTS,
) -> PlanningContext:
    """
    Precompute the static data of a run.

    The config is expected to have passed ConfigValidator already.

    Args:
        config: Validated run configuration
        expenses: Fixed expenses (days outside the horizon are ignored)
        deposits: Deposits (days outside the horizon are ignored)
        shift_types: Shift table, default table when None
        weights: Fitness weights in effect for the run

    Returns:
        PlanningContext
    """
    catalog = build_catalog(shift_types if shift_types is not None else default_shift_types())

    expenses_by_day = _sum_by_day(expenses, "expense")
    deposits_by_day = _sum_by_day(deposits, "deposit")

    forced_shifts: Dict[int, DayAssignment] = {}
    fixed_balances: Dict[int, float] = {}
    for constraint in config.manual_constraints:
        if constraint.fixed_expenses is not None:
            expenses_by_day[constraint.day - MIN_DAY] = constraint.fixed_expenses
        if constraint.shifts is not None:
            forced_shifts[constraint.day] = tuple(constraint.shifts)
        if constraint.fixed_balance is not None:
            fixed_balances[constraint.day] = constraint.fixed_balance

    expenses_t = tuple(expenses_by_day)
    deposits_t = tuple(deposits_by_day)

    # Forced shifts already contribute earnings the optimizer cannot change
    forced_earnings = sum(
        catalog.net(name) for shifts in forced_shifts.values() for name in shifts
    )
    required = (
        sum(expenses_t)
        + config.target_ending_balance
        - config.starting_balance
        - sum(deposits_t)
    )
    free_days = tuple(d for d in range(MIN_DAY, MAX_DAY + 1) if d not in forced_shifts)
    remaining = max(0.0, required - forced_earnings)
    largest_net = catalog.largest_net
    if largest_net > 0:
        ideal_work_days = min(len(free_days), math.ceil(remaining / largest_net))
    else:
        # No shift earns anything; work every free day only if money is needed
        ideal_work_days = len(free_days) if remaining > 0 else 0
    ideal_work_days += sum(1 for shifts in forced_shifts.values() if shifts)

    critical_days = find_critical_days(
        config.starting_balance,
        expenses_t,
        deposits_t,
        config.minimum_balance + weights.critical_day_buffer,
    )
    extreme_deficit = remaining > len(free_days) * max(0.0, largest_net)

    context = PlanningContext(
        config=config,
        catalog=catalog,
        weights=weights,
        expenses_by_day=expenses_t,
        deposits_by_day=deposits_t,
        forced_shifts=forced_shifts,
        fixed_balances=fixed_balances,
        free_days=free_days,
        required_earnings=required,
        ideal_work_days=ideal_work_days,
        critical_days=tuple(critical_days),
        crisis_deadlines=tuple(first_days_of_runs(critical_days)),
        extreme_deficit=extreme_deficit,
    )

    logger.info(
        f"Context built: required earnings={required:.2f}, ideal work days={ideal_work_days}, "
        f"critical days={len(critical_days)}, extreme deficit={extreme_deficit}"
    )
    return context
