"""Service turning schedule edits into manual constraints and re-checking schedules."""

import logging
from itertools import combinations_with_replacement
from typing import Dict, List, Optional

from ..config import EARNINGS_MATCH_TOLERANCE
from ..models.optimization import ManualConstraint, OptimizationConfig
from ..models.schedule import DaySchedule, Edit, ScheduleMetrics
from ..models.shift import ShiftType
from ..optimizer.decoder import schedule_metrics, validate_schedule
from ..optimizer.precompute import default_shift_types
from ..validator import ValidationReport

logger = logging.getLogger(__name__)


class ScheduleService:
    """Service for user edits to a decoded schedule.

    Edits are turned into manual constraints so the next optimization run
    keeps them: earnings become a shift combination, expenses become
    fixed_expenses and balances become fixed_balance.
    """

    def __init__(self, tolerance: float = EARNINGS_MATCH_TOLERANCE):
        """
        Initialize schedule service.

        Args:
            tolerance: Largest difference between edited earnings and a
                shift combination's net for the two to match
        """
        self.tolerance = tolerance

    def find_shift_combination(
        self,
        earnings: float,
        shift_types: Optional[Dict[str, ShiftType]] = None,
    ) -> Optional[List[str]]:
        """
        Find the single or double shift whose net matches an earnings amount.

        Single shifts are tried first, cheapest first, then double shifts in
        the same order.

        Args:
            earnings: Earnings entered for a day
            shift_types: Shift table (default table when None)

        Returns:
            Shift names, or None if nothing is within tolerance
        """
        table = shift_types if shift_types is not None else default_shift_types()
        names = sorted(table, key=lambda name: table[name].net)

        for size in (1, 2):
            for combination in combinations_with_replacement(names, size):
                total = sum(table[name].net for name in combination)
                if abs(earnings - total) < self.tolerance:
                    return list(combination)
        return None

    def generate_manual_constraints(
        self,
        edits: List[Edit],
        shift_types: Optional[Dict[str, ShiftType]] = None,
    ) -> List[ManualConstraint]:
        """
        Turn schedule edits into one manual constraint per edited day.

        A later edit of the same field on the same day replaces the earlier
        one. Notes and deposit edits do not constrain the optimizer.

        Args:
            edits: Edits in the order they were made
            shift_types: Shift table used to match earnings (default table when None)

        Returns:
            Manual constraints ordered by day

        Raises:
            ValueError: If an edited value is not a number where one is needed
        """
        logger.info(f"Generating manual constraints from {len(edits)} edits")
        fields_by_day: Dict[int, Dict] = {}

        for edit in edits:
            fields = fields_by_day.setdefault(edit.day, {})

            if edit.field == "earnings":
                earnings = _as_amount(edit)
                if earnings == 0:
                    fields["shifts"] = []
                    continue
                shifts = self.find_shift_combination(earnings, shift_types)
                if shifts is None:
                    logger.warning(
                        f"Day {edit.day}: earnings {earnings:.2f} match no shift combination, "
                        f"leaving the day to the optimizer"
                    )
                    continue
                logger.debug(f"Day {edit.day}: earnings {earnings:.2f} -> {'+'.join(shifts)}")
                fields["shifts"] = shifts
            elif edit.field == "shifts":
                fields["shifts"] = edit.new_value
            elif edit.field == "expenses":
                fields["fixed_expenses"] = _as_amount(edit)
            elif edit.field == "balance":
                fields["fixed_balance"] = _as_amount(edit)

        constraints = [
            ManualConstraint(day=day, **fields)
            for day, fields in sorted(fields_by_day.items())
            if fields
        ]
        logger.info(f"Generated constraints for {len(constraints)} days")
        return constraints

    def validate(self, schedule: List[DaySchedule], config: OptimizationConfig) -> ValidationReport:
        """Re-check an edited schedule against the run configuration."""
        report = validate_schedule(schedule, config)
        logger.info(f"Schedule validation: valid={report.is_valid()}, violations={len(report.errors)}")
        return report

    def calculate_metrics(self, schedule: List[DaySchedule]) -> ScheduleMetrics:
        return schedule_metrics(schedule)


def _as_amount(edit: Edit) -> float:
    try:
        return float(edit.new_value)
    except (TypeError, ValueError):
        raise ValueError(
            f"Day {edit.day}: {edit.field} edit needs a number, got {edit.new_value!r}"
        ) from None
