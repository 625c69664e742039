"""Validator module for run configuration checks before optimization."""

import logging
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel

from .config import MAX_DAY, MIN_DAY, MIN_GENERATIONS, MIN_POPULATION_SIZE
from .errors import ConfigError, InfeasibleConstraintError
from .models.optimization import ManualConstraint, OptimizationConfig
from .models.shift import ShiftType

logger = logging.getLogger(__name__)

CONSTRAINT_FIELDS = ("shifts", "fixed_expenses", "fixed_balance")


class ValidationReport(BaseModel):
    """Validation report with errors and warnings."""

    errors: List[str]
    warnings: List[str]

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0


class ConfigValidator:
    """Validates and corrects an OptimizationConfig before a run.

    Out-of-range numbers are clamped and reported as warnings. Manual
    constraints that can never hold are fatal.
    """

    def __init__(self, strict: bool = False):
        """
        Initialize validator.

        Args:
            strict: Raise ConfigError instead of clamping out-of-range values
        """
        self.strict = strict

    def validate(
        self,
        config: OptimizationConfig,
        shift_types: Optional[Dict[str, ShiftType]] = None,
    ) -> Tuple[OptimizationConfig, ValidationReport]:
        """
        Validate a run configuration.

        Args:
            config: Configuration supplied by the host
            shift_types: Shift table of the run (names in constraints are
                checked against it when given)

        Returns:
            Tuple of (corrected config, ValidationReport)

        Raises:
            InfeasibleConstraintError: If a manual constraint cannot be satisfied
            ConfigError: In strict mode, if a numeric field is out of range
        """
        errors: List[str] = []
        warnings: List[str] = []
        corrections = {}

        def clamp(field: str, value, corrected) -> None:
            if self.strict:
                raise ConfigError(field, value, corrected)
            message = str(ConfigError(field, value, corrected))
            logger.warning(message)
            warnings.append(message)
            corrections[field] = corrected

        # Balances
        for field in ("starting_balance", "target_ending_balance", "minimum_balance"):
            value = getattr(config, field)
            if value < 0:
                clamp(field, value, 0.0)

        starting = corrections.get("starting_balance", config.starting_balance)
        minimum = corrections.get("minimum_balance", config.minimum_balance)
        if minimum > starting:
            clamp("minimum_balance", minimum, starting)

        # GA sizing
        if config.population_size < MIN_POPULATION_SIZE:
            clamp("population_size", config.population_size, MIN_POPULATION_SIZE)
        if config.generations < MIN_GENERATIONS:
            clamp("generations", config.generations, MIN_GENERATIONS)

        # Manual constraints
        merged, constraint_errors = self._check_constraints(config.manual_constraints, shift_types)
        errors.extend(constraint_errors)
        if errors:
            for error in errors:
                logger.error(error)
            raise InfeasibleConstraintError("; ".join(errors))
        if len(merged) != len(config.manual_constraints):
            corrections["manual_constraints"] = merged

        corrected = config.model_copy(update=corrections) if corrections else config
        return corrected, ValidationReport(errors=errors, warnings=warnings)

    def _check_constraints(
        self,
        constraints: List[ManualConstraint],
        shift_types: Optional[Dict[str, ShiftType]],
    ) -> Tuple[List[ManualConstraint], List[str]]:
        errors = []
        in_horizon = []

        for constraint in constraints:
            if not MIN_DAY <= constraint.day <= MAX_DAY:
                errors.append(
                    f"Constraint day {constraint.day} outside {MIN_DAY}..{MAX_DAY}"
                )
                continue

            if constraint.shifts is not None and shift_types is not None:
                unknown = [name for name in constraint.shifts if name not in shift_types]
                if unknown:
                    errors.append(f"Day {constraint.day}: unknown shift types {unknown}")
            in_horizon.append(constraint)

        merged, conflicts = merge_constraints(in_horizon)
        return merged, errors + conflicts


def merge_constraints(
    constraints: List[ManualConstraint],
) -> Tuple[List[ManualConstraint], List[str]]:
    """
    Combine constraints on the same day into one constraint per day.

    Fields set by only one constraint are combined; a field set to two
    different values on the same day is a conflict.

    Args:
        constraints: Manual constraints in any order

    Returns:
        Tuple of (one constraint per day in first-seen order, conflict messages)
    """
    by_day: Dict[int, ManualConstraint] = {}
    conflicts = []

    for constraint in constraints:
        previous = by_day.get(constraint.day)
        if previous is None:
            by_day[constraint.day] = constraint
            continue

        update = {}
        for field in CONSTRAINT_FIELDS:
            value = getattr(constraint, field)
            if value is None:
                continue
            existing = getattr(previous, field)
            if existing is not None and existing != value:
                conflicts.append(
                    f"Day {constraint.day}: conflicting {field} ({existing} vs {value})"
                )
            else:
                update[field] = value
        if update:
            by_day[constraint.day] = previous.model_copy(update=update)

    return list(by_day.values()), conflicts
