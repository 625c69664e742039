"""Optimization configuration, progress, and result models."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from .schedule import DaySchedule


class ManualConstraint(BaseModel):
    """A host-imposed rule for one day of the horizon.

    shifts=None leaves the day to the optimizer; shifts=[] forces a rest day.
    """

    day: int
    shifts: Optional[List[str]] = None
    fixed_expenses: Optional[float] = None  # replaces the day's expense total
    fixed_balance: Optional[float] = None  # requested end-of-day balance

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @field_validator("shifts", mode="before")
    @classmethod
    def split_combination(cls, value):
        """Accept a "small+large" combination string."""
        if isinstance(value, str):
            return [name for name in value.split("+") if name]
        return value


class OptimizationConfig(BaseModel):
    """Configuration of a single optimization run.

    Accepts snake_case or camelCase keys.
    """

    starting_balance: float
    target_ending_balance: float
    minimum_balance: float
    population_size: int = 200
    generations: int = 500
    manual_constraints: List[ManualConstraint] = Field(default_factory=list)
    fitness_weights: Dict[str, float] = Field(default_factory=dict)
    seed: Optional[int] = None
    debug_fitness: bool = False

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "starting_balance": 1000.0,
                "target_ending_balance": 1200.0,
                "minimum_balance": 500.0,
                "population_size": 200,
                "generations": 500,
                "manual_constraints": [{"day": 5, "shifts": []}],
            }
        },
    }

    @field_validator("manual_constraints", mode="before")
    @classmethod
    def constraints_by_day(cls, value):
        """Accept a {day: constraint} mapping as well as a list."""
        if isinstance(value, dict):
            return [
                {**constraint, "day": int(day)} if isinstance(constraint, dict) else constraint
                for day, constraint in value.items()
            ]
        return value


class OptimizationProgress(BaseModel):
    """Snapshot of the best individual, emitted periodically during a run."""

    generation: int
    progress: float  # percent of the generation budget
    best_fitness: float
    work_days: int
    balance: float
    violations: int
    message: Optional[str] = None

    model_config = {"frozen": True}


class GenerationStatistics(BaseModel):
    """Best-of-generation figures kept for reporting and analysis."""

    generation: int
    timestamp: float
    fitness: float
    work_days: int
    violations: int
    balance: float

    model_config = {"frozen": True}


class OptimizationResult(BaseModel):
    """Best schedule found by a completed run."""

    genome: List[List[str]]
    schedule: List[DaySchedule]
    work_days: List[int]
    total_earnings: float
    final_balance: float
    min_balance: float
    violations: int
    fitness: float
    computation_time_ms: float
    computation_time: str
    generations_run: int
    termination_reason: str

    model_config = {"frozen": True}
