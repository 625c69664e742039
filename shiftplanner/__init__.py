"""Shift planner: genetic optimization of work shifts against a cash balance."""

from .models import (
    ShiftType,
    Expense,
    Deposit,
    DaySchedule,
    ManualConstraint,
    OptimizationConfig,
    OptimizationProgress,
    OptimizationResult,
    StartCommand,
    PauseCommand,
    ResumeCommand,
    CancelCommand,
    parse_command,
)
from .errors import OptimizationError, ConfigError, InfeasibleConstraintError, OptimizationCancelled
from .validator import ConfigValidator, ValidationReport

__version__ = "1.0.0"

__all__ = [
    "ShiftType",
    "Expense",
    "Deposit",
    "DaySchedule",
    "ManualConstraint",
    "OptimizationConfig",
    "OptimizationProgress",
    "OptimizationResult",
    "StartCommand",
    "PauseCommand",
    "ResumeCommand",
    "CancelCommand",
    "parse_command",
    "OptimizationError",
    "ConfigError",
    "InfeasibleConstraintError",
    "OptimizationCancelled",
    "ConfigValidator",
    "ValidationReport",
]
