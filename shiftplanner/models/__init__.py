"""Domain models package."""

from .shift import ShiftType, ShiftTypeTable
from .ledger import Expense, Deposit
from .schedule import DaySchedule, Edit, ScheduleMetrics
from .optimization import (
    ManualConstraint,
    OptimizationConfig,
    OptimizationProgress,
    OptimizationResult,
    GenerationStatistics,
)
from .messages import (
    StartCommand,
    PauseCommand,
    ResumeCommand,
    CancelCommand,
    Command,
    parse_command,
    ProgressNotification,
    PausedNotification,
    ResumedNotification,
    CompleteNotification,
    CancelledNotification,
    ErrorNotification,
    Notification,
)

__all__ = [
    "ShiftType",
    "ShiftTypeTable",
    "Expense",
    "Deposit",
    "DaySchedule",
    "Edit",
    "ScheduleMetrics",
    "ManualConstraint",
    "OptimizationConfig",
    "OptimizationProgress",
    "OptimizationResult",
    "GenerationStatistics",
    "StartCommand",
    "PauseCommand",
    "ResumeCommand",
    "CancelCommand",
    "Command",
    "parse_command",
    "ProgressNotification",
    "PausedNotification",
    "ResumedNotification",
    "CompleteNotification",
    "CancelledNotification",
    "ErrorNotification",
    "Notification",
]
