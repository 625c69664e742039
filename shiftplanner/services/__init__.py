"""Services package."""

from .optimization_service import OptimizationService
from .schedule_service import ScheduleService
from .singleton import get_optimization_service, get_schedule_service, reset_optimization_service

__all__ = [
    "OptimizationService",
    "ScheduleService",
    "get_optimization_service",
    "get_schedule_service",
    "reset_optimization_service",
]
