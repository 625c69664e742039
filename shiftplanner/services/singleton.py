"""Singleton pattern for shared service instances."""

from typing import Optional

from .optimization_service import OptimizationService
from .schedule_service import ScheduleService

# Global service instance (singleton pattern)
_optimization_service: Optional[OptimizationService] = None


def get_optimization_service() -> OptimizationService:
    """
    Get or create the singleton optimization service instance.

    Returns:
        OptimizationService instance
    """
    global _optimization_service
    if _optimization_service is None:
        _optimization_service = OptimizationService()
    return _optimization_service


def reset_optimization_service() -> None:
    """Shut down and forget the singleton (used on application shutdown)."""
    global _optimization_service
    if _optimization_service is not None:
        _optimization_service.shutdown()
        _optimization_service = None


_schedule_service: Optional[ScheduleService] = None


def get_schedule_service() -> ScheduleService:
    """
    Get or create the singleton schedule service instance.

    Returns:
        ScheduleService instance
    """
    global _schedule_service
    if _schedule_service is None:
        _schedule_service = ScheduleService()
    return _schedule_service
