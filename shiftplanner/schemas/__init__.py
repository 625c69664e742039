"""API schemas for request/response models."""

from .optimization_schemas import OptimizeRequest, OptimizeResponse, PerformanceMetrics, ControlResponse
from .status_schemas import StatusResponse, ResultResponse, HistoryResponse
from .schedule_schemas import (
    ConstraintsRequest,
    ConstraintsResponse,
    ScheduleCheckRequest,
    ScheduleCheckResponse,
)

__all__ = [
    "OptimizeRequest",
    "OptimizeResponse",
    "PerformanceMetrics",
    "ControlResponse",
    "StatusResponse",
    "ResultResponse",
    "HistoryResponse",
    "ConstraintsRequest",
    "ConstraintsResponse",
    "ScheduleCheckRequest",
    "ScheduleCheckResponse",
]
