"""Schemas for optimization endpoints."""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional

from ..models.ledger import Deposit, Expense
from ..models.optimization import OptimizationConfig, OptimizationResult
from ..models.shift import ShiftType


class OptimizeRequest(BaseModel):
    """Request model for starting an optimization.

    Omitted tables fall back to the configured CSV files, then to the
    built-in shift table.
    """

    config: OptimizationConfig
    expenses: Optional[List[Expense]] = None
    deposits: Optional[List[Deposit]] = None
    shift_types: Optional[Dict[str, ShiftType]] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class PerformanceMetrics(BaseModel):
    """Timing of a synchronous optimization request."""

    start_time: str
    end_time: str
    total_time: float = Field(..., description="Wall time in milliseconds")


class OptimizeResponse(BaseModel):
    """Response model for a synchronous optimization."""

    success: bool
    result: Optional[OptimizationResult] = None
    error: Optional[str] = None
    performance_metrics: PerformanceMetrics


class ControlResponse(BaseModel):
    """Response model for start/pause/resume/cancel."""

    message: str
    status: str
