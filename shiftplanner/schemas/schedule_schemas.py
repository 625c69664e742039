"""Schemas for schedule edit and check endpoints."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional

from ..models.optimization import ManualConstraint, OptimizationConfig
from ..models.schedule import DaySchedule, Edit, ScheduleMetrics
from ..models.shift import ShiftType


class ConstraintsRequest(BaseModel):
    """Request model for turning schedule edits into manual constraints."""

    edits: List[Edit]
    shift_types: Optional[Dict[str, ShiftType]] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class ConstraintsResponse(BaseModel):
    """Response model with one manual constraint per edited day."""

    constraints: List[ManualConstraint]


class ScheduleCheckRequest(BaseModel):
    """Request model for re-checking a (possibly edited) schedule."""

    schedule: List[DaySchedule]
    config: OptimizationConfig


class ScheduleCheckResponse(BaseModel):
    """Response model with schedule violations and metrics."""

    is_valid: bool
    violations: List[str]
    metrics: ScheduleMetrics
