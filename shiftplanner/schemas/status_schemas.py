"""Schemas for status, result, and history endpoints."""

from pydantic import BaseModel
from typing import List, Optional

from ..models.optimization import GenerationStatistics, OptimizationProgress, OptimizationResult


class StatusResponse(BaseModel):
    """Response model for optimization status."""

    status: str
    run_id: Optional[str] = None
    progress: Optional[OptimizationProgress] = None
    warnings: List[str] = []
    error: Optional[str] = None


class ResultResponse(BaseModel):
    """Response model for the latest completed result."""

    result: OptimizationResult


class HistoryResponse(BaseModel):
    """Response model for per-generation statistics."""

    generations: List[GenerationStatistics]
    total_generations: int
