"""Routes for status, result, and history endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException

from ..schemas.status_schemas import HistoryResponse, ResultResponse, StatusResponse
from ..services.singleton import get_optimization_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status", response_model=StatusResponse)
async def get_status():
    """
    Get current optimization status.

    Returns:
        Run state and the latest progress snapshot
    """
    optimization_service = get_optimization_service()
    status_data = optimization_service.get_status()
    return StatusResponse(**status_data)


@router.get("/result", response_model=ResultResponse)
async def get_result():
    """
    Get the result of the most recent completed optimization.

    Returns:
        Best schedule found
    """
    optimization_service = get_optimization_service()
    result = optimization_service.get_result()
    if result is None:
        raise HTTPException(status_code=404, detail="No optimization result available")
    return ResultResponse(result=result)


@router.get("/history", response_model=HistoryResponse)
async def get_history(limit: Optional[int] = 20):
    """
    Get per-generation statistics.

    Args:
        limit: Number of recent entries to return (default: 20, use 0 for all)

    Returns:
        Generation statistics of the current or last run
    """
    optimization_service = get_optimization_service()
    history_data = optimization_service.get_history(limit=limit if limit and limit > 0 else None)
    return HistoryResponse(**history_data)
