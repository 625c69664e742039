"""Routes for optimization control (optimize, start, pause, resume, cancel)."""

import logging
from fastapi import APIRouter, HTTPException

from ..errors import OptimizationError
from ..schemas.optimization_schemas import ControlResponse, OptimizeRequest, OptimizeResponse
from ..services.singleton import get_optimization_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["optimization"])


@router.post("/optimize", response_model=OptimizeResponse)
def optimize(request: OptimizeRequest):
    """
    Run an optimization and wait for the result.

    Declared without async so the run executes in FastAPI's threadpool.

    Args:
        request: Config and optional expense/deposit/shift tables

    Returns:
        Result (or error) with performance metrics
    """
    optimization_service = get_optimization_service()

    try:
        command = optimization_service.build_start_command(
            request.config, request.expenses, request.deposits, request.shift_types
        )
        return OptimizeResponse(**optimization_service.optimize_now(command))
    except (ValueError, OptimizationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error running optimization: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/start", response_model=ControlResponse)
async def start_optimization(request: OptimizeRequest):
    """
    Start an optimization in the background.

    A run already in progress is cancelled and replaced.

    Args:
        request: Config and optional expense/deposit/shift tables

    Returns:
        Confirmation message
    """
    optimization_service = get_optimization_service()

    try:
        command = optimization_service.build_start_command(
            request.config, request.expenses, request.deposits, request.shift_types
        )
        optimization_service.start(command)
        return ControlResponse(message="Optimization started", status="running")
    except (ValueError, OptimizationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting optimization: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/pause", response_model=ControlResponse)
async def pause_optimization():
    """Pause the running optimization at its next generation."""
    optimization_service = get_optimization_service()

    try:
        optimization_service.pause()
        return ControlResponse(message="Pause requested", status="paused")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error pausing optimization: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/resume", response_model=ControlResponse)
async def resume_optimization():
    """Resume a paused optimization."""
    optimization_service = get_optimization_service()

    try:
        optimization_service.resume()
        return ControlResponse(message="Resume requested", status="running")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error resuming optimization: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/cancel", response_model=ControlResponse)
async def cancel_optimization():
    """Cancel the running or paused optimization."""
    optimization_service = get_optimization_service()

    try:
        optimization_service.cancel()
        return ControlResponse(message="Cancel requested", status="cancelled")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error cancelling optimization: {e}")
        raise HTTPException(status_code=500, detail=str(e))
