"""Routes for schedule edits and schedule checks."""

import logging
from fastapi import APIRouter, HTTPException

from ..schemas.schedule_schemas import (
    ConstraintsRequest,
    ConstraintsResponse,
    ScheduleCheckRequest,
    ScheduleCheckResponse,
)
from ..services.singleton import get_schedule_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/schedule", tags=["schedule"])


@router.post("/constraints", response_model=ConstraintsResponse, response_model_by_alias=False)
async def generate_constraints(request: ConstraintsRequest):
    """
    Turn schedule edits into manual constraints for the next run.

    Args:
        request: Edits and the shift table used to match earnings

    Returns:
        One manual constraint per edited day
    """
    schedule_service = get_schedule_service()

    try:
        constraints = schedule_service.generate_manual_constraints(request.edits, request.shift_types)
        return ConstraintsResponse(constraints=constraints)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating constraints: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/validate", response_model=ScheduleCheckResponse)
async def validate_schedule(request: ScheduleCheckRequest):
    """
    Re-check a schedule against a run configuration.

    Args:
        request: Schedule and the configuration it should satisfy

    Returns:
        Violations found and schedule metrics
    """
    schedule_service = get_schedule_service()

    try:
        report = schedule_service.validate(request.schedule, request.config)
        metrics = schedule_service.calculate_metrics(request.schedule)
        return ScheduleCheckResponse(
            is_valid=report.is_valid(),
            violations=report.errors,
            metrics=metrics,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error validating schedule: {e}")
        raise HTTPException(status_code=500, detail=str(e))
