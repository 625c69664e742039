"""Shift type model."""

from typing import Dict, Optional
from pydantic import BaseModel


class ShiftType(BaseModel):
    """Represents a category of work shift and what it pays."""

    net: float  # cash in hand
    gross: Optional[float] = None

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {"net": 86.5, "gross": 94.5},
        },
    }


ShiftTypeTable = Dict[str, ShiftType]
