"""Decoded day-by-day schedule models and user edits to a schedule."""

from typing import List, Literal, Optional, Union
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class DaySchedule(BaseModel):
    """One decoded day: shifts worked and the resulting balance movement.

    end_balance = start_balance + earnings - expenses + deposit
    """

    day: int  # 1-based
    shifts: List[str]
    earnings: float
    expenses: float
    deposit: float
    start_balance: float
    end_balance: float

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "day": 1,
                "shifts": ["large"],
                "earnings": 86.5,
                "expenses": 177.0,
                "deposit": 0.0,
                "start_balance": 1000.0,
                "end_balance": 909.5,
            }
        },
    }

    @property
    def is_work_day(self) -> bool:
        """Whether at least one shift is worked on this day."""
        return len(self.shifts) > 0


EditValue = Union[float, str, List[str]]


class Edit(BaseModel):
    """A user change to one field of one day of a decoded schedule."""

    day: int
    field: Literal["earnings", "expenses", "balance", "notes", "shifts", "deposit"]
    original_value: Optional[EditValue] = None
    new_value: EditValue

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {"day": 4, "field": "earnings", "new_value": 154.0},
        },
    }


class ScheduleMetrics(BaseModel):
    """Totals and balance range of a schedule."""

    total_work_days: int
    total_earnings: float
    total_expenses: float
    average_balance: float
    min_balance: float
    max_balance: float

    model_config = {"frozen": True}
