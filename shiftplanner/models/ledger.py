"""Fixed expense and deposit models."""

from pydantic import BaseModel


class Expense(BaseModel):
    """Represents a fixed expense due on a day of the horizon."""

    day: int
    name: str = ""
    amount: float

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {"day": 30, "name": "Rent", "amount": 1636.0},
        },
    }


class Deposit(BaseModel):
    """Represents money arriving on a day of the horizon (not shift pay)."""

    day: int
    amount: float
    name: str = ""

    model_config = {"frozen": True}
