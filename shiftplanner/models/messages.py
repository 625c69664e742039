"""Control protocol messages exchanged between a host and the engine.

Commands flow host -> engine, notifications flow engine -> host. Every message
is an immutable value object; nothing crosses the boundary by reference.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .ledger import Deposit, Expense
from .optimization import OptimizationConfig, OptimizationProgress, OptimizationResult
from .shift import ShiftType


# Commands

class StartCommand(BaseModel):
    """Start a run. Omitted shift_types fall back to the default table."""

    type: Literal["start"] = "start"
    config: OptimizationConfig
    expenses: List[Expense] = Field(default_factory=list)
    deposits: List[Deposit] = Field(default_factory=list)
    shift_types: Optional[Dict[str, ShiftType]] = None

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class PauseCommand(BaseModel):
    type: Literal["pause"] = "pause"


class ResumeCommand(BaseModel):
    type: Literal["resume"] = "resume"


class CancelCommand(BaseModel):
    type: Literal["cancel"] = "cancel"


Command = Annotated[
    Union[StartCommand, PauseCommand, ResumeCommand, CancelCommand],
    Field(discriminator="type"),
]

_command_adapter = TypeAdapter(Command)


def parse_command(payload: Dict[str, Any]) -> Command:
    """
    Parse a raw command payload (e.g. decoded JSON) into a command object.

    Args:
        payload: Mapping with a "type" key of start/pause/resume/cancel

    Returns:
        The matching command model

    Raises:
        pydantic.ValidationError: If the payload does not match any command
    """
    return _command_adapter.validate_python(payload)


# Notifications

class ProgressNotification(BaseModel):
    type: Literal["progress"] = "progress"
    data: OptimizationProgress

    model_config = {"frozen": True}


class PausedNotification(BaseModel):
    type: Literal["paused"] = "paused"


class ResumedNotification(BaseModel):
    type: Literal["resumed"] = "resumed"


class CompleteNotification(BaseModel):
    type: Literal["complete"] = "complete"
    data: OptimizationResult

    model_config = {"frozen": True}


class CancelledNotification(BaseModel):
    type: Literal["cancelled"] = "cancelled"


class ErrorNotification(BaseModel):
    type: Literal["error"] = "error"
    error: str

    model_config = {"frozen": True}


Notification = Union[
    ProgressNotification,
    PausedNotification,
    ResumedNotification,
    CompleteNotification,
    CancelledNotification,
    ErrorNotification,
]
