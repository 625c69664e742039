"""Error types raised by validation and the optimization engine."""


class OptimizationError(Exception):
    """Base class for errors that abort or describe an optimization run."""


class ConfigError(OptimizationError):
    """A numeric configuration field is out of range.

    The validator corrects these in place and records them as warnings; the
    exception type exists so callers running in strict mode can raise it.
    """

    def __init__(self, field: str, value, corrected):
        self.field = field
        self.value = value
        self.corrected = corrected
        super().__init__(f"{field}={value!r} out of range, corrected to {corrected!r}")


class InfeasibleConstraintError(OptimizationError):
    """A manual constraint can never be satisfied (fatal)."""


class OptimizationCancelled(Exception):
    """Raised inside the engine when the host cancels a run.

    Not an error: the engine reports it as a ``cancelled`` notification.
    ``superseded_by`` carries the start command that replaced the run, if any.
    """

    def __init__(self, superseded_by=None):
        self.superseded_by = superseded_by
        super().__init__("Optimization cancelled")
