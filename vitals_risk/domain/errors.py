"""
Errors reported by the request boundary.

The scoring core never raises for bad numbers; these cover the cases the
boundary must reject or report before or around a pipeline run.
"""


class PipelineError(Exception):
    """Base class for every error the boundary can hand back."""

    error = "Internal error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(PipelineError):
    """The payload is not shaped like a scoring request."""

    error = "Invalid request"


class InsufficientWindowError(PipelineError):
    """Fewer daily records than the minimum scoring window."""

    error = "Insufficient window"

    def __init__(self, days: int, min_days: int) -> None:
        super().__init__(
            f"Need at least {min_days} days of features (30 preferred) in `features` array"
        )
        self.days = days
        self.min_days = min_days


class PipelineComputationError(PipelineError):
    """Unexpected fault while scoring a window."""

    error = "Internal error"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause
