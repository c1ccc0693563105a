"""
Error taxonomy for the review pipeline.

Adapters raise these domain errors; activities translate them into
Temporal ApplicationErrors so that retry policies can tell caller faults and
integration bugs (non-retryable) from infrastructure faults (retryable).
"""

from temporalio.exceptions import ApplicationError


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    retryable = False


class ValidationError(PipelineError):
    """The submission carries no usable review text (caller's fault)."""


class ClassifierUnavailable(PipelineError):
    """The sentiment provider could not be reached or returned an error."""

    retryable = True


class StoreUnavailable(PipelineError):
    """The record store rejected or failed a read or write."""

    retryable = True


class DispatchUnavailable(PipelineError):
    """The notification sink failed to accept a publish."""

    retryable = True


class UnrecognizedSentimentLabel(PipelineError):
    """The provider answered with a label outside the known set."""

    def __init__(self, label: object) -> None:
        super().__init__(f"unrecognized sentiment label: {label!r}")
        self.label = label


def to_application_error(error: PipelineError) -> ApplicationError:
    """
    Wrap a domain error for reporting from an activity.

    The error class name travels as the ApplicationError type, which is what
    workflows match on and what retry policies list as non-retryable.

    Args:
        error: Domain error raised by an adapter

    Returns:
        ApplicationError carrying the error type and retryability
    """
    return ApplicationError(
        str(error),
        type=type(error).__name__,
        non_retryable=not error.retryable,
    )
