"""
Temporal workflows for customer review triage.

Workflows are the orchestration layer in Temporal - they coordinate activities,
manage state durably, and survive worker restarts. Workflow code must be
deterministic (no random numbers, current time, or direct I/O), which is why
ticket IDs come from ``workflow.uuid4`` rather than ``uuid.uuid4``.

For design rationale on activity boundaries and error reporting, see the
activities.py module docstring.
"""

import asyncio
from datetime import timedelta
from typing import Any, Dict, Optional

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError, ApplicationError, CancelledError

with workflow.unsafe.imports_passed_through():
    from review_pipeline.activities import (
        classify_review,
        dispatch_notification,
        load_review,
        store_review,
    )
    from review_pipeline.errors import ValidationError
    from review_pipeline.normalizer import normalize
    from review_pipeline.tickets import next_ticket_id
    from review_pipeline.models import (
        ClassifyInput,
        ClassificationResult,
        PipelineState,
        RedispatchInput,
        ReviewPipelineInput,
        ReviewPipelineResult,
        ReviewRecord,
        Sentiment,
    )

# Error types that no amount of retrying will fix
NON_RETRYABLE_ERROR_TYPES = [
    "ValidationError",
    "UnrecognizedSentimentLabel",
    "NotNegative",
    "RecordNotFound",
]

CLASSIFY_TIMEOUT = timedelta(seconds=30)
STORE_TIMEOUT = timedelta(seconds=10)
DISPATCH_TIMEOUT = timedelta(seconds=10)


def build_retry_policy(max_attempts: int) -> RetryPolicy:
    """
    Bounded exponential backoff shared by every external call.

    Attempts are spaced 1s, 2s, 4s, ... capped at 10s, and stop after
    max_attempts tries in total.
    """
    return RetryPolicy(
        initial_interval=timedelta(seconds=1),
        maximum_interval=timedelta(seconds=10),
        backoff_coefficient=2.0,
        maximum_attempts=max_attempts,
        non_retryable_error_types=NON_RETRYABLE_ERROR_TYPES,
    )


def describe_failure(error: BaseException) -> tuple:
    """
    Reduce an activity failure to (error_type, message).

    ActivityError wraps the real cause; an ApplicationError cause carries the
    domain error class name as its type.
    """
    cause = error.cause if isinstance(error, ActivityError) and error.cause else error
    if isinstance(cause, ApplicationError):
        return cause.type or "ApplicationError", cause.message
    return type(cause).__name__, str(cause)


@workflow.defn
class ReviewPipeline:
    """
    Takes one review submission through normalize, classify, ticket, store
    and, for negative reviews, notify.

    State machine:

        RECEIVED -> NORMALIZED -> CLASSIFIED -> TICKETED -> RECORDED
        RECORDED -> DISPATCHED   (NEGATIVE, notification sent)
        RECORDED -> PARTIAL      (NEGATIVE, notification failed)
        RECORDED -> DONE         (any other sentiment)
        RECEIVED -> REJECTED     (no review text)
        NORMALIZED/TICKETED -> FAILED (classifier or store gave up)

    Every terminal state is returned as a ReviewPipelineResult rather than
    raised, so callers can map outcomes to responses without unwrapping
    Temporal failures.

    Architecture Decisions:
    -----------------------
    Normalization runs inline: it is pure and deterministic, so it needs no
    activity and no retry.

    No rollback: once the record is written it stays, even when the
    notification cannot be delivered. The result is PARTIAL and an operator
    can replay the notification with RedispatchNotification.

    Cancellation: from the moment the store write starts, the write and the
    notification that follows are shielded from workflow cancellation. The
    workflow finishes them and only then reports itself cancelled. A cancel
    that arrives earlier stops the pipeline with nothing stored.
    """

    def __init__(self) -> None:
        """Initialize workflow state for query support."""
        self._result = ReviewPipelineResult()

    @workflow.query
    def get_state(self) -> Dict[str, Any]:
        """
        Query the pipeline's current position.

        Returns:
            Dictionary with:
                - state: Current PipelineState name
                - transitions: States visited so far, in order
                - ticket_id: Ticket (None until TICKETED)
                - sentiment: Label (None until CLASSIFIED)
        """
        return {
            "state": self._result.state.value,
            "transitions": list(self._result.transitions),
            "ticket_id": self._result.ticket_id,
            "sentiment": self._result.sentiment.value if self._result.sentiment else None,
        }

    @workflow.run
    async def run(self, input: ReviewPipelineInput) -> ReviewPipelineResult:
        """
        Process one review submission.

        Args:
            input: Workflow input parameters

        Returns:
            Result in one of the terminal states
        """
        retry_policy = build_retry_policy(input.max_attempts)
        self._advance(PipelineState.RECEIVED)

        try:
            text = normalize(input.submission)
        except ValidationError as e:
            return self._finish(PipelineState.REJECTED, "ValidationError", str(e))

        self._result.text = text
        self._advance(PipelineState.NORMALIZED)

        try:
            classification: ClassificationResult = await workflow.execute_activity(
                classify_review,
                ClassifyInput(text=text, language_code=input.language_code),
                start_to_close_timeout=CLASSIFY_TIMEOUT,
                retry_policy=retry_policy,
            )
        except ActivityError as e:
            # Nothing is stored yet, so a cancel here stops the pipeline
            if isinstance(e.cause, CancelledError):
                workflow.logger.info("Review pipeline cancelled during classification")
                raise
            return self._finish(PipelineState.FAILED, *describe_failure(e))

        self._result.sentiment = classification.sentiment
        self._result.score = classification.score
        self._advance(PipelineState.CLASSIFIED)

        self._result.ticket_id = next_ticket_id(workflow.uuid4)
        self._advance(PipelineState.TICKETED)

        record = ReviewRecord(
            ticket_id=self._result.ticket_id,
            text=text,
            sentiment=classification.sentiment,
        )

        task = asyncio.ensure_future(self._record_and_notify(record, retry_policy))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            workflow.logger.warning(
                f"Cancellation requested for ticket {record.ticket_id}; "
                "finishing store and notification first"
            )
            await task
            raise

    async def _record_and_notify(
        self,
        record: ReviewRecord,
        retry_policy: RetryPolicy,
    ) -> ReviewPipelineResult:
        try:
            await workflow.execute_activity(
                store_review,
                record,
                start_to_close_timeout=STORE_TIMEOUT,
                retry_policy=retry_policy,
            )
        except ActivityError as e:
            return self._finish(PipelineState.FAILED, *describe_failure(e))

        self._advance(PipelineState.RECORDED)

        # Only NEGATIVE notifies; MIXED is stored like any other label
        if record.sentiment != Sentiment.NEGATIVE:
            return self._finish(PipelineState.DONE)

        try:
            self._result.notification_id = await workflow.execute_activity(
                dispatch_notification,
                record,
                start_to_close_timeout=DISPATCH_TIMEOUT,
                retry_policy=retry_policy,
            )
        except ActivityError as e:
            # Record stays stored; flagged for redispatch
            return self._finish(PipelineState.PARTIAL, *describe_failure(e))

        return self._finish(PipelineState.DISPATCHED)

    def _advance(self, state: PipelineState) -> None:
        self._result.state = state
        self._result.transitions.append(state.value)

    def _finish(
        self,
        state: PipelineState,
        error_type: Optional[str] = None,
        error: Optional[str] = None,
    ) -> ReviewPipelineResult:
        self._advance(state)
        self._result.error_type = error_type
        self._result.error = error

        if error_type == "UnrecognizedSentimentLabel":
            workflow.logger.error(f"Classifier integration error: {error}")
        elif state is PipelineState.PARTIAL:
            workflow.logger.error(
                f"Ticket {self._result.ticket_id} stored but notification failed: {error}"
            )
        elif error_type:
            workflow.logger.warning(f"Review pipeline ended {state.value}: {error_type}: {error}")
        else:
            workflow.logger.info(f"Ticket {self._result.ticket_id} ended {state.value}")

        return self._result


@workflow.defn
class RedispatchNotification:
    """
    Re-sends the notification for a stored negative review.

    Used by operators to recover PARTIAL outcomes. The record is read back
    from the store, so the notification always reflects what was persisted.
    """

    @workflow.run
    async def run(self, input: RedispatchInput) -> str:
        """
        Args:
            input: Workflow input parameters

        Returns:
            Message ID acknowledged by the sink
        """
        retry_policy = build_retry_policy(input.max_attempts)

        record: ReviewRecord = await workflow.execute_activity(
            load_review,
            input.ticket_id,
            start_to_close_timeout=STORE_TIMEOUT,
            retry_policy=retry_policy,
        )

        message_id = await workflow.execute_activity(
            dispatch_notification,
            record,
            start_to_close_timeout=DISPATCH_TIMEOUT,
            retry_policy=retry_policy,
        )
        workflow.logger.info(f"Redispatched ticket {input.ticket_id} as {message_id}")
        return message_id
