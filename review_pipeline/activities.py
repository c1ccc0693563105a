"""
Temporal activities for classifying, storing and notifying reviews.

Activities are the building blocks of Temporal workflows. They perform
the actual work (AWS calls, file I/O) and can be retried independently
with configurable policies.

DESIGN CHOICES
===============

One activity per external service:
-----------------------------------
Classification, storage and notification each talk to a different service
with its own failure modes. Keeping them in separate activities gives each
call its own retry budget, and a notification failure never causes the
record to be written again or the review to be classified again.

Error reporting:
----------------
Adapters raise domain errors (see errors.py). Activities convert them into
ApplicationErrors whose ``type`` is the error class name, so the workflow
can tell a classifier outage from a store outage, and so retry policies can
mark UnrecognizedSentimentLabel as non-retryable.

Clients per call:
-----------------
Clients are built from the environment on each activity execution. boto3
client construction is cheap compared to the network calls, and it keeps
workers free of shared mutable state.
"""

from temporalio import activity
from temporalio.exceptions import ApplicationError

from review_pipeline.aws_client.comprehend import ComprehendClient
from review_pipeline.classifier import SentimentClassifier
from review_pipeline.config import Settings
from review_pipeline.errors import PipelineError, to_application_error
from review_pipeline.notifier import NotificationDispatcher, build_notification_sink
from review_pipeline.storage import build_record_store
from review_pipeline.models import (
    ClassifyInput,
    ClassificationResult,
    ReviewRecord,
)


@activity.defn
async def classify_review(input: ClassifyInput) -> ClassificationResult:
    """
    Classify one review with AWS Comprehend.

    Args:
        input: Activity input parameters

    Returns:
        Sentiment label and the provider's confidence for it

    Raises:
        ApplicationError:
            - Retryable (ClassifierUnavailable) on throttling or network errors
            - Non-retryable (UnrecognizedSentimentLabel) on unknown labels
    """
    settings = Settings.from_env()
    classifier = SentimentClassifier(
        ComprehendClient(
            region_name=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        ),
        language_code=input.language_code,
    )

    try:
        result = await classifier.classify(input.text)
    except PipelineError as e:
        if not e.retryable:
            activity.logger.error(f"Classifier integration error: {e}")
        raise to_application_error(e) from e

    activity.logger.info(f"Classified review as {result.sentiment.value} (score={result.score})")
    return result


@activity.defn
async def store_review(record: ReviewRecord) -> None:
    """
    Persist a classified review under its ticket ID.

    Safe to retry: the same record always lands on the same key.

    Args:
        record: Review record to write

    Raises:
        ApplicationError: Retryable (StoreUnavailable) on storage failures
    """
    store = build_record_store(Settings.from_env())

    try:
        await store.put(record)
    except PipelineError as e:
        raise to_application_error(e) from e

    activity.logger.info(f"Stored ticket {record.ticket_id} ({record.sentiment.value})")


@activity.defn
async def load_review(ticket_id: str) -> ReviewRecord:
    """
    Read a stored review by ticket ID.

    Args:
        ticket_id: Ticket identifier

    Returns:
        The stored record

    Raises:
        ApplicationError:
            - Retryable (StoreUnavailable) on storage failures
            - Non-retryable (RecordNotFound) if no record has that ticket
    """
    store = build_record_store(Settings.from_env())

    try:
        record = await store.get(ticket_id)
    except PipelineError as e:
        raise to_application_error(e) from e

    if record is None:
        raise ApplicationError(
            f"No review stored for ticket {ticket_id}",
            type="RecordNotFound",
            non_retryable=True,
        )
    return record


@activity.defn
async def dispatch_notification(record: ReviewRecord) -> str:
    """
    Publish the negative review notification for a stored record.

    Args:
        record: Stored NEGATIVE review record

    Returns:
        Message ID acknowledged by the sink

    Raises:
        ApplicationError:
            - Retryable (DispatchUnavailable) on publish failures
            - Non-retryable (NotNegative) if the record is not NEGATIVE
    """
    dispatcher = NotificationDispatcher(build_notification_sink(Settings.from_env()))

    try:
        message_id = await dispatcher.dispatch(record)
    except ValueError as e:
        raise ApplicationError(str(e), type="NotNegative", non_retryable=True) from e
    except PipelineError as e:
        raise to_application_error(e) from e

    activity.logger.info(f"Dispatched notification {message_id} for ticket {record.ticket_id}")
    return message_id
