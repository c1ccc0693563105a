"""
Negative review notifications.

Only NEGATIVE records produce a notification. The body layout is fixed
because downstream subscribers (email rules, ticketing filters) parse it.
Publishing is at-least-once: a retried dispatch may deliver the same
notification twice, and nothing here deduplicates.
"""

import asyncio
import logging
import uuid
from typing import Protocol, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from review_pipeline.aws_client.sns import SnsPublisher
from review_pipeline.config import Settings
from review_pipeline.errors import DispatchUnavailable
from review_pipeline.models import NotificationEvent, ReviewRecord, Sentiment

logger = logging.getLogger(__name__)

NOTIFICATION_SUBJECT = "Negative Customer Review Detected"

NOTIFICATION_TEMPLATE = (
    "Negative Customer Review Detected\n"
    "\n"
    "Ticket ID: {ticket_id}\n"
    "\n"
    "Review Message: {text}\n"
    "\n"
    "Sentiment: {sentiment}"
)


class NotificationSink(Protocol):
    def publish(self, subject: str, body: str) -> str:
        ...


class LogSink:
    """
    Sink that writes notifications to the log instead of publishing them.

    Meant for local development without an SNS topic.
    """

    def publish(self, subject: str, body: str) -> str:
        message_id = str(uuid.uuid4())
        logger.warning("Notification %s: %s\n%s", message_id, subject, body)
        return message_id


def build_event(record: ReviewRecord) -> NotificationEvent:
    """
    Derive the notification for a stored record.

    Raises:
        ValueError: If the record is not NEGATIVE
    """
    if record.sentiment != Sentiment.NEGATIVE:
        raise ValueError(
            f"ticket {record.ticket_id} is {record.sentiment.value}, "
            "only NEGATIVE reviews are notified"
        )
    return NotificationEvent(ticket_id=record.ticket_id, text=record.text)


def render(event: NotificationEvent) -> Tuple[str, str]:
    """
    Format an event as (subject, body).

    Example:
        >>> render(NotificationEvent("t-1", "Broken on arrival"))[1].splitlines()[2]
        'Ticket ID: t-1'
    """
    body = NOTIFICATION_TEMPLATE.format(
        ticket_id=event.ticket_id,
        text=event.text,
        sentiment=event.sentiment.value,
    )
    return NOTIFICATION_SUBJECT, body


class NotificationDispatcher:
    """Publishes negative review notifications to a NotificationSink."""

    def __init__(self, sink: NotificationSink) -> None:
        self.sink = sink

    async def dispatch(self, record: ReviewRecord) -> str:
        """
        Publish the notification for a NEGATIVE record.

        Args:
            record: Stored review record

        Returns:
            Acknowledgement ID returned by the sink

        Raises:
            ValueError: If the record is not NEGATIVE
            DispatchUnavailable: If the sink fails
        """
        subject, body = render(build_event(record))

        try:
            return await asyncio.to_thread(self.sink.publish, subject, body)
        except (BotoCoreError, ClientError, OSError) as e:
            raise DispatchUnavailable(
                f"failed to publish notification for ticket {record.ticket_id}: {e}"
            ) from e


def build_notification_sink(settings: Settings) -> NotificationSink:
    """Create the notification sink selected by NOTIFY_BACKEND."""
    if settings.notify_backend == "log":
        return LogSink()

    return SnsPublisher(
        topic_arn=settings.sns_topic_arn,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
    )
