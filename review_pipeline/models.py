"""
Data models for workflow execution and activity parameters.

Following Temporal best practices, activities and workflows use single
dataclass parameters for better versioning and backward compatibility.
This allows adding optional fields in the future without breaking existing
workflow executions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Sentiment(str, Enum):
    """Sentiment labels produced by the classifier."""

    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"
    MIXED = "MIXED"


class PipelineState(str, Enum):
    """
    States of one review's trip through the pipeline.

    RECEIVED is the initial state. REJECTED, FAILED, DONE, DISPATCHED and
    PARTIAL are terminal.
    """

    RECEIVED = "RECEIVED"
    NORMALIZED = "NORMALIZED"
    CLASSIFIED = "CLASSIFIED"
    TICKETED = "TICKETED"
    RECORDED = "RECORDED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"
    DONE = "DONE"
    DISPATCHED = "DISPATCHED"
    PARTIAL = "PARTIAL"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    PipelineState.REJECTED,
    PipelineState.FAILED,
    PipelineState.DONE,
    PipelineState.DISPATCHED,
    PipelineState.PARTIAL,
})


# Domain Entities
# ---------------

@dataclass(frozen=True)
class ReviewRecord:
    """
    A classified review, persisted once under its ticket ID.

    Attributes:
        ticket_id: Generated unique identifier (primary key)
        text: Normalized review text
        sentiment: Classifier label
    """
    ticket_id: str
    text: str
    sentiment: Sentiment

    def to_item(self) -> Dict[str, str]:
        """Serialize to the stored attribute layout."""
        return {
            "ticketId": self.ticket_id,
            "text": self.text,
            "sentiment": self.sentiment.value,
        }

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "ReviewRecord":
        """Build a record from its stored attribute layout."""
        return cls(
            ticket_id=item["ticketId"],
            text=item["text"],
            sentiment=Sentiment(item["sentiment"]),
        )


@dataclass(frozen=True)
class NotificationEvent:
    """
    Notification derived from a negative review. Never persisted.

    Attributes:
        ticket_id: Ticket of the stored review
        text: Review text
        sentiment: Always NEGATIVE
    """
    ticket_id: str
    text: str
    sentiment: Sentiment = Sentiment.NEGATIVE


# Activity Parameters
# -------------------

@dataclass(frozen=True)
class ClassifyInput:
    """
    Input parameters for the classify_review activity.

    Attributes:
        text: Review text to classify
        language_code: ISO 639-1 language code for sentiment analysis
    """
    text: str
    language_code: str = "en"


# Activity Return Types
# ---------------------

@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of classifying one review.

    Attributes:
        sentiment: Mapped sentiment label
        score: Provider confidence for that label (0.0-1.0), if reported
    """
    sentiment: Sentiment
    score: Optional[float] = None


# Workflow Parameters
# -------------------

@dataclass(frozen=True)
class ReviewPipelineInput:
    """
    Input parameters for the ReviewPipeline workflow.

    Attributes:
        submission: Raw request body ("message" or "review" key)
        language_code: ISO 639-1 language code for sentiment analysis
        max_attempts: Attempts allowed per external call before giving up
    """
    submission: Dict[str, Any]
    language_code: str = "en"
    max_attempts: int = 3


@dataclass(frozen=True)
class RedispatchInput:
    """
    Input parameters for the RedispatchNotification workflow.

    Attributes:
        ticket_id: Ticket of a stored negative review
        max_attempts: Attempts allowed per external call before giving up
    """
    ticket_id: str
    max_attempts: int = 3


# Workflow Return Types
# ---------------------

@dataclass(frozen=False)
class ReviewPipelineResult:
    """
    Final outcome of one pipeline execution.

    Note: frozen=False allows the workflow to fill fields in as the review
    advances through its states.

    Attributes:
        state: Terminal pipeline state
        ticket_id: Generated ticket (None if rejected or classification failed)
        text: Normalized review text
        sentiment: Classifier label
        score: Classifier confidence for the label
        error: Failure description for REJECTED, FAILED and PARTIAL
        error_type: Error class name for REJECTED, FAILED and PARTIAL
        notification_id: Sink acknowledgement for DISPATCHED
        transitions: States visited, in order
    """
    state: PipelineState = PipelineState.RECEIVED
    ticket_id: Optional[str] = None
    text: Optional[str] = None
    sentiment: Optional[Sentiment] = None
    score: Optional[float] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    notification_id: Optional[str] = None
    transitions: List[str] = field(default_factory=list)
