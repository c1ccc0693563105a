"""
Sentiment classification adapter.

Wraps any provider that answers ``detect_sentiment(text, language_code)``
with a mapping shaped like Comprehend's response::

    {"Sentiment": "NEGATIVE",
     "SentimentScore": {"Positive": 0.01, "Negative": 0.97, ...}}

and turns it into a ClassificationResult. SentimentScore is optional.

The provider's label must be one of the four known sentiments. Anything
else means the integration is broken and is reported as
UnrecognizedSentimentLabel rather than being mapped to a default.
"""

import asyncio
from typing import Any, Mapping, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from review_pipeline.errors import ClassifierUnavailable, UnrecognizedSentimentLabel
from review_pipeline.models import ClassificationResult, Sentiment


class SentimentProvider(Protocol):
    def detect_sentiment(self, text: str, language_code: str = "en") -> Mapping[str, Any]:
        ...


def parse_sentiment_label(raw: Any) -> Sentiment:
    """
    Map a provider label onto the Sentiment enum, ignoring case.

    Example:
        >>> parse_sentiment_label("Negative")
        <Sentiment.NEGATIVE: 'NEGATIVE'>

    Raises:
        UnrecognizedSentimentLabel: If the label is not a known sentiment
    """
    if isinstance(raw, str):
        try:
            return Sentiment(raw.strip().upper())
        except ValueError:
            pass
    raise UnrecognizedSentimentLabel(raw)


def label_score(scores: Optional[Mapping[str, Any]], sentiment: Sentiment) -> Optional[float]:
    """
    Pick the confidence for the chosen label out of a score mapping.

    Comprehend keys scores in title case ("Negative"); other providers may
    not, so the lookup ignores case.
    """
    if not scores:
        return None
    for key, value in scores.items():
        if str(key).upper() == sentiment.value and value is not None:
            return float(value)
    return None


class SentimentClassifier:
    """Classifies review text through a SentimentProvider."""

    def __init__(self, provider: SentimentProvider, language_code: str = "en") -> None:
        self.provider = provider
        self.language_code = language_code

    async def classify(self, text: str) -> ClassificationResult:
        """
        Classify one review.

        The provider call blocks, so it runs in a worker thread.

        Raises:
            ClassifierUnavailable: On provider transport or API errors
            UnrecognizedSentimentLabel: If the provider's label is unknown
        """
        try:
            response = await asyncio.to_thread(
                self.provider.detect_sentiment, text, self.language_code
            )
        except (BotoCoreError, ClientError, OSError) as e:
            raise ClassifierUnavailable(f"sentiment provider failed: {e}") from e

        sentiment = parse_sentiment_label(response.get("Sentiment"))
        return ClassificationResult(
            sentiment=sentiment,
            score=label_score(response.get("SentimentScore"), sentiment),
        )
