"""
AWS Comprehend client for sentiment analysis.

Provides a simple interface for single-text sentiment detection using AWS
Comprehend's pre-trained models, and handles the service's text size limit.
"""

from typing import Any, Dict, Optional

import boto3


# AWS Comprehend limits
COMPREHEND_MAX_TEXT_BYTES = 5000  # 5KB per text


class ComprehendClient:
    """
    Client for AWS Comprehend sentiment analysis.

    Automatically trims oversized text to the service limit before calling
    DetectSentiment.
    """

    def __init__(
        self,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        """
        Initialize AWS Comprehend client.

        Args:
            region_name: AWS region (defaults to environment configuration)
            endpoint_url: Alternate endpoint, e.g. LocalStack
        """
        self.client = boto3.client(
            "comprehend",
            region_name=region_name,
            endpoint_url=endpoint_url,
        )

    def detect_sentiment(
        self,
        text: str,
        language_code: str = "en",
    ) -> Dict[str, Any]:
        """
        Analyze sentiment for a single text.

        Args:
            text: Text to analyze (trimmed to 5KB UTF-8 if longer)
            language_code: ISO 639-1 language code

        Returns:
            Dictionary with:
                - Sentiment: POSITIVE | NEGATIVE | NEUTRAL | MIXED
                - SentimentScore: {Positive, Negative, Neutral, Mixed} floats

        Raises:
            ClientError: On AWS API errors
            BotoCoreError: On connection or credential errors
        """
        if self.is_text_oversized(text):
            text = self.truncate(text)

        response = self.client.detect_sentiment(
            Text=text,
            LanguageCode=language_code,
        )
        return {
            "Sentiment": response.get("Sentiment"),
            "SentimentScore": response.get("SentimentScore") or {},
        }

    def is_text_oversized(self, text: str) -> bool:
        """
        Check if text exceeds AWS Comprehend's size limit.

        Args:
            text: Text to check

        Returns:
            True if text exceeds 5KB when UTF-8 encoded
        """
        return len(text.encode("utf-8")) > COMPREHEND_MAX_TEXT_BYTES

    @staticmethod
    def truncate(text: str) -> str:
        """
        Cut text to the size limit without splitting a UTF-8 sequence.

        Example:
            >>> len(ComprehendClient.truncate("x" * 10000))
            5000
        """
        encoded = text.encode("utf-8")[:COMPREHEND_MAX_TEXT_BYTES]
        return encoded.decode("utf-8", errors="ignore")
