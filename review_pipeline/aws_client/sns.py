"""
Amazon SNS publisher for review notifications.

Publishing fans out to whatever subscribers the topic has (typically email).
Subscriptions are managed outside this service.
"""

from typing import Optional

import boto3

# SNS rejects subjects longer than 100 characters
SNS_MAX_SUBJECT_LENGTH = 100


class SnsPublisher:
    """Publishes plain-text messages to one SNS topic."""

    def __init__(
        self,
        topic_arn: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        """
        Args:
            topic_arn: Destination topic
            region_name: AWS region (defaults to environment configuration)
            endpoint_url: Alternate endpoint, e.g. LocalStack
        """
        self.topic_arn = topic_arn
        self.client = boto3.client(
            "sns",
            region_name=region_name,
            endpoint_url=endpoint_url,
        )

    def publish(self, subject: str, body: str) -> str:
        """
        Publish one message to the topic.

        Args:
            subject: Message subject (used as the email subject line)
            body: Message body

        Returns:
            SNS MessageId

        Raises:
            ClientError: On AWS API errors
            BotoCoreError: On connection or credential errors
        """
        response = self.client.publish(
            TopicArn=self.topic_arn,
            Subject=subject[:SNS_MAX_SUBJECT_LENGTH],
            Message=body,
        )
        return response["MessageId"]
