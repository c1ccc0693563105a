"""
Runtime configuration read from environment variables.

Entry points call ``load_dotenv()`` first, so values may also come from a
``.env`` file in the working directory (see .env.example for the full list).
"""

import os
import tempfile
from dataclasses import dataclass
from typing import Mapping, Optional

STORE_BACKENDS = ("dynamodb", "file")
NOTIFY_BACKENDS = ("sns", "log")


@dataclass(frozen=True)
class Settings:
    """
    Settings shared by the worker, the gateway and the CLIs.

    Attributes:
        temporal_host: Temporal frontend address
        task_queue: Task queue shared by worker and clients
        aws_region: AWS region (None = boto3 default chain)
        aws_endpoint_url: Override endpoint for all AWS clients (e.g. LocalStack)
        language_code: ISO 639-1 language code passed to Comprehend
        max_attempts: Attempts per external call before the pipeline gives up
        store_backend: "dynamodb" or "file"
        reviews_table: DynamoDB table name
        store_path: Directory for the file backend
        notify_backend: "sns" or "log"
        sns_topic_arn: Topic for negative review notifications
        gateway_host: Interface the HTTP gateway binds to
        gateway_port: Port the HTTP gateway listens on
    """
    temporal_host: str = "localhost:7233"
    task_queue: str = "review-pipeline"
    aws_region: Optional[str] = None
    aws_endpoint_url: Optional[str] = None
    language_code: str = "en"
    max_attempts: int = 3
    store_backend: str = "dynamodb"
    reviews_table: str = "CustomerReviews"
    store_path: str = os.path.join(tempfile.gettempdir(), "review_pipeline")
    notify_backend: str = "sns"
    sns_topic_arn: Optional[str] = None
    gateway_host: str = "0.0.0.0"
    gateway_port: int = 8080

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables, falling back to defaults.

        Args:
            environ: Variables to read (defaults to os.environ)

        Returns:
            Validated settings

        Raises:
            ValueError: If a value is malformed or a backend is unknown
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        settings = cls(
            temporal_host=env.get("TEMPORAL_HOST", defaults.temporal_host),
            task_queue=env.get("TASK_QUEUE", defaults.task_queue),
            aws_region=env.get("AWS_REGION") or None,
            aws_endpoint_url=env.get("AWS_ENDPOINT_URL") or None,
            language_code=env.get("LANGUAGE_CODE", defaults.language_code),
            max_attempts=_int(env, "MAX_ATTEMPTS", defaults.max_attempts),
            store_backend=env.get("STORE_BACKEND", defaults.store_backend).lower(),
            reviews_table=env.get("REVIEWS_TABLE", defaults.reviews_table),
            store_path=env.get("STORE_PATH", defaults.store_path),
            notify_backend=env.get("NOTIFY_BACKEND", defaults.notify_backend).lower(),
            sns_topic_arn=env.get("SNS_TOPIC_ARN") or None,
            gateway_host=env.get("GATEWAY_HOST", defaults.gateway_host),
            gateway_port=_int(env, "GATEWAY_PORT", defaults.gateway_port),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise ValueError if the settings cannot work together."""
        if self.max_attempts < 1:
            raise ValueError("MAX_ATTEMPTS must be at least 1")
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, "
                f"got {self.store_backend!r}"
            )
        if self.notify_backend not in NOTIFY_BACKENDS:
            raise ValueError(
                f"NOTIFY_BACKEND must be one of {', '.join(NOTIFY_BACKENDS)}, "
                f"got {self.notify_backend!r}"
            )
        if self.notify_backend == "sns" and not self.sns_topic_arn:
            raise ValueError("SNS_TOPIC_ARN is required when NOTIFY_BACKEND=sns")


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
