"""
Temporal worker process for the review triage workflows.

Workers poll the Temporal server for tasks and execute workflow and activity
code. This worker handles the ReviewPipeline and RedispatchNotification
workflows and their activities (classify_review, store_review, load_review,
dispatch_notification).

To run:
    python -m review_pipeline.run_worker

Prerequisites:
    - Temporal server running (TEMPORAL_HOST, default localhost:7233)
    - Environment variables configured in .env (see README)
    - AWS credentials configured for Comprehend, DynamoDB and SNS access
      (or STORE_BACKEND=file and NOTIFY_BACKEND=log for local runs)
"""

import asyncio
import logging

from dotenv import load_dotenv

from temporalio.client import Client
from temporalio.worker import Worker

from review_pipeline.activities import (
    classify_review,
    dispatch_notification,
    load_review,
    store_review,
)
from review_pipeline.config import Settings
from review_pipeline.workflows import RedispatchNotification, ReviewPipeline

# Load environment variables from .env file
load_dotenv()


async def main() -> None:
    """
    Start the Temporal worker and begin polling for tasks.

    The worker will run indefinitely until interrupted (Ctrl+C) or the
    process is terminated.
    """
    logging.basicConfig(level=logging.INFO)

    # Fail fast on bad configuration rather than on the first activity
    settings = Settings.from_env()

    client = await Client.connect(settings.temporal_host)

    worker = Worker(
        client,
        task_queue=settings.task_queue,
        workflows=[ReviewPipeline, RedispatchNotification],
        activities=[classify_review, store_review, load_review, dispatch_notification],
    )

    logging.getLogger(__name__).info(
        f"Worker polling {settings.task_queue} on {settings.temporal_host} "
        f"(store={settings.store_backend}, notify={settings.notify_backend})"
    )

    # Run worker (blocks until shutdown signal)
    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
