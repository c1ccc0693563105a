"""
CLI client for submitting one review to the pipeline.

This script starts a ReviewPipeline execution on the Temporal server and
waits for the result. The workflow must have a worker running to process it
(see run_worker.py).

Usage:
    python -m review_pipeline.run_workflow --message "Worst experience ever."
    python -m review_pipeline.run_workflow --review "Great product, highly recommend!"

Example output:
    ============================================================
    Review Pipeline Result
    ============================================================
    State         : DISPATCHED
    Ticket ID     : 3f0c6c1e-5a1d-4c5e-9d0a-2b7e8f1c4a90
    Sentiment     : NEGATIVE (0.998)
    Transitions   : RECEIVED > NORMALIZED > CLASSIFIED > TICKETED > RECORDED > DISPATCHED
    ============================================================
"""

import asyncio
import argparse
import uuid

from dotenv import load_dotenv
from temporalio.client import Client

from review_pipeline.config import Settings
from review_pipeline.models import ReviewPipelineInput, ReviewPipelineResult
from review_pipeline.workflows import ReviewPipeline

load_dotenv()


def parse_args() -> argparse.Namespace:
    """
    Parse command-line arguments for workflow execution.

    Returns:
        Parsed arguments with message and/or review text
    """
    parser = argparse.ArgumentParser(
        description="Submit a customer review to the review pipeline on Temporal",
        epilog='Example: python -m review_pipeline.run_workflow --message "Great service"'
    )
    parser.add_argument(
        "--message",
        help="Review text sent under the 'message' field",
    )
    parser.add_argument(
        "--review",
        help="Review text sent under the 'review' field",
    )

    # Neither flag is required: an empty submission exercises the REJECTED path
    return parser.parse_args()


async def main(submission: dict) -> None:
    """
    Execute the review pipeline workflow.

    Args:
        submission: Request body with "message" and/or "review"
    """
    settings = Settings.from_env()
    workflow_id = f"review-{uuid.uuid4()}"

    print(f"Starting workflow execution...")
    print(f"  Workflow ID: {workflow_id}")
    print(f"  Task queue: {settings.task_queue}")
    print()

    client = await Client.connect(settings.temporal_host)

    result = await client.execute_workflow(
        ReviewPipeline.run,
        ReviewPipelineInput(
            submission=submission,
            language_code=settings.language_code,
            max_attempts=settings.max_attempts,
        ),
        id=workflow_id,
        task_queue=settings.task_queue,
    )

    print_result(result)


def print_result(result: ReviewPipelineResult) -> None:
    """
    Pretty-print workflow execution results.

    Args:
        result: Completed workflow result
    """
    print("=" * 60)
    print("Review Pipeline Result")
    print("=" * 60)
    print(f"State         : {result.state.value}")
    print(f"Ticket ID     : {result.ticket_id or 'N/A'}")

    if result.sentiment is not None:
        score = f" ({result.score:.3f})" if result.score is not None else ""
        print(f"Sentiment     : {result.sentiment.value}{score}")
    else:
        print(f"Sentiment     : N/A")

    if result.notification_id:
        print(f"Notification  : {result.notification_id}")
    if result.error:
        print(f"Error         : {result.error_type}: {result.error}")

    print(f"Transitions   : {' > '.join(result.transitions)}")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    args = parse_args()
    submission = {
        key: value
        for key, value in (("message", args.message), ("review", args.review))
        if value is not None
    }
    asyncio.run(main(submission))
