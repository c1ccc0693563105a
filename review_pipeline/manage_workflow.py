"""
Management CLI for operating the review pipeline.

Provides commands to query a pipeline's state, list and cancel executions,
read stored records and redispatch notifications for PARTIAL outcomes.

Usage:
    # Query pipeline state
    python -m review_pipeline.manage_workflow state <workflow_id>

    # List recent pipeline executions
    python -m review_pipeline.manage_workflow list

    # Cancel a running pipeline
    python -m review_pipeline.manage_workflow cancel <workflow_id>

    # Show a stored review
    python -m review_pipeline.manage_workflow record <ticket_id>

    # Re-send the notification for a stored negative review
    python -m review_pipeline.manage_workflow redispatch <ticket_id>

Examples:
    python -m review_pipeline.manage_workflow state review-8f7d3c2a-1b4e-4f5a-9c8d-2e6f1a3b5c7d
    python -m review_pipeline.manage_workflow list --limit 10
    python -m review_pipeline.manage_workflow redispatch 3f0c6c1e-5a1d-4c5e-9d0a-2b7e8f1c4a90
"""

import asyncio
import argparse

from dotenv import load_dotenv
from temporalio.client import Client, WorkflowHandle, WorkflowFailureError
from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.service import RPCError

from review_pipeline.config import Settings
from review_pipeline.errors import PipelineError
from review_pipeline.models import RedispatchInput
from review_pipeline.storage import build_record_store
from review_pipeline.workflows import RedispatchNotification, ReviewPipeline

load_dotenv()


async def query_state(settings: Settings, workflow_id: str) -> None:
    """
    Query and display the current state of a pipeline execution.

    Args:
        settings: Runtime settings
        workflow_id: Workflow execution ID
    """
    client = await Client.connect(settings.temporal_host)

    try:
        handle: WorkflowHandle = client.get_workflow_handle(workflow_id)
        state = await handle.query(ReviewPipeline.get_state)

        print("=" * 60)
        print(f"Pipeline State: {workflow_id}")
        print("=" * 60)
        print(f"State        : {state['state']}")
        print(f"Ticket ID    : {state['ticket_id'] or 'Not yet assigned'}")
        print(f"Sentiment    : {state['sentiment'] or 'Not yet classified'}")
        print(f"Transitions  : {' > '.join(state['transitions'])}")
        print("=" * 60 + "\n")

    except RPCError as e:
        print(f"Error querying workflow: {e}")
        print(f"Workflow ID may be invalid or its history may have been purged.")


async def list_workflows(settings: Settings, limit: int = 10) -> None:
    """
    List recent pipeline executions.

    Args:
        settings: Runtime settings
        limit: Maximum number of workflows to display
    """
    client = await Client.connect(settings.temporal_host)

    try:
        workflows = client.list_workflows("WorkflowType = 'ReviewPipeline'")

        print("=" * 100)
        print(f"{'Workflow ID':<50} {'Status':<15} {'Start Time':<25}")
        print("=" * 100)

        count = 0
        async for workflow in workflows:
            if count >= limit:
                break

            status_name = workflow.status.name if workflow.status else "UNKNOWN"
            start_time = workflow.start_time.strftime("%Y-%m-%d %H:%M:%S") if workflow.start_time else "N/A"

            print(f"{workflow.id:<50} {status_name:<15} {start_time:<25}")
            count += 1

        print("=" * 100)
        print(f"\nShowing {count} workflow(s)")

    except RPCError as e:
        print(f"Error listing workflows: {e}")


async def cancel_workflow(settings: Settings, workflow_id: str) -> None:
    """
    Cancel a running pipeline.

    A pipeline that has started writing its record still finishes the write
    and any notification before it stops.

    Args:
        settings: Runtime settings
        workflow_id: Workflow execution ID
    """
    client = await Client.connect(settings.temporal_host)

    try:
        handle: WorkflowHandle = client.get_workflow_handle(workflow_id)
        await handle.cancel()

        print(f"✓ Cancellation requested for workflow: {workflow_id}")
        print(f"  A record already being stored will still be stored and notified.")

    except RPCError as e:
        print(f"Error cancelling workflow: {e}")


async def show_record(settings: Settings, ticket_id: str) -> None:
    """
    Display a stored review.

    Args:
        settings: Runtime settings
        ticket_id: Ticket identifier
    """
    store = build_record_store(settings)

    try:
        record = await store.get(ticket_id)
    except (PipelineError, ValueError) as e:
        print(f"Error reading record: {e}")
        return

    if record is None:
        print(f"No review stored for ticket {ticket_id}")
        return

    print("=" * 60)
    print(f"Ticket ID  : {record.ticket_id}")
    print(f"Sentiment  : {record.sentiment.value}")
    print(f"Review     : {record.text}")
    print("=" * 60 + "\n")


async def redispatch(settings: Settings, ticket_id: str) -> None:
    """
    Re-send the notification for a stored negative review.

    Args:
        settings: Runtime settings
        ticket_id: Ticket of a PARTIAL pipeline
    """
    client = await Client.connect(settings.temporal_host)

    try:
        message_id = await client.execute_workflow(
            RedispatchNotification.run,
            RedispatchInput(ticket_id=ticket_id, max_attempts=settings.max_attempts),
            id=f"redispatch-{ticket_id}",
            task_queue=settings.task_queue,
        )
        print(f"✓ Notification redispatched for ticket {ticket_id}: {message_id}")

    except WorkflowFailureError as e:
        print(f"Error redispatching ticket {ticket_id}: {e.cause}")

    except WorkflowAlreadyStartedError:
        print(f"Error redispatching ticket {ticket_id}: a redispatch is already running")

    except RPCError as e:
        print(f"Error redispatching ticket {ticket_id}: {e}")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Manage and monitor review pipeline executions",
        epilog="Example: python -m review_pipeline.manage_workflow state <workflow_id>"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    state_parser = subparsers.add_parser(
        "state",
        help="Query pipeline state"
    )
    state_parser.add_argument(
        "workflow_id",
        help="Workflow execution ID"
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List recent pipeline executions"
    )
    list_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of workflows to display (default: 10)"
    )

    cancel_parser = subparsers.add_parser(
        "cancel",
        help="Cancel a running pipeline"
    )
    cancel_parser.add_argument(
        "workflow_id",
        help="Workflow execution ID to cancel"
    )

    record_parser = subparsers.add_parser(
        "record",
        help="Show a stored review"
    )
    record_parser.add_argument(
        "ticket_id",
        help="Ticket ID of the review"
    )

    redispatch_parser = subparsers.add_parser(
        "redispatch",
        help="Re-send the notification for a stored negative review"
    )
    redispatch_parser.add_argument(
        "ticket_id",
        help="Ticket ID of the review"
    )

    return parser.parse_args()


async def main() -> None:
    """Main entry point for management CLI."""
    args = parse_args()
    settings = Settings.from_env()

    if args.command == "state":
        await query_state(settings, args.workflow_id)
    elif args.command == "list":
        await list_workflows(settings, args.limit)
    elif args.command == "cancel":
        await cancel_workflow(settings, args.workflow_id)
    elif args.command == "record":
        await show_record(settings, args.ticket_id)
    elif args.command == "redispatch":
        await redispatch(settings, args.ticket_id)
    else:
        print("Error: No command specified")
        print("Use --help for usage information")


if __name__ == "__main__":
    asyncio.run(main())
