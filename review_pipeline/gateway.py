"""
HTTP gateway for review submissions.

Routes:
    POST /                     submit {"message": ...} or {"review": ...}
    GET  /reviews/{ticket_id}  fetch a stored review
    GET  /health               liveness probe

Each POST starts one ReviewPipeline workflow and waits for its outcome. The
workflow runs on the Temporal server, so a client that disconnects early
does not stop the store write or the notification.

Status codes:
    200  DONE or DISPATCHED
    202  PARTIAL (stored, notification pending redispatch)
    400  REJECTED or a body that is not a JSON object
    500  FAILED on a classifier integration error
    502  FAILED because a backing service stayed unavailable
"""

import logging
import uuid
from typing import Any, Dict

from aiohttp import web
from temporalio.client import Client, WorkflowFailureError
from temporalio.service import RPCError

from review_pipeline.config import Settings
from review_pipeline.errors import PipelineError
from review_pipeline.models import (
    PipelineState,
    ReviewPipelineInput,
    ReviewPipelineResult,
)
from review_pipeline.storage import RecordStore
from review_pipeline.workflows import ReviewPipeline

logger = logging.getLogger(__name__)

CLIENT_KEY = web.AppKey("temporal_client", Client)
SETTINGS_KEY = web.AppKey("settings", Settings)
STORE_KEY = web.AppKey("record_store", RecordStore)

STATUS_BY_STATE = {
    PipelineState.DONE: 200,
    PipelineState.DISPATCHED: 200,
    PipelineState.PARTIAL: 202,
    PipelineState.REJECTED: 400,
    PipelineState.FAILED: 502,
}


def status_for(result: ReviewPipelineResult) -> int:
    """Map a pipeline outcome to an HTTP status code."""
    if result.state == PipelineState.FAILED and result.error_type == "UnrecognizedSentimentLabel":
        return 500
    return STATUS_BY_STATE.get(result.state, 500)


def result_body(result: ReviewPipelineResult) -> Dict[str, Any]:
    """Render a pipeline outcome as the response document."""
    body: Dict[str, Any] = {
        "ticketId": result.ticket_id,
        "sentiment": result.sentiment.value if result.sentiment else None,
        "score": result.score,
        "state": result.state.value,
    }
    if result.error:
        body["error"] = result.error
        body["errorType"] = result.error_type
    return body


async def submit_review(request: web.Request) -> web.Response:
    try:
        submission = await request.json()
    except ValueError:
        # JSONDecodeError or UnicodeDecodeError
        return web.json_response({"error": "request body must be JSON"}, status=400)

    if not isinstance(submission, dict):
        return web.json_response({"error": "request body must be a JSON object"}, status=400)

    client = request.app[CLIENT_KEY]
    settings = request.app[SETTINGS_KEY]
    workflow_id = f"review-{uuid.uuid4()}"

    try:
        result: ReviewPipelineResult = await client.execute_workflow(
            ReviewPipeline.run,
            ReviewPipelineInput(
                submission=submission,
                language_code=settings.language_code,
                max_attempts=settings.max_attempts,
            ),
            id=workflow_id,
            task_queue=settings.task_queue,
        )
    except (WorkflowFailureError, RPCError) as e:
        logger.error(f"Workflow {workflow_id} did not complete: {e}")
        return web.json_response({"error": "review pipeline unavailable"}, status=502)

    status = status_for(result)
    if status >= 500:
        logger.error(f"Workflow {workflow_id} ended {result.state.value}: {result.error}")
    else:
        logger.info(f"Workflow {workflow_id} ended {result.state.value}")

    return web.json_response(result_body(result), status=status)


async def get_review(request: web.Request) -> web.Response:
    ticket_id = request.match_info["ticket_id"]
    store = request.app[STORE_KEY]

    try:
        record = await store.get(ticket_id)
    except ValueError:
        return web.json_response({"error": "invalid ticket id"}, status=400)
    except PipelineError as e:
        logger.error(f"Failed to read ticket {ticket_id}: {e}")
        return web.json_response({"error": "record store unavailable"}, status=502)

    if record is None:
        return web.json_response({"error": f"ticket {ticket_id} not found"}, status=404)
    return web.json_response(record.to_item())


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def create_app(client: Client, settings: Settings, store: RecordStore) -> web.Application:
    """
    Build the gateway application.

    Args:
        client: Connected Temporal client
        settings: Runtime settings (task queue, retry budget, language)
        store: Record store used to serve GET /reviews/{ticket_id}

    Returns:
        aiohttp application ready for web.run_app or a test client
    """
    app = web.Application()
    app[CLIENT_KEY] = client
    app[SETTINGS_KEY] = settings
    app[STORE_KEY] = store

    app.router.add_post("/", submit_review)
    app.router.add_get("/reviews/{ticket_id}", get_review)
    app.router.add_get("/health", health)
    return app
