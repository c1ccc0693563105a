"""
Unit tests for the HTTP gateway.

Tests cover:
- Request validation before any workflow starts
- Mapping of pipeline outcomes to status codes and response bodies
- Record lookup and health routes
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from aiohttp.test_utils import TestClient, TestServer
from temporalio.service import RPCError, RPCStatusCode

from review_pipeline.config import Settings
from review_pipeline.gateway import STORE_KEY, create_app
from review_pipeline.models import (
    PipelineState,
    ReviewPipelineInput,
    ReviewPipelineResult,
    ReviewRecord,
    Sentiment,
)
from review_pipeline.storage import FileRecordStore
from review_pipeline.workflows import ReviewPipeline


def pipeline_result(state, sentiment=None, error_type=None, error=None):
    return ReviewPipelineResult(
        state=state,
        ticket_id="t-1" if sentiment else None,
        sentiment=sentiment,
        score=0.9 if sentiment else None,
        error_type=error_type,
        error=error,
    )


class TestGateway:
    """Test gateway routes with a mocked Temporal client."""

    @pytest.fixture
    def settings(self, tmp_path):
        return Settings(
            task_queue="test-queue",
            max_attempts=4,
            language_code="fr",
            store_backend="file",
            store_path=str(tmp_path),
            notify_backend="log",
        )

    @pytest.fixture
    def temporal_client(self):
        client = MagicMock()
        client.execute_workflow = AsyncMock()
        return client

    @pytest.fixture
    def store(self, settings):
        return FileRecordStore(settings.store_path)

    @pytest.fixture
    async def http(self, temporal_client, settings, store):
        app = create_app(temporal_client, settings, store)
        async with TestClient(TestServer(app)) as client:
            yield client

    @pytest.mark.asyncio
    async def test_submit_negative_review(self, http, temporal_client):
        temporal_client.execute_workflow.return_value = pipeline_result(
            PipelineState.DISPATCHED, Sentiment.NEGATIVE
        )

        resp = await http.post("/", json={"message": "Worst experience ever."})

        assert resp.status == 200
        assert await resp.json() == {
            "ticketId": "t-1",
            "sentiment": "NEGATIVE",
            "score": 0.9,
            "state": "DISPATCHED",
        }

        args, kwargs = temporal_client.execute_workflow.call_args
        assert args[0] == ReviewPipeline.run
        assert args[1] == ReviewPipelineInput(
            submission={"message": "Worst experience ever."},
            language_code="fr",
            max_attempts=4,
        )
        assert kwargs["task_queue"] == "test-queue"
        assert kwargs["id"].startswith("review-")

    @pytest.mark.asyncio
    async def test_submit_positive_review(self, http, temporal_client):
        temporal_client.execute_workflow.return_value = pipeline_result(
            PipelineState.DONE, Sentiment.POSITIVE
        )

        resp = await http.post("/", json={"review": "Great product, highly recommend!"})

        assert resp.status == 200
        body = await resp.json()
        assert body["state"] == "DONE"
        assert body["sentiment"] == "POSITIVE"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("result, status", [
        (pipeline_result(PipelineState.REJECTED, error_type="ValidationError", error="missing review text"), 400),
        (pipeline_result(PipelineState.PARTIAL, Sentiment.NEGATIVE, "DispatchUnavailable", "topic down"), 202),
        (pipeline_result(PipelineState.FAILED, error_type="ClassifierUnavailable", error="throttled"), 502),
        (pipeline_result(PipelineState.FAILED, Sentiment.NEUTRAL, "StoreUnavailable", "table down"), 502),
        (pipeline_result(PipelineState.FAILED, error_type="UnrecognizedSentimentLabel", error="bad label"), 500),
    ])
    async def test_outcome_status_codes(self, http, temporal_client, result, status):
        temporal_client.execute_workflow.return_value = result

        resp = await http.post("/", json={"message": "anything"})

        assert resp.status == status
        body = await resp.json()
        assert body["state"] == result.state.value
        assert body["error"] == result.error
        assert body["errorType"] == result.error_type

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", ["not json", "[1, 2]", '"message"', ""])
    async def test_malformed_body_is_rejected_without_workflow(self, http, temporal_client, payload):
        resp = await http.post("/", data=payload, headers={"Content-Type": "application/json"})

        assert resp.status == 400
        temporal_client.execute_workflow.assert_not_called()

    @pytest.mark.asyncio
    async def test_body_that_is_not_utf8_is_rejected(self, http, temporal_client):
        resp = await http.post(
            "/", data=b'{"message": "\xff\xfe"}', headers={"Content-Type": "application/json"}
        )

        assert resp.status == 400
        temporal_client.execute_workflow.assert_not_called()

    def test_app_exposes_record_store(self, temporal_client, settings, store):
        app = create_app(temporal_client, settings, store)

        assert app[STORE_KEY] is store

    @pytest.mark.asyncio
    async def test_temporal_unavailable(self, http, temporal_client):
        temporal_client.execute_workflow.side_effect = RPCError(
            "connection refused", RPCStatusCode.UNAVAILABLE, b""
        )

        resp = await http.post("/", json={"message": "Hello"})

        assert resp.status == 502

    @pytest.mark.asyncio
    async def test_get_stored_review(self, http, store):
        record = ReviewRecord("t-stored", "Broken on arrival.", Sentiment.NEGATIVE)
        await store.put(record)

        resp = await http.get("/reviews/t-stored")

        assert resp.status == 200
        assert await resp.json() == {
            "ticketId": "t-stored",
            "text": "Broken on arrival.",
            "sentiment": "NEGATIVE",
        }

    @pytest.mark.asyncio
    async def test_get_missing_review(self, http):
        resp = await http.get("/reviews/t-missing")

        assert resp.status == 404

    @pytest.mark.asyncio
    async def test_health(self, http):
        resp = await http.get("/health")

        assert resp.status == 200
        assert await resp.json() == {"status": "ok"}
