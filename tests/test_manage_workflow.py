"""
Unit tests for the management CLI.

Tests cover:
- Redispatch success and every Temporal failure it reports instead of raising
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.service import RPCError, RPCStatusCode

from review_pipeline.config import Settings
from review_pipeline.manage_workflow import redispatch
from review_pipeline.models import RedispatchInput
from review_pipeline.workflows import RedispatchNotification


class TestRedispatchCommand:
    """Test the redispatch subcommand with a mocked Temporal client."""

    @pytest.fixture
    def temporal_client(self):
        client = MagicMock()
        client.execute_workflow = AsyncMock()
        with patch("review_pipeline.manage_workflow.Client") as mock_client_cls:
            mock_client_cls.connect = AsyncMock(return_value=client)
            yield client

    @pytest.fixture
    def settings(self):
        return Settings(task_queue="ops-queue", max_attempts=5, notify_backend="log")

    @pytest.mark.asyncio
    async def test_redispatch_prints_message_id(self, temporal_client, settings, capsys):
        temporal_client.execute_workflow.return_value = "msg-42"

        await redispatch(settings, "t-1")

        assert "msg-42" in capsys.readouterr().out
        args, kwargs = temporal_client.execute_workflow.call_args
        assert args[0] == RedispatchNotification.run
        assert args[1] == RedispatchInput(ticket_id="t-1", max_attempts=5)
        assert kwargs["id"] == "redispatch-t-1"
        assert kwargs["task_queue"] == "ops-queue"

    @pytest.mark.asyncio
    async def test_redispatch_already_running(self, temporal_client, settings, capsys):
        temporal_client.execute_workflow.side_effect = WorkflowAlreadyStartedError(
            "redispatch-t-1", "RedispatchNotification"
        )

        await redispatch(settings, "t-1")

        assert "already running" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_redispatch_server_unavailable(self, temporal_client, settings, capsys):
        temporal_client.execute_workflow.side_effect = RPCError(
            "connection refused", RPCStatusCode.UNAVAILABLE, b""
        )

        await redispatch(settings, "t-1")

        out = capsys.readouterr().out
        assert "Error redispatching ticket t-1" in out
        assert "connection refused" in out
