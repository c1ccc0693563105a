"""
Unit tests for ticket ID generation.
"""

import asyncio
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from review_pipeline.tickets import next_ticket_id


class TestNextTicketId:
    """Test ticket uniqueness and format."""

    def test_format_is_uuid4(self):
        ticket_id = next_ticket_id()

        parsed = uuid.UUID(ticket_id)
        assert parsed.version == 4
        assert str(parsed) == ticket_id

    def test_uses_supplied_factory(self):
        fixed = uuid.UUID("12345678-1234-4678-9234-567812345678")

        assert next_ticket_id(lambda: fixed) == str(fixed)

    def test_thousand_ids_from_threads_are_distinct(self):
        with ThreadPoolExecutor(max_workers=16) as pool:
            ids = list(pool.map(lambda _: next_ticket_id(), range(1000)))

        assert len(ids) == 1000
        assert len(set(ids)) == 1000

    @pytest.mark.asyncio
    async def test_thousand_ids_from_tasks_are_distinct(self):
        async def mint() -> str:
            await asyncio.sleep(0)
            return next_ticket_id()

        ids = await asyncio.gather(*(mint() for _ in range(1000)))

        assert len(set(ids)) == 1000
