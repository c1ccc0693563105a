"""
Review record storage.

Two backends satisfy the RecordStore protocol:

- DynamoDBRecordStore (aws_client/dynamodb.py): the production table.
- FileRecordStore (below): one JSON file per ticket on local disk, for
  development and for running the worker without AWS.

Both treat a put as idempotent. Ticket IDs are unique per submission, so the
only way a key is written twice is a retry of the same record, which leaves
one logical record behind.
"""

import os
import json
from typing import Optional, Protocol

import aiofiles
import aiofiles.os

from review_pipeline.aws_client.dynamodb import DynamoDBRecordStore
from review_pipeline.config import Settings
from review_pipeline.errors import StoreUnavailable
from review_pipeline.models import ReviewRecord


class RecordStore(Protocol):
    async def put(self, record: ReviewRecord) -> None:
        ...

    async def get(self, ticket_id: str) -> Optional[ReviewRecord]:
        ...


class FileRecordStore:
    """
    Stores review records as JSON files in a directory.

    Writes go to a staging file that is then renamed over the target, so a
    reader sees either the whole record or no record at all.
    """

    def __init__(self, base_path: str) -> None:
        """
        Args:
            base_path: Directory holding one <ticketId>.json per record
        """
        self.base_path = base_path

    def get_file_path(self, ticket_id: str) -> str:
        """
        Get the file path for a ticket.

        Args:
            ticket_id: Ticket identifier

        Returns:
            Absolute path to the ticket's JSON file
        """
        if not ticket_id or os.sep in ticket_id or ticket_id in (".", ".."):
            raise ValueError(f"invalid ticket id: {ticket_id!r}")
        return os.path.join(self.base_path, f"{ticket_id}.json")

    async def put(self, record: ReviewRecord) -> None:
        """
        Atomically write a record.

        Uses staging file + os.replace() so the file is either fully written
        or not present at all.

        Raises:
            StoreUnavailable: On any file I/O error
        """
        target = self.get_file_path(record.ticket_id)
        staging_file = f"{target}.tmp"

        try:
            await aiofiles.os.makedirs(self.base_path, exist_ok=True)

            async with aiofiles.open(staging_file, "w", encoding="utf-8") as f:
                await f.write(json.dumps(record.to_item()))

            await aiofiles.os.replace(staging_file, target)
        except OSError as e:
            raise StoreUnavailable(
                f"failed to store ticket {record.ticket_id}: {e}"
            ) from e

    async def get(self, ticket_id: str) -> Optional[ReviewRecord]:
        """
        Read a record by ticket ID.

        Returns:
            The record, or None if the ticket has no file

        Raises:
            StoreUnavailable: If the file exists but cannot be read or parsed
        """
        path = self.get_file_path(ticket_id)

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreUnavailable(f"failed to read ticket {ticket_id}: {e}") from e

        try:
            return ReviewRecord.from_item(json.loads(content))
        except (ValueError, KeyError) as e:
            raise StoreUnavailable(f"corrupt record for ticket {ticket_id}") from e


def build_record_store(settings: Settings) -> RecordStore:
    """Create the record store selected by STORE_BACKEND."""
    if settings.store_backend == "file":
        return FileRecordStore(settings.store_path)

    return DynamoDBRecordStore(
        table_name=settings.reviews_table,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
    )
