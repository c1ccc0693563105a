"""
DynamoDB-backed review record store.

Records live in a single table whose partition key is ``ticketId``. Ticket
IDs are freshly generated per submission, so a put never overwrites another
review; repeating a put for the same record after a transient failure
leaves exactly one item.
"""

import asyncio
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from review_pipeline.errors import StoreUnavailable
from review_pipeline.models import ReviewRecord

logger = logging.getLogger(__name__)


class DynamoDBRecordStore:
    """
    Stores review records in a DynamoDB table.

    boto3 calls block, so they run in a worker thread to keep the event loop
    free for other activities.
    """

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        """
        Args:
            table_name: Table with partition key "ticketId" (string)
            region_name: AWS region (defaults to environment configuration)
            endpoint_url: Alternate endpoint, e.g. LocalStack
        """
        resource = boto3.resource(
            "dynamodb",
            region_name=region_name,
            endpoint_url=endpoint_url,
        )
        self.table = resource.Table(table_name)

    async def put(self, record: ReviewRecord) -> None:
        """
        Write a record keyed by its ticket ID.

        Raises:
            StoreUnavailable: On any AWS or connection error
        """
        try:
            await asyncio.to_thread(self.table.put_item, Item=record.to_item())
        except (BotoCoreError, ClientError) as e:
            raise StoreUnavailable(
                f"failed to store ticket {record.ticket_id}: {e}"
            ) from e

        logger.debug("Stored ticket %s in %s", record.ticket_id, self.table.name)

    async def get(self, ticket_id: str) -> Optional[ReviewRecord]:
        """
        Read a record by ticket ID.

        Returns:
            The record, or None if no item has that key

        Raises:
            StoreUnavailable: On any AWS or connection error
        """
        try:
            response = await asyncio.to_thread(
                self.table.get_item,
                Key={"ticketId": ticket_id},
                ConsistentRead=True,
            )
        except (BotoCoreError, ClientError) as e:
            raise StoreUnavailable(f"failed to read ticket {ticket_id}: {e}") from e

        item = response.get("Item")
        if item is None:
            return None
        return ReviewRecord.from_item(item)
