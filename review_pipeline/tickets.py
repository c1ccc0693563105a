"""
Ticket ID generation.

Ticket IDs are random 128-bit UUIDs rendered as strings. Generation needs no
counter, lock or lookup, so any number of workers can mint IDs at once.
Workflows pass ``workflow.uuid4`` as the factory so that replays reproduce
the ID chosen on first execution.
"""

import uuid
from typing import Callable

UUIDFactory = Callable[[], uuid.UUID]


def next_ticket_id(uuid_factory: UUIDFactory = uuid.uuid4) -> str:
    """
    Mint a new ticket ID.

    Args:
        uuid_factory: Source of random UUIDs (defaults to uuid.uuid4)

    Returns:
        Canonical hyphenated UUID string
    """
    return str(uuid_factory())
