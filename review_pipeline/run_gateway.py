"""
HTTP gateway process for review submissions.

To run:
    python -m review_pipeline.run_gateway

Listens on GATEWAY_HOST:GATEWAY_PORT (default 0.0.0.0:8080) and starts one
ReviewPipeline workflow per POST. A worker must be running to process them
(see run_worker.py).

Example:
    curl -X POST localhost:8080/ -d '{"message": "Worst experience ever."}'
"""

import logging

from aiohttp import web
from dotenv import load_dotenv
from temporalio.client import Client

from review_pipeline.config import Settings
from review_pipeline.gateway import create_app
from review_pipeline.storage import build_record_store

load_dotenv()


async def build_app() -> web.Application:
    """Connect to Temporal and assemble the gateway application."""
    settings = Settings.from_env()
    client = await Client.connect(settings.temporal_host)
    return create_app(client, settings, build_record_store(settings))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = Settings.from_env()
    web.run_app(build_app(), host=settings.gateway_host, port=settings.gateway_port)


if __name__ == "__main__":
    main()
