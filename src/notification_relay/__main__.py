"""Process entry point: ``python -m notification_relay``.

Runs until interrupted (Ctrl+C).
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .config import RelaySettings
from .connection import RabbitMQConnectionManager
from .consumer import RelayConsumer
from .decoder import EnvelopeDecoder
from .dispatch import DispatchClient
from .exceptions import BrokerConnectionError, ConfigurationError
from .logging_setup import configure_logging
from .pipeline import ChannelPipeline

logger = logging.getLogger("notification_relay")


async def run(
    settings: RelaySettings,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Consume until *stop_event* is set or the task is cancelled."""
    queue_name = settings.require_queue_name()
    stop_event = stop_event or asyncio.Event()

    connection = RabbitMQConnectionManager(
        settings.broker, logger=logger.getChild("connection")
    )
    http_client = DispatchClient.create_http_client(settings.dispatch.timeout_seconds)
    consumer = RelayConsumer(
        connection,
        queue_name,
        EnvelopeDecoder(logger=logger.getChild("decoder")),
        ChannelPipeline(
            DispatchClient(
                http_client, settings.api_urls, logger=logger.getChild("dispatch")
            ),
            logger=logger.getChild("pipeline"),
        ),
        max_concurrency=settings.dispatch.max_concurrency,
        logger=logger.getChild("consumer"),
    )
    try:
        await consumer.start()
        logger.info("Listening for messages on %r... Press Ctrl+C to exit.", queue_name)
        await stop_event.wait()
    finally:
        await consumer.stop()
        await http_client.aclose()
        await connection.close()


def main() -> int:
    try:
        settings = RelaySettings.load()
    except ConfigurationError as e:
        configure_logging("INFO", None, logger_name="notification_relay")
        logger.error("%s Exiting application.", e)
        return 1

    configure_logging(
        settings.logging.level,
        settings.logging.file,
        logger_name="notification_relay",
    )
    try:
        asyncio.run(run(settings))
    except (BrokerConnectionError, ConfigurationError) as e:
        logger.error("%s Exiting application.", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
