"""RelayConsumer — queue intake, per-message error containment and ack timing.

Per message::

    Received -> Decoding -> Validating & Dispatching -> Acknowledged
                    |
                    +-> Abandoned (envelope error: rejected, not requeued)

An unexpected exception anywhere in that sequence is logged and the message
is left unacknowledged, so the broker may redeliver it once the channel is
recovered. That is the only path that leads to redelivery.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING

from .exceptions import EnvelopeError

if TYPE_CHECKING:
    from aio_pika.abc import AbstractIncomingMessage, AbstractQueue

    from .connection import RabbitMQConnectionManager
    from .decoder import EnvelopeDecoder
    from .pipeline import ChannelPipeline

_log = logging.getLogger(__name__)


class MessageDisposition(Enum):
    """What the consumer tells the broker once processing has concluded."""

    ACK = "ack"
    REJECT = "reject"


class RelayConsumer:
    """Consumes a durable queue with manual acknowledgment.

    Each delivery runs in its own task; at most ``max_concurrency`` pipelines
    run at once, on top of the broker-side prefetch limit set by the
    connection manager.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        queue_name: str,
        decoder: EnvelopeDecoder,
        pipeline: ChannelPipeline,
        *,
        max_concurrency: int = 10,
        logger: logging.Logger | None = None,
    ) -> None:
        """Configure consumer.

        Args:
            connection: Shared connection manager.
            queue_name: Durable queue to consume from.
            decoder: Turns raw bodies into ScheduledRequest instances.
            pipeline: Validates and dispatches both channels.
            max_concurrency: Upper bound on in-flight message pipelines.
            logger: Defaults to this module's logger.
        """
        self._connection = connection
        self._queue_name = queue_name
        self._decoder = decoder
        self._pipeline = pipeline
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._log = logger or _log
        self._queue: AbstractQueue | None = None
        self._consumer_tag: str | None = None
        self._in_flight: set[asyncio.Task[None]] = set()

    async def start(self) -> None:
        """Declare the queue and start consuming with manual acks."""
        await self._connection.connect()
        self._queue = await self._connection.declare_queue(self._queue_name)
        self._consumer_tag = await self._queue.consume(self.on_message, no_ack=False)

    async def stop(self) -> None:
        """Stop receiving new deliveries and wait for in-flight ones to settle.

        Returns once every delivery already handed to :meth:`on_message` has
        been acked, rejected or abandoned, so the HTTP client and the broker
        connection can be closed safely afterwards.
        """
        if self._queue is not None and self._consumer_tag is not None:
            await self._queue.cancel(self._consumer_tag)
        self._consumer_tag = None
        if self._in_flight:
            self._log.info(
                "Waiting for %d in-flight message(s) to finish.", len(self._in_flight)
            )
            await asyncio.wait(set(self._in_flight))

    async def process(self, body: bytes) -> MessageDisposition:
        """Decode and dispatch one message body.

        Envelope errors yield ``REJECT``; a decoded request always yields
        ``ACK`` whatever the dispatch outcomes. Anything else propagates.
        """
        try:
            request = self._decoder.decode(body)
        except EnvelopeError as e:
            self._log.error("%s: %s. Skipping message.", type(e).__name__, e)
            return MessageDisposition.REJECT

        self._log.info(
            "Decoded request (email requested=%s, sms requested=%s)",
            request.email is not None,
            request.sms is not None,
        )
        report = await self._pipeline.run(request)
        for outcome in report.outcomes:
            self._log.debug(
                "%s channel %s%s",
                outcome.channel.value,
                outcome.status.value,
                f" ({outcome.reason})" if outcome.reason else "",
            )
        return MessageDisposition.ACK

    async def on_message(self, message: AbstractIncomingMessage) -> None:
        """aio-pika delivery callback; never raises."""
        task = asyncio.current_task()
        if task is not None:
            self._in_flight.add(task)
        try:
            await self._handle(message)
        finally:
            if task is not None:
                self._in_flight.discard(task)

    async def _handle(self, message: AbstractIncomingMessage) -> None:
        async with self._semaphore:
            self._log.info(
                "Received Message: %s", message.body.decode("utf-8", "replace")
            )
            try:
                disposition = await self.process(message.body)
                if disposition is MessageDisposition.ACK:
                    await message.ack()
                else:
                    await message.reject(requeue=False)
            except Exception:  # noqa: BLE001
                self._log.exception("Unexpected error while processing message.")

    async def health_check(self) -> bool:
        """Return True if the connection is healthy."""
        return await self._connection.health_check()
