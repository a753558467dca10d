"""Broker session for the relay: one robust connection, one channel.

The channel is opened with the configured prefetch already applied, so the
consumer only has to declare its queue and start consuming.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aio_pika

from .exceptions import BrokerConnectionError

if TYPE_CHECKING:
    from aio_pika.abc import AbstractChannel, AbstractQueue, AbstractRobustConnection

    from .config import BrokerSettings

_log = logging.getLogger(__name__)


class RabbitMQConnectionManager:
    """Owns the relay's broker connection for the lifetime of the process.

    ``connect_robust`` reconnects on its own after network failures; the
    prefetch limit is reapplied by aio-pika when the channel is restored.
    """

    def __init__(
        self,
        settings: BrokerSettings,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings
        self._log = logger or _log
        self._connection: AbstractRobustConnection | None = None
        self._channel: AbstractChannel | None = None

    async def connect(self) -> None:
        """Open connection and channel and apply QoS. No-op when already open."""
        if self._connection is not None and not self._connection.is_closed:
            return
        settings = self._settings
        try:
            self._connection = await aio_pika.connect_robust(
                settings.url,
                heartbeat=settings.heartbeat,
                client_properties={"connection_name": settings.connection_name},
            )
            self._channel = await self._connection.channel()
            await self._channel.set_qos(prefetch_count=settings.prefetch_count)
        except (ConnectionError, OSError, ValueError) as e:
            raise BrokerConnectionError(
                f"Cannot connect to {settings.host}:{settings.port}: {e}"
            ) from e
        self._log.info(
            "Connected to RabbitMQ at %s:%s (vhost %r, prefetch %d)",
            settings.host,
            settings.port,
            settings.virtual_host,
            settings.prefetch_count,
        )

    async def declare_queue(self, name: str) -> AbstractQueue:
        """Declare *name* as a durable, shared, non-auto-deleted queue."""
        return await self.channel.declare_queue(
            name,
            durable=True,
            exclusive=False,
            auto_delete=False,
        )

    async def close(self) -> None:
        if self._channel is not None:
            await self._channel.close()
            self._channel = None
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    @property
    def channel(self) -> AbstractChannel:
        """Return the open channel; raises if connect() has not succeeded."""
        if self._channel is None:
            raise BrokerConnectionError("Not connected; call connect() first")
        return self._channel

    async def health_check(self) -> bool:
        """Return True if both the connection and the channel are open."""
        if self._connection is None or self._channel is None:
            return False
        return not (self._connection.is_closed or self._channel.is_closed)
