"""DispatchClient — one HTTP POST per validated payload."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel

from .config import ApiUrls
from .models import EmailPayload
from .outcome import (
    ChannelOutcome,
    DispatchError,
    DispatchFailed,
    EndpointNotConfigured,
    NotificationChannel,
)

_log = logging.getLogger(__name__)

_LABELS = {NotificationChannel.EMAIL: "Email", NotificationChannel.SMS: "SMS"}


class DispatchClient:
    """Posts payloads to the channel's delivery API and classifies the outcome.

    Exactly one attempt is made per call; failures are returned as
    :class:`ChannelOutcome` values, never raised or retried.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_urls: ApiUrls,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http = http_client
        self._api_urls = api_urls
        self._log = logger or _log

    @classmethod
    def create_http_client(cls, timeout: float = 10.0) -> httpx.AsyncClient:
        """Build the shared AsyncClient with a hard per-request timeout."""
        return httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def dispatch(
        self, channel: NotificationChannel, payload: BaseModel
    ) -> ChannelOutcome:
        label = _LABELS[channel]
        url = self._api_urls.for_channel(channel)
        if url is None or not url.strip():
            self._log.warning("%s API URL is missing in configuration.", label)
            return ChannelOutcome.failed(channel, EndpointNotConfigured())

        if isinstance(payload, EmailPayload) and payload.redis is None:
            self._log.warning("Redis object is null in EmailMessage.")

        self._log.info("%s API URL %s", label, url)
        try:
            response = await self._http.post(
                url,
                content=payload.model_dump_json(),
                headers={"Content-Type": "application/json"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._log.error("Exception while calling %s API.", label, exc_info=True)
            return ChannelOutcome.failed(channel, DispatchError(cause=e))

        if response.is_success:
            self._log.info("%s API call succeeded.", label)
            return ChannelOutcome.dispatched(channel)

        reason = DispatchFailed(status_code=response.status_code, body=response.text)
        self._log.warning(
            "%s API failed. Status Code: %s, Details: %s",
            label,
            reason.status_code,
            reason.body,
        )
        return ChannelOutcome.failed(channel, reason)
