"""Tests for ChannelPipeline — independent per-channel processing."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import AsyncMock

import pytest

from notification_relay.dispatch import DispatchClient
from notification_relay.models import ScheduledRequest
from notification_relay.outcome import (
    ChannelOutcome,
    DispatchFailed,
    NotificationChannel,
    OutcomeStatus,
)
from notification_relay.pipeline import ChannelPipeline

EMAIL_URL = "http://email.test/send"
SMS_URL = "http://sms.test/send"


@pytest.fixture
def pipeline(dispatcher: DispatchClient) -> ChannelPipeline:
    return ChannelPipeline(dispatcher)


@pytest.mark.asyncio
async def test_no_channels_dispatches_nothing(
    pipeline: ChannelPipeline, transport: Any
) -> None:
    report = await pipeline.run(ScheduledRequest())
    assert report.email.status is OutcomeStatus.SKIPPED
    assert report.sms.status is OutcomeStatus.SKIPPED
    assert report.count(OutcomeStatus.SKIPPED) == 2
    assert transport.requests == []


@pytest.mark.asyncio
async def test_both_channels_dispatched(
    pipeline: ChannelPipeline,
    transport: Any,
    valid_email: dict[str, object],
    valid_sms: dict[str, object],
) -> None:
    request = ScheduledRequest.model_validate({"email": valid_email, "sms": valid_sms})
    report = await pipeline.run(request)
    assert report.count(OutcomeStatus.DISPATCHED) == 2
    assert len(transport.bodies_for(EMAIL_URL)) == 1
    assert len(transport.bodies_for(SMS_URL)) == 1


@pytest.mark.asyncio
async def test_blank_subject_never_reaches_email_endpoint(
    pipeline: ChannelPipeline,
    transport: Any,
    valid_sms: dict[str, object],
    caplog: pytest.LogCaptureFixture,
) -> None:
    request = ScheduledRequest.model_validate(
        {
            "email": {"to": ["a@x.com"], "subject": " ", "body": ["hello"]},
            "sms": valid_sms,
        }
    )
    with caplog.at_level(logging.WARNING, logger="notification_relay.pipeline"):
        report = await pipeline.run(request)

    assert report.email.status is OutcomeStatus.INVALID
    assert report.email.problems == ("subject: is blank",)
    assert report.sms.status is OutcomeStatus.DISPATCHED
    assert transport.bodies_for(EMAIL_URL) == []
    assert "Missing required Email fields" in caplog.text


@pytest.mark.asyncio
async def test_absent_channel_is_skipped_silently(
    pipeline: ChannelPipeline,
    valid_email: dict[str, object],
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="notification_relay.pipeline"):
        report = await pipeline.run(
            ScheduledRequest.model_validate({"email": valid_email})
        )
    assert report.sms.status is OutcomeStatus.SKIPPED
    assert "SMS" not in caplog.text


@pytest.mark.asyncio
async def test_invalid_sms_does_not_block_email(
    pipeline: ChannelPipeline,
    transport: Any,
    valid_email: dict[str, object],
) -> None:
    request = ScheduledRequest.model_validate(
        {"email": valid_email, "sms": {"mobileno": [], "message": ["m"]}}
    )
    report = await pipeline.run(request)
    assert report.sms.status is OutcomeStatus.INVALID
    assert report.email.status is OutcomeStatus.DISPATCHED
    assert transport.bodies_for(SMS_URL) == []


@pytest.mark.asyncio
async def test_connection_config_goes_to_email_only(
    pipeline: ChannelPipeline,
    transport: Any,
    valid_email: dict[str, object],
    valid_sms: dict[str, object],
    redis_config: dict[str, str],
) -> None:
    request = ScheduledRequest.model_validate(
        {"email": valid_email, "sms": valid_sms, "redis": redis_config}
    )
    await pipeline.run(request)

    email_body = transport.bodies_for(EMAIL_URL)[0]
    sms_body = transport.bodies_for(SMS_URL)[0]
    assert email_body["redis"] == redis_config
    assert "redis" not in sms_body
    assert "cache.internal" not in str(sms_body)


@pytest.mark.asyncio
async def test_email_failure_does_not_block_sms(
    pipeline: ChannelPipeline,
    transport: Any,
    valid_email: dict[str, object],
    valid_sms: dict[str, object],
) -> None:
    transport.respond(EMAIL_URL, 500, "server error")
    request = ScheduledRequest.model_validate({"email": valid_email, "sms": valid_sms})
    report = await pipeline.run(request)

    assert report.email.status is OutcomeStatus.FAILED
    assert report.email.reason == DispatchFailed(500, "server error")
    assert report.sms.status is OutcomeStatus.DISPATCHED
    assert len(transport.bodies_for(SMS_URL)) == 1


@pytest.mark.asyncio
async def test_unexpected_error_reraised_after_sibling_completes(
    valid_email: dict[str, object], valid_sms: dict[str, object]
) -> None:
    dispatcher = AsyncMock(spec=DispatchClient)
    calls: list[NotificationChannel] = []

    async def dispatch(channel: NotificationChannel, payload: object) -> object:
        calls.append(channel)
        if channel is NotificationChannel.EMAIL:
            raise RuntimeError("bug")
        return ChannelOutcome.dispatched(channel)

    dispatcher.dispatch.side_effect = dispatch
    pipeline = ChannelPipeline(dispatcher)
    request = ScheduledRequest.model_validate({"email": valid_email, "sms": valid_sms})

    with pytest.raises(RuntimeError, match="bug"):
        await pipeline.run(request)
    assert set(calls) == {NotificationChannel.EMAIL, NotificationChannel.SMS}
