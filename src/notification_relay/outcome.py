"""Channel enum and per-channel outcome types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NotificationChannel(Enum):
    """Supported notification channels."""

    EMAIL = "email"
    SMS = "sms"


class OutcomeStatus(Enum):
    """What happened to one channel of a scheduled request."""

    SKIPPED = "skipped"
    INVALID = "invalid"
    DISPATCHED = "dispatched"
    FAILED = "failed"


# ── Failure reasons ──────────────────────────────────────────────────


@dataclass(frozen=True)
class EndpointNotConfigured:
    """No endpoint URL is configured for the channel; nothing was sent."""

    def __str__(self) -> str:
        return "endpoint URL is not configured"


@dataclass(frozen=True)
class DispatchFailed:
    """The downstream API answered with a non-success status."""

    status_code: int
    body: str

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.body}"


@dataclass(frozen=True)
class DispatchError:
    """The request never produced a response (connection refused, timeout, ...)."""

    cause: Exception

    def __str__(self) -> str:
        return f"{type(self.cause).__name__}: {self.cause}"


FailureReason = EndpointNotConfigured | DispatchFailed | DispatchError


@dataclass(frozen=True)
class ChannelOutcome:
    """Immutable record of one channel's processing for one message."""

    channel: NotificationChannel
    status: OutcomeStatus
    reason: FailureReason | None = None
    problems: tuple[str, ...] = ()

    @classmethod
    def skipped(cls, channel: NotificationChannel) -> ChannelOutcome:
        """Channel was not requested by the message."""
        return cls(channel=channel, status=OutcomeStatus.SKIPPED)

    @classmethod
    def invalid(
        cls, channel: NotificationChannel, problems: tuple[str, ...]
    ) -> ChannelOutcome:
        """Channel was requested but failed validation."""
        return cls(channel=channel, status=OutcomeStatus.INVALID, problems=problems)

    @classmethod
    def dispatched(cls, channel: NotificationChannel) -> ChannelOutcome:
        return cls(channel=channel, status=OutcomeStatus.DISPATCHED)

    @classmethod
    def failed(
        cls, channel: NotificationChannel, reason: FailureReason
    ) -> ChannelOutcome:
        return cls(channel=channel, status=OutcomeStatus.FAILED, reason=reason)
