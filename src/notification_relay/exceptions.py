"""Exception hierarchy for notification-relay."""

from __future__ import annotations


class RelayError(Exception):
    """Root exception for the notification relay."""


# ── Envelope Exceptions ──────────────────────────────────────────────


class EnvelopeError(RelayError):
    """Base class for messages that cannot be turned into a ScheduledRequest.

    Raised by the decoder; the consumer rejects the message without requeue.
    """


class MissingEnvelopeField(EnvelopeError):
    """Raised when the outer JSON object lacks the envelope field."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"'{field_name}' field missing in received message")


class EmptyEnvelope(EnvelopeError):
    """Raised when the envelope field is present but blank."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"'{field_name}' field is empty")


class MalformedEnvelope(EnvelopeError):
    """Raised when the envelope (outer or inner document) cannot be parsed.

    The underlying parse/validation error is kept on ``cause`` for diagnostics.
    """

    def __init__(self, reason: str, cause: Exception | None = None) -> None:
        self.reason = reason
        self.cause = cause
        message = reason if cause is None else f"{reason}: {cause}"
        super().__init__(message)


# ── Infrastructure Exceptions ────────────────────────────────────────


class ConfigurationError(RelayError):
    """Raised when required settings are missing or invalid at startup."""


class BrokerConnectionError(RelayError):
    """Raised when connectivity to the message broker fails."""
