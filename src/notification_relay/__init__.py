"""Notification relay: RabbitMQ scheduled requests to email/SMS delivery APIs."""

from __future__ import annotations

from .config import ApiUrls, BrokerSettings, DispatchSettings, RelaySettings
from .connection import RabbitMQConnectionManager
from .consumer import MessageDisposition, RelayConsumer
from .decoder import EnvelopeDecoder
from .dispatch import DispatchClient
from .enrichment import enrich_email
from .exceptions import (
    BrokerConnectionError,
    ConfigurationError,
    EmptyEnvelope,
    EnvelopeError,
    MalformedEnvelope,
    MissingEnvelopeField,
    RelayError,
)
from .models import ConnectionConfig, EmailPayload, ScheduledRequest, SmsPayload
from .outcome import (
    ChannelOutcome,
    DispatchError,
    DispatchFailed,
    EndpointNotConfigured,
    NotificationChannel,
    OutcomeStatus,
)
from .pipeline import ChannelPipeline, PipelineReport
from .validation import ValidationResult, validate_email, validate_sms

__all__ = [
    "ApiUrls",
    "BrokerConnectionError",
    "BrokerSettings",
    "ChannelOutcome",
    "ChannelPipeline",
    "ConfigurationError",
    "ConnectionConfig",
    "DispatchClient",
    "DispatchError",
    "DispatchFailed",
    "DispatchSettings",
    "EmailPayload",
    "EmptyEnvelope",
    "EndpointNotConfigured",
    "EnvelopeDecoder",
    "EnvelopeError",
    "MalformedEnvelope",
    "MessageDisposition",
    "MissingEnvelopeField",
    "NotificationChannel",
    "OutcomeStatus",
    "PipelineReport",
    "RabbitMQConnectionManager",
    "RelayConsumer",
    "RelayError",
    "RelaySettings",
    "ScheduledRequest",
    "SmsPayload",
    "ValidationResult",
    "enrich_email",
    "validate_email",
    "validate_sms",
]
