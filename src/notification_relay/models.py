"""Pydantic data model for scheduled notification requests.

Inbound documents are matched case-insensitively and unknown keys are ignored.
Missing fields, and explicit ``null`` values for scalar and list fields, fall
back to zero values so that a decoded request is always structurally complete.
Content validity is checked later by :mod:`notification_relay.validation`.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InboundModel(BaseModel):
    """Base for inbound payloads: lower-cased keys, extras ignored."""

    model_config = ConfigDict(extra="ignore")

    # Fields whose explicit ``null`` means "use the zero value".
    zero_on_null: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            name = key.lower()
            if value is None and name in cls.zero_on_null:
                continue
            normalized[name] = value
        return normalized


class ConnectionConfig(InboundModel):
    """Opaque connection metadata forwarded to the email delivery API."""

    zero_on_null: ClassVar[frozenset[str]] = frozenset(
        {"redisserver", "redisport", "redispwd", "emailconfigkey"}
    )

    redisserver: str = ""
    redisport: str = ""
    redispwd: str = ""
    emailconfigkey: str = ""

    def is_default(self) -> bool:
        """Return True when every field is blank (the zero-value config)."""
        return not any(
            value.strip()
            for value in (
                self.redisserver,
                self.redisport,
                self.redispwd,
                self.emailconfigkey,
            )
        )


class EmailPayload(InboundModel):
    """Email request as posted to the email delivery API."""

    zero_on_null: ClassVar[frozenset[str]] = frozenset({"to", "subject", "body"})

    to: list[str] = Field(default_factory=list)
    subject: str = ""
    body: list[str] = Field(default_factory=list)
    redis: ConnectionConfig | None = None


class SmsPayload(InboundModel):
    """SMS request as posted to the SMS delivery API."""

    zero_on_null: ClassVar[frozenset[str]] = frozenset({"mobileno", "message"})

    mobileno: list[str] = Field(default_factory=list)
    message: list[str] = Field(default_factory=list)


class ScheduledRequest(InboundModel):
    """Decoded unit of work carried by one queue message.

    ``email`` and ``sms`` are ``None`` when the channel was not requested.
    """

    zero_on_null: ClassVar[frozenset[str]] = frozenset({"redis"})

    email: EmailPayload | None = None
    sms: SmsPayload | None = None
    redis: ConnectionConfig = Field(default_factory=ConnectionConfig)
