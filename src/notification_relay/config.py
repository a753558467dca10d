"""RelaySettings — explicit configuration value loaded from appsettings.json.

Layout::

    {
      "RabbitMQ": {"HostName": "localhost", "Port": 5672, "UserName": "guest",
                   "Password": "guest", "QueueName": "notifications",
                   "Heartbeat": 60, "ConnectionName": "notification-relay"},
      "ApiUrls": {"Email": "http://mailer/send", "Sms": "http://sms/send"},
      "Dispatch": {"TimeoutSeconds": 10, "MaxConcurrency": 10},
      "Logging": {"Level": "INFO", "File": "logs/log.txt"}
    }

Every section and key is optional except ``RabbitMQ.QueueName``, which is
checked by :meth:`RelaySettings.require_queue_name` at startup.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .outcome import NotificationChannel

SETTINGS_ENV_VAR = "NOTIFICATION_RELAY_SETTINGS"
DEFAULT_SETTINGS_FILE = "appsettings.json"


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class BrokerSettings(_Section):
    """RabbitMQ connection and queue settings."""

    host: str = Field(default="localhost", alias="HostName")
    port: int = Field(default=5672, alias="Port", gt=0)
    username: str = Field(default="guest", alias="UserName")
    password: str = Field(default="guest", alias="Password")
    virtual_host: str = Field(default="/", alias="VirtualHost")
    queue_name: str = Field(default="", alias="QueueName")
    prefetch_count: int = Field(default=10, alias="PrefetchCount", ge=1)
    heartbeat: int = Field(default=60, alias="Heartbeat", ge=0)
    connection_name: str = Field(default="notification-relay", alias="ConnectionName")

    @property
    def url(self) -> str:
        """AMQP URL for aio_pika.connect_robust."""
        user = quote(self.username, safe="")
        password = quote(self.password, safe="")
        vhost = quote(self.virtual_host, safe="")
        return f"amqp://{user}:{password}@{self.host}:{self.port}/{vhost}"


class ApiUrls(_Section):
    """Downstream delivery endpoints; either may be unset."""

    email: str | None = Field(default=None, alias="Email")
    sms: str | None = Field(default=None, alias="Sms")

    def for_channel(self, channel: NotificationChannel) -> str | None:
        if channel is NotificationChannel.EMAIL:
            return self.email
        return self.sms


class DispatchSettings(_Section):
    timeout_seconds: float = Field(default=10.0, alias="TimeoutSeconds", gt=0)
    max_concurrency: int = Field(default=10, alias="MaxConcurrency", ge=1)


class LoggingSettings(_Section):
    level: str = Field(default="INFO", alias="Level")
    file: str | None = Field(default="logs/log.txt", alias="File")


class RelaySettings(_Section):
    """Complete process configuration."""

    broker: BrokerSettings = Field(default_factory=BrokerSettings, alias="RabbitMQ")
    api_urls: ApiUrls = Field(default_factory=ApiUrls, alias="ApiUrls")
    dispatch: DispatchSettings = Field(
        default_factory=DispatchSettings, alias="Dispatch"
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings, alias="Logging")

    @classmethod
    def from_file(cls, path: str | Path) -> RelaySettings:
        """Load settings from a JSON file."""
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e
        try:
            return cls.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigurationError(f"Invalid settings file {path}: {e}") from e

    @classmethod
    def load(cls, path: str | Path | None = None) -> RelaySettings:
        """Load from *path*, ``$NOTIFICATION_RELAY_SETTINGS`` or appsettings.json."""
        resolved = path or os.environ.get(SETTINGS_ENV_VAR) or DEFAULT_SETTINGS_FILE
        return cls.from_file(resolved)

    def require_queue_name(self) -> str:
        """Return the queue name; a blank name is fatal at startup."""
        name = self.broker.queue_name.strip()
        if not name:
            raise ConfigurationError("RabbitMQ QueueName is not configured.")
        return name
