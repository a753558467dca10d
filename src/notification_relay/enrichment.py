"""Attach root-level connection metadata to the email payload."""

from __future__ import annotations

import logging

from .models import ConnectionConfig, EmailPayload

logger = logging.getLogger(__name__)


def enrich_email(email: EmailPayload, config: ConnectionConfig | None) -> EmailPayload:
    """Return *email* with *config* in its ``redis`` slot.

    A missing or all-blank config leaves the payload untouched. Otherwise the
    config replaces whatever the payload already carried. The input payload is
    not mutated.
    """
    if config is None or config.is_default():
        return email
    # Credential is never logged.
    logger.info(
        "RedisConfig before injection: server=%s port=%s key=%s",
        config.redisserver,
        config.redisport,
        config.emailconfigkey,
    )
    enriched = email.model_copy(update={"redis": config.model_copy()})
    logger.info("Redis details injected into Email.")
    return enriched
