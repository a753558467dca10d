"""EnvelopeDecoder — raw queue bytes to ScheduledRequest.

The queue carries ``{"queuedata": "<json-string>"}``: an outer JSON object
whose envelope field holds a second, independently encoded JSON document.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from .exceptions import EmptyEnvelope, MalformedEnvelope, MissingEnvelopeField
from .models import ScheduledRequest

_log = logging.getLogger(__name__)

DEFAULT_ENVELOPE_FIELD = "queuedata"


class EnvelopeDecoder:
    """Decode envelopes into ScheduledRequest instances.

    Raises one of the :class:`~notification_relay.exceptions.EnvelopeError`
    subclasses when the message cannot be decoded. A returned request is
    structurally complete; its field contents are not validated here.
    """

    def __init__(
        self,
        field_name: str = DEFAULT_ENVELOPE_FIELD,
        logger: logging.Logger | None = None,
    ) -> None:
        self._field_name = field_name
        self._log = logger or _log

    @property
    def field_name(self) -> str:
        return self._field_name

    def decode(self, raw: bytes) -> ScheduledRequest:
        """Decode *raw* message bytes into a ScheduledRequest."""
        inner = self.extract(raw)
        self._log_pretty(inner)
        return self.parse_request(inner)

    def extract(self, raw: bytes) -> str:
        """Return the inner JSON string carried by the envelope field."""
        try:
            outer = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedEnvelope("Message body is not valid JSON", e) from e
        if not isinstance(outer, dict):
            raise MalformedEnvelope("Message body is not a JSON object")
        if self._field_name not in outer:
            raise MissingEnvelopeField(self._field_name)

        value = outer[self._field_name]
        if value is None:
            raise EmptyEnvelope(self._field_name)
        if not isinstance(value, str):
            raise MalformedEnvelope(
                f"'{self._field_name}' must be a JSON string, "
                f"got {type(value).__name__}"
            )
        if not value.strip():
            raise EmptyEnvelope(self._field_name)
        return value

    def parse_request(self, inner: str) -> ScheduledRequest:
        """Parse the inner document into a ScheduledRequest."""
        try:
            data: Any = json.loads(inner)
        except json.JSONDecodeError as e:
            raise MalformedEnvelope("Invalid JSON structure received", e) from e
        if not isinstance(data, dict):
            raise MalformedEnvelope(
                f"Inner document must be a JSON object, got {type(data).__name__}"
            )
        try:
            return ScheduledRequest.model_validate(data)
        except ValidationError as e:
            raise MalformedEnvelope("Invalid JSON structure received", e) from e

    def _log_pretty(self, inner: str) -> None:
        """Best-effort diagnostic rendering; failures are logged, never raised."""
        try:
            pretty = json.dumps(json.loads(inner), indent=2, ensure_ascii=False)
        except (json.JSONDecodeError, TypeError, ValueError):
            self._log.warning(
                "Could not parse %s as JSON object.", self._field_name, exc_info=True
            )
            return
        self._log.info("Extracted %s as JSON object:\n%s", self._field_name, pretty)
