"""Channel eligibility rules.

A payload is dispatch-eligible only when every required field is present and
carries at least one non-blank value.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .models import EmailPayload, SmsPayload


def default_errors_factory() -> dict[str, list[str]]:
    return {}


@dataclass
class ValidationResult:
    """Collects field-level validation errors.

    Usage::

        result = ValidationResult.success()
        result = ValidationResult.failure({"subject": ["is blank"]})
    """

    errors: dict[str, list[str]] = field(default_factory=default_errors_factory)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @classmethod
    def success(cls) -> ValidationResult:
        return cls()

    @classmethod
    def failure(cls, errors: dict[str, list[str]]) -> ValidationResult:
        return cls(errors=errors)

    def add_error(self, field_name: str, message: str) -> None:
        """Add a single error for *field_name*."""
        self.errors.setdefault(field_name, []).append(message)

    def problems(self) -> tuple[str, ...]:
        """Flatten errors into ``"field: message"`` strings for logging."""
        return tuple(
            f"{name}: {message}"
            for name, messages in self.errors.items()
            for message in messages
        )

    def __bool__(self) -> bool:
        return self.is_valid


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_lines(result: ValidationResult, name: str, values: Sequence[str]) -> None:
    if not values:
        result.add_error(name, "is empty")
    elif all(_is_blank(value) for value in values):
        result.add_error(name, "has no non-blank entry")


def validate_email(email: EmailPayload) -> ValidationResult:
    """Check recipients, subject and body of an email payload."""
    result = ValidationResult.success()
    _check_lines(result, "to", email.to)
    if _is_blank(email.subject):
        result.add_error("subject", "is blank")
    _check_lines(result, "body", email.body)
    return result


def validate_sms(sms: SmsPayload) -> ValidationResult:
    """Check phone numbers and message lines of an SMS payload."""
    result = ValidationResult.success()
    _check_lines(result, "mobileno", sms.mobileno)
    _check_lines(result, "message", sms.message)
    return result
