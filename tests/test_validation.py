"""Tests for channel eligibility rules."""

from __future__ import annotations

import pytest

from notification_relay.models import EmailPayload, SmsPayload
from notification_relay.validation import ValidationResult, validate_email, validate_sms


def test_valid_email() -> None:
    result = validate_email(EmailPayload(to=["a@x.com"], subject="hi", body=["hello"]))
    assert result.is_valid
    assert bool(result) is True
    assert result.problems() == ()


def test_email_with_some_blank_entries_is_still_valid() -> None:
    email = EmailPayload(to=["", "a@x.com"], subject="hi", body=["  ", "hello"])
    assert validate_email(email).is_valid


@pytest.mark.parametrize(
    ("email", "field"),
    [
        (EmailPayload(to=[], subject="hi", body=["b"]), "to"),
        (EmailPayload(to=["  ", ""], subject="hi", body=["b"]), "to"),
        (EmailPayload(to=["a@x.com"], subject="", body=["b"]), "subject"),
        (EmailPayload(to=["a@x.com"], subject="   ", body=["b"]), "subject"),
        (EmailPayload(to=["a@x.com"], subject="hi", body=[]), "body"),
        (EmailPayload(to=["a@x.com"], subject="hi", body=["\t"]), "body"),
    ],
)
def test_invalid_email(email: EmailPayload, field: str) -> None:
    result = validate_email(email)
    assert not result.is_valid
    assert list(result.errors) == [field]


def test_empty_email_reports_every_field() -> None:
    result = validate_email(EmailPayload())
    assert set(result.errors) == {"to", "subject", "body"}
    assert "subject: is blank" in result.problems()


def test_valid_sms() -> None:
    assert validate_sms(SmsPayload(mobileno=["+1"], message=["code"])).is_valid


@pytest.mark.parametrize(
    ("sms", "fields"),
    [
        (SmsPayload(mobileno=[], message=["m"]), {"mobileno"}),
        (SmsPayload(mobileno=[" "], message=["m"]), {"mobileno"}),
        (SmsPayload(mobileno=["+1"], message=[]), {"message"}),
        (SmsPayload(mobileno=["+1"], message=["", " "]), {"message"}),
        (SmsPayload(), {"mobileno", "message"}),
    ],
)
def test_invalid_sms(sms: SmsPayload, fields: set[str]) -> None:
    result = validate_sms(sms)
    assert not result.is_valid
    assert set(result.errors) == fields


def test_validation_result_factories() -> None:
    assert ValidationResult.success().is_valid
    failed = ValidationResult.failure({"to": ["is empty"]})
    assert not failed
    failed.add_error("to", "again")
    assert failed.errors == {"to": ["is empty", "again"]}
    assert failed.problems() == ("to: is empty", "to: again")
