"""ChannelPipeline — validate, enrich and dispatch both channels of a request."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import cast

from .dispatch import DispatchClient
from .enrichment import enrich_email
from .models import EmailPayload, ScheduledRequest, SmsPayload
from .outcome import ChannelOutcome, NotificationChannel, OutcomeStatus
from .validation import validate_email, validate_sms

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineReport:
    """Outcomes of one request, one entry per channel."""

    email: ChannelOutcome
    sms: ChannelOutcome

    @property
    def outcomes(self) -> tuple[ChannelOutcome, ChannelOutcome]:
        return (self.email, self.sms)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)


class ChannelPipeline:
    """Runs the email and SMS channels of a ScheduledRequest independently.

    Expected problems (invalid payload, missing endpoint, downstream failure)
    become outcomes. Anything unexpected raised by one channel is re-raised
    only after the sibling channel has finished.
    """

    def __init__(
        self,
        dispatcher: DispatchClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._log = logger or _log

    async def run(self, request: ScheduledRequest) -> PipelineReport:
        results = await asyncio.gather(
            self._process_email(request),
            self._process_sms(request.sms),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        email_outcome, sms_outcome = cast(
            "tuple[ChannelOutcome, ChannelOutcome]", results
        )
        return PipelineReport(email=email_outcome, sms=sms_outcome)

    async def _process_email(self, request: ScheduledRequest) -> ChannelOutcome:
        channel = NotificationChannel.EMAIL
        email: EmailPayload | None = request.email
        if email is None:
            return ChannelOutcome.skipped(channel)

        result = validate_email(email)
        if not result.is_valid:
            problems = result.problems()
            self._log.warning(
                "Missing required Email fields (To / Subject / Body). Skipping. %s",
                "; ".join(problems),
            )
            return ChannelOutcome.invalid(channel, problems)

        email = enrich_email(email, request.redis)
        self._log.info(
            "Final Email Request JSON:\n%s",
            email.model_dump_json(indent=2, exclude={"redis": {"redispwd"}}),
        )
        return await self._dispatcher.dispatch(channel, email)

    async def _process_sms(self, sms: SmsPayload | None) -> ChannelOutcome:
        channel = NotificationChannel.SMS
        if sms is None:
            return ChannelOutcome.skipped(channel)

        result = validate_sms(sms)
        if not result.is_valid:
            problems = result.problems()
            self._log.warning(
                "Missing required SMS fields (MobileNo / Message). "
                "Skipping SMS call. %s",
                "; ".join(problems),
            )
            return ChannelOutcome.invalid(channel, problems)

        self._log.info("Final SMS Request JSON:\n%s", sms.model_dump_json(indent=2))
        return await self._dispatcher.dispatch(channel, sms)
