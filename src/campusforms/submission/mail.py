"""Send-mail path of the event request form."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from campusforms.forms.models import FieldCheck, SendResult
from campusforms.forms.schema import ValidationSchema

logger = logging.getLogger(__name__)


@runtime_checkable
class MailSender(Protocol):
    """Protocol for the outbound mail collaborator."""

    def send(self, recipient: str, subject: str, body: str) -> None: ...


class OutboundMail(BaseModel):
    recipient: str
    subject: str
    body: str
    sent_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class MockMailSender:
    """Mail sender that records messages in memory instead of delivering them."""

    def __init__(self) -> None:
        self.outbox: list[OutboundMail] = []

    def send(self, recipient: str, subject: str, body: str) -> None:
        self.outbox.append(OutboundMail(recipient=recipient, subject=subject, body=body))


class EventRequestSender:
    """Gates the mail collaborator behind a single-field email check.

    Unlike form submission, only the recipient address is validated here;
    the rest of the event form plays no part.
    """

    def __init__(self, schema: ValidationSchema, mailer: MailSender, field: str = "email") -> None:
        self._schema = schema
        self._mailer = mailer
        self._field = field

    def check(self, email: str) -> FieldCheck:
        return self._schema.validate(self._field, email)

    def send(self, email: str, subject: str = "", body: str = "") -> SendResult:
        """Validate ``email`` and, only if it passes, hand the message to the mailer."""
        check = self.check(email)
        if not check.valid:
            logger.warning("Refusing to send event request to %r: %s", email, check.message)
            return SendResult(sent=False, message=check.message)
        self._mailer.send(email, subject, body)
        logger.info("Event request sent to %s", email)
        return SendResult(sent=True)
