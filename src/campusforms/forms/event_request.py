"""Event request form: save, download and send-mail workflow."""

from __future__ import annotations

from campusforms.forms.controller import FormStateController, FormSubmissionBlocked
from campusforms.forms.models import FormSnapshot, SendResult
from campusforms.submission.mail import EventRequestSender

_LETTER_TEMPLATE = """\
From: {dep}
Subject: {subject}

Respected Sir/Madam,

We request permission to conduct the event "{event}" at {venue} on {evedate}.

{detail}
{extra}
Thanking you,
{dep}
"""


class EventRequestForm:
    """Wraps an event request controller with the save/download/send actions.

    Download is only available after a successful save, and any later
    field change invalidates the save.
    """

    def __init__(self, controller: FormStateController, sender: EventRequestSender) -> None:
        self.controller = controller
        self._sender = sender
        self._saved: FormSnapshot | None = None
        controller.subscribe(self._on_change)

    def _on_change(self, _snapshot: FormSnapshot) -> None:
        self._saved = None

    @property
    def is_saved(self) -> bool:
        return self._saved is not None

    def save(self) -> FormSnapshot:
        """Freeze the current values for download.

        Raises:
            FormSubmissionBlocked: If required fields are missing or invalid.
        """
        if not self.controller.is_submittable():
            raise FormSubmissionBlocked("Event request has invalid fields")
        self._saved = self.controller.get_snapshot()
        return self._saved

    def download(self) -> str:
        """Render the saved request as a plain-text letter.

        Raises:
            FormSubmissionBlocked: If the form has not been saved.
        """
        if self._saved is None:
            raise FormSubmissionBlocked("Save the event request before downloading it")
        return render_letter(self._saved)

    def send(self, email: str) -> SendResult:
        """Mail the request letter to ``email`` if the address is acceptable."""
        snapshot = self._saved or self.controller.get_snapshot()
        return self._sender.send(
            email,
            subject=snapshot.values.get("subject", ""),
            body=render_letter(snapshot),
        )


def render_letter(snapshot: FormSnapshot) -> str:
    values = snapshot.values
    extra = values.get("additionalinfo", "")
    return _LETTER_TEMPLATE.format(
        dep=values.get("dep", ""),
        subject=values.get("subject", ""),
        event=values.get("event", ""),
        venue=values.get("venue", ""),
        evedate=values.get("evedate", ""),
        detail=values.get("detail", ""),
        extra=f"\n{extra}\n" if extra else "",
    )
