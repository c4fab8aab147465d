"""In-memory store for live form instances."""

from __future__ import annotations

from campusforms.forms.controller import FormStateController
from campusforms.forms.event_request import EventRequestForm


class FormInstanceStore:
    """In-memory dict store for form controllers, keyed by controller id.

    Instances live for the lifetime of the process only.
    """

    def __init__(self) -> None:
        self._controllers: dict[str, FormStateController] = {}
        self._event_forms: dict[str, EventRequestForm] = {}

    # -- Controllers --

    def save(self, controller: FormStateController) -> None:
        self._controllers[controller.id] = controller

    def get(self, instance_id: str) -> FormStateController | None:
        return self._controllers.get(instance_id)

    def remove(self, instance_id: str) -> None:
        self._controllers.pop(instance_id, None)
        self._event_forms.pop(instance_id, None)

    # -- Event request forms --

    def save_event_form(self, form: EventRequestForm) -> None:
        self.save(form.controller)
        self._event_forms[form.controller.id] = form

    def get_event_form(self, instance_id: str) -> EventRequestForm | None:
        return self._event_forms.get(instance_id)
