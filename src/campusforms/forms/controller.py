"""Form state controller: values, errors and aggregate validity for one form instance."""

from __future__ import annotations

import uuid
from typing import Callable

from campusforms.core.types import StalePolicy, SubmissionStatus
from campusforms.forms.derivation import DerivedFieldComputer
from campusforms.forms.models import FieldState, FormSnapshot, SubmitResult
from campusforms.forms.schema import ValidationSchema

Listener = Callable[[FormSnapshot], None]


class FormSubmissionBlocked(ValueError):
    """Raised when a submit is attempted on a form that is not submittable."""


class FormStateController:
    """Explicit state container for a single form instance.

    Every field change re-validates the field, applies derivations sourced
    from it and recomputes aggregate validity before listeners are notified,
    so no caller ever observes stale validity.
    """

    def __init__(
        self,
        schema: ValidationSchema,
        derivations: DerivedFieldComputer | None = None,
        stale_policy: StalePolicy = StalePolicy.RETAIN,
    ) -> None:
        self.id = str(uuid.uuid4())
        self._schema = schema
        self._derivations = derivations or DerivedFieldComputer(
            schema.definition.derivations, stale_policy
        )
        self._listeners: list[Listener] = []
        self._fields: dict[str, FieldState] = {}
        self._status = SubmissionStatus.IDLE
        self._submission_error: str | None = None
        self._navigate_to: str | None = None
        self._is_valid = False
        self._mount()

    @property
    def schema(self) -> ValidationSchema:
        return self._schema

    @property
    def form_id(self) -> str:
        return self._schema.definition.id

    @property
    def status(self) -> SubmissionStatus:
        return self._status

    def _mount(self) -> None:
        for name in self._schema.field_names:
            self._fields[name] = self._evaluate(name, "", touched=False)
        self._recompute()

    def _evaluate(self, name: str, value: str, touched: bool) -> FieldState:
        field = self._schema.field(name)
        check = self._schema.validate(name, value)
        return FieldState(
            name=name,
            value=value,
            valid=check.valid,
            error=check.message,
            required=field.required,
            read_only=field.read_only,
            touched=touched,
        )

    def _recompute(self) -> None:
        self._is_valid = all(self._fields[name].valid for name in self._schema.required_fields)

    # -- Events --

    def on_field_change(self, name: str, value: str) -> FormSnapshot:
        """Apply a user edit to one field.

        Raises:
            KeyError: If the form has no such field.
            ValueError: If the field is read-only (owned by a derivation).
            FormSubmissionBlocked: If a submission is in flight.
        """
        field = self._schema.field(name)
        if field.read_only:
            raise ValueError(f"Field {name!r} is read-only")
        if self._status == SubmissionStatus.SUBMITTING:
            raise FormSubmissionBlocked("Form is being submitted")

        self._fields[name] = self._evaluate(name, value or "", touched=True)

        if name in self._derivations.sources:
            values = {n: f.value for n, f in self._fields.items()}
            for target, derived in self._derivations.derive(name, value or "", values).items():
                self._fields[target] = self._evaluate(
                    target, derived, touched=self._fields[target].touched
                )

        self._recompute()
        if self._status != SubmissionStatus.IDLE:
            self._status = SubmissionStatus.IDLE
            self._submission_error = None
            self._navigate_to = None
        return self._notify()

    def get_snapshot(self) -> FormSnapshot:
        return FormSnapshot(
            form_id=self.form_id,
            fields=dict(self._fields),
            is_valid=self._is_valid,
            status=self._status,
            submission_error=self._submission_error,
            navigate_to=self._navigate_to,
        )

    def is_submittable(self) -> bool:
        return self._is_valid and self._status != SubmissionStatus.SUBMITTING

    # -- Submission lifecycle --

    def begin_submission(self) -> FormSnapshot:
        """Enter the submitting state and return the snapshot to send.

        Raises:
            FormSubmissionBlocked: If the form is invalid or already submitting.
        """
        if self._status == SubmissionStatus.SUBMITTING:
            raise FormSubmissionBlocked("A submission is already in flight")
        if not self._is_valid:
            raise FormSubmissionBlocked(f"Form {self.form_id!r} has invalid fields")
        self._status = SubmissionStatus.SUBMITTING
        self._submission_error = None
        self._navigate_to = None
        return self._notify()

    def finish_submission(self, result: SubmitResult) -> FormSnapshot:
        """Record the outcome of the in-flight submission."""
        if result.ok:
            self._status = SubmissionStatus.SUCCEEDED
            self._navigate_to = result.navigate_to
            self._submission_error = None
        else:
            self._status = SubmissionStatus.FAILED
            self._navigate_to = None
            self._submission_error = result.reason or "Submission failed"
        return self._notify()

    def reset(self) -> FormSnapshot:
        self._fields.clear()
        self._status = SubmissionStatus.IDLE
        self._submission_error = None
        self._navigate_to = None
        self._mount()
        return self._notify()

    # -- Observers --

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for new snapshots. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> FormSnapshot:
        snapshot = self.get_snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot
