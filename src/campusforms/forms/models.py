"""Shared models for form definitions and runtime form state."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from campusforms.core.types import RuleKind, SubmissionStatus, SubmitStatus


class ValidationRule(BaseModel):
    """One declarative constraint attached to a field."""

    kind: RuleKind
    parameter: Any = None
    message: str = ""


class DerivationRule(BaseModel):
    """Computes ``target_field`` from ``source_field`` when ``pattern`` matches."""

    source_field: str
    target_field: str
    pattern: str
    template: str = "{value}"


class FieldDefinition(BaseModel):
    """Definition of a single form field."""

    name: str
    label: str = ""
    read_only: bool = False
    rules: list[ValidationRule] = Field(default_factory=list)

    @property
    def required(self) -> bool:
        return any(r.kind == RuleKind.REQUIRED for r in self.rules)


class FormDefinition(BaseModel):
    """Full definition of a form loaded from YAML."""

    id: str
    title: str = ""
    fields: list[FieldDefinition] = Field(default_factory=list)
    derivations: list[DerivationRule] = Field(default_factory=list)
    endpoint: str | None = None
    success_route: str | None = None
    payload_fields: list[str] = Field(default_factory=list)
    # False for single-field checks used inside another form's workflow.
    standalone: bool = True


class FieldCheck(BaseModel):
    """Result of validating one value against one field."""

    valid: bool
    message: str | None = None


class ValidationResult(BaseModel):
    """Result of validating a full set of values."""

    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class FieldState(BaseModel):
    """Runtime state of a single field."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str = ""
    valid: bool = True
    error: str | None = None
    required: bool = False
    read_only: bool = False
    touched: bool = False


class FormSnapshot(BaseModel):
    """Immutable view of a form at one point in time."""

    model_config = ConfigDict(frozen=True)

    form_id: str
    fields: dict[str, FieldState]
    is_valid: bool
    status: SubmissionStatus = SubmissionStatus.IDLE
    submission_error: str | None = None
    navigate_to: str | None = None

    @property
    def values(self) -> dict[str, str]:
        return {name: f.value for name, f in self.fields.items()}

    @property
    def errors(self) -> dict[str, str]:
        return {name: f.error for name, f in self.fields.items() if f.error is not None}


class SubmitResult(BaseModel):
    """Outcome of a gateway submission."""

    status: SubmitStatus
    navigate_to: str | None = None
    reason: str | None = None
    errors: dict[str, str] = Field(default_factory=dict)
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.status == SubmitStatus.SUCCEEDED


class SendResult(BaseModel):
    """Outcome of the event form's send-mail action."""

    sent: bool
    message: str | None = None
