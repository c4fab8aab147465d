"""Core type definitions shared across campusforms modules."""

from __future__ import annotations

from enum import StrEnum


class FormKind(StrEnum):
    """Bundled form ids that carry extra behaviour beyond validate-and-submit."""

    EVENT_REQUEST = "event_request"
    SEND_MAIL = "send_mail"


class RuleKind(StrEnum):
    """Declarative validation rule kinds."""

    REQUIRED = "required"
    PATTERN = "pattern"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    EXACT_LENGTH = "exact_length"
    ONE_OF = "one_of"


class StalePolicy(StrEnum):
    """What happens to a derived value once its source stops qualifying."""

    RETAIN = "retain"
    CLEAR = "clear"


class SubmissionStatus(StrEnum):
    """Lifecycle of a form's submit action."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SubmitStatus(StrEnum):
    """Outcome of a single gateway submission."""

    SUCCEEDED = "succeeded"
    VALIDATION_ERROR = "validation_error"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"
