"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from campusforms.core.config import FormsConfig
from campusforms.forms.catalog import FormCatalog
from campusforms.forms.controller import FormStateController


VALID_SIGN_IN = {"username": "sravya21", "password": "secret12"}

VALID_SIGN_UP = {
    "firstName": "Sravya",
    "lastName": "Reddy",
    "username": "sravya21",
    "rollNumber": "20071A0501",
    "department": "CSE",
    "password": "secret12",
}

VALID_EVENT_REQUEST = {
    "dep": "CSE",
    "subject": "Permission for hackathon",
    "event": "CodeFest",
    "venue": "Seminar Hall 2",
    "evedate": "2026-11-20",
    "detail": "A 24 hour hackathon for second year students.",
}


def fill(controller: FormStateController, values: dict[str, str]) -> None:
    """Apply each value as a separate field change, in order."""
    for name, value in values.items():
        controller.on_field_change(name, value)


@pytest.fixture
def catalog() -> FormCatalog:
    return FormCatalog.from_config(FormsConfig())
