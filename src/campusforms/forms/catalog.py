"""Catalog of form definitions and factory for per-instance controllers."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from pathlib import Path

from campusforms.core.config import FormsConfig
from campusforms.core.types import StalePolicy
from campusforms.forms.controller import FormStateController
from campusforms.forms.models import FormDefinition
from campusforms.forms.schema import ValidationSchema, load_form_definitions


class FormCatalog:
    """Loads form definitions and builds their schemas and controllers.

    Choice sets for ``one_of`` rules (the department codes) are supplied
    here, so schemas stay independent of where those lists come from.
    """

    def __init__(
        self,
        definitions_dir: str | Path | None = None,
        choices: Mapping[str, Collection[str]] | None = None,
        stale_policy: StalePolicy = StalePolicy.RETAIN,
    ) -> None:
        self._definitions = load_form_definitions(definitions_dir)
        self._choices = dict(choices or {})
        self._stale_policy = stale_policy
        self._schemas: dict[str, ValidationSchema] = {}

    @classmethod
    def from_config(cls, config: FormsConfig) -> FormCatalog:
        return cls(
            definitions_dir=config.definitions_dir,
            choices={"departments": config.departments},
            stale_policy=config.stale_policy,
        )

    @property
    def definitions(self) -> dict[str, FormDefinition]:
        return dict(self._definitions)

    def definition(self, form_id: str) -> FormDefinition:
        defn = self._definitions.get(form_id)
        if defn is None:
            raise KeyError(f"Unknown form: {form_id!r}")
        return defn

    def schema(self, form_id: str) -> ValidationSchema:
        if form_id not in self._schemas:
            self._schemas[form_id] = ValidationSchema(self.definition(form_id), self._choices)
        return self._schemas[form_id]

    def create_controller(self, form_id: str) -> FormStateController:
        """Create an independent controller for a fresh form instance."""
        return FormStateController(self.schema(form_id), stale_policy=self._stale_policy)
