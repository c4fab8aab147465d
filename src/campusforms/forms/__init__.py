"""Form engine: declarative schemas, derived fields and per-instance state.

Form variants are declared as YAML under ``definitions/`` and loaded by
``FormCatalog``, which builds a ``ValidationSchema`` per form and a fresh
``FormStateController`` per form instance.
"""

from campusforms.forms.catalog import FormCatalog
from campusforms.forms.controller import FormStateController, FormSubmissionBlocked
from campusforms.forms.derivation import DerivedFieldComputer
from campusforms.forms.schema import ValidationSchema, load_form_definitions

__all__ = [
    "DerivedFieldComputer",
    "FormCatalog",
    "FormStateController",
    "FormSubmissionBlocked",
    "ValidationSchema",
    "load_form_definitions",
]
