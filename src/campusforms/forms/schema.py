"""Validation schema: ordered field rules for one form variant."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from pathlib import Path
from typing import Any

import yaml

from campusforms.core.types import RuleKind
from campusforms.forms.models import (
    DerivationRule,
    FieldCheck,
    FieldDefinition,
    FormDefinition,
    ValidationResult,
    ValidationRule,
)
from campusforms.forms.rules import RULES, is_empty

DEFAULT_DEFINITIONS_DIR = Path(__file__).resolve().parent / "definitions"


def _parse_rule(data: dict[str, Any]) -> ValidationRule:
    return ValidationRule(
        kind=RuleKind(data["kind"]),
        parameter=data.get("parameter"),
        message=data.get("message", ""),
    )


def _parse_field(data: dict[str, Any]) -> FieldDefinition:
    return FieldDefinition(
        name=data["name"],
        label=data.get("label", data["name"]),
        read_only=data.get("read_only", False),
        rules=[_parse_rule(r) for r in data.get("rules", [])],
    )


def _parse_derivation(data: dict[str, Any]) -> DerivationRule:
    return DerivationRule(
        source_field=data["source"],
        target_field=data["target"],
        pattern=data["pattern"],
        template=data.get("template", "{value}"),
    )


def load_form_definition(path: str | Path) -> FormDefinition:
    """Parse one form definition YAML file."""
    with open(path) as fh:
        data = yaml.safe_load(fh)
    return FormDefinition(
        id=data["id"],
        title=data.get("title", data["id"]),
        fields=[_parse_field(f) for f in data.get("fields", [])],
        derivations=[_parse_derivation(d) for d in data.get("derivations", [])],
        endpoint=data.get("endpoint"),
        success_route=data.get("success_route"),
        payload_fields=data.get("payload_fields", []),
        standalone=data.get("standalone", True),
    )


def load_form_definitions(definitions_dir: str | Path | None = None) -> dict[str, FormDefinition]:
    """Load every ``*.yml`` form definition in a directory, keyed by form id."""
    directory = Path(definitions_dir) if definitions_dir else DEFAULT_DEFINITIONS_DIR
    definitions: dict[str, FormDefinition] = {}
    if not directory.exists():
        return definitions
    for path in sorted(directory.glob("*.yml")):
        defn = load_form_definition(path)
        definitions[defn.id] = defn
    return definitions


class ValidationSchema:
    """Ordered mapping of field name to rules for one form.

    An empty value reports the field's ``required`` message, or passes when
    the field is optional; no other rule runs on an empty value. A non-empty
    value runs the remaining rules in declaration order and the first
    failure wins.

    ``one_of`` rules name a choice set (for example ``departments``); the
    allowed values are supplied by the caller through ``choices``.
    """

    def __init__(
        self,
        definition: FormDefinition,
        choices: Mapping[str, Collection[str]] | None = None,
    ) -> None:
        self._definition = definition
        self._fields: dict[str, FieldDefinition] = {f.name: f for f in definition.fields}
        self._choices: dict[str, frozenset[str]] = {
            name: frozenset(values) for name, values in (choices or {}).items()
        }
        for field in definition.fields:
            for rule in field.rules:
                if rule.kind == RuleKind.ONE_OF and rule.parameter not in self._choices:
                    raise ValueError(
                        f"Field {field.name!r} needs choice set {rule.parameter!r}, "
                        f"which was not supplied"
                    )

    @property
    def definition(self) -> FormDefinition:
        return self._definition

    @property
    def field_names(self) -> list[str]:
        return list(self._fields)

    @property
    def required_fields(self) -> list[str]:
        return [name for name, f in self._fields.items() if f.required]

    def field(self, name: str) -> FieldDefinition:
        try:
            return self._fields[name]
        except KeyError:
            raise KeyError(f"Unknown field {name!r} for form {self._definition.id!r}") from None

    def validate(self, field_name: str, value: str | None) -> FieldCheck:
        """Validate one value for one field. First failing rule wins."""
        field = self.field(field_name)
        value = value or ""

        if is_empty(value):
            for rule in field.rules:
                if rule.kind == RuleKind.REQUIRED:
                    return FieldCheck(valid=False, message=self._message(rule, value))
            return FieldCheck(valid=True)

        for rule in field.rules:
            if rule.kind == RuleKind.REQUIRED:
                continue
            message = self._message(rule, value)
            if message is not None:
                return FieldCheck(valid=False, message=message)
        return FieldCheck(valid=True)

    def validate_all(
        self, values: Mapping[str, str], only: Collection[str] | None = None
    ) -> ValidationResult:
        """Validate fields against ``values``; every field unless ``only`` is given."""
        errors: dict[str, str] = {}
        for name in (only if only is not None else self._fields):
            check = self.validate(name, values.get(name))
            if not check.valid:
                errors[name] = check.message or ""
        return ValidationResult(valid=not errors, errors=errors)

    def _message(self, rule: ValidationRule, value: str) -> str | None:
        parameter = rule.parameter
        if rule.kind == RuleKind.ONE_OF:
            parameter = self._choices[parameter]
        error = RULES[rule.kind](value, parameter=parameter)
        if error is None:
            return None
        return rule.message or error
