"""Derived fields computed from other fields."""

from __future__ import annotations

from collections.abc import Mapping

from campusforms.core.types import StalePolicy
from campusforms.forms.models import DerivationRule
from campusforms.forms.rules import compile_pattern


class DerivedFieldComputer:
    """Applies a form's derivation rules.

    A rule fires when its pattern fully matches the source value and sets
    the target to ``template.format(value=source_value)``. When the source
    stops matching, ``StalePolicy.RETAIN`` keeps the last derived value and
    ``StalePolicy.CLEAR`` empties the target.
    """

    def __init__(
        self,
        rules: list[DerivationRule],
        stale_policy: StalePolicy = StalePolicy.RETAIN,
    ) -> None:
        self._rules = list(rules)
        self._stale_policy = stale_policy

    @property
    def sources(self) -> frozenset[str]:
        return frozenset(r.source_field for r in self._rules)

    @property
    def targets(self) -> frozenset[str]:
        return frozenset(r.target_field for r in self._rules)

    @property
    def stale_policy(self) -> StalePolicy:
        return self._stale_policy

    def derive(
        self, source_field: str, value: str, current: Mapping[str, str]
    ) -> dict[str, str]:
        """Return target values that change because ``source_field`` is now ``value``."""
        updates: dict[str, str] = {}
        for rule in self._rules:
            if rule.source_field != source_field:
                continue
            if compile_pattern(rule.pattern).fullmatch(value or ""):
                new_value = rule.template.format(value=value)
            elif self._stale_policy == StalePolicy.CLEAR:
                new_value = ""
            else:
                continue
            if current.get(rule.target_field, "") != new_value:
                updates[rule.target_field] = new_value
        return updates
