"""Built-in field rules.

Each rule is registered under a ``RuleKind`` and has the signature::

    def rule(value: str, parameter: Any = None) -> str | None

returning a default error message on failure and ``None`` on success.
The schema substitutes the field's declared message for the default.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Callable

from campusforms.core.types import RuleKind

Rule = Callable[..., str | None]

# Registry of rule functions: kind -> callable(value, parameter) -> str | None
RULES: dict[RuleKind, Rule] = {}


def register(kind: RuleKind):
    """Decorator to register a rule function."""
    def decorator(fn):
        RULES[kind] = fn
        return fn
    return decorator


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    # ASCII so \d and \w accept only [0-9] and [A-Za-z0-9_].
    return re.compile(pattern, re.ASCII)


def is_empty(value: str | None) -> bool:
    return not value


@register(RuleKind.REQUIRED)
def check_required(value: str, parameter: Any = None, **_kwargs: Any) -> str | None:
    if is_empty(value):
        return "This field is required."
    return None


@register(RuleKind.PATTERN)
def check_pattern(value: str, parameter: Any = None, **_kwargs: Any) -> str | None:
    if not compile_pattern(str(parameter)).fullmatch(value):
        return f"Value does not match required pattern: {parameter}"
    return None


@register(RuleKind.MIN_LENGTH)
def check_min_length(value: str, parameter: Any = None, **_kwargs: Any) -> str | None:
    if len(value) < int(parameter):
        return f"Must be at least {parameter} characters"
    return None


@register(RuleKind.MAX_LENGTH)
def check_max_length(value: str, parameter: Any = None, **_kwargs: Any) -> str | None:
    if len(value) > int(parameter):
        return f"Must be at most {parameter} characters"
    return None


@register(RuleKind.EXACT_LENGTH)
def check_exact_length(value: str, parameter: Any = None, **_kwargs: Any) -> str | None:
    if len(value) != int(parameter):
        return f"Must be exactly {parameter} characters"
    return None


@register(RuleKind.ONE_OF)
def check_one_of(value: str, parameter: Any = None, **_kwargs: Any) -> str | None:
    allowed = frozenset(parameter or ())
    if value not in allowed:
        return f"Must be one of: {', '.join(sorted(allowed))}"
    return None
