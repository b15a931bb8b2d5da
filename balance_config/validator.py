"""
Configuration validator (``balance_config.validator``).

Checks raw (parsed YAML + environment) rule configuration data before it is
turned into a RuleConfig, collecting every problem instead of stopping at
the first so a misconfigured deployment sees the full list at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

TYPE_ID_KEYS = (
    "check_account_type_id",
    "savings_account_type_id",
    "credit_card_type_id",
    "income_type_id",
)

KNOWN_KEYS = frozenset(TYPE_ID_KEYS) | {"increment_overrides", "designated_accounts"}


@dataclass
class ConfigValidationResult:
    """Outcome of validating rule configuration data."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _is_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_rule_config_data(data: dict[str, Any]) -> ConfigValidationResult:
    """
    Validate raw rule configuration data.

    Postconditions:
        - Unknown top-level keys are warnings, not errors.
        - Every type id is a positive int or null.
        - increment_overrides maps positive ints to lists of positive ints.
        - designated_accounts is "by_type" or a mapping with optional
          positive-int ``checking`` / ``savings`` entries.
    """
    result = ConfigValidationResult()

    for key in sorted(set(data) - KNOWN_KEYS):
        result.warnings.append(f"Unknown configuration key: {key}")

    for key in TYPE_ID_KEYS:
        value = data.get(key)
        if value is not None and not _is_id(value):
            result.errors.append(f"{key} must be a positive integer or null, got {value!r}")

    overrides = data.get("increment_overrides") or {}
    if not isinstance(overrides, dict):
        result.errors.append("increment_overrides must be a mapping")
    else:
        for type_id, account_ids in overrides.items():
            if not _is_id(type_id):
                result.errors.append(f"increment_overrides key {type_id!r} is not a type id")
            if not isinstance(account_ids, list) or not all(_is_id(a) for a in account_ids):
                result.errors.append(
                    f"increment_overrides[{type_id!r}] must be a list of account ids"
                )

    designated = data.get("designated_accounts")
    if designated is not None and designated != "by_type":
        if not isinstance(designated, dict):
            result.errors.append('designated_accounts must be a mapping or "by_type"')
        else:
            for name in sorted(set(designated) - {"checking", "savings"}):
                result.errors.append(f"designated_accounts.{name} is not a designated account")
            for name in ("checking", "savings"):
                value = designated.get(name)
                if value is not None and not _is_id(value):
                    result.errors.append(
                        f"designated_accounts.{name} must be a positive integer, got {value!r}"
                    )

    return result
