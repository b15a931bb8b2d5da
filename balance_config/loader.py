"""
Configuration Loader (``balance_config.loader``).

Responsibility
--------------
Loads the rule configuration YAML file, layers environment overrides on
top, and parses the result into a ``balance_kernel`` RuleConfig.  Runtime
callers go through ``balance_config.get_active_config()`` rather than
calling these helpers directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values are reported by the validator, not here.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from balance_kernel.domain.rule_config import (
    DEFAULT_CHECKING_ACCOUNT_ID,
    DEFAULT_SAVINGS_ACCOUNT_ID,
    DesignatedAccounts,
    RuleConfig,
)

# Environment variable -> configuration key
ENV_OVERRIDES: dict[str, str] = {
    "CHECK_ACCOUNT_TYPE_ID": "check_account_type_id",
    "SAVINGS_TYPE_ID": "savings_account_type_id",
    "CREDIT_CARD_TYPE_ID": "credit_card_type_id",
    "INCOME_TYPE_ID": "income_type_id",
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _env_value(raw: str) -> Any:
    raw = raw.strip()
    if raw == "" or raw.lower() in ("null", "none"):
        return None
    try:
        return int(raw)
    except ValueError:
        # Left as text so the validator reports it
        return raw


def apply_env_overrides(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    """
    Return a copy of ``data`` with environment overrides applied.

    An empty variable unsets the id (the rule keyed on it is disabled).
    Variables that are not present leave the file value alone.
    """
    merged = dict(data)
    for var, key in ENV_OVERRIDES.items():
        if var in env:
            merged[key] = _env_value(env[var])
    return merged


def parse_rule_config(data: dict[str, Any]) -> RuleConfig:
    """
    Parse validated configuration data into a RuleConfig.

    Preconditions:
        - ``data`` has passed ``validate_rule_config_data``.
    """
    designated_data = data.get("designated_accounts")
    if isinstance(designated_data, dict):
        designated = DesignatedAccounts(
            checking_account_id=designated_data.get("checking", DEFAULT_CHECKING_ACCOUNT_ID),
            savings_account_id=designated_data.get("savings", DEFAULT_SAVINGS_ACCOUNT_ID),
        )
    else:
        designated = DesignatedAccounts()

    return RuleConfig(
        check_type_id=data.get("check_account_type_id"),
        savings_type_id=data.get("savings_account_type_id"),
        credit_card_type_id=data.get("credit_card_type_id"),
        income_type_id=data.get("income_type_id"),
        overrides={
            type_id: tuple(account_ids)
            for type_id, account_ids in (data.get("increment_overrides") or {}).items()
        },
        designated_accounts=designated,
        resolve_designated_by_type=designated_data == "by_type",
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of the effective configuration data."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
