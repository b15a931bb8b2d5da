"""
balance_config -- single public entrypoint for posting rule configuration.

Responsibility:
    Provides the way to obtain a RuleConfig at runtime through
    ``get_active_config()``.  The kernel never reads configuration files or
    environment variables itself; it receives the RuleConfig this package
    builds.

Architecture position:
    Configuration -- sits above ``balance_kernel``.  The kernel MUST NEVER
    import from ``balance_config``.

Invariants enforced:
    - Validation before use: a RuleConfig is only built from data that
      passed ``validate_rule_config_data``.
    - Deterministic: the same file and environment always produce the same
      RuleConfig and checksum.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``InvalidRuleConfigError`` -- validation failed (all errors listed).

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``BALANCE_CONFIG_TRACE`` log entry with the source path, checksum and
    effective ids, tying posted balance changes back to the configuration
    that governed them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from balance_config.loader import (
    apply_env_overrides,
    compute_checksum,
    load_yaml_file,
    parse_rule_config,
)
from balance_config.validator import validate_rule_config_data
from balance_kernel.domain.rule_config import RuleConfig
from balance_kernel.exceptions import InvalidRuleConfigError

_logger = logging.getLogger("balance_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "balance.yaml"


def get_active_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> RuleConfig:
    """
    Load, validate and build the active RuleConfig.

    Args:
        config_path: YAML file to read.  Defaults to sets/balance.yaml.
        env: Environment mapping for overrides.  Defaults to os.environ.

    Returns:
        A frozen RuleConfig.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        InvalidRuleConfigError: If validation fails.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    data = apply_env_overrides(load_yaml_file(path), os.environ if env is None else env)

    validation = validate_rule_config_data(data)
    for warning in validation.warnings:
        _logger.warning("balance_config_warning", extra={"detail": warning})
    if not validation.is_valid:
        raise InvalidRuleConfigError(validation.errors)

    config = parse_rule_config(data)

    _logger.info(
        "BALANCE_CONFIG_TRACE",
        extra={
            "trace_type": "BALANCE_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": compute_checksum(data),
            "config": config.describe(),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "get_active_config",
]
