"""
RuleConfig -- posting rule configuration value objects.

Responsibility:
    Describes which account-type ids are special (checking, savings, credit
    card, income), which (type, account) pairs get direct signed-add
    treatment, and which concrete accounts act as the designated checking
    and savings accounts for transfer and credit-card settlement.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.  Built by
    ``balance_config`` at process start and injected into RuleResolver /
    BalancePoster.  The kernel never reads configuration files itself.

Invariants enforced:
    - Frozen: a RuleConfig is never mutated.  Per-call changes go through
      ``with_changes()``, which returns a new instance.
    - Every configured id is a positive int (bool rejected).
    - Override eligible sets are frozensets of positive ints.

Failure modes:
    - InvalidRuleConfigError on any malformed id or override entry.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any

from balance_kernel.exceptions import InvalidRuleConfigError

# Transfer between checking and savings.  Not configurable.
TRANSFER_TYPE_ID = 7

# Reference account identifiers for transfer / credit-card settlement
DEFAULT_CHECKING_ACCOUNT_ID = 15
DEFAULT_SAVINGS_ACCOUNT_ID = 16


def _is_valid_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class DesignatedAccounts:
    """The concrete accounts transfers and card settlements are routed to."""

    checking_account_id: int | None = DEFAULT_CHECKING_ACCOUNT_ID
    savings_account_id: int | None = DEFAULT_SAVINGS_ACCOUNT_ID

    def __post_init__(self) -> None:
        errors = [
            f"designated_accounts.{f.name} must be a positive integer, got {getattr(self, f.name)!r}"
            for f in fields(self)
            if getattr(self, f.name) is not None and not _is_valid_id(getattr(self, f.name))
        ]
        if errors:
            raise InvalidRuleConfigError(errors)


def _freeze_overrides(
    overrides: Mapping[int, Iterable[int]] | None,
) -> Mapping[int, frozenset[int]]:
    if overrides is not None and not isinstance(overrides, Mapping):
        raise InvalidRuleConfigError(["overrides must be a mapping of type id -> account ids"])
    errors: list[str] = []
    frozen: dict[int, frozenset[int]] = {}
    for type_id, account_ids in (overrides or {}).items():
        if not _is_valid_id(type_id):
            errors.append(f"overrides key must be a positive integer type id, got {type_id!r}")
            continue
        if isinstance(account_ids, (str, bytes)) or not isinstance(account_ids, Iterable):
            errors.append(f"overrides[{type_id}] must be a list of account ids")
            continue
        ids = tuple(account_ids)
        bad = [a for a in ids if not _is_valid_id(a)]
        if bad:
            errors.append(f"overrides[{type_id}] contains invalid account ids: {bad!r}")
            continue
        frozen[type_id] = frozenset(ids)
    if errors:
        raise InvalidRuleConfigError(errors)
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class RuleConfig:
    """
    Process-wide posting rule configuration.

    Contract:
        Read at call time by RuleResolver.  Any of the four type ids may be
        None, in which case the rule keyed on it never matches.

    Guarantees:
        - ``overrides`` is a read-only mapping of type id -> frozenset of
          eligible account ids.
        - ``designated_accounts`` always holds a DesignatedAccounts value.
    """

    check_type_id: int | None = None
    savings_type_id: int | None = None
    credit_card_type_id: int | None = None
    income_type_id: int | None = None
    overrides: Mapping[int, frozenset[int]] = field(default_factory=dict, hash=False)
    designated_accounts: DesignatedAccounts = field(default_factory=DesignatedAccounts)
    # Resolve designated accounts as the first account of the check/savings
    # types instead of using the configured ids
    resolve_designated_by_type: bool = False

    def __post_init__(self) -> None:
        errors = [
            f"{name} must be a positive integer or null, got {getattr(self, name)!r}"
            for name in ("check_type_id", "savings_type_id", "credit_card_type_id", "income_type_id")
            if getattr(self, name) is not None and not _is_valid_id(getattr(self, name))
        ]
        if errors:
            raise InvalidRuleConfigError(errors)
        object.__setattr__(self, "overrides", _freeze_overrides(self.overrides))

    @classmethod
    def reference_defaults(cls) -> RuleConfig:
        """The ids the reference deployment ships with."""
        return cls(
            check_type_id=3,
            savings_type_id=13,
            credit_card_type_id=8,
            income_type_id=3,
            overrides={TRANSFER_TYPE_ID: (16, 15)},
        )

    def with_changes(self, **changes: Any) -> RuleConfig:
        """Return a copy with the given fields replaced (e.g. per test)."""
        return replace(self, **changes)

    def eligible_override_accounts(self, type_id: int | None) -> frozenset[int]:
        if type_id is None:
            return frozenset()
        return self.overrides.get(type_id, frozenset())

    def describe(self) -> dict[str, Any]:
        """Plain-data view for logging and checksums."""
        return {
            "check_type_id": self.check_type_id,
            "savings_type_id": self.savings_type_id,
            "credit_card_type_id": self.credit_card_type_id,
            "income_type_id": self.income_type_id,
            "overrides": {str(k): sorted(v) for k, v in sorted(self.overrides.items())},
            "designated_accounts": {
                "checking": self.designated_accounts.checking_account_id,
                "savings": self.designated_accounts.savings_account_id,
            },
            "resolve_designated_by_type": self.resolve_designated_by_type,
        }
