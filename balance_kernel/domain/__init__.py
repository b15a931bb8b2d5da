"""Pure domain layer: rule configuration, rule outcomes, and the resolver."""

from balance_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from balance_kernel.domain.posting_rule import (
    AccountTarget,
    BalanceAdjustment,
    PostingRule,
    RuleKind,
)
from balance_kernel.domain.rule_config import (
    DEFAULT_CHECKING_ACCOUNT_ID,
    DEFAULT_SAVINGS_ACCOUNT_ID,
    TRANSFER_TYPE_ID,
    DesignatedAccounts,
    RuleConfig,
)
from balance_kernel.domain.rule_resolver import RuleResolver

__all__ = [
    "AccountTarget",
    "BalanceAdjustment",
    "Clock",
    "DEFAULT_CHECKING_ACCOUNT_ID",
    "DEFAULT_SAVINGS_ACCOUNT_ID",
    "DesignatedAccounts",
    "DeterministicClock",
    "PostingRule",
    "RuleConfig",
    "RuleKind",
    "RuleResolver",
    "SystemClock",
    "TRANSFER_TYPE_ID",
]
