"""
RuleResolver -- classify a transaction into exactly one posting rule.

Responsibility:
    Given a transaction's (type id, target account id, signed amount),
    decide which balance adjustments it implies.  Rules are evaluated in a
    fixed priority order and the first match wins:

        0. zero amount         -> inert
        1. override            -> +amount to the transaction's account
        2. credit card         -> -|amount| to the card, +amount to checking
        3. transfer (type 7)   -> savings/checking pair, or unrouted
        4. income              -> +amount to first account of check type
        5. savings             -> inert
        6. default             -> +amount to first account of check type

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Storage lookups are
    left symbolic (AccountTarget.first_of_type) for BalancePoster.

Invariants enforced:
    - Deterministic: same inputs and config always yield the same rule.
    - A configured type id of None never matches its rule.
    - The transfer type is excluded from override matching even when it
      appears in the override table.
"""

from __future__ import annotations

from decimal import Decimal

from balance_kernel.domain.posting_rule import (
    AccountTarget,
    BalanceAdjustment,
    PostingRule,
    RuleKind,
)
from balance_kernel.domain.rule_config import (
    TRANSFER_TYPE_ID,
    DesignatedAccounts,
    RuleConfig,
)


def _matches(type_id: int | None, configured: int | None) -> bool:
    return configured is not None and type_id == configured


def _add(target: AccountTarget, delta: Decimal) -> BalanceAdjustment:
    return BalanceAdjustment(target=target, delta=delta)


class RuleResolver:
    """
    Pure posting rule classifier.

    Contract:
        ``resolve`` never touches storage and never raises for an unmatched
        or misconfigured case; those classify into inert or unresolved
        outcomes instead.
    """

    def __init__(
        self,
        config: RuleConfig,
        designated: DesignatedAccounts | None = None,
    ):
        self._config = config
        self._designated = designated or config.designated_accounts

    @property
    def config(self) -> RuleConfig:
        return self._config

    @property
    def designated(self) -> DesignatedAccounts:
        return self._designated

    def resolve(
        self,
        type_id: int | None,
        account_id: int | None,
        amount: Decimal,
    ) -> PostingRule:
        """
        Classify a transaction.

        Args:
            type_id: The transaction's account type id.
            account_id: The transaction's target account id, if any.
            amount: Signed amount.

        Returns:
            PostingRule with zero, one, or two adjustments.
        """
        if amount == 0:
            return PostingRule(RuleKind.ZERO_AMOUNT)

        config = self._config
        checking = AccountTarget.by_id(self._designated.checking_account_id)
        savings = AccountTarget.by_id(self._designated.savings_account_id)
        magnitude = abs(amount)

        if (
            type_id is not None
            and type_id != TRANSFER_TYPE_ID
            and account_id in config.eligible_override_accounts(type_id)
        ):
            return PostingRule(
                RuleKind.OVERRIDE,
                (_add(AccountTarget.by_id(account_id), amount),),
            )

        if _matches(type_id, config.credit_card_type_id):
            if account_id is None:
                return PostingRule(RuleKind.CREDIT_CARD_UNROUTED)
            return PostingRule(
                RuleKind.CREDIT_CARD,
                (
                    _add(AccountTarget.by_id(account_id), -magnitude),
                    _add(checking, amount),
                ),
            )

        if type_id == TRANSFER_TYPE_ID:
            if _matches(account_id, self._designated.savings_account_id):
                return PostingRule(
                    RuleKind.TRANSFER_TO_SAVINGS,
                    (_add(savings, magnitude), _add(checking, amount)),
                )
            if _matches(account_id, self._designated.checking_account_id):
                return PostingRule(
                    RuleKind.TRANSFER_TO_CHECKING,
                    (_add(savings, -magnitude), _add(checking, amount)),
                )
            return PostingRule(RuleKind.TRANSFER_UNROUTED)

        check_account = AccountTarget.first_of_type(config.check_type_id)

        if _matches(type_id, config.income_type_id):
            return PostingRule(RuleKind.INCOME, (_add(check_account, amount),))

        if _matches(type_id, config.savings_type_id):
            return PostingRule(RuleKind.SAVINGS)

        return PostingRule(RuleKind.DEFAULT, (_add(check_account, amount),))
