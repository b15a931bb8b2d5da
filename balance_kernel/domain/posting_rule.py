"""
Posting rule outcomes -- the tagged result of classifying a transaction.

Responsibility:
    Defines the immutable values RuleResolver returns: which rule matched
    (RuleKind), and the signed balance adjustments it implies.  Inert
    outcomes (zero amount, savings, unrouted transfer, card charge with no
    account) carry no adjustments but are still distinct kinds so callers
    and tests can tell them apart.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.  Targets that need a
    storage lookup ("first account of type T") stay symbolic here and are
    resolved by BalancePoster.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class RuleKind(str, Enum):
    """Which posting rule a transaction was classified into."""

    ZERO_AMOUNT = "zero_amount"
    OVERRIDE = "override"
    CREDIT_CARD = "credit_card"
    CREDIT_CARD_UNROUTED = "credit_card_unrouted"
    TRANSFER_TO_SAVINGS = "transfer_to_savings"
    TRANSFER_TO_CHECKING = "transfer_to_checking"
    TRANSFER_UNROUTED = "transfer_unrouted"
    INCOME = "income"
    SAVINGS = "savings"
    DEFAULT = "default"


@dataclass(frozen=True)
class AccountTarget:
    """
    The account an adjustment applies to.

    Exactly one of ``account_id`` / ``first_of_type_id`` is set, or neither
    (unresolved: the adjustment is skipped silently).
    """

    account_id: int | None = None
    first_of_type_id: int | None = None

    def __post_init__(self) -> None:
        if self.account_id is not None and self.first_of_type_id is not None:
            raise ValueError("AccountTarget takes an account id or a type id, not both")

    @classmethod
    def by_id(cls, account_id: int | None) -> AccountTarget:
        return cls(account_id=account_id)

    @classmethod
    def first_of_type(cls, type_id: int | None) -> AccountTarget:
        return cls(first_of_type_id=type_id)

    @property
    def is_unresolved(self) -> bool:
        return self.account_id is None and self.first_of_type_id is None


@dataclass(frozen=True)
class BalanceAdjustment:
    """Signed add of ``delta`` to the target account's balance."""

    target: AccountTarget
    delta: Decimal


@dataclass(frozen=True)
class PostingRule:
    """A resolved posting rule: its kind and the adjustments to apply, in order."""

    kind: RuleKind
    adjustments: tuple[BalanceAdjustment, ...] = ()

    @property
    def is_inert(self) -> bool:
        return not self.adjustments

    @property
    def total_delta(self) -> Decimal:
        return sum((a.delta for a in self.adjustments), Decimal("0"))
