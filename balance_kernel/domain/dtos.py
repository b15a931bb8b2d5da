"""
DTOs -- immutable data crossing the kernel boundary.

Responsibility:
    NewTransaction is the already-validated input the CRUD layer hands to
    the kernel.  AccountSnapshot / TransactionSnapshot are what selectors
    and the unit-of-work helper return, so callers never hold live ORM
    instances outside a session.

Architecture position:
    Kernel > Domain -- free of database access.  from_model() class methods
    are boundary converters invoked only from selectors and services.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from balance_kernel.models.account import Account as AccountModel
    from balance_kernel.models.transaction import Transaction as TransactionModel


@dataclass(frozen=True)
class NewTransaction:
    """
    A "new transaction" event produced by the (external) CRUD layer.

    Contract:
        Fields are already validated: type_id names an existing AccountType,
        account_id (when given) an existing Account, amount is a Decimal.
    """

    description: str
    type_id: int
    amount: Decimal
    date: date
    account_id: int | None = None


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of an account row."""

    id: int
    name: str
    balance: Decimal
    account_type_id: int
    monthly_due_date_day: int | None = None

    @classmethod
    def from_model(cls, account: AccountModel) -> AccountSnapshot:
        return cls(
            id=account.id,
            name=account.name,
            balance=account.balance if account.balance is not None else Decimal("0.00"),
            account_type_id=account.account_type_id,
            monthly_due_date_day=account.monthly_due_date_day,
        )


@dataclass(frozen=True)
class TransactionSnapshot:
    """Read-only view of a transaction row."""

    id: int
    description: str
    amount: Decimal
    date: date
    type_id: int
    account_id: int | None

    @classmethod
    def from_model(cls, transaction: TransactionModel) -> TransactionSnapshot:
        return cls(
            id=transaction.id,
            description=transaction.description,
            amount=transaction.amount,
            date=transaction.date,
            type_id=transaction.type_id,
            account_id=transaction.account_id,
        )
