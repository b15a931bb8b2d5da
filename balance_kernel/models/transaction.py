"""
Module: balance_kernel.models.transaction
Responsibility: ORM persistence for recorded transactions.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - A Transaction row is inserted in the same unit of work as the balance
      adjustments its posting rule produces (TransactionRecorder).
    - Editing a transaction never re-posts it; the balance effect is fixed
      at creation time.
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from balance_kernel.db.base import TimestampedBase
from balance_kernel.db.types import Description, Money

if TYPE_CHECKING:
    from balance_kernel.models.account import Account, AccountType


class Transaction(TimestampedBase):
    """A dated, signed amount classified by an AccountType."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transaction_account", "account_id"),
        Index("idx_transaction_date", "date"),
    )

    description: Mapped[Description] = mapped_column(nullable=False)

    # Signed: negative amounts are debits from checking
    amount: Mapped[Money] = mapped_column(nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account_types.id"),
        nullable=False,
    )

    account_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("accounts.id"),
        nullable=True,
    )

    account_type: Mapped[AccountType] = relationship()

    account: Mapped[Account | None] = relationship(back_populates="transactions")

    def __repr__(self) -> str:
        return f"<Transaction {self.id}: {self.description} {self.amount}>"
