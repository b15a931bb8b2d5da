"""
Module: balance_kernel.models.account
Responsibility: ORM persistence for account types and balance-bearing accounts.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - Account.balance is the authoritative running total.  It is updated in
      place and ONLY through AccountStore.adjust(), which issues a single
      atomic increment statement.  Never assign to it from posting code.
    - A NULL balance is treated as zero by every adjustment.
    - AccountType rows are classification tags; their ids are what posting
      rule configuration refers to, so they must not be renumbered once
      referenced.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from balance_kernel.db.base import Base, TimestampedBase

if TYPE_CHECKING:
    from balance_kernel.domain.clock import Clock
    from balance_kernel.models.transaction import Transaction


class AccountType(Base):
    """Classification tag driving which posting rule applies."""

    __tablename__ = "account_types"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    accounts: Mapped[list[Account]] = relationship(back_populates="account_type")

    def __repr__(self) -> str:
        return f"<AccountType {self.id}: {self.name}>"


class Account(TimestampedBase):
    """
    A named balance-bearing account classified by an AccountType.

    Contract:
        balance is mutated only by AccountStore.adjust().  Reads after an
        adjustment must go back to the database (the bulk UPDATE does not
        synchronize loaded instances).
    """

    __tablename__ = "accounts"

    __table_args__ = (
        Index("idx_account_type_id", "account_type_id", "id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    balance: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        default=Decimal("0.00"),
        server_default=text("0"),
    )

    account_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account_types.id", onupdate="CASCADE", ondelete="RESTRICT"),
        nullable=False,
    )

    due: Mapped[date | None] = mapped_column(Date, nullable=True)

    avoid_interest_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Day of month (1-31) a recurring payment is due
    monthly_due_date_day: Mapped[int | None] = mapped_column(Integer, nullable=True)

    account_type: Mapped[AccountType] = relationship(back_populates="accounts")

    transactions: Mapped[list[Transaction]] = relationship(back_populates="account")

    def __repr__(self) -> str:
        return f"<Account {self.id}: {self.name}>"

    @property
    def type_name(self) -> str | None:
        return self.account_type.name if self.account_type is not None else None

    def next_due_date(self, clock: Clock) -> date | None:
        """
        Next date on or after today falling on monthly_due_date_day.

        The day is clamped to the length of the month, so a day of 31 lands
        on the 30th in April and the 28th/29th in February.

        Postconditions: Returns None when monthly_due_date_day is unset.
        """
        day = self.monthly_due_date_day
        if not day:
            return None

        today = clock.now().date()
        candidate = _clamped(today.year, today.month, day)
        if candidate < today:
            first_of_next = (today.replace(day=1) + timedelta(days=32)).replace(day=1)
            candidate = _clamped(first_of_next.year, first_of_next.month, day)
        return candidate


def _clamped(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))
