"""
AccountSelector -- read path for accounts and their balances.

"First account of type" is defined as the lowest-id account currently
carrying that type.  That ordering is what makes the income and default
rules deterministic when several accounts share the check type.
"""

from decimal import Decimal

from sqlalchemy import select

from balance_kernel.domain.dtos import AccountSnapshot
from balance_kernel.models.account import Account
from balance_kernel.selectors.base import BaseSelector


class AccountSelector(BaseSelector):
    """Read-only account queries."""

    def get(self, account_id: int | None) -> AccountSnapshot | None:
        if account_id is None:
            return None
        account = self.session.execute(
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return AccountSnapshot.from_model(account) if account is not None else None

    def first_of_type(self, account_type_id: int | None) -> AccountSnapshot | None:
        """Lowest-id account of the given type, or None if unset / none exists."""
        if account_type_id is None:
            return None
        account = self.session.execute(
            select(Account)
            .where(Account.account_type_id == account_type_id)
            .order_by(Account.id)
            .limit(1)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return AccountSnapshot.from_model(account) if account is not None else None

    def of_type(self, account_type_id: int) -> list[AccountSnapshot]:
        accounts = self.session.execute(
            select(Account)
            .where(Account.account_type_id == account_type_id)
            .order_by(Account.id)
            .execution_options(populate_existing=True)
        ).scalars().all()
        return [AccountSnapshot.from_model(a) for a in accounts]

    def balance_of(self, account_id: int) -> Decimal | None:
        """
        Current stored balance.

        Returns None both for a missing account and for a NULL balance;
        use get() to tell them apart.
        """
        return self.session.execute(
            select(Account.balance).where(Account.id == account_id)
        ).scalar_one_or_none()
