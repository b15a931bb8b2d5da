"""
AccountStore -- the sole mutation path for account balances.

Responsibility:
    Applies signed balance deltas to accounts and exposes the account
    lookups posting needs (by id, first of type).

Architecture position:
    Kernel > Services -- imperative shell.  Called by BalancePoster.

Invariants enforced:
    - Atomic increment: ``adjust`` is ONE statement,
      ``UPDATE accounts SET balance = COALESCE(balance, 0) + :delta``.
      It is never a read in Python followed by a write, so two concurrent
      adjustments to one account both land (the storage engine serializes
      them on the row).
    - Missing rows are not errors: an unknown id updates zero rows.
    - Flush-only: never commits or rolls back.

Failure modes:
    - SQLAlchemy errors (connectivity, constraint) propagate unchanged so
      the caller's unit of work rolls back.
"""

from decimal import Decimal

from sqlalchemy import func, update

from balance_kernel.domain.dtos import AccountSnapshot
from balance_kernel.logging_config import get_logger
from balance_kernel.models.account import Account
from balance_kernel.selectors.account_selector import AccountSelector
from balance_kernel.services.base import BaseService

logger = get_logger("services.account_store")


class AccountStore(BaseService):
    """
    Keyed account storage with an atomic adjust primitive.

    Usage:
        store = AccountStore(session)
        store.adjust(account_id, Decimal("-25.00"))
    """

    def __init__(self, session, selector: AccountSelector | None = None):
        super().__init__(session)
        self._selector = selector or AccountSelector(session)

    def adjust(self, account_id: int | None, delta: Decimal) -> int:
        """
        Atomically add a signed delta to an account balance.

        A NULL balance is treated as zero.

        Preconditions: The caller is within an active database transaction.
        Postconditions: balance == previous balance + delta for the row, or
            nothing changed when the account does not exist.

        Args:
            account_id: Target account; None is a no-op.
            delta: Signed amount (negative decrements).

        Returns:
            Number of rows affected (0 or 1).
        """
        if account_id is None:
            return 0

        # INVARIANT: single atomic read-modify-write at the storage layer
        result = self.session.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(balance=func.coalesce(Account.balance, 0) + delta)
            .execution_options(synchronize_session=False)
        )
        rows = result.rowcount

        logger.debug(
            "balance_adjust_executed",
            extra={"account_id": account_id, "delta": str(delta), "rows": rows},
        )
        return rows

    def get(self, account_id: int | None) -> AccountSnapshot | None:
        return self._selector.get(account_id)

    def first_account_of_type(self, account_type_id: int | None) -> AccountSnapshot | None:
        """Lowest-id account of the type; None when the type is unset or empty."""
        return self._selector.first_of_type(account_type_id)
