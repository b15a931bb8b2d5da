"""TransactionSelector -- read path for recorded transactions."""

from sqlalchemy import func, select

from balance_kernel.domain.dtos import TransactionSnapshot
from balance_kernel.models.transaction import Transaction
from balance_kernel.selectors.base import BaseSelector


class TransactionSelector(BaseSelector):
    """Read-only transaction queries."""

    def get(self, transaction_id: int) -> TransactionSnapshot | None:
        transaction = self.session.get(Transaction, transaction_id, populate_existing=True)
        return TransactionSnapshot.from_model(transaction) if transaction is not None else None

    def for_account(self, account_id: int | None) -> list[TransactionSnapshot]:
        """
        Transactions against an account, newest first.

        A None account_id applies no filter.
        """
        stmt = select(Transaction)
        if account_id is not None:
            stmt = stmt.where(Transaction.account_id == account_id)
        stmt = stmt.order_by(Transaction.date.desc(), Transaction.id.desc())
        return [TransactionSnapshot.from_model(t) for t in self.session.execute(stmt).scalars()]

    def count(self) -> int:
        return self.session.execute(select(func.count()).select_from(Transaction)).scalar_one()
