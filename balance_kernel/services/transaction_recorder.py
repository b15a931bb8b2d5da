"""
TransactionRecorder -- insert a transaction and post it as one unit of work.

Responsibility:
    The boundary the CRUD layer calls with an already-validated
    NewTransaction.  ``record`` inserts the row, flushes it to obtain an id,
    and hands it to BalancePoster.  ``record_new_transaction`` wraps that in
    ``session_scope`` so the insert and every balance adjustment commit
    together or roll back together.

Architecture position:
    Kernel > Services.  The only caller of BalancePoster.

Invariants enforced:
    - Insert-then-post: posting always sees a transaction with an identity.
    - Post once: ``amend`` edits a recorded transaction WITHOUT re-posting,
      so a changed amount does not move any balance.
    - Atomicity: a failure anywhere inside ``record_new_transaction`` leaves
      neither the transaction row nor any adjustment committed.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from balance_kernel.db.engine import session_scope
from balance_kernel.db.types import to_money
from balance_kernel.domain.dtos import NewTransaction, TransactionSnapshot
from balance_kernel.domain.rule_config import RuleConfig
from balance_kernel.exceptions import ImmutableFieldError, TransactionNotFoundError
from balance_kernel.logging_config import LogContext, get_logger
from balance_kernel.models.transaction import Transaction
from balance_kernel.services.balance_poster import BalancePoster
from balance_kernel.services.base import BaseService

logger = get_logger("services.transaction_recorder")


class TransactionRecorder(BaseService):
    """
    Records new transactions and applies their balance effects.

    Non-goals:
        - Does NOT validate that type/account ids exist; the CRUD layer
          hands over validated data.
        - Does NOT commit; see ``record_new_transaction``.
    """

    AMENDABLE_FIELDS = frozenset({"description", "amount", "date", "type_id", "account_id"})

    def __init__(
        self,
        session: Session,
        config: RuleConfig,
        poster: BalancePoster | None = None,
    ):
        super().__init__(session)
        self._poster = poster or BalancePoster(session, config)

    def record(self, new_transaction: NewTransaction) -> Transaction:
        """
        Insert a transaction and post its balance effects.

        Postconditions:
            - The Transaction row is flushed and has an id.
            - Its posting rule has been applied exactly once.

        Returns:
            The persisted Transaction.
        """
        transaction = Transaction(
            description=new_transaction.description,
            amount=to_money(new_transaction.amount),
            date=new_transaction.date,
            type_id=new_transaction.type_id,
            account_id=new_transaction.account_id,
        )
        self.session.add(transaction)
        self.session.flush()

        with LogContext.bind(transaction_id=str(transaction.id)):
            self._poster.apply_for_new_transaction(transaction)
            logger.info(
                "transaction_recorded",
                extra={
                    "type_id": transaction.type_id,
                    "account_id": transaction.account_id,
                    "amount": str(transaction.amount),
                },
            )
        return transaction

    def amend(self, transaction_id: int, **changes: Any) -> Transaction:
        """
        Edit a recorded transaction. Balances are left untouched.

        Raises:
            TransactionNotFoundError: If the transaction does not exist.
            ImmutableFieldError: If a change names a non-amendable field.
        """
        transaction = self.session.get(Transaction, transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(transaction_id)

        for name in changes:
            if name not in self.AMENDABLE_FIELDS:
                raise ImmutableFieldError(transaction_id, name)

        if "amount" in changes:
            changes["amount"] = to_money(changes["amount"])
        for name, value in changes.items():
            setattr(transaction, name, value)
        self.session.flush()

        logger.info(
            "transaction_amended",
            extra={
                "transaction_id": transaction_id,
                "fields": sorted(changes),
                "reposted": False,
            },
        )
        return transaction


def record_new_transaction(
    new_transaction: NewTransaction,
    config: RuleConfig,
    session_factory: sessionmaker[Session] | None = None,
) -> TransactionSnapshot:
    """
    Record a transaction and its balance effects in one unit of work.

    Commits on success.  On any exception the insert and all adjustments
    are rolled back and the exception is re-raised.

    Args:
        new_transaction: Validated input from the CRUD layer.
        config: Posting rule configuration for this call.
        session_factory: Session factory; defaults to the module engine's.

    Returns:
        Snapshot of the committed transaction.
    """
    with session_scope(session_factory) as session:
        transaction = TransactionRecorder(session, config).record(new_transaction)
        return TransactionSnapshot.from_model(transaction)
