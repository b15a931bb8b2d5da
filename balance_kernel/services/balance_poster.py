"""
BalancePoster -- apply a new transaction's posting rule to account balances.

Responsibility:
    Invoked exactly once per transaction, right after the transaction row
    is inserted and inside the same unit of work.  Classifies the
    transaction with RuleResolver, resolves symbolic targets ("first
    account of the check type") through AccountStore, and issues one
    ``adjust`` call per resulting adjustment.

Architecture position:
    Kernel > Services -- imperative shell around the pure RuleResolver.
    Called by TransactionRecorder.

Invariants enforced:
    - Precondition: the transaction already has an identity (was flushed).
    - Each adjustment of the resolved rule is applied exactly once per
      call, in rule order.
    - NOT idempotent: a second call for the same transaction applies every
      delta again.  Callers post at creation time only, never on update or
      replay.
    - Flush-only: never commits.  If the second adjustment of a compound
      rule fails, the caller's rollback also discards the first.

Failure modes:
    - TransactionNotPersistedError when called with an unflushed transaction.
    - SQLAlchemy errors from AccountStore propagate unchanged.
"""

from __future__ import annotations

from balance_kernel.domain.posting_rule import BalanceAdjustment, PostingRule
from balance_kernel.domain.rule_config import DesignatedAccounts, RuleConfig
from balance_kernel.domain.rule_resolver import RuleResolver
from balance_kernel.exceptions import TransactionNotPersistedError
from balance_kernel.logging_config import LogContext, get_logger
from balance_kernel.models.transaction import Transaction
from balance_kernel.services.account_store import AccountStore
from balance_kernel.services.base import BaseService

logger = get_logger("services.balance_poster")


class BalancePoster(BaseService):
    """
    Applies resolved posting rules through AccountStore.

    Contract:
        ``apply_for_new_transaction`` returns nothing.  Success means every
        resolvable adjustment was issued; unresolvable targets are skipped
        and logged, never raised.
    """

    def __init__(
        self,
        session,
        config: RuleConfig,
        account_store: AccountStore | None = None,
    ):
        super().__init__(session)
        self._config = config
        self._store = account_store or AccountStore(session)
        self._designated: DesignatedAccounts | None = None

    @property
    def config(self) -> RuleConfig:
        return self._config

    def designated_accounts(self, config: RuleConfig | None = None) -> DesignatedAccounts:
        """
        Designated checking/savings accounts for a config.

        Configured ids are used as-is.  With ``resolve_designated_by_type``
        they are looked up as the first account of the check and savings
        types. A fully resolved pair is cached per poster for its own config;
        a partial one is looked up again on the next call.
        """
        config = config or self._config
        if not config.resolve_designated_by_type:
            return config.designated_accounts
        if config is self._config and self._designated is not None:
            return self._designated

        checking = self._store.first_account_of_type(config.check_type_id)
        savings = self._store.first_account_of_type(config.savings_type_id)
        designated = DesignatedAccounts(
            checking_account_id=checking.id if checking else None,
            savings_account_id=savings.id if savings else None,
        )
        logger.info(
            "designated_accounts_resolved",
            extra={
                "checking_account_id": designated.checking_account_id,
                "savings_account_id": designated.savings_account_id,
            },
        )
        if (
            config is self._config
            and designated.checking_account_id is not None
            and designated.savings_account_id is not None
        ):
            self._designated = designated
        return designated

    def resolve(self, transaction: Transaction, config: RuleConfig | None = None) -> PostingRule:
        """Classify a transaction without touching balances."""
        config = config or self._config
        resolver = RuleResolver(config, self.designated_accounts(config))
        return resolver.resolve(transaction.type_id, transaction.account_id, transaction.amount)

    def apply_for_new_transaction(
        self,
        transaction: Transaction,
        config: RuleConfig | None = None,
    ) -> None:
        """
        Post a newly created transaction's balance effects.

        Preconditions:
            - ``transaction`` has been added and flushed (has an id).
            - The caller owns the surrounding database transaction.

        Args:
            transaction: The persisted Transaction row.
            config: Optional per-call override of the poster's RuleConfig.

        Raises:
            TransactionNotPersistedError: If the transaction has no id.
        """
        if transaction.id is None:
            raise TransactionNotPersistedError(transaction.description)

        with LogContext.bind(transaction_id=str(transaction.id)):
            rule = self.resolve(transaction, config)
            logger.info(
                "posting_rule_resolved",
                extra={
                    "rule": rule.kind.value,
                    "type_id": transaction.type_id,
                    "account_id": transaction.account_id,
                    "amount": str(transaction.amount),
                    "adjustment_count": len(rule.adjustments),
                },
            )

            for adjustment in rule.adjustments:
                self._apply(adjustment)

    def _apply(self, adjustment: BalanceAdjustment) -> None:
        target = adjustment.target
        account_id = target.account_id
        if account_id is None and target.first_of_type_id is not None:
            account = self._store.first_account_of_type(target.first_of_type_id)
            account_id = account.id if account is not None else None

        if account_id is None:
            logger.debug(
                "balance_adjustment_skipped",
                extra={
                    "reason": "unresolved_target",
                    "first_of_type_id": target.first_of_type_id,
                    "delta": str(adjustment.delta),
                },
            )
            return

        rows = self._store.adjust(account_id, adjustment.delta)
        if rows == 0:
            logger.debug(
                "balance_adjustment_skipped",
                extra={
                    "reason": "account_not_found",
                    "account_id": account_id,
                    "delta": str(adjustment.delta),
                },
            )
            return

        logger.info(
            "balance_adjusted",
            extra={"account_id": account_id, "delta": str(adjustment.delta)},
        )
