"""Services for the balance kernel (write side)."""

from balance_kernel.services.account_store import AccountStore
from balance_kernel.services.balance_poster import BalancePoster
from balance_kernel.services.transaction_recorder import (
    TransactionRecorder,
    record_new_transaction,
)

__all__ = [
    "AccountStore",
    "BalancePoster",
    "TransactionRecorder",
    "record_new_transaction",
]
