"""Selectors for the balance kernel (read side)."""

from balance_kernel.selectors.account_selector import AccountSelector
from balance_kernel.selectors.base import BaseSelector
from balance_kernel.selectors.transaction_selector import TransactionSelector

__all__ = [
    "AccountSelector",
    "BaseSelector",
    "TransactionSelector",
]
