"""ORM models for the balance kernel."""

from balance_kernel.models.account import Account, AccountType
from balance_kernel.models.transaction import Transaction

__all__ = [
    "Account",
    "AccountType",
    "Transaction",
]
