"""
Balance Kernel

The balance-posting engine of a personal finance tracker:
- Rule resolution from a transaction's type and target account
- Atomic, in-place balance adjustments
- Transaction insert and balance effects committed as one unit of work
"""

__version__ = "0.1.0"
