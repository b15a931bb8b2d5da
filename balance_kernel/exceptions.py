"""
Typed Exception Hierarchy for the Balance Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the CRUD layer, scripts, tests) must be able to tell a broken
precondition from a bad configuration without parsing message strings.
Every exception therefore has:
  1. a TYPED class (catch by type, not message)
  2. a CODE class attribute (machine-readable, API-safe)
  3. structured DATA attributes (not just a message string)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    BalanceKernelError (base)
    |
    +-- PostingError
    |   +-- TransactionNotPersistedError
    |
    +-- TransactionError
    |   +-- TransactionNotFoundError
    |   +-- ImmutableFieldError
    |
    +-- ConfigError
        +-- InvalidRuleConfigError

===============================================================================
WHAT IS *NOT* AN EXCEPTION
===============================================================================

Posting is best-effort with respect to classification:

    - a config id that is unset never matches its rule
    - a first-account-of-type lookup that finds nothing is a no-op
    - an adjustment against an unknown account id affects zero rows
    - a zero amount short-circuits before rule resolution

None of these raise.  Storage failures (SQLAlchemy errors) are NOT wrapped:
they propagate untouched so that ``session_scope`` rolls the whole unit of
work back, transaction insert included.
"""


class BalanceKernelError(Exception):
    """
    Base exception for all balance kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BALANCE_KERNEL_ERROR"


# Posting-related exceptions


class PostingError(BalanceKernelError):
    """Base exception for posting-related errors."""

    code: str = "POSTING_ERROR"


class TransactionNotPersistedError(PostingError):
    """
    Posting was requested for a transaction that has no identity yet.

    The engine only posts side effects of an already-inserted transaction;
    it never creates the transaction record itself.
    """

    code: str = "TRANSACTION_NOT_PERSISTED"

    def __init__(self, description: str | None = None):
        self.description = description
        super().__init__(
            f"Transaction {description!r} must be flushed before posting"
        )


# Transaction record exceptions


class TransactionError(BalanceKernelError):
    """Base exception for transaction record errors."""

    code: str = "TRANSACTION_ERROR"


class TransactionNotFoundError(TransactionError):
    """Transaction with given ID was not found."""

    code: str = "TRANSACTION_NOT_FOUND"

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class ImmutableFieldError(TransactionError):
    """An edit tried to change a field that ordinary edits may not touch."""

    code: str = "IMMUTABLE_FIELD"

    def __init__(self, transaction_id: int, field_name: str):
        self.transaction_id = transaction_id
        self.field_name = field_name
        super().__init__(
            f"Field '{field_name}' of transaction {transaction_id} cannot be amended"
        )


# Configuration exceptions


class ConfigError(BalanceKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidRuleConfigError(ConfigError):
    """Posting rule configuration failed validation."""

    code: str = "INVALID_RULE_CONFIG"

    def __init__(self, errors: list[str] | tuple[str, ...]):
        self.errors = tuple(errors)
        super().__init__(
            "Rule configuration is invalid:\n"
            + "\n".join(f"  - {e}" for e in self.errors)
        )
