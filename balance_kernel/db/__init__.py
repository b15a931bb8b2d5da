"""Database layer - engine, base classes, types, and unit of work."""

from balance_kernel.db.base import Base, TimestampedBase
from balance_kernel.db.engine import (
    build_engine,
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)
from balance_kernel.db.types import Money, round_money, to_money

__all__ = [
    "Base",
    "TimestampedBase",
    "build_engine",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "session_scope",
    "Money",
    "round_money",
    "to_money",
]
