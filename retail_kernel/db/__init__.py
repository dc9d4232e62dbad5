"""Database layer - engine, base classes and column types."""

from retail_kernel.db.base import UUID, Base, TrackedBase, UUIDString
from retail_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    run_transaction,
    session_scope,
)

__all__ = [
    "get_engine",
    "get_session",
    "create_tables",
    "run_transaction",
    "session_scope",
    "Base",
    "TrackedBase",
    "UUIDString",
    "UUID",
]
