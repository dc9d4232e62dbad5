"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write-side service.  All concrete services receive a SQLAlchemy
    ``Session`` that they use via ``session.flush()`` -- never
    ``session.commit()``.

Invariants enforced:
    - Transaction boundaries: services flush within the caller's
      transaction and never commit or roll back themselves.  The caller
      (``session_scope``/``run_transaction`` or a test harness) owns
      commit/rollback, which is what makes a multi-row operation atomic.
    - Shared balances (product stock, customer points) are read with
      ``SELECT ... FOR UPDATE`` through ``lock_rows`` before they are
      written, in ascending id order.
    - Every business check runs before the first write of an operation.

Failure modes:
    - If a subclass calls ``session.commit()``, the all-or-nothing
      guarantee of order creation and status transitions is broken.
"""

from abc import ABC
from typing import Generic, Iterable, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from retail_kernel.db.base import Base
from retail_kernel.domain.clock import Clock, SystemClock

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Read-only queries belong in ``retail_kernel/selectors/``.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        """
        Args:
            session: SQLAlchemy session for database operations.
            clock: Time source for created_at/completed_at stamps.
        """
        self.session = session
        self.clock = clock or SystemClock()

    def lock_rows(self, model: type[Base], ids: Iterable[UUID]) -> dict[UUID, Base]:
        """
        Load and row-lock the given rows, in ascending id order.

        Rows already in the identity map are refreshed from the locked
        read.  Missing ids are simply absent from the result.
        """
        wanted = sorted(set(ids), key=str)
        if not wanted:
            return {}
        rows = self.session.execute(
            select(model)
            .where(model.id.in_(wanted))
            .order_by(model.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalars().all()
        return {row.id: row for row in rows}

    def lock_row(self, model: type[Base], row_id: UUID) -> Base | None:
        return self.lock_rows(model, [row_id]).get(row_id)
