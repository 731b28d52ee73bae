"""OrderMapper: owner-scoped CRUD access to the ``orders`` table."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine, delete, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from authgate.orders.models import Order, metadata, orders_table

logger = logging.getLogger(__name__)


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for ``database_url``.

    SQLite connections are shared across threads because handlers run
    mapper calls in a threadpool; in-memory SQLite additionally uses a single
    static connection so every thread sees the same database.
    """
    kwargs: dict[str, Any] = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


class OrderMapper:
    """Reads and writes orders, always filtered by the owning user.

    Args:
        engine: SQLAlchemy engine bound to the orders database.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        """Create the ``orders`` table if it does not exist."""
        metadata.create_all(self._engine)

    def list_by_user(self, user_id: str) -> list[Order]:
        stmt = select(orders_table).where(orders_table.c.user_id == user_id).order_by(orders_table.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).all()
        return [self._row_to_order(row) for row in rows]

    def get(self, order_id: int, user_id: str) -> Order | None:
        stmt = select(orders_table).where(
            orders_table.c.id == order_id,
            orders_table.c.user_id == user_id,
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).first()
        return self._row_to_order(row) if row is not None else None

    def create(self, user_id: str, name: str) -> Order:
        """Insert an order for ``user_id`` and return it with its new id."""
        stmt = insert(orders_table).values(user_id=user_id, name=name)
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
            order_id = result.inserted_primary_key[0]
        logger.info("Created order %d for user %s", order_id, user_id)
        return Order(id=order_id, user_id=user_id, name=name)

    def delete(self, order_id: int, user_id: str) -> bool:
        """Delete an order owned by ``user_id``.

        Returns:
            True if a row was deleted, False if no such order belongs to the user.
        """
        stmt = delete(orders_table).where(
            orders_table.c.id == order_id,
            orders_table.c.user_id == user_id,
        )
        with self._engine.begin() as conn:
            deleted = conn.execute(stmt).rowcount > 0
        if deleted:
            logger.info("Deleted order %d for user %s", order_id, user_id)
        return deleted

    @staticmethod
    def _row_to_order(row: Any) -> Order:
        return Order(id=row.id, user_id=row.user_id, name=row.name)
