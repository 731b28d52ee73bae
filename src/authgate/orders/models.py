"""Order entity and the ``orders`` table definition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Column, Integer, MetaData, String, Table

NAME_MAX_LENGTH = 255

# Largest id a signed 64-bit INTEGER column can hold
MAX_ORDER_ID = 2**63 - 1

metadata = MetaData()

orders_table = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    sqlite_autoincrement=True,
)


@dataclass(frozen=True)
class Order:
    """A persisted order owned by exactly one user."""

    id: int
    user_id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "userId": self.user_id, "name": self.name}
