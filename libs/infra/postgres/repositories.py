from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine, text

from libs.core.application.contracts import BlockRepository
from libs.core.domain.entities import BlockRecord

logger = logging.getLogger(__name__)

_ACTIVE_BLOCK_QUERY = text(
    "SELECT user_id, reason, blocked_by, blocked_at, is_active "
    "FROM user_blocks WHERE user_id = :user_id AND is_active = true "
    "LIMIT 1"
)


def build_engine(
    database_url: str,
    *,
    pool_size: int = 5,
    connect_timeout_sec: int = 5,
    statement_timeout_ms: int = 3000,
    require_ssl: bool = False,
) -> Engine:
    """Create the process-wide connection pool for the block list."""
    if database_url.startswith("postgres://"):
        database_url = "postgresql://" + database_url[len("postgres://") :]
    if database_url.startswith("postgresql://"):
        database_url = "postgresql+psycopg://" + database_url[len("postgresql://") :]

    connect_args: dict[str, object] = {
        "connect_timeout": connect_timeout_sec,
        "options": f"-c statement_timeout={statement_timeout_ms}",
    }
    if require_ssl:
        connect_args["sslmode"] = "require"

    return create_engine(
        database_url,
        pool_size=pool_size,
        pool_pre_ping=True,
        pool_timeout=connect_timeout_sec,
        connect_args=connect_args,
    )


class PostgresBlockRepository(BlockRepository):
    """Reads active rows from the ``user_blocks`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def find_active_block(self, user_id: str) -> BlockRecord | None:
        with self._engine.connect() as connection:
            row = (
                connection.execute(_ACTIVE_BLOCK_QUERY, {"user_id": user_id})
                .mappings()
                .first()
            )
        if row is None:
            return None
        return BlockRecord(
            user_id=row["user_id"],
            reason=row["reason"],
            blocked_by=row["blocked_by"],
            blocked_at=row["blocked_at"],
            is_active=bool(row["is_active"]),
        )
