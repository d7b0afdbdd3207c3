from __future__ import annotations

from loguru import logger
from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from goalplanner.db.models import Base
from goalplanner.db.session import Store

# Columns introduced after the first release. Each entry is applied only when
# the column is missing, so the order of entries does not matter.
ADDITIVE_COLUMNS: tuple[tuple[str, str, str], ...] = (
    ("weekly_actions", "due_date", "TEXT NULL"),
    ("weekly_actions", "priority", "TEXT NOT NULL DEFAULT 'none'"),
    ("projects", "note", "TEXT NULL"),
)


def _column_names(conn: Connection, table: str) -> set[str]:
    return {col["name"] for col in inspect(conn).get_columns(table)}


def _add_column_if_missing(store: Store, table: str, column: str, ddl: str) -> bool:
    with store.engine.begin() as conn:
        if column in _column_names(conn, table):
            return False
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}"))
    return True


def ensure_schema(store: Store) -> list[str]:
    """Create missing tables and add missing columns; safe to run on every start.

    Returns the ``table.column`` names that were added by this call.
    """
    Base.metadata.create_all(store.engine)

    added: list[str] = []
    for table, column, ddl in ADDITIVE_COLUMNS:
        try:
            if _add_column_if_missing(store, table, column, ddl):
                added.append(f"{table}.{column}")
                logger.info("schema upgrade added column={}.{}", table, column)
        except SQLAlchemyError as exc:
            logger.warning("schema upgrade skipped column={}.{} err={}", table, column, exc)
    return added
