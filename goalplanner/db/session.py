from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from loguru import logger
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from goalplanner.core.errors import NotInitializedError


def build_database_url(path: str | Path) -> str:
    db_path = Path(path)
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    db_path = db_path.resolve()
    return f"sqlite+pysqlite:///{db_path.as_posix()}"


def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


@dataclass
class Store:
    """Handle to the planner database, created by :func:`open_store`.

    Every repository call receives a session produced by this handle; there is
    no module-level engine.
    """

    path: Path
    engine: Engine
    session_factory: sessionmaker[Session]
    closed: bool = field(default=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        if self.closed:
            raise NotInitializedError("Database is not initialized")
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # Multi-statement sequences that must not be observed half-applied.
    transaction = session

    def close(self) -> None:
        if not self.closed:
            self.engine.dispose()
            self.closed = True


def open_store(path: str | Path, *, echo: bool = False) -> Store:
    url = build_database_url(path)
    db_path = Path(url.removeprefix("sqlite+pysqlite:///"))
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=echo, future=True)
    event.listen(engine, "connect", _set_sqlite_pragma)

    # Fail fast on an unusable path instead of on the first request.
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

    session_factory = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
    logger.info("Database initialized at {}", db_path)
    return Store(path=db_path, engine=engine, session_factory=session_factory)
