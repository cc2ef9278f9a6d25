"""Database engine, sessions and schema initialization."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import structlog
from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import SCHEMA_VERSION, Base, SchemaVersionRow, now_ms

logger = structlog.get_logger()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    # SQLite's built-in lower() only folds ASCII; queries are lowered with str.lower()
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.close()


class Database:
    """Owns the SQLAlchemy engine for the SQLite glossary store and hands out sessions."""

    def __init__(self, url: str = "sqlite:///./dictionary.db", echo: bool = False) -> None:
        """
        Initialize the database wrapper. The engine is created lazily.

        Args:
            url: SQLAlchemy database URL
            echo: Log emitted SQL
        """
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        """Get or create the SQLAlchemy engine."""
        if self._engine is None:
            url = make_url(self.url)
            if url.get_backend_name() != "sqlite":
                raise ValueError(f"Unsupported database URL: {self.url}. Only SQLite is supported")

            options = {"connect_args": {"check_same_thread": False}}
            if url.database in (None, "", ":memory:"):
                # One shared connection, otherwise every checkout sees an empty database
                options["poolclass"] = StaticPool
            else:
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)

            self._engine = create_engine(self.url, echo=self.echo, **options)
            event.listen(self._engine, "connect", _enable_sqlite_pragmas)
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a transactional session: commit on success, roll back on error."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def initialize(self) -> int:
        """
        Create missing tables and record the schema version.

        Returns:
            The schema version now in effect
        """
        Base.metadata.create_all(self.engine)

        with self.session() as session:
            current = session.scalar(select(func.max(SchemaVersionRow.version)))
            if current is None or current < SCHEMA_VERSION:
                session.add(SchemaVersionRow(version=SCHEMA_VERSION, applied_at=now_ms()))
                current = SCHEMA_VERSION

        logger.info("Database initialized", url=self.url, schema_version=current)
        return current

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
