"""
Database connection and session management
"""
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
import structlog

logger = structlog.get_logger()

# Base class for models
Base = declarative_base()


class Database:
    """
    Owns the engine and the session factory for one application instance.

    Constructed explicitly and handed to the app; ``connect`` runs on startup and
    ``dispose`` on shutdown.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ):
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def connect(self, create_tables: bool = True) -> None:
        """Create the engine (idempotent) and, optionally, missing tables"""
        if self.engine is None:
            if self.is_sqlite:
                # Sync routes run in a threadpool
                self.engine = create_engine(
                    self.url,
                    connect_args={"check_same_thread": False},
                    echo=self.echo,
                )
                event.listen(self.engine, "connect", _set_sqlite_pragma)
            else:
                self.engine = create_engine(
                    self.url,
                    pool_size=self.pool_size,
                    max_overflow=self.max_overflow,
                    pool_pre_ping=True,  # Verify connections before using
                    echo=self.echo,
                )
            self._session_factory = sessionmaker(
                autocommit=False, autoflush=False, bind=self.engine
            )
            logger.info("database_connected", dialect=self.engine.dialect.name)

        if create_tables:
            from app import models  # noqa: F401

            Base.metadata.create_all(bind=self.engine)
            logger.info("database_initialized")

    def dispose(self) -> None:
        """Release pooled connections"""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self._session_factory = None
            logger.info("database_disposed")

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """SQLite only honours ON DELETE CASCADE with foreign keys switched on"""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    Yields a database session and ensures it's closed after use
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    except Exception as e:
        logger.error("database_session_error", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()
