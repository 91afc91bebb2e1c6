import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from placenet.core.config import get_settings
from placenet.db.schema import metadata

logger = logging.getLogger(__name__)


class Database:
    """
    Engine + session factory pair.

    One instance serves the whole app; tests build their own around an
    in-memory SQLite engine and swap it in with set_database().
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    @contextmanager
    def session(self):
        """
        Context manager for database sessions.
        Usage:
            with db.session() as s:
                s.execute(select(jobs))
        """
        session: Session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        metadata.create_all(self.engine)

    def execute_raw_sql(self, sql: str, params: dict = None) -> list:
        """
        Execute raw SQL and return results as list of dicts.
        This is useful for ad-hoc reporting queries.
        """
        with self.session() as db:
            result = db.execute(text(sql), params or {})
            columns = result.keys()
            return [dict(zip(columns, row)) for row in result.fetchall()]

    def test_connection(self) -> bool:
        """
        Test if the database is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            rows = self.execute_raw_sql("SELECT 1 AS test")
            return rows[0]["test"] == 1
        except Exception as e:
            logger.warning("Database connection failed: %s", e)
            return False


def create_database(url: str, echo: bool = False) -> Database:
    if url.startswith("sqlite"):
        return Database(create_engine(url, echo=echo))
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    engine = create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=echo
    )
    return Database(engine)


_database: Optional[Database] = None


def get_database() -> Database:
    """Get or create the process-wide Database (singleton pattern)."""
    global _database
    if _database is None:
        settings = get_settings()
        _database = create_database(settings.postgres_url, echo=settings.debug)
    return _database


def set_database(database: Optional[Database]) -> None:
    global _database
    _database = database


def test_postgres_connection() -> bool:
    return get_database().test_connection()
