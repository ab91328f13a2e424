# infra/db/base.py
from __future__ import annotations
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(db_url: str) -> Engine:
    engine = create_engine(
        db_url,
        echo=False,
        future=True,
    )
    if engine.dialect.name == "sqlite":
        # ON DELETE CASCADE / SET NULL only fire with this pragma
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(db_url: str) -> sessionmaker:
    """Session factory bound to ``db_url``. Callers own and pass the sessions it makes."""
    logger.info("Using database at: %s", db_url)
    engine = build_engine(db_url)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
