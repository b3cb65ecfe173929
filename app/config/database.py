from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from .settings import settings


def build_engine(
    database_url: str,
    echo: bool = False,
    busy_timeout: Optional[float] = None
) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections open every transaction with BEGIN IMMEDIATE so that
    concurrent sale commits serialize on the write lock instead of failing
    when a read lock is upgraded. Connections wait up to ``busy_timeout``
    seconds (the sale commit timeout by default) for a competing writer.
    """
    if database_url.startswith("sqlite"):
        if busy_timeout is None:
            busy_timeout = settings.sale_commit_timeout
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": busy_timeout},
            echo=echo
        )

        @event.listens_for(engine, "connect")
        def _configure_sqlite_connection(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    options = {}
    if settings.db_isolation_level:
        options["isolation_level"] = settings.db_isolation_level

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        echo=echo,
        **options
    )


# Create engine
engine = build_engine(settings.database_url, echo=settings.debug)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
