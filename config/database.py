"""
Storefront - Database Configuration
====================================
Engine factory, SessionLocal, Base, and get_db dependency.
All models across all modules inherit from this Base.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from config.settings import DATABASE_URL, SQLITE_BUSY_TIMEOUT


def create_db_engine(url: str):
    """
    Build an engine for `url`.

    Server databases get a connection pool. SQLite (local dev, tests) gets
    foreign keys switched on and every transaction opened with
    BEGIN IMMEDIATE, so concurrent writers queue on the database lock
    instead of interleaving.
    """
    if not url.startswith("sqlite"):
        return create_engine(
            url,
            pool_size=20,
            max_overflow=40,
            pool_timeout=30,
            pool_recycle=1800,  # Refresh connections every 30 minutes
        )

    engine = create_engine(
        url,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
    )

    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        # pysqlite must not emit its own BEGIN; we do it in _sqlite_begin
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = create_db_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: yields a database session, auto-closes after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
