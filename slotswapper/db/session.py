from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from slotswapper.core.config import settings


def create_db_engine(database_url: str) -> Engine:
    """Build an engine with the per-backend connection setup."""
    url = make_url(database_url)
    backend = url.get_backend_name()

    connect_args = {}
    engine_kwargs = {}
    if backend.startswith("postgresql"):
        connect_args["options"] = "-c timezone=utc"
    elif backend == "sqlite":
        connect_args["check_same_thread"] = False
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool

    db_engine = create_engine(
        database_url, pool_pre_ping=True, connect_args=connect_args, **engine_kwargs
    )

    if backend == "sqlite":
        # SQLite has no row locks. Take the database write lock when a transaction
        # starts so read-validate-write sequences are serialised.
        @event.listens_for(db_engine, "connect")
        def _configure_sqlite_connection(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            dbapi_connection.execute("PRAGMA foreign_keys=ON")

        @event.listens_for(db_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return db_engine


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
