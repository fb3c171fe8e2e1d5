from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .schema import Base


def _fold_case(value):
    return value.lower() if isinstance(value, str) else value


def get_engine(sqlite_path: str) -> Engine:
    """Create an engine for the SQLite file and make sure the tables exist."""
    engine_url = f"sqlite:///{sqlite_path}"
    # Listing reads run on worker threads, each with its own session/connection.
    engine = create_engine(
        engine_url,
        future=True,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _register_functions(dbapi_connection, connection_record):
        # SQLite's built-in lower() folds ASCII only; match Python str.lower().
        dbapi_connection.create_function("lower", 1, _fold_case, deterministic=True)

    Base.metadata.create_all(engine)
    return engine


def get_session_factory(sqlite_path: str) -> sessionmaker:
    """Session factory bound to one engine; call it once per unit of work."""
    engine = get_engine(sqlite_path)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_session(sqlite_path: str) -> Session:
    """Get a SQLAlchemy session (caller must close it)."""
    return get_session_factory(sqlite_path)()


@contextmanager
def session_context(sqlite_path: str) -> Generator[Session, None, None]:
    """
    Context manager for SQLAlchemy sessions.

    Rolls back on error and always closes. Writers (the CSV importer) commit
    explicitly.

    Usage:
        with session_context(sqlite_path) as session:
            # use session
    """
    session = get_session(sqlite_path)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
