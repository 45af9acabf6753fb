from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from server.config import config

# SQLite busy timeout (seconds); doubles as the per-write timeout there
SQLITE_BUSY_TIMEOUT = 5


def build_engine(database_url: str, **kwargs):
    """
    Create an engine for the given URL.

    SQLite engines are shared between the API and the scheduler threads, so
    connections must not be pinned to the thread that opened them.
    """
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", SQLITE_BUSY_TIMEOUT)
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs.setdefault("poolclass", StaticPool)
        return create_engine(database_url, connect_args=connect_args, **kwargs)
    return create_engine(database_url, pool_pre_ping=True, **kwargs)


def build_session_factory(bind):
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


# =========================================================
# DATABASE SETUP
# =========================================================
engine = build_engine(config.DATABASE_URL)
SessionLocal = build_session_factory(engine)
Base = declarative_base()
