from __future__ import annotations

from typing import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from src.learnchess.infrastructure.config import AppConfig, load_config

Base = declarative_base()


def create_engine_from_config(config: AppConfig | None = None) -> Engine:
    """Create a SQLAlchemy engine using the provided configuration."""
    cfg = config or load_config()
    engine_kwargs: dict = {"pool_pre_ping": True, "future": True}

    if cfg.database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory databases only live as long as their single connection.
        if ":memory:" in cfg.database_url:
            engine_kwargs["poolclass"] = StaticPool

    return create_engine(cfg.database_url, **engine_kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Produce a session factory tied to the application engine."""
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_schema(engine: Engine) -> None:
    # Register mapped tables before creating them.
    from src.learnchess.infrastructure.persistence import game_session_repository  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Provide a transactional session scope."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "Base",
    "create_engine_from_config",
    "create_session_factory",
    "init_schema",
    "session_scope",
]
