"""Database connection management for TerangaBuild.

Builds the async SQLAlchemy engine and session factory used by the SQL
backend. Only used in live mode; fixture mode never opens an engine.
"""

from __future__ import annotations

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from terangabuild.config import BackendConfig, DBConfig


def backend_url(backend: BackendConfig) -> URL:
    """SQLAlchemy URL for the configured backend.

    The credential is injected as the password unless the URL already
    carries one (SQLite URLs have no credentials).
    """
    url = make_url(backend.url)
    if url.get_backend_name() != "sqlite" and url.password is None:
        url = url.set(password=backend.key)
    return url


def create_engine(url: str | URL, db_config: DBConfig | None = None) -> AsyncEngine:
    """Create an async engine with pool settings suited to the dialect."""
    url = make_url(url)
    db_config = db_config or DBConfig()

    engine_kwargs: dict = {"echo": db_config.echo}

    # SQLite doesn't support connection pooling parameters
    if url.get_backend_name() != "sqlite":
        engine_kwargs.update({
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.pool_max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_pre_ping": True,  # Verify connections before using
            "pool_recycle": 3600,  # Recycle connections after 1 hour
        })

    return create_async_engine(url, **engine_kwargs)


def make_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
    )
