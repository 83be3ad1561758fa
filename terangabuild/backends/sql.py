"""Remote backend over async SQLAlchemy.

Every call runs in its own session. Driver and SQLAlchemy failures are
re-raised as BackendError so the facade has a single failure type to handle.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker

from terangabuild.backends.base import Backend, BackendError, EntityType
from terangabuild.config import AppConfig, get_config
from terangabuild.db.connection import backend_url, create_engine, make_session_factory
from terangabuild.db.models import MODELS, Base

logger = structlog.get_logger(__name__)


class SQLBackend(Backend):
    """Backend storing entities in a relational database."""

    name = "sql"

    def __init__(self, session_factory: sessionmaker, engine: AsyncEngine | None = None):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> SQLBackend:
        config = config or get_config()
        if config.backend is None:
            raise BackendError("No backend configured")
        engine = create_engine(backend_url(config.backend), config.db)
        return cls(make_session_factory(engine), engine=engine)

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except (SQLAlchemyError, OSError) as e:
            await session.rollback()
            raise BackendError(str(e)) from e
        finally:
            await session.close()

    async def select(
        self,
        entity: EntityType,
        filters: Mapping[str, Any] | None = None,
        *,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        model = MODELS[entity]
        stmt = select(model)
        for column, expected in (filters or {}).items():
            attr = _column(model, column)
            if isinstance(expected, (list, tuple, set, frozenset)):
                stmt = stmt.where(attr.in_(list(expected)))
            elif expected is None:
                stmt = stmt.where(attr.is_(None))
            else:
                stmt = stmt.where(attr == expected)

        order_attr = getattr(model, order_by, None)
        if order_attr is not None:
            ordering = order_attr.desc() if descending else order_attr.asc()
            stmt = stmt.order_by(ordering.nulls_last())
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session() as session:
            result = await session.execute(stmt)
            return [_to_dict(row) for row in result.scalars().all()]

    async def insert(self, entity: EntityType, values: Mapping[str, Any]) -> dict[str, Any]:
        model = MODELS[entity]
        async with self._session() as session:
            row = model(**_columns_only(model, values))
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return _to_dict(row)

    async def update(self, entity: EntityType, record_id: str, values: Mapping[str, Any]) -> bool:
        model = MODELS[entity]
        changes = _columns_only(model, values)
        changes.pop("id", None)
        async with self._session() as session:
            if not changes:
                return await session.get(model, record_id) is not None
            result = await session.execute(
                update(model).where(model.id == record_id).values(**changes)
            )
            return result.rowcount > 0

    async def delete(self, entity: EntityType, record_id: str) -> bool:
        model = MODELS[entity]
        async with self._session() as session:
            result = await session.execute(delete(model).where(model.id == record_id))
            return result.rowcount > 0

    async def search(
        self,
        entity: EntityType,
        text: str,
        fields: Sequence[str],
        limit: int,
    ) -> list[dict[str, Any]]:
        model = MODELS[entity]
        clauses = [_column(model, field).icontains(text, autoescape=True) for field in fields]
        stmt = select(model).where(or_(*clauses)).order_by(model.created_at.desc()).limit(limit)
        async with self._session() as session:
            result = await session.execute(stmt)
            return [_to_dict(row) for row in result.scalars().all()]

    async def create_tables(self) -> None:
        await self._run_ddl(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        await self._run_ddl(Base.metadata.drop_all)

    async def _run_ddl(self, operation) -> None:
        if self._engine is None:
            raise BackendError("SQLBackend was built without an engine")
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(operation)
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(str(e)) from e

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("sql_backend_closed")


def _column(model: type[Base], name: str) -> Any:
    if name not in model.__table__.columns:
        raise BackendError(f"Unknown column '{name}' on {model.__tablename__}")
    return getattr(model, name)


def _columns_only(model: type[Base], values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop embedded records and any key that is not a table column."""
    columns = model.__table__.columns
    return {key: value for key, value in values.items() if key in columns}


def _to_dict(row: Base) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        # SQLite drops the offset of timezone-aware columns; values are stored as UTC
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        record[column.key] = value
    return record
