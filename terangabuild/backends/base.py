"""Backend interface shared by the remote (SQL) and fixture repositories.

Backends speak plain dict records. They filter by column equality (or
membership when the filter value is a list/tuple/set), order by a column, and
enrich rows with embedded related records (e.g. a project's client profile).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EntityType(str, Enum):
    """Persisted entity families (values are the backend table names)."""

    PROFILES = "profiles"
    PROJECTS = "projects"
    MATERIALS = "materials"
    ORDERS = "orders"
    CHECKLIST_ITEMS = "project_checklist_items"
    PROJECT_EXPENSES = "project_expenses"
    PROJECT_USERS = "project_users"
    PROJECT_INVITATIONS = "project_invitations"
    PROJECT_ACTIVITIES = "project_activities"
    IOT_SENSORS = "iot_sensors"
    IOT_THRESHOLDS = "iot_thresholds"
    DRONES = "drones"


class BackendError(Exception):
    """Raised by backends when a read or write cannot be completed."""


@dataclass(frozen=True)
class Embed:
    field: str  # attribute set on the enriched record
    column: str  # foreign key column on the source record
    target: EntityType


EMBEDS: dict[EntityType, tuple[Embed, ...]] = {
    EntityType.PROJECTS: (
        Embed("client", "client_id", EntityType.PROFILES),
        Embed("professional", "professional_id", EntityType.PROFILES),
    ),
    EntityType.MATERIALS: (Embed("supplier", "supplier_id", EntityType.PROFILES),),
    EntityType.ORDERS: (
        Embed("client", "client_id", EntityType.PROFILES),
        Embed("supplier", "supplier_id", EntityType.PROFILES),
        Embed("project", "project_id", EntityType.PROJECTS),
        Embed("material", "material_id", EntityType.MATERIALS),
    ),
    EntityType.PROJECT_USERS: (Embed("user", "user_id", EntityType.PROFILES),),
    EntityType.PROJECT_INVITATIONS: (
        Embed("project", "project_id", EntityType.PROJECTS),
        Embed("inviter", "invited_by", EntityType.PROFILES),
    ),
}


def embedding_entities(entity: EntityType) -> set[EntityType]:
    """Entity families whose records embed ``entity`` records."""
    return {
        source
        for source, embeds in EMBEDS.items()
        if any(embed.target == entity for embed in embeds)
    }


class Backend(ABC):
    """CRUD contract implemented by every persistence strategy."""

    name: str = "backend"

    @abstractmethod
    async def select(
        self,
        entity: EntityType,
        filters: Mapping[str, Any] | None = None,
        *,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return flat records matching ``filters``."""

    @abstractmethod
    async def insert(self, entity: EntityType, values: Mapping[str, Any]) -> dict[str, Any]:
        """Persist a new record and return it with its assigned ``id``."""

    @abstractmethod
    async def update(self, entity: EntityType, record_id: str, values: Mapping[str, Any]) -> bool:
        """Apply ``values`` to one record. False when it does not exist."""

    @abstractmethod
    async def delete(self, entity: EntityType, record_id: str) -> bool:
        """Remove one record. False when it does not exist."""

    @abstractmethod
    async def search(
        self,
        entity: EntityType,
        text: str,
        fields: Sequence[str],
        limit: int,
    ) -> list[dict[str, Any]]:
        """Case-insensitive substring match of ``text`` across ``fields``."""

    async def get(self, entity: EntityType, record_id: str, *, embed: bool = True) -> dict[str, Any] | None:
        rows = await self.select(entity, {"id": record_id}, limit=1)
        if not rows:
            return None
        if embed:
            await self.embed(entity, rows)
        return rows[0]

    async def fetch(
        self,
        entity: EntityType,
        filters: Mapping[str, Any] | None = None,
        *,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """select() plus embedded related records."""
        rows = await self.select(
            entity, filters, order_by=order_by, descending=descending, limit=limit
        )
        await self.embed(entity, rows)
        return rows

    async def embed(self, entity: EntityType, rows: list[dict[str, Any]]) -> None:
        """Attach related records in place, one batched lookup per relation."""
        for spec in EMBEDS.get(entity, ()):
            ids = sorted({row[spec.column] for row in rows if row.get(spec.column)})
            related: dict[str, dict[str, Any]] = {}
            if ids:
                for record in await self.select(spec.target, {"id": ids}):
                    related[record["id"]] = record
            for row in rows:
                row[spec.field] = related.get(row.get(spec.column))

    async def close(self) -> None:
        """Release backend resources (no-op by default)."""
