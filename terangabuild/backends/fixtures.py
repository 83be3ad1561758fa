"""In-memory repository used when no remote backend is configured.

A FixtureBackend owns its own copy of the demo dataset, so every instance
starts from the same state and writes never leak between instances.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from uuid import uuid4

from terangabuild.backends.base import Backend, BackendError, EntityType
from terangabuild.backends.demo_data import build_dataset

_ID_PREFIXES: dict[EntityType, str] = {
    EntityType.PROFILES: "profile",
    EntityType.PROJECTS: "project",
    EntityType.MATERIALS: "material",
    EntityType.ORDERS: "order",
    EntityType.CHECKLIST_ITEMS: "checklist",
    EntityType.PROJECT_EXPENSES: "expense",
    EntityType.PROJECT_USERS: "project-user",
    EntityType.PROJECT_INVITATIONS: "invitation",
    EntityType.PROJECT_ACTIVITIES: "activity",
    EntityType.IOT_SENSORS: "sensor",
    EntityType.IOT_THRESHOLDS: "threshold",
    EntityType.DRONES: "drone",
}


class FixtureBackend(Backend):
    """Fully functional in-process substitute for the remote backend."""

    name = "fixtures"

    def __init__(self, dataset: Mapping[EntityType, Iterable[Mapping[str, Any]]] | None = None):
        source = build_dataset() if dataset is None else dataset
        self._tables: dict[EntityType, list[dict[str, Any]]] = {entity: [] for entity in EntityType}
        for entity, rows in source.items():
            self._tables[EntityType(entity)] = [copy.deepcopy(dict(row)) for row in rows]

    async def select(
        self,
        entity: EntityType,
        filters: Mapping[str, Any] | None = None,
        *,
        order_by: str = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        rows = [row for row in self._tables[entity] if _matches(row, filters or {})]
        rows = _ordered(rows, order_by, descending)
        if limit is not None:
            rows = rows[:limit]
        return [copy.deepcopy(row) for row in rows]

    async def insert(self, entity: EntityType, values: Mapping[str, Any]) -> dict[str, Any]:
        record = copy.deepcopy(dict(values))
        record_id = record.get("id") or f"demo-{_ID_PREFIXES[entity]}-{uuid4().hex[:12]}"
        if self._find(entity, record_id) is not None:
            raise BackendError(f"Duplicate {entity.value} id '{record_id}'")
        record["id"] = record_id
        self._tables[entity].append(record)
        return copy.deepcopy(record)

    async def update(self, entity: EntityType, record_id: str, values: Mapping[str, Any]) -> bool:
        record = self._find(entity, record_id)
        if record is None:
            return False
        record.update(copy.deepcopy(dict(values)))
        record["id"] = record_id
        return True

    async def delete(self, entity: EntityType, record_id: str) -> bool:
        table = self._tables[entity]
        for index, row in enumerate(table):
            if row.get("id") == record_id:
                del table[index]
                return True
        return False

    async def search(
        self,
        entity: EntityType,
        text: str,
        fields: Sequence[str],
        limit: int,
    ) -> list[dict[str, Any]]:
        needle = text.lower()
        matches = [
            row
            for row in _ordered(self._tables[entity], "created_at", True)
            if any(needle in str(row.get(field) or "").lower() for field in fields)
        ]
        return [copy.deepcopy(row) for row in matches[:limit]]

    def _find(self, entity: EntityType, record_id: str) -> dict[str, Any] | None:
        for row in self._tables[entity]:
            if row.get("id") == record_id:
                return row
        return None


def _matches(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    for column, expected in filters.items():
        value = row.get(column)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if value not in expected:
                return False
        elif value != expected:
            return False
    return True


def _ordered(rows: list[dict[str, Any]], order_by: str, descending: bool) -> list[dict[str, Any]]:
    """Sort on ``order_by``; records missing the column always come last."""
    present = [row for row in rows if row.get(order_by) is not None]
    missing = [row for row in rows if row.get(order_by) is None]
    present.sort(key=lambda row: row[order_by], reverse=descending)
    return present + missing
