"""Integration tests for the SQL backend on an in-memory SQLite database.

The same workflows are run against the fixture backend and the SQL backend
seeded with the same sample data; observable results must match.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from terangabuild.backends import BackendError, EntityType, FixtureBackend
from terangabuild.backends.demo_data import build_dataset
from terangabuild.backends.sql import SQLBackend
from terangabuild.core.cache import QueryCache
from terangabuild.db.connection import create_engine, make_session_factory
from terangabuild.models import ProjectExpenseCreate
from terangabuild.services import ChecklistService, DatabaseService, ExpenseService


@pytest_asyncio.fixture()
async def sql_backend() -> SQLBackend:
    """Create in-memory database with empty tables."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    backend = SQLBackend(make_session_factory(engine), engine=engine)
    await backend.create_tables()
    try:
        yield backend
    finally:
        await backend.close()


@pytest_asyncio.fixture()
async def seeded_backend(sql_backend: SQLBackend) -> SQLBackend:
    for entity, rows in build_dataset().items():
        for row in rows:
            await sql_backend.insert(entity, row)
    return sql_backend


def _service(backend, cache_clock, fixed_now) -> DatabaseService:
    return DatabaseService(
        backend,
        cache=QueryCache(ttl_seconds=30, clock=cache_clock),
        clock=lambda: fixed_now,
    )


class TestSQLBackend:
    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_round_trips_types(self, sql_backend):
        record = await sql_backend.insert(
            EntityType.PROJECT_EXPENSES,
            {
                "project_id": "p1",
                "description": "Ciment",
                "amount": Decimal("225000"),
                "category": "materials",
                "date": date(2024, 5, 15),
                "created_by": "u1",
            },
        )

        assert record["id"]
        assert record["amount"] == Decimal("225000")
        assert record["date"] == date(2024, 5, 15)
        assert record["created_at"].tzinfo is not None

    @pytest.mark.asyncio
    async def test_select_filters_and_orders(self, seeded_backend):
        projects = await seeded_backend.select(EntityType.PROJECTS, {"client_id": "demo-client-1"})
        items = await seeded_backend.select(
            EntityType.CHECKLIST_ITEMS,
            {"id": ["demo-checklist-3", "demo-checklist-1"]},
            order_by="order_index",
            descending=False,
        )

        assert [p["id"] for p in projects] == ["demo-project-2", "demo-project-1"]
        assert [i["id"] for i in items] == ["demo-checklist-1", "demo-checklist-3"]
        assert items[1]["dependencies"] == ["demo-checklist-2"]

    @pytest.mark.asyncio
    async def test_null_filter(self, seeded_backend):
        idle = await seeded_backend.select(EntityType.DRONES, {"project_id": None})
        assert {d["id"] for d in idle} == {"demo-drone-2", "demo-drone-3"}

    @pytest.mark.asyncio
    async def test_fetch_embeds_related_records(self, seeded_backend):
        orders = await seeded_backend.fetch(EntityType.ORDERS, {"id": "demo-order-2"})

        assert orders[0]["supplier"]["company_name"] == "Métallurgie Sénégal"
        assert orders[0]["material"]["name"] == "Fer à béton 12mm"
        assert orders[0]["project"]["name"] == "Villa Moderne Dakar"

    @pytest.mark.asyncio
    async def test_update_and_delete(self, seeded_backend):
        assert await seeded_backend.update(EntityType.DRONES, "demo-drone-2", {"status": "offline"}) is True
        assert await seeded_backend.update(EntityType.DRONES, "missing", {"status": "offline"}) is False
        assert await seeded_backend.update(EntityType.DRONES, "demo-drone-2", {"client": None}) is True

        assert await seeded_backend.delete(EntityType.DRONES, "demo-drone-2") is True
        assert await seeded_backend.delete(EntityType.DRONES, "demo-drone-2") is False

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, seeded_backend):
        fields = ("full_name", "email", "company_name")

        rows = await seeded_backend.search(EntityType.PROFILES, "NDIAYE", fields, 10)
        literal = await seeded_backend.search(EntityType.PROFILES, "100%", fields, 10)

        assert {r["id"] for r in rows} == {"demo-pro-2", "demo-supplier-2"}
        assert literal == []

    @pytest.mark.asyncio
    async def test_iot_threshold_keeps_missing_bounds(self, seeded_backend, cache_clock, fixed_now):
        service = _service(seeded_backend, cache_clock, fixed_now)

        threshold = await service.create_iot_threshold({"sensor_id": "demo-sensor-1", "max_value": 35.0})

        assert threshold.max_value == 35.0
        assert threshold.min_value is None
        assert await service.get_iot_thresholds_for_sensor("demo-sensor-1") == [threshold]

    @pytest.mark.asyncio
    async def test_unknown_column(self, sql_backend):
        with pytest.raises(BackendError):
            await sql_backend.select(EntityType.PROJECTS, {"colour": "blue"})

    @pytest.mark.asyncio
    async def test_duplicate_id(self, seeded_backend):
        with pytest.raises(BackendError):
            await seeded_backend.insert(EntityType.PROJECTS, {"id": "demo-project-1", "name": "x", "client_id": "c"})


class TestModeEquivalence:
    """Fixture and SQL backends give the same results for the same workflow."""

    async def _run_workflow(self, service: DatabaseService) -> dict:
        checklist = ChecklistService(service)
        expenses = ExpenseService(service)

        item = await service.get_checklist_item("demo-checklist-8")
        await checklist.toggle_item(item, "demo-pro-1")
        await checklist.delete_item(await service.get_checklist_item("demo-checklist-12"))
        await expenses.record_expense(
            ProjectExpenseCreate(
                project_id="demo-project-1",
                description="Location bétonnière",
                amount=Decimal("100000"),
                category="equipment",
                date=date(2024, 6, 14),
                created_by="demo-pro-1",
            )
        )

        project = await service.get_project("demo-project-1")
        summary = await checklist.project_summary("demo-project-1")
        return {
            "progress": project.progress,
            "spent": project.spent,
            "checklist": [(i.id, i.is_completed) for i in summary.checklist],
            "waiting_on": summary.waiting_on,
            "delay": summary.delay,
            "search": sorted(p.id for p in await service.search_users("ndiaye")),
            "projects": [p.id for p in await service.get_projects_for_user("demo-client-1", "client")],
        }

    @pytest.mark.asyncio
    async def test_same_results_in_both_modes(self, seeded_backend, cache_clock, fixed_now):
        fixtures = await self._run_workflow(_service(FixtureBackend(), cache_clock, fixed_now))
        live = await self._run_workflow(_service(seeded_backend, cache_clock, fixed_now))

        assert fixtures == live
        assert live["progress"] == 73
        assert live["spent"] == Decimal("29350000")

    @pytest.mark.asyncio
    async def test_live_mode_reported(self, seeded_backend, cache_clock, fixed_now):
        service = _service(seeded_backend, cache_clock, fixed_now)

        assert service.mode == "live"
        assert service.demo_mode is False
