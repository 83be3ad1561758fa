"""Unit tests for checklist workflows and progress upkeep."""

from __future__ import annotations

import pytest

from terangabuild.services import ChecklistService


@pytest.fixture
def checklist(service) -> ChecklistService:
    return ChecklistService(service)


async def _item(service, item_id):
    return await service.get_checklist_item(item_id)


async def _progress(service, project_id="demo-project-1"):
    return (await service.get_project(project_id)).progress


class TestProgressUpkeep:
    @pytest.mark.asyncio
    async def test_toggle_then_delete(self, service, checklist):
        await checklist.toggle_item(await _item(service, "demo-checklist-8"), "demo-pro-1")
        assert await _progress(service) == 67

        await checklist.delete_item(await _item(service, "demo-checklist-12"))
        assert await _progress(service) == 73

    @pytest.mark.asyncio
    async def test_delete_then_toggle(self, service, checklist):
        await checklist.delete_item(await _item(service, "demo-checklist-12"))
        assert await _progress(service) == 64

        await checklist.toggle_item(await _item(service, "demo-checklist-8"), "demo-pro-1")
        assert await _progress(service) == 73

    @pytest.mark.asyncio
    async def test_refresh_returns_persisted_value(self, service, checklist):
        await service.update_project("demo-project-1", {"progress": 10})

        assert await checklist.refresh_progress("demo-project-1") == 58
        assert await _progress(service) == 58

    @pytest.mark.asyncio
    async def test_refresh_for_missing_project(self, checklist):
        assert await checklist.refresh_progress("missing") is None

    @pytest.mark.asyncio
    async def test_create_item_updates_progress(self, service, checklist):
        item = await checklist.create_item(
            {"project_id": "demo-project-1", "title": "Clôture", "order_index": 13}
        )

        assert item.is_completed is False
        assert await _progress(service) == 54

    @pytest.mark.asyncio
    async def test_delete_already_removed_item(self, service, checklist):
        item = await _item(service, "demo-checklist-12")
        assert await checklist.delete_item(item) is True

        assert await checklist.delete_item(item) is False
        assert await _progress(service) == 64

    @pytest.mark.asyncio
    async def test_delete_recomputes_owning_project(self, service, checklist):
        await service.update_project("demo-project-2", {"progress": 40})

        await checklist.delete_item(await _item(service, "demo-checklist-12"))

        assert await _progress(service, "demo-project-1") == 64
        assert await _progress(service, "demo-project-2") == 40


class TestCompletion:
    @pytest.mark.asyncio
    async def test_completing_stamps_actor_and_time(self, service, checklist, fixed_now):
        item = await _item(service, "demo-checklist-8")

        updated = await checklist.toggle_item(item, "demo-pro-2")

        assert updated.is_completed is True
        assert updated.completed_at == fixed_now
        assert updated.completed_by == "demo-pro-2"
        stored = await _item(service, "demo-checklist-8")
        assert stored.completed_by == "demo-pro-2"

    @pytest.mark.asyncio
    async def test_reopening_clears_completion(self, service, checklist):
        updated = await checklist.toggle_item(await _item(service, "demo-checklist-1"), "demo-pro-1")

        assert updated.is_completed is False
        assert updated.completed_at is None
        assert updated.completed_by is None
        assert await _progress(service) == 50

    @pytest.mark.asyncio
    async def test_dependencies_do_not_block_completion(self, service, checklist):
        updated = await checklist.set_completed(await _item(service, "demo-checklist-12"), True, "demo-pro-1")

        assert updated.is_completed is True
        assert await _progress(service) == 67


class TestTemplates:
    @pytest.mark.asyncio
    async def test_apply_to_empty_checklist(self, service, checklist):
        created = await checklist.apply_template("demo-project-2", "renovation")

        assert [item.order_index for item in created] == [1, 2, 3, 4, 5, 6]
        assert all(item.template_id == "renovation" for item in created)
        assert len(await service.get_project_checklist("demo-project-2")) == 6
        assert await _progress(service, "demo-project-2") == 0

    @pytest.mark.asyncio
    async def test_apply_appends_after_existing_items(self, service, checklist):
        created = await checklist.apply_template("demo-project-1", "renovation")

        assert created[0].order_index == 13
        assert created[-1].order_index == 18
        assert await _progress(service) == 39

    @pytest.mark.asyncio
    async def test_unknown_template(self, checklist):
        with pytest.raises(KeyError):
            await checklist.apply_template("demo-project-1", "pagode")


class TestProjectSummary:
    @pytest.mark.asyncio
    async def test_summary_of_running_project(self, checklist, fixed_now):
        summary = await checklist.project_summary("demo-project-1", now=fixed_now)

        assert summary.progress == 58
        assert summary.completed_count == 7
        assert len(summary.checklist) == 12
        assert summary.delay.is_delayed is True
        assert summary.delay.delay_days == 29
        assert summary.waiting_on == {
            "demo-checklist-9": ["demo-checklist-8"],
            "demo-checklist-10": ["demo-checklist-9"],
            "demo-checklist-11": ["demo-checklist-10"],
            "demo-checklist-12": ["demo-checklist-11"],
        }

    @pytest.mark.asyncio
    async def test_summary_defaults_to_service_clock(self, checklist, fixed_now):
        explicit = await checklist.project_summary("demo-project-1", now=fixed_now)
        implicit = await checklist.project_summary("demo-project-1")

        assert implicit.delay == explicit.delay

    @pytest.mark.asyncio
    async def test_summary_of_missing_project(self, checklist):
        assert await checklist.project_summary("missing") is None
