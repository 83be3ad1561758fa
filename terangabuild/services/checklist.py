"""Checklist workflow on top of the data-access facade.

The facade never recomputes derived fields. Every checklist mutation made
through ChecklistService re-reads the project's checklist and persists the
recomputed ``Project.progress``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel

from terangabuild.checklist_templates import get_template
from terangabuild.models import ChecklistItem, ChecklistItemCreate, Project, ScheduleDelay
from terangabuild.progress import compute_checklist_progress, compute_schedule_delay
from terangabuild.progress.dependencies import unmet_dependencies
from terangabuild.services.database import DatabaseService

logger = structlog.get_logger(__name__)


class ProjectSummary(BaseModel):
    """Dashboard view of one project."""

    project: Project
    checklist: list[ChecklistItem]
    progress: int
    completed_count: int
    delay: ScheduleDelay
    waiting_on: dict[str, list[str]]  # item id -> incomplete prerequisite ids


class ChecklistService:
    def __init__(self, db: DatabaseService):
        self.db = db

    async def refresh_progress(self, project_id: str) -> int | None:
        """Recompute progress from the stored checklist and persist it.

        Returns:
            The new progress, or None if it could not be saved
        """
        items = await self.db.get_project_checklist(project_id)
        progress = compute_checklist_progress(items)
        if not await self.db.update_project(project_id, {"progress": progress}):
            logger.warning("progress_update_failed", project_id=project_id, progress=progress)
            return None
        logger.info("project_progress_updated", project_id=project_id, progress=progress, items=len(items))
        return progress

    async def set_completed(self, item: ChecklistItem, completed: bool, actor_id: str) -> ChecklistItem | None:
        """Mark an item done or not done.

        Completing stamps ``completed_at``/``completed_by``; reopening clears
        both. Declared dependencies are not checked.
        """
        now = self.db.now()
        updates: dict[str, Any] = {
            "is_completed": completed,
            "completed_at": now if completed else None,
            "completed_by": actor_id if completed else None,
        }
        if not await self.db.update_checklist_item(item.id, updates):
            return None
        await self.refresh_progress(item.project_id)
        return item.model_copy(update={**updates, "updated_at": now})

    async def toggle_item(self, item: ChecklistItem, actor_id: str) -> ChecklistItem | None:
        return await self.set_completed(item, not item.is_completed, actor_id)

    async def create_item(self, payload: ChecklistItemCreate | Mapping[str, Any]) -> ChecklistItem | None:
        item = await self.db.create_checklist_item(payload)
        if item is not None:
            await self.refresh_progress(item.project_id)
        return item

    async def delete_item(self, item: ChecklistItem) -> bool:
        """Delete an item and recompute progress of the project that owned it."""
        if not await self.db.delete_checklist_item(item.id):
            return False
        await self.refresh_progress(item.project_id)
        return True

    async def apply_template(self, project_id: str, template_id: str) -> list[ChecklistItem]:
        """Append a built-in template's steps after the project's existing items.

        Raises:
            KeyError: If the template does not exist
        """
        template = get_template(template_id)
        existing = await self.db.get_project_checklist(project_id)
        next_index = max((item.order_index for item in existing), default=0) + 1

        created: list[ChecklistItem] = []
        for offset, step in enumerate(template["items"]):
            item = await self.db.create_checklist_item(
                ChecklistItemCreate(
                    project_id=project_id,
                    template_id=template_id,
                    order_index=next_index + offset,
                    **step,
                )
            )
            if item is None:
                logger.error("template_item_create_failed", project_id=project_id, template_id=template_id, title=step["title"])
                break
            created.append(item)

        await self.refresh_progress(project_id)
        logger.info("checklist_template_applied", project_id=project_id, template_id=template_id, created=len(created))
        return created

    async def project_summary(self, project_id: str, now: datetime | None = None) -> ProjectSummary | None:
        project = await self.db.get_project(project_id)
        if project is None:
            return None

        items = await self.db.get_project_checklist(project_id)
        waiting_on = {}
        for item in items:
            if item.is_completed:
                continue
            unmet = unmet_dependencies(item, items)
            if unmet:
                waiting_on[item.id] = unmet

        return ProjectSummary(
            project=project,
            checklist=items,
            progress=compute_checklist_progress(items),
            completed_count=sum(1 for item in items if item.is_completed),
            delay=compute_schedule_delay(
                project,
                now=now or self.db.now(),
                tolerance_pct=self.db.config.schedule.tolerance_pct,
            ),
            waiting_on=waiting_on,
        )
