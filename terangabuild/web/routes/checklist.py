"""Checklist API routes.

Every mutation goes through ChecklistService so the project's progress is
recomputed and saved before the response is returned.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from terangabuild.models import ChecklistItemCreate, Priority
from terangabuild.services import ChecklistService, DatabaseService
from terangabuild.web.dependencies import get_checklist_service, get_service

router = APIRouter(prefix="/api/projects/{project_id}/checklist", tags=["checklist"])


class ChecklistItemIn(BaseModel):
    title: str
    description: str | None = None
    order_index: int
    estimated_duration: int | None = Field(default=None, gt=0)
    dependencies: list[str] = Field(default_factory=list)
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM


class ToggleRequest(BaseModel):
    actor_id: str


@router.get("")
async def list_checklist(project_id: str, db: DatabaseService = Depends(get_service)):
    return await db.get_project_checklist(project_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_checklist_item(
    project_id: str,
    payload: ChecklistItemIn,
    checklist: ChecklistService = Depends(get_checklist_service),
):
    item = await checklist.create_item(
        ChecklistItemCreate(project_id=project_id, **payload.model_dump())
    )
    if item is None:
        raise HTTPException(status_code=502, detail="Checklist item could not be created")
    return item


@router.post("/{item_id}/toggle")
async def toggle_checklist_item(
    project_id: str,
    item_id: str,
    payload: ToggleRequest,
    checklist: ChecklistService = Depends(get_checklist_service),
):
    item = await checklist.db.get_checklist_item(item_id)
    if item is None or item.project_id != project_id:
        raise HTTPException(status_code=404, detail="Checklist item not found")

    updated = await checklist.toggle_item(item, payload.actor_id)
    if updated is None:
        raise HTTPException(status_code=502, detail="Checklist item could not be updated")
    project = await checklist.db.get_project(project_id)
    return {"item": updated, "progress": project.progress if project else None}


@router.delete("/{item_id}")
async def delete_checklist_item(
    project_id: str,
    item_id: str,
    checklist: ChecklistService = Depends(get_checklist_service),
):
    item = await checklist.db.get_checklist_item(item_id)
    if item is None or item.project_id != project_id:
        raise HTTPException(status_code=404, detail="Checklist item not found")

    if not await checklist.delete_item(item):
        raise HTTPException(status_code=502, detail="Checklist item could not be deleted")
    project = await checklist.db.get_project(project_id)
    return {"success": True, "progress": project.progress if project else None}


@router.post("/templates/{template_id}", status_code=status.HTTP_201_CREATED)
async def apply_checklist_template(
    project_id: str,
    template_id: str,
    checklist: ChecklistService = Depends(get_checklist_service),
):
    if await checklist.db.get_project(project_id) is None:
        raise HTTPException(status_code=404, detail="Project not found")
    try:
        created = await checklist.apply_template(project_id, template_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown template '{template_id}'") from None
    return {"created": created, "count": len(created)}
