"""Project API routes.

Project reads carry the derived schedule delay and the statuses the project
may move to next. Status and progress writes are not restricted here.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from terangabuild.models import ProjectCreate, ProjectStatus, UserType
from terangabuild.progress import allowed_transitions, compute_schedule_delay
from terangabuild.services import ChecklistService, DatabaseService
from terangabuild.web.dependencies import get_checklist_service, get_service

router = APIRouter(prefix="/api/projects", tags=["projects"])


class ProjectUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    budget: Decimal | None = Field(default=None, ge=0)
    location: str | None = None
    professional_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@router.get("")
async def list_projects(
    user_id: str = Query(...),
    user_type: UserType = Query(...),
    db: DatabaseService = Depends(get_service),
):
    projects = await db.get_projects_for_user(user_id, user_type)
    now = db.now()
    tolerance = db.config.schedule.tolerance_pct
    return [
        {
            **project.model_dump(mode="json"),
            "delay": compute_schedule_delay(project, now=now, tolerance_pct=tolerance).model_dump(),
        }
        for project in projects
    ]


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    checklist: ChecklistService = Depends(get_checklist_service),
):
    summary = await checklist.project_summary(project_id)
    if summary is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return {
        **summary.model_dump(mode="json"),
        "allowed_transitions": [s.value for s in allowed_transitions(summary.project.status)],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(payload: ProjectCreate, db: DatabaseService = Depends(get_service)):
    project = await db.create_project(payload)
    if project is None:
        raise HTTPException(status_code=502, detail="Project could not be created")
    return project


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    db: DatabaseService = Depends(get_service),
):
    updates = payload.model_dump(exclude_unset=True)
    if not await db.update_project(project_id, updates):
        raise HTTPException(status_code=404, detail="Project not found or not updated")
    return {"success": True}


@router.delete("/{project_id}")
async def delete_project(project_id: str, db: DatabaseService = Depends(get_service)):
    if not await db.delete_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return {"success": True}
