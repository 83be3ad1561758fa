"""Project expense API routes."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from terangabuild.models import ExpenseCategory, ProjectExpenseCreate
from terangabuild.services import DatabaseService, ExpenseService
from terangabuild.web.dependencies import get_expense_service, get_service

router = APIRouter(prefix="/api/projects/{project_id}/expenses", tags=["expenses"])


class ExpenseIn(BaseModel):
    description: str
    amount: Decimal = Field(gt=0)
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: dt.date
    created_by: str


@router.get("")
async def list_expenses(project_id: str, db: DatabaseService = Depends(get_service)):
    return await db.get_project_expenses(project_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_expense(
    project_id: str,
    payload: ExpenseIn,
    expenses: ExpenseService = Depends(get_expense_service),
):
    expense = await expenses.record_expense(
        ProjectExpenseCreate(project_id=project_id, **payload.model_dump())
    )
    if expense is None:
        raise HTTPException(status_code=502, detail="Expense could not be recorded")
    project = await expenses.db.get_project(project_id)
    return {"expense": expense, "spent": project.spent if project else None}


@router.delete("/{expense_id}")
async def delete_expense(
    project_id: str,
    expense_id: str,
    expenses: ExpenseService = Depends(get_expense_service),
):
    matches = [e for e in await expenses.db.get_project_expenses(project_id) if e.id == expense_id]
    if not matches:
        raise HTTPException(status_code=404, detail="Expense not found")
    if not await expenses.remove_expense(matches[0]):
        raise HTTPException(status_code=502, detail="Expense could not be deleted")
    project = await expenses.db.get_project(project_id)
    return {"success": True, "spent": project.spent if project else None}
