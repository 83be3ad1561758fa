"""Expense workflow keeping ``Project.spent`` equal to the sum of expenses."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import structlog

from terangabuild.models import ProjectExpense, ProjectExpenseCreate
from terangabuild.services.database import DatabaseService

logger = structlog.get_logger(__name__)


class ExpenseService:
    def __init__(self, db: DatabaseService):
        self.db = db

    async def record_expense(
        self, payload: ProjectExpenseCreate | Mapping[str, Any]
    ) -> ProjectExpense | None:
        """Create an expense and add its amount to the project's spent total."""
        expense = await self.db.create_project_expense(payload)
        if expense is None:
            return None
        await self.adjust_spent(expense.project_id, expense.amount)
        return expense

    async def remove_expense(self, expense: ProjectExpense) -> bool:
        """Delete an expense and subtract its amount (spent never goes below 0)."""
        if not await self.db.delete_project_expense(expense.id, expense.project_id):
            return False
        await self.adjust_spent(expense.project_id, -expense.amount)
        return True

    async def adjust_spent(self, project_id: str, delta: Decimal) -> Decimal | None:
        """Apply ``delta`` to the project's spent total, floored at zero.

        Returns:
            New spent value, or None if the project is missing or the write failed
        """
        project = await self.db.get_project(project_id)
        if project is None:
            logger.warning("spent_adjust_missing_project", project_id=project_id)
            return None

        spent = max(Decimal(0), (project.spent or Decimal(0)) + delta)
        if not await self.db.update_project(project_id, {"spent": spent}):
            return None
        logger.info("project_spent_updated", project_id=project_id, delta=str(delta), spent=str(spent))
        return spent
