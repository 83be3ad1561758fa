"""Unit tests for expense recording and the project spent total."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from terangabuild.models import ProjectCreate, ProjectExpenseCreate
from terangabuild.services import ExpenseService


@pytest.fixture
def expenses(service) -> ExpenseService:
    return ExpenseService(service)


def _expense(project_id: str, amount: str) -> ProjectExpenseCreate:
    return ProjectExpenseCreate(
        project_id=project_id,
        description="Location bétonnière",
        amount=Decimal(amount),
        category="equipment",
        date=date(2024, 6, 14),
        created_by="demo-pro-1",
    )


class TestSpentTotal:
    @pytest.mark.asyncio
    async def test_record_then_remove_restores_total(self, service, expenses):
        project = await service.create_project(
            ProjectCreate(name="Boutique Mbour", client_id="demo-client-1", spent=Decimal("500000"))
        )

        expense = await expenses.record_expense(_expense(project.id, "100000"))
        assert (await service.get_project(project.id)).spent == Decimal("600000")

        assert await expenses.remove_expense(expense) is True
        assert (await service.get_project(project.id)).spent == Decimal("500000")

    @pytest.mark.asyncio
    async def test_demo_project_total(self, service, expenses):
        await expenses.record_expense(_expense("demo-project-1", "100000"))

        project = await service.get_project("demo-project-1")
        recorded = await service.get_project_expenses("demo-project-1")
        assert project.spent == Decimal("29350000")
        assert sum(e.amount for e in recorded) == project.spent

    @pytest.mark.asyncio
    async def test_spent_never_negative(self, service, expenses):
        project = await service.create_project(
            ProjectCreate(name="Boutique Mbour", client_id="demo-client-1", spent=Decimal("50000"))
        )

        assert await expenses.adjust_spent(project.id, Decimal("-80000")) == Decimal("0")
        assert (await service.get_project(project.id)).spent == Decimal("0")

    @pytest.mark.asyncio
    async def test_removing_expense_larger_than_spent_floors_at_zero(self, service, expenses):
        project = await service.create_project(
            ProjectCreate(name="Boutique Mbour", client_id="demo-client-1", spent=Decimal("0"))
        )
        expense = await expenses.record_expense(_expense(project.id, "100000"))
        await service.update_project(project.id, {"spent": Decimal("20000")})

        assert await expenses.remove_expense(expense) is True
        assert (await service.get_project(project.id)).spent == Decimal("0")

    @pytest.mark.asyncio
    async def test_missing_spent_counts_as_zero(self, service, expenses):
        project = await service.create_project(ProjectCreate(name="Atelier", client_id="demo-client-1"))

        assert await expenses.adjust_spent(project.id, Decimal("75000")) == Decimal("75000")

    @pytest.mark.asyncio
    async def test_adjust_missing_project(self, expenses):
        assert await expenses.adjust_spent("missing", Decimal("1000")) is None


class TestRemoveExpense:
    @pytest.mark.asyncio
    async def test_removing_unknown_expense_leaves_total(self, service, expenses):
        recorded = await service.get_project_expenses("demo-project-1")
        gone = recorded[0].model_copy(update={"id": "missing"})

        assert await expenses.remove_expense(gone) is False
        assert (await service.get_project("demo-project-1")).spent == Decimal("29250000")

    @pytest.mark.asyncio
    async def test_remove_demo_expense(self, service, expenses):
        recorded = {e.id: e for e in await service.get_project_expenses("demo-project-2")}

        assert await expenses.remove_expense(recorded["demo-expense-4"]) is True
        assert (await service.get_project("demo-project-2")).spent == Decimal("0")
        assert await service.get_project_expenses("demo-project-2") == []
