"""Shared dependencies for TerangaBuild web routes.

Route handlers receive the facade and the caller-side services through
FastAPI's Depends(). Tests replace ``get_service`` via
``app.dependency_overrides`` to run against a fresh fixture backend.
"""

from __future__ import annotations

from fastapi import Depends

from terangabuild.services import ChecklistService, DatabaseService, ExpenseService

# Global singleton for the facade
_service: DatabaseService | None = None


def get_service() -> DatabaseService:
    """Process-wide DatabaseService (mode chosen from config on first use)."""
    global _service
    if _service is None:
        _service = DatabaseService()
    return _service


async def close_service() -> None:
    global _service
    if _service is not None:
        await _service.close()
        _service = None


def get_checklist_service(db: DatabaseService = Depends(get_service)) -> ChecklistService:
    return ChecklistService(db)


def get_expense_service(db: DatabaseService = Depends(get_service)) -> ExpenseService:
    return ExpenseService(db)
