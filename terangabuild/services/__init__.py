from terangabuild.services.checklist import ChecklistService, ProjectSummary
from terangabuild.services.database import DatabaseService
from terangabuild.services.expenses import ExpenseService
from terangabuild.services.search import SearchDebouncer

__all__ = [
    "ChecklistService",
    "DatabaseService",
    "ExpenseService",
    "ProjectSummary",
    "SearchDebouncer",
]
