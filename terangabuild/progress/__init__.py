"""Derived project signals: checklist progress, schedule delay, status rules."""

from terangabuild.progress.engine import compute_checklist_progress, compute_schedule_delay
from terangabuild.progress.status import (
    InvalidStatusTransition,
    ProjectStatusMachine,
    allowed_transitions,
    can_transition,
)

__all__ = [
    "compute_checklist_progress",
    "compute_schedule_delay",
    "InvalidStatusTransition",
    "ProjectStatusMachine",
    "allowed_transitions",
    "can_transition",
]
