"""Project status state machine.

planning -> in_progress -> completed, with on_hold reachable from planning or
in_progress and resuming to in_progress. The data-access facade does not
enforce these rules; they are offered to callers that want guarded moves and
to the UI to show which status buttons make sense.
"""

from __future__ import annotations

from terangabuild.models import ProjectStatus

TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.PLANNING: frozenset({ProjectStatus.IN_PROGRESS, ProjectStatus.ON_HOLD}),
    ProjectStatus.IN_PROGRESS: frozenset({ProjectStatus.COMPLETED, ProjectStatus.ON_HOLD}),
    ProjectStatus.ON_HOLD: frozenset({ProjectStatus.IN_PROGRESS}),
    ProjectStatus.COMPLETED: frozenset(),
}


class InvalidStatusTransition(ValueError):
    def __init__(self, current: ProjectStatus, target: ProjectStatus):
        super().__init__(f"Cannot move project from '{current.value}' to '{target.value}'")
        self.current = current
        self.target = target


def allowed_transitions(status: ProjectStatus | str) -> list[ProjectStatus]:
    """Statuses reachable from ``status`` in declaration order."""
    current = ProjectStatus(status)
    return [candidate for candidate in ProjectStatus if candidate in TRANSITIONS[current]]


def can_transition(current: ProjectStatus | str, target: ProjectStatus | str) -> bool:
    return ProjectStatus(target) in TRANSITIONS[ProjectStatus(current)]


class ProjectStatusMachine:
    """Guarded status holder for callers that opt into enforced transitions."""

    def __init__(self, status: ProjectStatus | str = ProjectStatus.PLANNING):
        self.status = ProjectStatus(status)

    def can(self, target: ProjectStatus | str) -> bool:
        return can_transition(self.status, target)

    def transition(self, target: ProjectStatus | str) -> ProjectStatus:
        target = ProjectStatus(target)
        if not self.can(target):
            raise InvalidStatusTransition(self.status, target)
        self.status = target
        return self.status
