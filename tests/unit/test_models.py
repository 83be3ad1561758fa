"""Unit tests for TerangaBuild pydantic models."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from terangabuild.models import (
    ROLE_PERMISSIONS,
    ChecklistItemCreate,
    InvitationRole,
    ProjectCreate,
    ProjectExpenseCreate,
    ScheduleDelay,
)


class TestProjectCreate:
    def test_defaults(self):
        project = ProjectCreate(name="Villa", client_id="c1")

        assert project.status == "planning"
        assert project.progress == 0
        assert project.budget is None

    @pytest.mark.parametrize("progress", [-1, 101])
    def test_progress_bounds(self, progress):
        with pytest.raises(ValidationError):
            ProjectCreate(name="Villa", client_id="c1", progress=progress)

    def test_negative_budget_rejected(self):
        with pytest.raises(ValidationError):
            ProjectCreate(name="Villa", client_id="c1", budget=Decimal("-1"))

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            ProjectCreate(name="Villa", client_id="c1", status="archived")


class TestChecklistItemCreate:
    def test_defaults(self):
        item = ChecklistItemCreate(project_id="p1", title="Fondations", order_index=1)

        assert item.priority == "medium"
        assert item.dependencies == []
        assert item.is_completed is False
        assert item.completed_at is None

    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError):
            ChecklistItemCreate(project_id="p1", title="Fondations", order_index=1, estimated_duration=0)


class TestProjectExpenseCreate:
    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProjectExpenseCreate(
                project_id="p1",
                description="Ciment",
                amount=Decimal("0"),
                date=date(2024, 5, 1),
                created_by="u1",
            )

    def test_category_stored_as_value(self):
        expense = ProjectExpenseCreate(
            project_id="p1",
            description="Ciment",
            amount=Decimal("225000"),
            category="materials",
            date=date(2024, 5, 1),
            created_by="u1",
        )
        assert expense.category == "materials"
        assert expense.date == date(2024, 5, 1)


def test_every_invitation_role_has_permissions():
    assert set(ROLE_PERMISSIONS) == set(InvitationRole)
    assert ROLE_PERMISSIONS[InvitationRole.OBSERVER] == ["view_project", "view_progress"]
    assert "invite_users" in ROLE_PERMISSIONS[InvitationRole.MANAGER]


def test_schedule_delay_is_immutable():
    delay = ScheduleDelay(is_delayed=True, delay_days=3, time_progress=40.0)
    with pytest.raises(ValidationError):
        delay.delay_days = 4


def test_schedule_delay_rejects_out_of_range_time_progress():
    with pytest.raises(ValidationError):
        ScheduleDelay(time_progress=100.5)


def test_persisted_timestamps_parse_iso_strings():
    from terangabuild.models import Profile

    profile = Profile(
        id="u1",
        email="client@demo.com",
        user_type="client",
        created_at="2024-01-01T00:00:00Z",
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    assert profile.created_at == profile.updated_at
