"""Shared builders for planner tests."""

from datetime import date, datetime, timedelta, timezone

import pytest

from platoonplanner.domain.models import (
    AppConfig,
    LeaveAssignment,
    LeaveRequest,
    LeaveType,
    Person,
    Role,
    RoleRequirement,
    Task,
    TaskAssignment,
)


@pytest.fixture
def config():
    """Default configuration."""
    return AppConfig()


@pytest.fixture
def make_person():
    """Build a person in service for all of 2026."""

    def _make(person_id="p1", role=Role.DRIVER, **kwargs):
        fields = {
            "name": person_id.upper(),
            "service_start": date(2026, 1, 1),
            "service_end": date(2026, 12, 31),
        }
        fields.update(kwargs)
        return Person(id=person_id, role=role, **fields)

    return _make


@pytest.fixture
def make_leave():
    """Build a leave assignment."""

    def _make(assignment_id, person_id, start, end, **kwargs):
        return LeaveAssignment(
            id=assignment_id,
            person_id=person_id,
            start_date=start,
            end_date=end,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_request():
    """Build a pending long-leave request."""

    def _make(request_id, person_id, start, end, priority=5, **kwargs):
        return LeaveRequest(
            id=request_id,
            person_id=person_id,
            start_date=start,
            end_date=end,
            priority=priority,
            leave_type=kwargs.pop("leave_type", LeaveType.LONG),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_task():
    """Build a task starting at `start` (UTC) and lasting `hours`."""

    def _make(task_id, start, hours=4, requirements=None, rest=6, task_type="Guard"):
        if requirements is None:
            requirements = (RoleRequirement(Role.DRIVER, 1),)
        return Task(
            id=task_id,
            task_type=task_type,
            start_time=start,
            end_time=start + timedelta(hours=hours),
            duration_hours=hours,
            role_requirements=tuple(requirements),
            min_rest_after=rest,
        )

    return _make


@pytest.fixture
def make_assignment():
    """Build a task assignment."""

    def _make(assignment_id, task_id, person_id, role=Role.DRIVER, **kwargs):
        return TaskAssignment(
            id=assignment_id,
            task_id=task_id,
            person_id=person_id,
            assigned_role=role,
            **kwargs,
        )

    return _make


def utc(year, month, day, hour=0, minute=0):
    """Aware UTC datetime."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
