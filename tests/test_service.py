"""Tests for run orchestration over in-memory storage."""

from datetime import date

import pytest

from conftest import utc
from platoonplanner.domain.errors import UnknownEntityError
from platoonplanner.domain.models import AppConfig, ConflictType, Role, RoleRequirement
from platoonplanner.scheduling.ids import SequentialIdGenerator
from platoonplanner.service import (
    InMemoryHistory,
    InMemoryLeaveAssignments,
    InMemoryLeaveRequests,
    InMemoryRoster,
    InMemoryTaskAssignments,
    InMemoryTasks,
    ScheduleService,
    StaticConfig,
)


class TestScheduleService:
    """Tests for ScheduleService."""

    @pytest.fixture
    def stores(self, make_person, make_request, make_task):
        roster = [make_person(pid) for pid in ("a", "b", "c", "d")]
        requests = [
            make_request(f"r{pid}", pid, date(2026, 3, 10), date(2026, 3, 12))
            for pid in ("a", "b", "c")
        ]
        tasks = [
            make_task(
                "t1",
                utc(2026, 3, 20, 8),
                requirements=[RoleRequirement(Role.DRIVER, 2), RoleRequirement(Role.MEDIC, 1)],
            )
        ]
        return {
            "roster": InMemoryRoster(roster),
            "leave_requests": InMemoryLeaveRequests(requests),
            "leave_assignments": InMemoryLeaveAssignments(),
            "tasks": InMemoryTasks(tasks),
            "task_assignments": InMemoryTaskAssignments(),
            "config": StaticConfig(AppConfig(min_base_presence=50)),
            "history": InMemoryHistory(clock=lambda: utc(2026, 3, 1)),
        }

    @pytest.fixture
    def service(self, stores):
        return ScheduleService(id_generator=SequentialIdGenerator("run"), **stores)

    def test_leave_run_persists_new_assignments(self, service, stores):
        schedule = service.generate_leave_schedule("2026-03-01", "2026-03-31", "ops")
        assert len(schedule.assignments) == 2
        stored = stores["leave_assignments"].list()
        assert [a.id for a in stored] == [a.id for a in schedule.assignments]

    def test_leave_rerun_is_idempotent(self, service, stores):
        service.generate_leave_schedule("2026-03-01", "2026-03-31", "ops")
        service.generate_leave_schedule("2026-03-01", "2026-03-31", "ops")
        assert len(stores["leave_assignments"].list()) == 2

    def test_leave_run_records_history(self, service, stores):
        service.generate_leave_schedule("2026-03-01", "2026-03-31", "ops")
        entry = stores["history"].entries[0]
        assert entry.action == "GENERATE_LEAVE_SCHEDULE"
        assert entry.entity_id == "2026-03-01"
        assert entry.changed_by == "ops"
        assert entry.details == "Generated for 2026-03-01 to 2026-03-31"

    def test_leave_run_fills_conflicts(self, stores, make_leave):
        stores["leave_assignments"] = InMemoryLeaveAssignments(
            [make_leave("big", "d", date(2026, 3, 1), date(2026, 3, 31), is_locked=True)]
        )
        service = ScheduleService(**stores)
        schedule = service.generate_leave_schedule("2026-03-01", "2026-03-31", "ops")
        kinds = {c.conflict_type for c in schedule.conflicts}
        assert ConflictType.OVER_QUOTA in kinds

    def test_task_run_persists_and_reports_unfilled(self, service, stores):
        schedule = service.generate_task_schedule("ops")
        stored = stores["task_assignments"].list()
        assert len(stored) == 2
        assert all(a.created_by == "ops" for a in stored)
        assert [c.conflict_type for c in schedule.conflicts] == [ConflictType.NO_ROLE_AVAILABLE]

    def test_task_rerun_is_idempotent(self, service, stores):
        service.generate_task_schedule("ops")
        service.generate_task_schedule("ops")
        assert len(stores["task_assignments"].list()) == 2
        assert [e.action for e in stores["history"].entries] == [
            "GENERATE_TASK_SCHEDULE",
            "GENERATE_TASK_SCHEDULE",
        ]

    def test_history_is_optional(self, stores):
        stores.pop("history")
        service = ScheduleService(**stores)
        schedule = service.generate_task_schedule("ops")
        assert len(schedule.assignments) == 2


class TestInMemoryStores:
    """Tests for the in-memory assignment stores."""

    def test_set_locked(self, make_leave):
        store = InMemoryLeaveAssignments([make_leave("l1", "a", date(2026, 3, 1), date(2026, 3, 2))])
        updated = store.set_locked("l1", True)
        assert updated.is_locked is True
        assert store.list()[0].is_locked is True

    def test_set_locked_unknown_id(self):
        with pytest.raises(UnknownEntityError):
            InMemoryTaskAssignments().set_locked("nope", True)

    def test_list_by_person(self, make_assignment):
        store = InMemoryTaskAssignments(
            [make_assignment("x1", "t1", "a"), make_assignment("x2", "t1", "b")]
        )
        assert [a.id for a in store.list_by_person("b")] == ["x2"]

    def test_list_by_task(self, make_assignment):
        store = InMemoryTaskAssignments(
            [
                make_assignment("x1", "t1", "a"),
                make_assignment("x2", "t2", "a"),
                make_assignment("x3", "t1", "b"),
            ]
        )
        assert [a.id for a in store.list_by_task("t1")] == ["x1", "x3"]
        assert store.list_by_task("t9") == []

    def test_duplicate_id_is_rejected(self, make_assignment):
        store = InMemoryTaskAssignments([make_assignment("x1", "t1", "a")])
        with pytest.raises(ValueError):
            store.create(make_assignment("x1", "t2", "b"))
