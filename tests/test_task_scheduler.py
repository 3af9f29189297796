"""Tests for the greedy task scheduler."""

from datetime import date

import pytest

from conftest import utc
from platoonplanner.domain.models import ANY_ROLE, PersonStatus, Role, RoleRequirement
from platoonplanner.scheduling.ids import SequentialIdGenerator
from platoonplanner.scheduling.task_scheduler import TaskScheduler, schedule_tasks


class TestTaskScheduler:
    """Tests for TaskScheduler."""

    @pytest.fixture
    def scheduler(self):
        return TaskScheduler(
            id_generator=SequentialIdGenerator("task"),
            clock=lambda: utc(2026, 3, 1),
            created_by="ops",
        )

    def test_lowest_fairness_driver_is_assigned(self, scheduler, make_person, make_task):
        roster = [make_person("busy", hours_worked=40), make_person("fresh", hours_worked=0)]
        task = make_task("t1", utc(2026, 3, 20, 8))
        schedule = scheduler.generate_schedule([task], roster, [])
        assert len(schedule.assignments) == 1
        assignment = schedule.assignments[0]
        assert assignment.person_id == "fresh"
        assert assignment.assigned_role == Role.DRIVER
        assert assignment.id == "task-1"
        assert assignment.created_by == "ops"
        assert assignment.created_at == utc(2026, 3, 1)

    def test_wildcard_assigns_actual_role(self, scheduler, make_person, make_task):
        roster = [make_person("m", role=Role.MEDIC), make_person("r", role=Role.RADIO_OPERATOR)]
        task = make_task("t1", utc(2026, 3, 20, 8), requirements=[RoleRequirement(ANY_ROLE, 2)])
        schedule = scheduler.generate_schedule([task], roster, [])
        roles = {a.person_id: a.assigned_role for a in schedule.assignments}
        assert roles == {"m": Role.MEDIC, "r": Role.RADIO_OPERATOR}

    def test_only_matching_roles_fill_specific_requirement(self, scheduler, make_person, make_task):
        roster = [make_person("m", role=Role.MEDIC), make_person("d", role=Role.DRIVER)]
        task = make_task("t1", utc(2026, 3, 20, 8), requirements=[RoleRequirement(Role.MEDIC, 2)])
        schedule = scheduler.generate_schedule([task], roster, [])
        assert [a.person_id for a in schedule.assignments] == ["m"]

    def test_earlier_tasks_are_staffed_first(self, scheduler, make_person, make_task):
        """The only driver takes the earlier task and is then resting for the later one."""
        late = make_task("late", utc(2026, 3, 20, 14), hours=2)
        early = make_task("early", utc(2026, 3, 20, 8), hours=4, rest=6)
        schedule = scheduler.generate_schedule([late, early], [make_person("a")], [])
        assert [a.task_id for a in schedule.assignments] == ["early"]

    def test_rested_person_takes_both_tasks(self, scheduler, make_person, make_task):
        early = make_task("early", utc(2026, 3, 20, 8), hours=4, rest=6)
        late = make_task("late", utc(2026, 3, 20, 18), hours=2)
        schedule = scheduler.generate_schedule([early, late], [make_person("a")], [])
        assert [a.task_id for a in schedule.assignments] == ["early", "late"]

    def test_existing_assignments_reduce_remaining_seats(
        self, scheduler, make_person, make_task, make_assignment
    ):
        roster = [make_person("a"), make_person("b"), make_person("c")]
        task = make_task("t1", utc(2026, 3, 20, 8), requirements=[RoleRequirement(Role.DRIVER, 2)])
        existing = [make_assignment("x1", "t1", "c", is_locked=True)]
        schedule = scheduler.generate_schedule([task], roster, existing)
        new = schedule.new_assignments(existing)
        assert len(new) == 1
        assert schedule.assignments[0] is existing[0]

    def test_wildcard_counts_any_existing_assignment(
        self, scheduler, make_person, make_task, make_assignment
    ):
        roster = [make_person("a"), make_person("b", role=Role.MEDIC)]
        task = make_task("t1", utc(2026, 3, 20, 8), requirements=[RoleRequirement(ANY_ROLE, 1)])
        existing = [make_assignment("x1", "t1", "b", role=Role.MEDIC)]
        schedule = scheduler.generate_schedule([task], roster, existing)
        assert schedule.new_assignments(existing) == []

    def test_inactive_people_are_not_assigned(self, scheduler, make_person, make_task):
        roster = [make_person("a", status=PersonStatus.DISCHARGED)]
        schedule = scheduler.generate_schedule([make_task("t1", utc(2026, 3, 20, 8))], roster, [])
        assert schedule.assignments == []

    def test_duty_hour_cap_is_not_enforced_in_the_loop(self, scheduler, make_person, make_task):
        first = make_task("first", utc(2026, 3, 20, 0), hours=6, rest=0)
        second = make_task("second", utc(2026, 3, 20, 6), hours=6, rest=0)
        schedule = scheduler.generate_schedule([first, second], [make_person("a")], [])
        assert len(schedule.assignments) == 2

    def test_schedule_dates_span_tasks(self, scheduler, make_person, make_task):
        tasks = [
            make_task("t1", utc(2026, 3, 22, 8)),
            make_task("t2", utc(2026, 3, 20, 22), hours=10),
            make_task("t3", utc(2026, 3, 24, 20), hours=8),
        ]
        schedule = scheduler.generate_schedule(tasks, [make_person("a")], [])
        assert schedule.start_date == date(2026, 3, 20)
        assert schedule.end_date == date(2026, 3, 25)
        assert schedule.conflicts == []

    def test_no_tasks(self, scheduler, make_person):
        schedule = scheduler.generate_schedule([], [make_person("a")], [])
        assert schedule.start_date is None
        assert schedule.end_date is None
        assert schedule.assignments == []

    def test_rerun_adds_nothing(self, make_person, make_task):
        roster = [make_person("a"), make_person("b")]
        tasks = [make_task("t1", utc(2026, 3, 20, 8), requirements=[RoleRequirement(Role.DRIVER, 2)])]
        first = schedule_tasks(tasks, roster, [])
        second = schedule_tasks(tasks, roster, first.assignments)
        assert second.assignments == first.assignments

    def test_stats(self, scheduler, make_person, make_task):
        roster = [make_person("a"), make_person("m", role=Role.MEDIC)]
        tasks = [
            make_task(
                "t1",
                utc(2026, 3, 20, 8),
                hours=4,
                requirements=[RoleRequirement(Role.DRIVER, 1), RoleRequirement(Role.MEDIC, 2)],
            )
        ]
        schedule, stats = scheduler.generate_schedule_with_stats(tasks, roster, [])
        assert stats["total_tasks"] == 1
        assert stats["total_seats"] == 3
        assert stats["new_assignments"] == 2
        assert stats["unfilled_seats"] == 1
        assert stats["people_assigned"] == 2
        assert stats["new_hours"] == 8
