"""Post-hoc conflict detection for task schedules.

Checks performed:
- REST_PERIOD_VIOLATION: consecutive tasks of one person too close together
- NO_ROLE_AVAILABLE: role requirements left under-filled
- DUTY_HOUR_LIMIT_EXCEEDED: duty hours of the driving role above the
  configured cap on one day, checked only when a config is given
"""

from collections import defaultdict
from datetime import date
from typing import Optional

from platoonplanner.domain.errors import UnknownEntityError
from platoonplanner.domain.models import (
    AppConfig,
    ConflictType,
    Person,
    ScheduleConflict,
    Task,
    TaskAssignment,
    TaskSchedule,
)
from platoonplanner.scheduling.task_eligibility import get_rest_period_end


class TaskConflictDetector:
    """Finds rest, staffing and duty-hour conflicts in a task schedule.

    Example:
        >>> detector = TaskConflictDetector()
        >>> conflicts = detector.detect(schedule, tasks, roster)
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config

    def detect(
        self,
        schedule: TaskSchedule,
        tasks: list[Task],
        roster: list[Person],
    ) -> list[ScheduleConflict]:
        """Run every task check.

        Raises:
            UnknownEntityError: If an assignment references a task not in
                `tasks`.
        """
        task_map = {t.id: t for t in tasks}
        names = {p.id: p.name or p.id for p in roster}
        by_person = self._tasks_by_person(schedule.assignments, task_map)

        conflicts = self._detect_rest_violations(by_person, names)
        conflicts.extend(self._detect_unfilled_roles(schedule, tasks))
        if self.config is not None:
            conflicts.extend(self._detect_driving_overrun(by_person, roster))
        return conflicts

    def _tasks_by_person(
        self,
        assignments: list[TaskAssignment],
        task_map: dict[str, Task],
    ) -> dict[str, list[Task]]:
        """Each person's tasks, sorted by start time."""
        by_person: dict[str, list[Task]] = defaultdict(list)
        for assignment in assignments:
            task = task_map.get(assignment.task_id)
            if task is None:
                raise UnknownEntityError("task", assignment.task_id)
            by_person[assignment.person_id].append(task)
        for person_tasks in by_person.values():
            person_tasks.sort(key=lambda t: t.start_time)
        return by_person

    def _detect_rest_violations(
        self,
        by_person: dict[str, list[Task]],
        names: dict[str, str],
    ) -> list[ScheduleConflict]:
        conflicts = []
        for person_id, person_tasks in by_person.items():
            for current, following in zip(person_tasks, person_tasks[1:]):
                rest_end = get_rest_period_end(current.end_time, current.min_rest_after)
                if following.start_time < rest_end:
                    conflicts.append(
                        ScheduleConflict(
                            conflict_type=ConflictType.REST_PERIOD_VIOLATION,
                            message=(
                                f"{names.get(person_id, person_id)} lacks rest between "
                                f"tasks {current.id} and {following.id}"
                            ),
                            affected_person_ids=(person_id,),
                            affected_task_ids=(current.id, following.id),
                            suggestions=("Increase time between assignments for this person",),
                        )
                    )
        return conflicts

    def _detect_unfilled_roles(
        self,
        schedule: TaskSchedule,
        tasks: list[Task],
    ) -> list[ScheduleConflict]:
        conflicts = []
        for task in tasks:
            on_task = schedule.assignments_for_task(task.id)
            for requirement in task.role_requirements:
                assigned = sum(1 for a in on_task if requirement.counts_assignment(a))
                if assigned < requirement.count:
                    conflicts.append(
                        ScheduleConflict(
                            conflict_type=ConflictType.NO_ROLE_AVAILABLE,
                            message=(
                                f"Task {task.id} needs {requirement.count} "
                                f"{requirement.label} but has {assigned}"
                            ),
                            affected_task_ids=(task.id,),
                            suggestions=(
                                "Add people with the required role",
                                "Adjust role requirements",
                            ),
                        )
                    )
        return conflicts

    def _detect_driving_overrun(
        self,
        by_person: dict[str, list[Task]],
        roster: list[Person],
    ) -> list[ScheduleConflict]:
        """Duty hours per driver per start date above the configured cap."""
        conflicts = []
        cap = self.config.max_driving_hours
        for person in roster:
            if person.role != self.config.driving_role:
                continue
            per_day: dict[date, list[Task]] = defaultdict(list)
            for task in by_person.get(person.id, []):
                per_day[task.start_date].append(task)
            for day, day_tasks in sorted(per_day.items()):
                hours = sum(t.duration_hours for t in day_tasks)
                if hours > cap:
                    conflicts.append(
                        ScheduleConflict(
                            conflict_type=ConflictType.DUTY_HOUR_LIMIT_EXCEEDED,
                            message=(
                                f"{person.name or person.id} has {hours:g} duty hours on {day}, "
                                f"above the {cap:g}h limit for {self.config.driving_role.value}"
                            ),
                            affected_person_ids=(person.id,),
                            affected_task_ids=tuple(t.id for t in day_tasks),
                            suggestions=("Move one of these tasks to another person",),
                        )
                    )
        return conflicts


def detect_task_conflicts(
    schedule: TaskSchedule,
    tasks: list[Task],
    roster: list[Person],
    config: Optional[AppConfig] = None,
) -> list[ScheduleConflict]:
    """Functional entry point for :class:`TaskConflictDetector`."""
    return TaskConflictDetector(config).detect(schedule, tasks, roster)
