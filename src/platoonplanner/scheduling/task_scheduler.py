"""Greedy task scheduler.

Tasks are staffed in start-time order so that rest periods owed for
earlier tasks are already in the result when later tasks are filled. For
each role requirement, the scheduler tops up the headcount from the
eligible people with the lowest fairness scores.

The driving-role duty-hour cap is not applied here; callers
check it with ``check_driving_hours_limit`` or the task conflict detector.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from platoonplanner.domain.dates import utc_now
from platoonplanner.domain.models import (
    Person,
    RoleRequirement,
    Task,
    TaskAssignment,
    TaskSchedule,
)
from platoonplanner.domain.policies import FairnessPolicy
from platoonplanner.scheduling.fairness import combined_fairness_score
from platoonplanner.scheduling.ids import IdGenerator, uuid_id_generator
from platoonplanner.scheduling.task_eligibility import is_task_available

logger = logging.getLogger(__name__)


class TaskScheduler:
    """Greedy allocator for task role requirements.

    Example:
        >>> scheduler = TaskScheduler()
        >>> schedule = scheduler.generate_schedule(tasks, roster, existing)
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        created_by: str = "scheduler",
        fairness_policy: Optional[FairnessPolicy] = None,
    ):
        self.id_generator = id_generator or uuid_id_generator
        self.clock = clock or utc_now
        self.created_by = created_by
        self.fairness_policy = fairness_policy

    def generate_schedule(
        self,
        tasks: list[Task],
        roster: list[Person],
        existing_assignments: list[TaskAssignment],
    ) -> TaskSchedule:
        """Staff every task's role requirements as far as possible.

        Args:
            tasks: Tasks to staff. Also the lookup for tasks referenced by
                existing assignments.
            roster: Everyone in the unit.
            existing_assignments: Assignments already in place, locked or not.

        Returns:
            TaskSchedule spanning the tasks' dates, holding the existing
            assignments followed by the new ones. Conflicts are left empty.

        Raises:
            UnknownEntityError: If an existing assignment of a candidate
                references a task not in `tasks`.
        """
        result = list(existing_assignments)
        task_map = {t.id: t for t in tasks}
        ordered_tasks = sorted(tasks, key=lambda t: t.start_time)

        for task in ordered_tasks:
            for requirement in task.role_requirements:
                filled = self._fill_requirement(task, requirement, tasks, roster, result, task_map)
                result.extend(filled)

        start_date = min((t.start_date for t in tasks), default=None)
        end_date = max((t.end_date for t in tasks), default=None)

        logger.info(
            "Task schedule for %d tasks: %d new assignments",
            len(tasks),
            len(result) - len(existing_assignments),
        )
        return TaskSchedule(start_date=start_date, end_date=end_date, assignments=result)

    def _fill_requirement(
        self,
        task: Task,
        requirement: RoleRequirement,
        tasks: list[Task],
        roster: list[Person],
        result: list[TaskAssignment],
        task_map: dict[str, Task],
    ) -> list[TaskAssignment]:
        """Pick people for the open seats of one requirement."""
        already_assigned = sum(
            1 for a in result if a.task_id == task.id and requirement.counts_assignment(a)
        )
        remaining = requirement.count - already_assigned
        if remaining <= 0:
            return []

        eligible = [
            p
            for p in roster
            if requirement.accepts(p.role) and is_task_available(p, task, tasks, result, task_map)
        ]
        ranked = sorted(eligible, key=lambda p: combined_fairness_score(p, self.fairness_policy))
        chosen = ranked[:remaining]

        if len(chosen) < remaining:
            logger.debug(
                "Task %s: only %d of %d %s seats could be filled",
                task.id,
                len(chosen),
                remaining,
                requirement.label,
            )

        return [
            TaskAssignment(
                id=self.id_generator(),
                task_id=task.id,
                person_id=person.id,
                assigned_role=person.role if requirement.is_wildcard else requirement.role,
                is_locked=False,
                created_at=self.clock(),
                created_by=self.created_by,
            )
            for person in chosen
        ]

    def generate_schedule_with_stats(
        self,
        tasks: list[Task],
        roster: list[Person],
        existing_assignments: list[TaskAssignment],
    ) -> tuple[TaskSchedule, dict]:
        """Generate a schedule and return statistics.

        Returns:
            Tuple of (schedule, stats_dict).
        """
        schedule = self.generate_schedule(tasks, roster, existing_assignments)
        stats = self._calculate_stats(schedule, tasks, existing_assignments)
        return schedule, stats

    def _calculate_stats(
        self,
        schedule: TaskSchedule,
        tasks: list[Task],
        existing_assignments: list[TaskAssignment],
    ) -> dict:
        """Calculate schedule statistics."""
        new_assignments = schedule.new_assignments(existing_assignments)
        total_seats = sum(t.total_required for t in tasks)

        unfilled_seats = 0
        for task in tasks:
            on_task = schedule.assignments_for_task(task.id)
            for requirement in task.role_requirements:
                count = sum(1 for a in on_task if requirement.counts_assignment(a))
                unfilled_seats += max(0, requirement.count - count)

        people_assigned = {a.person_id for a in schedule.assignments}

        return {
            "total_tasks": len(tasks),
            "total_seats": total_seats,
            "existing_assignments": len(existing_assignments),
            "new_assignments": len(new_assignments),
            "unfilled_seats": unfilled_seats,
            "people_assigned": len(people_assigned),
            "new_hours": sum(
                t.duration_hours
                for a in new_assignments
                for t in tasks
                if t.id == a.task_id
            ),
        }


def schedule_tasks(
    tasks: list[Task],
    roster: list[Person],
    existing_assignments: list[TaskAssignment],
    id_generator: Optional[IdGenerator] = None,
    clock: Optional[Callable[[], datetime]] = None,
    created_by: str = "scheduler",
) -> TaskSchedule:
    """Functional entry point for :class:`TaskScheduler`."""
    scheduler = TaskScheduler(id_generator=id_generator, clock=clock, created_by=created_by)
    return scheduler.generate_schedule(tasks, roster, existing_assignments)
