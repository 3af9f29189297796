"""Eligibility of a single person for a single task.

A person can take a task when they are active, hold a role the task asks
for, and have finished the rest owed for every task they already hold.
The same-day duty-hour cap for the driving role is a separate check that
the task scheduler does not apply.
"""

import logging
from datetime import datetime
from typing import Optional

from platoonplanner.domain.dates import InstantLike, add_hours, parse_instant
from platoonplanner.domain.errors import UnknownEntityError
from platoonplanner.domain.models import AppConfig, Person, Task, TaskAssignment

logger = logging.getLogger(__name__)


def get_rest_period_end(task_end_time: InstantLike, rest_hours: float) -> datetime:
    """Instant after which a person who finished a task may work again."""
    return add_hours(parse_instant(task_end_time), rest_hours)


def has_required_role(person: Person, task: Task) -> bool:
    """Check if any of the task's requirements accepts the person's role."""
    return any(req.accepts(person.role) for req in task.role_requirements)


def _task_lookup(all_tasks: list[Task]) -> dict[str, Task]:
    return {t.id: t for t in all_tasks}


def _resolve(task_map: dict[str, Task], task_id: str) -> Task:
    task = task_map.get(task_id)
    if task is None:
        raise UnknownEntityError("task", task_id)
    return task


def find_rest_violation(
    person: Person,
    task: Task,
    all_tasks: list[Task],
    existing_assignments: list[TaskAssignment],
    task_map: Optional[dict[str, Task]] = None,
) -> Optional[Task]:
    """First prior task whose rest period the candidate task would cut into.

    Returns:
        The offending prior task, or None if the person is rested.

    Raises:
        UnknownEntityError: If one of the person's assignments references a
            task that is not in `all_tasks`.
    """
    task_map = task_map if task_map is not None else _task_lookup(all_tasks)
    for assignment in existing_assignments:
        if assignment.person_id != person.id:
            continue
        prior = _resolve(task_map, assignment.task_id)
        rest_end = get_rest_period_end(prior.end_time, prior.min_rest_after)
        if task.start_time < rest_end:
            return prior
    return None


def is_task_available(
    person: Person,
    task: Task,
    all_tasks: list[Task],
    existing_assignments: list[TaskAssignment],
    task_map: Optional[dict[str, Task]] = None,
) -> bool:
    """Check whether `person` can be assigned to `task`.

    Args:
        person: Candidate.
        task: Task to fill.
        all_tasks: Every task referenced by `existing_assignments`.
        existing_assignments: Assignments already made, for anyone.
        task_map: Optional prebuilt id -> task lookup of `all_tasks`.

    Raises:
        UnknownEntityError: If an assignment of this person references an
            unknown task.
    """
    if not person.is_active:
        return False
    if not has_required_role(person, task):
        return False

    prior = find_rest_violation(person, task, all_tasks, existing_assignments, task_map)
    if prior is not None:
        logger.debug(
            "%s still resting after task %s, cannot start %s", person.id, prior.id, task.id
        )
        return False
    return True


def same_day_duty_hours(
    person: Person,
    task: Task,
    all_tasks: list[Task],
    existing_assignments: list[TaskAssignment],
) -> float:
    """Hours of the person's other tasks starting on the task's start date."""
    task_map = _task_lookup(all_tasks)
    total = 0.0
    for assignment in existing_assignments:
        if assignment.person_id != person.id or assignment.task_id == task.id:
            continue
        prior = _resolve(task_map, assignment.task_id)
        if prior.start_date == task.start_date:
            total += prior.duration_hours
    return total


def check_driving_hours_limit(
    person: Person,
    task: Task,
    all_tasks: list[Task],
    existing_assignments: list[TaskAssignment],
    config: AppConfig,
) -> bool:
    """Check the same-day duty-hour cap for the driving role.

    Always True for other roles. For the driving role, the hours of the
    person's tasks starting on the same calendar day plus this task's
    hours must not exceed ``config.max_driving_hours``.
    """
    if person.role != config.driving_role:
        return True
    total = same_day_duty_hours(person, task, all_tasks, existing_assignments)
    return total + task.duration_hours <= config.max_driving_hours
