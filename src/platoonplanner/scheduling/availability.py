"""Per-day availability matrix.

For every requested date and every person on the roster, the matrix says
whether the person is on leave, on a task, or available. Leave wins over
a task on the same day.
"""

import logging

from platoonplanner.domain.dates import DateLike, parse_date
from platoonplanner.domain.errors import UnknownEntityError
from platoonplanner.domain.models import (
    AvailabilityStatus,
    LeaveAssignment,
    Person,
    Task,
    TaskAssignment,
)

logger = logging.getLogger(__name__)

AvailabilityMatrix = dict[DateLike, dict[str, AvailabilityStatus]]


def build_availability_matrix(
    roster: list[Person],
    tasks: list[Task],
    task_assignments: list[TaskAssignment],
    leave_assignments: list[LeaveAssignment],
    dates: list[DateLike],
) -> AvailabilityMatrix:
    """Build the date -> person -> status matrix.

    Args:
        roster: People to include. Every person gets an entry for every date.
        tasks: Tasks referenced by `task_assignments`.
        task_assignments: Who is on which task.
        leave_assignments: Who is on leave when.
        dates: Calendar dates to cover (dates or ISO strings).

    Returns:
        Mapping of each entry of `dates`, keyed exactly as passed in, to a
        mapping of person id to status.

    Raises:
        UnknownEntityError: If a task assignment references a task that is
            not in `tasks`.
    """
    task_map = {t.id: t for t in tasks}

    # Resolve task spans once; a dangling reference is an input error.
    task_spans_by_person: dict[str, list[Task]] = {}
    for assignment in task_assignments:
        task = task_map.get(assignment.task_id)
        if task is None:
            raise UnknownEntityError("task", assignment.task_id)
        task_spans_by_person.setdefault(assignment.person_id, []).append(task)

    leaves_by_person: dict[str, list[LeaveAssignment]] = {}
    for leave in leave_assignments:
        leaves_by_person.setdefault(leave.person_id, []).append(leave)

    matrix: AvailabilityMatrix = {}
    for raw_day in dates:
        day = parse_date(raw_day)
        day_map: dict[str, AvailabilityStatus] = {}

        for person in roster:
            if any(a.covers(day) for a in leaves_by_person.get(person.id, [])):
                day_map[person.id] = AvailabilityStatus.ON_LEAVE
            elif any(t.covers_date(day) for t in task_spans_by_person.get(person.id, [])):
                day_map[person.id] = AvailabilityStatus.ON_TASK
            else:
                day_map[person.id] = AvailabilityStatus.AVAILABLE

        matrix[raw_day] = day_map

    logger.debug("Built availability matrix for %d dates x %d people", len(matrix), len(roster))
    return matrix


def count_by_status(matrix: AvailabilityMatrix, day: DateLike) -> dict[AvailabilityStatus, int]:
    """Count people in each status on one day, keyed as the matrix was built."""
    counts = {status: 0 for status in AvailabilityStatus}
    for status in matrix.get(day, {}).values():
        counts[status] += 1
    return counts
