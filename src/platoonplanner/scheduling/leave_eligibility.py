"""Eligibility of a single candidate leave window.

The checks run in a fixed order. An injured or discharged person fails
immediately and nothing else is checked. Otherwise the service-period and
overlap checks are cumulative: a window can be both outside service and
overlapping existing leave, and both are reported.
"""

from platoonplanner.domain.dates import DateLike, dates_overlap, parse_date
from platoonplanner.domain.errors import InvalidRecordError
from platoonplanner.domain.models import (
    ConflictType,
    LeaveAssignment,
    Person,
    PersonStatus,
    ScheduleConflict,
)

_UNAVAILABLE_STATUSES = (PersonStatus.DISCHARGED, PersonStatus.INJURED)


def get_leave_conflicts(
    person: Person,
    start_date: DateLike,
    end_date: DateLike,
    existing_assignments: list[LeaveAssignment],
) -> list[ScheduleConflict]:
    """List every reason `person` cannot take leave from start to end.

    Args:
        person: Candidate.
        start_date: First day of the window (inclusive).
        end_date: Last day of the window (inclusive).
        existing_assignments: Leave already granted, for anyone.

    Returns:
        Conflicts, empty if the leave is possible.

    Raises:
        InvalidDateError: If a date cannot be parsed.
        InvalidRecordError: If the window ends before it starts.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if end < start:
        raise InvalidRecordError(f"Leave window ends ({end}) before it starts ({start})")

    if person.status in _UNAVAILABLE_STATUSES:
        return [
            ScheduleConflict(
                conflict_type=ConflictType.NO_ROLE_AVAILABLE,
                message=f"{person.name or person.id} is {person.status.value} and cannot take leave",
                affected_person_ids=(person.id,),
            )
        ]

    conflicts = []

    if not dates_overlap(start, end, person.service_start, person.service_end):
        conflicts.append(
            ScheduleConflict(
                conflict_type=ConflictType.NO_ROLE_AVAILABLE,
                message=(
                    f"Requested dates {start} to {end} fall outside "
                    f"{person.name or person.id}'s service period"
                ),
                affected_person_ids=(person.id,),
                suggestions=("Choose dates within the service period",),
            )
        )

    for assignment in existing_assignments:
        if assignment.person_id != person.id:
            continue
        if assignment.overlaps(start, end):
            conflicts.append(
                ScheduleConflict(
                    conflict_type=ConflictType.OVERLAPPING_ASSIGNMENT,
                    message=(
                        f"Leave overlaps with existing assignment from "
                        f"{assignment.start_date} to {assignment.end_date}"
                    ),
                    affected_person_ids=(person.id,),
                    affected_assignment_ids=(assignment.id,),
                    suggestions=("Choose non-overlapping dates",),
                )
            )

    return conflicts


def is_leave_available(
    person: Person,
    start_date: DateLike,
    end_date: DateLike,
    existing_assignments: list[LeaveAssignment],
) -> bool:
    """Check whether `person` can take leave from start to end."""
    return not get_leave_conflicts(person, start_date, end_date, existing_assignments)
