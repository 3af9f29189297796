"""Minimum on-base presence checks.

Only Active people count. Injured or discharged people are neither
present nor absent: they are left out of both sides of the percentage.
"""

from platoonplanner.domain.dates import DateLike, parse_date
from platoonplanner.domain.models import AppConfig, LeaveAssignment, Person


def get_persons_on_leave(
    roster: list[Person],
    assignments: list[LeaveAssignment],
    day: DateLike,
) -> list[Person]:
    """People from `roster` with a leave assignment covering `day`."""
    day = parse_date(day)
    on_leave_ids = {a.person_id for a in assignments if a.covers(day)}
    return [p for p in roster if p.id in on_leave_ids]


def get_presence_count(
    roster: list[Person],
    assignments: list[LeaveAssignment],
    day: DateLike,
) -> int:
    """Number of active people on base on `day`."""
    active = [p for p in roster if p.is_active]
    return len(active) - len(get_persons_on_leave(active, assignments, day))


def get_presence_percentage(
    roster: list[Person],
    assignments: list[LeaveAssignment],
    day: DateLike,
) -> float:
    """Share of active people on base, 0-100. 100 with nobody active."""
    active_count = sum(1 for p in roster if p.is_active)
    if active_count == 0:
        return 100.0
    return get_presence_count(roster, assignments, day) / active_count * 100


def meets_minimum_presence(
    roster: list[Person],
    assignments: list[LeaveAssignment],
    day: DateLike,
    config: AppConfig,
) -> bool:
    """Check the configured minimum presence on one day.

    Vacuously true when nobody on the roster is active.
    """
    return get_presence_percentage(roster, assignments, day) >= config.min_base_presence
