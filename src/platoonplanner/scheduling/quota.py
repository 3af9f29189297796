"""Leave quota and entitlement arithmetic."""

import math

from platoonplanner.domain.dates import DateLike, nights_between
from platoonplanner.domain.models import AppConfig, LeaveAssignment, Person


def quota_days(start: DateLike, end: DateLike, config: AppConfig) -> float:
    """Leave days earned over a schedule window.

    The quota is continuous and not rounded: a 10-day window at a 10:4
    ratio earns exactly 4.0 days, a 12-day window 4.8.
    """
    window_days = nights_between(start, end) + 1
    return window_days / config.leave_ratio_days_in_base * config.leave_ratio_days_home


def calculate_leave_entitlement(person: Person, config: AppConfig) -> int:
    """Whole leave days earned over a person's full service period."""
    service_days = max(0, nights_between(person.service_start, person.service_end))
    if service_days == 0:
        return 0
    cycle = config.leave_ratio_days_in_base + config.leave_ratio_days_home
    return math.floor(service_days / cycle * config.leave_ratio_days_home)


def count_used_leave_days(person_id: str, assignments: list[LeaveAssignment]) -> int:
    """Leave nights already used by a person, counted against entitlement."""
    return sum(
        max(0, nights_between(a.start_date, a.end_date))
        for a in assignments
        if a.person_id == person_id
    )
