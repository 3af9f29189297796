"""Fairness scoring.

A person's fairness score is a single burden figure: task hours plus
weighted leave history. Lower means more deserving of the next leave or
the next easy slot. Every function here is pure; the update helpers
return new ``Person`` values instead of mutating.
"""

from dataclasses import replace
from typing import Optional

from platoonplanner.domain.models import LeaveType, Person
from platoonplanner.domain.policies import DEFAULT_FAIRNESS_POLICY, FairnessPolicy


def calculate_task_fairness(
    hours_worked: float,
    policy: Optional[FairnessPolicy] = None,
) -> float:
    """Task fairness: one point per hour worked."""
    policy = policy or DEFAULT_FAIRNESS_POLICY
    return hours_worked * policy.task_hour_weight()


def calculate_leave_fairness(
    weekend_leaves: int,
    midweek_leaves: int,
    after_leaves: int,
    policy: Optional[FairnessPolicy] = None,
) -> float:
    """Leave fairness: weighted sum of leave counts by type."""
    policy = policy or DEFAULT_FAIRNESS_POLICY
    return (
        weekend_leaves * policy.weekend_leave_weight()
        + midweek_leaves * policy.midweek_leave_weight()
        + after_leaves * policy.after_leave_weight()
    )


def combined_fairness_score(
    person: Person,
    policy: Optional[FairnessPolicy] = None,
) -> float:
    """Task fairness plus leave fairness for one person."""
    return calculate_task_fairness(person.hours_worked, policy) + calculate_leave_fairness(
        person.weekend_leaves_count,
        person.midweek_leaves_count,
        person.after_leaves_count,
        policy,
    )


def get_platoon_average(
    people: list[Person],
    policy: Optional[FairnessPolicy] = None,
) -> float:
    """Mean combined score across the roster. 0 for an empty roster."""
    if not people:
        return 0.0
    return sum(combined_fairness_score(p, policy) for p in people) / len(people)


def initialize_fairness(
    new_person: Person,
    roster: list[Person],
    policy: Optional[FairnessPolicy] = None,
) -> Person:
    """Start a new arrival at the roster average.

    Starting at zero would hand a newcomer priority over everyone who has
    already served.
    """
    average = get_platoon_average(roster, policy)
    return replace(new_person, initial_fairness=average, current_fairness=average)


def apply_task_assignment(
    person: Person,
    duration_hours: float,
    policy: Optional[FairnessPolicy] = None,
) -> Person:
    """Add task hours and refresh the cached score."""
    updated = replace(person, hours_worked=person.hours_worked + duration_hours)
    return replace(updated, current_fairness=combined_fairness_score(updated, policy))


def apply_leave_assignment(
    person: Person,
    leave_type: LeaveType,
    is_weekend: bool,
    policy: Optional[FairnessPolicy] = None,
) -> Person:
    """Count a granted leave and refresh the cached score.

    After leaves are counted as such regardless of the weekend flag; long
    leaves count as weekend or midweek depending on it.
    """
    if leave_type == LeaveType.AFTER:
        updated = replace(person, after_leaves_count=person.after_leaves_count + 1)
    elif is_weekend:
        updated = replace(person, weekend_leaves_count=person.weekend_leaves_count + 1)
    else:
        updated = replace(person, midweek_leaves_count=person.midweek_leaves_count + 1)
    return replace(updated, current_fairness=combined_fairness_score(updated, policy))


def apply_manual_adjustment(person: Person, delta: float) -> Person:
    """Shift the cached score by hand. Counters are left alone."""
    return replace(person, current_fairness=person.current_fairness + delta)
