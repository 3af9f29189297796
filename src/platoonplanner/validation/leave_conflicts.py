"""Post-hoc conflict detection for leave schedules.

Runs on any leave schedule, including ones edited by hand after the
scheduler produced them. Two kinds of conflicts are reported:
- INSUFFICIENT_BASE_PRESENCE: one aggregate conflict for all short days
- OVER_QUOTA: one conflict per person with more leave than earned
"""

from datetime import date

from platoonplanner.domain.dates import date_range, format_date
from platoonplanner.domain.models import (
    AppConfig,
    ConflictType,
    LeaveSchedule,
    Person,
    ScheduleConflict,
)
from platoonplanner.scheduling.presence import meets_minimum_presence
from platoonplanner.scheduling.quota import quota_days


class LeaveConflictDetector:
    """Finds presence and quota conflicts in a finished leave schedule.

    Example:
        >>> detector = LeaveConflictDetector(config)
        >>> for conflict in detector.detect(schedule, roster):
        ...     print(conflict)
    """

    def __init__(self, config: AppConfig):
        self.config = config

    def detect(self, schedule: LeaveSchedule, roster: list[Person]) -> list[ScheduleConflict]:
        """Run every leave check over the schedule window."""
        conflicts = []
        presence = self._detect_insufficient_presence(schedule, roster)
        if presence is not None:
            conflicts.append(presence)
        conflicts.extend(self._detect_over_quota(schedule, roster))
        return conflicts

    def _detect_insufficient_presence(
        self,
        schedule: LeaveSchedule,
        roster: list[Person],
    ):
        """Aggregate every day in the window that falls short of presence."""
        violation_days: list[date] = [
            day
            for day in date_range(schedule.start_date, schedule.end_date)
            if not meets_minimum_presence(roster, schedule.assignments, day, self.config)
        ]
        if not violation_days:
            return None

        affected = []
        for assignment in schedule.assignments:
            if assignment.person_id in affected:
                continue
            if any(assignment.covers(day) for day in violation_days):
                affected.append(assignment.person_id)

        return ScheduleConflict(
            conflict_type=ConflictType.INSUFFICIENT_BASE_PRESENCE,
            message=(
                f"Base presence below minimum ({self.config.min_base_presence:g}%) on: "
                + ", ".join(format_date(d) for d in violation_days)
            ),
            affected_person_ids=tuple(affected),
            suggestions=(
                "Reduce simultaneous leaves",
                "Adjust minimum presence threshold",
            ),
        )

    def _detect_over_quota(
        self,
        schedule: LeaveSchedule,
        roster: list[Person],
    ) -> list[ScheduleConflict]:
        """One conflict per person whose leave days exceed the window quota."""
        quota = quota_days(schedule.start_date, schedule.end_date, self.config)
        conflicts = []

        for person in roster:
            leaves = schedule.assignments_for(person.id)
            total_days = sum(a.day_count for a in leaves)
            if total_days > quota:
                conflicts.append(
                    ScheduleConflict(
                        conflict_type=ConflictType.OVER_QUOTA,
                        message=(
                            f"{person.name or person.id} has {total_days} leave days, "
                            f"exceeding quota of {quota:.1f}"
                        ),
                        affected_person_ids=(person.id,),
                        affected_assignment_ids=tuple(a.id for a in leaves),
                        suggestions=("Remove some leave assignments for this person",),
                    )
                )

        return conflicts


def detect_leave_conflicts(
    schedule: LeaveSchedule,
    roster: list[Person],
    config: AppConfig,
) -> list[ScheduleConflict]:
    """Functional entry point for :class:`LeaveConflictDetector`."""
    return LeaveConflictDetector(config).detect(schedule, roster)
