"""Greedy leave scheduler.

Pending requests are processed once, highest priority first. Among equal
priorities the person with the lower fairness score goes first, so people
who have carried more of the burden win contested slots. A request is
granted whole or not at all:
1. The person must pass leave eligibility (status, service, overlap)
2. Every day of the window must keep base presence at the minimum
3. Otherwise a new assignment is appended to the running result

Existing assignments, locked or not, pass through untouched and count
toward presence and overlap from the start.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from platoonplanner.domain.dates import DateLike, date_range, is_weekend, parse_date, utc_now
from platoonplanner.domain.errors import UnknownEntityError
from platoonplanner.domain.models import (
    AppConfig,
    LeaveAssignment,
    LeaveRequest,
    LeaveSchedule,
    Person,
)
from platoonplanner.domain.policies import FairnessPolicy
from platoonplanner.scheduling.fairness import combined_fairness_score
from platoonplanner.scheduling.ids import IdGenerator, uuid_id_generator
from platoonplanner.scheduling.leave_eligibility import is_leave_available
from platoonplanner.scheduling.presence import meets_minimum_presence

logger = logging.getLogger(__name__)


class LeaveScheduler:
    """Greedy allocator for leave requests.

    Example:
        >>> scheduler = LeaveScheduler()
        >>> schedule = scheduler.generate_schedule(
        ...     requests, roster, existing, config, date(2026, 3, 1), date(2026, 3, 31)
        ... )
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        fairness_policy: Optional[FairnessPolicy] = None,
    ):
        """Initialize the scheduler.

        Args:
            id_generator: Source of ids for new assignments.
            clock: Source of creation timestamps.
            fairness_policy: Weights for the fairness tie-break.
        """
        self.id_generator = id_generator or uuid_id_generator
        self.clock = clock or utc_now
        self.fairness_policy = fairness_policy

    def order_requests(
        self,
        requests: list[LeaveRequest],
        people: dict[str, Person],
    ) -> list[LeaveRequest]:
        """Pending requests in processing order.

        Priority descending, then requester fairness ascending. Python's
        sort is stable, so full ties keep their input order.

        Raises:
            UnknownEntityError: If a pending request names someone who is
                not on the roster.
        """
        pending = [r for r in requests if r.is_pending]
        scores = {}
        for request in pending:
            person = people.get(request.person_id)
            if person is None:
                raise UnknownEntityError("person", request.person_id)
            scores[request.id] = combined_fairness_score(person, self.fairness_policy)
        return sorted(pending, key=lambda r: (-r.priority, scores[r.id]))

    def generate_schedule(
        self,
        requests: list[LeaveRequest],
        roster: list[Person],
        existing_assignments: list[LeaveAssignment],
        config: AppConfig,
        schedule_start: DateLike,
        schedule_end: DateLike,
    ) -> LeaveSchedule:
        """Run the allocator over one window.

        Args:
            requests: All leave requests; only pending ones are considered.
            roster: Everyone in the unit.
            existing_assignments: Grants already in place, locked or not.
            config: Presence threshold and weekend definition.
            schedule_start: First day of the schedule window.
            schedule_end: Last day of the schedule window.

        Returns:
            LeaveSchedule holding the existing assignments followed by the
            new ones. Conflicts are left empty.
        """
        start = parse_date(schedule_start)
        end = parse_date(schedule_end)
        people = {p.id: p for p in roster}
        result = list(existing_assignments)

        ordered = self.order_requests(requests, people)
        granted = 0

        for request in ordered:
            person = people[request.person_id]

            if not is_leave_available(person, request.start_date, request.end_date, result):
                logger.debug("Request %s skipped: %s not eligible", request.id, person.id)
                continue

            days = date_range(request.start_date, request.end_date)
            tentative = LeaveAssignment(
                id=f"tentative-{request.id}",
                person_id=request.person_id,
                start_date=request.start_date,
                end_date=request.end_date,
                leave_type=request.leave_type,
            )
            candidate_set = result + [tentative]
            short_day = next(
                (d for d in days if not meets_minimum_presence(roster, candidate_set, d, config)),
                None,
            )
            if short_day is not None:
                logger.debug(
                    "Request %s skipped: presence below %s%% on %s",
                    request.id,
                    config.min_base_presence,
                    short_day,
                )
                continue

            result.append(
                LeaveAssignment(
                    id=self.id_generator(),
                    person_id=request.person_id,
                    start_date=request.start_date,
                    end_date=request.end_date,
                    leave_type=request.leave_type,
                    is_weekend=any(is_weekend(d, config.weekend_days) for d in days),
                    is_locked=False,
                    request_id=request.id,
                    created_at=self.clock(),
                )
            )
            granted += 1

        logger.info(
            "Leave schedule %s..%s: %d of %d pending requests granted",
            start,
            end,
            granted,
            len(ordered),
        )
        return LeaveSchedule(start_date=start, end_date=end, assignments=result)


def schedule_leave(
    requests: list[LeaveRequest],
    roster: list[Person],
    existing_assignments: list[LeaveAssignment],
    config: AppConfig,
    schedule_start: DateLike,
    schedule_end: DateLike,
    id_generator: Optional[IdGenerator] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> LeaveSchedule:
    """Functional entry point for :class:`LeaveScheduler`."""
    scheduler = LeaveScheduler(id_generator=id_generator, clock=clock)
    return scheduler.generate_schedule(
        requests, roster, existing_assignments, config, schedule_start, schedule_end
    )
