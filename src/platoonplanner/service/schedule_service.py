"""Run orchestration for leave and task scheduling.

A run reads one snapshot from the providers, hands it to a scheduler,
runs the matching conflict detector over the result and persists the
assignments the store does not hold yet. Because only unknown ids are
written, running the same window twice stores nothing new the second
time.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from platoonplanner.domain.dates import DateLike, format_date, parse_date
from platoonplanner.domain.models import LeaveSchedule, TaskSchedule
from platoonplanner.domain.policies import FairnessPolicy
from platoonplanner.scheduling.ids import IdGenerator
from platoonplanner.scheduling.leave_scheduler import LeaveScheduler
from platoonplanner.scheduling.task_scheduler import TaskScheduler
from platoonplanner.service.ports import (
    ConfigProvider,
    HistorySink,
    LeaveAssignmentStore,
    LeaveRequestProvider,
    RosterProvider,
    TaskAssignmentStore,
    TaskProvider,
)
from platoonplanner.validation.leave_conflicts import detect_leave_conflicts
from platoonplanner.validation.task_conflicts import detect_task_conflicts

logger = structlog.get_logger(__name__)


class ScheduleService:
    """Generates schedules from stored data and persists the new assignments.

    Example:
        >>> service = ScheduleService(roster, requests, leave_store,
        ...                           tasks, task_store, config_provider)
        >>> schedule = service.generate_leave_schedule("2026-03-01", "2026-03-31", "ops")
    """

    def __init__(
        self,
        roster: RosterProvider,
        leave_requests: LeaveRequestProvider,
        leave_assignments: LeaveAssignmentStore,
        tasks: TaskProvider,
        task_assignments: TaskAssignmentStore,
        config: ConfigProvider,
        history: Optional[HistorySink] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        fairness_policy: Optional[FairnessPolicy] = None,
    ):
        self.roster = roster
        self.leave_requests = leave_requests
        self.leave_assignments = leave_assignments
        self.tasks = tasks
        self.task_assignments = task_assignments
        self.config = config
        self.history = history
        self.id_generator = id_generator
        self.clock = clock
        self.fairness_policy = fairness_policy

    def generate_leave_schedule(
        self,
        schedule_start: DateLike,
        schedule_end: DateLike,
        changed_by: str,
    ) -> LeaveSchedule:
        """Schedule pending leave requests for a window.

        Args:
            schedule_start: First day of the window.
            schedule_end: Last day of the window.
            changed_by: Identity recorded in the history entry.

        Returns:
            The full schedule with its conflicts filled in.
        """
        start = parse_date(schedule_start)
        end = parse_date(schedule_end)
        log = logger.bind(run="leave", start=format_date(start), end=format_date(end))

        people = self.roster.list()
        requests = self.leave_requests.list()
        existing = self.leave_assignments.list()
        config = self.config.read()
        log.info(
            "leave_run_started",
            people=len(people),
            requests=len(requests),
            existing_assignments=len(existing),
        )

        scheduler = LeaveScheduler(
            id_generator=self.id_generator,
            clock=self.clock,
            fairness_policy=self.fairness_policy,
        )
        schedule = scheduler.generate_schedule(requests, people, existing, config, start, end)
        schedule.conflicts = detect_leave_conflicts(schedule, people, config)

        created = [self.leave_assignments.create(a) for a in schedule.new_assignments(existing)]

        for conflict in schedule.conflicts:
            log.warning(
                "schedule_conflict",
                conflict_type=conflict.conflict_type.value,
                description=conflict.message,
            )
        log.info(
            "leave_run_completed",
            created=len(created),
            conflicts=len(schedule.conflicts),
        )

        if self.history is not None:
            self.history.append(
                "GENERATE_LEAVE_SCHEDULE",
                "LeaveSchedule",
                format_date(start),
                changed_by,
                f"Generated for {format_date(start)} to {format_date(end)}",
            )
        return schedule

    def generate_task_schedule(self, changed_by: str) -> TaskSchedule:
        """Staff every stored task.

        New assignments are recorded with `changed_by` as their creator.
        """
        log = logger.bind(run="task")

        people = self.roster.list()
        tasks = self.tasks.list()
        existing = self.task_assignments.list()
        config = self.config.read()
        log.info(
            "task_run_started",
            people=len(people),
            tasks=len(tasks),
            existing_assignments=len(existing),
        )

        scheduler = TaskScheduler(
            id_generator=self.id_generator,
            clock=self.clock,
            created_by=changed_by,
            fairness_policy=self.fairness_policy,
        )
        schedule, stats = scheduler.generate_schedule_with_stats(tasks, people, existing)
        schedule.conflicts = detect_task_conflicts(schedule, tasks, people, config)

        created = [self.task_assignments.create(a) for a in schedule.new_assignments(existing)]

        for conflict in schedule.conflicts:
            log.warning(
                "schedule_conflict",
                conflict_type=conflict.conflict_type.value,
                description=conflict.message,
            )
        log.info(
            "task_run_completed",
            created=len(created),
            unfilled_seats=stats["unfilled_seats"],
            conflicts=len(schedule.conflicts),
        )

        if self.history is not None:
            self.history.append(
                "GENERATE_TASK_SCHEDULE",
                "TaskSchedule",
                "",
                changed_by,
                "Generated task schedule",
            )
        return schedule
