"""Command-line interface for the platoon planner."""

import argparse
import json
import sys
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

from platoonplanner.domain.errors import PlannerError
from platoonplanner.domain.models import (
    ANY_ROLE,
    AppConfig,
    ConstraintType,
    LeaveAssignment,
    LeaveRequest,
    LeaveType,
    Person,
    Role,
    RoleRequirement,
    ScheduleConflict,
    Task,
    TaskAssignment,
)
from platoonplanner.logging_config import setup_logging
from platoonplanner.scheduling.ids import SequentialIdGenerator
from platoonplanner.scheduling.leave_scheduler import LeaveScheduler
from platoonplanner.scheduling.task_scheduler import TaskScheduler
from platoonplanner.service.memory import (
    InMemoryHistory,
    InMemoryLeaveAssignments,
    InMemoryLeaveRequests,
    InMemoryRoster,
    InMemoryTaskAssignments,
    InMemoryTasks,
    StaticConfig,
)
from platoonplanner.service.schedule_service import ScheduleService
from platoonplanner.validation.leave_conflicts import detect_leave_conflicts
from platoonplanner.validation.task_conflicts import detect_task_conflicts

SAMPLE_NAMES = [
    "Avi", "Ben", "Dana", "Eli", "Gal", "Hila", "Itai", "Lior",
    "Maya", "Noa", "Omer", "Roni", "Shir", "Tal", "Uri", "Yael",
]

ROLE_CYCLE = list(Role)


def create_sample_roster(count: int = 12, start: Optional[date] = None) -> list[Person]:
    """Create a sample roster with varied roles and fairness history.

    Args:
        count: Number of people to create.
        start: Reference date; everyone is in service 90 days either side.
    """
    start = start or date.today()
    roster = []
    for i in range(count):
        name = SAMPLE_NAMES[i % len(SAMPLE_NAMES)]
        if i >= len(SAMPLE_NAMES):
            name = f"{name}{i // len(SAMPLE_NAMES) + 1}"
        roster.append(
            Person(
                id=f"p{i + 1}",
                name=name,
                role=ROLE_CYCLE[i % len(ROLE_CYCLE)],
                service_start=start - timedelta(days=90),
                service_end=start + timedelta(days=90),
                hours_worked=float((i * 7) % 40),
                weekend_leaves_count=i % 3,
                midweek_leaves_count=(i + 1) % 2,
                after_leaves_count=i % 4,
            )
        )
    return roster


def create_sample_requests(
    roster: list[Person],
    start: date,
    days: int = 14,
) -> list[LeaveRequest]:
    """One pending request per person, staggered over the window."""
    constraints = list(ConstraintType)
    requests = []
    for i, person in enumerate(roster):
        first = start + timedelta(days=(i * 2) % max(days - 3, 1))
        length = 2 + i % 3
        requests.append(
            LeaveRequest(
                id=f"req-{i + 1}",
                person_id=person.id,
                start_date=first,
                end_date=first + timedelta(days=length - 1),
                leave_type=LeaveType.AFTER if i % 4 == 3 else LeaveType.LONG,
                constraint=constraints[i % len(constraints)].value,
                priority=(i * 3) % 10 + 1,
            )
        )
    return requests


def create_sample_tasks(start: date, days: int = 3) -> list[Task]:
    """Daily guard, night patrol and operations room shifts."""
    tasks = []
    for d in range(days):
        day = start + timedelta(days=d)
        morning = datetime.combine(day, time(8, 0), tzinfo=timezone.utc)
        evening = datetime.combine(day, time(20, 0), tzinfo=timezone.utc)
        tasks.append(
            Task(
                id=f"guard-{day.isoformat()}",
                task_type="Guard",
                start_time=morning,
                end_time=morning + timedelta(hours=8),
                duration_hours=8,
                role_requirements=(RoleRequirement(ANY_ROLE, 2),),
                min_rest_after=8,
            )
        )
        tasks.append(
            Task(
                id=f"patrol-{day.isoformat()}",
                task_type="Patrol",
                start_time=evening,
                end_time=evening + timedelta(hours=8),
                duration_hours=8,
                role_requirements=(
                    RoleRequirement(Role.DRIVER, 1),
                    RoleRequirement(Role.RADIO_OPERATOR, 1),
                    RoleRequirement(ANY_ROLE, 1),
                ),
                min_rest_after=10,
            )
        )
        tasks.append(
            Task(
                id=f"ops-{day.isoformat()}",
                task_type="Operations",
                start_time=morning,
                end_time=morning + timedelta(hours=12),
                duration_hours=12,
                role_requirements=(RoleRequirement(Role.OPERATIONS_ROOM, 1),),
                min_rest_after=12,
            )
        )
    return tasks


def print_conflicts(conflicts: list[ScheduleConflict], limit: int = 5) -> None:
    if not conflicts:
        print("\n  Conflicts: none")
        return
    print(f"\n  Conflicts: {len(conflicts)}")
    for conflict in conflicts[:limit]:
        print(f"    - {conflict}")
    if len(conflicts) > limit:
        print(f"    ... and {len(conflicts) - limit} more conflicts")


def run_leave_demo(
    count: int = 12,
    days: int = 14,
    min_presence: float = 70,
    start: Optional[date] = None,
) -> None:
    """Run a demo leave allocation.

    Args:
        count: Number of people on the sample roster.
        days: Length of the schedule window.
        min_presence: Minimum base presence percentage.
        start: First day of the window (default today).
    """
    start = start or date.today()
    end = start + timedelta(days=days - 1)
    print(f"Scheduling leave for {count} people from {start} to {end}...")

    config = AppConfig(min_base_presence=min_presence)
    roster = create_sample_roster(count, start)
    requests = create_sample_requests(roster, start, days)

    scheduler = LeaveScheduler(id_generator=SequentialIdGenerator("leave"))
    schedule = scheduler.generate_schedule(requests, roster, [], config, start, end)
    conflicts = detect_leave_conflicts(schedule, roster, config)

    names = {p.id: p.name for p in roster}
    print(f"\nGranted {len(schedule.assignments)} of {len(requests)} requests")
    for assignment in schedule.assignments:
        weekend = " (weekend)" if assignment.is_weekend else ""
        print(
            f"  {names[assignment.person_id]:<8} {assignment.start_date} .. "
            f"{assignment.end_date} {assignment.leave_type.value}{weekend}"
        )
    print_conflicts(conflicts)


def run_task_demo(
    count: int = 12,
    days: int = 3,
    start: Optional[date] = None,
) -> None:
    """Run a demo task allocation.

    Args:
        count: Number of people on the sample roster.
        days: Number of days of sample tasks.
        start: First task day (default today).
    """
    start = start or date.today()
    print(f"Staffing {days} days of tasks with {count} people...")

    config = AppConfig()
    roster = create_sample_roster(count, start)
    tasks = create_sample_tasks(start, days)

    scheduler = TaskScheduler(id_generator=SequentialIdGenerator("task"))
    schedule, stats = scheduler.generate_schedule_with_stats(tasks, roster, [])
    conflicts = detect_task_conflicts(schedule, tasks, roster, config)

    print(f"\nTask schedule {schedule.start_date} .. {schedule.end_date}")
    print(f"  Tasks: {stats['total_tasks']}")
    print(f"  Seats filled: {stats['new_assignments']}/{stats['total_seats']}")
    print(f"  People assigned: {stats['people_assigned']}/{count}")
    print(f"  Duty hours assigned: {stats['new_hours']:.1f}")
    print_conflicts(conflicts)


def load_snapshot(path: str) -> dict[str, Any]:
    """Load a JSON snapshot of roster, requests, tasks and assignments.

    Keys may be camelCase or snake_case. Missing collections are empty and
    a missing config falls back to defaults.
    """
    with Path(path).open(encoding="utf-8") as f:
        raw = json.load(f)

    def section(*keys: str) -> list[dict[str, Any]]:
        for key in keys:
            if key in raw:
                return raw[key]
        return []

    config = AppConfig.from_dict(raw.get("config", {}))
    return {
        "config": config,
        "people": [Person.from_dict(d) for d in section("people", "soldiers", "roster")],
        "leave_requests": [
            LeaveRequest.from_dict(d) for d in section("leave_requests", "leaveRequests")
        ],
        "leave_assignments": [
            LeaveAssignment.from_dict(d) for d in section("leave_assignments", "leaveAssignments")
        ],
        "tasks": [Task.from_dict(d, config) for d in section("tasks")],
        "task_assignments": [
            TaskAssignment.from_dict(d) for d in section("task_assignments", "taskAssignments")
        ],
        "schedule_start": raw.get("schedule_start") or raw.get("scheduleStart"),
        "schedule_end": raw.get("schedule_end") or raw.get("scheduleEnd"),
    }


def run_snapshot(
    path: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    changed_by: str = "cli",
) -> None:
    """Run both schedulers over a snapshot file and print summaries."""
    snapshot = load_snapshot(path)
    start = start or snapshot["schedule_start"]
    end = end or snapshot["schedule_end"]
    if not start or not end:
        raise PlannerError("A schedule window is required (--start/--end or in the snapshot)")

    leave_store = InMemoryLeaveAssignments(snapshot["leave_assignments"])
    task_store = InMemoryTaskAssignments(snapshot["task_assignments"])
    history = InMemoryHistory()
    service = ScheduleService(
        roster=InMemoryRoster(snapshot["people"]),
        leave_requests=InMemoryLeaveRequests(snapshot["leave_requests"]),
        leave_assignments=leave_store,
        tasks=InMemoryTasks(snapshot["tasks"]),
        task_assignments=task_store,
        config=StaticConfig(snapshot["config"]),
        history=history,
    )

    leave_before = len(leave_store.list())
    leave_schedule = service.generate_leave_schedule(start, end, changed_by)
    print(f"Leave schedule {leave_schedule.start_date} .. {leave_schedule.end_date}")
    print(f"  Assignments: {len(leave_schedule.assignments)} "
          f"({len(leave_store.list()) - leave_before} new)")
    print_conflicts(leave_schedule.conflicts)

    task_before = len(task_store.list())
    task_schedule = service.generate_task_schedule(changed_by)
    print(f"\nTask schedule {task_schedule.start_date} .. {task_schedule.end_date}")
    print(f"  Assignments: {len(task_schedule.assignments)} "
          f"({len(task_store.list()) - task_before} new)")
    print_conflicts(task_schedule.conflicts)


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value}") from None


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Platoon Planner - Leave and Task Scheduling Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s leave-demo                     Allocate leave for 12 sample people
  %(prog)s leave-demo --min-presence 80   Stricter base presence
  %(prog)s task-demo --days 5             Staff five days of sample tasks
  %(prog)s run snapshot.json              Schedule a JSON snapshot
  %(prog)s --json-logs run snapshot.json  Same, with JSON run events
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log scheduling decisions at DEBUG level",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render structured run events as JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    leave_parser = subparsers.add_parser("leave-demo", help="Run the leave allocation demo")
    leave_parser.add_argument(
        "--count", "-c",
        type=int,
        default=12,
        help="Number of people (default: 12)",
    )
    leave_parser.add_argument(
        "--days", "-d",
        type=int,
        default=14,
        help="Length of the schedule window in days (default: 14)",
    )
    leave_parser.add_argument(
        "--min-presence", "-p",
        type=float,
        default=70.0,
        help="Minimum base presence percentage (default: 70)",
    )
    leave_parser.add_argument(
        "--start",
        type=_parse_day,
        default=None,
        help="First day of the window, YYYY-MM-DD (default: today)",
    )

    task_parser = subparsers.add_parser("task-demo", help="Run the task allocation demo")
    task_parser.add_argument(
        "--count", "-c",
        type=int,
        default=12,
        help="Number of people (default: 12)",
    )
    task_parser.add_argument(
        "--days", "-d",
        type=int,
        default=3,
        help="Number of days of tasks (default: 3)",
    )
    task_parser.add_argument(
        "--start",
        type=_parse_day,
        default=None,
        help="First task day, YYYY-MM-DD (default: today)",
    )

    run_parser = subparsers.add_parser("run", help="Schedule a JSON snapshot")
    run_parser.add_argument("snapshot", help="Path to the snapshot JSON file")
    run_parser.add_argument("--start", default=None, help="First day of the leave window")
    run_parser.add_argument("--end", default=None, help="Last day of the leave window")
    run_parser.add_argument(
        "--changed-by",
        default="cli",
        help="Identity recorded on new assignments (default: cli)",
    )

    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING", json_logs=args.json_logs)

    try:
        if args.command == "leave-demo":
            run_leave_demo(args.count, args.days, args.min_presence, args.start)
            return 0
        elif args.command == "task-demo":
            run_task_demo(args.count, args.days, args.start)
            return 0
        elif args.command == "run":
            run_snapshot(args.snapshot, args.start, args.end, args.changed_by)
            return 0
        else:
            parser.print_help()
            return 1
    except PlannerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error: cannot read snapshot: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
