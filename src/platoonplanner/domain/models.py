"""Domain models for the scheduling system.

This module contains all core data structures used throughout the
scheduling engine: personnel, leave requests and grants, tasks and task
assignments, schedule outputs with their diagnostics, and the read-only
application configuration.

Records are immutable. Schedulers never edit a record; they build new
ones and return them alongside the ones they were given.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from platoonplanner.domain.dates import (
    WEEKDAY_NAMES,
    dates_overlap,
    instant_date,
    nights_between,
    parse_date,
    parse_instant,
)
from platoonplanner.domain.errors import InvalidRecordError

PRIORITY_MIN = 1
PRIORITY_MAX = 10


class Role(Enum):
    """Roles a person can hold in the platoon."""

    DRIVER = "Driver"
    RADIO_OPERATOR = "Radio Operator"
    MEDIC = "Medic"
    SQUAD_LEADER = "Squad Leader"
    OPERATIONS_ROOM = "Operations Room"
    WEAPONS_SPECIALIST = "Weapons Specialist"


class AnyRole(Enum):
    """Wildcard for role requirements that any person can fill."""

    ANY = "Any"


ANY_ROLE = AnyRole.ANY

# A role requirement is either a specific Role or the wildcard.
RoleSpec = Union[Role, AnyRole]


class PersonStatus(Enum):
    """Lifecycle status of a person."""

    ACTIVE = "Active"
    INJURED = "Injured"
    DISCHARGED = "Discharged"


class LeaveType(Enum):
    """Leave categories.

    AFTER is the short leave granted after a duty stretch; LONG is a
    full home leave.
    """

    AFTER = "After"
    LONG = "Long"


class RequestStatus(Enum):
    """Status of a leave request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"


class ConstraintType(Enum):
    """Common reasons given on leave requests.

    Requests carry the reason as free text; these are the labels offered
    by default.
    """

    FAMILY_EVENT = "Family event"
    UNIVERSITY_EXAM = "University exam"
    CIVILIAN_JOB = "Civilian job"
    MEDICAL_APPOINTMENT = "Medical appointment"
    CHILD_BIRTHDAY = "Child's birthday"
    SPOUSE_BIRTHDAY = "Wife's birthday"
    WEDDING_ANNIVERSARY = "Wedding anniversary"
    PARENT_MEDICAL_APPOINTMENT = "Parent medical appointment"
    GENERAL_HOME_ISSUE = "General home issue"
    PREFERENCE = "Preference"


class ConflictType(Enum):
    """Types of schedule conflicts."""

    INSUFFICIENT_BASE_PRESENCE = "INSUFFICIENT_BASE_PRESENCE"
    NO_ROLE_AVAILABLE = "NO_ROLE_AVAILABLE"
    REST_PERIOD_VIOLATION = "REST_PERIOD_VIOLATION"
    OVERLAPPING_ASSIGNMENT = "OVERLAPPING_ASSIGNMENT"
    OVER_QUOTA = "OVER_QUOTA"
    DUTY_HOUR_LIMIT_EXCEEDED = "DUTY_HOUR_LIMIT_EXCEEDED"


class AvailabilityStatus(Enum):
    """Per-day status of a person in the availability matrix."""

    AVAILABLE = "available"
    ON_LEAVE = "on-leave"
    ON_TASK = "on-task"


_MISSING = object()


def _get(data: dict[str, Any], key: str, camel: Optional[str] = None, default: Any = _MISSING) -> Any:
    """Read a field by snake_case or camelCase key."""
    if key in data:
        return data[key]
    if camel is not None and camel in data:
        return data[camel]
    if default is _MISSING:
        raise InvalidRecordError(f"Missing field: {camel or key}")
    return default


def _parse_enum(enum_cls: type[Enum], value: Any) -> Any:
    """Look up an enum member by value or by name."""
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if value == member.value or value == member.name:
            return member
    raise InvalidRecordError(f"Invalid {enum_cls.__name__}: {value!r}")


def parse_role_spec(value: Any) -> RoleSpec:
    """Parse a role requirement value, mapping 'Any' to the wildcard."""
    if value is ANY_ROLE or value in ("Any", "ANY"):
        return ANY_ROLE
    return _parse_enum(Role, value)


@dataclass(frozen=True)
class Person:
    """A member of the roster.

    Attributes:
        id: Unique identifier.
        name: Display name.
        role: The person's role.
        service_start: First day of service (inclusive).
        service_end: Last day of service (inclusive).
        status: Lifecycle status.
        hours_worked: Cumulative task hours.
        weekend_leaves_count: Long leaves that touched a weekend.
        midweek_leaves_count: Long leaves entirely on weekdays.
        after_leaves_count: Short after-duty leaves.
        initial_fairness: Fairness score at arrival.
        current_fairness: Cached fairness score, maintained outside the
            schedulers.
    """

    id: str
    name: str
    role: Role
    service_start: date
    service_end: date
    status: PersonStatus = PersonStatus.ACTIVE
    hours_worked: float = 0.0
    weekend_leaves_count: int = 0
    midweek_leaves_count: int = 0
    after_leaves_count: int = 0
    initial_fairness: float = 0.0
    current_fairness: float = 0.0

    def __post_init__(self):
        if self.service_end < self.service_start:
            raise InvalidRecordError(
                f"Person {self.id}: service end {self.service_end} "
                f"is before service start {self.service_start}"
            )
        counters = (
            self.hours_worked,
            self.weekend_leaves_count,
            self.midweek_leaves_count,
            self.after_leaves_count,
        )
        if any(c < 0 for c in counters):
            raise InvalidRecordError(f"Person {self.id}: fairness counters must be non-negative")

    @property
    def is_active(self) -> bool:
        """Whether the person is currently active."""
        return self.status == PersonStatus.ACTIVE

    def in_service_on(self, day: date) -> bool:
        """Check if a date falls within the service window."""
        return self.service_start <= day <= self.service_end

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Person":
        """Build a person from a mapping with snake_case or camelCase keys."""
        return cls(
            id=str(_get(data, "id")),
            name=str(_get(data, "name", default="")),
            role=_parse_enum(Role, _get(data, "role")),
            service_start=parse_date(_get(data, "service_start", "serviceStart")),
            service_end=parse_date(_get(data, "service_end", "serviceEnd")),
            status=_parse_enum(PersonStatus, _get(data, "status", default="Active")),
            hours_worked=float(_get(data, "hours_worked", "hoursWorked", 0)),
            weekend_leaves_count=int(_get(data, "weekend_leaves_count", "weekendLeavesCount", 0)),
            midweek_leaves_count=int(_get(data, "midweek_leaves_count", "midweekLeavesCount", 0)),
            after_leaves_count=int(_get(data, "after_leaves_count", "afterLeavesCount", 0)),
            initial_fairness=float(_get(data, "initial_fairness", "initialFairness", 0)),
            current_fairness=float(_get(data, "current_fairness", "currentFairness", 0)),
        )


@dataclass(frozen=True)
class LeaveRequest:
    """A request for home leave.

    Attributes:
        id: Unique identifier.
        person_id: ID of the requester.
        start_date: First requested day (inclusive).
        end_date: Last requested day (inclusive).
        leave_type: Requested leave category.
        constraint: Free-form reason tag.
        priority: Priority from 1 (lowest) to 10 (highest).
        status: Only PENDING requests are scheduled.
    """

    id: str
    person_id: str
    start_date: date
    end_date: date
    leave_type: LeaveType = LeaveType.LONG
    constraint: str = ConstraintType.PREFERENCE.value
    priority: int = 5
    status: RequestStatus = RequestStatus.PENDING

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidRecordError(
                f"Leave request {self.id}: end {self.end_date} is before start {self.start_date}"
            )
        if not PRIORITY_MIN <= self.priority <= PRIORITY_MAX:
            raise InvalidRecordError(
                f"Leave request {self.id}: priority {self.priority} outside "
                f"{PRIORITY_MIN}-{PRIORITY_MAX}"
            )

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeaveRequest":
        constraint = _get(data, "constraint", "constraintType", ConstraintType.PREFERENCE.value)
        return cls(
            id=str(_get(data, "id")),
            person_id=str(_get(data, "person_id", "soldierId")),
            start_date=parse_date(_get(data, "start_date", "startDate")),
            end_date=parse_date(_get(data, "end_date", "endDate")),
            leave_type=_parse_enum(LeaveType, _get(data, "leave_type", "leaveType", "Long")),
            constraint=str(constraint),
            priority=int(_get(data, "priority", default=5)),
            status=_parse_enum(RequestStatus, _get(data, "status", default="Pending")),
        )


@dataclass(frozen=True)
class LeaveAssignment:
    """A granted leave window.

    Attributes:
        id: Unique identifier.
        person_id: ID of the person on leave.
        start_date: First day of leave (inclusive).
        end_date: Last day of leave (inclusive).
        leave_type: Leave category.
        is_weekend: True if any day in the window is a weekend day.
        is_locked: Locked grants are never reconsidered by the scheduler.
        request_id: Originating request, if any.
        created_at: Creation timestamp.
    """

    id: str
    person_id: str
    start_date: date
    end_date: date
    leave_type: LeaveType = LeaveType.LONG
    is_weekend: bool = False
    is_locked: bool = False
    request_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidRecordError(
                f"Leave assignment {self.id}: end {self.end_date} is before start {self.start_date}"
            )

    def covers(self, day: date) -> bool:
        """Check if the leave window contains a date."""
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        """Inclusive overlap test against another date window."""
        return dates_overlap(self.start_date, self.end_date, start, end)

    @property
    def day_count(self) -> int:
        """Number of calendar days in the window, inclusive."""
        return nights_between(self.start_date, self.end_date) + 1

    def locked(self) -> "LeaveAssignment":
        """Return a locked copy of this assignment."""
        return replace(self, is_locked=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeaveAssignment":
        created_at = _get(data, "created_at", "createdAt", None)
        return cls(
            id=str(_get(data, "id")),
            person_id=str(_get(data, "person_id", "soldierId")),
            start_date=parse_date(_get(data, "start_date", "startDate")),
            end_date=parse_date(_get(data, "end_date", "endDate")),
            leave_type=_parse_enum(LeaveType, _get(data, "leave_type", "leaveType", "Long")),
            is_weekend=bool(_get(data, "is_weekend", "isWeekend", False)),
            is_locked=bool(_get(data, "is_locked", "isLocked", False)),
            request_id=_get(data, "request_id", "requestId", None),
            created_at=parse_instant(created_at) if created_at else None,
        )


@dataclass(frozen=True)
class RoleRequirement:
    """Headcount needed for a role on a task.

    Attributes:
        role: Required role, or ANY_ROLE for anyone.
        count: Number of people needed.
    """

    role: RoleSpec
    count: int = 1

    def __post_init__(self):
        if self.count < 0:
            raise InvalidRecordError(f"Role requirement count must be non-negative: {self.count}")

    @property
    def is_wildcard(self) -> bool:
        return self.role is ANY_ROLE

    def accepts(self, role: Role) -> bool:
        """Check if a person holding `role` can fill this requirement."""
        return self.is_wildcard or self.role == role

    def counts_assignment(self, assignment: "TaskAssignment") -> bool:
        """Check if an existing assignment counts toward this requirement."""
        return self.is_wildcard or assignment.assigned_role == self.role

    @property
    def label(self) -> str:
        return self.role.value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoleRequirement":
        return cls(role=parse_role_spec(_get(data, "role")), count=int(_get(data, "count", default=1)))


@dataclass(frozen=True)
class Task:
    """An operational task to staff.

    Attributes:
        id: Unique identifier.
        task_type: Task type label (e.g. 'Guard').
        start_time: Start instant (timezone-aware; naive values are UTC).
        end_time: End instant. May cross midnight or span several days.
        duration_hours: Hours of duty the task represents.
        role_requirements: Headcount per role.
        min_rest_after: Rest hours owed to anyone completing the task.
        is_special: Extended task flag.
        special_duration_days: Optional duration hint for special tasks.
    """

    id: str
    task_type: str
    start_time: datetime
    end_time: datetime
    duration_hours: float
    role_requirements: tuple[RoleRequirement, ...] = ()
    min_rest_after: float = 0.0
    is_special: bool = False
    special_duration_days: Optional[int] = None

    def __post_init__(self):
        # Normalize naive instants and list inputs on the frozen record.
        object.__setattr__(self, "start_time", parse_instant(self.start_time))
        object.__setattr__(self, "end_time", parse_instant(self.end_time))
        object.__setattr__(self, "role_requirements", tuple(self.role_requirements))
        if self.end_time < self.start_time:
            raise InvalidRecordError(
                f"Task {self.id}: end {self.end_time.isoformat()} is before "
                f"start {self.start_time.isoformat()}"
            )
        if self.duration_hours < 0 or self.min_rest_after < 0:
            raise InvalidRecordError(f"Task {self.id}: hours must be non-negative")

    @property
    def start_date(self) -> date:
        """Calendar day the task starts on."""
        return instant_date(self.start_time)

    @property
    def end_date(self) -> date:
        """Calendar day the task ends on, in the start instant's offset."""
        return instant_date(self.end_time.astimezone(self.start_time.tzinfo))

    def covers_date(self, day: date) -> bool:
        """Check if the task's date span contains a date."""
        return self.start_date <= day <= self.end_date

    @property
    def total_required(self) -> int:
        return sum(r.count for r in self.role_requirements)

    @classmethod
    def from_dict(cls, data: dict[str, Any], config: Optional["AppConfig"] = None) -> "Task":
        """Build a task from a mapping.

        When `min_rest_after` is absent, the rest period configured for the
        task type (or the default rest period) is used.
        """
        task_type = str(_get(data, "task_type", "taskType"))
        start = parse_instant(_get(data, "start_time", "startTime"))
        end = parse_instant(_get(data, "end_time", "endTime"))
        duration = _get(data, "duration_hours", "durationHours", None)
        if duration is None:
            duration = (end - start).total_seconds() / 3600.0
        rest = _get(data, "min_rest_after", "minRestAfter", None)
        if rest is None:
            rest = (config or AppConfig()).rest_period_for(task_type)
        special_days = _get(data, "special_duration_days", "specialDurationDays", None)
        return cls(
            id=str(_get(data, "id")),
            task_type=task_type,
            start_time=start,
            end_time=end,
            duration_hours=float(duration),
            role_requirements=tuple(
                RoleRequirement.from_dict(r)
                for r in _get(data, "role_requirements", "roleRequirements", [])
            ),
            min_rest_after=float(rest),
            is_special=bool(_get(data, "is_special", "isSpecial", False)),
            special_duration_days=int(special_days) if special_days is not None else None,
        )


@dataclass(frozen=True)
class TaskAssignment:
    """Assignment of a person to a task.

    Attributes:
        id: Unique identifier.
        task_id: ID of the task.
        person_id: ID of the assigned person.
        assigned_role: Role under which the person fills the task. For a
            wildcard requirement this is the person's own role.
        is_locked: Locked assignments are never reconsidered.
        created_at: Creation timestamp.
        created_by: Identity of the creator.
    """

    id: str
    task_id: str
    person_id: str
    assigned_role: Role
    is_locked: bool = False
    created_at: Optional[datetime] = None
    created_by: str = "scheduler"

    def locked(self) -> "TaskAssignment":
        """Return a locked copy of this assignment."""
        return replace(self, is_locked=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskAssignment":
        created_at = _get(data, "created_at", "createdAt", None)
        return cls(
            id=str(_get(data, "id", "scheduleId")),
            task_id=str(_get(data, "task_id", "taskId")),
            person_id=str(_get(data, "person_id", "soldierId")),
            assigned_role=_parse_enum(Role, _get(data, "assigned_role", "assignedRole")),
            is_locked=bool(_get(data, "is_locked", "isLocked", False)),
            created_at=parse_instant(created_at) if created_at else None,
            created_by=str(_get(data, "created_by", "createdBy", "scheduler")),
        )


@dataclass(frozen=True)
class ScheduleConflict:
    """A constraint violation found in a schedule.

    Conflicts are diagnostics for the caller. Suggestions are advisory
    free text.
    """

    conflict_type: ConflictType
    message: str
    affected_person_ids: tuple[str, ...] = ()
    affected_task_ids: tuple[str, ...] = ()
    affected_assignment_ids: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"[{self.conflict_type.value}] {self.message}"


@dataclass
class LeaveSchedule:
    """Leave schedule for a window.

    Attributes:
        start_date: First day of the window.
        end_date: Last day of the window (inclusive).
        assignments: All assignments, pre-existing ones included.
        conflicts: Diagnostics; filled only by an explicit detection pass.
    """

    start_date: date
    end_date: date
    assignments: list[LeaveAssignment] = field(default_factory=list)
    conflicts: list[ScheduleConflict] = field(default_factory=list)

    def assignments_for(self, person_id: str) -> list[LeaveAssignment]:
        return [a for a in self.assignments if a.person_id == person_id]

    def new_assignments(self, existing: list[LeaveAssignment]) -> list[LeaveAssignment]:
        """Assignments whose id is not among `existing`."""
        known = {a.id for a in existing}
        return [a for a in self.assignments if a.id not in known]


@dataclass
class TaskSchedule:
    """Task schedule covering a set of tasks.

    Attributes:
        start_date: Earliest task start date, or None with no tasks.
        end_date: Latest task end date, or None with no tasks.
        assignments: All assignments, pre-existing ones included.
        conflicts: Diagnostics; filled only by an explicit detection pass.
    """

    start_date: Optional[date]
    end_date: Optional[date]
    assignments: list[TaskAssignment] = field(default_factory=list)
    conflicts: list[ScheduleConflict] = field(default_factory=list)

    def assignments_for_task(self, task_id: str) -> list[TaskAssignment]:
        return [a for a in self.assignments if a.task_id == task_id]

    def new_assignments(self, existing: list[TaskAssignment]) -> list[TaskAssignment]:
        """Assignments whose id is not among `existing`."""
        known = {a.id for a in existing}
        return [a for a in self.assignments if a.id not in known]


@dataclass(frozen=True)
class AppConfig:
    """Read-only application configuration.

    Attributes:
        leave_ratio_days_in_base: Days in base per leave cycle.
        leave_ratio_days_home: Days home earned per cycle.
        long_leave_max_days: Maximum length of a single long leave.
        weekend_days: Weekday names that count as weekend.
        min_base_presence: Minimum percentage of active personnel on base.
        max_driving_hours: Same-day duty-hour cap for the driving role.
        driving_role: The rate-limited role.
        default_rest_period: Rest hours for task types without their own.
        task_type_rest_periods: Rest hours per task type.
    """

    leave_ratio_days_in_base: float = 10
    leave_ratio_days_home: float = 4
    long_leave_max_days: int = 4
    weekend_days: tuple[str, ...] = ("Friday", "Saturday")
    min_base_presence: float = 20
    max_driving_hours: float = 8
    driving_role: Role = Role.DRIVER
    default_rest_period: float = 6
    task_type_rest_periods: dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "weekend_days", tuple(self.weekend_days))
        if self.leave_ratio_days_in_base <= 0:
            raise InvalidRecordError("leave_ratio_days_in_base must be positive")
        if self.leave_ratio_days_home < 0:
            raise InvalidRecordError("leave_ratio_days_home must be non-negative")
        if not 0 <= self.min_base_presence <= 100:
            raise InvalidRecordError(
                f"min_base_presence must be a percentage: {self.min_base_presence}"
            )
        unknown = [d for d in self.weekend_days if d not in WEEKDAY_NAMES]
        if unknown:
            raise InvalidRecordError(f"Unknown weekend day names: {unknown}")

    def rest_period_for(self, task_type: str) -> float:
        """Minimum rest hours for a task type."""
        return self.task_type_rest_periods.get(task_type, self.default_rest_period)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppConfig":
        """Build a config; missing keys keep their defaults."""
        defaults = cls()
        return cls(
            leave_ratio_days_in_base=float(
                _get(data, "leave_ratio_days_in_base", "leaveRatioDaysInBase",
                     defaults.leave_ratio_days_in_base)
            ),
            leave_ratio_days_home=float(
                _get(data, "leave_ratio_days_home", "leaveRatioDaysHome",
                     defaults.leave_ratio_days_home)
            ),
            long_leave_max_days=int(
                _get(data, "long_leave_max_days", "longLeaveMaxDays", defaults.long_leave_max_days)
            ),
            weekend_days=tuple(_get(data, "weekend_days", "weekendDays", defaults.weekend_days)),
            min_base_presence=float(
                _get(data, "min_base_presence", "minBasePresence", defaults.min_base_presence)
            ),
            max_driving_hours=float(
                _get(data, "max_driving_hours", "maxDrivingHours", defaults.max_driving_hours)
            ),
            driving_role=_parse_enum(
                Role, _get(data, "driving_role", "drivingRole", defaults.driving_role)
            ),
            default_rest_period=float(
                _get(data, "default_rest_period", "defaultRestPeriod", defaults.default_rest_period)
            ),
            task_type_rest_periods={
                str(k): float(v)
                for k, v in _get(data, "task_type_rest_periods", "taskTypeRestPeriods", {}).items()
            },
        )
