"""Domain models and business rules for scheduling."""

from platoonplanner.domain.errors import (
    InvalidDateError,
    InvalidRecordError,
    PlannerError,
    UnknownEntityError,
)
from platoonplanner.domain.models import (
    ANY_ROLE,
    AnyRole,
    AppConfig,
    AvailabilityStatus,
    ConflictType,
    ConstraintType,
    LeaveAssignment,
    LeaveRequest,
    LeaveSchedule,
    LeaveType,
    Person,
    PersonStatus,
    RequestStatus,
    Role,
    RoleRequirement,
    ScheduleConflict,
    Task,
    TaskAssignment,
    TaskSchedule,
)
from platoonplanner.domain.policies import (
    DefaultFairnessPolicy,
    FairnessPolicy,
)

__all__ = [
    # Models
    "ANY_ROLE",
    "AnyRole",
    "AppConfig",
    "AvailabilityStatus",
    "ConflictType",
    "ConstraintType",
    "LeaveAssignment",
    "LeaveRequest",
    "LeaveSchedule",
    "LeaveType",
    "Person",
    "PersonStatus",
    "RequestStatus",
    "Role",
    "RoleRequirement",
    "ScheduleConflict",
    "Task",
    "TaskAssignment",
    "TaskSchedule",
    # Policies
    "DefaultFairnessPolicy",
    "FairnessPolicy",
    # Errors
    "InvalidDateError",
    "InvalidRecordError",
    "PlannerError",
    "UnknownEntityError",
]
