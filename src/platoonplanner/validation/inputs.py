"""Field-level validation of raw create inputs.

Each validator takes the raw mapping a caller is about to turn into a
record and returns a dict of field name to message, or None when the
input is acceptable. Unlike ``from_dict`` these never raise, so every
problem in a form can be reported at once.
"""

from typing import Any, Optional

from platoonplanner.domain.dates import nights_between, parse_date, parse_instant
from platoonplanner.domain.errors import InvalidDateError
from platoonplanner.domain.models import (
    PRIORITY_MAX,
    PRIORITY_MIN,
    AppConfig,
    ConstraintType,
    LeaveType,
    Role,
)

ValidationErrors = dict[str, str]

_ROLE_VALUES = {r.value for r in Role}
_CONSTRAINT_VALUES = {c.value for c in ConstraintType}


def _field(data: dict[str, Any], key: str, camel: Optional[str] = None) -> Any:
    if key in data:
        return data[key]
    if camel is not None:
        return data.get(camel)
    return None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def is_priority_valid(priority: Any) -> bool:
    """Check that a priority is an integer within the allowed range."""
    if isinstance(priority, bool) or not isinstance(priority, int):
        return False
    return PRIORITY_MIN <= priority <= PRIORITY_MAX


def validate_person_input(data: dict[str, Any]) -> Optional[ValidationErrors]:
    """Validate a new person: name, role and service window."""
    errors: ValidationErrors = {}

    name = data.get("name")
    if _blank(name):
        errors["name"] = "Name is required"
    elif not isinstance(name, str):
        errors["name"] = "Name must be text"
    elif len(name.strip()) < 2:
        errors["name"] = "Name must be at least 2 characters"

    role = data.get("role")
    if isinstance(role, Role):
        role = role.value
    if not isinstance(role, str) or role not in _ROLE_VALUES:
        errors["role"] = "Please select a valid role"

    start = _field(data, "service_start", "serviceStart")
    end = _field(data, "service_end", "serviceEnd")
    if _blank(start):
        errors["service_start"] = "Service start date is required"
    if _blank(end):
        errors["service_end"] = "Service end date is required"

    if not _blank(start) and not _blank(end):
        try:
            if parse_date(end) <= parse_date(start):
                errors["service_end"] = "Service end date must be after start date"
        except InvalidDateError as exc:
            errors["service_end"] = str(exc)

    return errors or None


def validate_leave_request_input(
    data: dict[str, Any],
    config: Optional[AppConfig] = None,
) -> Optional[ValidationErrors]:
    """Validate a new leave request.

    Args:
        data: Raw request fields.
        config: When given, long leaves are also checked against
            ``config.long_leave_max_days``.
    """
    errors: ValidationErrors = {}

    if _blank(_field(data, "person_id", "soldierId")):
        errors["person_id"] = "Person is required"

    start = _field(data, "start_date", "startDate")
    end = _field(data, "end_date", "endDate")
    if _blank(start):
        errors["start_date"] = "Start date is required"
    if _blank(end):
        errors["end_date"] = "End date is required"

    if not _blank(start) and not _blank(end):
        try:
            start_day = parse_date(start)
            end_day = parse_date(end)
        except InvalidDateError as exc:
            errors["end_date"] = str(exc)
        else:
            if end_day < start_day:
                errors["end_date"] = "End date must be on or after start date"
            elif config is not None and _is_long(data):
                length = nights_between(start_day, end_day) + 1
                if length > config.long_leave_max_days:
                    errors["end_date"] = (
                        f"Long leave cannot exceed {config.long_leave_max_days} days"
                    )

    constraint = _field(data, "constraint", "constraintType")
    if isinstance(constraint, ConstraintType):
        constraint = constraint.value
    if not isinstance(constraint, str) or constraint not in _CONSTRAINT_VALUES:
        errors["constraint"] = "Please select a valid constraint type"

    if not is_priority_valid(data.get("priority")):
        errors["priority"] = f"Priority must be between {PRIORITY_MIN} and {PRIORITY_MAX}"

    return errors or None


def _is_long(data: dict[str, Any]) -> bool:
    leave_type = _field(data, "leave_type", "leaveType")
    if leave_type is None:
        return True
    return leave_type in (LeaveType.LONG, LeaveType.LONG.value, LeaveType.LONG.name)


def validate_task_input(data: dict[str, Any]) -> Optional[ValidationErrors]:
    """Validate a new task: type, time window and role requirements."""
    errors: ValidationErrors = {}

    if _blank(_field(data, "task_type", "taskType")):
        errors["task_type"] = "Task type is required"

    start = _field(data, "start_time", "startTime")
    end = _field(data, "end_time", "endTime")
    if _blank(start):
        errors["start_time"] = "Start time is required"
    if _blank(end):
        errors["end_time"] = "End time is required"

    if not _blank(start) and not _blank(end):
        try:
            if parse_instant(end) <= parse_instant(start):
                errors["end_time"] = "End time must be after start time"
        except InvalidDateError as exc:
            errors["end_time"] = str(exc)

    if not _field(data, "role_requirements", "roleRequirements"):
        errors["role_requirements"] = "At least one role requirement is needed"

    return errors or None
