"""Conflict detection and input validation."""

from platoonplanner.validation.inputs import (
    is_priority_valid,
    validate_leave_request_input,
    validate_person_input,
    validate_task_input,
)
from platoonplanner.validation.leave_conflicts import (
    LeaveConflictDetector,
    detect_leave_conflicts,
)
from platoonplanner.validation.task_conflicts import (
    TaskConflictDetector,
    detect_task_conflicts,
)

__all__ = [
    # Conflict detectors
    "LeaveConflictDetector",
    "TaskConflictDetector",
    "detect_leave_conflicts",
    "detect_task_conflicts",
    # Input validation
    "is_priority_valid",
    "validate_leave_request_input",
    "validate_person_input",
    "validate_task_input",
]
