"""Scheduling engine: fairness, eligibility and the greedy allocators."""

from platoonplanner.scheduling.availability import build_availability_matrix, count_by_status
from platoonplanner.scheduling.fairness import (
    apply_leave_assignment,
    apply_manual_adjustment,
    apply_task_assignment,
    calculate_leave_fairness,
    calculate_task_fairness,
    combined_fairness_score,
    get_platoon_average,
    initialize_fairness,
)
from platoonplanner.scheduling.ids import IdGenerator, SequentialIdGenerator, uuid_id_generator
from platoonplanner.scheduling.leave_eligibility import get_leave_conflicts, is_leave_available
from platoonplanner.scheduling.leave_scheduler import LeaveScheduler, schedule_leave
from platoonplanner.scheduling.presence import (
    get_persons_on_leave,
    get_presence_count,
    get_presence_percentage,
    meets_minimum_presence,
)
from platoonplanner.scheduling.quota import (
    calculate_leave_entitlement,
    count_used_leave_days,
    quota_days,
)
from platoonplanner.scheduling.task_eligibility import (
    check_driving_hours_limit,
    get_rest_period_end,
    has_required_role,
    is_task_available,
)
from platoonplanner.scheduling.task_scheduler import TaskScheduler, schedule_tasks

__all__ = [
    # Schedulers
    "LeaveScheduler",
    "TaskScheduler",
    "schedule_leave",
    "schedule_tasks",
    # Fairness
    "apply_leave_assignment",
    "apply_manual_adjustment",
    "apply_task_assignment",
    "calculate_leave_fairness",
    "calculate_task_fairness",
    "combined_fairness_score",
    "get_platoon_average",
    "initialize_fairness",
    # Availability and presence
    "build_availability_matrix",
    "count_by_status",
    "get_persons_on_leave",
    "get_presence_count",
    "get_presence_percentage",
    "meets_minimum_presence",
    # Eligibility
    "check_driving_hours_limit",
    "get_leave_conflicts",
    "get_rest_period_end",
    "has_required_role",
    "is_leave_available",
    "is_task_available",
    # Quota
    "calculate_leave_entitlement",
    "count_used_leave_days",
    "quota_days",
    # Identity
    "IdGenerator",
    "SequentialIdGenerator",
    "uuid_id_generator",
]
