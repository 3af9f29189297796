"""Run orchestration over pluggable storage."""

from platoonplanner.service.memory import (
    HistoryEntry,
    InMemoryHistory,
    InMemoryLeaveAssignments,
    InMemoryLeaveRequests,
    InMemoryRoster,
    InMemoryTaskAssignments,
    InMemoryTasks,
    StaticConfig,
)
from platoonplanner.service.ports import (
    ConfigProvider,
    HistorySink,
    LeaveAssignmentStore,
    LeaveRequestProvider,
    RosterProvider,
    TaskAssignmentStore,
    TaskProvider,
)
from platoonplanner.service.schedule_service import ScheduleService

__all__ = [
    # Orchestration
    "ScheduleService",
    # Ports
    "ConfigProvider",
    "HistorySink",
    "LeaveAssignmentStore",
    "LeaveRequestProvider",
    "RosterProvider",
    "TaskAssignmentStore",
    "TaskProvider",
    # In-memory adapters
    "HistoryEntry",
    "InMemoryHistory",
    "InMemoryLeaveAssignments",
    "InMemoryLeaveRequests",
    "InMemoryRoster",
    "InMemoryTaskAssignments",
    "InMemoryTasks",
    "StaticConfig",
]
