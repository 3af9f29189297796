"""In-memory implementations of the service ports.

Used by the CLI and by tests. Nothing here is thread-safe.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from platoonplanner.domain.dates import utc_now
from platoonplanner.domain.errors import UnknownEntityError
from platoonplanner.domain.models import (
    AppConfig,
    LeaveAssignment,
    LeaveRequest,
    Person,
    Task,
    TaskAssignment,
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


class InMemoryRoster(RosterProvider):
    def __init__(self, people: Optional[list[Person]] = None):
        self.people = list(people or [])

    def list(self) -> list[Person]:
        return list(self.people)


class InMemoryLeaveRequests(LeaveRequestProvider):
    def __init__(self, requests: Optional[list[LeaveRequest]] = None):
        self.requests = list(requests or [])

    def list(self) -> list[LeaveRequest]:
        return list(self.requests)


class InMemoryTasks(TaskProvider):
    def __init__(self, tasks: Optional[list[Task]] = None):
        self.tasks = list(tasks or [])

    def list(self) -> list[Task]:
        return list(self.tasks)


class _AssignmentTable:
    """Id-keyed storage shared by both assignment stores."""

    def __init__(self, kind: str, assignments):
        self.kind = kind
        self.rows = {a.id: a for a in assignments or []}

    def by_person(self, person_id):
        return [a for a in self.rows.values() if a.person_id == person_id]

    def insert(self, assignment):
        if assignment.id in self.rows:
            raise ValueError(f"Duplicate {self.kind} id: {assignment.id}")
        self.rows[assignment.id] = assignment
        return assignment

    def lock(self, assignment_id, locked):
        current = self.rows.get(assignment_id)
        if current is None:
            raise UnknownEntityError(self.kind, assignment_id)
        updated = replace(current, is_locked=locked)
        self.rows[assignment_id] = updated
        return updated


class InMemoryLeaveAssignments(LeaveAssignmentStore):
    def __init__(self, assignments: Optional[list[LeaveAssignment]] = None):
        self._table = _AssignmentTable("leave assignment", assignments)

    def list_by_person(self, person_id: str) -> list[LeaveAssignment]:
        return self._table.by_person(person_id)

    def create(self, assignment: LeaveAssignment) -> LeaveAssignment:
        return self._table.insert(assignment)

    def set_locked(self, assignment_id: str, locked: bool) -> LeaveAssignment:
        return self._table.lock(assignment_id, locked)

    def list(self) -> list[LeaveAssignment]:
        return list(self._table.rows.values())


class InMemoryTaskAssignments(TaskAssignmentStore):
    def __init__(self, assignments: Optional[list[TaskAssignment]] = None):
        self._table = _AssignmentTable("task assignment", assignments)

    def list_by_person(self, person_id: str) -> list[TaskAssignment]:
        return self._table.by_person(person_id)

    def list_by_task(self, task_id: str) -> list[TaskAssignment]:
        return [a for a in self._table.rows.values() if a.task_id == task_id]

    def create(self, assignment: TaskAssignment) -> TaskAssignment:
        return self._table.insert(assignment)

    def set_locked(self, assignment_id: str, locked: bool) -> TaskAssignment:
        return self._table.lock(assignment_id, locked)

    def list(self) -> list[TaskAssignment]:
        return list(self._table.rows.values())


class StaticConfig(ConfigProvider):
    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()

    def read(self) -> AppConfig:
        return self.config


@dataclass(frozen=True)
class HistoryEntry:
    """One recorded change."""

    timestamp: datetime
    action: str
    entity_type: str
    entity_id: str
    changed_by: str
    details: str


class InMemoryHistory(HistorySink):
    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or utc_now
        self.entries: list[HistoryEntry] = []

    def append(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        changed_by: str,
        details: str,
    ) -> None:
        self.entries.append(
            HistoryEntry(
                timestamp=self.clock(),
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                changed_by=changed_by,
                details=details,
            )
        )
