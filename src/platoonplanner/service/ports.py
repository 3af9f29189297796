"""Interfaces to the collaborators the planner reads from and writes to.

Storage, configuration and audit history live outside the engine. These
abstract classes describe the narrow surface a run needs from them.

The ``list`` methods are declared last in each class so that the builtin
``list`` is still in scope for the other annotations.
"""

from abc import ABC, abstractmethod

from platoonplanner.domain.models import (
    AppConfig,
    LeaveAssignment,
    LeaveRequest,
    Person,
    Task,
    TaskAssignment,
)


class RosterProvider(ABC):
    """Read-only source of people."""

    @abstractmethod
    def list(self) -> list[Person]:
        """Every person on the roster."""


class LeaveRequestProvider(ABC):
    """Read-only source of leave requests."""

    @abstractmethod
    def list(self) -> list[LeaveRequest]:
        """Every leave request, whatever its status."""


class TaskProvider(ABC):
    """Read-only source of tasks."""

    @abstractmethod
    def list(self) -> list[Task]:
        """Every task to be staffed."""


class LeaveAssignmentStore(ABC):
    """Persistent collection of leave assignments."""

    @abstractmethod
    def list_by_person(self, person_id: str) -> list[LeaveAssignment]:
        """Assignments of one person."""

    @abstractmethod
    def create(self, assignment: LeaveAssignment) -> LeaveAssignment:
        """Store a new assignment and return it as stored."""

    @abstractmethod
    def set_locked(self, assignment_id: str, locked: bool) -> LeaveAssignment:
        """Lock or unlock an assignment.

        Raises:
            UnknownEntityError: If no assignment has this id.
        """

    @abstractmethod
    def list(self) -> list[LeaveAssignment]:
        """Every stored assignment."""


class TaskAssignmentStore(ABC):
    """Persistent collection of task assignments."""

    @abstractmethod
    def list_by_person(self, person_id: str) -> list[TaskAssignment]:
        """Assignments of one person."""

    @abstractmethod
    def list_by_task(self, task_id: str) -> list[TaskAssignment]:
        """Assignments of one task."""

    @abstractmethod
    def create(self, assignment: TaskAssignment) -> TaskAssignment:
        """Store a new assignment and return it as stored."""

    @abstractmethod
    def set_locked(self, assignment_id: str, locked: bool) -> TaskAssignment:
        """Lock or unlock an assignment.

        Raises:
            UnknownEntityError: If no assignment has this id.
        """

    @abstractmethod
    def list(self) -> list[TaskAssignment]:
        """Every stored assignment."""


class ConfigProvider(ABC):
    """Source of the application configuration."""

    @abstractmethod
    def read(self) -> AppConfig:
        """Current configuration."""


class HistorySink(ABC):
    """Append-only audit trail."""

    @abstractmethod
    def append(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        changed_by: str,
        details: str,
    ) -> None:
        """Record one change."""
