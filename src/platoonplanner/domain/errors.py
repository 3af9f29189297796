"""Exceptions for programmer and input errors.

Constraint violations found while scheduling are reported as
``ScheduleConflict`` records, not raised. The exceptions here are for
inputs the engine cannot reason about at all: malformed dates, broken
records, or references to people and tasks that are not in the snapshot.
"""


class PlannerError(Exception):
    """Base class for all planner errors."""


class InvalidDateError(PlannerError, ValueError):
    """A date or instant value could not be parsed."""

    def __init__(self, value: object, expected: str = "ISO date"):
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid {expected}: {value!r}")


class InvalidRecordError(PlannerError, ValueError):
    """A record violates one of its own invariants."""


class UnknownEntityError(PlannerError, KeyError):
    """A referenced person, task or request does not exist."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind}: {entity_id}")

    def __str__(self) -> str:
        return f"Unknown {self.kind}: {self.entity_id}"
