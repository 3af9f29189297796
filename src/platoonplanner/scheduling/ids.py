"""Identity generation for new assignments.

Schedulers take an id generator instead of keeping counters, so a run is
a pure function of its inputs plus the generator it was handed.
"""

import uuid
from typing import Callable

IdGenerator = Callable[[], str]


def uuid_id_generator() -> str:
    """Random UUID4 string. The default generator."""
    return str(uuid.uuid4())


class SequentialIdGenerator:
    """Deterministic ids: '<prefix>-1', '<prefix>-2', ...

    Each instance keeps its own counter.
    """

    def __init__(self, prefix: str = "assign", start: int = 1):
        self.prefix = prefix
        self._next = start

    def __call__(self) -> str:
        value = f"{self.prefix}-{self._next}"
        self._next += 1
        return value
