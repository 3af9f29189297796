"""Policy definitions for fairness scoring.

Fairness weights are kept separate from the scoring functions so they
can be tested independently and swapped without touching the engine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from platoonplanner.domain.errors import InvalidRecordError


class FairnessPolicy(ABC):
    """Abstract base class for leave fairness weights."""

    @abstractmethod
    def weekend_leave_weight(self) -> float:
        """Points per long leave that touched a weekend."""
        pass

    @abstractmethod
    def midweek_leave_weight(self) -> float:
        """Points per long leave entirely on weekdays."""
        pass

    @abstractmethod
    def after_leave_weight(self) -> float:
        """Points per short after-duty leave."""
        pass

    def task_hour_weight(self) -> float:
        """Points per hour of task duty."""
        return 1.0


@dataclass(frozen=True)
class DefaultFairnessPolicy(FairnessPolicy):
    """Default fairness weights.

    Weekend leave is the most contested, so it weighs most:
    - Weekend leave: 1.5
    - Midweek leave: 1.0
    - After leave: 0.5

    The ordering weekend > midweek > after > 0 is enforced.
    """

    weekend: float = 1.5
    midweek: float = 1.0
    after: float = 0.5

    def __post_init__(self):
        if not self.weekend > self.midweek > self.after > 0:
            raise InvalidRecordError(
                "Fairness weights must satisfy weekend > midweek > after > 0, got "
                f"{self.weekend}, {self.midweek}, {self.after}"
            )

    def weekend_leave_weight(self) -> float:
        return self.weekend

    def midweek_leave_weight(self) -> float:
        return self.midweek

    def after_leave_weight(self) -> float:
        return self.after


DEFAULT_FAIRNESS_POLICY = DefaultFairnessPolicy()
