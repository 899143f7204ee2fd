"""Typed outcomes shared by the tree walkers and spot generators.

Absence is never an exception here: a walk either reaches its target
(:class:`Reached`) or reports why it stopped (:class:`NotFound`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .models import Solution, VillainAction

__all__ = [
    "MissReason",
    "NotFound",
    "Reached",
    "SolutionFormatError",
    "SpotResult",
]


class MissReason(str, Enum):
    NO_ACTION = "no_action"
    TERMINAL = "terminal"
    LOAD_FAILED = "load_failed"
    STEP_LIMIT = "step_limit"
    WRONG_SEAT = "wrong_seat"
    PRECONDITION = "precondition"


class SolutionFormatError(ValueError):
    """Raised when a solution payload cannot be turned into a tree."""


@dataclass(frozen=True)
class Reached:
    node_id: int
    solution: Solution
    steps: int = 0

    found = True


@dataclass(frozen=True)
class NotFound:
    reason: MissReason
    detail: str = ""
    node_id: int | None = None

    found = False

    def __str__(self) -> str:
        return self.detail or self.reason.value


@dataclass(frozen=True)
class SpotResult:
    """Outcome of one generator run.

    On success ``hero_position`` and the role fields describe the spot; on
    failure ``error`` explains why and ``solution`` is the snapshot the
    generator started from.
    """

    spot_type: str
    success: bool
    hero_position: int
    solution: Solution
    error: str | None = None
    node_id: int | None = None
    raiser_position: int | None = None
    shover_positions: tuple[int, ...] = ()
    villain_actions: tuple[VillainAction, ...] = field(default_factory=tuple)

    @classmethod
    def failure(cls, spot_type: str, hero_position: int, solution: Solution, error: str) -> SpotResult:
        return cls(
            spot_type=spot_type,
            success=False,
            hero_position=hero_position,
            solution=solution,
            error=error,
        )
