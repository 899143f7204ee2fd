from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

BEST_TOLERANCE = 0.001

# Percent thresholds (frequency * 100).
CORRECT_MIN_PCT = 3.5
INACCURACY_MIN_PCT = 0.5

FINAL_TABLE_PHASE = "Final table"


class ActionQuality(str, Enum):
    BEST = "best"
    CORRECT = "correct"
    INACCURACY = "inaccuracy"
    MISTAKE = "mistake"
    BLUNDER = "blunder"


# quality -> (points, lives lost)
_TIER_VALUES: dict[ActionQuality, tuple[float, float]] = {
    ActionQuality.BEST: (1.25, 0.0),
    ActionQuality.CORRECT: (1.0, 0.0),
    ActionQuality.INACCURACY: (0.5, 0.5),
    ActionQuality.MISTAKE: (0.0, 1.0),
    ActionQuality.BLUNDER: (0.0, 1.0),
}


@dataclass(frozen=True)
class ActionEvaluation:
    quality: ActionQuality
    points: float
    lives_lost: float
    frequency: float
    max_frequency: float
    ev: float | None
    message: str

    @property
    def counted_correct(self) -> bool:
        return is_counted_correct(self.quality)


def is_counted_correct(quality: ActionQuality) -> bool:
    """Best, Correct and Inaccuracy all count towards accuracy."""

    return quality in (ActionQuality.BEST, ActionQuality.CORRECT, ActionQuality.INACCURACY)


def classify_frequency(freq: float, max_freq: float, ev: float | None) -> ActionQuality:
    if abs(freq - max_freq) < BEST_TOLERANCE:
        return ActionQuality.BEST
    pct = freq * 100.0
    if pct >= CORRECT_MIN_PCT:
        if ev is None or ev > 0:
            return ActionQuality.CORRECT
        # Frequent but EV-negative drops to the lowest tier.
        return ActionQuality.BLUNDER
    if INACCURACY_MIN_PCT < pct < CORRECT_MIN_PCT:
        return ActionQuality.INACCURACY
    if 0 < pct <= INACCURACY_MIN_PCT:
        return ActionQuality.MISTAKE
    return ActionQuality.BLUNDER


def _message(quality: ActionQuality, pct: float) -> str:
    if quality is ActionQuality.BEST:
        return f"Best Move! ({pct:.1f}%)"
    if quality is ActionQuality.CORRECT:
        return f"Correct Move ({pct:.1f}%)"
    if quality is ActionQuality.INACCURACY:
        return f"Inaccuracy ({pct:.1f}% frequency)"
    if quality is ActionQuality.MISTAKE:
        return f"Mistake ({pct:.1f}% frequency)"
    return "Blunder! Never play this (0% frequency)"


def evaluate_action(
    chosen_index: int,
    frequencies: Sequence[float],
    evs: Sequence[float] | None = None,
) -> ActionEvaluation:
    """Grade the trainee's action against the solved frequencies.

    ``frequencies`` and ``evs`` are indexed like the node's action list. An
    index outside ``frequencies`` is treated as a 0% action.
    """

    freq = float(frequencies[chosen_index]) if 0 <= chosen_index < len(frequencies) else 0.0
    ev: float | None = None
    if evs is not None and 0 <= chosen_index < len(evs):
        ev = float(evs[chosen_index])
    max_freq = max((float(value) for value in frequencies), default=0.0)
    quality = classify_frequency(freq, max_freq, ev)
    points, lives = _TIER_VALUES[quality]
    logger.debug(
        "Evaluated action %d: freq=%.4f max=%.4f ev=%s -> %s",
        chosen_index,
        freq,
        max_freq,
        "n/a" if ev is None else f"{ev:.3f}",
        quality.value,
    )
    return ActionEvaluation(
        quality=quality,
        points=points,
        lives_lost=lives,
        frequency=freq,
        max_frequency=max_freq,
        ev=ev,
        message=_message(quality, freq * 100.0),
    )


@dataclass(frozen=True)
class SummaryStats:
    questions: int
    correct: int
    points: float
    lives_lost: float
    accuracy_pct: float
    tiers: dict[str, int]


def summarize_evaluations(evaluations: Sequence[ActionEvaluation]) -> SummaryStats:
    if not evaluations:
        return SummaryStats(
            questions=0,
            correct=0,
            points=0.0,
            lives_lost=0.0,
            accuracy_pct=0.0,
            tiers={quality.value: 0 for quality in ActionQuality},
        )

    tiers = Counter(evaluation.quality.value for evaluation in evaluations)
    correct = sum(1 for evaluation in evaluations if evaluation.counted_correct)
    questions = len(evaluations)
    return SummaryStats(
        questions=questions,
        correct=correct,
        points=sum(evaluation.points for evaluation in evaluations),
        lives_lost=sum(evaluation.lives_lost for evaluation in evaluations),
        accuracy_pct=100.0 * correct / questions,
        tiers={quality.value: tiers.get(quality.value, 0) for quality in ActionQuality},
    )


@dataclass
class TrainerStats:
    """Running counters for a training session."""

    total_questions: int = 0
    correct_answers: int = 0
    score: float = 0.0
    reached_final_table: int = 0
    completed_tournaments: int = 0

    def record(self, evaluation: ActionEvaluation, phase: str = "") -> None:
        self.total_questions += 1
        if evaluation.counted_correct:
            self.correct_answers += 1
        self.score += evaluation.points
        if phase == FINAL_TABLE_PHASE:
            self.reached_final_table += 1
            if evaluation.counted_correct:
                self.completed_tournaments += 1


@dataclass
class LivesTracker:
    starting: float = 3.0
    lost: float = 0.0

    @property
    def remaining(self) -> float:
        return max(0.0, self.starting - self.lost)

    @property
    def busted(self) -> bool:
        return self.remaining <= 0.0

    def apply(self, evaluation: ActionEvaluation) -> float:
        self.lost += evaluation.lives_lost
        return self.remaining
