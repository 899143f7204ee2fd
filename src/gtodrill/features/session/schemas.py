from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

__all__ = [
    "ActionOptionPayload",
    "AnswerResult",
    "FeedbackPayload",
    "HistoryEntryPayload",
    "SpotPayload",
    "SpotResponse",
    "SummaryPayload",
    "VillainActionPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ActionOptionPayload(_APIModel):
    index: int
    key: str
    label: str
    amount: float | None = None


class HistoryEntryPayload(_APIModel):
    seat: int
    position: str
    description: str
    street: str
    amount_bb: float | None = None


class VillainActionPayload(_APIModel):
    position: int
    action: str
    amount: float | None = None
    combo: str | None = None


class SpotPayload(_APIModel):
    spot_type: str
    solution_id: str
    tournament_phase: str
    hero_position: int
    hero_seat: str
    node_id: int
    hand: str
    combo: str
    stack_bb: float
    options: list[ActionOptionPayload]
    history: list[HistoryEntryPayload]
    raiser_position: int | None = None
    shover_positions: list[int] | None = None
    villain_actions: list[VillainActionPayload] | None = None
    bounties: list[str] | None = None


class SpotResponse(_APIModel):
    ok: bool
    spot: SpotPayload | None = None
    error: str | None = None
    attempts: int = 0


class FeedbackPayload(_APIModel):
    quality: str
    message: str
    points: float
    lives_lost: float
    frequency: float
    max_frequency: float
    ev: float | None = None
    counted_correct: bool
    best_index: int


class SummaryPayload(_APIModel):
    questions: int
    correct: int
    points: float
    accuracy_pct: float
    lives_remaining: float
    busted: bool
    tiers: dict[str, int]
    final_table_spots: int = 0
    completed_tournaments: int = 0


class AnswerResult(_APIModel):
    feedback: FeedbackPayload
    summary: SummaryPayload
