from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, model_validator

from ...core.config import SPOT_TYPES, TrainerConfig
from .service import SessionManager

__all__ = ["AnswerRequest", "CreateSessionRequest", "create_session_router"]


class CreateSessionRequest(BaseModel):
    spot_types: list[str] | None = None
    phases: list[str] | None = None
    player_count: int | None = None
    seed: int | None = None
    lives: float | None = None
    bounty_in_dollars: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: dict[str, object]) -> dict[str, object]:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        for field in ("spot_types", "phases"):
            value = cleaned.get(field)
            if isinstance(value, str):
                cleaned[field] = [entry.strip() for entry in value.split(",") if entry.strip()]
        for field in ("player_count", "seed"):
            if cleaned.get(field) == "":
                cleaned[field] = None
        return cleaned

    @model_validator(mode="after")
    def _normalize(self) -> CreateSessionRequest:
        if self.spot_types is not None:
            unknown = [name for name in self.spot_types if name not in SPOT_TYPES]
            if unknown:
                raise ValueError(f"unknown spot types: {', '.join(unknown)}")
            if not self.spot_types:
                self.spot_types = None
        if self.lives is not None and self.lives <= 0:
            self.lives = None
        return self

    def to_config(self, defaults: TrainerConfig) -> TrainerConfig:
        return defaults.with_overrides(
            spot_types=tuple(self.spot_types) if self.spot_types else None,
            phases=tuple(self.phases) if self.phases else None,
            player_count=self.player_count,
            seed=self.seed,
            starting_lives=self.lives,
            bounty_in_dollars=self.bounty_in_dollars,
        )


class AnswerRequest(BaseModel):
    choice: int


def create_session_router(manager: SessionManager) -> APIRouter:
    router = APIRouter(prefix="/api/v1/trainer", tags=["trainer"])

    @router.post("")
    async def create_session(body: CreateSessionRequest) -> dict[str, str]:
        session_id = await manager.create_session_async(body.to_config(manager.defaults))
        return {"session": session_id}

    @router.post("/{sid}/spot")
    async def next_spot(sid: str) -> dict[str, object]:
        try:
            response = await manager.generate_spot(sid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        return response.to_dict()

    @router.post("/{sid}/answer")
    async def answer(sid: str, body: AnswerRequest) -> dict[str, object]:
        try:
            result = await manager.answer_async(sid, body.choice)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        return result.to_dict()

    @router.get("/{sid}/summary")
    async def summary(sid: str) -> dict[str, object]:
        try:
            payload = await manager.summary_async(sid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return payload.to_dict()

    return router
