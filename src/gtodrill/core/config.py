"""Trainer configuration.

Defaults mirror the thresholds the spot generators were tuned with.  Any
field can be overridden through ``GTODRILL_<FIELD>`` environment variables,
e.g.::

    GTODRILL_SPOT_TYPES="RFI,vs Open" GTODRILL_MAX_ATTEMPTS=8 gto-drill serve

List-valued fields accept comma-separated entries.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any, Final

_ENV_PREFIX: Final = "GTODRILL_"

SPOT_TYPES: Final[tuple[str, ...]] = ("RFI", "vs Open", "vs Shove", "vs Multiway", "Any")

TOURNAMENT_PHASES: Final[tuple[str, ...]] = (
    "100~60% left",
    "60~40% left",
    "40~20% left",
    "Near bubble",
    "After bubble",
    "3 tables",
    "2 tables",
    "Final table",
)


@dataclass(frozen=True)
class TrainerConfig:
    spot_types: tuple[str, ...] = SPOT_TYPES
    phases: tuple[str, ...] = ()
    player_count: int | None = None
    seed: int | None = None
    max_attempts: int = 5
    starting_lives: float = 3.0
    walk_steps: int = 20
    any_walk_steps: int = 50
    raise_tolerance_bb: float = 0.1
    open_size_bb: float = 2.0
    min_shove_frequency: float = 0.05
    min_vs_open_stack_bb: float = 10.0
    bounty_in_dollars: bool = False

    def with_overrides(self, **overrides: Any) -> TrainerConfig:
        cleaned = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **cleaned)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TrainerConfig:
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for item in fields(cls):
            raw = env.get(_ENV_PREFIX + item.name.upper())
            if raw is None or not raw.strip():
                continue
            values[item.name] = _coerce(item.name, raw)
        config = cls(**values)
        unknown = [name for name in config.spot_types if name not in SPOT_TYPES]
        if unknown:
            raise ValueError(f"unknown spot types: {', '.join(unknown)}")
        return config


_INT_FIELDS = {"player_count", "seed", "max_attempts", "walk_steps", "any_walk_steps"}
_LIST_FIELDS = {"spot_types", "phases"}
_BOOL_FIELDS = {"bounty_in_dollars"}


def _coerce(name: str, raw: str) -> Any:
    if name in _LIST_FIELDS:
        return tuple(entry.strip() for entry in raw.split(",") if entry.strip())
    if name in _BOOL_FIELDS:
        return raw.strip().lower() in ("1", "true", "yes", "on")
    try:
        if name in _INT_FIELDS:
            return int(raw)
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"invalid value for {_ENV_PREFIX}{name.upper()}: {raw!r}") from exc
