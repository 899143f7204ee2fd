"""Pick trainable hands and concrete combos from a node's hand table.

Everything here is a pure function of one node plus an injected RNG.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.models import HandData, Node
from .cards import ComboCatalog, flatten_combos, hand_name_from_combo

__all__ = [
    "DEFAULT_EV_BANDS",
    "MIN_EV_DIFF",
    "ComboDiagnostics",
    "EVBand",
    "combo_diagnostics",
    "filter_hands_by_ev",
    "filter_hands_by_worst_ev",
    "filter_non_marginal_hands",
    "get_played_hands",
    "is_interesting_combo",
    "select_interesting_combo",
    "select_random_combo",
    "select_training_hands",
    "select_weighted_action",
]

logger = logging.getLogger(__name__)

MIN_EV_DIFF = 0.05

EV_RANGE_MIN = -2.0
EV_RANGE_MAX = 2.0
TRIVIAL_EV = 0.07

WORST_EV_FRACTION = 0.3
WORST_EV_MIN = 5
WORST_EV_MAX = 50
_NO_EV = -999.0


@dataclass(frozen=True)
class EVBand:
    low: float
    high: float

    def contains(self, ev: float) -> bool:
        return self.low <= ev <= self.high


DEFAULT_EV_BANDS: tuple[EVBand, ...] = (EVBand(0.07, 1.00), EVBand(-1.00, -0.07))


def _best_valid_ev(data: HandData) -> float | None:
    valid = data.valid_evs()
    return max(valid) if valid else None


def get_played_hands(node: Node) -> list[str]:
    return [label for label, data in node.hands.items() if data.total_played > 0]


def filter_hands_by_ev(node: Node, hands: Sequence[str]) -> list[str]:
    """Hands with a real decision: two or more actions played and a best EV
    inside [-2, 2] BB but outside the trivial (-0.07, 0.07) band."""

    kept: list[str] = []
    for label in hands:
        data = node.hand(label)
        if data is None or not data.evs:
            continue
        if sum(1 for freq in data.played if freq > 0) < 2:
            continue
        best = _best_valid_ev(data)
        if best is None:
            continue
        in_range = EV_RANGE_MIN <= best <= EV_RANGE_MAX
        not_trivial = best < -TRIVIAL_EV or best > TRIVIAL_EV
        if in_range and not_trivial:
            kept.append(label)
    return kept


def filter_non_marginal_hands(node: Node, hands: Sequence[str]) -> list[str]:
    """Keep hands whose two best played-action EVs differ by more than MIN_EV_DIFF."""

    kept: list[str] = []
    for label in hands:
        data = node.hand(label)
        if data is None:
            continue
        valid = sorted(data.valid_evs(), reverse=True)
        if len(valid) < 2:
            continue
        if valid[0] - valid[1] > MIN_EV_DIFF:
            kept.append(label)
    return kept


def filter_hands_by_worst_ev(node: Node, hands: Sequence[str]) -> list[str]:
    def best_ev(label: str) -> float:
        data = node.hand(label)
        if data is None:
            return _NO_EV
        best = _best_valid_ev(data)
        return _NO_EV if best is None else best

    ordered = sorted(hands, key=best_ev)
    count = min(WORST_EV_MAX, max(WORST_EV_MIN, math.floor(len(ordered) * WORST_EV_FRACTION)))
    return ordered[:count]


def select_training_hands(node: Node) -> list[str]:
    played = get_played_hands(node)
    if not played:
        logger.debug("Node %d has no played hands", node.node_id)
        return []
    difficult = filter_hands_by_ev(node, played)
    decisive = filter_non_marginal_hands(node, difficult)
    logger.debug(
        "Node %d hand cascade: played=%d ev=%d decisive=%d",
        node.node_id,
        len(played),
        len(difficult),
        len(decisive),
    )
    if decisive:
        return decisive
    if difficult:
        return difficult
    return filter_hands_by_worst_ev(node, played)


def _matches_label(combo: str, label: str) -> bool:
    name = hand_name_from_combo(combo)
    if name == label:
        return True
    if len(name) == 3:
        return f"{name[1]}{name[0]}{name[2]}" == label
    return False


def select_random_combo(label: str, catalog: ComboCatalog, rng: random.Random) -> str | None:
    candidates = [combo for combo in flatten_combos(catalog) if _matches_label(combo, label)]
    if not candidates:
        logger.debug("No combos in catalog for %s", label)
        return None
    return rng.choice(candidates)


def _most_played_index(played: Sequence[float]) -> int:
    best_index = 0
    best = played[0] if played else 0.0
    for index in range(1, len(played)):
        if played[index] > best:
            best = played[index]
            best_index = index
    return best_index


def _in_bands(ev: float, bands: Sequence[EVBand]) -> bool:
    return any(band.contains(ev) for band in bands)


def is_interesting_combo(
    label: str,
    node: Node,
    bands: Sequence[EVBand] = DEFAULT_EV_BANDS,
) -> bool:
    data = node.hand(label)
    if data is None:
        return False
    if not data.evs:
        return True
    if len(node.actions) == 2:
        return any(_in_bands(ev, bands) for ev in data.evs)
    if len(node.actions) >= 3:
        ev = data.ev_at(_most_played_index(data.played))
        return ev is not None and _in_bands(ev, bands)
    return True


def select_interesting_combo(
    label: str,
    combos: Sequence[str],
    node: Node,
    rng: random.Random,
    bands: Sequence[EVBand] = DEFAULT_EV_BANDS,
) -> str | None:
    # Every combo of a label shares the label's strategy, so the filter is all-or-nothing.
    if not combos or not is_interesting_combo(label, node, bands):
        return None
    return rng.choice(list(combos))


@dataclass(frozen=True)
class ComboDiagnostics:
    label: str
    frequencies: tuple[float, ...]
    evs: tuple[float, ...] | None
    most_used_index: int | None
    passes: bool
    reason: str


def combo_diagnostics(
    label: str,
    node: Node,
    bands: Sequence[EVBand] = DEFAULT_EV_BANDS,
) -> ComboDiagnostics:
    data = node.hand(label)
    if data is None:
        return ComboDiagnostics(label, (), None, None, False, "hand not in node")
    passes = is_interesting_combo(label, node, bands)
    if not data.evs:
        reason = "no EV data"
        most_used: int | None = None
    elif len(node.actions) == 2:
        most_used = None
        reason = "an action EV is in range" if passes else "no action EV in range"
    else:
        most_used = _most_played_index(data.played)
        ev = data.ev_at(most_used)
        shown = "n/a" if ev is None else f"{ev:.2f}"
        reason = f"most used action EV {shown} {'in' if passes else 'out of'} range"
    return ComboDiagnostics(label, data.played, data.evs, most_used, passes, reason)


def select_weighted_action(played: Sequence[float], rng: random.Random) -> int:
    """Sample an action index by frequency; uniform when nothing is played."""

    if not played:
        raise ValueError("played must not be empty")
    total = sum(max(0.0, freq) for freq in played)
    if total <= 0:
        return rng.randrange(len(played))
    pick = rng.random() * total
    running = 0.0
    for index, freq in enumerate(played):
        running += max(0.0, freq)
        if pick < running:
            return index
    return len(played) - 1
