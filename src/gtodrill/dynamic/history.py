"""Rebuild the action log that leads from the root to a node."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..core.formatting import STREET_NAMES, describe_action, street_name
from ..core.models import ROOT_NODE_ID, ActionKind, Solution
from .seating import seat_label

__all__ = [
    "HandHistory",
    "HistoryEntry",
    "build_hand_history",
    "filter_actions_by_street",
    "latest_player_actions",
    "node_path",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    seat: int
    position: str
    description: str
    amount: float
    amount_bb: float | None
    street: str


@dataclass(frozen=True)
class HandHistory:
    entries: tuple[HistoryEntry, ...] = ()
    current_street: str = STREET_NAMES[0]
    path: tuple[int, ...] = (ROOT_NODE_ID,)


def node_path(solution: Solution, target: int) -> list[int]:
    """Shortest loaded path from the root to ``target``; ``[0]`` when there is none."""

    if target == ROOT_NODE_ID or not solution.has_node(ROOT_NODE_ID):
        return [ROOT_NODE_ID]
    queue: deque[list[int]] = deque([[ROOT_NODE_ID]])
    visited: set[int] = set()
    while queue:
        path = queue.popleft()
        current = path[-1]
        if current == target:
            return path
        if current in visited:
            continue
        visited.add(current)
        node = solution.node(current)
        if node is None:
            continue
        for action in node.actions:
            if action.node is not None and action.node not in visited:
                queue.append([*path, action.node])
    logger.debug("Node %d unreachable from root in solution %s", target, solution.solution_id)
    return [ROOT_NODE_ID]


def build_hand_history(solution: Solution, target: int) -> HandHistory:
    """Describe every action on the root-to-``target`` path.

    All-in detection uses each seat's remaining stack, reduced by the calls
    and raises it made earlier on the path.
    """

    path = node_path(solution, target)
    big_blind = solution.big_blind
    stacks = [float(stack) for stack in solution.stacks]
    current_street = STREET_NAMES[0]
    entries: list[HistoryEntry] = []

    for current_id, next_id in zip(path, path[1:]):
        node = solution.node(current_id)
        if node is None:
            continue
        current_street = street_name(node.street)
        action = next((candidate for candidate in node.actions if candidate.node == next_id), None)
        if action is None:
            continue
        seat = node.player
        stack = stacks[seat] if 0 <= seat < len(stacks) else 0.0
        label = describe_action(action, big_blind, stack)
        if action.kind in (ActionKind.RAISE, ActionKind.CALL) and 0 <= seat < len(stacks):
            stacks[seat] = max(0.0, stacks[seat] - action.amount)
        entries.append(
            HistoryEntry(
                seat=seat,
                position=seat_label(seat, solution.num_players),
                description=label.text(big_blind),
                amount=action.amount,
                amount_bb=action.amount / big_blind if action.amount > 0 and big_blind > 0 else None,
                street=current_street,
            )
        )

    last = solution.node(path[-1])
    if last is not None:
        current_street = street_name(last.street)
    return HandHistory(entries=tuple(entries), current_street=current_street, path=tuple(path))


def filter_actions_by_street(history: HandHistory, street: str) -> list[HistoryEntry]:
    return [entry for entry in history.entries if entry.street == street]


def latest_player_actions(history: HandHistory | Sequence[HistoryEntry]) -> dict[int, HistoryEntry]:
    entries = history.entries if isinstance(history, HandHistory) else history
    latest: dict[int, HistoryEntry] = {}
    for entry in entries:
        latest[entry.seat] = entry
    return latest
