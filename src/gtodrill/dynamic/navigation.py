"""Step-bounded walks over a solved game tree.

Finders return an action index or ``None``.  Walkers return
:class:`~gtodrill.core.results.Reached` or
:class:`~gtodrill.core.results.NotFound`; a missing action, a terminal edge or
a failed node load ends the walk without raising.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from enum import Enum

from ..core.formatting import is_all_in
from ..core.models import ROOT_NODE_ID, Action, ActionKind, Solution
from ..core.results import MissReason, NotFound, Reached
from .store import NodeStore, ensure_node

__all__ = [
    "DEFAULT_MAX_STEPS",
    "DEFAULT_OPEN_SIZE_BB",
    "DEFAULT_RAISE_TOLERANCE_BB",
    "SeatRole",
    "WalkResult",
    "advance",
    "drive_until_player",
    "find_all_in",
    "find_check",
    "find_fold",
    "find_raise_near",
    "fold_until_player",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 20
DEFAULT_OPEN_SIZE_BB = 2.0
DEFAULT_RAISE_TOLERANCE_BB = 0.1

WalkResult = Reached | NotFound


class SeatRole(str, Enum):
    """Action class a seat is required to take on the way to the hero."""

    FOLD = "fold"
    OPEN = "open"
    SHOVE = "shove"


def _find_kind(actions: Sequence[Action], kind: ActionKind) -> int | None:
    for index, action in enumerate(actions):
        if action.kind is kind:
            return index
    return None


def find_fold(actions: Sequence[Action]) -> int | None:
    return _find_kind(actions, ActionKind.FOLD)


def find_check(actions: Sequence[Action]) -> int | None:
    return _find_kind(actions, ActionKind.CHECK)


def find_raise_near(
    actions: Sequence[Action],
    target_bb: float,
    big_blind: float,
    tolerance: float = DEFAULT_RAISE_TOLERANCE_BB,
) -> int | None:
    """First raise whose size in big blinds is strictly within ``tolerance`` of ``target_bb``."""

    if big_blind <= 0:
        return None
    for index, action in enumerate(actions):
        if action.kind is ActionKind.RAISE and abs(action.amount / big_blind - target_bb) < tolerance:
            return index
    return None


def find_all_in(actions: Sequence[Action], player_stack: float) -> int | None:
    for index, action in enumerate(actions):
        if is_all_in(action, player_stack):
            return index
    return None


async def advance(
    solution: Solution,
    node_id: int,
    action_index: int,
    store: NodeStore | None = None,
) -> WalkResult:
    """Follow one action edge, loading the successor when it is missing."""

    snapshot = await ensure_node(solution, node_id, store)
    if snapshot is None:
        return NotFound(MissReason.LOAD_FAILED, f"Failed to load node {node_id}", node_id)
    node = snapshot.node(node_id)
    assert node is not None
    if not (0 <= action_index < len(node.actions)):
        return NotFound(MissReason.NO_ACTION, f"Node {node_id} has no action {action_index}", node_id)
    action = node.actions[action_index]
    if action.is_terminal:
        return NotFound(MissReason.TERMINAL, f"Action {action_index} at node {node_id} ends the hand", node_id)
    next_id = action.node
    assert next_id is not None
    loaded = await ensure_node(snapshot, next_id, store)
    if loaded is None:
        return NotFound(MissReason.LOAD_FAILED, f"Failed to load node {next_id}", next_id)
    return Reached(next_id, loaded, steps=1)


def _role_action(
    role: SeatRole,
    actions: Sequence[Action],
    solution: Solution,
    seat: int,
    open_size_bb: float,
    tolerance: float,
) -> int | None:
    if role is SeatRole.OPEN:
        return find_raise_near(actions, open_size_bb, solution.big_blind, tolerance)
    if role is SeatRole.SHOVE:
        return find_all_in(actions, solution.stack(seat))
    return find_fold(actions)


async def drive_until_player(
    solution: Solution,
    target_seat: int,
    roles: Mapping[int, SeatRole] | None = None,
    *,
    start_node: int = ROOT_NODE_ID,
    store: NodeStore | None = None,
    max_steps: int = DEFAULT_MAX_STEPS,
    open_size_bb: float = DEFAULT_OPEN_SIZE_BB,
    tolerance: float = DEFAULT_RAISE_TOLERANCE_BB,
) -> WalkResult:
    """Walk from ``start_node`` until ``target_seat`` is to act.

    Every seat acting before the target takes the action class ``roles``
    assigns to it, and folds when it has no role.  At most ``max_steps``
    actions are taken.
    """

    if not (0 <= target_seat < solution.num_players):
        return NotFound(MissReason.WRONG_SEAT, f"Seat {target_seat} is not at this table")

    roles = roles or {}
    snapshot = solution
    node_id = start_node
    for step in range(max_steps + 1):
        loaded = await ensure_node(snapshot, node_id, store)
        if loaded is None:
            return NotFound(MissReason.LOAD_FAILED, f"Failed to load node {node_id}", node_id)
        snapshot = loaded
        node = snapshot.node(node_id)
        assert node is not None
        if node.player == target_seat:
            logger.debug("Reached seat %d at node %d after %d steps", target_seat, node_id, step)
            return Reached(node_id, snapshot, steps=step)
        if step == max_steps:
            break

        role = roles.get(node.player, SeatRole.FOLD)
        index = _role_action(role, node.actions, snapshot, node.player, open_size_bb, tolerance)
        if index is None:
            logger.debug("Seat %d has no %s action at node %d", node.player, role.value, node_id)
            return NotFound(
                MissReason.NO_ACTION,
                f"No {role.value} action for seat {node.player} at node {node_id}",
                node_id,
            )
        action = node.actions[index]
        if action.is_terminal:
            return NotFound(MissReason.TERMINAL, f"Walk ended at a terminal state from node {node_id}", node_id)
        logger.debug("Seat %d takes %s at node %d -> %s", node.player, role.value, node_id, action.node)
        assert action.node is not None
        node_id = action.node

    logger.warning(
        "Step limit %d hit walking to seat %d in solution %s",
        max_steps,
        target_seat,
        solution.solution_id,
    )
    return NotFound(MissReason.STEP_LIMIT, f"Seat {target_seat} not reached within {max_steps} steps", node_id)


async def fold_until_player(
    solution: Solution,
    target_seat: int,
    *,
    start_node: int = ROOT_NODE_ID,
    store: NodeStore | None = None,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> WalkResult:
    """Fold every seat until ``target_seat`` is to act."""

    return await drive_until_player(
        solution,
        target_seat,
        None,
        start_node=start_node,
        store=store,
        max_steps=max_steps,
    )
