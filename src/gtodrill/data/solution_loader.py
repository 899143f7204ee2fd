from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from ..core.models import ROOT_NODE_ID, Action, ActionKind, HandData, Node, Solution
from ..core.results import SolutionFormatError

__all__ = [
    "DEMO_SOLUTION",
    "SolutionRepository",
    "load_solution_file",
    "parse_node",
    "parse_solution",
]

logger = logging.getLogger(__name__)

DEMO_SOLUTION = Path(__file__).with_name("solutions") / "demo_4max.json"


def _floats(raw: Any, field: str) -> tuple[float, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise SolutionFormatError(f"'{field}' must be a list")
    try:
        return tuple(float(value) for value in raw)
    except (TypeError, ValueError) as exc:
        raise SolutionFormatError(f"'{field}' must contain numbers") from exc


def _parse_action(raw: Mapping[str, Any]) -> Action:
    try:
        kind = ActionKind(str(raw["type"]).upper())
    except (KeyError, ValueError) as exc:
        raise SolutionFormatError(f"invalid action type in {raw!r}") from exc
    node = raw.get("node")
    return Action(kind=kind, amount=float(raw.get("amount") or 0.0), node=None if node is None else int(node))


def _parse_hand(raw: Mapping[str, Any]) -> HandData:
    evs = raw.get("evs")
    return HandData(
        played=_floats(raw.get("played"), "played"),
        evs=None if evs is None else _floats(evs, "evs"),
        weight=float(raw.get("weight", 1.0)),
    )


def parse_node(node_id: int, raw: Mapping[str, Any]) -> Node:
    if not isinstance(raw, Mapping):
        raise SolutionFormatError(f"node {node_id} must be an object")
    try:
        player = int(raw["player"])
    except (KeyError, TypeError, ValueError) as exc:
        raise SolutionFormatError(f"node {node_id} has no acting player") from exc
    hands = raw.get("hands") or {}
    return Node(
        node_id=node_id,
        player=player,
        street=int(raw.get("street", 0)),
        actions=tuple(_parse_action(action) for action in raw.get("actions") or ()),
        hands={str(label): _parse_hand(data) for label, data in hands.items()},
    )


def _parse_nodes(raw: Any) -> dict[int, Node]:
    if not isinstance(raw, Mapping):
        raise SolutionFormatError("'nodes' must be an object keyed by node id")
    nodes: dict[int, Node] = {}
    for key, value in raw.items():
        try:
            node_id = int(key)
        except (TypeError, ValueError) as exc:
            raise SolutionFormatError(f"invalid node id {key!r}") from exc
        nodes[node_id] = parse_node(node_id, value)
    return nodes


def parse_solution(payload: Mapping[str, Any]) -> Solution:
    if not isinstance(payload, Mapping):
        raise SolutionFormatError("solution payload must be an object")
    handdata = (payload.get("settings") or {}).get("handdata") or {}
    stacks = _floats(handdata.get("stacks"), "stacks")
    blinds = _floats(handdata.get("blinds"), "blinds")
    if not stacks:
        raise SolutionFormatError("solution has no stacks")
    if len(blinds) < 2:
        raise SolutionFormatError("blinds must hold at least [SB, BB]")
    return Solution(
        solution_id=str(payload.get("id") or payload.get("fileName") or "solution"),
        stacks=stacks,
        blinds=blinds,
        nodes=_parse_nodes(payload.get("nodes") or {}),
        bounties=_floats(handdata.get("bounties"), "bounties"),
        file_name=str(payload.get("fileName") or ""),
        tournament_phase=str(payload.get("tournamentPhase") or ""),
    )


def load_solution_file(path: Path | str) -> Solution:
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SolutionFormatError(f"{path.name}: invalid JSON ({exc.msg})") from exc
    return parse_solution(data)


class SolutionRepository:
    """Hold full solutions and hand them out root-first.

    :meth:`snapshot` returns a solution holding only its root node; the
    repository doubles as the node store that fills in the rest on demand.
    """

    def __init__(self, solutions: Iterable[Solution] = ()) -> None:
        self._entries: dict[str, Solution] = {}
        for solution in solutions:
            self.add(solution)

    @classmethod
    def from_paths(cls, paths: Iterable[Path | str]) -> SolutionRepository:
        return cls(load_solution_file(path) for path in paths)

    def add(self, solution: Solution) -> None:
        self._entries[solution.solution_id] = solution
        logger.debug("Registered solution %s (%d nodes)", solution.solution_id, len(solution.nodes))

    def ids(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self, solution_id: str) -> Solution:
        entry = self._entries.get(solution_id)
        if entry is None:
            raise KeyError(f"solution '{solution_id}' not found")
        root = entry.node(ROOT_NODE_ID)
        return Solution(
            solution_id=entry.solution_id,
            stacks=entry.stacks,
            blinds=entry.blinds,
            nodes={ROOT_NODE_ID: root} if root is not None else {},
            bounties=entry.bounties,
            file_name=entry.file_name,
            tournament_phase=entry.tournament_phase,
        )

    def snapshots(self) -> list[Solution]:
        return [self.snapshot(solution_id) for solution_id in self._entries]

    async def load_nodes(self, solution: Solution, node_ids: Sequence[int]) -> Solution | None:
        entry = self._entries.get(solution.solution_id)
        if entry is None:
            logger.warning("Load requested for unknown solution %s", solution.solution_id)
            return None
        wanted = solution.missing(node_ids)
        if not wanted:
            return solution
        found = {node_id: entry.nodes[node_id] for node_id in wanted if node_id in entry.nodes}
        if len(found) != len(wanted):
            logger.warning(
                "Solution %s is missing nodes %s",
                solution.solution_id,
                sorted(set(wanted) - set(found)),
            )
            return None
        return solution.with_nodes(found)
