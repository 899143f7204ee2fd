from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

__all__ = [
    "ROOT_NODE_ID",
    "Action",
    "ActionKind",
    "HandData",
    "Node",
    "Solution",
    "VillainAction",
    "format_bounty",
    "initial_bounty",
    "is_valid_any_solution",
    "is_valid_rfi_solution",
    "is_valid_vs_multiway_solution",
    "is_valid_vs_open_solution",
    "is_valid_vs_shove_solution",
]

ROOT_NODE_ID = 0


class ActionKind(str, Enum):
    """Solver action letters."""

    FOLD = "F"
    CALL = "C"
    CHECK = "X"
    RAISE = "R"


@dataclass(frozen=True, slots=True)
class Action:
    kind: ActionKind
    amount: float = 0.0
    # Successor node id; ``None`` (or the root id) marks a terminal state.
    node: int | None = None

    @property
    def is_terminal(self) -> bool:
        return self.node is None or self.node == ROOT_NODE_ID


@dataclass(frozen=True, slots=True)
class HandData:
    """Strategy of one hand label at one node, indexed by the node's actions."""

    played: tuple[float, ...]
    evs: tuple[float, ...] | None = None
    weight: float = 1.0

    @property
    def total_played(self) -> float:
        return sum(self.played)

    def played_at(self, index: int) -> float:
        if 0 <= index < len(self.played):
            return self.played[index]
        return 0.0

    def ev_at(self, index: int) -> float | None:
        if self.evs is None or not (0 <= index < len(self.evs)):
            return None
        return self.evs[index]

    def valid_evs(self) -> list[float]:
        """EVs of the actions this hand actually takes (``played > 0``)."""

        if not self.evs:
            return []
        return [ev for idx, ev in enumerate(self.evs) if self.played_at(idx) > 0]


@dataclass(frozen=True, slots=True)
class Node:
    node_id: int
    player: int
    street: int
    actions: tuple[Action, ...]
    hands: Mapping[str, HandData] = field(default_factory=dict)

    def hand(self, label: str) -> HandData | None:
        return self.hands.get(label)

    def aggregate_frequency(self, action_index: int) -> float:
        """Sum of ``played[action_index]`` over every hand at this node."""

        return sum(data.played_at(action_index) for data in self.hands.values())


@dataclass(frozen=True, slots=True)
class VillainAction:
    position: int
    action: str
    amount: float | None = None
    combo: str | None = None


@dataclass(frozen=True)
class Solution:
    """Immutable snapshot of a solved spot.

    ``nodes`` only holds what has been loaded so far; loading more nodes goes
    through :meth:`with_nodes`, which returns a new snapshot and leaves this
    one untouched.
    """

    solution_id: str
    stacks: tuple[float, ...]
    blinds: tuple[float, ...]
    nodes: Mapping[int, Node]
    bounties: tuple[float, ...] = ()
    file_name: str = ""
    tournament_phase: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.nodes, MappingProxyType):
            object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    @property
    def num_players(self) -> int:
        return len(self.stacks)

    @property
    def big_blind(self) -> float:
        if len(self.blinds) < 2:
            return float(self.blinds[0]) if self.blinds else 0.0
        return float(max(self.blinds[0], self.blinds[1]))

    @property
    def ante(self) -> float:
        return float(self.blinds[2]) if len(self.blinds) > 2 else 0.0

    @property
    def average_stack_bb(self) -> float:
        if not self.stacks or self.big_blind <= 0:
            return 0.0
        return (sum(self.stacks) / len(self.stacks)) / self.big_blind

    def stack(self, seat: int) -> float:
        if 0 <= seat < len(self.stacks):
            return float(self.stacks[seat])
        return 0.0

    def has_node(self, node_id: int) -> bool:
        return node_id in self.nodes

    def node(self, node_id: int) -> Node | None:
        return self.nodes.get(node_id)

    @property
    def root(self) -> Node | None:
        return self.nodes.get(ROOT_NODE_ID)

    def with_nodes(self, extra: Mapping[int, Node] | Iterable[Node]) -> Solution:
        merged = dict(self.nodes)
        if isinstance(extra, Mapping):
            merged.update(extra)
        else:
            merged.update({node.node_id: node for node in extra})
        return Solution(
            solution_id=self.solution_id,
            stacks=self.stacks,
            blinds=self.blinds,
            nodes=merged,
            bounties=self.bounties,
            file_name=self.file_name,
            tournament_phase=self.tournament_phase,
        )

    def missing(self, node_ids: Sequence[int]) -> list[int]:
        return [node_id for node_id in node_ids if node_id not in self.nodes]


def is_valid_rfi_solution(solution: Solution) -> bool:
    return solution.num_players >= 2 and solution.has_node(ROOT_NODE_ID)


def is_valid_any_solution(solution: Solution) -> bool:
    return solution.num_players >= 2 and solution.has_node(ROOT_NODE_ID)


def is_valid_vs_open_solution(solution: Solution, min_average_stack_bb: float = 10.0) -> bool:
    return solution.num_players >= 3 and solution.average_stack_bb >= min_average_stack_bb


def is_valid_vs_shove_solution(solution: Solution) -> bool:
    return solution.num_players >= 3


def is_valid_vs_multiway_solution(solution: Solution) -> bool:
    return solution.num_players >= 4


_INITIAL_BOUNTIES: tuple[tuple[str, float], ...] = (
    ("speed20", 5.0),
    ("speed32", 7.5),
    ("speed50", 12.5),
    ("speed108", 25.0),
)
DEFAULT_INITIAL_BOUNTY = 7.5


def initial_bounty(file_name: str) -> float:
    """Starting bounty (in dollars) implied by the tournament format in a file name."""

    for token, bounty in _INITIAL_BOUNTIES:
        if token in file_name:
            return bounty
    return DEFAULT_INITIAL_BOUNTY


def format_bounty(bounty: float, in_dollars: bool, file_name: str = "") -> str:
    """Half of a seat's chip bounty is collectable; show it as dollars or as a
    multiple of the starting bounty."""

    collectable = bounty / 2
    if in_dollars:
        return f"${collectable:.2f}"
    return f"{collectable / initial_bounty(file_name):.1f}x"
