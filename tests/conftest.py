from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from gtodrill.core.models import Action, ActionKind, HandData, Node, Solution  # noqa: E402
from gtodrill.data.solution_loader import DEMO_SOLUTION, load_solution_file  # noqa: E402

F = ActionKind.FOLD
C = ActionKind.CALL
X = ActionKind.CHECK
R = ActionKind.RAISE


def act(kind: ActionKind, amount: float = 0.0, node: int | None = None) -> Action:
    return Action(kind=kind, amount=amount, node=node)


def make_node(
    node_id: int,
    player: int,
    actions: Sequence[Action],
    hands: Mapping[str, tuple[Sequence[float], Sequence[float] | None]] | None = None,
    street: int = 0,
) -> Node:
    table = {
        label: HandData(played=tuple(played), evs=None if evs is None else tuple(evs))
        for label, (played, evs) in (hands or {}).items()
    }
    return Node(node_id=node_id, player=player, street=street, actions=tuple(actions), hands=table)


def make_solution(
    nodes: Iterable[Node],
    stacks: Sequence[float] = (1000, 1000, 1000, 1000, 1000, 1000),
    blinds: Sequence[float] = (50, 100, 0),
    solution_id: str = "test",
    **kwargs,
) -> Solution:
    return Solution(
        solution_id=solution_id,
        stacks=tuple(float(stack) for stack in stacks),
        blinds=tuple(float(blind) for blind in blinds),
        nodes={node.node_id: node for node in nodes},
        **kwargs,
    )


def fold_chain(num_players: int, *, open_played: float = 0.5) -> list[Node]:
    """Seat ``i`` acts at node ``i``; folding moves to ``i + 1``.

    Every seat can also open to 2 BB (node ``100 + i``) or shove its stack
    (node ``200 + i``), each played at ``open_played`` by ``AA``.
    """

    nodes = []
    for seat in range(num_players):
        fold_target = seat + 1 if seat + 1 < num_players else None
        nodes.append(
            make_node(
                seat,
                seat,
                [act(F, node=fold_target), act(R, 200, 100 + seat), act(R, 1000, 200 + seat)],
                {"AA": ((1 - 2 * open_played, open_played, open_played), (0.0, 1.5, 1.2))},
            )
        )
    return nodes


@pytest.fixture
def demo_solution() -> Solution:
    return load_solution_file(DEMO_SOLUTION)
