from __future__ import annotations

import pytest
from conftest import F, R, act, make_node, make_solution

from gtodrill.core import models
from gtodrill.core.models import HandData


def test_big_blind_is_larger_of_first_two_blinds() -> None:
    solution = make_solution([], blinds=(100, 50, 10))
    assert solution.big_blind == 100
    assert solution.ante == 10


def test_average_stack_in_big_blinds() -> None:
    solution = make_solution([], stacks=(1000, 2000, 3000), blinds=(50, 100))
    assert solution.average_stack_bb == pytest.approx(20.0)


def test_with_nodes_returns_new_snapshot_and_keeps_original() -> None:
    root = make_node(0, 0, [act(F, node=1)])
    child = make_node(1, 1, [act(F)])
    base = make_solution([root])

    extended = base.with_nodes([child])

    assert extended is not base
    assert extended.has_node(1)
    assert not base.has_node(1)
    assert extended.node(0) is root
    with pytest.raises(TypeError):
        base.nodes[5] = child  # type: ignore[index]


def test_action_terminal_when_successor_missing_or_root() -> None:
    assert act(F).is_terminal
    assert act(F, node=0).is_terminal
    assert not act(F, node=3).is_terminal


def test_hand_valid_evs_ignore_unplayed_actions() -> None:
    data = HandData(played=(0.0, 0.7, 0.3), evs=(9.9, 1.0, 0.5))
    assert data.valid_evs() == [1.0, 0.5]
    assert data.total_played == pytest.approx(1.0)
    assert data.ev_at(5) is None


def test_aggregate_frequency_sums_every_hand() -> None:
    node = make_node(
        0,
        0,
        [act(F, node=1), act(R, 200, 2)],
        {"AA": ((0.0, 1.0), None), "72o": ((0.9, 0.1), None)},
    )
    assert node.aggregate_frequency(1) == pytest.approx(1.1)


def test_eligibility_rules() -> None:
    root = make_node(0, 0, [act(F, node=1)])
    two = make_solution([root], stacks=(1000, 1000))
    three_short = make_solution([root], stacks=(500, 500, 500))
    four = make_solution([], stacks=(2000,) * 4)

    assert models.is_valid_rfi_solution(two)
    assert models.is_valid_any_solution(two)
    assert not models.is_valid_any_solution(four)
    assert not models.is_valid_vs_open_solution(two)
    assert not models.is_valid_vs_open_solution(three_short)
    assert models.is_valid_vs_open_solution(four)
    assert models.is_valid_vs_shove_solution(three_short)
    assert not models.is_valid_vs_multiway_solution(three_short)
    assert models.is_valid_vs_multiway_solution(four)


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [("speed20_x.json", 5.0), ("speed32_x.json", 7.5), ("speed50_x.json", 12.5), ("speed108_x", 25.0), ("mtt", 7.5)],
)
def test_initial_bounty_by_format(file_name: str, expected: float) -> None:
    assert models.initial_bounty(file_name) == expected


def test_format_bounty_dollars_and_multiplier() -> None:
    assert models.format_bounty(15.0, True) == "$7.50"
    assert models.format_bounty(10.0, False, "speed20_final.json") == "1.0x"
