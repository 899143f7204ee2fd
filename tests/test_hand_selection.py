from __future__ import annotations

import random

import pytest
from conftest import F, R, act, make_node

from gtodrill.dynamic import hand_selection
from gtodrill.dynamic.cards import all_combos, combos_for_hand, hand_name_from_combo

TWO_WAY = [act(F, node=1), act(R, 200, 2)]
THREE_WAY = [act(F, node=1), act(R, 200, 2), act(R, 1000, 3)]


def test_played_hands_skip_unplayed_labels() -> None:
    node = make_node(0, 0, TWO_WAY, {"AA": ((0, 1), None), "72o": ((0, 0), None)})
    assert hand_selection.get_played_hands(node) == ["AA"]


def test_ev_filter_keeps_real_decisions_only() -> None:
    node = make_node(
        0,
        0,
        TWO_WAY,
        {
            "KQo": ((0.4, 0.6), (0.0, 0.5)),  # kept
            "AA": ((0.0, 1.0), (0.0, 1.5)),  # one action played
            "T9s": ((0.5, 0.5), (0.0, 0.05)),  # trivial EV
            "KK": ((0.5, 0.5), (0.0, 3.0)),  # out of range
            "QQ": ((0.5, 0.5), None),  # no EVs
        },
    )
    assert hand_selection.filter_hands_by_ev(node, list(node.hands)) == ["KQo"]


def test_non_marginal_filter_needs_clear_best_action() -> None:
    node = make_node(
        0,
        0,
        TWO_WAY,
        {"KQo": ((0.4, 0.6), (0.50, 0.52)), "AJo": ((0.4, 0.6), (0.1, 0.5))},
    )
    assert hand_selection.filter_non_marginal_hands(node, ["KQo", "AJo"]) == ["AJo"]


def test_worst_ev_filter_takes_lowest_best_evs() -> None:
    hands = {f"{rank}{rank}": ((1.0, 0.0), (float(index), 0.0)) for index, rank in enumerate("AKQJT98765")}
    hands["22"] = ((1.0, 0.0), None)
    node = make_node(0, 0, TWO_WAY, hands)

    worst = hand_selection.filter_hands_by_worst_ev(node, list(hands))

    # 11 hands -> floor(3.3) = 3, raised to the minimum of 5
    assert worst == ["22", "AA", "KK", "QQ", "JJ"]


def test_training_cascade_falls_back_but_never_empties() -> None:
    decisive = make_node(0, 0, TWO_WAY, {"AJo": ((0.4, 0.6), (0.1, 0.5)), "AA": ((0.0, 1.0), (0.0, 1.5))})
    marginal = make_node(0, 0, TWO_WAY, {"KQo": ((0.4, 0.6), (0.50, 0.52)), "AA": ((0.0, 1.0), (0.0, 1.5))})
    pure = make_node(0, 0, TWO_WAY, {"AA": ((0.0, 1.0), (0.0, 1.5)), "72o": ((1.0, 0.0), (0.0, -0.8))})
    empty = make_node(0, 0, TWO_WAY, {"AA": ((0.0, 0.0), None)})

    assert hand_selection.select_training_hands(decisive) == ["AJo"]
    assert hand_selection.select_training_hands(marginal) == ["KQo"]
    assert sorted(hand_selection.select_training_hands(pure)) == ["72o", "AA"]
    assert hand_selection.select_training_hands(empty) == []


def test_select_random_combo_matches_label() -> None:
    rng = random.Random(5)
    catalog = all_combos()
    for label in ("AKo", "AKs", "77"):
        combo = hand_selection.select_random_combo(label, catalog, rng)
        assert combo is not None
        assert hand_name_from_combo(combo) == label
    # rank-reversed labels still match
    assert hand_name_from_combo(hand_selection.select_random_combo("KAo", catalog, rng) or "") == "AKo"
    assert hand_selection.select_random_combo("AKo", ["AsAh"], rng) is None


def test_interesting_combo_two_actions() -> None:
    node = make_node(0, 0, TWO_WAY, {"KQo": ((0.4, 0.6), (0.0, 0.5)), "AA": ((0.0, 1.0), (0.0, 4.0))})

    assert hand_selection.is_interesting_combo("KQo", node)
    assert not hand_selection.is_interesting_combo("AA", node)
    assert not hand_selection.is_interesting_combo("72o", node)


def test_interesting_combo_three_actions_uses_most_played() -> None:
    node = make_node(
        0,
        0,
        THREE_WAY,
        {
            "KQo": ((0.1, 0.2, 0.7), (0.0, 3.0, 0.4)),
            "AA": ((0.0, 0.7, 0.3), (0.0, 3.0, 0.4)),
            "T9s": ((0.5, 0.5, 0.0), None),
        },
    )

    assert hand_selection.is_interesting_combo("KQo", node)
    assert not hand_selection.is_interesting_combo("AA", node)
    assert hand_selection.is_interesting_combo("T9s", node)


def test_select_interesting_combo_is_all_or_nothing() -> None:
    node = make_node(0, 0, TWO_WAY, {"KQo": ((0.4, 0.6), (0.0, 0.5)), "AA": ((0.0, 1.0), (0.0, 4.0))})
    rng = random.Random(1)

    assert hand_selection.select_interesting_combo("KQo", combos_for_hand("KQo"), node, rng) in combos_for_hand("KQo")
    assert hand_selection.select_interesting_combo("AA", combos_for_hand("AA"), node, rng) is None
    assert hand_selection.select_interesting_combo("KQo", [], node, rng) is None


def test_combo_diagnostics_reason() -> None:
    node = make_node(0, 0, THREE_WAY, {"AA": ((0.0, 0.7, 0.3), (0.0, 3.0, 0.4))})

    diagnostics = hand_selection.combo_diagnostics("AA", node)

    assert diagnostics.most_used_index == 1
    assert not diagnostics.passes
    assert "out of range" in diagnostics.reason
    assert hand_selection.combo_diagnostics("KK", node).reason == "hand not in node"


def test_weighted_action_never_picks_zero_weight() -> None:
    rng = random.Random(0)
    picks = {hand_selection.select_weighted_action((0.0, 0.3, 0.0, 0.7), rng) for _ in range(200)}
    assert picks == {1, 3}


def test_weighted_action_uniform_when_nothing_played() -> None:
    rng = random.Random(0)
    picks = {hand_selection.select_weighted_action((0.0, 0.0, 0.0), rng) for _ in range(200)}
    assert picks == {0, 1, 2}
    with pytest.raises(ValueError):
        hand_selection.select_weighted_action((), rng)
