from __future__ import annotations

import random

import pytest

from gtodrill.dynamic import cards


def test_catalog_has_every_combo_once() -> None:
    flat = cards.flatten_combos(cards.all_combos())
    assert len(cards.all_hand_labels()) == 169
    assert len(flat) == 1326
    assert len(set(flat)) == 1326


@pytest.mark.parametrize(("label", "count"), [("AA", 6), ("AKs", 4), ("AKo", 12), ("", 0)])
def test_combo_counts(label: str, count: int) -> None:
    assert len(cards.combos_for_hand(label)) == count
    assert cards.max_combos(label) == count


@pytest.mark.parametrize(
    ("combo", "label"),
    [("AsKh", "AKo"), ("KhAs", "AKo"), ("AsKs", "AKs"), ("7s7h", "77"), ("2c9c", "92s")],
)
def test_hand_name_from_combo(combo: str, label: str) -> None:
    assert cards.hand_name_from_combo(combo) == label


def test_every_catalog_combo_maps_back_to_its_label() -> None:
    for label in cards.all_hand_labels():
        assert {cards.hand_name_from_combo(combo) for combo in cards.combos_for_hand(label)} == {label}


def test_deal_unique_combos_never_reuses_a_card() -> None:
    dealt = cards.deal_unique_combos(["AA", "AKs", "AA", "AA"], random.Random(3))

    used = [card for combo in dealt if combo for card in cards.combo_cards(combo)]
    assert len(used) == len(set(used))
    # four aces cover at most two pairs of aces
    assert dealt.count("") >= 1


def test_flatten_accepts_flat_catalog() -> None:
    assert cards.flatten_combos(["AsAh", "KsKh"]) == ["AsAh", "KsKh"]
