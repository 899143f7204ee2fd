from __future__ import annotations

import random
from collections.abc import Iterable, Sequence

RANKS = "AKQJT98765432"
SUITS = "shdc"  # spades, hearts, diamonds, clubs

ComboCatalog = Sequence[str] | Sequence[Sequence[str]]


def hand_matrix() -> list[list[str]]:
    """13x13 grid of hand labels: pairs on the diagonal, suited above, offsuit below."""

    grid: list[list[str]] = []
    for i, high in enumerate(RANKS):
        row: list[str] = []
        for j, low in enumerate(RANKS):
            if i == j:
                row.append(f"{high}{low}")
            elif i < j:
                row.append(f"{high}{low}s")
            else:
                row.append(f"{low}{high}o")
        grid.append(row)
    return grid


def all_hand_labels() -> list[str]:
    return [label for row in hand_matrix() for label in row]


def combos_for_hand(label: str) -> list[str]:
    if len(label) < 2:
        return []
    r1, r2 = label[0], label[1]
    if r1 == r2:
        # Suits in alphabetical order for a stable catalog (cdhs).
        ordered = sorted(SUITS)
        return [f"{r1}{s1}{r2}{s2}" for i, s1 in enumerate(ordered) for s2 in ordered[i + 1 :]]
    if len(label) == 3 and label[2] == "s":
        return [f"{r1}{suit}{r2}{suit}" for suit in SUITS]
    if len(label) == 3 and label[2] == "o":
        return [f"{r1}{s1}{r2}{s2}" for s1 in SUITS for s2 in SUITS if s1 != s2]
    return []


def max_combos(label: str) -> int:
    if len(label) < 2:
        return 0
    if label[0] == label[1]:
        return 6
    if len(label) > 2 and label[2] == "s":
        return 4
    if len(label) > 2 and label[2] == "o":
        return 12
    return 0


def all_combos() -> list[list[str]]:
    """Default combo catalog, grouped per hand label (1326 combos)."""

    return [combos_for_hand(label) for label in all_hand_labels()]


def flatten_combos(catalog: ComboCatalog) -> list[str]:
    flat: list[str] = []
    for entry in catalog:
        if isinstance(entry, str):
            flat.append(entry)
        else:
            flat.extend(entry)
    return flat


def hand_name_from_combo(combo: str) -> str:
    """``"AsKh"`` -> ``"AKo"``; ``"7s7h"`` -> ``"77"``; ``"AsKs"`` -> ``"AKs"``.

    Ranks are normalised high-first so ``"KhAs"`` also maps to ``"AKo"``.
    """

    rank1, suit1, rank2, suit2 = combo[0], combo[1], combo[2], combo[3]
    if rank1 == rank2:
        return f"{rank1}{rank2}"
    if RANKS.index(rank1) > RANKS.index(rank2):
        rank1, rank2 = rank2, rank1
    if suit1 == suit2:
        return f"{rank1}{rank2}s"
    return f"{rank1}{rank2}o"


def combo_cards(combo: str) -> tuple[str, str]:
    return combo[:2], combo[2:4]


def deal_unique_combos(labels: Iterable[str], rng: random.Random) -> list[str]:
    """Deal one combo per hand label without reusing a card.

    A label with no compatible combo left gets an empty string.
    """

    used: set[str] = set()
    dealt: list[str] = []
    for label in labels:
        available = [combo for combo in combos_for_hand(label) if not used.intersection(combo_cards(combo))]
        if not available:
            dealt.append("")
            continue
        chosen = rng.choice(available)
        dealt.append(chosen)
        used.update(combo_cards(chosen))
    return dealt
