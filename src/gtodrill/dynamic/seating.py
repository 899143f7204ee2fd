"""Seat roles and position names shared across the trainer.

Seats are indexed in preflop action order.  The big blind is always the last
seat, the small blind the one before it and the button the one before that
(heads-up the button doubles as the small blind and sits at seat 0).
"""

from __future__ import annotations

BB = "BB"
SB = "SB"
BTN = "BTN"
CO = "CO"
HJ = "HJ"

_POSITION_NAMES: dict[int, tuple[str, ...]] = {
    9: ("UTG", "UTG1", "UTG2", "LJ", "HJ", "CO", "BTN", "SB", "BB"),
    8: ("UTG", "UTG1", "LJ", "HJ", "CO", "BTN", "SB", "BB"),
    7: ("UTG", "LJ", "HJ", "CO", "BTN", "SB", "BB"),
    6: ("LJ", "HJ", "CO", "BTN", "SB", "BB"),
    5: ("HJ", "CO", "BTN", "SB", "BB"),
    4: ("CO", "BTN", "SB", "BB"),
    3: ("BTN", "SB", "BB"),
    2: ("BTN", "BB"),
}


def player_positions(num_players: int) -> tuple[str, ...]:
    names = _POSITION_NAMES.get(num_players)
    if names is not None:
        return names
    return tuple(f"P{seat + 1}" for seat in range(num_players))


def seat_label(seat: int, num_players: int) -> str:
    names = player_positions(num_players)
    if 0 <= seat < len(names):
        return names[seat]
    return f"P{seat + 1}"


def bb_seat(num_players: int) -> int:
    return num_players - 1


def sb_seat(num_players: int) -> int:
    return 0 if num_players == 2 else num_players - 2


def btn_seat(num_players: int) -> int:
    return 0 if num_players == 2 else num_players - 3


def co_seat(num_players: int) -> int | None:
    return num_players - 4 if num_players >= 6 else None


def hj_seat(num_players: int) -> int | None:
    return num_players - 5 if num_players >= 7 else None


def position_name(seat: int, num_players: int) -> str:
    """Name used in logs.

    Known table sizes use the :func:`seat_label` names. Larger tables name the
    blind and late-position roles, else UTG offsets.
    """

    names = _POSITION_NAMES.get(num_players)
    if names is not None and 0 <= seat < num_players:
        return names[seat]
    if seat == bb_seat(num_players):
        return BB
    if seat == sb_seat(num_players):
        return SB
    if seat == btn_seat(num_players):
        return BTN
    if seat == co_seat(num_players):
        return CO
    if seat == hj_seat(num_players):
        return HJ
    return f"UTG+{seat}" if seat > 0 else "UTG"


def rfi_hero_seats(num_players: int) -> list[int]:
    bb = bb_seat(num_players)
    return [seat for seat in range(num_players) if seat != bb]


def facing_hero_seats(num_players: int) -> list[int]:
    """Hero seats for spots where someone must act first (vs Open / vs Shove)."""

    return list(range(1, num_players))


def multiway_hero_seats(num_players: int) -> list[int]:
    bb = bb_seat(num_players)
    if num_players <= 3:
        return [bb]
    if num_players == 4:
        return [sb_seat(num_players), bb]
    seats = [bb, sb_seat(num_players), btn_seat(num_players)]
    co = co_seat(num_players)
    if co is not None:
        seats.append(co)
    return seats
