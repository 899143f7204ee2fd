from __future__ import annotations

from gtodrill.dynamic import seating


def test_position_tables() -> None:
    assert seating.player_positions(6) == ("LJ", "HJ", "CO", "BTN", "SB", "BB")
    assert seating.seat_label(0, 2) == "BTN"
    assert seating.seat_label(3, 12) == "P4"


def test_role_seats_heads_up_and_full_ring() -> None:
    assert seating.sb_seat(2) == 0
    assert seating.btn_seat(2) == 0
    assert seating.bb_seat(9) == 8
    assert seating.co_seat(5) is None
    assert seating.hj_seat(9) == 4


def test_position_name_matches_table_labels() -> None:
    for players in range(2, 10):
        assert [seating.position_name(seat, players) for seat in range(players)] == [
            seating.seat_label(seat, players) for seat in range(players)
        ]
    assert seating.position_name(1, 5) == "CO"
    assert seating.position_name(4, 9) == "HJ"


def test_position_name_falls_back_to_utg_offsets() -> None:
    assert seating.position_name(0, 12) == "UTG"
    assert seating.position_name(2, 12) == "UTG+2"
    assert seating.position_name(8, 12) == "CO"
    assert seating.position_name(11, 12) == "BB"


def test_hero_seat_pools() -> None:
    assert seating.rfi_hero_seats(6) == [0, 1, 2, 3, 4]
    assert seating.facing_hero_seats(4) == [1, 2, 3]
    assert seating.multiway_hero_seats(3) == [2]
    assert seating.multiway_hero_seats(4) == [2, 3]
    assert seating.multiway_hero_seats(5) == [4, 3, 2]
    assert seating.multiway_hero_seats(8) == [7, 6, 5, 4]
