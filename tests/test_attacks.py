import pytest

from bitchess.attacks import (
    BISHOP_DELTAS,
    ROOK_DELTAS,
    bishop_mask,
    enumerate_subsets,
    rook_mask,
    sliding_attacks,
    tables,
)
from bitchess.types import Color, bit, parse_square, popcount


def sq(name):
    return parse_square(name)


def is_set(bb, name):
    return bool(bb & bit(sq(name)))


def test_knight_center_attacks():
    attacks = tables().knight_attacks(sq("e4"))
    assert popcount(attacks) == 8
    for name in ["d2", "f2", "c3", "g3", "c5", "g5", "d6", "f6"]:
        assert is_set(attacks, name), name


def test_knight_corner_attacks():
    attacks = tables().knight_attacks(sq("a1"))
    assert popcount(attacks) == 2
    assert is_set(attacks, "b3")
    assert is_set(attacks, "c2")


def test_knight_edge_attacks():
    assert popcount(tables().knight_attacks(sq("a4"))) == 4


def test_king_center_attacks():
    assert popcount(tables().king_attacks(sq("e4"))) == 8


def test_king_corner_attacks():
    assert popcount(tables().king_attacks(sq("a1"))) == 3


def test_white_pawn_attacks():
    atk = tables().pawn_attacks(Color.WHITE, sq("e4"))
    assert popcount(atk) == 2
    assert is_set(atk, "d5")
    assert is_set(atk, "f5")


def test_black_pawn_attacks():
    atk = tables().pawn_attacks(Color.BLACK, sq("e4"))
    assert popcount(atk) == 2
    assert is_set(atk, "d3")
    assert is_set(atk, "f3")


def test_pawn_attacks_a_file():
    atk = tables().pawn_attacks(Color.WHITE, sq("a2"))
    assert popcount(atk) == 1
    assert is_set(atk, "b3")


def test_pawn_attacks_h_file():
    atk = tables().pawn_attacks(Color.WHITE, sq("h2"))
    assert popcount(atk) == 1
    assert is_set(atk, "g3")


def test_pawn_attacks_off_board_are_empty():
    assert tables().pawn_attacks(Color.WHITE, sq("e8")) == 0
    assert tables().pawn_attacks(Color.BLACK, sq("e1")) == 0


def test_rook_attacks_empty_board():
    assert popcount(tables().rook_attacks(sq("e4"), 0)) == 14


def test_rook_attacks_blocked():
    attacks = tables().rook_attacks(sq("e4"), bit(sq("e6")))
    assert is_set(attacks, "e5")
    assert is_set(attacks, "e6")
    assert not is_set(attacks, "e7")


def test_rook_attacks_corner():
    assert popcount(tables().rook_attacks(sq("a1"), 0)) == 14


def test_bishop_attacks_empty_board():
    assert popcount(tables().bishop_attacks(sq("e4"), 0)) == 13


def test_bishop_attacks_blocked():
    attacks = tables().bishop_attacks(sq("e4"), bit(sq("c6")))
    assert is_set(attacks, "d5")
    assert is_set(attacks, "c6")
    assert not is_set(attacks, "b7")


def test_bishop_attacks_corner():
    assert popcount(tables().bishop_attacks(sq("a1"), 0)) == 7


def test_queen_attacks_empty_board():
    assert popcount(tables().queen_attacks(sq("e4"), 0)) == 27


def test_all_knight_tables_populated():
    t = tables()
    for s in range(64):
        assert popcount(t.knight[s]) >= 2, s


def test_all_king_tables_populated():
    t = tables()
    for s in range(64):
        assert popcount(t.king[s]) >= 3, s


def test_rook_lookup_matches_ray_walk_for_all_subsets():
    t = tables()
    a1 = sq("a1")
    for blockers in enumerate_subsets(rook_mask(a1)):
        assert t.rook_attacks(a1, blockers) == sliding_attacks(a1, blockers, ROOK_DELTAS)


def test_bishop_lookup_matches_ray_walk_for_all_subsets():
    t = tables()
    d4 = sq("d4")
    for blockers in enumerate_subsets(bishop_mask(d4)):
        assert t.bishop_attacks(d4, blockers) == sliding_attacks(
            d4, blockers, BISHOP_DELTAS
        )


def test_edge_blockers_do_not_change_rook_attacks():
    t = tables()
    e4 = sq("e4")
    edges = bit(sq("e8")) | bit(sq("e1")) | bit(sq("a4")) | bit(sq("h4"))
    assert t.rook_attacks(e4, edges) == t.rook_attacks(e4, 0)


@pytest.mark.parametrize("name", ["a1", "e4", "h8", "d1"])
def test_enumerate_subsets_count_and_coverage(name):
    mask = rook_mask(sq(name))
    subsets = list(enumerate_subsets(mask))
    assert len(subsets) == 2 ** popcount(mask)
    assert len(set(subsets)) == len(subsets)
    assert subsets[0] == 0
    assert all(s & ~mask == 0 for s in subsets)


def test_masks_exclude_own_square():
    for s in range(64):
        assert (rook_mask(s) & bit(s)) == 0
        assert (bishop_mask(s) & bit(s)) == 0
    assert popcount(rook_mask(sq("a1"))) == 12
    assert popcount(bishop_mask(sq("a1"))) == 6


def test_tables_is_shared():
    first = tables()
    second = tables()
    assert first is second
    assert popcount(second.rook_attacks(sq("a1"), 0)) == 14