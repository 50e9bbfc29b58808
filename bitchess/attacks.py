"""Attack tables for leaper and slider pieces.

Leaper attacks (knight, king, pawn) are precomputed for every square.
Slider attacks (rook, bishop) are keyed by the relevant blocker subset of
each square and memoised on first use, giving constant-time lookups after
warm-up without a magic-number search.
"""

from __future__ import annotations

from functools import cache
from typing import Dict, Iterator, List, Sequence, Tuple

from bitchess.types import Color

Delta = Tuple[int, int]

KNIGHT_OFFSETS: Tuple[Delta, ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)
KING_OFFSETS: Tuple[Delta, ...] = (
    (-1, -1), (-1, 0), (-1, 1), (0, -1),
    (0, 1), (1, -1), (1, 0), (1, 1),
)
ROOK_DELTAS: Tuple[Delta, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
BISHOP_DELTAS: Tuple[Delta, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def _on_board(rank: int, file: int) -> bool:
    return 0 <= rank < 8 and 0 <= file < 8


def _leaper_table(offsets: Sequence[Delta]) -> Tuple[int, ...]:
    table = []
    for sq in range(64):
        rank, file = sq >> 3, sq & 7
        bb = 0
        for dr, df in offsets:
            r, f = rank + dr, file + df
            if _on_board(r, f):
                bb |= 1 << (r * 8 + f)
        table.append(bb)
    return tuple(table)


def _pawn_table(color: Color) -> Tuple[int, ...]:
    forward = 1 if color is Color.WHITE else -1
    return _leaper_table(((forward, -1), (forward, 1)))


def enumerate_subsets(mask: int) -> Iterator[int]:
    """Yield every subset of ``mask``, starting with the empty set."""
    subset = 0
    while True:
        yield subset
        subset = (subset - mask) & mask
        if subset == 0:
            return


def sliding_attacks(sq: int, blockers: int, deltas: Sequence[Delta]) -> int:
    """Attacks along the rays ``deltas`` from ``sq``, stopping at (and including) blockers."""
    rank, file = sq >> 3, sq & 7
    attacks = 0
    for dr, df in deltas:
        r, f = rank + dr, file + df
        while _on_board(r, f):
            b = 1 << (r * 8 + f)
            attacks |= b
            if blockers & b:
                break
            r += dr
            f += df
    return attacks


def rook_mask(sq: int) -> int:
    """Relevant blocker squares for a rook on ``sq`` (board edges excluded)."""
    rank, file = sq >> 3, sq & 7
    mask = 0
    for f in range(1, 7):
        if f != file:
            mask |= 1 << (rank * 8 + f)
    for r in range(1, 7):
        if r != rank:
            mask |= 1 << (r * 8 + file)
    return mask


def bishop_mask(sq: int) -> int:
    """Relevant blocker squares for a bishop on ``sq`` (board edges excluded)."""
    rank, file = sq >> 3, sq & 7
    mask = 0
    for dr, df in BISHOP_DELTAS:
        r, f = rank + dr, file + df
        while 1 <= r < 7 and 1 <= f < 7:
            mask |= 1 << (r * 8 + f)
            r += dr
            f += df
    return mask


class _SliderTable:
    """Per-square attack lookup keyed by the relevant blockers."""

    def __init__(self, mask_fn, deltas: Sequence[Delta]) -> None:
        self.deltas = tuple(deltas)
        self.masks = tuple(mask_fn(sq) for sq in range(64))
        self._cache: List[Dict[int, int]] = [{} for _ in range(64)]

    def attacks(self, sq: int, occupied: int) -> int:
        blockers = occupied & self.masks[sq]
        entries = self._cache[sq]
        result = entries.get(blockers)
        if result is None:
            result = sliding_attacks(sq, blockers, self.deltas)
            entries[blockers] = result
        return result


class AttackTables:
    """Attack lookups for every piece type."""

    def __init__(self) -> None:
        self.knight: Tuple[int, ...] = _leaper_table(KNIGHT_OFFSETS)
        self.king: Tuple[int, ...] = _leaper_table(KING_OFFSETS)
        self.pawn: Tuple[Tuple[int, ...], Tuple[int, ...]] = (
            _pawn_table(Color.WHITE),
            _pawn_table(Color.BLACK),
        )
        self._rook = _SliderTable(rook_mask, ROOK_DELTAS)
        self._bishop = _SliderTable(bishop_mask, BISHOP_DELTAS)

    def knight_attacks(self, sq: int) -> int:
        return self.knight[sq]

    def king_attacks(self, sq: int) -> int:
        return self.king[sq]

    def pawn_attacks(self, color: Color, sq: int) -> int:
        """Squares attacked by a pawn of ``color`` standing on ``sq``."""
        return self.pawn[color][sq]

    def rook_attacks(self, sq: int, occupied: int) -> int:
        return self._rook.attacks(sq, occupied)

    def bishop_attacks(self, sq: int, occupied: int) -> int:
        return self._bishop.attacks(sq, occupied)

    def queen_attacks(self, sq: int, occupied: int) -> int:
        return self.rook_attacks(sq, occupied) | self.bishop_attacks(sq, occupied)


@cache
def tables() -> AttackTables:
    """The shared, lazily built attack tables."""
    return AttackTables()