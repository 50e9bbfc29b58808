"""Zobrist hashing keys.

Keys are drawn from a fixed-seed xorshift64 generator, so every process
produces the same hashes for the same positions.
"""

from __future__ import annotations

from functools import cache
from typing import Iterator, Tuple

from bitchess.types import CastlingRights, Color, PieceType

_MASK64 = (1 << 64) - 1
_SEED = 0x9E37_79B9_7F4A_7C15


def _xorshift64(seed: int) -> Iterator[int]:
    """Endless stream of non-zero 64-bit pseudo-random numbers."""
    state = seed & _MASK64
    while True:
        state ^= (state << 13) & _MASK64
        state ^= state >> 7
        state ^= (state << 17) & _MASK64
        yield state


class ZobristKeys:
    """Random keys for pieces, side to move, castling rights and en-passant files."""

    def __init__(self, seed: int = _SEED) -> None:
        if seed & _MASK64 == 0:
            raise ValueError("seed must be non-zero")
        rng = _xorshift64(seed)
        self.pieces: Tuple[Tuple[Tuple[int, ...], ...], ...] = tuple(
            tuple(tuple(next(rng) for _ in range(64)) for _ in PieceType)
            for _ in Color
        )
        self.side_to_move: int = next(rng)
        self.castling_rights: Tuple[int, ...] = tuple(next(rng) for _ in range(4))
        self.en_passant: Tuple[int, ...] = tuple(next(rng) for _ in range(8))
        self._castling = tuple(self._combine_castling(r) for r in range(16))

    def _combine_castling(self, rights: int) -> int:
        key = 0
        for index, right_key in enumerate(self.castling_rights):
            if rights & (1 << index):
                key ^= right_key
        return key

    def piece_key(self, color: Color, piece: PieceType, sq: int) -> int:
        """Key for ``piece`` of ``color`` standing on ``sq``."""
        if not 0 <= sq < 64:
            raise ValueError(f"square index out of range: {sq}")
        return self.pieces[color][piece][sq]

    def castling_key(self, rights: int) -> int:
        """Key for a whole castling-rights set (the XOR of its individual rights)."""
        value = int(rights)
        if not 0 <= value <= int(CastlingRights.ALL):
            raise ValueError(f"castling rights out of range: {value}")
        return self._castling[value]

    def ep_key(self, file: int) -> int:
        """Key for an en-passant target on the given 0-based file."""
        if not 0 <= file < 8:
            raise ValueError(f"file out of range: {file}")
        return self.en_passant[file]


@cache
def zobrist_keys() -> ZobristKeys:
    """The shared set of Zobrist keys."""
    return ZobristKeys()