"""Core chess types: colours, pieces, squares, bitboards, castling rights and moves.

Squares are plain integers in LERF order (a1 = 0, b1 = 1, ... h1 = 7,
a2 = 8, ... h8 = 63). Bitboards are non-negative integers below 2**64.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"

FULL_BOARD = (1 << 64) - 1


class ChessError(Exception):
    """Base class for errors raised by the chess engine."""


class InvalidFenError(ChessError, ValueError):
    """A FEN string (or one of its fields) could not be parsed."""


class Color(enum.IntEnum):
    """Side colour; the value doubles as a table index."""

    WHITE = 0
    BLACK = 1

    def opponent(self) -> "Color":
        """Return the other colour."""
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    def __str__(self) -> str:
        return self.name.lower()


_PIECE_LETTERS = "pnbrqk"


class PieceType(enum.IntEnum):
    """Kind of chess piece; the value doubles as a table index."""

    PAWN = 0
    KNIGHT = 1
    BISHOP = 2
    ROOK = 3
    QUEEN = 4
    KING = 5

    def symbol(self, color: Color) -> str:
        """FEN letter for this piece: upper case for White, lower case for Black."""
        letter = _PIECE_LETTERS[self]
        return letter.upper() if color is Color.WHITE else letter

    @classmethod
    def from_symbol(cls, ch: str) -> Tuple[Color, "PieceType"]:
        """Parse a FEN piece letter into ``(colour, piece)``.

        Raises ValueError for anything that is not one of ``PNBRQKpnbrqk``.
        """
        if len(ch) != 1:
            raise ValueError(f"invalid piece character {ch!r}")
        index = _PIECE_LETTERS.find(ch.lower())
        if index < 0:
            raise ValueError(f"invalid piece character {ch!r}")
        color = Color.WHITE if ch.isupper() else Color.BLACK
        return color, cls(index)


class CastlingRights(enum.IntFlag):
    """Castling availability as a 4-bit set."""

    NONE = 0
    WHITE_KINGSIDE = 1
    WHITE_QUEENSIDE = 2
    BLACK_KINGSIDE = 4
    BLACK_QUEENSIDE = 8
    ALL = 15

    @classmethod
    def from_fen(cls, text: str) -> "CastlingRights":
        """Parse the FEN castling field (``KQkq`` subset or ``-``)."""
        if text == "-":
            return cls.NONE
        if not text:
            raise InvalidFenError("empty castling field")
        rights = cls.NONE
        for ch in text:
            flag = _CASTLING_LETTERS.get(ch)
            if flag is None:
                raise InvalidFenError(f"invalid castling string: {text!r}")
            rights |= flag
        return cls(rights)

    def to_fen(self) -> str:
        """Render as the FEN castling field, ``-`` when no rights remain."""
        text = "".join(ch for ch, flag in _CASTLING_LETTERS.items() if self & flag)
        return text or "-"

    def can_castle_kingside(self, color: Color) -> bool:
        flag = (
            CastlingRights.WHITE_KINGSIDE
            if color is Color.WHITE
            else CastlingRights.BLACK_KINGSIDE
        )
        return bool(self & flag)

    def can_castle_queenside(self, color: Color) -> bool:
        flag = (
            CastlingRights.WHITE_QUEENSIDE
            if color is Color.WHITE
            else CastlingRights.BLACK_QUEENSIDE
        )
        return bool(self & flag)


_CASTLING_LETTERS = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


class MoveFlag(enum.IntFlag):
    """Special-move markers carried by a Move."""

    QUIET = 0
    CAPTURE = 1
    EN_PASSANT = 2
    CASTLING = 4
    DOUBLE_PUSH = 8


def square(file: int, rank: int) -> int:
    """Square index from 0-based file and rank."""
    if not (0 <= file < 8 and 0 <= rank < 8):
        raise ValueError(f"file/rank out of range: ({file}, {rank})")
    return rank * 8 + file


def square_file(sq: int) -> int:
    """0-based file (a = 0) of a square."""
    return sq & 7


def square_rank(sq: int) -> int:
    """0-based rank (rank 1 = 0) of a square."""
    return sq >> 3


def parse_square(name: str) -> int:
    """Parse an algebraic square name such as ``e4``."""
    if len(name) != 2 or name[0] not in FILE_NAMES or name[1] not in RANK_NAMES:
        raise ValueError(f"invalid square: {name!r}")
    return square(FILE_NAMES.index(name[0]), RANK_NAMES.index(name[1]))


def square_name(sq: int) -> str:
    """Algebraic name of a square index."""
    if not 0 <= sq < 64:
        raise ValueError(f"square index out of range: {sq}")
    return FILE_NAMES[square_file(sq)] + RANK_NAMES[square_rank(sq)]


def bit(sq: int) -> int:
    """Bitboard with only ``sq`` set."""
    return 1 << sq


def popcount(bb: int) -> int:
    """Number of squares set in a bitboard."""
    return bb.bit_count()


def iter_squares(bb: int) -> Iterator[int]:
    """Yield the squares set in a bitboard, lowest first."""
    while bb:
        low = bb & -bb
        yield low.bit_length() - 1
        bb ^= low


@dataclass(frozen=True)
class Move:
    """A move from one square to another, with flags and optional promotion."""

    from_sq: int
    to_sq: int
    flags: MoveFlag = MoveFlag.QUIET
    promotion: Optional[PieceType] = None

    def is_capture(self) -> bool:
        return bool(self.flags & (MoveFlag.CAPTURE | MoveFlag.EN_PASSANT))

    def is_en_passant(self) -> bool:
        return bool(self.flags & MoveFlag.EN_PASSANT)

    def is_castling(self) -> bool:
        return bool(self.flags & MoveFlag.CASTLING)

    def is_double_push(self) -> bool:
        return bool(self.flags & MoveFlag.DOUBLE_PUSH)

    def __str__(self) -> str:
        text = square_name(self.from_sq) + square_name(self.to_sq)
        if self.promotion is not None:
            text += self.promotion.symbol(Color.BLACK)
        return text