"""Bitboard chess position: piece placement, game state and make/undo of moves.

Board layout is LERF: a1 = 0, b1 = 1, ... h1 = 7, a2 = 8, ... h8 = 63.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from bitchess.attacks import tables
from bitchess.types import (
    CastlingRights,
    ChessError,
    Color,
    Move,
    PieceType,
    bit,
    iter_squares,
    square,
    square_file,
    square_name,
)
from bitchess.zobrist import zobrist_keys

_BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Castling-rook moves keyed by the king's destination square.
_CASTLING_ROOKS = {
    6: (7, 5),     # white kingside: h1 -> f1
    2: (0, 3),     # white queenside: a1 -> d1
    62: (63, 61),  # black kingside: h8 -> f8
    58: (56, 59),  # black queenside: a8 -> d8
}


def _build_castling_mask() -> Tuple[int, ...]:
    full = int(CastlingRights.ALL)
    mask = [full] * 64
    mask[0] = full & ~CastlingRights.WHITE_QUEENSIDE
    mask[4] = full & ~(CastlingRights.WHITE_KINGSIDE | CastlingRights.WHITE_QUEENSIDE)
    mask[7] = full & ~CastlingRights.WHITE_KINGSIDE
    mask[56] = full & ~CastlingRights.BLACK_QUEENSIDE
    mask[60] = full & ~(CastlingRights.BLACK_KINGSIDE | CastlingRights.BLACK_QUEENSIDE)
    mask[63] = full & ~CastlingRights.BLACK_KINGSIDE
    return tuple(mask)


# Rights that survive a move touching each square (as origin or destination).
_CASTLING_MASK = _build_castling_mask()


def _castling_rook_squares(king_to: int) -> Tuple[int, int]:
    try:
        return _CASTLING_ROOKS[king_to]
    except KeyError:
        raise ChessError(
            f"invalid castling king destination: {square_name(king_to)}"
        ) from None


def _empty_pieces() -> List[List[int]]:
    return [[0] * len(PieceType) for _ in Color]


@dataclass(frozen=True)
class UndoInfo:
    """State saved by make_move so the move can be reversed."""

    captured_piece: Optional[PieceType]
    castling_rights: CastlingRights
    en_passant: Optional[int]
    halfmove_clock: int
    zobrist_hash: int


@dataclass(frozen=True)
class NullMoveUndo:
    """State saved by make_null_move."""

    en_passant: Optional[int]
    zobrist_hash: int


@dataclass
class Position:
    """A complete chess position held as bitboards."""

    pieces: List[List[int]] = field(default_factory=_empty_pieces)
    occupied: List[int] = field(default_factory=lambda: [0, 0])
    all_occupied: int = 0
    side_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = CastlingRights.NONE
    en_passant: Optional[int] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    zobrist_hash: int = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls) -> "Position":
        """A board with no pieces, White to move."""
        return cls()

    @classmethod
    def starting(cls) -> "Position":
        """The standard initial position."""
        pos = cls()
        for file, piece in enumerate(_BACK_RANK):
            pos.put_piece(square(file, 0), Color.WHITE, piece)
            pos.put_piece(square(file, 1), Color.WHITE, PieceType.PAWN)
            pos.put_piece(square(file, 6), Color.BLACK, PieceType.PAWN)
            pos.put_piece(square(file, 7), Color.BLACK, piece)
        pos.castling_rights = CastlingRights.ALL
        pos.zobrist_hash = pos.compute_zobrist()
        return pos

    def copy(self) -> "Position":
        """An independent copy of this position."""
        return Position(
            pieces=[list(row) for row in self.pieces],
            occupied=list(self.occupied),
            all_occupied=self.all_occupied,
            side_to_move=self.side_to_move,
            castling_rights=self.castling_rights,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            zobrist_hash=self.zobrist_hash,
        )

    # ------------------------------------------------------------------
    # Piece manipulation
    # ------------------------------------------------------------------

    def put_piece(self, sq: int, color: Color, piece: PieceType) -> None:
        """Place a piece without touching the hash."""
        b = bit(sq)
        self.pieces[color][piece] |= b
        self.occupied[color] |= b
        self.all_occupied |= b

    def remove_piece(self, sq: int, color: Color, piece: PieceType) -> None:
        """Remove a piece without touching the hash."""
        keep = ~bit(sq)
        self.pieces[color][piece] &= keep
        self.occupied[color] &= keep
        self.all_occupied &= keep

    def put_piece_hash(self, sq: int, color: Color, piece: PieceType) -> None:
        """Place a piece and update the hash."""
        self.put_piece(sq, color, piece)
        self.zobrist_hash ^= zobrist_keys().piece_key(color, piece, sq)

    def remove_piece_hash(self, sq: int, color: Color, piece: PieceType) -> None:
        """Remove a piece and update the hash."""
        self.remove_piece(sq, color, piece)
        self.zobrist_hash ^= zobrist_keys().piece_key(color, piece, sq)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def piece_at(self, sq: int) -> Optional[Tuple[Color, PieceType]]:
        """The ``(colour, piece)`` on a square, or None if it is empty."""
        b = bit(sq)
        if not self.all_occupied & b:
            return None
        color = Color.WHITE if self.occupied[Color.WHITE] & b else Color.BLACK
        for piece in PieceType:
            if self.pieces[color][piece] & b:
                return color, piece
        return None

    def bb(self, color: Color, piece: PieceType) -> int:
        """Bitboard of all pieces of one colour and type."""
        return self.pieces[color][piece]

    def friendly(self) -> int:
        """Pieces of the side to move."""
        return self.occupied[self.side_to_move]

    def enemy(self) -> int:
        """Pieces of the side not to move."""
        return self.occupied[self.side_to_move.opponent()]

    def king_sq(self, color: Color) -> int:
        """Square of the king of ``color``."""
        kings = self.pieces[color][PieceType.KING]
        if not kings:
            raise ChessError(f"{color} has no king")
        return (kings & -kings).bit_length() - 1

    def compute_zobrist(self) -> int:
        """Hash of the position computed from scratch."""
        zk = zobrist_keys()
        value = 0
        for color in Color:
            for piece in PieceType:
                for sq in iter_squares(self.pieces[color][piece]):
                    value ^= zk.piece_key(color, piece, sq)
        if self.side_to_move is Color.BLACK:
            value ^= zk.side_to_move
        value ^= zk.castling_key(self.castling_rights)
        if self.en_passant is not None:
            value ^= zk.ep_key(square_file(self.en_passant))
        return value

    def assert_consistent(self) -> None:
        """Raise AssertionError if the occupancy bitboards disagree with the pieces."""
        for color in Color:
            expected = 0
            for board in self.pieces[color]:
                expected |= board
            if self.occupied[color] != expected:
                raise AssertionError(f"occupancy mismatch for {color}")
        if self.all_occupied != self.occupied[0] | self.occupied[1]:
            raise AssertionError("all_occupied mismatch")

    # ------------------------------------------------------------------
    # Attack detection
    # ------------------------------------------------------------------

    def is_square_attacked(self, sq: int, by: Color) -> bool:
        """Whether any piece of colour ``by`` attacks ``sq``."""
        t = tables()
        occ = self.all_occupied
        own = self.pieces[by]
        if t.pawn_attacks(by.opponent(), sq) & own[PieceType.PAWN]:
            return True
        if t.knight_attacks(sq) & own[PieceType.KNIGHT]:
            return True
        if t.king_attacks(sq) & own[PieceType.KING]:
            return True
        if t.rook_attacks(sq, occ) & (own[PieceType.ROOK] | own[PieceType.QUEEN]):
            return True
        if t.bishop_attacks(sq, occ) & (own[PieceType.BISHOP] | own[PieceType.QUEEN]):
            return True
        return False

    def is_in_check(self) -> bool:
        """Whether the side to move is in check."""
        king = self.king_sq(self.side_to_move)
        return self.is_square_attacked(king, self.side_to_move.opponent())

    # ------------------------------------------------------------------
    # Make / undo
    # ------------------------------------------------------------------

    def make_move(self, mv: Move) -> UndoInfo:
        """Apply a (pseudo-legal) move and return what is needed to undo it."""
        zk = zobrist_keys()
        us = self.side_to_move
        them = us.opponent()

        saved_rights = self.castling_rights
        saved_ep = self.en_passant
        saved_halfmove = self.halfmove_clock
        saved_hash = self.zobrist_hash

        moving = self._piece_type_at(mv.from_sq, us)

        if self.en_passant is not None:
            self.zobrist_hash ^= zk.ep_key(square_file(self.en_passant))
        self.en_passant = None
        self.zobrist_hash ^= zk.castling_key(self.castling_rights)

        captured: Optional[PieceType] = None
        if mv.is_en_passant():
            cap_sq = mv.to_sq - 8 if us is Color.WHITE else mv.to_sq + 8
            self.remove_piece_hash(cap_sq, them, PieceType.PAWN)
            captured = PieceType.PAWN
        elif mv.is_capture():
            captured = self._piece_type_at(mv.to_sq, them)
            self.remove_piece_hash(mv.to_sq, them, captured)

        self.remove_piece_hash(mv.from_sq, us, moving)
        landing = mv.promotion if mv.promotion is not None else moving
        self.put_piece_hash(mv.to_sq, us, landing)

        if mv.is_castling():
            rook_from, rook_to = _castling_rook_squares(mv.to_sq)
            self.remove_piece_hash(rook_from, us, PieceType.ROOK)
            self.put_piece_hash(rook_to, us, PieceType.ROOK)

        self.castling_rights = CastlingRights(
            self.castling_rights & _CASTLING_MASK[mv.from_sq] & _CASTLING_MASK[mv.to_sq]
        )
        self.zobrist_hash ^= zk.castling_key(self.castling_rights)

        if mv.is_double_push():
            ep_sq = mv.from_sq + 8 if us is Color.WHITE else mv.from_sq - 8
            self.en_passant = ep_sq
            self.zobrist_hash ^= zk.ep_key(square_file(ep_sq))

        if moving is PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if us is Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = them
        self.zobrist_hash ^= zk.side_to_move

        return UndoInfo(
            captured_piece=captured,
            castling_rights=saved_rights,
            en_passant=saved_ep,
            halfmove_clock=saved_halfmove,
            zobrist_hash=saved_hash,
        )

    def undo_move(self, mv: Move, undo: UndoInfo) -> None:
        """Reverse a move made with make_move."""
        them = self.side_to_move
        us = them.opponent()
        self.side_to_move = us

        if mv.promotion is not None:
            landing = mv.promotion
            original = PieceType.PAWN
        else:
            landing = original = self._piece_type_at(mv.to_sq, us)

        self.remove_piece(mv.to_sq, us, landing)
        self.put_piece(mv.from_sq, us, original)

        if mv.is_en_passant():
            cap_sq = mv.to_sq - 8 if us is Color.WHITE else mv.to_sq + 8
            self.put_piece(cap_sq, them, PieceType.PAWN)
        elif undo.captured_piece is not None:
            self.put_piece(mv.to_sq, them, undo.captured_piece)

        if mv.is_castling():
            rook_from, rook_to = _castling_rook_squares(mv.to_sq)
            self.remove_piece(rook_to, us, PieceType.ROOK)
            self.put_piece(rook_from, us, PieceType.ROOK)

        self.castling_rights = undo.castling_rights
        self.en_passant = undo.en_passant
        self.halfmove_clock = undo.halfmove_clock
        self.zobrist_hash = undo.zobrist_hash

        if us is Color.BLACK:
            self.fullmove_number -= 1

    def make_null_move(self) -> NullMoveUndo:
        """Pass the turn without moving a piece."""
        zk = zobrist_keys()
        undo = NullMoveUndo(en_passant=self.en_passant, zobrist_hash=self.zobrist_hash)
        if self.en_passant is not None:
            self.zobrist_hash ^= zk.ep_key(square_file(self.en_passant))
            self.en_passant = None
        self.side_to_move = self.side_to_move.opponent()
        self.zobrist_hash ^= zk.side_to_move
        return undo

    def undo_null_move(self, undo: NullMoveUndo) -> None:
        """Reverse a null move."""
        self.side_to_move = self.side_to_move.opponent()
        self.en_passant = undo.en_passant
        self.zobrist_hash = undo.zobrist_hash

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def board_string(self) -> str:
        """Text grid of the board, rank 8 on top, with file labels below."""
        lines = []
        for rank in range(7, -1, -1):
            cells = []
            for file in range(8):
                occupant = self.piece_at(square(file, rank))
                cells.append("." if occupant is None else occupant[1].symbol(occupant[0]))
            lines.append(f"{rank + 1} " + " ".join(cells))
        lines.append("  a b c d e f g h")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.board_string()

    def _piece_type_at(self, sq: int, color: Color) -> PieceType:
        b = bit(sq)
        for piece in PieceType:
            if self.pieces[color][piece] & b:
                return piece
        raise ChessError(
            f"no {color} piece found on {square_name(sq)}\n{self.board_string()}"
        )