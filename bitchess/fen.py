"""Reading and writing positions in Forsyth-Edwards Notation."""

from __future__ import annotations

import re
from typing import List

from bitchess.position import Position
from bitchess.types import (
    CastlingRights,
    Color,
    InvalidFenError,
    PieceType,
    parse_square,
    square,
    square_name,
    square_rank,
)

_COUNTER = re.compile(r"\+?[0-9]+")
_COUNTER_MAX = 0xFFFF
_DIGITS = "0123456789"


def _parse_counter(text: str, what: str) -> int:
    if not _COUNTER.fullmatch(text):
        raise InvalidFenError(f"invalid {what}: {text!r}")
    value = int(text)
    if value > _COUNTER_MAX:
        raise InvalidFenError(f"invalid {what}: {text!r}")
    return value


def _parse_placement(pos: Position, placement: str) -> None:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidFenError(f"expected 8 ranks, got {len(ranks)}")

    for rank_index, rank_text in enumerate(ranks):
        rank = 7 - rank_index
        file = 0
        for ch in rank_text:
            if file > 7:
                raise InvalidFenError(f"too many squares in rank {rank + 1}")
            if ch in _DIGITS:
                count = int(ch)
                if not 1 <= count <= 8:
                    raise InvalidFenError(
                        f"invalid empty count {ch!r} in rank {rank + 1}"
                    )
                file += count
                continue
            try:
                color, piece = PieceType.from_symbol(ch)
            except ValueError:
                raise InvalidFenError(
                    f"invalid character {ch!r} in piece placement"
                ) from None
            pos.put_piece(square(file, rank), color, piece)
            file += 1
        if file != 8:
            raise InvalidFenError(
                f"rank {rank + 1} has {file} squares instead of 8"
            )

    for color in Color:
        kings = pos.bb(color, PieceType.KING).bit_count()
        if kings != 1:
            raise InvalidFenError(f"{color} has {kings} kings (expected 1)")


def parse_fen(fen: str) -> Position:
    """Parse a six-field FEN string into a Position.

    Raises InvalidFenError if any field is malformed or either side does
    not have exactly one king.
    """
    fields = fen.split()
    if len(fields) != 6:
        raise InvalidFenError(f"expected 6 fields, got {len(fields)}")
    placement, side, castling, ep, halfmove, fullmove = fields

    pos = Position.empty()
    _parse_placement(pos, placement)

    if side == "w":
        pos.side_to_move = Color.WHITE
    elif side == "b":
        pos.side_to_move = Color.BLACK
    else:
        raise InvalidFenError(f"invalid side to move: {side!r}")

    try:
        pos.castling_rights = CastlingRights.from_fen(castling)
    except InvalidFenError:
        raise InvalidFenError(f"invalid castling string: {castling!r}") from None

    if ep != "-":
        try:
            ep_sq = parse_square(ep)
        except ValueError:
            raise InvalidFenError(f"invalid en passant square: {ep!r}") from None
        if square_rank(ep_sq) not in (2, 5):
            raise InvalidFenError(f"en passant square {ep} is not on rank 3 or 6")
        pos.en_passant = ep_sq

    pos.halfmove_clock = _parse_counter(halfmove, "halfmove clock")
    pos.fullmove_number = _parse_counter(fullmove, "fullmove number")
    if pos.fullmove_number == 0:
        raise InvalidFenError("fullmove number must be >= 1")

    pos.zobrist_hash = pos.compute_zobrist()
    pos.assert_consistent()
    return pos


def format_fen(position: Position) -> str:
    """Render a Position as a six-field FEN string."""
    rows: List[str] = []
    for rank in range(7, -1, -1):
        row = []
        empty = 0
        for file in range(8):
            occupant = position.piece_at(square(file, rank))
            if occupant is None:
                empty += 1
                continue
            if empty:
                row.append(str(empty))
                empty = 0
            color, piece = occupant
            row.append(piece.symbol(color))
        if empty:
            row.append(str(empty))
        rows.append("".join(row))

    side = "w" if position.side_to_move is Color.WHITE else "b"
    ep = "-" if position.en_passant is None else square_name(position.en_passant)
    return " ".join(
        (
            "/".join(rows),
            side,
            CastlingRights(position.castling_rights).to_fen(),
            ep,
            str(position.halfmove_clock),
            str(position.fullmove_number),
        )
    )