import pytest

from bitchess.types import (
    CastlingRights,
    ChessError,
    Color,
    InvalidFenError,
    Move,
    MoveFlag,
    PieceType,
    bit,
    iter_squares,
    parse_square,
    popcount,
    square,
    square_file,
    square_name,
    square_rank,
)


def test_color_opponent_is_involution():
    assert Color.WHITE.opponent() is Color.BLACK
    assert Color.BLACK.opponent() is Color.WHITE
    assert Color.WHITE.opponent().opponent() is Color.WHITE
    assert Color.BLACK.opponent().opponent() is Color.BLACK


def test_color_str():
    assert str(Color.BLACK.opponent()) == "white"
    assert str(Color.WHITE.opponent()) == "black"


@pytest.mark.parametrize("piece", list(PieceType))
@pytest.mark.parametrize("color", list(Color))
def test_piece_symbol_round_trip(piece, color):
    assert PieceType.from_symbol(piece.symbol(color)) == (color, piece)


def test_piece_symbol_case():
    assert PieceType.KING.symbol(Color.WHITE) == "K"
    assert PieceType.KNIGHT.symbol(Color.BLACK) == "n"


@pytest.mark.parametrize("ch", ["x", "1", "", "KK", "/"])
def test_from_symbol_rejects_invalid(ch):
    with pytest.raises(ValueError):
        PieceType.from_symbol(ch)


@pytest.mark.parametrize("text", ["KQkq", "Kq", "kq", "KQ", "-"])
def test_castling_round_trip(text):
    assert CastlingRights.from_fen(text).to_fen() == text


def test_castling_all_and_none():
    assert CastlingRights.from_fen("KQkq") == CastlingRights.ALL
    assert CastlingRights.from_fen("-") == CastlingRights.NONE
    assert CastlingRights.NONE.to_fen() == "-"


def test_castling_only_black():
    rights = CastlingRights.from_fen("kq")
    assert not rights.can_castle_kingside(Color.WHITE)
    assert not rights.can_castle_queenside(Color.WHITE)
    assert rights.can_castle_kingside(Color.BLACK)
    assert rights.can_castle_queenside(Color.BLACK)


@pytest.mark.parametrize("text", ["XYZ", "", "KQkx"])
def test_castling_invalid(text):
    with pytest.raises(InvalidFenError):
        CastlingRights.from_fen(text)


def test_invalid_fen_error_hierarchy():
    with pytest.raises(ChessError):
        CastlingRights.from_fen("XYZ")


def test_square_corners():
    assert parse_square("a1") == 0
    assert parse_square("h8") == 63


def test_square_names_round_trip():
    for sq in range(64):
        assert parse_square(square_name(sq)) == sq
        assert square(square_file(sq), square_rank(sq)) == sq


@pytest.mark.parametrize("name", ["z9", "a0", "i1", "e", "e44"])
def test_parse_square_invalid(name):
    with pytest.raises(ValueError):
        parse_square(name)


def test_square_out_of_range():
    with pytest.raises(ValueError):
        square(8, 0)
    with pytest.raises(ValueError):
        square_name(64)


def test_rank_two_bitboard():
    bb = 0
    for name in ["a2", "b2", "c2", "d2", "e2", "f2", "g2", "h2"]:
        bb |= bit(parse_square(name))
    assert bb == 0x0000_0000_0000_FF00
    assert popcount(bb) == 8


def test_iter_squares_reconstructs_bitboard():
    bb = 0x0000_0000_0000_FF00 | bit(63) | bit(0)
    squares = list(iter_squares(bb))
    assert squares == sorted(squares)
    assert len(squares) == popcount(bb)
    total = 0
    for sq in squares:
        total |= bit(sq)
    assert total == bb


def test_iter_squares_empty():
    assert list(iter_squares(0)) == []


def test_move_flags():
    ep = Move(parse_square("e5"), parse_square("d6"), MoveFlag.EN_PASSANT)
    assert ep.is_en_passant()
    assert ep.is_capture()
    assert not ep.is_castling()

    push = Move(parse_square("e2"), parse_square("e4"), MoveFlag.DOUBLE_PUSH)
    assert push.is_double_push()
    assert not push.is_capture()

    castle = Move(parse_square("e1"), parse_square("g1"), MoveFlag.CASTLING)
    assert castle.is_castling()
    assert not castle.is_en_passant()


def test_move_str():
    assert str(Move(parse_square("e2"), parse_square("e4"))) == "e2e4"
    promo = Move(parse_square("a7"), parse_square("a8"), promotion=PieceType.QUEEN)
    assert str(promo) == "a7a8q"