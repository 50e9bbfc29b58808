# bitchess

A chess position model built on 64-bit bitboards, with attack tables,
Zobrist hashing, FEN reading and writing, and data types for a chat
subsystem that talks about games.

## What it does

- **Squares and pieces** (`bitchess.types`). Squares are integers from 0 (a1)
  to 63 (h8), in little-endian rank-file order; bitboards are plain integers.
  `Color`, `PieceType`, `CastlingRights`, `MoveFlag` and `Move` describe the
  rest of a position. `parse_square` and `square_name` convert between
  integers and algebraic names; `bit`, `popcount` and `iter_squares` work on
  bitboards. Engine errors derive from `ChessError`; a bad FEN raises
  `InvalidFenError`.
- **Attack tables** (`bitchess.attacks`). `tables()` returns the shared
  `AttackTables`. Knight, king and pawn attacks come from tables built once
  for every square. Rook, bishop and queen attacks are computed from the
  relevant blockers of each square and remembered, so repeated lookups are
  constant time. `rook_mask`, `bishop_mask`, `sliding_attacks` and
  `enumerate_subsets` are available on their own.
- **Zobrist keys** (`bitchess.zobrist`). `zobrist_keys()` returns a fixed-seed
  `ZobristKeys`, so hashes are the same in every process.
- **Positions** (`bitchess.position`). A `Position` holds twelve piece
  bitboards, occupancy, side to move, castling rights, the en-passant square,
  move clocks and an incremental Zobrist hash. `make_move` and `undo_move`
  apply and reverse a move; `make_null_move` and `undo_null_move` pass the
  turn. `is_square_attacked` and `is_in_check` answer attack questions, and
  `board_string` draws the board as text.
- **FEN** (`bitchess.fen`). `parse_fen` reads a FEN string and checks all six
  fields, including that each side has exactly one king. `format_fen` writes a
  position back out.
- **Chat data types** (`bitchess.chat_types`). `Message`, `Conversation`,
  `MoveContext`, `ChatInput` and `ChatOutput` carry chat messages and game
  context; `Message.to_dict` and `ChatOutput.to_dict` give JSON-ready mappings
  with camelCase keys. `ChatError` and its subclasses (`ChatDisabledError`,
  `UnsupportedProviderError`, `MissingApiKeyError`, `RequestFailedError`,
  `ResponseParseError`, `ProviderError`) describe chat failures.

## Installation

```
pip install bitchess
```

## Usage

```python
from bitchess.attacks import tables
from bitchess.fen import format_fen, parse_fen
from bitchess.types import Color, Move, MoveFlag, parse_square, popcount

pos = parse_fen("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
print(pos.board_string())
print(pos.is_in_check())
print(format_fen(pos))

e4 = parse_square("e4")
print(popcount(tables().queen_attacks(e4, 0)))  # 27 on an empty board
print(pos.is_square_attacked(e4, Color.BLACK))

# Castle kingside, then take it back.
castle = Move(parse_square("e1"), parse_square("g1"), MoveFlag.CASTLING)
undo = pos.make_move(castle)
print(format_fen(pos))
pos.undo_move(castle, undo)
```

An invalid FEN string raises `InvalidFenError`:

```python
from bitchess.fen import parse_fen
from bitchess.types import InvalidFenError

try:
    parse_fen("8/8/8/8/8/8/8/8 w - - 0 1")
except InvalidFenError as exc:
    print(exc)  # white has 0 kings (expected 1)
```

## What it does not do

- There is no move generator: the package does not list legal moves, so it
  cannot count positions or play a game by itself. `make_move` trusts the
  caller to pass a move that is legal in the position.
- There is no chat service and no client for any language-model API; the chat
  module holds only data types and errors.
- There is no server, no command-line program and no storage of games.

## Running the tests

```
pip install "bitchess[test]"
pytest
```