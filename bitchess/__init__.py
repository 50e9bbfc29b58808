"""Bitboard chess positions, attack tables, Zobrist hashing, FEN handling and chat data types."""

__version__ = "0.2.0"