"""Kwazam game engine: state, rules, board, notation."""

from kwazam.game.state import GameState, Side, PieceKind, Orientation, Piece, MoveStep
from kwazam.game.rules import (
    MoveResult, GameOverError, is_legal, apply_move, legal_destinations,
    generate_legal_moves, transform_pieces, check_winner,
)
from kwazam.game.board import Board, STARTING_POSITIONS, render_board
from kwazam.game.notation import move_to_record, record_to_move, parse_move_input

__all__ = [
    "GameState", "Side", "PieceKind", "Orientation", "Piece", "MoveStep",
    "MoveResult", "GameOverError", "is_legal", "apply_move", "legal_destinations",
    "generate_legal_moves", "transform_pieces", "check_winner",
    "Board", "STARTING_POSITIONS", "render_board",
    "move_to_record", "record_to_move", "parse_move_input",
]
