"""Move legality, move execution, transformation, and the win condition.

Kwazam rules:
  Ram  one square forward; turns around on reaching either back rank.
  Biz  L-shaped leap (|dr| * |dc| == 2), the only piece that jumps.
  Tor  any distance along a row or column.
  Xor  any distance along a diagonal.
  Sau  one square in any direction. Capturing it wins the game.
Every 4th applied move all Tors become Xors and all Xors become Tors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from kwazam.game.board import BACK_RANKS, BOARD_COLS, BOARD_ROWS, Board, in_bounds
from kwazam.game.notation import move_to_record
from kwazam.game.state import GameState, MoveStep, Orientation, Piece, PieceKind, Side

logger = logging.getLogger("kwazam.rules")

# Applied moves between Tor/Xor transformations (two full turn pairs)
TRANSFORM_INTERVAL = 4

# Tor <-> Xor
TRANSFORMS = {
    PieceKind.TOR: PieceKind.XOR,
    PieceKind.XOR: PieceKind.TOR,
}


class GameOverError(RuntimeError):
    """Raised when a move is applied to a game that has already ended."""


@dataclass
class MoveResult:
    """Outcome of apply_move.

    ``applied`` is False for an illegal move (state untouched). ``game_over``
    and ``winner`` are set when the move captured a Sau. ``record`` is the
    history line appended for a regular move.
    """
    applied: bool
    game_over: bool = False
    winner: Optional[Side] = None
    record: Optional[str] = None


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


def ram_direction(piece: Piece) -> int:
    """Row step of a Ram: -1 for Blue, +1 for Red, negated when reversed."""
    forward = -1 if piece.side == Side.BLUE else 1
    if piece.orientation == Orientation.REVERSED:
        return -forward
    return forward


def _is_aligned(dr: int, dc: int) -> bool:
    """True for a nonzero straight-line or diagonal displacement."""
    if dr == 0 and dc == 0:
        return False
    return dr == 0 or dc == 0 or abs(dr) == abs(dc)


def is_path_clear(board: Board, start: tuple[int, int], end: tuple[int, int]) -> bool:
    """Check that every square strictly between start and end is empty.

    The pair must be aligned; misaligned pairs are reported as blocked so the
    walk can never run past end.
    """
    dr, dc = end[0] - start[0], end[1] - start[1]
    if not _is_aligned(dr, dc):
        return False
    step_r, step_c = _sign(dr), _sign(dc)
    steps = max(abs(dr), abs(dc))
    for i in range(1, steps):
        if board.piece_at((start[0] + step_r * i, start[1] + step_c * i)) is not None:
            return False
    return True


def _target_open(board: Board, piece: Piece, end: tuple[int, int]) -> bool:
    target = board.piece_at(end)
    return target is None or target.side != piece.side


def is_shape_legal(piece: Piece, start: tuple[int, int], end: tuple[int, int],
                   board: Board) -> bool:
    """Kind-specific movement shape, ignoring intervening pieces.

    Path clearing is layered on separately by is_legal.
    """
    dr, dc = end[0] - start[0], end[1] - start[1]
    kind = piece.kind

    if kind == PieceKind.RAM:
        return dc == 0 and dr == ram_direction(piece) and _target_open(board, piece, end)
    elif kind == PieceKind.BIZ:
        return abs(dr) * abs(dc) == 2
    elif kind == PieceKind.TOR:
        return (dr == 0) != (dc == 0)
    elif kind == PieceKind.XOR:
        return dr != 0 and abs(dr) == abs(dc)
    elif kind == PieceKind.SAU:
        return (abs(dr) <= 1 and abs(dc) <= 1 and (dr, dc) != (0, 0)
                and _target_open(board, piece, end))

    raise ValueError(f"Unknown piece kind: {kind!r}")


def is_legal(state: GameState, start: tuple[int, int], end: tuple[int, int],
             enforce_turn: bool = False) -> bool:
    """Check whether moving the piece on start to end is legal.

    Pure with respect to the state. With enforce_turn the moving piece must
    also belong to the side to move.
    """
    if not in_bounds(*end) or not in_bounds(*start):
        return False

    board = state.board
    piece = board.piece_at(start)
    if piece is None:
        return False
    target = board.piece_at(end)
    if target is not None and target.side == piece.side:
        return False  # No self-capture
    if enforce_turn and piece.side != state.turn_owner:
        return False

    # Everything but the Biz needs a clear straight or diagonal path
    if piece.kind != PieceKind.BIZ and not is_path_clear(board, start, end):
        return False

    return is_shape_legal(piece, start, end, board)


def legal_destinations(state: GameState, start: tuple[int, int]) -> list[tuple[int, int]]:
    """All squares the piece on start may legally move to."""
    return [(row, col)
            for row in range(BOARD_ROWS)
            for col in range(BOARD_COLS)
            if is_legal(state, start, (row, col))]


def generate_legal_moves(state: GameState) -> list[MoveStep]:
    """Generate all legal moves for the side to move."""
    if state.done:
        return []

    moves: list[MoveStep] = []
    for start, piece in state.board.pieces():
        if piece.side != state.turn_owner:
            continue
        for end in legal_destinations(state, start):
            moves.append(MoveStep(start, end, is_capture=state.board.piece_at(end) is not None))
    return moves


def transform_pieces(board: Board) -> int:
    """Swap every Tor for a Xor and every Xor for a Tor, whole board at once.

    Returns the number of pieces transformed.
    """
    count = 0
    for (row, col), piece in list(board.pieces()):
        new_kind = TRANSFORMS.get(piece.kind)
        if new_kind is not None:
            board.place((row, col), Piece(new_kind, piece.side))
            count += 1
    return count


def apply_move(state: GameState, start: tuple[int, int], end: tuple[int, int],
               enforce_turn: bool = False) -> MoveResult:
    """Validate and apply a move, modifying the state in place.

    Capturing a Sau ends the game immediately: the turn counter, history,
    transformation, and side to move are left as they were.
    """
    if state.done:
        raise GameOverError(f"Game is over (winner: {state.winner!r})")

    if not is_legal(state, start, end, enforce_turn=enforce_turn):
        logger.debug("Rejected illegal move %s -> %s", start, end)
        return MoveResult(applied=False)

    board = state.board
    piece = board.piece_at(start)
    captured = board.move(start, end)

    if captured is not None and captured.kind == PieceKind.SAU:
        state.done = True
        state.winner = piece.side
        logger.info("%s captured the Sau, game over", piece.side.display_name)
        return MoveResult(applied=True, game_over=True, winner=piece.side)

    if piece.kind == PieceKind.RAM and end[0] in BACK_RANKS:
        piece.flip()

    state.turn_counter += 1
    if state.turn_counter % TRANSFORM_INTERVAL == 0:
        count = transform_pieces(board)
        logger.debug("Move %d: transformed %d Tor/Xor pieces", state.turn_counter, count)

    record = move_to_record(piece.side, piece.kind, start, end)
    state.move_history.append(record)

    state.turn_owner = state.turn_owner.opponent
    return MoveResult(applied=True, record=record)


def check_winner(state: GameState) -> tuple[bool, Optional[Side]]:
    """Check if the game is over.

    Returns (is_done, winner).
    """
    return state.done, state.winner
