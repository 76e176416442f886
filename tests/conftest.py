"""Shared test fixtures for Kwazam engine tests."""

import pytest

from kwazam.game.state import GameState, Orientation, Piece, PieceKind, Side


@pytest.fixture
def custom_state():
    """Build a state from {(row, col): (kind, side)} or (kind, side, orientation).

    The board starts empty, so tests only see the pieces they place.
    """
    def _build(pieces: dict, turn_owner: Side = Side.BLUE, turn_counter: int = 0) -> GameState:
        state = GameState.empty()
        for rc, entry in pieces.items():
            kind, side = entry[0], entry[1]
            orientation = entry[2] if len(entry) > 2 else Orientation.FORWARD
            state.board.place(rc, Piece(kind, side, orientation))
        state.turn_owner = turn_owner
        state.turn_counter = turn_counter
        return state

    return _build


@pytest.fixture
def two_saus():
    """The two Sau pieces, far from the middle of the board."""
    return {
        (7, 0): (PieceKind.SAU, Side.BLUE),
        (0, 4): (PieceKind.SAU, Side.RED),
    }
