"""Game state representation for Kwazam."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from kwazam.game.board import Board, STARTING_POSITIONS


class Side(IntEnum):
    BLUE = 0
    RED = 1

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def opponent(self) -> Side:
        return Side(1 - self)


class PieceKind(IntEnum):
    RAM = 0
    BIZ = 1
    TOR = 2
    XOR = 3
    SAU = 4

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class Orientation(IntEnum):
    FORWARD = 0
    REVERSED = 1


# Map character codes to PieceKind
PIECE_CHARS = {
    "R": PieceKind.RAM,
    "B": PieceKind.BIZ,
    "T": PieceKind.TOR,
    "X": PieceKind.XOR,
    "S": PieceKind.SAU,
}
PIECE_NAMES = {v: k for k, v in PIECE_CHARS.items()}


@dataclass
class Piece:
    kind: PieceKind
    side: Side
    orientation: Orientation = Orientation.FORWARD

    @property
    def char(self) -> str:
        return PIECE_NAMES[self.kind]

    @property
    def is_reversed(self) -> bool:
        return self.orientation == Orientation.REVERSED

    def flip(self):
        """Turn a Ram around. Only the rules engine calls this, after a move."""
        self.orientation = Orientation(1 - self.orientation)

    def copy(self) -> Piece:
        return Piece(self.kind, self.side, self.orientation)


@dataclass
class MoveStep:
    """Move a piece from one square to another."""
    from_rc: tuple[int, int]
    to_rc: tuple[int, int]
    is_capture: bool = False

    def __eq__(self, other):
        if not isinstance(other, MoveStep):
            return NotImplemented
        return self.from_rc == other.from_rc and self.to_rc == other.to_rc

    def __hash__(self):
        return hash(("move", self.from_rc, self.to_rc))


class GameState:
    """Complete game state for Kwazam.

    One instance per game. ``turn_counter`` counts applied, non-terminating
    moves; ``move_history`` holds one human-readable line per such move.
    """

    def __init__(self, setup: bool = True):
        self.board = Board()
        self.turn_owner: Side = Side.BLUE
        self.turn_counter: int = 0
        self.done: bool = False
        self.winner: Optional[Side] = None
        self.move_history: list[str] = []
        if setup:
            self._setup_starting_position()

    @classmethod
    def empty(cls) -> GameState:
        """A state with an empty board, for custom positions."""
        return cls(setup=False)

    def _setup_starting_position(self):
        """Place pieces in their starting positions."""
        for (row, col), (char, side) in STARTING_POSITIONS.items():
            self.board.place((row, col), Piece(PIECE_CHARS[char], Side(side)))

    def clone(self) -> GameState:
        """Return a deep copy of this state."""
        new = GameState.__new__(GameState)
        new.board = self.board.copy()
        new.turn_owner = self.turn_owner
        new.turn_counter = self.turn_counter
        new.done = self.done
        new.winner = self.winner
        new.move_history = list(self.move_history)
        return new

    def get_piece_at(self, row: int, col: int) -> Optional[Piece]:
        """Get piece at position, or None."""
        return self.board.piece_at((row, col))

    def get_position_key(self) -> tuple:
        """Return a hashable key of the grid and the side to move."""
        cells = []
        for row in self.board.grid:
            for cell in row:
                if cell is None:
                    cells.append(None)
                else:
                    cells.append((cell.kind, cell.side, cell.orientation))
        return (tuple(cells), self.turn_owner, self.turn_counter)

    def to_display_board(self) -> list[list]:
        """Convert to the format expected by render_board."""
        return [
            [None if cell is None else (cell.char, int(cell.side), cell.is_reversed)
             for cell in row]
            for row in self.board.grid
        ]
