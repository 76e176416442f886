"""Board grid, board constants, starting layout, and text-based rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from kwazam.game.state import Piece

BOARD_ROWS = 8
BOARD_COLS = 5

# Rows where a Ram turns around
BACK_RANKS = (0, BOARD_ROWS - 1)

# Starting positions: dict mapping (row, col) -> (piece_kind_char, side)
# Red (side 1) on rows 0-1 (top), Blue (side 0) on rows 6-7 (bottom)
# 10 pieces per side: 1 Sau, 2 Biz, 1 Tor, 1 Xor, 5 Rams
STARTING_POSITIONS: dict[tuple[int, int], tuple[str, int]] = {
    # Red back rank: X B S B T
    (0, 0): ("X", 1),
    (0, 1): ("B", 1),
    (0, 2): ("S", 1),
    (0, 3): ("B", 1),
    (0, 4): ("T", 1),
    # Red front rank: 5 Rams
    (1, 0): ("R", 1),
    (1, 1): ("R", 1),
    (1, 2): ("R", 1),
    (1, 3): ("R", 1),
    (1, 4): ("R", 1),
    # Blue front rank: 5 Rams
    (6, 0): ("R", 0),
    (6, 1): ("R", 0),
    (6, 2): ("R", 0),
    (6, 3): ("R", 0),
    (6, 4): ("R", 0),
    # Blue back rank mirrors Red
    (7, 0): ("X", 0),
    (7, 1): ("B", 0),
    (7, 2): ("S", 0),
    (7, 3): ("B", 0),
    (7, 4): ("T", 0),
}

# Column labels for notation
COL_LABELS = "abcde"
# Row labels for notation (1-indexed, row 0 = "1", row 7 = "8")
ROW_LABELS = "12345678"


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_ROWS and 0 <= col < BOARD_COLS


class Board:
    """An 8x5 grid of optional pieces.

    Mutators are purely mechanical: they never check move legality, that is
    the job of ``kwazam.game.rules``. Coordinates are assumed in range.
    """

    def __init__(self):
        self.grid: list[list[Optional[Piece]]] = [
            [None] * BOARD_COLS for _ in range(BOARD_ROWS)
        ]

    def piece_at(self, coord: tuple[int, int]) -> Optional[Piece]:
        """Get piece at position, or None (also None when off the board)."""
        row, col = coord
        if in_bounds(row, col):
            return self.grid[row][col]
        return None

    def place(self, coord: tuple[int, int], piece: Piece):
        row, col = coord
        self.grid[row][col] = piece

    def remove(self, coord: tuple[int, int]) -> Optional[Piece]:
        row, col = coord
        piece = self.grid[row][col]
        self.grid[row][col] = None
        return piece

    def move(self, src: tuple[int, int], dst: tuple[int, int]) -> Optional[Piece]:
        """Relocate the piece at src to dst, returning whatever dst held."""
        piece = self.remove(src)
        displaced = self.remove(dst)
        self.place(dst, piece)
        return displaced

    def pieces(self) -> Iterator[tuple[tuple[int, int], Piece]]:
        """Yield ((row, col), piece) for every occupied cell, row-major."""
        for row in range(BOARD_ROWS):
            for col in range(BOARD_COLS):
                piece = self.grid[row][col]
                if piece is not None:
                    yield (row, col), piece

    def find(self, kind, side) -> list[tuple[int, int]]:
        """Return coordinates of all pieces with the given kind and side."""
        return [rc for rc, p in self.pieces() if p.kind == kind and p.side == side]

    def empty(self) -> bool:
        return next(self.pieces(), None) is None

    def copy(self) -> Board:
        """Return a deep copy; pieces are duplicated, never shared."""
        new = Board()
        for (row, col), piece in self.pieces():
            new.grid[row][col] = piece.copy()
        return new

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid


def rc_to_notation(row: int, col: int) -> str:
    """Convert (row, col) to algebraic notation like 'a1'."""
    return COL_LABELS[col] + ROW_LABELS[row]


def notation_to_rc(sq: str) -> tuple[int, int]:
    """Convert algebraic notation like 'a1' to (row, col)."""
    if len(sq) != 2 or sq[0] not in COL_LABELS or sq[1] not in ROW_LABELS:
        raise ValueError(f"Invalid square: {sq!r}")
    col = COL_LABELS.index(sq[0])
    row = ROW_LABELS.index(sq[1])
    return (row, col)


def render_board(board, turn_counter: int | None = None,
                 turn_owner: int | None = None, flipped: bool = False) -> str:
    """Render the board as a text string.

    Args:
        board: 8x5 list of lists. Each cell is None or
            (piece_kind_char, side, reversed).
        turn_counter: Optional number of moves applied so far.
        turn_owner: Optional side to move (0=Blue, 1=Red).
        flipped: Draw the board rotated 180 degrees (Red's point of view).
    """
    lines = []

    if turn_owner is not None:
        side_name = "Blue" if turn_owner == 0 else "Red"
        if turn_counter is not None:
            lines.append(f"Move {turn_counter} - {side_name} to move")
        else:
            lines.append(f"{side_name} to move")
    lines.append("")

    cols = list(range(BOARD_COLS))
    rows = list(range(BOARD_ROWS))
    # Row 0 (Red's back rank) is drawn at the top unless flipped
    if flipped:
        cols.reverse()
        rows.reverse()

    header = "    " + "   ".join(COL_LABELS[c] for c in cols)
    separator = "  +" + "---+" * BOARD_COLS

    lines.append(header)
    lines.append(separator)
    for row in rows:
        row_str = f"{row + 1} |"
        for col in cols:
            cell = board[row][col]
            if cell is not None:
                kind_char, side, reversed_ = cell
                # Lowercase for Red, uppercase for Blue
                display = kind_char if side == 0 else kind_char.lower()
                # Reversed Rams carry a tick
                row_str += f" {display}'|" if reversed_ else f" {display} |"
            else:
                row_str += "   |"
        row_str += f" {row + 1}"
        lines.append(row_str)
        lines.append(separator)
    lines.append(header)

    return "\n".join(lines)
