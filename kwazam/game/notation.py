"""Move-history lines and move input parsing.

History line format (one per applied move):
  Blue: Xor moves from (0,0) to (3,3)
  Red: Ram moves from (1,2) to (2,2)

Move input accepted from players:
  c7-c6      algebraic squares, columns a-e, rows 1-8
  c7 c6
  6,2 5,2    raw (row,col) coordinates
"""

from __future__ import annotations

import re

from kwazam.game.board import notation_to_rc, rc_to_notation
from kwazam.game.state import PieceKind, Side


def move_to_record(side: Side, kind: PieceKind,
                   start: tuple[int, int], end: tuple[int, int]) -> str:
    """Format one move-history line."""
    return (f"{side.display_name}: {kind.display_name} moves from "
            f"({start[0]},{start[1]}) to ({end[0]},{end[1]})")


# Regex patterns for parsing
_RECORD_RE = re.compile(
    r"^(Blue|Red): (Ram|Biz|Tor|Xor|Sau) moves from "
    r"\((\d+),(\d+)\) to \((\d+),(\d+)\)$"
)
_SQUARE_PAIR_RE = re.compile(r"^([a-e][1-8])\s*[- ]\s*([a-e][1-8])$")
_COORD_PAIR_RE = re.compile(r"^\(?(\d+)\s*,\s*(\d+)\)?\s+\(?(\d+)\s*,\s*(\d+)\)?$")


def record_to_move(line: str) -> tuple[Side, PieceKind, tuple[int, int], tuple[int, int]]:
    """Parse a move-history line.

    Returns:
        (side, kind, start, end)

    Raises:
        ValueError: If the line is not a move record.
    """
    m = _RECORD_RE.match(line.strip())
    if not m:
        raise ValueError(f"Invalid move record: {line!r}")
    side = Side[m.group(1).upper()]
    kind = PieceKind[m.group(2).upper()]
    start = (int(m.group(3)), int(m.group(4)))
    end = (int(m.group(5)), int(m.group(6)))
    return side, kind, start, end


def parse_move_input(text: str) -> tuple[tuple[int, int], tuple[int, int]]:
    """Parse a player's move input into (start, end).

    Raises:
        ValueError: If the input matches none of the accepted forms.
    """
    text = text.strip().lower()

    m = _SQUARE_PAIR_RE.match(text)
    if m:
        return notation_to_rc(m.group(1)), notation_to_rc(m.group(2))

    m = _COORD_PAIR_RE.match(text)
    if m:
        r1, c1, r2, c2 = (int(g) for g in m.groups())
        return (r1, c1), (r2, c2)

    raise ValueError(f"Invalid move input: {text!r}")
