"""Save and load Kwazam games.

A game is stored as two independent files:
  snapshot  compressed numpy archive (.npz) with the grid, side to move,
            and turn counter
  history   UTF-8 text, one move-history line per applied move

Loaders always build new objects, so a failed load never disturbs the
caller's current game.
"""

from __future__ import annotations

import logging
import os
import zipfile
from typing import Iterable, Optional

import numpy as np

from kwazam.game.board import BOARD_COLS, BOARD_ROWS
from kwazam.game.state import GameState, Orientation, Piece, PieceKind, Side

logger = logging.getLogger("kwazam.storage")

SNAPSHOT_VERSION = 1
# Kind code for an empty cell in the snapshot grid
EMPTY = -1
# Written next to the snapshot unless another path is given
HISTORY_FILENAME = "move_history.txt"

_SNAPSHOT_KEYS = ("version", "kinds", "sides", "orientations", "turn_owner", "turn_counter")


class StorageError(Exception):
    """A game file could not be written or read."""


class SnapshotError(StorageError):
    """Snapshot file unreadable, unwritable, or malformed."""


class HistoryError(StorageError):
    """Move-history file unreadable or unwritable."""


def _encode_board(state: GameState) -> dict[str, np.ndarray]:
    kinds = np.full((BOARD_ROWS, BOARD_COLS), EMPTY, dtype=np.int8)
    sides = np.zeros((BOARD_ROWS, BOARD_COLS), dtype=np.int8)
    orientations = np.zeros((BOARD_ROWS, BOARD_COLS), dtype=np.int8)
    for (row, col), piece in state.board.pieces():
        kinds[row, col] = int(piece.kind)
        sides[row, col] = int(piece.side)
        orientations[row, col] = int(piece.orientation)
    return {"kinds": kinds, "sides": sides, "orientations": orientations}


def save_snapshot(filepath: str, state: GameState):
    """Save the grid, side to move, and turn counter to a snapshot file.

    The move history is not part of the snapshot; see save_history.
    """
    arrays = _encode_board(state)
    try:
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        # Write through our own handle so numpy does not append ".npz"
        with open(filepath, "wb") as f:
            np.savez_compressed(
                f,
                version=np.int16(SNAPSHOT_VERSION),
                turn_owner=np.int8(int(state.turn_owner)),
                turn_counter=np.int64(state.turn_counter),
                **arrays,
            )
    except OSError as e:
        raise SnapshotError(f"Could not write snapshot {filepath}: {e}") from e
    logger.info("Saved snapshot to %s (move %d)", filepath, state.turn_counter)


def _read_snapshot_arrays(filepath: str) -> dict[str, np.ndarray]:
    try:
        with open(filepath, "rb") as f:
            data = np.load(f, allow_pickle=False)
            if not isinstance(data, np.lib.npyio.NpzFile):
                raise SnapshotError(f"{filepath} is not a snapshot archive")
            with data:
                missing = [k for k in _SNAPSHOT_KEYS if k not in data.files]
                if missing:
                    raise SnapshotError(
                        f"Snapshot {filepath} is missing {', '.join(missing)}")
                return {k: data[k] for k in _SNAPSHOT_KEYS}
    except (OSError, EOFError, ValueError, zipfile.BadZipFile) as e:
        raise SnapshotError(f"Could not read snapshot {filepath}: {e}") from e


def _scalar(arrays: dict[str, np.ndarray], key: str, filepath: str) -> int:
    arr = arrays[key]
    if arr.ndim != 0:
        raise SnapshotError(
            f"Snapshot {filepath}: {key} has shape {arr.shape}, expected a scalar")
    try:
        return int(arr)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Snapshot {filepath}: {key} is not an integer: {e}") from e


def _decode_state(arrays: dict[str, np.ndarray], filepath: str) -> GameState:
    version = _scalar(arrays, "version", filepath)
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version {version} in {filepath}")

    kinds, sides, orientations = arrays["kinds"], arrays["sides"], arrays["orientations"]
    for name, arr in (("kinds", kinds), ("sides", sides), ("orientations", orientations)):
        if arr.shape != (BOARD_ROWS, BOARD_COLS):
            raise SnapshotError(
                f"Snapshot {filepath}: {name} has shape {arr.shape}, "
                f"expected {(BOARD_ROWS, BOARD_COLS)}")

    state = GameState.empty()
    try:
        for row in range(BOARD_ROWS):
            for col in range(BOARD_COLS):
                kind = int(kinds[row, col])
                if kind == EMPTY:
                    continue
                state.board.place((row, col), Piece(
                    PieceKind(kind),
                    Side(int(sides[row, col])),
                    Orientation(int(orientations[row, col])),
                ))
        state.turn_owner = Side(_scalar(arrays, "turn_owner", filepath))
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Snapshot {filepath} holds an invalid value: {e}") from e

    turn_counter = _scalar(arrays, "turn_counter", filepath)
    if turn_counter < 0:
        raise SnapshotError(f"Snapshot {filepath} has negative turn counter {turn_counter}")
    state.turn_counter = turn_counter
    return state


def load_snapshot(filepath: str) -> GameState:
    """Load a snapshot into a fresh GameState with an empty move history.

    Raises:
        SnapshotError: If the file cannot be read or does not decode.
    """
    state = _decode_state(_read_snapshot_arrays(filepath), filepath)
    logger.info("Loaded snapshot from %s (move %d)", filepath, state.turn_counter)
    return state


def save_history(filepath: str, lines: Iterable[str]):
    """Write move-history lines, one per line, in order."""
    try:
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line)
                f.write("\n")
    except OSError as e:
        raise HistoryError(f"Could not write move history {filepath}: {e}") from e


def load_history(filepath: str) -> list[str]:
    """Read move-history lines. Lines are returned as-is, not validated."""
    try:
        with open(filepath, encoding="utf-8") as f:
            return f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise HistoryError(f"Could not read move history {filepath}: {e}") from e


def default_history_path(snapshot_path: str) -> str:
    return os.path.join(os.path.dirname(snapshot_path) or ".", HISTORY_FILENAME)


def save_game(state: GameState, snapshot_path: str,
              history_path: Optional[str] = None) -> str:
    """Save the snapshot and the move history.

    Returns:
        The path the history was written to.
    """
    if history_path is None:
        history_path = default_history_path(snapshot_path)
    save_snapshot(snapshot_path, state)
    save_history(history_path, state.move_history)
    return history_path


def load_game(snapshot_path: str, history_path: Optional[str] = None) -> GameState:
    """Load a snapshot and, when present, its move history.

    A missing history file leaves the loaded game with an empty history.
    """
    state = load_snapshot(snapshot_path)
    if history_path is None:
        history_path = default_history_path(snapshot_path)
    if os.path.exists(history_path):
        state.move_history = load_history(history_path)
    else:
        logger.info("No move history at %s", history_path)
    return state
