#!/usr/bin/env python3
"""Interactive CLI for playing Kwazam, two humans at one terminal.

Usage:
    python scripts/play.py                          # New game
    python scripts/play.py --load saves/game.npz    # Continue a saved game
    python scripts/play.py --config configs/play.yaml --no-flip
"""

import argparse
import logging
import os
import sys

import yaml

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kwazam.game.state import GameState, Side
from kwazam.game.rules import apply_move, legal_destinations
from kwazam.game.board import render_board, notation_to_rc, rc_to_notation
from kwazam.game.notation import parse_move_input
from kwazam.data.storage import StorageError, load_game, save_game

logger = logging.getLogger("kwazam.play")

DEFAULT_CONFIG = {
    "storage": {
        "snapshot_path": "saves/kwazam.npz",
        "history_filename": "move_history.txt",
    },
    "display": {
        "flip_for_red": True,
    },
    "logging": {
        "level": "WARNING",
    },
}

HELP_TEXT = """Commands:
  c7-c6 | 6,2 5,2   move a piece (algebraic squares or row,col pairs)
  moves <square>    list legal destinations of the piece on <square>
  history           show the move history
  save [path]       save the game (snapshot + move history)
  load [path]       load a saved game, offering to save the current one first
  help              show this text
  quit              leave the game"""


def load_config(path: str | None) -> dict:
    """Read a YAML config and lay it over the defaults."""
    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    if path is None:
        return config
    with open(path) as f:
        user_config = yaml.safe_load(f) or {}
    for section, values in user_config.items():
        config.setdefault(section, {}).update(values or {})
    return config


def _history_path(config: dict, snapshot_path: str) -> str:
    return os.path.join(os.path.dirname(snapshot_path) or ".",
                        config["storage"]["history_filename"])


def _offer_save(state: GameState, load_path: str, config: dict, prompt) -> str:
    """Ask whether to save before loading. Returns a message if the load is off."""
    try:
        answer = prompt("Save the current game before loading? [y/n/c] ")
    except EOFError:
        answer = "c"
    answer = answer.strip().lower()
    if answer.startswith("c"):
        return "Load cancelled."
    if not answer.startswith("y"):
        return ""
    save_path = config["storage"]["snapshot_path"]
    if os.path.abspath(save_path) == os.path.abspath(load_path):
        return f"Not saving over {load_path} before loading it. Load cancelled."
    try:
        save_game(state, save_path, _history_path(config, save_path))
    except StorageError as e:
        return f"Failed to save game: {e}. Load cancelled."
    print(f"Game saved to {save_path}.")
    return ""


def display_state(state: GameState, config: dict) -> str:
    """Render the board from the point of view of the side to move."""
    flipped = config["display"]["flip_for_red"] and state.turn_owner == Side.RED
    return render_board(state.to_display_board(),
                        turn_counter=state.turn_counter,
                        turn_owner=int(state.turn_owner),
                        flipped=flipped)


def handle_command(state: GameState, line: str, config: dict,
                   prompt=None) -> tuple[GameState, str]:
    """Run one line of player input.

    Args:
        prompt: Optional callable asking the player a question (like input).
            When given, loading over a game in progress first offers to save it.

    Returns:
        The (possibly replaced) game state and a message for the player.
    """
    parts = line.strip().split()
    if not parts:
        return state, ""
    cmd = parts[0].lower()

    if cmd == "help":
        return state, HELP_TEXT

    if cmd == "history":
        if not state.move_history:
            return state, "No moves yet."
        return state, "\n".join(f"{i + 1:3d}. {rec}" for i, rec in enumerate(state.move_history))

    if cmd == "moves":
        if len(parts) != 2:
            return state, "Usage: moves <square>"
        try:
            start = notation_to_rc(parts[1].lower())
        except ValueError as e:
            return state, str(e)
        piece = state.board.piece_at(start)
        if piece is None or piece.side != state.turn_owner:
            return state, f"Select one of {state.turn_owner.display_name}'s pieces."
        dests = legal_destinations(state, start)
        if not dests:
            return state, f"No legal moves from {parts[1]}."
        return state, "Legal: " + " ".join(rc_to_notation(*rc) for rc in dests)

    if cmd == "save":
        snapshot_path = parts[1] if len(parts) > 1 else config["storage"]["snapshot_path"]
        try:
            save_game(state, snapshot_path, _history_path(config, snapshot_path))
        except StorageError as e:
            return state, f"Failed to save game: {e}"
        return state, f"Game saved to {snapshot_path}."

    if cmd == "load":
        snapshot_path = parts[1] if len(parts) > 1 else config["storage"]["snapshot_path"]
        if prompt is not None and state.move_history:
            cancelled = _offer_save(state, snapshot_path, config, prompt)
            if cancelled:
                return state, cancelled
        try:
            loaded = load_game(snapshot_path, _history_path(config, snapshot_path))
        except StorageError as e:
            return state, f"Failed to load game: {e}"
        return loaded, f"Game loaded from {snapshot_path}."

    try:
        start, end = parse_move_input(line)
    except ValueError:
        return state, "Unrecognised input. Type 'help' for commands."

    piece = state.board.piece_at(start)
    if piece is None or piece.side != state.turn_owner:
        return state, f"Select one of {state.turn_owner.display_name}'s pieces."

    result = apply_move(state, start, end, enforce_turn=True)
    if not result.applied:
        return state, "Invalid move!"
    if result.game_over:
        return state, f"Game Over! Winner: {result.winner.display_name}"
    return state, result.record


def play_game(state: GameState, config: dict, input_fn=input):
    """Play until a Sau is captured or the players quit."""
    print("=" * 40)
    print("  Kwazam Chess")
    print("=" * 40)
    print(HELP_TEXT)
    print()

    while not state.done:
        print(display_state(state, config))
        print()
        try:
            line = input_fn(f"{state.turn_owner.display_name}> ")
        except EOFError:
            print("Game aborted.")
            return state
        if line.strip().lower() in ("q", "quit"):
            print("Game aborted.")
            return state
        state, message = handle_command(state, line, config, prompt=input_fn)
        if message:
            print(message)

    print(display_state(state, config))
    print(f"Game ended after {state.turn_counter} moves")
    return state


def main():
    parser = argparse.ArgumentParser(description="Play Kwazam")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to play config YAML (e.g. configs/play.yaml)")
    parser.add_argument("--load", type=str, metavar="SNAPSHOT",
                        help="Start from a saved snapshot")
    parser.add_argument("--no-flip", action="store_true",
                        help="Keep Blue's point of view for both sides")
    args = parser.parse_args()

    config = load_config(args.config)
    if args.no_flip:
        config["display"]["flip_for_red"] = False

    logging.basicConfig(level=config["logging"]["level"],
                        format="%(asctime)s [%(name)s] %(message)s")

    if args.load:
        try:
            state = load_game(args.load, _history_path(config, args.load))
        except StorageError as e:
            print(f"Failed to load game: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        state = GameState()

    play_game(state, config)


if __name__ == "__main__":
    main()
