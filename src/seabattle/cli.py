"""Command-line driver for playing seabattle against the computer."""

from __future__ import annotations

import argparse
import logging
from typing import Callable, Sequence

from pydantic import ValidationError

from seabattle.config import GameConfig
from seabattle.engine.board import Board, CellState
from seabattle.engine.combat import GuessRejection
from seabattle.engine.errors import PlacementExhaustedError
from seabattle.engine.match import Player, new_match
from seabattle.telemetry import (
    TelemetryConfig,
    configure_console_logging,
    init_telemetry,
    load_telemetry_config,
    shutdown_telemetry,
)

logger = logging.getLogger(__name__)

QUIT_WORDS = {"q", "quit", "exit"}


class ConsoleSink:
    """Prints status lines straight to stdout."""

    def __init__(self, write: Callable[[str], None] = print) -> None:
        self._write = write

    def show_message(self, message: str) -> None:
        self._write(message)


def clean_guess(text: str) -> str:
    """Drop spaces and commas so ``"3, 4"`` becomes ``"34"``."""
    return "".join(char for char in text.strip() if char not in " ,\t")


def _symbol(state: CellState, show_ships: bool) -> str:
    if state is CellState.SHIP and not show_ships:
        return CellState.WATER.value
    return state.value


def format_board(board: Board, title: str, show_ships: bool) -> str:
    header = "  " + " ".join(str(col) for col in range(board.size))
    rows = [f"   --- {title} ---", header]
    for index, row in enumerate(board.rows()):
        rows.append(f"{index} " + " ".join(_symbol(state, show_ships) for state in row))
    return "\n".join(rows)


def format_boards(opponent: Board, own: Board) -> str:
    """Opponent waters (ships hidden) next to the player's own board."""
    left = format_board(opponent, "OPPONENT BOARD", show_ships=False).splitlines()
    right = format_board(own, "YOUR BOARD", show_ships=True).splitlines()
    width = max(len(line) for line in left) + 4
    return "\n".join(f"{theirs:<{width}}{ours}" for theirs, ours in zip(left, right))


def describe_rejection(rejection: GuessRejection | None, board_size: int) -> str:
    if rejection is GuessRejection.DUPLICATE_GUESS:
        return "You already guessed that location!"
    return f"Oops, please enter valid row and column numbers between 0 and {board_size - 1}."


def _prompt_guess(read: Callable[[str], str]) -> str:
    raw = read("Enter your guess (e.g., 00) or 'q' to quit: ")
    if raw.strip().lower() in QUIT_WORDS:
        raise SystemExit("Goodbye!")
    return clean_guess(raw)


def play_game(
    config: GameConfig,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> Player | None:
    """Run one interactive match and return the winner."""
    sink = ConsoleSink(write)
    write("Let's play Sea Battle!")
    write(f"Try to sink the {config.num_ships} enemy ships.")
    match = new_match(config, sink=sink)
    write(format_boards(match.computer.board, match.human.board))

    while not match.finished:
        outcome = match.play_human_turn(_prompt_guess(read))
        if not outcome.success:
            write(describe_rejection(outcome.rejection, config.board_size))
            continue
        write(format_boards(match.computer.board, match.human.board))
        if match.finished:
            break

        write("\n--- CPU's Turn ---")
        match.play_computer_turn()
        write(format_boards(match.computer.board, match.human.board))

    if match.winner is Player.HUMAN:
        write("*** CONGRATULATIONS! You sunk all enemy battleships! ***")
    else:
        write("*** GAME OVER! The CPU sunk all your battleships! ***")
    return match.winner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play seabattle via the CLI.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument("--board-size", type=int, default=None, help="Board edge length (5-10).")
    parser.add_argument("--ships", type=int, default=None, help="Number of ships per side.")
    parser.add_argument("--ship-length", type=int, default=None, help="Cells per ship.")
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Enable tracing, metrics and log export as configured by OTEL_* variables.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_console_logging()

    telemetry = load_telemetry_config()
    if args.telemetry:
        telemetry = TelemetryConfig.from_env(
            enable_tracing=True, enable_metrics=True, enable_logging=True
        )
    init_telemetry(telemetry)

    try:
        config = GameConfig.from_env(
            board_size=args.board_size,
            num_ships=args.ships,
            ship_length=args.ship_length,
            seed=args.seed,
        )
    except ValidationError as exc:
        raise SystemExit(f"Invalid game configuration: {exc}") from exc

    try:
        play_game(config)
    except PlacementExhaustedError as exc:
        logger.error("match_setup_failed", extra={"error": str(exc)})
        raise SystemExit(f"Could not set up the match: {exc}") from exc
    finally:
        shutdown_telemetry()


if __name__ == "__main__":
    main()
