"""Tests for the terminal adapter."""

from __future__ import annotations

import pytest

from seabattle import cli
from seabattle.config import GameConfig
from seabattle.engine.board import Board, CellState
from seabattle.engine.combat import GuessRejection
from seabattle.engine.match import Player
from seabattle.engine.vessel import Coordinate


def test_clean_guess_strips_separators() -> None:
    assert cli.clean_guess(" 3, 4 ") == "34"
    assert cli.clean_guess("0 0") == "00"


def test_opponent_board_hides_ships() -> None:
    own = Board(5)
    opponent = Board(5)
    own.set(Coordinate(0, 0), CellState.SHIP)
    opponent.set(Coordinate(0, 0), CellState.SHIP)
    opponent.set(Coordinate(1, 1), CellState.HIT)

    hidden = cli.format_board(opponent, "OPPONENT BOARD", show_ships=False)
    shown = cli.format_board(own, "YOUR BOARD", show_ships=True)
    assert "S" not in hidden
    assert "X" in hidden
    assert "0 S ~" in shown

    combined = cli.format_boards(opponent, own).splitlines()
    assert len(combined) == 7
    assert "OPPONENT BOARD" in combined[0] and "YOUR BOARD" in combined[0]


def test_describe_rejection_messages() -> None:
    assert "already" in cli.describe_rejection(GuessRejection.DUPLICATE_GUESS, 10)
    assert "between 0 and 9" in cli.describe_rejection(GuessRejection.INVALID_COORDINATE, 10)


def test_play_game_runs_to_completion() -> None:
    config = GameConfig(board_size=5, num_ships=1, ship_length=2, seed=3)
    moves = iter(["bad"] + [f"{row}{col}" for row in range(5) for col in range(5)])
    output: list[str] = []

    winner = cli.play_game(config, read=lambda _prompt: next(moves), write=output.append)
    assert winner in {Player.HUMAN, Player.COMPUTER}
    assert any("between 0 and 4" in line for line in output)
    assert output[-1].startswith("***")


def test_quit_raises_system_exit() -> None:
    config = GameConfig(board_size=5, num_ships=1, ship_length=2, seed=1)
    with pytest.raises(SystemExit):
        cli.play_game(config, read=lambda _prompt: "q", write=lambda _line: None)


def test_parser_accepts_dimensions() -> None:
    args = cli.build_parser().parse_args(["--board-size", "8", "--ships", "2", "--seed", "5"])
    assert (args.board_size, args.ships, args.ship_length, args.seed) == (8, 2, None, 5)


def test_main_flushes_telemetry_when_player_quits(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(cli, "configure_console_logging", lambda: None)
    monkeypatch.setattr(cli, "init_telemetry", lambda config: calls.append("init"))
    monkeypatch.setattr(cli, "shutdown_telemetry", lambda: calls.append("shutdown"))

    def quit_game(config: GameConfig) -> None:
        raise SystemExit("Goodbye!")

    monkeypatch.setattr(cli, "play_game", quit_game)

    with pytest.raises(SystemExit):
        cli.main(["--seed", "3", "--board-size", "5", "--ships", "1", "--ship-length", "2"])
    assert calls == ["init", "shutdown"]
