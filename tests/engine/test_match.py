"""Match-level gameplay tests."""

import random

import pytest

from seabattle.ai.strategy import AIMode
from seabattle.config import GameConfig
from seabattle.engine.board import Board, CellState
from seabattle.engine.combat import GuessOutcome
from seabattle.engine.match import MatchState, Player, Side, new_match
from seabattle.engine.vessel import Coordinate, Vessel


def _scripted_match() -> MatchState:
    human_board = Board(10, owner="human")
    human_vessel = Vessel([Coordinate(9, 7), Coordinate(9, 8), Coordinate(9, 9)])
    for coord in human_vessel.locations():
        human_board.set(coord, CellState.SHIP)
    computer_board = Board(10, owner="computer")
    computer_vessel = Vessel([Coordinate(0, 0), Coordinate(0, 1), Coordinate(0, 2)])
    return MatchState(
        Side(human_board, [human_vessel]),
        Side(computer_board, [computer_vessel]),
        GameConfig(num_ships=1),
        rng=random.Random(0),
    )


def test_new_match_places_both_fleets() -> None:
    match = new_match(GameConfig(seed=3))
    assert len(match.human.vessels) == 3
    assert len(match.computer.vessels) == 3
    assert match.human.remaining == 3
    assert match.computer.remaining == 3
    assert match.human.board.count(CellState.SHIP) == 9
    assert match.computer.board.count(CellState.SHIP) == 0
    assert match.current_player is Player.HUMAN
    assert match.ai_state.mode is AIMode.HUNT


def test_counter_drops_once_when_vessel_sinks() -> None:
    match = _scripted_match()
    remaining = []
    for raw in ("00", "01", "02"):
        match.current_player = Player.HUMAN
        match.play_human_turn(raw)
        remaining.append(match.computer.remaining)
    assert remaining == [1, 1, 0]
    assert match.finished
    assert match.winner is Player.HUMAN


def test_rejected_guess_keeps_the_turn() -> None:
    match = _scripted_match()
    outcome = match.play_human_turn("zz")
    assert not outcome.success
    assert match.current_player is Player.HUMAN
    match.play_human_turn("55")
    assert match.current_player is Player.COMPUTER
    match.play_computer_turn()
    duplicate = match.play_human_turn("55")
    assert not duplicate.success
    assert match.current_player is Player.HUMAN


def test_turn_order_is_enforced() -> None:
    match = _scripted_match()
    with pytest.raises(RuntimeError):
        match.play_computer_turn()
    match.play_human_turn("55")
    with pytest.raises(RuntimeError):
        match.play_human_turn("56")


def test_no_turns_after_the_match_is_over() -> None:
    match = _scripted_match()
    match.apply_outcome(Player.COMPUTER, GuessOutcome(success=True, hit=True, sunk=True))
    assert match.finished
    assert match.winner is Player.HUMAN
    with pytest.raises(RuntimeError):
        match.play_human_turn("00")
    with pytest.raises(RuntimeError):
        match.apply_outcome(Player.HUMAN, GuessOutcome(success=True, hit=True, sunk=True))


def test_full_match_terminates_without_repeated_computer_guesses() -> None:
    match = new_match(GameConfig(seed=11))
    human_moves = [f"{row}{col}" for row in range(10) for col in range(10)]
    random.Random(11).shuffle(human_moves)

    while not match.finished:
        outcome = match.play_human_turn(human_moves.pop())
        assert outcome.success
        if match.finished:
            break
        match.play_computer_turn()

    guesses = list(match.computer.guesses)
    assert len(guesses) == len(set(guesses))
    loser = match.winner.opponent()
    assert match.sides[loser].remaining == 0
    assert all(vessel.is_sunk() for vessel in match.sides[loser].vessels)


def test_snapshot_hides_nothing_and_is_frozen() -> None:
    match = _scripted_match()
    match.play_human_turn("00")
    snap = match.snapshot()
    assert snap.sides[Player.HUMAN].guesses == (Coordinate(0, 0),)
    assert snap.sides[Player.COMPUTER].cells[0][0] is CellState.HIT
    assert snap.current_player is Player.COMPUTER
    with pytest.raises(AttributeError):
        snap.finished = True  # type: ignore[misc]


def test_turn_messages_name_each_side() -> None:
    messages: list[str] = []

    class Sink:
        def show_message(self, message: str) -> None:
            messages.append(message)

    match = _scripted_match()
    match.sink = Sink()
    match.play_human_turn("55")
    assert messages == ["PLAYER MISS."]

    messages.clear()
    match.play_computer_turn()
    assert messages[0].startswith("CPU is hunting")
    assert messages[1] in {"CPU HIT!", "CPU MISS."}
