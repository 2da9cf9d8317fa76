"""Tests for randomised vessel placement."""

import random

import pytest

from seabattle.engine.board import Board, CellState
from seabattle.engine.errors import PlacementExhaustedError
from seabattle.engine.placement import attempt_budget, place_vessels
from seabattle.engine.vessel import Coordinate, Orientation, Vessel


def _all_cells(vessels):
    return [coord for vessel in vessels for coord in vessel.locations()]


@pytest.mark.parametrize(
    ("size", "count", "length"),
    [(5, 2, 2), (6, 3, 3), (8, 3, 4), (10, 3, 3), (10, 5, 5), (10, 1, 10)],
)
def test_placement_is_disjoint_and_in_bounds(size: int, count: int, length: int) -> None:
    rng = random.Random(size * 100 + count * 10 + length)
    for _ in range(20):
        board = Board(size)
        vessels = place_vessels(board, count, size, length, rng=rng)
        assert len(vessels) == count
        assert all(vessel.length == length for vessel in vessels)
        cells = _all_cells(vessels)
        assert len(cells) == len(set(cells)), "Vessels should not overlap"
        assert all(0 <= c.row < size and 0 <= c.col < size for c in cells)


def test_owner_board_gets_hidden_ship_marks() -> None:
    board = Board(10)
    vessels = place_vessels(board, 3, 10, 3, board, rng=random.Random(1))
    for coord in _all_cells(vessels):
        assert board.get(coord) is CellState.SHIP
    assert board.count(CellState.SHIP) == 9


def test_opponent_fleet_is_never_marked() -> None:
    board = Board(10)
    other = Board(10)
    place_vessels(board, 3, 10, 3, rng=random.Random(2))
    place_vessels(board, 3, 10, 3, other, rng=random.Random(3))
    assert board.count(CellState.SHIP) == 0
    assert other.count(CellState.SHIP) == 0


def test_existing_marks_on_target_board_are_avoided() -> None:
    board = Board(5)
    for row in range(5):
        for col in range(4):
            board.set(Coordinate(row, col), CellState.SHIP)
    vessels = place_vessels(board, 1, 5, 5, board, rng=random.Random(4))
    assert vessels[0].locations() == tuple(Coordinate(row, 4) for row in range(5))


def test_separate_calls_do_not_share_occupancy() -> None:
    rng = random.Random(5)
    first_board = Board(5)
    second_board = Board(5)
    # Each call fills a 5x5 board completely; a shared grid would make the second fail.
    place_vessels(first_board, 5, 5, 5, rng=rng)
    second = place_vessels(second_board, 5, 5, 5, rng=rng)
    assert len(second) == 5


def test_impossible_fleet_exhausts_budget() -> None:
    board = Board(5)
    with pytest.raises(PlacementExhaustedError) as excinfo:
        place_vessels(board, 6, 5, 5, rng=random.Random(6))
    assert excinfo.value.attempts == attempt_budget(5)
    assert excinfo.value.requested == 6
    assert excinfo.value.placed <= 5


@pytest.mark.parametrize(
    ("count", "size", "length"),
    [(0, 10, 3), (3, 9, 3), (3, 10, 0), (3, 10, 11)],
)
def test_bad_parameters_are_rejected(count: int, size: int, length: int) -> None:
    with pytest.raises(ValueError):
        place_vessels(Board(10), count, size, length)


def test_placed_vessels_are_straight_undamaged_runs() -> None:
    board = Board(8)
    vessels = place_vessels(board, 4, 8, 3, rng=random.Random(9))
    for vessel in vessels:
        first, last = vessel.locations()[0], vessel.locations()[-1]
        orientation = Orientation.HORIZONTAL if first.row == last.row else Orientation.VERTICAL
        assert vessel.locations() == Vessel.from_start(first, 3, orientation).locations()
        assert vessel.hit_count() == 0
