"""Tests for Board storage."""

import pytest

from seabattle.engine.board import Board, CellState
from seabattle.engine.errors import OutOfRangeError
from seabattle.engine.vessel import Coordinate


def test_new_board_is_all_water() -> None:
    board = Board(6)
    assert board.count(CellState.WATER) == 36
    assert board.get(Coordinate(5, 5)) is CellState.WATER


def test_set_and_get_round_trip_single_cell() -> None:
    board = Board()
    board.set(Coordinate(2, 3), CellState.MISS)
    assert board.get(Coordinate(2, 3)) is CellState.MISS
    assert board.count(CellState.MISS) == 1


@pytest.mark.parametrize("coord", [Coordinate(-1, 0), Coordinate(0, 10), Coordinate(10, 10)])
def test_access_outside_grid_fails(coord: Coordinate) -> None:
    board = Board()
    assert not board.is_valid_coordinate(coord)
    with pytest.raises(OutOfRangeError):
        board.get(coord)
    with pytest.raises(OutOfRangeError):
        board.set(coord, CellState.HIT)


def test_rows_is_a_copy_and_clear_resets() -> None:
    board = Board(5)
    board.set(Coordinate(0, 0), CellState.SHIP)
    rows = board.rows()
    assert rows[0][0] is CellState.SHIP
    board.clear()
    assert rows[0][0] is CellState.SHIP
    assert board.get(Coordinate(0, 0)) is CellState.WATER


def test_board_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Board(0)
