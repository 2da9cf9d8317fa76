"""Grid storage for one side of a seabattle match."""

from __future__ import annotations

import logging
from enum import Enum

from .errors import OutOfRangeError
from .vessel import Coordinate

logger = logging.getLogger(__name__)


class CellState(Enum):
    """State of a single board cell."""

    WATER = "~"
    SHIP = "S"
    HIT = "X"
    MISS = "O"


class Board:
    """Fixed-size square grid of cell states.

    The board only stores cells; placement and combat rules live in
    :mod:`seabattle.engine.placement` and :mod:`seabattle.engine.combat`.
    """

    def __init__(self, size: int = 10, owner: str = "unknown") -> None:
        if size < 1:
            raise ValueError(f"Board size must be positive, got {size}.")
        self.size = size
        self.owner = owner
        self._cells: list[list[CellState]] = [
            [CellState.WATER] * size for _ in range(size)
        ]

    def __repr__(self) -> str:
        return f"Board(size={self.size}, owner={self.owner!r})"

    def is_valid_coordinate(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= coord.row < self.size and 0 <= coord.col < self.size

    def get(self, coord: Coordinate) -> CellState:
        self._check(coord)
        return self._cells[coord.row][coord.col]

    def set(self, coord: Coordinate, state: CellState) -> None:
        self._check(coord)
        self._cells[coord.row][coord.col] = state

    def clear(self) -> None:
        """Reset every cell to water."""
        for row in self._cells:
            row[:] = [CellState.WATER] * self.size

    def rows(self) -> tuple[tuple[CellState, ...], ...]:
        """Return a read-only copy of the grid, row by row."""
        return tuple(tuple(row) for row in self._cells)

    def count(self, state: CellState) -> int:
        return sum(row.count(state) for row in self._cells)

    def _check(self, coord: Coordinate) -> None:
        if not self.is_valid_coordinate(coord):
            logger.error(
                "board_access_out_of_range",
                extra={"row": coord.row, "col": coord.col, "owner": self.owner},
            )
            raise OutOfRangeError(
                f"Coordinate ({coord.row}, {coord.col}) is outside the {self.size}x{self.size} board."
            )
