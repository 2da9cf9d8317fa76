"""Error taxonomy for the seabattle engine."""

from __future__ import annotations


class GameError(ValueError):
    """Base class for all engine errors."""


class InvalidCoordinateError(GameError):
    """A guess that is not two in-range digits."""

    def __init__(self, coordinate: object, board_size: int) -> None:
        super().__init__(
            f"Invalid coordinate: {coordinate!r}. "
            f"Use two digits, each between 0 and {board_size - 1}."
        )
        self.coordinate = coordinate
        self.board_size = board_size


class DuplicateGuessError(GameError):
    """A coordinate the attacking side has already tried."""

    def __init__(self, coordinate: object) -> None:
        super().__init__(f"Coordinate {coordinate} has already been guessed.")
        self.coordinate = coordinate


class PlacementExhaustedError(GameError):
    """The fleet could not be fitted on the board within the attempt budget."""

    def __init__(self, placed: int, requested: int, attempts: int) -> None:
        super().__init__(
            f"Failed to place all vessels after {attempts} attempts "
            f"({placed} of {requested} placed)."
        )
        self.placed = placed
        self.requested = requested
        self.attempts = attempts


class InvalidVesselError(GameError):
    """Vessel coordinates that are empty, repeated or not a straight run."""


class OutOfRangeError(GameError, IndexError):
    """Board access outside the grid."""
