"""Vessel domain model for the seabattle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .errors import InvalidVesselError


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int

    @classmethod
    def parse(cls, raw: str, board_size: int) -> Coordinate | None:
        """Parse a two-digit guess such as ``"07"``; ``None`` if malformed or out of range."""
        if not isinstance(raw, str) or len(raw) != 2:
            return None
        if not all(char in "0123456789" for char in raw):
            return None
        row, col = int(raw[0]), int(raw[1])
        if row >= board_size or col >= board_size:
            return None
        return cls(row, col)

    @property
    def key(self) -> str:
        """Two-character form used in prompts and logs."""
        return f"{self.row}{self.col}"

    def neighbours(self) -> tuple[Coordinate, ...]:
        """Orthogonal neighbours in up, down, left, right order (unbounded)."""
        return (
            Coordinate(self.row - 1, self.col),
            Coordinate(self.row + 1, self.col),
            Coordinate(self.row, self.col - 1),
            Coordinate(self.row, self.col + 1),
        )

    def __str__(self) -> str:
        return self.key


class Orientation(Enum):
    """Allowed vessel orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class HitResult(Enum):
    """Outcome of striking a single vessel."""

    NOT_ON_VESSEL = "not_on_vessel"
    ALREADY_HIT = "already_hit"
    NEW_HIT = "new_hit"


class Vessel:
    """A straight run of coordinates with per-segment damage."""

    def __init__(self, coordinates: Iterable[Coordinate]) -> None:
        coords = tuple(coordinates)
        if not coords:
            raise InvalidVesselError("Vessel coordinates must be a non-empty sequence.")
        index = {coord: position for position, coord in enumerate(coords)}
        if len(index) != len(coords):
            raise InvalidVesselError("Vessel coordinates must be distinct.")
        if not _is_straight_run(coords):
            raise InvalidVesselError(
                "Vessel coordinates must share a row or a column and be contiguous."
            )
        self.coordinates = coords
        self._hits = [False] * len(coords)
        self._index = index

    def __repr__(self) -> str:
        cells = ", ".join(coord.key for coord in self.coordinates)
        return f"Vessel([{cells}], hits={self.hit_count()})"

    @classmethod
    def from_start(cls, start: Coordinate, length: int, orientation: Orientation) -> Vessel:
        """Build a vessel of ``length`` cells running right or down from ``start``."""
        if orientation is Orientation.HORIZONTAL:
            coords = [Coordinate(start.row, start.col + offset) for offset in range(length)]
        else:
            coords = [Coordinate(start.row + offset, start.col) for offset in range(length)]
        return cls(coords)

    @property
    def length(self) -> int:
        return len(self.coordinates)

    def locations(self) -> tuple[Coordinate, ...]:
        """Return the ordered coordinates occupied by this vessel."""
        return self.coordinates

    def has_location(self, coord: Coordinate) -> bool:
        return coord in self._index

    def hit(self, coord: Coordinate) -> HitResult:
        """Mark the segment at ``coord``; only a first strike mutates the vessel."""
        position = self._index.get(coord)
        if position is None:
            return HitResult.NOT_ON_VESSEL
        if self._hits[position]:
            return HitResult.ALREADY_HIT
        self._hits[position] = True
        return HitResult.NEW_HIT

    def hit_status(self, coord: Coordinate) -> bool | None:
        """Whether the segment at ``coord`` is hit, or ``None`` if not on this vessel."""
        position = self._index.get(coord)
        return None if position is None else self._hits[position]

    def is_sunk(self) -> bool:
        return all(self._hits)

    def hit_count(self) -> int:
        return sum(self._hits)

    def remaining_health(self) -> int:
        return self.length - self.hit_count()

    def overlaps(self, other: Vessel) -> bool:
        """Return True if any coordinate is shared with another vessel."""
        return not self._index.keys().isdisjoint(other._index.keys())


def _is_straight_run(coords: tuple[Coordinate, ...]) -> bool:
    if len(coords) == 1:
        return True
    first, second = coords[0], coords[1]
    step = (second.row - first.row, second.col - first.col)
    if step not in {(0, 1), (0, -1), (1, 0), (-1, 0)}:
        return False
    return all(
        (after.row - before.row, after.col - before.col) == step
        for before, after in zip(coords, coords[1:])
    )
