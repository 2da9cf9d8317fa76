"""Randomised, collision-free vessel placement."""

from __future__ import annotations

import logging
import random

import numpy as np

from seabattle.telemetry import get_meter, get_tracer

from .board import Board, CellState
from .errors import PlacementExhaustedError
from .vessel import Coordinate, Orientation, Vessel

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.placement")
meter = get_meter("seabattle.engine.placement")

PLACEMENT_COUNTER = meter.create_counter(
    "seabattle_engine_placement_attempts",
    unit="1",
    description="Number of attempted vessel placements",
)

ATTEMPTS_PER_CELL = 10
ORIENTATIONS: tuple[Orientation, ...] = tuple(Orientation)


def attempt_budget(board_size: int) -> int:
    """Total attempts shared by every vessel of one placement call."""
    return board_size * board_size * ATTEMPTS_PER_CELL


def place_vessels(
    target_board: Board,
    count: int,
    board_size: int,
    vessel_length: int,
    owner_board: Board | None = None,
    *,
    rng: random.Random | None = None,
) -> list[Vessel]:
    """Randomly place ``count`` non-overlapping vessels of ``vessel_length`` cells.

    Collisions are checked against ``target_board`` and against an occupancy
    grid private to this call. Cells are marked ``SHIP`` on the board only when
    ``owner_board`` is ``target_board``, so a fleet placed for the opposing side
    never shows up on any board.

    Raises:
        ValueError: if the parameters do not describe a placeable fleet.
        PlacementExhaustedError: if the attempt budget runs out first.
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}.")
    if board_size != target_board.size:
        raise ValueError(
            f"board_size {board_size} does not match the target board ({target_board.size})."
        )
    if not 1 <= vessel_length <= board_size:
        raise ValueError(
            f"vessel_length must be between 1 and {board_size}, got {vessel_length}."
        )

    rng = rng or random.Random()
    reveal = owner_board is not None and owner_board is target_board
    max_attempts = attempt_budget(board_size)
    occupied = np.zeros((board_size, board_size), dtype=bool)
    vessels: list[Vessel] = []
    attempts = 0

    with tracer.start_as_current_span("placement.place_vessels") as span:
        span.set_attribute("board.owner", target_board.owner)
        span.set_attribute("vessel.count", count)
        span.set_attribute("vessel.length", vessel_length)

        while len(vessels) < count and attempts < max_attempts:
            attempts += 1
            orientation = rng.choice(ORIENTATIONS)
            start = _random_start(rng, orientation, board_size, vessel_length)
            vessel = Vessel.from_start(start, vessel_length, orientation)
            candidate = vessel.locations()

            if not _is_free(candidate, target_board, occupied):
                PLACEMENT_COUNTER.add(
                    1, attributes={"result": "collision", "owner": target_board.owner}
                )
                continue

            vessels.append(vessel)
            for coord in candidate:
                occupied[coord.row, coord.col] = True
                if reveal:
                    target_board.set(coord, CellState.SHIP)
            PLACEMENT_COUNTER.add(
                1, attributes={"result": "success", "owner": target_board.owner}
            )
            logger.debug(
                "vessel_placed",
                extra={
                    "owner": target_board.owner,
                    "orientation": orientation.name,
                    "row": start.row,
                    "col": start.col,
                    "attempts": attempts,
                },
            )

        span.set_attribute("placement.attempts", attempts)
        span.set_attribute("placement.placed", len(vessels))

        if len(vessels) < count:
            logger.error(
                "placement_exhausted",
                extra={
                    "owner": target_board.owner,
                    "placed": len(vessels),
                    "requested": count,
                    "attempts": attempts,
                },
            )
            raise PlacementExhaustedError(len(vessels), count, attempts)

    logger.info(
        "fleet_placed",
        extra={"owner": target_board.owner, "vessels": count, "attempts": attempts},
    )
    return vessels


def _random_start(
    rng: random.Random, orientation: Orientation, board_size: int, vessel_length: int
) -> Coordinate:
    span = board_size - vessel_length + 1
    if orientation is Orientation.HORIZONTAL:
        return Coordinate(rng.randrange(board_size), rng.randrange(span))
    return Coordinate(rng.randrange(span), rng.randrange(board_size))


def _is_free(candidate: tuple[Coordinate, ...], board: Board, occupied: np.ndarray) -> bool:
    for coord in candidate:
        if not board.is_valid_coordinate(coord):
            return False
        if board.get(coord) is not CellState.WATER or occupied[coord.row, coord.col]:
            return False
    return True
