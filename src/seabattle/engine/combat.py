"""Guess resolution: validation, guess history and board/vessel mutation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Protocol, Sequence

from seabattle.telemetry import get_meter, get_tracer

from .board import Board, CellState
from .errors import DuplicateGuessError, InvalidCoordinateError
from .vessel import Coordinate, HitResult, Vessel

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.combat")
meter = get_meter("seabattle.engine.combat")

GUESS_COUNTER = meter.create_counter(
    "seabattle_engine_guesses",
    unit="1",
    description="Guesses submitted to the combat resolver",
)


@dataclass(frozen=True)
class StatusMessages:
    """Status lines sent to a sink, worded for one attacker."""

    hit: str
    miss: str
    sunk: str
    already_hit: str


GENERIC_MESSAGES = StatusMessages(
    "HIT!", "MISS.", "You sunk a vessel!", "That spot was already hit."
)
PLAYER_MESSAGES = StatusMessages(
    "PLAYER HIT!", "PLAYER MISS.", "You sunk an enemy vessel!", "You already hit that spot!"
)
CPU_MESSAGES = StatusMessages(
    "CPU HIT!", "CPU MISS.", "The CPU sunk your vessel!", "CPU hit a spot twice."
)


class MessageSink(Protocol):
    """Receives plain-text status lines; formatting the grid is not its job."""

    def show_message(self, message: str) -> None:
        ...


class GuessLog:
    """Insertion-ordered set of coordinates one side has attacked."""

    def __init__(self, guesses: Iterable[Coordinate] = ()) -> None:
        self._guesses: dict[Coordinate, None] = {}
        for coord in guesses:
            self.add(coord)

    def __contains__(self, coord: object) -> bool:
        return coord in self._guesses

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._guesses)

    def __len__(self) -> int:
        return len(self._guesses)

    def __repr__(self) -> str:
        return f"GuessLog([{', '.join(coord.key for coord in self._guesses)}])"

    def add(self, coord: Coordinate) -> None:
        if coord in self._guesses:
            raise DuplicateGuessError(coord.key)
        self._guesses[coord] = None

    def keys(self) -> list[str]:
        """Guesses in the order they were made, as two-character strings."""
        return [coord.key for coord in self._guesses]


class GuessRejection(Enum):
    """Why a guess did not resolve."""

    INVALID_COORDINATE = "invalid_coordinate"
    DUPLICATE_GUESS = "duplicate_guess"


@dataclass(frozen=True)
class GuessOutcome:
    """Structured result of a single guess."""

    success: bool
    hit: bool = False
    sunk: bool = False
    coordinate: Coordinate | None = None
    rejection: GuessRejection | None = None

    @classmethod
    def rejected(cls, reason: GuessRejection, coordinate: Coordinate | None = None) -> GuessOutcome:
        return cls(success=False, coordinate=coordinate, rejection=reason)

    @property
    def label(self) -> str:
        if not self.success:
            return self.rejection.value if self.rejection else "rejected"
        if self.sunk:
            return "sunk"
        return "hit" if self.hit else "miss"


def parse_guess(raw: str | Coordinate, board_size: int) -> Coordinate | None:
    """Turn a raw guess into a coordinate, or ``None`` if it is not valid."""
    if isinstance(raw, Coordinate):
        valid = 0 <= raw.row < board_size and 0 <= raw.col < board_size
        return raw if valid else None
    return Coordinate.parse(raw, board_size)


def resolve_guess(
    raw: str | Coordinate,
    board_size: int,
    guess_log: GuessLog,
    vessels: Sequence[Vessel],
    board: Board,
    *,
    sink: MessageSink | None = None,
    messages: StatusMessages = GENERIC_MESSAGES,
) -> GuessOutcome:
    """Resolve one guess against a defending fleet.

    Malformed, out-of-range and repeated guesses are reported through the
    returned outcome (``success=False``) and leave all state untouched. A valid
    guess is always recorded in ``guess_log``, hit or miss.

    Raises:
        ValueError: if ``board_size`` does not match ``board``; nothing is
            recorded in that case.
    """
    if board_size != board.size:
        raise ValueError(
            f"board_size {board_size} does not match the target board ({board.size})."
        )
    with tracer.start_as_current_span("combat.resolve_guess") as span:
        span.set_attribute("board.owner", board.owner)
        coord = parse_guess(raw, board_size)
        if coord is None:
            return _reject(span, GuessRejection.INVALID_COORDINATE, raw, board)

        span.set_attribute("guess.row", coord.row)
        span.set_attribute("guess.col", coord.col)
        if coord in guess_log:
            return _reject(span, GuessRejection.DUPLICATE_GUESS, raw, board, coord)

        guess_log.add(coord)
        outcome = _strike(coord, vessels, board, sink, messages)

        span.set_attribute("guess.outcome", outcome.label)
        GUESS_COUNTER.add(1, attributes={"outcome": outcome.label, "owner": board.owner})
        logger.info(
            "guess_resolved",
            extra={
                "row": coord.row,
                "col": coord.col,
                "outcome": outcome.label,
                "owner": board.owner,
            },
        )
        return outcome


def check_guess(
    raw: str | Coordinate,
    board_size: int,
    guess_log: GuessLog,
    vessels: Sequence[Vessel],
    board: Board,
    *,
    sink: MessageSink | None = None,
    messages: StatusMessages = GENERIC_MESSAGES,
) -> GuessOutcome:
    """Like :func:`resolve_guess`, but raise on rejected guesses.

    Raises:
        InvalidCoordinateError: the guess is not two in-range digits.
        DuplicateGuessError: the coordinate was already attempted.
    """
    outcome = resolve_guess(
        raw, board_size, guess_log, vessels, board, sink=sink, messages=messages
    )
    if outcome.rejection is GuessRejection.INVALID_COORDINATE:
        raise InvalidCoordinateError(raw, board_size)
    if outcome.rejection is GuessRejection.DUPLICATE_GUESS:
        raise DuplicateGuessError(outcome.coordinate.key if outcome.coordinate else raw)
    return outcome


def _strike(
    coord: Coordinate,
    vessels: Sequence[Vessel],
    board: Board,
    sink: MessageSink | None,
    messages: StatusMessages,
) -> GuessOutcome:
    # Fleets never overlap, so the first vessel on the cell is the only one.
    for vessel in vessels:
        result = vessel.hit(coord)
        if result is HitResult.NOT_ON_VESSEL:
            continue
        if result is HitResult.ALREADY_HIT:
            _notify(sink, messages.already_hit)
            return GuessOutcome(success=True, hit=True, sunk=False, coordinate=coord)

        board.set(coord, CellState.HIT)
        _notify(sink, messages.hit)
        sunk = vessel.is_sunk()
        if sunk:
            _notify(sink, messages.sunk)
        return GuessOutcome(success=True, hit=True, sunk=sunk, coordinate=coord)

    board.set(coord, CellState.MISS)
    _notify(sink, messages.miss)
    return GuessOutcome(success=True, hit=False, sunk=False, coordinate=coord)


def _reject(
    span,
    reason: GuessRejection,
    raw: object,
    board: Board,
    coord: Coordinate | None = None,
) -> GuessOutcome:
    span.set_attribute("guess.outcome", reason.value)
    GUESS_COUNTER.add(1, attributes={"outcome": reason.value, "owner": board.owner})
    logger.warning(
        "guess_rejected",
        extra={"raw": str(raw), "reason": reason.value, "owner": board.owner},
    )
    return GuessOutcome.rejected(reason, coord)


def _notify(sink: MessageSink | None, message: str) -> None:
    if sink is not None:
        sink.show_message(message)
