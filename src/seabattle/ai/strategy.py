"""Hunt/Target opponent for the computer-controlled side.

The strategy is split in three parts so each can be tested on its own:

* :func:`step` advances an :class:`AIState` from a resolved outcome and never
  touches randomness or the board;
* :func:`select_target` picks the next coordinate, draining stale queue
  entries and falling back to a random hunt;
* :func:`compute_opponent_move` glues both around exactly one call into
  :func:`seabattle.engine.combat.resolve_guess`.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from seabattle.engine.board import Board
from seabattle.engine.combat import (
    CPU_MESSAGES,
    GuessLog,
    GuessOutcome,
    MessageSink,
    resolve_guess,
)
from seabattle.engine.vessel import Coordinate, Vessel
from seabattle.telemetry import get_meter, get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.ai.strategy")
meter = get_meter("seabattle.ai.strategy")

MOVE_COUNTER = meter.create_counter(
    "seabattle_ai_moves",
    unit="1",
    description="Guesses chosen by the computer opponent",
)
STALE_COUNTER = meter.create_counter(
    "seabattle_ai_stale_targets",
    unit="1",
    description="Queued targets discarded because they were already guessed",
)


class AIMode(Enum):
    """Opponent search phase."""

    HUNT = "hunt"
    TARGET = "target"


@dataclass(frozen=True)
class AIState:
    """Current phase plus the FIFO queue of cells adjacent to known hits."""

    mode: AIMode = AIMode.HUNT
    queue: tuple[Coordinate, ...] = field(default_factory=tuple)

    @classmethod
    def initial(cls) -> AIState:
        return cls()


@dataclass(frozen=True)
class OpponentMove:
    """The coordinate the opponent fired at, its outcome and the next state."""

    move: Coordinate
    hit: bool
    sunk: bool
    state: AIState


def adjacent_targets(
    coord: Coordinate,
    guess_log: GuessLog,
    board_size: int,
    queued: Iterable[Coordinate] = (),
) -> tuple[Coordinate, ...]:
    """Orthogonal neighbours of ``coord`` that are in bounds, untried and not yet queued."""
    skip = set(queued)
    targets: list[Coordinate] = []
    for neighbour in coord.neighbours():
        if not (0 <= neighbour.row < board_size and 0 <= neighbour.col < board_size):
            continue
        if neighbour in guess_log or neighbour in skip:
            continue
        targets.append(neighbour)
        skip.add(neighbour)
    return tuple(targets)


def step(
    state: AIState, outcome: GuessOutcome, adjacents: Sequence[Coordinate] = ()
) -> AIState:
    """Advance the opponent state after a resolved guess."""
    if outcome.sunk:
        return AIState(AIMode.HUNT, ())
    if outcome.hit:
        additions = tuple(coord for coord in dict.fromkeys(adjacents) if coord not in state.queue)
        return AIState(AIMode.TARGET, state.queue + additions)
    if not state.queue:
        return AIState(AIMode.HUNT, ())
    return state


def random_untried(guess_log: GuessLog, board_size: int, rng: random.Random) -> Coordinate:
    """Draw uniformly random coordinates until one has not been guessed yet."""
    if len(guess_log) >= board_size * board_size:
        raise RuntimeError("Every cell on the board has already been guessed.")
    while True:
        coord = Coordinate(rng.randrange(board_size), rng.randrange(board_size))
        if coord not in guess_log:
            return coord


def select_target(
    state: AIState, guess_log: GuessLog, board_size: int, rng: random.Random
) -> tuple[Coordinate, AIState]:
    """Choose the next coordinate and return it with the queue it leaves behind."""
    queue = list(state.queue)
    while queue:
        candidate = queue.pop(0)
        if candidate in guess_log:
            STALE_COUNTER.add(1)
            logger.debug("stale_target_discarded", extra={"target": candidate.key})
            continue
        return candidate, AIState(state.mode, tuple(queue))
    return random_untried(guess_log, board_size, rng), AIState(state.mode, ())


def compute_opponent_move(
    ai_state: AIState,
    guess_log: GuessLog,
    vessels: Sequence[Vessel],
    board: Board,
    board_size: int,
    *,
    rng: random.Random | None = None,
    sink: MessageSink | None = None,
) -> OpponentMove:
    """Pick, fire and learn from exactly one computer guess."""
    rng = rng or random.Random()
    with tracer.start_as_current_span("ai.compute_opponent_move") as span:
        span.set_attribute("ai.mode", ai_state.mode.value)
        span.set_attribute("ai.queue_length", len(ai_state.queue))

        target, drained = select_target(ai_state, guess_log, board_size, rng)
        if sink is not None:
            if target in ai_state.queue:
                sink.show_message(f"CPU targets {target.key}.")
            else:
                sink.show_message(f"CPU is hunting... fires at {target.key}.")

        outcome = resolve_guess(
            target, board_size, guess_log, vessels, board, sink=sink, messages=CPU_MESSAGES
        )
        if not outcome.success:
            # Targets are always in bounds and untried, so this is a broken invariant.
            raise RuntimeError(f"Opponent produced a rejected guess: {target.key}")

        adjacents: tuple[Coordinate, ...] = ()
        if outcome.hit and not outcome.sunk:
            adjacents = adjacent_targets(target, guess_log, board_size, drained.queue)
        new_state = step(drained, outcome, adjacents)

        span.set_attribute("ai.target", target.key)
        span.set_attribute("ai.outcome", outcome.label)
        span.set_attribute("ai.next_mode", new_state.mode.value)
        MOVE_COUNTER.add(1, attributes={"mode": ai_state.mode.value, "outcome": outcome.label})
        if new_state.mode is not ai_state.mode:
            logger.info(
                "ai_mode_changed",
                extra={"from_mode": ai_state.mode.value, "to_mode": new_state.mode.value},
            )
        return OpponentMove(move=target, hit=outcome.hit, sunk=outcome.sunk, state=new_state)
