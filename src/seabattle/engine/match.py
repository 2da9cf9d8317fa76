"""Two-sided match state: one human side against the computer."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from seabattle.ai.strategy import AIState, compute_opponent_move
from seabattle.config import GameConfig
from seabattle.telemetry import get_meter, get_tracer, record_game_metric

from .board import Board, CellState
from .combat import PLAYER_MESSAGES, GuessLog, GuessOutcome, MessageSink, resolve_guess
from .placement import place_vessels
from .vessel import Coordinate, Vessel

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.match")
meter = get_meter("seabattle.engine.match")

TURN_COUNTER = meter.create_counter(
    "seabattle_match_turns",
    unit="1",
    description="Resolved turns in a match",
)


class Player(Enum):
    """The two sides of a match."""

    HUMAN = "human"
    COMPUTER = "computer"

    def opponent(self) -> Player:
        """Return the opposing side."""
        return Player.COMPUTER if self is Player.HUMAN else Player.HUMAN


@dataclass
class Side:
    """A side's own board and fleet, plus the guesses it made as attacker."""

    board: Board
    vessels: list[Vessel]
    guesses: GuessLog = field(default_factory=GuessLog)
    remaining: int = -1

    def __post_init__(self) -> None:
        if self.remaining < 0:
            self.remaining = len(self.vessels)

    def is_defeated(self) -> bool:
        return self.remaining == 0


@dataclass(frozen=True)
class SideSnapshot:
    """Serializable view of a side for renderers and assertions."""

    cells: tuple[tuple[CellState, ...], ...]
    vessels: tuple[tuple[Coordinate, ...], ...]
    guesses: tuple[Coordinate, ...]
    remaining: int


@dataclass(frozen=True)
class MatchSnapshot:
    """Immutable view of the whole match."""

    current_player: Player
    finished: bool
    winner: Player | None
    sides: dict[Player, SideSnapshot]
    ai_state: AIState


class MatchState:
    """Aggregates both sides and decides when the match is over."""

    def __init__(
        self,
        human: Side,
        computer: Side,
        config: GameConfig | None = None,
        *,
        ai_state: AIState | None = None,
        rng: random.Random | None = None,
        sink: MessageSink | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.sides: dict[Player, Side] = {Player.HUMAN: human, Player.COMPUTER: computer}
        self.ai_state = ai_state or AIState.initial()
        self.current_player = Player.HUMAN
        self.winner: Player | None = None
        self.finished = False
        self.turns = 0
        self.sink = sink
        self._rng = rng or random.Random(self.config.seed)

    @property
    def human(self) -> Side:
        return self.sides[Player.HUMAN]

    @property
    def computer(self) -> Side:
        return self.sides[Player.COMPUTER]

    @property
    def board_size(self) -> int:
        return self.config.board_size

    def apply_outcome(self, defender: Player, outcome: GuessOutcome) -> None:
        """Count a sunk vessel against ``defender`` and end the match when a fleet is gone."""
        if self.finished:
            raise RuntimeError("Match is already over.")
        if not outcome.sunk:
            return
        side = self.sides[defender]
        side.remaining -= 1
        logger.info(
            "vessel_sunk",
            extra={"defender": defender.value, "remaining": side.remaining},
        )
        if side.remaining <= 0:
            side.remaining = 0
            self._finish(winner=defender.opponent())

    def play_human_turn(self, raw: str) -> GuessOutcome:
        """Resolve the human's guess; rejected guesses leave the turn with the human."""
        with tracer.start_as_current_span("match.play_human_turn") as span:
            self._ensure_turn(Player.HUMAN)
            target = self.computer
            outcome = resolve_guess(
                raw,
                self.board_size,
                self.human.guesses,
                target.vessels,
                target.board,
                sink=self.sink,
                messages=PLAYER_MESSAGES,
            )
            span.set_attribute("guess.outcome", outcome.label)
            if not outcome.success:
                return outcome
            self._end_turn(Player.HUMAN, outcome)
            return outcome

    def play_computer_turn(self) -> GuessOutcome:
        """Let the opponent strategy take exactly one guess."""
        with tracer.start_as_current_span("match.play_computer_turn") as span:
            self._ensure_turn(Player.COMPUTER)
            target = self.human
            move = compute_opponent_move(
                self.ai_state,
                self.computer.guesses,
                target.vessels,
                target.board,
                self.board_size,
                rng=self._rng,
                sink=self.sink,
            )
            self.ai_state = move.state
            outcome = GuessOutcome(success=True, hit=move.hit, sunk=move.sunk, coordinate=move.move)
            span.set_attribute("guess.outcome", outcome.label)
            self._end_turn(Player.COMPUTER, outcome)
            return outcome

    def snapshot(self) -> MatchSnapshot:
        """Return an immutable view of the current match."""
        sides = {
            player: SideSnapshot(
                cells=side.board.rows(),
                vessels=tuple(vessel.locations() for vessel in side.vessels),
                guesses=tuple(side.guesses),
                remaining=side.remaining,
            )
            for player, side in self.sides.items()
        }
        return MatchSnapshot(
            current_player=self.current_player,
            finished=self.finished,
            winner=self.winner,
            sides=sides,
            ai_state=self.ai_state,
        )

    def _ensure_turn(self, player: Player) -> None:
        if self.finished:
            logger.error("turn_rejected_match_over", extra={"player": player.value})
            raise RuntimeError("Match is already over.")
        if player is not self.current_player:
            logger.error(
                "turn_rejected_wrong_player",
                extra={"player": player.value, "current": self.current_player.value},
            )
            raise RuntimeError("It is not this side's turn.")

    def _end_turn(self, attacker: Player, outcome: GuessOutcome) -> None:
        self.turns += 1
        TURN_COUNTER.add(1, attributes={"player": attacker.value, "outcome": outcome.label})
        self.apply_outcome(attacker.opponent(), outcome)
        if not self.finished:
            self.current_player = attacker.opponent()

    def _finish(self, winner: Player) -> None:
        self.winner = winner
        self.finished = True
        record_game_metric("seabattle_match_completed_total", 1, {"winner": winner.value})
        logger.info("match_finished", extra={"winner": winner.value, "turns": self.turns})


def new_match(
    config: GameConfig | None = None,
    *,
    rng: random.Random | None = None,
    sink: MessageSink | None = None,
) -> MatchState:
    """Create both boards and fleets for a fresh match.

    The human fleet is marked on the human board so its owner can see it; the
    computer fleet is never marked anywhere.
    """
    config = config or GameConfig()
    rng = rng or random.Random(config.seed)
    size = config.board_size

    with tracer.start_as_current_span("match.new_match") as span:
        span.set_attribute("board.size", size)
        span.set_attribute("fleet.count", config.num_ships)
        span.set_attribute("fleet.length", config.ship_length)

        human_board = Board(size, owner=Player.HUMAN.value)
        human_vessels = place_vessels(
            human_board, config.num_ships, size, config.ship_length, human_board, rng=rng
        )
        if sink is not None:
            sink.show_message("Player ships placed.")

        computer_board = Board(size, owner=Player.COMPUTER.value)
        computer_vessels = place_vessels(
            computer_board, config.num_ships, size, config.ship_length, rng=rng
        )
        if sink is not None:
            sink.show_message("CPU ships placed.")

    return MatchState(
        Side(human_board, human_vessels),
        Side(computer_board, computer_vessels),
        config,
        rng=rng,
        sink=sink,
    )
