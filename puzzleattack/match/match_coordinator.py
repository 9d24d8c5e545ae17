"""Match-level elimination tracking, placements and winner detection.

One MatchCoordinator exists per match. The match driver constructs it, hands
it each grid's ScoringEngine through register_player, and relays every grid
top-out to eliminate_player. Placements are assigned bottom-up: the first grid
eliminated in a four player match places 4th, and the last grid standing
places 1st.
"""

import logging
import pickle
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from puzzleattack.leaderboard.leaderboard import Leaderboard
from puzzleattack.match.match_config import MAX_PLAYERS, GameModeConfig, GameModeFactory
from puzzleattack.scoring.events import Signal
from puzzleattack.scoring.scoring_engine import ScoringEngine

logger = logging.getLogger(__name__)

# Errors a leaderboard store may raise while persisting
PERSISTENCE_ERRORS = (OSError, ValueError, pickle.PickleError, SQLAlchemyError)


@dataclass
class PlayerRecord:
    """A participant's match state. Final stats are frozen at elimination or victory."""

    player_index: int
    engine: ScoringEngine | None
    is_human: bool
    is_eliminated: bool = False
    placement: int = 0  # 0 = undetermined, 1 = winner
    final_score: int = 0
    final_combo: int = 0
    final_chain: int = 0
    final_speed_level: int = 1
    stats_frozen: bool = False

    @property
    def display_name(self) -> str:
        prefix = "Player" if self.is_human else "CPU"
        return f"{prefix} {self.player_index + 1}"

    @property
    def score(self) -> int:
        if self.stats_frozen or self.engine is None:
            return self.final_score
        return self.engine.score

    @property
    def highest_combo(self) -> int:
        if self.stats_frozen or self.engine is None:
            return self.final_combo
        return self.engine.highest_combo

    @property
    def highest_chain(self) -> int:
        if self.stats_frozen or self.engine is None:
            return self.final_chain
        return self.engine.highest_chain

    @property
    def speed_level(self) -> int:
        if self.stats_frozen or self.engine is None:
            return self.final_speed_level
        return self.engine.speed_level

    def freeze_stats(self):
        if self.engine is not None:
            self.final_score = self.engine.score
            self.final_combo = self.engine.highest_combo
            self.final_chain = self.engine.highest_chain
            self.final_speed_level = self.engine.speed_level
        self.stats_frozen = True


class MatchCoordinator:

    def __init__(self, mode: GameModeConfig | None = None, leaderboard: Leaderboard | None = None):
        self.mode = mode or GameModeFactory.marathon()
        self.leaderboard = leaderboard

        self.player_eliminated = Signal("player_eliminated")
        self.match_winner = Signal("match_winner")
        self.marathon_game_over = Signal("marathon_game_over")
        self.match_draw = Signal("match_draw")
        self.score_updated = Signal("score_updated")

        self._players: dict[int, PlayerRecord] = {}
        self._score_relays: dict[int, Callable[..., None]] = {}
        self._elimination_order: list[int] = []
        self._total_players = 0
        self._match_ended = False
        self._winner_index: int | None = None

    # Queries

    @property
    def total_players(self) -> int:
        return self._total_players

    @property
    def remaining_players(self) -> int:
        return self._total_players - len(self._elimination_order)

    @property
    def match_ended(self) -> bool:
        return self._match_ended

    @property
    def winner_index(self) -> int | None:
        return self._winner_index

    @property
    def elimination_order(self) -> tuple[int, ...]:
        return tuple(self._elimination_order)

    @property
    def is_match_in_progress(self) -> bool:
        return bool(self._elimination_order) and not self._match_ended

    def get_player_record(self, player_index: int) -> PlayerRecord | None:
        return self._players.get(player_index)

    def all_records(self) -> list[PlayerRecord]:
        return [self._players[i] for i in sorted(self._players)]

    def human_records(self) -> list[PlayerRecord]:
        return [record for record in self.all_records() if record.is_human]

    def winner_record(self) -> PlayerRecord | None:
        if self._winner_index is None:
            return None
        return self._players.get(self._winner_index)

    def is_player_eliminated(self, player_index: int) -> bool:
        record = self._players.get(player_index)
        return record is not None and record.is_eliminated

    def get_player_score(self, player_index: int) -> int:
        """Frozen score for eliminated players, live score otherwise."""
        record = self._players.get(player_index)
        return record.score if record is not None else 0

    def results_sorted_by_placement(self) -> list[PlayerRecord]:
        """Best placement first. Players without a placement yet come last."""
        return sorted(
            self._players.values(),
            key=lambda r: (r.placement == 0, r.placement, r.player_index),
        )

    # Setup

    def initialize_match(self, total_players: int, force: bool = False) -> bool:
        """Start tracking a new match.

        Refused while a match is in progress (eliminations recorded, no result
        yet) unless force is set or reset() was called first, so a running
        match is never discarded by accident. An abandoned match is dropped
        with force=True.

        Returns:
            True if the match was initialized
        """
        if not 1 <= total_players <= MAX_PLAYERS:
            logger.error("Cannot initialize match for %d players (1..%d)", total_players, MAX_PLAYERS)
            return False
        if self.is_match_in_progress and not force:
            logger.error("Match already in progress, reset it before initializing a new one")
            return False
        if not self.mode.supports_player_count(total_players):
            logger.warning(
                "%s expects %d..%d players, got %d",
                self.mode.display_name, self.mode.min_players, self.mode.max_players, total_players,
            )

        self.reset()
        self._total_players = total_players
        logger.info("Initialized match for %d players (%s)", total_players, self.mode.display_name)
        return True

    def reset(self):
        """Discard all match state and stop relaying engine notifications."""
        for player_index in list(self._score_relays):
            self._disconnect_engine(player_index)
        self._players.clear()
        self._elimination_order.clear()
        self._total_players = 0
        self._match_ended = False
        self._winner_index = None

    def register_player(self, player_index: int, engine: ScoringEngine | None, is_human: bool):
        """Register or update a participant.

        Re-registering an index replaces its engine and human flag. An
        elimination or win already recorded for that index is kept, along
        with its frozen stats, so placements and results stay consistent.
        """
        if not 0 <= player_index < self._total_players:
            logger.error(
                "Cannot register player %d in a %d player match", player_index, self._total_players
            )
            return

        previous = self._players.get(player_index)
        if previous is not None:
            logger.warning("Player %d already registered, updating", player_index)
            self._disconnect_engine(player_index)

        record = PlayerRecord(player_index=player_index, engine=engine, is_human=is_human)
        if previous is not None and (previous.is_eliminated or previous.stats_frozen):
            record.is_eliminated = previous.is_eliminated
            record.placement = previous.placement
            record.final_score = previous.final_score
            record.final_combo = previous.final_combo
            record.final_chain = previous.final_chain
            record.final_speed_level = previous.final_speed_level
            record.stats_frozen = previous.stats_frozen
        self._players[player_index] = record

        if engine is not None:
            def relay(tiles_matched, combo_count, chain_level):
                self.score_updated.emit(player_index, engine.score)

            engine.match_scored.connect(relay)
            self._score_relays[player_index] = relay

        logger.info("Registered player %d (human: %s)", player_index, is_human)

    # Elimination

    def eliminate_player(self, player_index: int):
        """Record that a player's grid topped out."""
        if self._match_ended:
            logger.info("Match already ended, ignoring elimination of player %d", player_index)
            return

        record = self._players.get(player_index)
        if record is None:
            logger.error("Cannot eliminate unknown player %d", player_index)
            return

        if record.is_eliminated:
            logger.info("Player %d already eliminated", player_index)
            return

        record.is_eliminated = True
        self._elimination_order.append(player_index)
        record.placement = self._total_players - len(self._elimination_order) + 1
        record.freeze_stats()

        logger.info(
            "Player %d eliminated! Placement: %d, Remaining: %d",
            player_index, record.placement, self.remaining_players,
        )
        # Settle the match result before observers hear about anything
        match_end = self._evaluate_match_end()

        self.player_eliminated.emit(player_index, record.placement)
        if match_end is not None:
            signal, args = match_end
            signal.emit(*args)

    def _evaluate_match_end(self) -> tuple[Signal, tuple] | None:
        """Apply any match-end transition and return the notification it owes."""
        if self._match_ended:
            return None

        if self.mode.is_endless or self._total_players == 1:
            return self._end_marathon()

        if self.remaining_players > 1:
            return None

        survivors = [r for r in self.all_records() if not r.is_eliminated]
        if len(survivors) == 1:
            return self._end_with_winner(survivors[0])

        logger.warning("No surviving player left - draw!")
        self._match_ended = True
        return self.match_draw, ()

    def _end_marathon(self) -> tuple[Signal, tuple]:
        self._match_ended = True
        self._winner_index = None
        logger.info("Marathon match ended (game over)")
        return self.marathon_game_over, ()

    def _end_with_winner(self, record: PlayerRecord) -> tuple[Signal, tuple]:
        record.placement = 1
        record.freeze_stats()
        self._match_ended = True
        self._winner_index = record.player_index
        logger.info("VS match ended! Winner: Player %d (human: %s)", record.player_index, record.is_human)
        return self.match_winner, (record.player_index, record.is_human)

    # Persistence

    def save_human_high_scores(self) -> dict[int, int]:
        """Submit every human's score to the leaderboard.

        CPU players and zero scores are never submitted. Storage failures are
        logged and skipped; the match result is already final at this point.

        Returns:
            Leaderboard rank per submitted player index (0 = did not qualify)
        """
        ranks: dict[int, int] = {}
        if self.leaderboard is None:
            logger.warning("No leaderboard available, cannot save scores")
            return ranks

        for record in self.human_records():
            score = record.score
            if score <= 0:
                continue
            try:
                rank = self.leaderboard.add_score(score, record.highest_combo, record.speed_level)
            except PERSISTENCE_ERRORS as e:
                logger.warning("Failed to save score %d for player %d: %s", score, record.player_index, e)
                continue
            ranks[record.player_index] = rank
            if rank > 0:
                logger.info("Player %d score %d ranked #%d", record.player_index, score, rank)
        return ranks

    def _disconnect_engine(self, player_index: int):
        relay = self._score_relays.pop(player_index, None)
        record = self._players.get(player_index)
        if relay is not None and record is not None and record.engine is not None:
            record.engine.match_scored.disconnect(relay)
