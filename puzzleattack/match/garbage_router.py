"""Routes garbage between grids in VS modes.

Every finished combo is worth a garbage score: the sum of its match-size
scores plus a bonus for the combo length and one for the highest chain it
reached. That score first cancels garbage already waiting for the sender and
the rest is sent to opponents after send_delay. A grid in the middle of a
combo holds incoming garbage until its combo ends, which gives it the chance
to counter. Delivered score is converted to garbage blocks greedily, most
expensive block first.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np

from puzzleattack.match.garbage_config import GarbageConfig, GarbageFactory, TargetingMode
from puzzleattack.scoring.events import Signal
from puzzleattack.scoring.scoring_engine import ScoringEngine

logger = logging.getLogger(__name__)

BoardProvider = Callable[[], Sequence[Sequence[int]]]


def stack_height(board: Sequence[Sequence[int]]) -> int:
    """Height of the tallest column. Row 0 is the top and 0 marks an empty cell."""
    occupied = np.asarray(board) != 0
    if occupied.size == 0:
        return 0
    filled_rows = np.flatnonzero(occupied.any(axis=1))
    if filled_rows.size == 0:
        return 0
    return int(occupied.shape[0] - filled_rows[0])


def table_lookup(table: Sequence[int], index: int) -> int:
    if index < 0 or index >= len(table):
        return table[-1] if table else 0
    return table[index]


@dataclass
class _PlayerGarbageState:
    engine: ScoringEngine
    board_provider: BoardProvider | None
    match_sizes: list[int] = field(default_factory=list)
    max_chain: int = 0
    in_combo: bool = False
    pending_incoming: int = 0
    eliminated: bool = False
    callbacks: list[tuple[Signal, Callable]] = field(default_factory=list)


@dataclass
class _ScheduledSend:
    sender_index: int
    amount: int
    remaining_delay: float


class GarbageRouter:

    def __init__(self, config: GarbageConfig | None = None, seed: int | None = None):
        self.config = config or GarbageFactory.default()
        self._rng = random.Random(seed)
        self._players: dict[int, _PlayerGarbageState] = {}
        self._scheduled: list[_ScheduledSend] = []
        self._sequential_cursor = 0

        self.garbage_sent = Signal("garbage_sent")
        self.garbage_countered = Signal("garbage_countered")
        self.garbage_received = Signal("garbage_received")

    # Registration

    def register_player(self, player_index: int, engine: ScoringEngine, board_provider: BoardProvider | None = None):
        """Follow a grid's scoring engine. Re-registering an index replaces it."""
        if player_index in self._players:
            self.unregister_player(player_index)

        state = _PlayerGarbageState(engine=engine, board_provider=board_provider)
        subscriptions = [
            (engine.combo_started, lambda: self._handle_combo_started(player_index)),
            (engine.match_scored, lambda tiles, combo, chain: self._handle_match_scored(player_index, tiles, chain)),
            (engine.combo_ended, lambda combo, chain: self._handle_combo_ended(player_index, combo, chain)),
        ]
        for signal, callback in subscriptions:
            signal.connect(callback)
        state.callbacks = subscriptions
        self._players[player_index] = state
        logger.debug("Registered grid %d for garbage routing", player_index)

    def unregister_player(self, player_index: int):
        state = self._players.pop(player_index, None)
        if state is None:
            return
        for signal, callback in state.callbacks:
            signal.disconnect(callback)

    def handle_player_eliminated(self, player_index: int, placement: int = 0):
        """Stop targeting a grid that topped out. Connects to MatchCoordinator.player_eliminated."""
        state = self._players.get(player_index)
        if state is None:
            return
        state.eliminated = True
        state.pending_incoming = 0
        self._scheduled = [s for s in self._scheduled if s.sender_index != player_index]

    # Queries

    def pending_incoming(self, player_index: int) -> int:
        state = self._players.get(player_index)
        return state.pending_incoming if state is not None else 0

    def pending_match_count(self, player_index: int) -> int:
        """Matches recorded so far in the player's running combo."""
        state = self._players.get(player_index)
        return len(state.match_sizes) if state is not None else 0

    def current_chain_level(self, player_index: int) -> int:
        state = self._players.get(player_index)
        return state.max_chain if state is not None else 0

    def is_player_in_combo(self, player_index: int) -> bool:
        state = self._players.get(player_index)
        return state is not None and state.in_combo

    @property
    def scheduled_sends(self) -> int:
        return len(self._scheduled)

    # Scoring

    def calculate_garbage_score(self, match_sizes: Sequence[int], total_combo: int, max_chain: int) -> int:
        match_score = sum(table_lookup(self.config.match_size_scores, size) for size in match_sizes)
        combo_bonus = table_lookup(self.config.combo_bonus_scores, total_combo)
        chain_bonus = table_lookup(self.config.chain_bonus_scores, max_chain)
        return match_score + combo_bonus + chain_bonus

    def convert_score_to_blocks(self, score: int) -> list[tuple[int, int]]:
        """Buy the most expensive affordable blocks first. Leftover score is dropped."""
        blocks = []
        remaining = score
        for block in self.config.sorted_block_costs():
            count, remaining = divmod(remaining, block.cost)
            blocks.extend([(block.width, block.height)] * count)
        if remaining > 0:
            logger.debug("Leftover garbage score %d wasted", remaining)
        return blocks

    # Engine notifications

    def _handle_combo_started(self, player_index: int):
        state = self._players[player_index]
        state.in_combo = True
        state.match_sizes.clear()
        state.max_chain = 0

    def _handle_match_scored(self, player_index: int, tiles_matched: int, chain_level: int):
        state = self._players[player_index]
        state.match_sizes.append(tiles_matched)
        state.max_chain = max(state.max_chain, chain_level)

    def _handle_combo_ended(self, player_index: int, total_combo: int, max_chain: int):
        state = self._players[player_index]
        state.in_combo = False

        garbage_score = self.calculate_garbage_score(state.match_sizes, total_combo, max(max_chain, state.max_chain))
        logger.debug(
            "Player %d combo ended (combo x%d, chain x%d, %d matches) = %d garbage score",
            player_index, total_combo, max_chain, len(state.match_sizes), garbage_score,
        )
        state.match_sizes.clear()
        state.max_chain = 0

        if state.eliminated:
            return

        if garbage_score > 0 and self.config.allow_countering and state.pending_incoming > 0:
            countered = min(garbage_score, state.pending_incoming)
            state.pending_incoming -= countered
            garbage_score -= countered
            logger.debug("Player %d countered %d, %d remaining", player_index, countered, state.pending_incoming)
            self.garbage_countered.emit(player_index, countered, state.pending_incoming)

        if garbage_score > 0:
            self._schedule_send(player_index, garbage_score)

        # Garbage held back during the combo lands now
        self._deliver_pending(player_index)

    # Routing

    def tick(self, delta_time: float):
        """Advance delayed sends. Sends due in the same tick go out in scheduling order."""
        if delta_time <= 0 or not self._scheduled:
            return
        due = []
        for scheduled in self._scheduled:
            scheduled.remaining_delay -= delta_time
            if scheduled.remaining_delay <= 0:
                due.append(scheduled)
        self._scheduled = [s for s in self._scheduled if s.remaining_delay > 0]
        for scheduled in due:
            self.send_garbage(scheduled.sender_index, scheduled.amount)

    def _schedule_send(self, sender_index: int, amount: int):
        if self.config.send_delay <= 0:
            self.send_garbage(sender_index, amount)
        else:
            self._scheduled.append(_ScheduledSend(sender_index, amount, self.config.send_delay))

    def send_garbage(self, sender_index: int, amount: int):
        """Distribute garbage score from one player to opponents per the targeting mode."""
        if amount <= 0:
            return
        targets = self._determine_targets(sender_index)
        if not targets:
            return

        mode = self.config.targeting_mode
        if mode == TargetingMode.SPLIT_EVENLY:
            per_target, remainder = divmod(amount, len(targets))
            for i, target in enumerate(targets):
                target_amount = per_target + (1 if i < remainder else 0)
                if target_amount > 0:
                    self._queue_for_player(sender_index, target, target_amount)
        elif mode == TargetingMode.ALL_OPPONENTS:
            for target in targets:
                self._queue_for_player(sender_index, target, amount)
        else:
            self._queue_for_player(sender_index, targets[0], amount)

    def manual_send_garbage(self, sender_index: int, target_index: int, amount: int):
        """Send garbage to a specific grid regardless of targeting mode."""
        if amount <= 0 or not self._is_targetable(target_index):
            return
        self._queue_for_player(sender_index, target_index, amount)

    def force_deliver_garbage(self, player_index: int):
        """Deliver held garbage even if the player is mid-combo."""
        if player_index in self._players:
            self._deliver_pending(player_index, force=True)

    def clear_pending_garbage(self, player_index: int):
        state = self._players.get(player_index)
        if state is None:
            return
        state.pending_incoming = 0
        state.match_sizes.clear()
        state.max_chain = 0

    def _is_targetable(self, player_index: int) -> bool:
        state = self._players.get(player_index)
        return state is not None and not state.eliminated

    def _opponents(self, sender_index: int) -> list[int]:
        return [i for i in sorted(self._players) if i != sender_index and self._is_targetable(i)]

    def _determine_targets(self, sender_index: int) -> list[int]:
        opponents = self._opponents(sender_index)
        if not opponents:
            return []

        mode = self.config.targeting_mode
        if mode == TargetingMode.SEQUENTIAL:
            target = next((i for i in opponents if i >= self._sequential_cursor), opponents[0])
            self._sequential_cursor = target + 1
            return [target]
        if mode == TargetingMode.RANDOM:
            return [self._rng.choice(opponents)]
        if mode == TargetingMode.LOWEST_STACK:
            return [min(opponents, key=self._stack_height)]
        if mode == TargetingMode.HIGHEST_STACK:
            return [max(opponents, key=self._stack_height)]
        return opponents

    def _stack_height(self, player_index: int) -> int:
        provider = self._players[player_index].board_provider
        if provider is None:
            return 0
        return stack_height(provider())

    def _queue_for_player(self, sender_index: int, target_index: int, amount: int):
        state = self._players[target_index]
        state.pending_incoming += amount
        logger.debug("Player %d -> Player %d: %d garbage score queued", sender_index, target_index, amount)
        self.garbage_sent.emit(sender_index, target_index, amount)

        if not state.in_combo:
            self._deliver_pending(target_index)

    def _deliver_pending(self, player_index: int, force: bool = False):
        state = self._players[player_index]
        if state.pending_incoming <= 0 or state.eliminated:
            return
        if state.in_combo and not force:
            return

        score = state.pending_incoming
        state.pending_incoming = 0
        blocks = self.convert_score_to_blocks(score)
        logger.debug("Delivering %d garbage score to player %d as %d blocks", score, player_index, len(blocks))
        self.garbage_received.emit(player_index, score, blocks)
