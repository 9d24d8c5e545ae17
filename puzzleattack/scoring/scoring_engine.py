"""Per-grid scoring with combo and chain tracking.

A combo is any run of matches that arrive within ``combo_timeout`` of each
other. A chain is the cascade-only streak nested inside a combo: it starts at
level 2 on the first match caused by falling tiles and must keep cascading
within the shorter ``chain_window``.

The engine never reads a clock. The owning game loop calls ``tick`` once per
simulation step and the event methods as the grid reports them.
"""

import logging
import math

from puzzleattack.scoring.events import Signal
from puzzleattack.scoring.scoring_config import ScoringConfig, ScoringFactory

logger = logging.getLogger(__name__)

FIRST_CHAIN_LEVEL = 2


def _elapsed(timer: float, limit: float) -> bool:
    # Summed float ticks land just short of the limit (8 x 0.1 < 0.8)
    return timer >= limit or math.isclose(timer, limit)


class ScoringEngine:

    def __init__(self, config: ScoringConfig | None = None, player_index: int = 0):
        self.config = config or ScoringFactory.default()
        self.player_index = player_index
        # Set by the grid's riser; reported with leaderboard submissions
        self.speed_level = 1

        self.match_scored = Signal("match_scored")
        self.combo_started = Signal("combo_started")
        self.combo_ended = Signal("combo_ended")
        self.chain_increased = Signal("chain_increased")

        self.reset_all()

    # Queries

    @property
    def score(self) -> int:
        return self._score

    @property
    def current_combo(self) -> int:
        return self._combo

    @property
    def current_chain(self) -> int:
        return self._chain

    @property
    def highest_combo(self) -> int:
        return self._highest_combo

    @property
    def highest_chain(self) -> int:
        return self._highest_chain

    @property
    def max_chain_this_combo(self) -> int:
        return self._max_chain_this_combo

    @property
    def is_in_combo(self) -> bool:
        return self._in_combo

    @property
    def is_chain_active(self) -> bool:
        return self._chain_active

    @property
    def combo_timer(self) -> float:
        return self._combo_timer

    @property
    def chain_timer(self) -> float:
        return self._chain_timer

    # Grid events

    def record_match(self, tiles_matched: int, is_chain_match: bool = False, match_group_count: int = 1):
        """Score a match reported by the grid.

        Args:
            tiles_matched: Tiles cleared by this match event
            is_chain_match: True if the match was caused by tiles falling after a previous clear
            match_group_count: Disjoint groups cleared at once, each counting as a combo step
        """
        if tiles_matched <= 0:
            return
        match_group_count = max(1, match_group_count)

        if not self._in_combo:
            self._start_combo()
        self._combo_timer = 0.0

        if is_chain_match:
            if self._chain_active:
                self._raise_chain()
            else:
                self._start_chain()
        elif self._chain_active:
            # A plain match keeps a live chain open without raising it
            self._chain_timer = 0.0

        self._combo += match_group_count
        self._highest_combo = max(self._highest_combo, self._combo)

        points = self.calculate_points(tiles_matched, self._combo, self._chain)
        self._score += points

        self._check_invariants()
        logger.debug(
            "P%d matched %d tiles (%d groups) | combo x%d | chain x%d | +%d pts",
            self.player_index, tiles_matched, match_group_count, self._combo, self._chain, points,
        )
        self.match_scored.emit(tiles_matched, self._combo, self._chain)

    def notify_tiles_falling(self):
        """Tiles were cleared and are about to drop, so a cascade may follow."""
        if self._chain_active:
            self._chain_timer = 0.0

    def notify_drop_complete(self, had_matches: bool):
        if not had_matches and self._chain_active:
            self._end_chain()

    def reset_combo(self):
        """Break the current streak, e.g. when the grid rises or garbage lands."""
        if self._in_combo:
            self._end_combo()

    def reset_all(self):
        self._score = 0
        self._combo = 0
        self._highest_combo = 0
        self._chain = 0
        self._highest_chain = 0
        self._max_chain_this_combo = 0
        self._in_combo = False
        self._chain_active = False
        self._combo_timer = 0.0
        self._chain_timer = 0.0

    def tick(self, delta_time: float):
        """Advance the combo and chain timers by one simulation step."""
        if delta_time <= 0:
            return

        if self._in_combo:
            self._combo_timer += delta_time
            if _elapsed(self._combo_timer, self.config.combo_timeout):
                self._end_combo()

        if self._chain_active:
            self._chain_timer += delta_time
            if _elapsed(self._chain_timer, self.config.chain_window):
                self._end_chain()

    def calculate_points(self, tiles_matched: int, combo_count: int, chain_level: int) -> int:
        base_points = tiles_matched * self.config.points_per_tile
        combo_factor = 1 + combo_count * self.config.combo_multiplier
        chain_bonus = (chain_level - 1) * self.config.chain_bonus_per_level if chain_level > 1 else 0
        size_bonus = self.config.size_bonus(tiles_matched)
        return round(base_points * combo_factor) + chain_bonus + size_bonus

    # Transitions

    def _start_combo(self):
        self._in_combo = True
        self._combo = 0
        self._max_chain_this_combo = 0
        self._combo_timer = 0.0
        logger.debug("P%d combo started", self.player_index)
        self.combo_started.emit()

    def _end_combo(self):
        final_combo = self._combo
        final_max_chain = self._max_chain_this_combo

        if self._chain_active:
            self._end_chain()

        self._in_combo = False
        self._combo = 0
        self._max_chain_this_combo = 0
        self._combo_timer = 0.0

        if final_combo > 1:
            logger.debug(
                "P%d combo ended at x%d (max chain x%d)", self.player_index, final_combo, final_max_chain
            )
        self.combo_ended.emit(final_combo, final_max_chain)

    def _start_chain(self):
        self._chain_active = True
        self._chain = FIRST_CHAIN_LEVEL
        self._chain_timer = 0.0
        self._record_chain_level()
        logger.debug("P%d chain started at x%d", self.player_index, self._chain)
        self.chain_increased.emit(self._chain)

    def _raise_chain(self):
        self._chain += 1
        self._chain_timer = 0.0
        self._record_chain_level()
        logger.debug("P%d chain x%d", self.player_index, self._chain)
        self.chain_increased.emit(self._chain)

    def _end_chain(self):
        logger.debug("P%d chain ended at x%d", self.player_index, self._chain)
        self._chain_active = False
        self._chain = 0
        self._chain_timer = 0.0

    def _record_chain_level(self):
        self._highest_chain = max(self._highest_chain, self._chain)
        self._max_chain_this_combo = max(self._max_chain_this_combo, self._chain)

    def _check_invariants(self):
        assert self._in_combo or not self._chain_active, "chain active outside a combo"
        assert self._score >= 0

    def __repr__(self) -> str:
        return f"<ScoringEngine(P{self.player_index}, score={self._score}, combo={self._combo}, chain={self._chain})>"
