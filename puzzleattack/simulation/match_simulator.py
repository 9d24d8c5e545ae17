"""
Headless match simulation for exercising the scoring and match core.

Each grid is a coarse stand-in for the real grid simulation: its stack rises
on a timer, random matches clear rows and sometimes cascade into chains, and
received garbage adds rows. A grid whose stack reaches the top is eliminated.
The driver advances every grid in fixed player-index order each tick so that
simultaneous top-outs resolve the same way on every run.
"""

import random
from dataclasses import dataclass, field

from puzzleattack.leaderboard.leaderboard import Leaderboard
from puzzleattack.match.garbage_config import GarbageConfig
from puzzleattack.match.garbage_router import GarbageRouter
from puzzleattack.match.match_config import GameModeConfig, GameModeFactory
from puzzleattack.match.match_coordinator import MatchCoordinator
from puzzleattack.scoring.scoring_config import ScoringConfig, ScoringFactory
from puzzleattack.scoring.scoring_engine import ScoringEngine


@dataclass
class SimulationParams:
    num_rows: int = 12
    num_cols: int = 6
    tick_seconds: float = 0.1
    max_ticks: int = 20000
    rise_interval: float = 3.0
    rises_per_speed_level: int = 5
    match_probability: float = 0.08
    cascade_probability: float = 0.35
    multi_group_probability: float = 0.1
    match_sizes: tuple[int, ...] = (3, 3, 3, 3, 4, 4, 5, 6)


@dataclass
class MatchResult:
    outcome: str  # "winner", "marathon", "draw" or "timeout"
    winner_index: int | None
    placements: dict[int, int]
    scores: dict[int, int]
    highest_combos: dict[int, int]
    highest_chains: dict[int, int]
    elimination_order: tuple[int, ...]
    ticks: int
    leaderboard_ranks: dict[int, int] = field(default_factory=dict)


class SimulatedGrid:
    """Stack height bookkeeping for one player, reporting to its ScoringEngine."""

    def __init__(self, player_index: int, engine: ScoringEngine, params: SimulationParams, rng: random.Random):
        self.player_index = player_index
        self.engine = engine
        self.params = params
        self.rng = rng
        self.height = params.num_rows // 3
        self.rises = 0
        self._rise_timer = 0.0

    def board(self) -> list[list[int]]:
        empty = self.params.num_rows - min(self.height, self.params.num_rows)
        return [[0] * self.params.num_cols for _ in range(empty)] + [
            [1] * self.params.num_cols for _ in range(self.params.num_rows - empty)
        ]

    @property
    def topped_out(self) -> bool:
        return self.height >= self.params.num_rows

    def receive_garbage(self, player_index: int, score: int, blocks: list[tuple[int, int]]):
        if player_index != self.player_index:
            return
        self.height += sum(height for _, height in blocks)
        # Landing garbage breaks the current streak
        self.engine.reset_combo()

    def step(self):
        self._rise_timer += self.params.tick_seconds
        if self._rise_timer >= self.params.rise_interval:
            self._rise_timer = 0.0
            self._rise()

        if self.height > 0 and self.rng.random() < self.params.match_probability:
            self._play_match()

        self.engine.tick(self.params.tick_seconds)

    def _rise(self):
        self.height += 1
        self.rises += 1
        if self.rises % self.params.rises_per_speed_level == 0:
            self.engine.speed_level += 1
        self.engine.reset_combo()

    def _play_match(self):
        groups = 2 if self.rng.random() < self.params.multi_group_probability else 1
        tiles = sum(self.rng.choice(self.params.match_sizes) for _ in range(groups))
        self.engine.record_match(tiles, is_chain_match=False, match_group_count=groups)
        self._clear_rows(tiles)

        while self.height > 0:
            self.engine.notify_tiles_falling()
            if self.rng.random() >= self.params.cascade_probability:
                self.engine.notify_drop_complete(had_matches=False)
                break
            tiles = self.rng.choice(self.params.match_sizes)
            self.engine.record_match(tiles, is_chain_match=True)
            self.engine.notify_drop_complete(had_matches=True)
            self._clear_rows(tiles)

    def _clear_rows(self, tiles: int):
        self.height = max(0, self.height - max(1, tiles // self.params.num_cols))


class MatchSimulator:
    """Plays one complete match against the scoring and match core."""

    def __init__(
        self,
        humans: list[bool],
        mode: GameModeConfig | None = None,
        scoring_config: ScoringConfig | None = None,
        garbage_config: GarbageConfig | None = None,
        params: SimulationParams | None = None,
        leaderboard: Leaderboard | None = None,
        seed: int | None = None,
    ):
        if not humans:
            raise ValueError("At least one player is required")
        self.humans = humans
        self.mode = mode or (GameModeFactory.marathon() if len(humans) == 1 else GameModeFactory.vs_cpu())
        self.scoring_config = scoring_config or ScoringFactory.default()
        self.params = params or SimulationParams()
        self.rng = random.Random(seed)

        self.coordinator = MatchCoordinator(self.mode, leaderboard)
        self.outcome = "timeout"
        self.coordinator.match_winner.connect(lambda index, is_human: self._set_outcome("winner"))
        self.coordinator.marathon_game_over.connect(lambda: self._set_outcome("marathon"))
        self.coordinator.match_draw.connect(lambda: self._set_outcome("draw"))

        self.router = None
        if self.mode.enable_garbage_sending and len(humans) > 1:
            self.router = GarbageRouter(garbage_config, seed=seed)
            self.coordinator.player_eliminated.connect(self.router.handle_player_eliminated)

        self.coordinator.initialize_match(len(humans))
        self.grids: list[SimulatedGrid] = []
        for index, is_human in enumerate(humans):
            engine = ScoringEngine(self.scoring_config, player_index=index)
            grid = SimulatedGrid(index, engine, self.params, self.rng)
            self.coordinator.register_player(index, engine, is_human)
            if self.router is not None:
                self.router.register_player(index, engine, grid.board)
                self.router.garbage_received.connect(grid.receive_garbage)
            self.grids.append(grid)

    def _set_outcome(self, outcome: str):
        self.outcome = outcome

    def run(self, save_scores: bool = False) -> MatchResult:
        ticks = 0
        while not self.coordinator.match_ended and ticks < self.params.max_ticks:
            ticks += 1
            for grid in self.grids:
                if self.coordinator.is_player_eliminated(grid.player_index):
                    continue
                grid.step()
                if grid.topped_out:
                    self.coordinator.eliminate_player(grid.player_index)
            if self.router is not None:
                self.router.tick(self.params.tick_seconds)

        ranks = self.coordinator.save_human_high_scores() if save_scores else {}
        records = self.coordinator.all_records()
        return MatchResult(
            outcome=self.outcome,
            winner_index=self.coordinator.winner_index,
            placements={r.player_index: r.placement for r in records},
            scores={r.player_index: r.score for r in records},
            highest_combos={r.player_index: r.highest_combo for r in records},
            highest_chains={r.player_index: r.highest_chain for r in records},
            elimination_order=self.coordinator.elimination_order,
            ticks=ticks,
            leaderboard_ranks=ranks,
        )
