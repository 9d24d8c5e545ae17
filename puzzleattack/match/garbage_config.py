"""Garbage routing configuration for VS modes."""

from dataclasses import dataclass, field
from enum import Enum


class TargetingMode(Enum):
    SEQUENTIAL = "sequential"  # rotate through opponents
    SPLIT_EVENLY = "split_evenly"
    ALL_OPPONENTS = "all_opponents"  # full amount to everyone
    RANDOM = "random"
    LOWEST_STACK = "lowest_stack"
    HIGHEST_STACK = "highest_stack"


@dataclass(frozen=True)
class GarbageBlockCost:
    width: int
    height: int
    cost: int  # 0 disables the block


DEFAULT_BLOCK_COSTS = (
    GarbageBlockCost(6, 6, 10000),
    GarbageBlockCost(6, 5, 8000),
    GarbageBlockCost(6, 4, 7000),
    GarbageBlockCost(6, 3, 6000),
    GarbageBlockCost(6, 2, 4000),
    GarbageBlockCost(6, 1, 1500),
    GarbageBlockCost(5, 2, 1000),
    GarbageBlockCost(4, 2, 800),
    GarbageBlockCost(3, 2, 700),
    GarbageBlockCost(5, 1, 600),
    GarbageBlockCost(2, 2, 500),
    GarbageBlockCost(1, 2, 400),
    GarbageBlockCost(1, 1, 250),
)


@dataclass
class GarbageConfig:
    """Score tables are indexed by match size, combo count and chain level.

    Values past the end of a table reuse its last entry.
    """

    targeting_mode: TargetingMode = TargetingMode.SEQUENTIAL
    send_delay: float = 0.5
    allow_countering: bool = True
    match_size_scores: tuple[int, ...] = (0, 0, 0, 50, 100, 175, 300, 400, 500, 550, 600)
    combo_bonus_scores: tuple[int, ...] = (0, 0, 100, 150, 200, 250, 300, 350, 400, 450, 500)
    chain_bonus_scores: tuple[int, ...] = (0, 0, 100, 200, 300, 400, 500, 600, 700, 800, 900)
    block_costs: tuple[GarbageBlockCost, ...] = field(default_factory=lambda: DEFAULT_BLOCK_COSTS)

    def sorted_block_costs(self) -> list[GarbageBlockCost]:
        """Enabled blocks, most expensive first."""
        return sorted((b for b in self.block_costs if b.cost > 0), key=lambda b: b.cost, reverse=True)

    def validate(self):
        if self.send_delay < 0:
            raise ValueError("Send delay must not be negative")
        for name in ("match_size_scores", "combo_bonus_scores", "chain_bonus_scores"):
            table = getattr(self, name)
            if not table:
                raise ValueError(f"{name} must not be empty")
            if any(value < 0 for value in table):
                raise ValueError(f"{name} must not contain negative scores")
        for block in self.block_costs:
            if block.width <= 0 or block.height <= 0 or block.cost < 0:
                raise ValueError(f"Invalid garbage block {block}")


class GarbageFactory:

    @staticmethod
    def default() -> GarbageConfig:
        config = GarbageConfig()
        config.validate()
        return config

    @staticmethod
    def brutal() -> GarbageConfig:
        config = GarbageConfig(targeting_mode=TargetingMode.ALL_OPPONENTS, allow_countering=False)
        config.validate()
        return config

    @staticmethod
    def custom(targeting_mode: TargetingMode, send_delay: float = 0.5, allow_countering: bool = True) -> GarbageConfig:
        config = GarbageConfig(
            targeting_mode=targeting_mode,
            send_delay=send_delay,
            allow_countering=allow_countering,
        )
        config.validate()
        return config
