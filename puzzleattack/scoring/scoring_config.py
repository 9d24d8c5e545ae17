"""Scoring configuration for combo/chain point calculation."""

from dataclasses import dataclass, field


@dataclass
class ScoringConfig:
    """Tuning values for a single grid's ScoringEngine.

    size_bonuses maps a minimum match size to its flat bonus. The largest
    threshold that the match reaches wins, so (6, 100) beats (4, 20) for a
    7-tile match.
    """

    points_per_tile: int = 10
    combo_multiplier: float = 0.5
    chain_bonus_per_level: int = 50
    combo_timeout: float = 2.0
    chain_window: float = 0.5
    size_bonuses: tuple[tuple[int, int], ...] = field(
        default_factory=lambda: ((6, 100), (5, 50), (4, 20))
    )

    def size_bonus(self, tiles_matched: int) -> int:
        for threshold, bonus in sorted(self.size_bonuses, reverse=True):
            if tiles_matched >= threshold:
                return bonus
        return 0

    def validate(self):
        if self.points_per_tile < 0 or self.chain_bonus_per_level < 0:
            raise ValueError("Point values must not be negative")
        if self.combo_multiplier < 0:
            raise ValueError("Combo multiplier must not be negative")
        if self.combo_timeout <= 0 or self.chain_window <= 0:
            raise ValueError("Combo timeout and chain window must be positive")
        if self.chain_window >= self.combo_timeout:
            raise ValueError(
                f"Chain window {self.chain_window} must be shorter than combo timeout {self.combo_timeout}"
            )
        if any(threshold <= 0 or bonus < 0 for threshold, bonus in self.size_bonuses):
            raise ValueError("Size bonus thresholds must be positive and bonuses non-negative")


class ScoringFactory:

    @staticmethod
    def default() -> ScoringConfig:
        config = ScoringConfig()
        config.validate()
        return config

    @staticmethod
    def relaxed() -> ScoringConfig:
        config = ScoringConfig(combo_timeout=3.0, chain_window=0.8)
        config.validate()
        return config

    @staticmethod
    def strict() -> ScoringConfig:
        config = ScoringConfig(combo_timeout=1.2, chain_window=0.3)
        config.validate()
        return config

    @staticmethod
    def custom(
        points_per_tile: int,
        combo_multiplier: float,
        chain_bonus_per_level: int,
        combo_timeout: float,
        chain_window: float,
    ) -> ScoringConfig:
        config = ScoringConfig(
            points_per_tile=points_per_tile,
            combo_multiplier=combo_multiplier,
            chain_bonus_per_level=chain_bonus_per_level,
            combo_timeout=combo_timeout,
            chain_window=chain_window,
        )
        config.validate()
        return config
