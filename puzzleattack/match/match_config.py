"""Game mode configuration supplied to the match coordinator."""

from dataclasses import dataclass
from enum import Enum

MAX_PLAYERS = 4


class GameModeType(Enum):
    MARATHON = "marathon"  # single player endless
    VS_CPU = "vs_cpu"
    VS_HUMAN = "vs_human"
    MIXED = "mixed"


@dataclass
class GameModeConfig:
    """Marathon ends when its only grid tops out. Every other mode is won by the last grid standing."""

    display_name: str = "Marathon"
    mode_type: GameModeType = GameModeType.MARATHON
    min_players: int = 1
    max_players: int = 1
    default_players: int = 1
    allow_ai: bool = False
    enable_garbage_sending: bool = False

    @property
    def is_endless(self) -> bool:
        return self.mode_type == GameModeType.MARATHON

    def supports_player_count(self, player_count: int) -> bool:
        return self.min_players <= player_count <= self.max_players

    def validate(self):
        if not 1 <= self.min_players <= self.max_players <= MAX_PLAYERS:
            raise ValueError(
                f"Player range {self.min_players}..{self.max_players} must lie within 1..{MAX_PLAYERS}"
            )
        if not self.supports_player_count(self.default_players):
            raise ValueError(
                f"Default players {self.default_players} outside {self.min_players}..{self.max_players}"
            )
        if self.is_endless and self.max_players != 1:
            raise ValueError("Marathon is a single player mode")


class GameModeFactory:

    @staticmethod
    def marathon() -> GameModeConfig:
        config = GameModeConfig()
        config.validate()
        return config

    @staticmethod
    def vs_cpu() -> GameModeConfig:
        config = GameModeConfig(
            display_name="VS CPU",
            mode_type=GameModeType.VS_CPU,
            min_players=2,
            max_players=MAX_PLAYERS,
            default_players=2,
            allow_ai=True,
            enable_garbage_sending=True,
        )
        config.validate()
        return config

    @staticmethod
    def vs_human() -> GameModeConfig:
        config = GameModeConfig(
            display_name="VS Human",
            mode_type=GameModeType.VS_HUMAN,
            min_players=2,
            max_players=MAX_PLAYERS,
            default_players=2,
            enable_garbage_sending=True,
        )
        config.validate()
        return config

    @staticmethod
    def mixed() -> GameModeConfig:
        config = GameModeConfig(
            display_name="Mixed",
            mode_type=GameModeType.MIXED,
            min_players=2,
            max_players=MAX_PLAYERS,
            default_players=2,
            allow_ai=True,
            enable_garbage_sending=True,
        )
        config.validate()
        return config
