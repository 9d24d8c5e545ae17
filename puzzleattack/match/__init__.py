"""
Match-level coordination for Puzzle Attack.

MatchCoordinator tracks eliminations, placements and the winner across all
grids in a match; GarbageRouter turns finished combos into attacks on
opponents.
"""

from .match_config import MAX_PLAYERS, GameModeConfig, GameModeFactory, GameModeType
from .match_coordinator import MatchCoordinator, PlayerRecord
from .garbage_config import GarbageBlockCost, GarbageConfig, GarbageFactory, TargetingMode
from .garbage_router import GarbageRouter, stack_height

__all__ = [
    'MAX_PLAYERS',
    'GameModeConfig',
    'GameModeFactory',
    'GameModeType',
    'MatchCoordinator',
    'PlayerRecord',
    'GarbageBlockCost',
    'GarbageConfig',
    'GarbageFactory',
    'TargetingMode',
    'GarbageRouter',
    'stack_height',
]
