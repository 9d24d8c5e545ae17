"""
Per-grid scoring for Puzzle Attack.

Each grid owns one ScoringEngine that turns match events into points and
tracks the combo and chain streaks that drive garbage attacks.
"""

from .events import Signal
from .scoring_config import ScoringConfig, ScoringFactory
from .scoring_engine import ScoringEngine

__all__ = [
    'Signal',
    'ScoringConfig',
    'ScoringFactory',
    'ScoringEngine',
]
