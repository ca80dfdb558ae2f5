"""
Bots module - Headless players.

Provides:
- PlayerPolicy: Interface for decision-making
- RandomPolicy / FirstLegalPolicy: Baselines
- PrudentPolicy: Simple budgeting rules
- play_game: Runs a whole game with a policy
"""

from .policy import PlayerPolicy, PolicyDecision, RandomPolicy, FirstLegalPolicy, PrudentPolicy
from .runner import SimulationResult, play_game

__all__ = [
    "PlayerPolicy",
    "PolicyDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "PrudentPolicy",
    "SimulationResult",
    "play_game",
]
