"""
KrishiCash - Farm Finance Simulation Engine

A 12-month personal-finance game: manage income, expenses, savings,
insurance, debt and random life events to reach a savings goal while
keeping a financial stability score. The engine provides:
- Immutable game state and pure transitions
- Stability scoring
- Versioned save files
- Session controllers and an HTTP dispatch service
"""

__version__ = "0.1.0"

from .engine_core import GamePhase, GameState, initial_state

__all__ = ["GamePhase", "GameState", "initial_state", "__version__"]
