"""
Engine Core - Deterministic game state management.

The engine is the runtime that:
1. Holds the immutable GameState shape
2. Scores financial stability
3. Applies transitions for each player action
4. Dispatches Action objects through the reducer
5. Enumerates legal actions and classifies outcomes
"""

from .state import (
    Advisory,
    AdvisoryKind,
    DifficultyConfig,
    DifficultyLevel,
    Event,
    EventType,
    GamePhase,
    GameState,
    Goal,
    GoalId,
    MonthRecord,
)
from .stability import StabilityBreakdown, compute_stability, stability_breakdown
from .rng import RandomSource, SeededRandomSource, FixedRandomSource
from .transitions import Transition, initial_state
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions
from .outcome import GameResult, Lesson, Outcome, ResultTone, game_lessons, get_game_result

__all__ = [
    "Advisory",
    "AdvisoryKind",
    "DifficultyConfig",
    "DifficultyLevel",
    "Event",
    "EventType",
    "GamePhase",
    "GameState",
    "Goal",
    "GoalId",
    "MonthRecord",
    "StabilityBreakdown",
    "compute_stability",
    "stability_breakdown",
    "RandomSource",
    "SeededRandomSource",
    "FixedRandomSource",
    "Transition",
    "initial_state",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
    "GameResult",
    "Lesson",
    "Outcome",
    "ResultTone",
    "game_lessons",
    "get_game_result",
]
