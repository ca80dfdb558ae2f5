"""
Catalogs - Static tables the engine reads but never writes.

- Difficulty tiers (income, expense multiplier)
- Savings goals
- Life events
- Fixed expenses and preset amounts
"""

from .lookup import LookupResult
from .difficulty import DIFFICULTY_LEVELS, DEFAULT_DIFFICULTY, get_difficulty
from .goals import GAME_GOALS, get_goal
from .events import GAME_EVENTS, get_event, events_of_type
from .expenses import FIXED_EXPENSES, FixedExpenses, total_expenses, round_half_up

__all__ = [
    "LookupResult",
    "DIFFICULTY_LEVELS",
    "DEFAULT_DIFFICULTY",
    "get_difficulty",
    "GAME_GOALS",
    "get_goal",
    "GAME_EVENTS",
    "get_event",
    "events_of_type",
    "FIXED_EXPENSES",
    "FixedExpenses",
    "total_expenses",
    "round_half_up",
]
