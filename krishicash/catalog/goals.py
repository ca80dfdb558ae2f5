"""
Savings goals the player can choose at the start of a game.
"""

from __future__ import annotations

from ..engine_core.state import Goal, GoalId
from .lookup import LookupResult


CYCLE = Goal(goal_id=GoalId.CYCLE, name="Cycle", cost=7_000, glyph="🚲")
MOTORBIKE = Goal(goal_id=GoalId.MOTORBIKE, name="Motorbike", cost=300_000, glyph="🏍️")
CAR = Goal(goal_id=GoalId.CAR, name="Car", cost=1_200_000, glyph="🚗")
HOUSE = Goal(goal_id=GoalId.HOUSE, name="New House", cost=2_000_000, glyph="🏠")

GAME_GOALS: dict[GoalId, Goal] = {
    goal.goal_id: goal for goal in (CYCLE, MOTORBIKE, CAR, HOUSE)
}


def get_goal(goal_id: GoalId | str | None) -> LookupResult[Goal | None]:
    """
    Resolve a goal by enum member or string id.

    There is no default goal: unknown ids resolve to None with found=False.
    """
    if isinstance(goal_id, str):
        try:
            goal_id = GoalId(goal_id.strip().lower())
        except ValueError:
            return LookupResult(value=None, found=False)
    if isinstance(goal_id, GoalId):
        return LookupResult(value=GAME_GOALS[goal_id], found=True)
    return LookupResult(value=None, found=False)
