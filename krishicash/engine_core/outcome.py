"""
Outcome - End-of-game classification and lessons.

Pure queries over a GameState; nothing here changes state.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..formatting import format_indian_currency
from .state import EventType, GameState


class Outcome(Enum):
    PROPERTY_CONFISCATED = "property_confiscated"
    GOAL_PURCHASED = "goal_purchased"
    GOAL_REACHABLE = "goal_reachable"
    SECURE = "secure"
    STABLE = "stable"
    VULNERABLE = "vulnerable"


class ResultTone(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class GameResult:
    outcome: Outcome
    title: str
    description: str
    tone: ResultTone


@dataclass(frozen=True)
class Lesson:
    text: str
    positive: bool


SECURE_THRESHOLD = 80
STABLE_THRESHOLD = 50


def get_game_result(state: GameState) -> GameResult:
    """
    Classify the game outcome.

    Priority: confiscation, purchased goal, reachable goal, then
    stability tiers (>80 secure, 51-80 stable, <=50 vulnerable).
    """
    goal = state.selected_goal

    if state.property_confiscated:
        return GameResult(
            outcome=Outcome.PROPERTY_CONFISCATED,
            title="Property Confiscated! 💔",
            description="You couldn't repay your loan within 6 months. "
                        "Your property has been seized.",
            tone=ResultTone.DESTRUCTIVE,
        )

    if state.goal_achieved and goal is not None:
        return GameResult(
            outcome=Outcome.GOAL_PURCHASED,
            title=f"Congratulations! You bought a {goal.name}! {goal.glyph}".rstrip(),
            description=f"Amazing! Your {goal.name} is now worth "
                        f"{format_indian_currency(goal.cost)} (10% appreciation)!",
            tone=ResultTone.SUCCESS,
        )

    if goal is not None and state.savings >= goal.cost:
        return GameResult(
            outcome=Outcome.GOAL_REACHABLE,
            title=f"Goal Achieved! {goal.glyph}".rstrip(),
            description=f"You saved enough to buy a {goal.name}! You can now purchase it.",
            tone=ResultTone.SUCCESS,
        )

    if state.stability_score > SECURE_THRESHOLD:
        if goal is not None:
            shortfall = format_indian_currency(goal.cost - state.savings)
            description = f"Great progress! You need {shortfall} more for your {goal.name}."
        else:
            description = "Excellent! You managed your finances wisely and built a stable future."
        return GameResult(
            outcome=Outcome.SECURE,
            title="Financially Secure Farmer! 🌟",
            description=description,
            tone=ResultTone.SUCCESS,
        )

    if state.stability_score > STABLE_THRESHOLD:
        return GameResult(
            outcome=Outcome.STABLE,
            title="Stable but Needs Improvement 📊",
            description="You did okay, but there's room to improve your financial habits.",
            tone=ResultTone.WARNING,
        )

    return GameResult(
        outcome=Outcome.VULNERABLE,
        title="Financially Vulnerable ⚠️",
        description="Your finances need attention. Try saving more and avoiding debt.",
        tone=ResultTone.DESTRUCTIVE,
    )


def game_lessons(state: GameState) -> list[Lesson]:
    """Lessons shown on the end screen, in display order."""
    saw_loan_offer = any(
        record.event is not None and record.event.event_type == EventType.LOAN_OFFER
        for record in state.month_history
    )

    candidates = [
        (state.savings >= 200_000, True,
         "Excellent savings! You built a strong financial cushion."),
        (state.savings < 100_000, False,
         "Try to save more regularly to build emergency funds."),
        (state.monthly_income > 150_000, True,
         "Your consistent saving unlocked income growth!"),
        (state.debt == 0 and saw_loan_offer, True,
         "You avoided or paid off debt - excellent discipline!"),
        (state.debt > 0, False,
         "High-interest loans hurt your finances. Avoid when possible."),
        (state.stability_score >= 80, True,
         "You maintained excellent financial stability throughout!"),
        (state.property_confiscated, False,
         "Always repay loans within 6 months to avoid losing your property."),
    ]
    return [Lesson(text=text, positive=positive) for condition, positive, text in candidates if condition]
