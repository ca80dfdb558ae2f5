"""
Game State - The immutable snapshot the engine operates on.

Design principles:
- Immutable: every field is frozen, collections are tuples
- Serializable: the persistence schema mirrors this shape
- Derived values (stability score) are recomputed, never written directly
- All state changes go through the transitions module
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum


class GamePhase(Enum):
    """Explicit state-machine tag for a play-through."""
    INTRO = "intro"
    GOAL_SELECTION = "goal_selection"
    PLAYING = "playing"
    EVENT = "event"
    DECISION = "decision"
    SUMMARY = "summary"
    ENDED = "ended"


class DifficultyLevel(Enum):
    """Closed set of difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GoalId(Enum):
    """Closed set of purchasable goals."""
    CYCLE = "cycle"
    MOTORBIKE = "motorbike"
    CAR = "car"
    HOUSE = "house"


class EventType(Enum):
    """Life-event categories."""
    MEDICAL = "medical"
    CROP_LOSS = "crop_loss"
    GOOD_RAIN = "good_rain"
    LOAN_OFFER = "loan_offer"
    FESTIVAL = "festival"
    EQUIPMENT = "equipment"
    BONUS = "bonus"


class AdvisoryKind(Enum):
    """One-time notices emitted alongside a transition."""
    LOAN_DEADLINE = "loan_deadline"
    INCOME_BOOST = "income_boost"
    PROPERTY_CONFISCATED = "property_confiscated"


@dataclass(frozen=True)
class Event:
    """
    A random life event drawn at the start of each month.

    `interest` is only carried by loan offers (monthly percent).
    """
    event_id: str
    event_type: EventType
    title: str
    description: str
    cost: int | None = None
    reward: int | None = None
    interest: int | None = None

    @property
    def is_positive(self) -> bool:
        return bool(self.reward)


@dataclass(frozen=True)
class Goal:
    """A savings goal the player can buy once."""
    goal_id: GoalId
    name: str
    cost: int
    glyph: str = ""

    def with_cost(self, cost: int) -> Goal:
        """Return a copy with a new recorded cost."""
        return replace(self, cost=cost)


@dataclass(frozen=True)
class DifficultyConfig:
    """Income and expense parameters for one difficulty tier."""
    level: DifficultyLevel
    name: str
    description: str
    monthly_income: int
    expense_multiplier: float
    glyph: str = ""


@dataclass(frozen=True)
class MonthRecord:
    """Snapshot appended to history when a month ends."""
    month: int
    income: int
    expenses: int
    savings: int
    balance: int
    event: Event | None = None
    decisions: tuple[str, ...] = ()


@dataclass(frozen=True)
class Advisory:
    """A user-facing notice produced by a transition."""
    kind: AdvisoryKind
    title: str
    message: str


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    Instances are never mutated; transitions return new snapshots.
    """
    month: int = 1
    balance: int = 0
    monthly_income: int = 150_000
    savings: int = 0
    stability_score: int = 0

    # Insurance
    has_insurance: bool = False
    insurance_amount: int = 0

    # Loan
    debt: int = 0
    loan_months_remaining: int = 0

    # Savings streak
    consecutive_saving_months: int = 0
    total_saved_this_streak: int = 0

    phase: GamePhase = GamePhase.INTRO
    current_event: Event | None = None
    month_history: tuple[MonthRecord, ...] = field(default_factory=tuple)

    # Goal
    selected_goal: Goal | None = None
    goal_achieved: bool = False

    property_confiscated: bool = False

    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    expense_multiplier: float = 1.0

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.ENDED

    @property
    def in_debt(self) -> bool:
        return self.debt > 0

    @property
    def net_worth(self) -> int:
        return self.balance + self.savings - self.debt

    @property
    def goal_reachable(self) -> bool:
        """True when savings cover the selected goal and it is not bought yet."""
        if self.selected_goal is None or self.goal_achieved:
            return False
        return self.savings >= self.selected_goal.cost

    @property
    def goal_progress(self) -> float:
        """Savings as a percentage of the goal cost, capped at 100."""
        if self.selected_goal is None:
            return 0.0
        return min(100.0, self.savings / self.selected_goal.cost * 100)

    @property
    def last_month_change(self) -> tuple[int, int] | None:
        """
        (balance, savings) change over the last recorded month.

        The first month is measured from zero. None before any month ends.
        """
        if not self.month_history:
            return None
        last = self.month_history[-1]
        if len(self.month_history) == 1:
            return last.balance, last.savings
        prev = self.month_history[-2]
        return last.balance - prev.balance, last.savings - prev.savings

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
