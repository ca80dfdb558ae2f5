"""
Transitions - The pure rules of the game.

Every transition takes the current GameState plus action parameters and
returns a Transition holding the next snapshot and any advisories.

Rules:
- Preconditions that fail are silent no-ops: the input state object is
  returned unchanged and `applied` is False
- The stability score is recomputed after every money-affecting change
- Nothing here performs I/O; persistence is the session layer's job

Every precondition is also exposed as a `can_*` predicate so that callers
can disable controls with exactly the same rule.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..catalog.difficulty import get_difficulty
from ..catalog.events import GAME_EVENTS
from ..catalog.expenses import (
    CROP_LOSS_COPAY,
    DEFAULT_INSURANCE_PREMIUM,
    DEFAULT_LOAN_AMOUNT,
    GOAL_APPRECIATION_RATE,
    LOAN_INTEREST_RATE,
    LOAN_WARNING_MONTHS,
    MAX_LOAN_MONTHS,
    STREAK_BONUS_MONTHS,
    STREAK_BONUS_RATE,
    STREAK_BONUS_TOTAL,
    round_half_up,
    total_expenses,
)
from ..catalog.goals import get_goal
from .rng import RandomSource, default_random_source
from .stability import with_stability
from .state import (
    Advisory,
    AdvisoryKind,
    DifficultyLevel,
    Event,
    EventType,
    GamePhase,
    GameState,
    Goal,
    GoalId,
    MonthRecord,
)

logger = logging.getLogger(__name__)

LAST_MONTH = 12

# Phases in which the money controls are available
FINANCE_PHASES = frozenset({GamePhase.PLAYING, GamePhase.DECISION, GamePhase.SUMMARY})


@dataclass(frozen=True)
class Transition:
    """Outcome of a transition: next state plus out-of-band advisories."""
    state: GameState
    advisories: tuple[Advisory, ...] = ()
    applied: bool = True

    @classmethod
    def rejected(cls, state: GameState, reason: str) -> Transition:
        logger.debug("Transition rejected: %s", reason)
        return cls(state=state, applied=False)


def initial_state() -> GameState:
    """Fresh snapshot used at process start and on restart."""
    return with_stability(GameState())


# =============================================================================
# Predicates
# =============================================================================

def can_save(state: GameState, amount: int) -> bool:
    return state.phase in FINANCE_PHASES and 0 < amount <= state.balance


def can_withdraw(state: GameState, amount: int) -> bool:
    return state.phase in FINANCE_PHASES and 0 < amount <= state.savings


def can_buy_insurance(state: GameState, amount: int) -> bool:
    return state.phase in FINANCE_PHASES and 0 < amount <= state.balance


def can_update_insurance(state: GameState, new_amount: int) -> bool:
    return state.phase in FINANCE_PHASES and state.has_insurance and new_amount > 0


def can_take_loan(state: GameState, amount: int) -> bool:
    return state.phase in FINANCE_PHASES and state.debt <= 0 and amount > 0


def can_repay_loan(state: GameState, amount: int) -> bool:
    return (
        state.phase in FINANCE_PHASES
        and state.debt > 0
        and 0 < amount <= state.balance
    )


def can_purchase_goal(state: GameState) -> bool:
    return state.goal_reachable


def loan_grace_expired(state: GameState) -> bool:
    return state.debt > 0 and state.loan_months_remaining <= 0


def streak_bonus_due(state: GameState) -> bool:
    return (
        state.consecutive_saving_months >= STREAK_BONUS_MONTHS
        and state.total_saved_this_streak >= STREAK_BONUS_TOTAL
    )


def effective_event_cost(state: GameState, event: Event) -> int:
    """Cost actually charged for an event, after the insurance co-pay cap."""
    cost = event.cost or 0
    if event.event_type == EventType.CROP_LOSS and state.has_insurance:
        return min(CROP_LOSS_COPAY, cost)
    return cost


def insurance_savings(state: GameState, event: Event) -> int:
    """How much insurance saves the player on this event."""
    return (event.cost or 0) - effective_event_cost(state, event)


# =============================================================================
# Game setup
# =============================================================================

def start_game(state: GameState, difficulty_id: DifficultyLevel | str | None) -> Transition:
    """Apply a difficulty tier and move on to goal selection."""
    if state.phase != GamePhase.INTRO:
        return Transition.rejected(state, "start_game outside intro")

    lookup = get_difficulty(difficulty_id)
    if not lookup.found:
        logger.info("Unknown difficulty %r, using %s", difficulty_id, lookup.value.level.value)
    config = lookup.value

    new_state = state._copy_with(
        monthly_income=config.monthly_income,
        difficulty=config.level,
        expense_multiplier=config.expense_multiplier,
        phase=GamePhase.GOAL_SELECTION,
    )
    return Transition(state=with_stability(new_state))


def select_goal(state: GameState, goal: Goal | GoalId | str) -> Transition:
    """Choose the savings goal and start playing."""
    if state.phase != GamePhase.GOAL_SELECTION:
        return Transition.rejected(state, "select_goal outside goal selection")

    if not isinstance(goal, Goal):
        lookup = get_goal(goal)
        if not lookup.found:
            return Transition.rejected(state, f"unknown goal {goal!r}")
        goal = lookup.value

    new_state = state._copy_with(selected_goal=goal, phase=GamePhase.PLAYING)
    return Transition(state=new_state)


# =============================================================================
# Month cycle
# =============================================================================

def draw_event(rng: RandomSource) -> Event:
    """Draw one event uniformly from the catalog."""
    return GAME_EVENTS[rng.randrange(len(GAME_EVENTS))]


def start_new_month(state: GameState, rng: RandomSource | None = None) -> Transition:
    """
    Roll the month over: income, expenses, premium, loan interest, event.

    An expired loan grace period ends the game before anything else happens.
    """
    if state.phase != GamePhase.PLAYING:
        return Transition.rejected(state, "start_new_month outside playing")

    if loan_grace_expired(state):
        logger.info("Loan grace period expired with debt %d, property confiscated", state.debt)
        new_state = state._copy_with(property_confiscated=True, phase=GamePhase.ENDED)
        advisory = Advisory(
            kind=AdvisoryKind.PROPERTY_CONFISCATED,
            title="Property Confiscated!",
            message=f"You couldn't repay your loan within {MAX_LOAN_MONTHS} months. "
                    "Your property has been seized.",
        )
        return Transition(state=new_state, advisories=(advisory,))

    rng = rng or default_random_source()
    advisories: list[Advisory] = []

    monthly_income = state.monthly_income
    streak_months = state.consecutive_saving_months
    streak_total = state.total_saved_this_streak
    if streak_bonus_due(state):
        monthly_income = round_half_up(monthly_income * (1 + STREAK_BONUS_RATE))
        streak_months = 0
        streak_total = 0
        advisories.append(Advisory(
            kind=AdvisoryKind.INCOME_BOOST,
            title="Income Boost!",
            message=f"Your consistent saving raised your monthly income to {monthly_income}.",
        ))

    balance = state.balance + monthly_income
    balance -= total_expenses(state.expense_multiplier)
    if state.has_insurance and state.insurance_amount > 0:
        balance -= state.insurance_amount

    debt = state.debt
    months_remaining = state.loan_months_remaining
    if debt > 0:
        debt = round_half_up(debt * (1 + LOAN_INTEREST_RATE))
        months_remaining -= 1
        if months_remaining == LOAN_WARNING_MONTHS:
            advisories.append(Advisory(
                kind=AdvisoryKind.LOAN_DEADLINE,
                title="Loan Warning!",
                message=f"Only {LOAN_WARNING_MONTHS} months left to repay your loan! "
                        "Your property will be confiscated if not paid.",
            ))

    event = draw_event(rng)
    logger.debug("Month %d started, drew event %s", state.month, event.event_id)

    new_state = state._copy_with(
        monthly_income=monthly_income,
        consecutive_saving_months=streak_months,
        total_saved_this_streak=streak_total,
        balance=balance,
        debt=debt,
        loan_months_remaining=months_remaining,
        current_event=event,
        phase=GamePhase.EVENT,
    )
    return Transition(state=with_stability(new_state), advisories=tuple(advisories))


def handle_event(state: GameState, event: Event | None = None) -> Transition:
    """Apply the month's event to the balance and move to decisions."""
    if state.phase != GamePhase.EVENT:
        return Transition.rejected(state, "handle_event outside event phase")

    event = event or state.current_event
    if event is None:
        return Transition.rejected(state, "no event to handle")

    balance = state.balance - effective_event_cost(state, event)
    if event.reward:
        balance += event.reward

    new_state = state._copy_with(
        balance=balance,
        current_event=event,
        phase=GamePhase.DECISION,
    )
    return Transition(state=with_stability(new_state))


def end_month(state: GameState) -> Transition:
    """Record the month in history and advance the calendar."""
    if state.phase != GamePhase.DECISION:
        return Transition.rejected(state, "end_month outside decision phase")

    record = MonthRecord(
        month=state.month,
        income=state.monthly_income,
        expenses=total_expenses(state.expense_multiplier),
        savings=state.savings,
        balance=state.balance,
        event=state.current_event,
        decisions=(),
    )
    history = state.month_history + (record,)

    next_month = state.month + 1
    if next_month > LAST_MONTH:
        logger.info("Final month recorded, game over")
        new_state = state._copy_with(
            month=LAST_MONTH,
            phase=GamePhase.ENDED,
            current_event=None,
            month_history=history,
        )
        return Transition(state=new_state)

    new_state = state._copy_with(
        month=next_month,
        phase=GamePhase.SUMMARY,
        current_event=None,
        month_history=history,
    )
    return Transition(state=new_state)


def continue_to_next_month(state: GameState) -> Transition:
    if state.phase != GamePhase.SUMMARY:
        return Transition.rejected(state, "continue outside summary")
    return Transition(state=state._copy_with(phase=GamePhase.PLAYING))


# =============================================================================
# Savings
# =============================================================================

def save_money(state: GameState, amount: int) -> Transition:
    """Move cash into savings and extend the streak."""
    if not can_save(state, amount):
        return Transition.rejected(state, f"cannot save {amount}")

    new_state = state._copy_with(
        balance=state.balance - amount,
        savings=state.savings + amount,
        consecutive_saving_months=state.consecutive_saving_months + 1,
        total_saved_this_streak=state.total_saved_this_streak + amount,
    )
    return Transition(state=with_stability(new_state))


def withdraw_from_savings(state: GameState, amount: int) -> Transition:
    """Move savings back to cash. Withdrawing breaks the streak."""
    if not can_withdraw(state, amount):
        return Transition.rejected(state, f"cannot withdraw {amount}")

    new_state = state._copy_with(
        savings=state.savings - amount,
        balance=state.balance + amount,
        consecutive_saving_months=0,
        total_saved_this_streak=0,
    )
    return Transition(state=with_stability(new_state))


# =============================================================================
# Insurance
# =============================================================================

def buy_insurance(state: GameState, amount: int = DEFAULT_INSURANCE_PREMIUM) -> Transition:
    """Pay the first premium now; later premiums come out at rollover."""
    if not can_buy_insurance(state, amount):
        return Transition.rejected(state, f"cannot buy insurance for {amount}")

    new_state = state._copy_with(
        balance=state.balance - amount,
        has_insurance=True,
        insurance_amount=amount,
    )
    return Transition(state=with_stability(new_state))


def update_insurance(state: GameState, new_amount: int) -> Transition:
    """Change the premium; takes effect at the next rollover."""
    if not can_update_insurance(state, new_amount):
        return Transition.rejected(state, f"cannot update insurance to {new_amount}")
    return Transition(state=state._copy_with(insurance_amount=new_amount))


def stop_insurance(state: GameState) -> Transition:
    """Cancel the policy in any phase."""
    new_state = state._copy_with(has_insurance=False, insurance_amount=0)
    return Transition(state=with_stability(new_state))


# =============================================================================
# Loans
# =============================================================================

def take_loan(state: GameState, amount: int = DEFAULT_LOAN_AMOUNT) -> Transition:
    """Borrow cash. Only one loan may be active at a time."""
    if not can_take_loan(state, amount):
        return Transition.rejected(state, f"cannot take loan of {amount}")

    new_state = state._copy_with(
        balance=state.balance + amount,
        debt=amount,
        loan_months_remaining=MAX_LOAN_MONTHS,
    )
    return Transition(state=with_stability(new_state))


def repay_loan(state: GameState, amount: int) -> Transition:
    """Repay up to the outstanding debt."""
    if not can_repay_loan(state, amount):
        return Transition.rejected(state, f"cannot repay {amount}")

    repay_amount = min(amount, state.debt)
    new_debt = state.debt - repay_amount

    new_state = state._copy_with(
        balance=state.balance - repay_amount,
        debt=new_debt,
        loan_months_remaining=0 if new_debt <= 0 else state.loan_months_remaining,
    )
    return Transition(state=with_stability(new_state))


# =============================================================================
# Goal
# =============================================================================

def purchase_goal(state: GameState) -> Transition:
    """Buy the selected goal from savings; its recorded value appreciates."""
    if not can_purchase_goal(state):
        return Transition.rejected(state, "goal not purchasable")

    goal = state.selected_goal
    appreciated = round_half_up(goal.cost * (1 + GOAL_APPRECIATION_RATE))
    new_state = state._copy_with(
        savings=state.savings - goal.cost,
        goal_achieved=True,
        selected_goal=goal.with_cost(appreciated),
    )
    return Transition(state=with_stability(new_state))
