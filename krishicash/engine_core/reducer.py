"""
Reducer - Applies actions to game state.

The reducer is the single dispatch point for state changes.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates the phase before applying
- Returns ActionResult with success/failure
- Delegates the rules themselves to the transitions module
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..formatting import format_indian_currency
from . import transitions
from .action import Action, ActionType, ActionResult
from .rng import RandomSource, default_random_source
from .state import GamePhase, GameState
from .transitions import FINANCE_PHASES, Transition

logger = logging.getLogger(__name__)


# Phases in which each action may be dispatched
ALLOWED_PHASES: dict[ActionType, frozenset[GamePhase]] = {
    ActionType.START_GAME: frozenset({GamePhase.INTRO}),
    ActionType.SELECT_GOAL: frozenset({GamePhase.GOAL_SELECTION}),
    ActionType.START_NEW_MONTH: frozenset({GamePhase.PLAYING}),
    ActionType.HANDLE_EVENT: frozenset({GamePhase.EVENT}),
    ActionType.END_MONTH: frozenset({GamePhase.DECISION}),
    ActionType.CONTINUE: frozenset({GamePhase.SUMMARY}),
    ActionType.SAVE_MONEY: FINANCE_PHASES,
    ActionType.WITHDRAW_SAVINGS: FINANCE_PHASES,
    ActionType.BUY_INSURANCE: FINANCE_PHASES,
    ActionType.UPDATE_INSURANCE: FINANCE_PHASES,
    ActionType.STOP_INSURANCE: FINANCE_PHASES,
    ActionType.TAKE_LOAN: FINANCE_PHASES,
    ActionType.REPAY_LOAN: FINANCE_PHASES,
    ActionType.PURCHASE_GOAL: frozenset({
        GamePhase.PLAYING,
        GamePhase.DECISION,
        GamePhase.SUMMARY,
        GamePhase.ENDED,
    }),
}

AMOUNT_ACTIONS = frozenset({
    ActionType.SAVE_MONEY,
    ActionType.WITHDRAW_SAVINGS,
    ActionType.BUY_INSURANCE,
    ActionType.UPDATE_INSURANCE,
    ActionType.TAKE_LOAN,
    ActionType.REPAY_LOAN,
})


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless apart from the random source used for event draws.
    """
    rng: RandomSource = field(default_factory=default_random_source)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state, or the unchanged state and an error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            code, message = validation_error
            logger.debug("Rejected %s: %s", action.describe(), message)
            return ActionResult.failure(state, message, error_code=code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                state,
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        transition = handler(state, action)
        if not transition.applied:
            return ActionResult.failure(
                state,
                f"{action.describe()} is not allowed right now",
                error_code="REJECTED",
            )

        return ActionResult.success_with_state(
            transition.state,
            changes=self._describe_changes(state, transition.state, action),
            advisories=list(transition.advisories),
        )

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action may be dispatched in the current phase.

        Returns (error_code, message) if invalid, None if valid.
        """
        allowed = ALLOWED_PHASES.get(action.action_type)
        if allowed is not None and state.phase not in allowed:
            if state.phase == GamePhase.ENDED:
                return "INVALID_PHASE", "Game is over - only restart is possible"
            return (
                "INVALID_PHASE",
                f"{action.action_type.value} not allowed during {state.phase.value}",
            )

        if action.action_type in AMOUNT_ACTIONS and action.payload.amount is None:
            return "MISSING_AMOUNT", f"{action.action_type.value} requires an amount"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.START_GAME: self._handle_start_game,
            ActionType.SELECT_GOAL: self._handle_select_goal,
            ActionType.START_NEW_MONTH: self._handle_start_new_month,
            ActionType.HANDLE_EVENT: self._handle_event,
            ActionType.END_MONTH: lambda state, action: transitions.end_month(state),
            ActionType.CONTINUE: lambda state, action: transitions.continue_to_next_month(state),
            ActionType.SAVE_MONEY: self._amount_handler(transitions.save_money),
            ActionType.WITHDRAW_SAVINGS: self._amount_handler(transitions.withdraw_from_savings),
            ActionType.BUY_INSURANCE: self._amount_handler(transitions.buy_insurance),
            ActionType.UPDATE_INSURANCE: self._amount_handler(transitions.update_insurance),
            ActionType.STOP_INSURANCE: lambda state, action: transitions.stop_insurance(state),
            ActionType.TAKE_LOAN: self._amount_handler(transitions.take_loan),
            ActionType.REPAY_LOAN: self._amount_handler(transitions.repay_loan),
            ActionType.PURCHASE_GOAL: lambda state, action: transitions.purchase_goal(state),
        }
        return handlers.get(action_type)

    @staticmethod
    def _amount_handler(fn):
        def handler(state: GameState, action: Action) -> Transition:
            return fn(state, int(action.payload.amount))
        return handler

    def _handle_start_game(self, state: GameState, action: Action) -> Transition:
        return transitions.start_game(state, action.payload.difficulty_id)

    def _handle_select_goal(self, state: GameState, action: Action) -> Transition:
        return transitions.select_goal(state, action.payload.goal_id)

    def _handle_start_new_month(self, state: GameState, action: Action) -> Transition:
        return transitions.start_new_month(state, self.rng)

    def _handle_event(self, state: GameState, action: Action) -> Transition:
        return transitions.handle_event(state, action.payload.event)

    def _describe_changes(self, old: GameState, new: GameState, action: Action) -> list[str]:
        """Human-readable summary of what moved."""
        changes = []
        if new.phase != old.phase:
            changes.append(f"Phase: {old.phase.value} -> {new.phase.value}")
        if new.balance != old.balance:
            changes.append(
                f"Balance: {format_indian_currency(old.balance)} -> {format_indian_currency(new.balance)}"
            )
        if new.savings != old.savings:
            changes.append(
                f"Savings: {format_indian_currency(old.savings)} -> {format_indian_currency(new.savings)}"
            )
        if new.debt != old.debt:
            changes.append(f"Debt: {format_indian_currency(old.debt)} -> {format_indian_currency(new.debt)}")
        if new.has_insurance != old.has_insurance or new.insurance_amount != old.insurance_amount:
            changes.append(f"Insurance premium: {format_indian_currency(new.insurance_amount)}")
        if new.current_event is not None and new.current_event != old.current_event:
            changes.append(f"Event: {new.current_event.title}")
        if new.stability_score != old.stability_score:
            changes.append(f"Stability: {old.stability_score} -> {new.stability_score}")
        return changes


def apply_action(
    state: GameState,
    action: Action,
    rng: RandomSource | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng) if rng is not None else Reducer()
    return reducer.apply(state, action)
