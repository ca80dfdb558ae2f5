"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Policies to enumerate possible moves
2. UI to show available controls
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
Money decisions use the preset amounts the decision controls offer.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..catalog.difficulty import DIFFICULTY_LEVELS
from ..catalog.expenses import (
    DEFAULT_LOAN_AMOUNT,
    INSURANCE_OPTIONS,
    REPAY_OPTIONS,
    SAVING_OPTIONS,
)
from ..catalog.goals import GAME_GOALS
from . import transitions
from .action import Action
from .state import GamePhase, GameState


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current game state.

    Every generated action passes its transition's precondition.
    """
    saving_options: tuple[int, ...] = SAVING_OPTIONS
    insurance_options: tuple[int, ...] = INSURANCE_OPTIONS
    repay_options: tuple[int, ...] = REPAY_OPTIONS
    loan_amount: int = DEFAULT_LOAN_AMOUNT

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate all legal actions for the current state.

        Returns a list of fully-specified Action objects.
        """
        if state.phase == GamePhase.INTRO:
            return [Action.start_game(level.value) for level in DIFFICULTY_LEVELS]

        if state.phase == GamePhase.GOAL_SELECTION:
            return [Action.select_goal(goal_id.value) for goal_id in GAME_GOALS]

        if state.phase == GamePhase.EVENT:
            return [Action.handle_event()]

        if state.phase == GamePhase.ENDED:
            return self._generate_goal_actions(state)

        actions: list[Action] = []
        if state.phase == GamePhase.PLAYING:
            actions.append(Action.start_new_month())
        elif state.phase == GamePhase.DECISION:
            actions.append(Action.end_month())
        elif state.phase == GamePhase.SUMMARY:
            actions.append(Action.continue_to_next_month())

        actions.extend(self._generate_money_actions(state))
        actions.extend(self._generate_goal_actions(state))
        return actions

    def _generate_money_actions(self, state: GameState) -> list[Action]:
        actions = [
            Action.save_money(amount)
            for amount in self.saving_options
            if transitions.can_save(state, amount)
        ]

        if transitions.can_withdraw(state, state.savings):
            actions.append(Action.withdraw(state.savings))

        if state.has_insurance:
            actions.extend(
                Action.update_insurance(amount)
                for amount in self.insurance_options
                if amount != state.insurance_amount
                and transitions.can_update_insurance(state, amount)
            )
            actions.append(Action.stop_insurance())
        else:
            actions.extend(
                Action.buy_insurance(amount)
                for amount in self.insurance_options
                if transitions.can_buy_insurance(state, amount)
            )

        if state.in_debt:
            amounts = [amount for amount in self.repay_options if amount < state.debt]
            amounts.append(state.debt)
            actions.extend(
                Action.repay_loan(amount)
                for amount in amounts
                if transitions.can_repay_loan(state, amount)
            )
        elif transitions.can_take_loan(state, self.loan_amount):
            actions.append(Action.take_loan(self.loan_amount))

        return actions

    def _generate_goal_actions(self, state: GameState) -> list[Action]:
        if transitions.can_purchase_goal(state):
            return [Action.purchase_goal()]
        return []


def legal_actions(state: GameState) -> list[Action]:
    """Convenience function: legal actions with the default preset amounts."""
    return ActionGenerator().generate(state)
