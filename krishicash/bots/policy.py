"""
Player Policy - Interface for headless decision-making.

A PlayerPolicy takes a game state and the legal actions and returns a
decision. Policies drive simulated games from the command line and in
tests; they never touch state themselves.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import random

from ..engine_core.action import Action, ActionType
from ..engine_core.state import GamePhase, GameState


@dataclass
class PolicyDecision:
    """
    A decision made by a policy.

    Contains:
    - The action to take
    - Explanation (for logs and the simulation transcript)
    """
    action: Action
    explanation: str = ""
    evaluated_actions: int = 0


class PlayerPolicy(ABC):
    """
    Abstract base class for player policies.

    Implementations range from random play to simple budgeting rules.
    """

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> PolicyDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            legal_actions: List of legal actions to choose from

        Returns:
            PolicyDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        return self.__class__.__name__


class RandomPolicy(PlayerPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Testing that any sequence of legal actions keeps the state valid
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return PolicyDecision(
            action=self.rng.choice(legal_actions),
            explanation="Selected randomly",
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(PlayerPolicy):
    """First-legal policy - always selects the first legal action."""

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return PolicyDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


class PrudentPolicy(PlayerPolicy):
    """
    Budgeting heuristic.

    During the decision phase, in order of preference:
    1. Buy the goal as soon as savings cover it
    2. Repay the whole loan when the balance allows
    3. Borrow when the balance has gone negative
    4. Insure against crop loss at the cheapest premium
    5. Save the largest preset that keeps `reserve` in hand
    Otherwise it moves the month cycle on.
    """

    def __init__(
        self,
        difficulty_id: str = "medium",
        goal_id: str = "motorbike",
        reserve: int = 20_000,
        insure: bool = True,
    ):
        self.difficulty_id = difficulty_id
        self.goal_id = goal_id
        self.reserve = reserve
        self.insure = insure

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        by_type: dict[ActionType, list[Action]] = {}
        for action in legal_actions:
            by_type.setdefault(action.action_type, []).append(action)

        def decide(action: Action, why: str) -> PolicyDecision:
            return PolicyDecision(action=action, explanation=why, evaluated_actions=len(legal_actions))

        if state.phase == GamePhase.INTRO:
            for action in by_type.get(ActionType.START_GAME, []):
                if action.payload.difficulty_id == self.difficulty_id:
                    return decide(action, f"Playing on {self.difficulty_id}")

        if state.phase == GamePhase.GOAL_SELECTION:
            for action in by_type.get(ActionType.SELECT_GOAL, []):
                if action.payload.goal_id == self.goal_id:
                    return decide(action, f"Saving for {self.goal_id}")

        if ActionType.PURCHASE_GOAL in by_type:
            return decide(by_type[ActionType.PURCHASE_GOAL][0], "Savings cover the goal")

        if state.phase == GamePhase.DECISION:
            decision = self._finance_decision(state, by_type)
            if decision is not None:
                action, why = decision
                return decide(action, why)

        for cycle_type in (
            ActionType.HANDLE_EVENT,
            ActionType.START_NEW_MONTH,
            ActionType.END_MONTH,
            ActionType.CONTINUE,
        ):
            if cycle_type in by_type:
                return decide(by_type[cycle_type][0], "Moving on")

        return decide(legal_actions[0], "No preference")

    def _finance_decision(
        self,
        state: GameState,
        by_type: dict[ActionType, list[Action]],
    ) -> tuple[Action, str] | None:
        repayments = by_type.get(ActionType.REPAY_LOAN, [])
        for action in repayments:
            if action.payload.amount == state.debt:
                return action, "Clearing the loan"

        if state.balance < 0 and ActionType.TAKE_LOAN in by_type:
            return by_type[ActionType.TAKE_LOAN][0], "Covering a negative balance"

        if self.insure and not state.has_insurance:
            premiums = by_type.get(ActionType.BUY_INSURANCE, [])
            if premiums and state.balance - min(a.payload.amount for a in premiums) >= self.reserve:
                cheapest = min(premiums, key=lambda a: a.payload.amount)
                return cheapest, "Insuring the crop"

        savings = [
            action for action in by_type.get(ActionType.SAVE_MONEY, [])
            if state.balance - action.payload.amount >= self.reserve
        ]
        if savings:
            largest = max(savings, key=lambda a: a.payload.amount)
            return largest, "Saving the surplus"

        return None
