"""
Action System - Actions, payloads, and results.

Actions represent:
1. Setup actions (choose difficulty, choose goal)
2. Month-cycle actions (start month, resolve event, end month, continue)
3. Money decisions (save, withdraw, insurance, loans, purchase goal)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Setup
    START_GAME = "start_game"
    SELECT_GOAL = "select_goal"

    # Month cycle
    START_NEW_MONTH = "start_new_month"
    HANDLE_EVENT = "handle_event"
    END_MONTH = "end_month"
    CONTINUE = "continue"

    # Money decisions
    SAVE_MONEY = "save_money"
    WITHDRAW_SAVINGS = "withdraw_savings"
    BUY_INSURANCE = "buy_insurance"
    UPDATE_INSURANCE = "update_insurance"
    STOP_INSURANCE = "stop_insurance"
    TAKE_LOAN = "take_loan"
    REPAY_LOAN = "repay_loan"
    PURCHASE_GOAL = "purchase_goal"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the transitions.
    """
    amount: int | None = None
    difficulty_id: str | None = None
    goal_id: str | None = None

    # For handle_event: an explicit event, else the current one
    event: Any | None = None

    # Generic params
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Validated against the current phase
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None
    action_id: str | None = None

    @classmethod
    def start_game(cls, difficulty_id: str) -> Action:
        return cls(
            action_type=ActionType.START_GAME,
            payload=ActionPayload(difficulty_id=difficulty_id),
        )

    @classmethod
    def select_goal(cls, goal_id: str) -> Action:
        return cls(
            action_type=ActionType.SELECT_GOAL,
            payload=ActionPayload(goal_id=goal_id),
        )

    @classmethod
    def start_new_month(cls) -> Action:
        return cls(action_type=ActionType.START_NEW_MONTH)

    @classmethod
    def handle_event(cls, event: Any | None = None) -> Action:
        return cls(
            action_type=ActionType.HANDLE_EVENT,
            payload=ActionPayload(event=event),
        )

    @classmethod
    def end_month(cls) -> Action:
        return cls(action_type=ActionType.END_MONTH)

    @classmethod
    def continue_to_next_month(cls) -> Action:
        return cls(action_type=ActionType.CONTINUE)

    @classmethod
    def save_money(cls, amount: int) -> Action:
        return cls(
            action_type=ActionType.SAVE_MONEY,
            payload=ActionPayload(amount=amount),
        )

    @classmethod
    def withdraw(cls, amount: int) -> Action:
        return cls(
            action_type=ActionType.WITHDRAW_SAVINGS,
            payload=ActionPayload(amount=amount),
        )

    @classmethod
    def buy_insurance(cls, amount: int) -> Action:
        return cls(
            action_type=ActionType.BUY_INSURANCE,
            payload=ActionPayload(amount=amount),
        )

    @classmethod
    def update_insurance(cls, amount: int) -> Action:
        return cls(
            action_type=ActionType.UPDATE_INSURANCE,
            payload=ActionPayload(amount=amount),
        )

    @classmethod
    def stop_insurance(cls) -> Action:
        return cls(action_type=ActionType.STOP_INSURANCE)

    @classmethod
    def take_loan(cls, amount: int) -> Action:
        return cls(
            action_type=ActionType.TAKE_LOAN,
            payload=ActionPayload(amount=amount),
        )

    @classmethod
    def repay_loan(cls, amount: int) -> Action:
        return cls(
            action_type=ActionType.REPAY_LOAN,
            payload=ActionPayload(amount=amount),
        )

    @classmethod
    def purchase_goal(cls) -> Action:
        return cls(action_type=ActionType.PURCHASE_GOAL)

    def describe(self) -> str:
        """Short human-readable label."""
        if self.payload.amount is not None:
            return f"{self.action_type.value}({self.payload.amount})"
        if self.payload.difficulty_id:
            return f"{self.action_type.value}({self.payload.difficulty_id})"
        if self.payload.goal_id:
            return f"{self.action_type.value}({self.payload.goal_id})"
        return self.action_type.value


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action changed anything
    - New state (the unchanged state when rejected)
    - Error code (if rejected)
    - Advisories (one-time notices for the player)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)
    advisories: list[Any] = field(default_factory=list)  # Advisory

    @classmethod
    def failure(cls, state: Any, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result carrying the unchanged state."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        advisories: list[Any] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            advisories=advisories or [],
        )
