"""
Tests for the reducer (action dispatch).

Tests:
- Action application
- Phase validation
- Rejections leave state untouched
- Advisories and change descriptions
"""

import pytest

from ..engine_core.action import Action, ActionPayload, ActionType
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.state import AdvisoryKind, GamePhase, GameState


class TestDispatch:
    """Tests for successful actions."""

    def test_start_game(self, fresh_state):
        result = apply_action(fresh_state, Action.start_game("easy"))

        assert result.success
        assert result.new_state.monthly_income == 200_000
        assert result.new_state.phase == GamePhase.GOAL_SELECTION

    def test_full_setup_and_first_month(self, fresh_state, inert_rng):
        reducer = Reducer(rng=inert_rng)
        state = fresh_state
        for action in (
            Action.start_game("medium"),
            Action.select_goal("motorbike"),
            Action.start_new_month(),
            Action.handle_event(),
            Action.save_money(25_000),
            Action.end_month(),
            Action.continue_to_next_month(),
        ):
            result = reducer.apply(state, action)
            assert result.success, result.error
            state = result.new_state

        assert state.month == 2
        assert state.phase == GamePhase.PLAYING
        assert state.balance == 45_000
        assert state.savings == 25_000
        assert len(state.month_history) == 1

    def test_changes_are_described(self, decision_state):
        result = apply_action(decision_state, Action.save_money(25_000))

        assert any(line.startswith("Balance:") for line in result.state_changes)
        assert any(line.startswith("Savings:") for line in result.state_changes)

    def test_advisories_are_forwarded(self, inert_rng):
        state = GameState(phase=GamePhase.PLAYING, debt=50_000, loan_months_remaining=3)
        result = Reducer(rng=inert_rng).apply(state, Action.start_new_month())

        assert result.success
        assert [a.kind for a in result.advisories] == [AdvisoryKind.LOAN_DEADLINE]


class TestValidation:
    """Tests for phase and payload validation."""

    def test_wrong_phase(self, fresh_state):
        result = apply_action(fresh_state, Action.end_month())

        assert not result.success
        assert result.error_code == "INVALID_PHASE"
        assert result.new_state is fresh_state

    def test_game_over_allows_only_purchase(self):
        state = GameState(phase=GamePhase.ENDED, month=12)
        result = apply_action(state, Action.save_money(10_000))

        assert not result.success
        assert result.error_code == "INVALID_PHASE"
        assert "Game is over" in result.error

    def test_purchase_allowed_after_game_end(self):
        from ..catalog.goals import CYCLE
        state = GameState(phase=GamePhase.ENDED, month=12, savings=10_000, selected_goal=CYCLE)
        result = apply_action(state, Action.purchase_goal())

        assert result.success
        assert result.new_state.goal_achieved

    def test_missing_amount(self, decision_state):
        action = Action(action_type=ActionType.SAVE_MONEY, payload=ActionPayload())
        result = apply_action(decision_state, action)

        assert not result.success
        assert result.error_code == "MISSING_AMOUNT"

    def test_stop_insurance_outside_finance_phases(self):
        state = GameState(phase=GamePhase.EVENT, has_insurance=True, insurance_amount=5_000)
        result = apply_action(state, Action.stop_insurance())

        assert not result.success
        assert result.error_code == "INVALID_PHASE"
        assert result.new_state is state

    @pytest.mark.parametrize("action", [
        Action.save_money(1_000_000),
        Action.withdraw(1),
        Action.repay_loan(10_000),
        Action.update_insurance(7_500),
    ])
    def test_failed_precondition_is_rejected(self, decision_state, action):
        result = apply_action(decision_state, action)

        assert not result.success
        assert result.error_code == "REJECTED"
        assert result.new_state is decision_state

    def test_money_actions_in_summary(self):
        state = GameState(phase=GamePhase.SUMMARY, month=2, balance=50_000)
        result = apply_action(state, Action.buy_insurance(5_000))
        assert result.success
        assert result.new_state.phase == GamePhase.SUMMARY
