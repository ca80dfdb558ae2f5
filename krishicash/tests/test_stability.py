"""
Tests for the stability scorer.

Tests:
- Known scores for reference states
- Score bounds
- Division guards
"""

import pytest

from ..engine_core.stability import compute_stability, stability_breakdown, with_stability
from ..engine_core.state import GameState


class TestStabilityScore:
    """Tests for compute_stability."""

    def test_initial_state_scores_43(self, fresh_state):
        """Zero balance, no savings, no debt: 12.5 + 0 + 25 + 0 + 5 rounds up to 43."""
        assert fresh_state.stability_score == 43
        assert compute_stability(fresh_state) == 43

    def test_first_month_balance(self):
        """70000 balance after the first rollover."""
        state = GameState(balance=70_000)
        # 23.4375 + 0 + 25 + 0 + 9.375
        assert compute_stability(state) == 58

    def test_insurance_adds_ten(self):
        base = GameState(balance=40_000)
        insured = GameState(balance=40_000, has_insurance=True, insurance_amount=5_000)
        assert compute_stability(insured) == compute_stability(base) + 10

    def test_savings_saturate_at_three_months(self):
        three_months = GameState(savings=240_000)
        ten_months = GameState(savings=800_000)
        assert stability_breakdown(three_months).savings == 30
        assert stability_breakdown(ten_months).savings == 30

    def test_debt_penalty(self):
        """Debt equal to one month of income costs 15 points."""
        state = GameState(debt=150_000, monthly_income=150_000)
        assert stability_breakdown(state).debt == 10

    def test_debt_component_never_negative(self):
        state = GameState(debt=10_000_000, monthly_income=150_000)
        assert stability_breakdown(state).debt == 0

    def test_with_stability_recomputes(self):
        state = GameState(balance=70_000, stability_score=0)
        assert with_stability(state).stability_score == 58


class TestStabilityBounds:
    """The score always lies in [0, 100]."""

    def test_best_possible_state_is_100(self):
        state = GameState(balance=10_000_000, savings=10_000_000, has_insurance=True)
        assert compute_stability(state) == 100

    def test_worst_possible_state_is_0(self):
        state = GameState(balance=-10_000_000, debt=10_000_000)
        assert compute_stability(state) == 0

    @pytest.mark.parametrize("balance,savings,debt,insured", [
        (-500_000, 0, 0, False),
        (0, 0, 500_000, True),
        (1_000_000, 0, 0, False),
        (-80_000, 80_000, 50_000, True),
        (25_000, 3_000_000, 0, True),
    ])
    def test_score_within_bounds(self, balance, savings, debt, insured):
        state = GameState(balance=balance, savings=savings, debt=debt, has_insurance=insured)
        assert 0 <= compute_stability(state) <= 100


class TestDivisionGuards:
    """Zero denominators count as a zero ratio."""

    def test_zero_income_with_debt(self):
        state = GameState(debt=50_000, monthly_income=0)
        breakdown = stability_breakdown(state)
        assert breakdown.debt == 25

    def test_zero_expenses(self):
        state = GameState(balance=50_000, savings=50_000)
        breakdown = stability_breakdown(state, monthly_expenses=0)
        assert breakdown.balance == 12.5
        assert breakdown.savings == 0
        assert breakdown.flexibility == 5

    def test_breakdown_matches_score(self):
        state = GameState(balance=33_000, savings=12_000, debt=20_000, has_insurance=True)
        breakdown = stability_breakdown(state)
        assert breakdown.score == compute_stability(state)
        assert breakdown.raw_total == pytest.approx(
            breakdown.balance + breakdown.savings + breakdown.debt
            + breakdown.insurance + breakdown.flexibility
        )
