"""
Stability Scorer - Financial health as a 0-100 score.

The score is a weighted sum of five components:
- Balance (0-25): cash on hand relative to one month of expenses
- Savings (0-30): months of expenses covered, saturating at three
- Debt (0-25): penalty proportional to debt over monthly income
- Insurance (0 or 10)
- Flexibility (0-10): net worth relative to one month of expenses

Expenses are the base fixed total, before the difficulty multiplier.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..catalog.expenses import FIXED_EXPENSES, round_half_up
from .state import GameState


BALANCE_WEIGHT = 25.0
SAVINGS_WEIGHT = 30.0
DEBT_WEIGHT = 25.0
INSURANCE_WEIGHT = 10.0
FLEXIBILITY_WEIGHT = 10.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


@dataclass(frozen=True)
class StabilityBreakdown:
    """Per-component contributions to the stability score."""
    balance: float
    savings: float
    debt: float
    insurance: float
    flexibility: float

    @property
    def raw_total(self) -> float:
        return self.balance + self.savings + self.debt + self.insurance + self.flexibility

    @property
    def score(self) -> int:
        return round_half_up(_clamp(self.raw_total, 0.0, 100.0))


def stability_breakdown(state: GameState, monthly_expenses: int | None = None) -> StabilityBreakdown:
    """Compute each component of the stability score."""
    expenses = FIXED_EXPENSES.total if monthly_expenses is None else monthly_expenses

    balance_ratio = _ratio(state.balance, expenses)
    balance_score = _clamp(balance_ratio * 12.5 + 12.5, 0.0, BALANCE_WEIGHT)

    months_covered = _ratio(state.savings, expenses)
    savings_score = min(SAVINGS_WEIGHT, months_covered * 10)

    debt_ratio = _ratio(state.debt, state.monthly_income)
    debt_score = max(0.0, DEBT_WEIGHT - debt_ratio * 15)

    insurance_score = INSURANCE_WEIGHT if state.has_insurance else 0.0

    flexibility_ratio = _ratio(state.net_worth, expenses)
    flexibility_score = _clamp(flexibility_ratio * 5 + 5, 0.0, FLEXIBILITY_WEIGHT)

    return StabilityBreakdown(
        balance=balance_score,
        savings=savings_score,
        debt=debt_score,
        insurance=insurance_score,
        flexibility=flexibility_score,
    )


def compute_stability(state: GameState) -> int:
    """Stability score in [0, 100] for the given state."""
    return stability_breakdown(state).score


def with_stability(state: GameState) -> GameState:
    """Return the state with its stability score recomputed."""
    return state._copy_with(stability_score=compute_stability(state))
