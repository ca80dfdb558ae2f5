"""
Fixed Expenses - Monthly household costs and preset amounts.

The base total (household + farming + education) is what the stability
score is measured against. The difficulty multiplier only applies when
expenses are actually deducted at month rollover.
"""

from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class FixedExpenses:
    """Fixed monthly expense lines, before the difficulty multiplier."""
    household: int
    farming: int
    education: int

    @property
    def total(self) -> int:
        return self.household + self.farming + self.education


FIXED_EXPENSES = FixedExpenses(
    household=35_000,
    farming=30_000,
    education=15_000,
)

# Loan terms
LOAN_INTEREST_RATE = 0.05
MAX_LOAN_MONTHS = 6
LOAN_WARNING_MONTHS = 2

# Insurance co-pay on crop loss
CROP_LOSS_COPAY = 5_000

# Savings streak bonus
STREAK_BONUS_MONTHS = 3
STREAK_BONUS_TOTAL = 75_000
STREAK_BONUS_RATE = 0.10

GOAL_APPRECIATION_RATE = 0.10

# Amounts offered by the decision controls
SAVING_OPTIONS: tuple[int, ...] = (10_000, 25_000, 50_000, 75_000)
INSURANCE_OPTIONS: tuple[int, ...] = (5_000, 7_500, 10_000)
REPAY_OPTIONS: tuple[int, ...] = (10_000, 25_000)
DEFAULT_INSURANCE_PREMIUM = 5_000
DEFAULT_LOAN_AMOUNT = 50_000


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def total_expenses(multiplier: float = 1.0) -> int:
    """Monthly expense deduction for a difficulty multiplier."""
    return round_half_up(FIXED_EXPENSES.total * multiplier)
