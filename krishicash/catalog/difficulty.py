"""
Difficulty tiers.

Each tier fixes the monthly income and the expense multiplier for a game.
Unknown ids fall back to the medium tier.
"""

from __future__ import annotations

from ..engine_core.state import DifficultyConfig, DifficultyLevel
from .lookup import LookupResult


EASY = DifficultyConfig(
    level=DifficultyLevel.EASY,
    name="Beginner Farmer",
    description="Higher income, lower expenses",
    monthly_income=200_000,
    expense_multiplier=0.8,
    glyph="🌱",
)

MEDIUM = DifficultyConfig(
    level=DifficultyLevel.MEDIUM,
    name="Experienced Farmer",
    description="Balanced income and expenses",
    monthly_income=150_000,
    expense_multiplier=1.0,
    glyph="🌾",
)

HARD = DifficultyConfig(
    level=DifficultyLevel.HARD,
    name="Struggling Farmer",
    description="Lower income, higher expenses",
    monthly_income=100_000,
    expense_multiplier=1.3,
    glyph="🥵",
)

DIFFICULTY_LEVELS: dict[DifficultyLevel, DifficultyConfig] = {
    config.level: config for config in (EASY, MEDIUM, HARD)
}

DEFAULT_DIFFICULTY = DifficultyLevel.MEDIUM


def get_difficulty(difficulty_id: DifficultyLevel | str | None) -> LookupResult[DifficultyConfig]:
    """
    Resolve a difficulty tier by enum member or string id.

    Returns the medium tier with found=False when the id is unknown.
    """
    level = _coerce_level(difficulty_id)
    if level is None:
        return LookupResult(value=DIFFICULTY_LEVELS[DEFAULT_DIFFICULTY], found=False)
    return LookupResult(value=DIFFICULTY_LEVELS[level], found=True)


def _coerce_level(difficulty_id: DifficultyLevel | str | None) -> DifficultyLevel | None:
    if isinstance(difficulty_id, DifficultyLevel):
        return difficulty_id
    if isinstance(difficulty_id, str):
        try:
            return DifficultyLevel(difficulty_id.strip().lower())
        except ValueError:
            return None
    return None
