"""
Tests for end-of-game classification and lessons.
"""

from ..catalog.events import QUICK_LOAN_OFFER
from ..catalog.goals import MOTORBIKE
from ..engine_core.outcome import Outcome, ResultTone, game_lessons, get_game_result
from ..engine_core.state import GamePhase, GameState, MonthRecord


def ended(**kwargs) -> GameState:
    return GameState(phase=GamePhase.ENDED, month=12, **kwargs)


class TestGameResult:
    """Priority order of get_game_result."""

    def test_confiscation_wins(self):
        state = ended(
            property_confiscated=True,
            goal_achieved=True,
            selected_goal=MOTORBIKE,
            stability_score=95,
        )
        result = get_game_result(state)

        assert result.outcome == Outcome.PROPERTY_CONFISCATED
        assert result.tone == ResultTone.DESTRUCTIVE

    def test_goal_purchased(self):
        state = ended(goal_achieved=True, selected_goal=MOTORBIKE.with_cost(330_000))
        result = get_game_result(state)

        assert result.outcome == Outcome.GOAL_PURCHASED
        assert "Motorbike" in result.title
        assert "₹3,30,000" in result.description
        assert result.tone == ResultTone.SUCCESS

    def test_goal_reachable(self):
        result = get_game_result(ended(savings=300_000, selected_goal=MOTORBIKE, stability_score=20))
        assert result.outcome == Outcome.GOAL_REACHABLE
        assert result.tone == ResultTone.SUCCESS

    def test_secure_names_shortfall(self):
        result = get_game_result(ended(savings=250_000, selected_goal=MOTORBIKE, stability_score=81))

        assert result.outcome == Outcome.SECURE
        assert "₹50,000" in result.description

    def test_secure_without_goal(self):
        result = get_game_result(ended(stability_score=90))
        assert result.outcome == Outcome.SECURE

    def test_threshold_80_is_stable(self):
        result = get_game_result(ended(stability_score=80))
        assert result.outcome == Outcome.STABLE
        assert result.tone == ResultTone.WARNING

    def test_threshold_51_is_stable(self):
        assert get_game_result(ended(stability_score=51)).outcome == Outcome.STABLE

    def test_threshold_50_is_vulnerable(self):
        result = get_game_result(ended(stability_score=50))
        assert result.outcome == Outcome.VULNERABLE
        assert result.tone == ResultTone.DESTRUCTIVE


class TestLessons:
    """Tests for game_lessons."""

    def texts(self, state):
        return [lesson.text for lesson in game_lessons(state)]

    def test_high_savings(self):
        lessons = game_lessons(ended(savings=200_000, stability_score=60))
        assert [lesson.positive for lesson in lessons] == [True]

    def test_low_savings(self):
        lessons = game_lessons(ended(savings=50_000, stability_score=60))
        assert len(lessons) == 1
        assert not lessons[0].positive

    def test_income_growth(self):
        texts = self.texts(ended(savings=150_000, monthly_income=165_000, stability_score=60))
        assert texts == ["Your consistent saving unlocked income growth!"]

    def test_debt_free_after_loan_offer(self):
        record = MonthRecord(month=1, income=150_000, expenses=80_000, savings=0,
                             balance=70_000, event=QUICK_LOAN_OFFER)
        state = ended(savings=150_000, stability_score=60, month_history=(record,))
        assert any("paid off debt" in text for text in self.texts(state))

    def test_outstanding_debt_and_confiscation(self):
        state = ended(savings=150_000, debt=60_000, property_confiscated=True, stability_score=30)
        lessons = game_lessons(state)

        assert len(lessons) == 2
        assert not any(lesson.positive for lesson in lessons)

    def test_excellent_stability(self):
        texts = self.texts(ended(savings=150_000, stability_score=80))
        assert texts == ["You maintained excellent financial stability throughout!"]
