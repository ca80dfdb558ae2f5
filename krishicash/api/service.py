"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to controller calls
2. Manages sessions
3. Formats engine objects for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging

from .. import __version__
from ..catalog.difficulty import DIFFICULTY_LEVELS
from ..catalog.events import GAME_EVENTS
from ..catalog.expenses import total_expenses
from ..catalog.goals import GAME_GOALS
from ..engine_core.action import Action, ActionPayload, ActionResult
from ..engine_core.outcome import game_lessons, get_game_result
from ..engine_core.stability import stability_breakdown
from ..engine_core.state import Event, GameState, Goal
from ..formatting import format_indian_currency
from ..persistence.schema import SaveValidationError, dump_save, load_save
from ..session import Session, SessionManager
from ..session.controller import AUTOSAVE_ACTIONS
from .schemas import (
    # Requests
    ActionRequest,
    CreateSessionRequest,
    LoadGameRequest,
    # Responses
    ActionResponse,
    CatalogResponse,
    ErrorResponse,
    GameResultResponse,
    GameStateResponse,
    HealthResponse,
    LegalActionsResponse,
    LoadGameResponse,
    SaveResponse,
    SessionResponse,
    # Shared
    ActionInfo,
    AdvisoryInfo,
    DifficultyInfo,
    EventInfo,
    GoalInfo,
    LessonInfo,
    MonthRecordInfo,
    StabilityInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)

logger = logging.getLogger(__name__)

# Reducer error codes that mean the request itself was wrong
INVALID_ACTION_CODES = frozenset({"INVALID_PHASE", "MISSING_AMOUNT", "NO_HANDLER"})


def _session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Session {session_id} not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest(seed=7))
        service.apply_action(session.session_id, ActionRequest(action_type="start_game", difficulty_id="easy"))
        state = service.get_game_state(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    default_seed: int | None = None

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        seed = request.seed if request.seed is not None else self.default_seed
        try:
            session = self.session_manager.create_session(
                seed=seed,
                resume=request.resume,
                session_id=request.session_id,
            )
        except ValueError as e:
            exists = request.session_id in self.session_manager
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.SESSION_EXISTS if exists else ErrorCode.VALIDATION_ERROR,
            )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Game
    # =========================================================================

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._build_game_state(session.controller.state)

    def get_legal_actions(self, session_id: str) -> LegalActionsResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        state = session.controller.state
        return LegalActionsResponse(
            session_id=session_id,
            phase=state.phase.value,
            actions=[
                ActionInfo(
                    action_type=action.action_type,
                    amount=action.payload.amount,
                    difficulty_id=action.payload.difficulty_id,
                    goal_id=action.payload.goal_id,
                    label=action.describe(),
                )
                for action in session.controller.legal_actions()
            ],
        )

    def apply_action(self, session_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        """
        Apply one player action.

        Phase violations and missing amounts come back as an ErrorResponse
        with INVALID_ACTION. An allowed action whose preconditions fail
        (e.g. saving more than the balance) is a no-op and comes back as an
        unsuccessful ActionResponse with ACTION_REJECTED and the unchanged
        state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        action = Action(
            action_type=request.action_type,
            payload=ActionPayload(
                amount=request.amount,
                difficulty_id=request.difficulty_id,
                goal_id=request.goal_id,
            ),
        )
        controller = session.controller
        previous_save = controller.last_save
        result = controller.dispatch(action)

        if not result.success and result.error_code in INVALID_ACTION_CODES:
            return ErrorResponse(
                error=result.error or "Invalid action",
                error_code=ErrorCode.INVALID_ACTION,
                details={"reducer_code": result.error_code, "phase": controller.state.phase.value},
            )

        saved = (
            result.success
            and action.action_type in AUTOSAVE_ACTIONS
            and controller.last_save is not None
            and controller.last_save is not previous_save
            and controller.last_save.success
        )
        return self._action_result_to_response(session_id, action, result, controller, saved)

    def get_result(self, session_id: str) -> GameResultResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        state = session.controller.state
        result = get_game_result(state)
        return GameResultResponse(
            session_id=session_id,
            outcome=result.outcome.value,
            title=result.title,
            description=result.description,
            tone=result.tone.value,
            is_over=state.is_over,
            lessons=[LessonInfo(text=lesson.text, positive=lesson.positive) for lesson in game_lessons(state)],
        )

    def reset_game(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._build_game_state(session.controller.reset())

    # =========================================================================
    # Saves
    # =========================================================================

    def save_game(self, session_id: str) -> SaveResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        result = session.controller.save()
        if result is None or not result.success:
            return ErrorResponse(
                error=(result.error if result else None) or "No save store configured",
                error_code=ErrorCode.SAVE_FAILED,
            )
        return SaveResponse(
            session_id=session_id,
            success=True,
            saved_at=result.saved_at,
            location=result.location,
        )

    def export_game(self, session_id: str) -> dict[str, Any] | ErrorResponse:
        """The current game as a save document."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return dump_save(session.controller.state)

    def load_game(self, session_id: str, request: LoadGameRequest) -> LoadGameResponse | ErrorResponse:
        """Replace the session's game with a save document."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        try:
            state, repairs = load_save(request.document)
        except SaveValidationError as e:
            logger.info("Rejected save document for session %s: %s", session_id, e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.VALIDATION_ERROR,
                details={"errors": e.errors},
            )

        repairs = repairs + session.controller.load_game_state(state)
        return LoadGameResponse(
            session_id=session_id,
            repairs=repairs,
            game_state=self._build_game_state(session.controller.state),
        )

    # =========================================================================
    # Static data
    # =========================================================================

    def get_catalog(self) -> CatalogResponse:
        return CatalogResponse(
            difficulties=[
                DifficultyInfo(
                    level=config.level.value,
                    name=config.name,
                    description=config.description,
                    monthly_income=config.monthly_income,
                    expense_multiplier=config.expense_multiplier,
                    monthly_expenses=total_expenses(config.expense_multiplier),
                    glyph=config.glyph,
                )
                for config in DIFFICULTY_LEVELS.values()
            ],
            goals=[self._goal_info(goal) for goal in GAME_GOALS.values()],
            events=[self._event_info(event) for event in GAME_EVENTS],
        )

    def health(self) -> HealthResponse:
        return HealthResponse(
            version=__version__,
            active_sessions=len(self.session_manager.list_active_sessions()),
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            created_at=session.created_at,
            seed=session.seed,
            game_state=self._build_game_state(session.controller.state),
        )

    def _action_result_to_response(
        self,
        session_id: str,
        action: Action,
        result: ActionResult,
        controller,
        saved: bool,
    ) -> ActionResponse:
        return ActionResponse(
            session_id=session_id,
            success=result.success,
            action=action.describe(),
            error=result.error,
            error_code=None if result.success else ErrorCode.ACTION_REJECTED,
            state_changes=result.state_changes,
            advisories=[
                AdvisoryInfo(kind=a.kind.value, title=a.title, message=a.message)
                for a in controller.get_advisories()
            ],
            saved=saved,
            game_state=self._build_game_state(controller.state),
        )

    @staticmethod
    def _event_info(event: Event | None) -> EventInfo | None:
        if event is None:
            return None
        return EventInfo(
            event_id=event.event_id,
            event_type=event.event_type.value,
            title=event.title,
            description=event.description,
            cost=event.cost,
            reward=event.reward,
            interest=event.interest,
            is_positive=event.is_positive,
        )

    @staticmethod
    def _goal_info(goal: Goal | None) -> GoalInfo | None:
        if goal is None:
            return None
        return GoalInfo(
            goal_id=goal.goal_id.value,
            name=goal.name,
            cost=goal.cost,
            cost_display=format_indian_currency(goal.cost),
            glyph=goal.glyph,
        )

    def _build_game_state(self, state: GameState) -> GameStateResponse:
        breakdown = stability_breakdown(state)
        balance_change, savings_change = state.last_month_change or (None, None)
        return GameStateResponse(
            month=state.month,
            phase=state.phase.value,
            balance=state.balance,
            balance_display=format_indian_currency(state.balance),
            monthly_income=state.monthly_income,
            monthly_expenses=total_expenses(state.expense_multiplier),
            savings=state.savings,
            savings_display=format_indian_currency(state.savings),
            net_worth=state.net_worth,
            stability=StabilityInfo(
                score=state.stability_score,
                balance=breakdown.balance,
                savings=breakdown.savings,
                debt=breakdown.debt,
                insurance=breakdown.insurance,
                flexibility=breakdown.flexibility,
            ),
            has_insurance=state.has_insurance,
            insurance_amount=state.insurance_amount,
            debt=state.debt,
            loan_months_remaining=state.loan_months_remaining,
            consecutive_saving_months=state.consecutive_saving_months,
            total_saved_this_streak=state.total_saved_this_streak,
            current_event=self._event_info(state.current_event),
            month_history=[
                MonthRecordInfo(
                    month=record.month,
                    income=record.income,
                    expenses=record.expenses,
                    savings=record.savings,
                    balance=record.balance,
                    event=self._event_info(record.event),
                )
                for record in state.month_history
            ],
            selected_goal=self._goal_info(state.selected_goal),
            goal_achieved=state.goal_achieved,
            goal_reachable=state.goal_reachable,
            goal_progress=state.goal_progress,
            balance_change=balance_change,
            savings_change=savings_change,
            property_confiscated=state.property_confiscated,
            difficulty=state.difficulty.value,
            expense_multiplier=state.expense_multiplier,
            is_over=state.is_over,
        )
