"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a game client and the engine.
Amounts are whole rupees; `*_display` fields carry the same amount with
Indian digit grouping.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- INVALID_ACTION: Action is not allowed in the current phase or lacks an amount
- ACTION_REJECTED: Action was allowed but its preconditions failed (no-op)
- SAVE_FAILED: The save store could not write the game
- VALIDATION_ERROR: A save document failed migration or validation
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..engine_core.action import ActionType

# Session ids double as save file names
SESSION_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_EXISTS = "SESSION_EXISTS"
    INVALID_ACTION = "INVALID_ACTION"
    ACTION_REJECTED = "ACTION_REJECTED"
    SAVE_FAILED = "SAVE_FAILED"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class EventInfo(BaseModel):
    """A life event."""
    event_id: str
    event_type: str = Field(description="medical, crop_loss, good_rain, loan_offer, festival, equipment, bonus")
    title: str
    description: str = ""
    cost: Optional[int] = None
    reward: Optional[int] = None
    interest: Optional[int] = Field(None, description="Monthly percent, loan offers only")
    is_positive: bool = False


class GoalInfo(BaseModel):
    """A savings goal."""
    goal_id: str
    name: str
    cost: int
    cost_display: str
    glyph: str = ""


class DifficultyInfo(BaseModel):
    """A difficulty tier."""
    level: str
    name: str
    description: str
    monthly_income: int
    expense_multiplier: float
    monthly_expenses: int
    glyph: str = ""


class MonthRecordInfo(BaseModel):
    """One finished month."""
    month: int
    income: int
    expenses: int
    savings: int
    balance: int
    event: Optional[EventInfo] = None


class AdvisoryInfo(BaseModel):
    """A one-time notice raised by the last action."""
    kind: str = Field(description="loan_deadline, income_boost, property_confiscated")
    title: str
    message: str


class StabilityInfo(BaseModel):
    """Stability score with its components."""
    score: int = Field(ge=0, le=100)
    balance: float
    savings: float
    debt: float
    insurance: float
    flexibility: float


class ActionInfo(BaseModel):
    """A fully specified action the client may send back as-is."""
    action_type: ActionType
    amount: Optional[int] = None
    difficulty_id: Optional[str] = None
    goal_id: Optional[str] = None
    label: str


class LessonInfo(BaseModel):
    text: str
    positive: bool


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a game session."""
    seed: Optional[int] = Field(None, description="Seed for reproducible event draws")
    resume: bool = Field(False, description="Load the saved game for session_id")
    session_id: Optional[str] = Field(
        None,
        pattern=SESSION_ID_PATTERN,
        description="Reuse an id, e.g. to resume its save",
    )


class ActionRequest(BaseModel):
    """
    One player action.

    Which fields are needed depends on action_type:
    - start_game: difficulty_id
    - select_goal: goal_id
    - save_money, withdraw_savings, buy_insurance, update_insurance,
      take_loan, repay_loan: amount
    """
    action_type: ActionType
    amount: Optional[int] = None
    difficulty_id: Optional[str] = None
    goal_id: Optional[str] = None


class LoadGameRequest(BaseModel):
    """A save document (current envelope or a legacy bare state object)."""
    document: dict[str, Any]


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standardized error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Full game state for display."""
    month: int
    phase: str
    balance: int
    balance_display: str
    monthly_income: int
    monthly_expenses: int
    savings: int
    savings_display: str
    net_worth: int
    stability: StabilityInfo
    has_insurance: bool
    insurance_amount: int
    debt: int
    loan_months_remaining: int
    consecutive_saving_months: int
    total_saved_this_streak: int
    current_event: Optional[EventInfo] = None
    month_history: list[MonthRecordInfo] = Field(default_factory=list)
    selected_goal: Optional[GoalInfo] = None
    goal_achieved: bool = False
    goal_reachable: bool = False
    goal_progress: float = Field(0.0, description="Savings as a percentage of the goal cost, 0-100")
    balance_change: Optional[int] = Field(None, description="Balance change over the last recorded month")
    savings_change: Optional[int] = Field(None, description="Savings change over the last recorded month")
    property_confiscated: bool = False
    difficulty: str
    expense_multiplier: float
    is_over: bool = False


class SessionResponse(BaseModel):
    """Session info with its current game."""
    session_id: str
    status: SessionStatus
    created_at: float
    seed: Optional[int] = None
    game_state: GameStateResponse


class ActionResponse(BaseModel):
    """Outcome of one action."""
    session_id: str
    success: bool
    action: str
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    state_changes: list[str] = Field(default_factory=list)
    advisories: list[AdvisoryInfo] = Field(default_factory=list)
    saved: bool = Field(False, description="True when the action triggered a successful save")
    game_state: GameStateResponse


class LegalActionsResponse(BaseModel):
    session_id: str
    phase: str
    actions: list[ActionInfo] = Field(default_factory=list)


class GameResultResponse(BaseModel):
    """End-of-game classification and lessons."""
    session_id: str
    outcome: str
    title: str
    description: str
    tone: str = Field(description="success, warning, destructive")
    is_over: bool
    lessons: list[LessonInfo] = Field(default_factory=list)


class SaveResponse(BaseModel):
    session_id: str
    success: bool
    saved_at: Optional[float] = None
    location: Optional[str] = None
    error: Optional[str] = None


class LoadGameResponse(BaseModel):
    session_id: str
    repairs: list[str] = Field(default_factory=list)
    game_state: GameStateResponse


class CatalogResponse(BaseModel):
    """Static game tables."""
    difficulties: list[DifficultyInfo]
    goals: list[GoalInfo]
    events: list[EventInfo]


class SessionListResponse(BaseModel):
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    active_sessions: int = 0
