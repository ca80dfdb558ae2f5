"""
Save Schema - Versioned, validated shape of a persisted game.

Saved games are JSON documents:

    {"version": 2, "saved_at": 1700000000.0, "state": {...}}

The state object uses camelCase keys so that blobs written by the web
client (version 1, a bare state object without an envelope) load too.

Loading is strict about structure and lenient about derived values:
- Malformed documents raise SaveValidationError
- Derived or inconsistent fields are repaired (stability score is always
  recomputed, loan countdown is cleared when there is no debt, a stale
  event is dropped outside the event/decision phases)
"""

from __future__ import annotations
from typing import Any, Literal, Optional
import json
import time

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..engine_core.stability import with_stability
from ..engine_core.state import (
    DifficultyLevel,
    Event,
    EventType,
    GamePhase,
    GameState,
    Goal,
    GoalId,
    MonthRecord,
)

CURRENT_SCHEMA_VERSION = 2
LEGACY_SCHEMA_VERSION = 1


class SaveValidationError(Exception):
    """Raised when a saved game cannot be migrated or validated."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Save validation failed with {len(errors)} error(s): {'; '.join(errors)}")


# =============================================================================
# Models
# =============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventModel(_CamelModel):
    id: str
    type: Literal["medical", "crop_loss", "good_rain", "loan_offer", "festival", "equipment", "bonus"]
    title: str
    description: str = ""
    cost: Optional[int] = Field(None, ge=0)
    reward: Optional[int] = Field(None, ge=0)
    interest: Optional[int] = Field(None, ge=0)


class GoalModel(_CamelModel):
    id: Literal["cycle", "motorbike", "car", "house"]
    name: str
    cost: int = Field(gt=0)
    emoji: str = ""


class MonthRecordModel(_CamelModel):
    month: int = Field(ge=1, le=12)
    income: int
    expenses: int
    savings: int = Field(ge=0)
    balance: int
    event: Optional[EventModel] = None
    decisions: list[str] = Field(default_factory=list)


class GameStateModel(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    month: int = Field(1, ge=0, le=12)
    balance: int = 0
    monthly_income: int = Field(150_000, ge=0)
    savings: int = Field(0, ge=0)
    stability_score: Optional[int] = None
    has_insurance: bool = False
    insurance_amount: int = Field(0, ge=0)
    debt: int = Field(0, ge=0)
    loan_months_remaining: int = Field(0, ge=0)
    consecutive_saving_months: int = Field(0, ge=0)
    total_saved_this_streak: int = Field(0, ge=0)
    game_phase: Literal["intro", "goal_selection", "playing", "event", "decision", "summary", "ended"] = "intro"
    current_event: Optional[EventModel] = None
    month_history: list[MonthRecordModel] = Field(default_factory=list)
    selected_goal: Optional[GoalModel] = None
    goal_achieved: bool = False
    property_confiscated: bool = False
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    expense_multiplier: float = Field(1.0, gt=0)


class SaveEnvelope(BaseModel):
    version: int = CURRENT_SCHEMA_VERSION
    saved_at: Optional[float] = None
    state: GameStateModel


# =============================================================================
# Conversion
# =============================================================================

def _event_to_model(event: Event | None) -> EventModel | None:
    if event is None:
        return None
    return EventModel(
        id=event.event_id,
        type=event.event_type.value,
        title=event.title,
        description=event.description,
        cost=event.cost,
        reward=event.reward,
        interest=event.interest,
    )


def _event_from_model(model: EventModel | None) -> Event | None:
    if model is None:
        return None
    return Event(
        event_id=model.id,
        event_type=EventType(model.type),
        title=model.title,
        description=model.description,
        cost=model.cost,
        reward=model.reward,
        interest=model.interest,
    )


def state_to_model(state: GameState) -> GameStateModel:
    goal = state.selected_goal
    return GameStateModel(
        month=state.month,
        balance=state.balance,
        monthly_income=state.monthly_income,
        savings=state.savings,
        stability_score=state.stability_score,
        has_insurance=state.has_insurance,
        insurance_amount=state.insurance_amount,
        debt=state.debt,
        loan_months_remaining=state.loan_months_remaining,
        consecutive_saving_months=state.consecutive_saving_months,
        total_saved_this_streak=state.total_saved_this_streak,
        game_phase=state.phase.value,
        current_event=_event_to_model(state.current_event),
        month_history=[
            MonthRecordModel(
                month=record.month,
                income=record.income,
                expenses=record.expenses,
                savings=record.savings,
                balance=record.balance,
                event=_event_to_model(record.event),
                decisions=list(record.decisions),
            )
            for record in state.month_history
        ],
        selected_goal=GoalModel(
            id=goal.goal_id.value,
            name=goal.name,
            cost=goal.cost,
            emoji=goal.glyph,
        ) if goal else None,
        goal_achieved=state.goal_achieved,
        property_confiscated=state.property_confiscated,
        difficulty=state.difficulty.value,
        expense_multiplier=state.expense_multiplier,
    )


def model_to_state(model: GameStateModel) -> GameState:
    goal = model.selected_goal
    return GameState(
        month=model.month,
        balance=model.balance,
        monthly_income=model.monthly_income,
        savings=model.savings,
        stability_score=model.stability_score or 0,
        has_insurance=model.has_insurance,
        insurance_amount=model.insurance_amount,
        debt=model.debt,
        loan_months_remaining=model.loan_months_remaining,
        consecutive_saving_months=model.consecutive_saving_months,
        total_saved_this_streak=model.total_saved_this_streak,
        phase=GamePhase(model.game_phase),
        current_event=_event_from_model(model.current_event),
        month_history=tuple(
            MonthRecord(
                month=record.month,
                income=record.income,
                expenses=record.expenses,
                savings=record.savings,
                balance=record.balance,
                event=_event_from_model(record.event),
                decisions=tuple(record.decisions),
            )
            for record in model.month_history
        ),
        selected_goal=Goal(
            goal_id=GoalId(goal.id),
            name=goal.name,
            cost=goal.cost,
            glyph=goal.emoji,
        ) if goal else None,
        goal_achieved=model.goal_achieved,
        property_confiscated=model.property_confiscated,
        difficulty=DifficultyLevel(model.difficulty),
        expense_multiplier=model.expense_multiplier,
    )


# =============================================================================
# Migration
# =============================================================================

# Keys every web-client state blob carries
LEGACY_REQUIRED_KEYS = ("gamePhase", "month", "balance", "savings")


def _migrate_v1_to_v2(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Bring a version 1 document into the versioned envelope.

    Version 1 is either a bare web-client state object or an envelope
    around one; only the bare form needs wrapping.
    """
    if "state" in payload:
        return {"version": 2, "saved_at": payload.get("saved_at"), "state": payload["state"]}

    missing = [key for key in LEGACY_REQUIRED_KEYS if key not in payload]
    if missing:
        raise SaveValidationError([f"legacy save is missing {key}" for key in missing])

    state = {key: value for key, value in payload.items() if key != "version"}
    return {"version": 2, "saved_at": None, "state": state}


MIGRATIONS = {
    LEGACY_SCHEMA_VERSION: _migrate_v1_to_v2,
}


def migrate(payload: Any) -> dict[str, Any]:
    """Bring a raw payload up to CURRENT_SCHEMA_VERSION."""
    if not isinstance(payload, dict):
        raise SaveValidationError([f"save must be a JSON object, got {type(payload).__name__}"])

    if "state" not in payload:
        version = payload.get("version", LEGACY_SCHEMA_VERSION)
        if version != LEGACY_SCHEMA_VERSION:
            raise SaveValidationError([f"version {version!r} document has no state"])
    else:
        version = payload.get("version", CURRENT_SCHEMA_VERSION)

    if not isinstance(version, int):
        raise SaveValidationError([f"version must be an integer, got {version!r}"])
    if version > CURRENT_SCHEMA_VERSION:
        raise SaveValidationError([f"save version {version} is newer than supported {CURRENT_SCHEMA_VERSION}"])

    while version < CURRENT_SCHEMA_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise SaveValidationError([f"no migration from version {version}"])
        payload = step(payload)
        version = payload["version"]

    return payload


# =============================================================================
# Validation and repair
# =============================================================================

def _format_validation_error(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]


def validate_state(state: GameState) -> tuple[GameState, list[str]]:
    """
    Check cross-field invariants and repair what can be repaired.

    Returns (repaired_state, repairs). Raises SaveValidationError when the
    snapshot cannot be made consistent.
    """
    errors: list[str] = []
    repairs: list[str] = []

    if state.phase == GamePhase.EVENT and state.current_event is None:
        errors.append("gamePhase is 'event' but currentEvent is missing")
    if state.goal_achieved and state.selected_goal is None:
        errors.append("goalAchieved is set but no goal is selected")
    if state.property_confiscated and state.phase != GamePhase.ENDED:
        errors.append("propertyConfiscated is set but the game has not ended")
    if len(state.month_history) > 12:
        errors.append(f"monthHistory has {len(state.month_history)} records, at most 12 allowed")

    if errors:
        raise SaveValidationError(errors)

    changes: dict[str, Any] = {}
    if state.month == 0:
        changes["month"] = 1
        repairs.append("month 0 raised to 1")
    if state.debt == 0 and state.loan_months_remaining != 0:
        changes["loan_months_remaining"] = 0
        repairs.append("loanMonthsRemaining cleared without debt")
    if not state.has_insurance and state.insurance_amount != 0:
        changes["insurance_amount"] = 0
        repairs.append("insuranceAmount cleared without insurance")
    if state.current_event is not None and state.phase not in (GamePhase.EVENT, GamePhase.DECISION):
        changes["current_event"] = None
        repairs.append(f"currentEvent dropped in phase {state.phase.value}")

    repaired = with_stability(state._copy_with(**changes))
    if repaired.stability_score != state.stability_score:
        repairs.append(f"stabilityScore recomputed as {repaired.stability_score}")
    return repaired, repairs


def load_save(payload: Any) -> tuple[GameState, list[str]]:
    """
    Migrate, validate and repair a decoded save document.

    Returns (state, repairs).
    """
    document = migrate(payload)
    try:
        envelope = SaveEnvelope.model_validate(document)
    except ValidationError as e:
        raise SaveValidationError(_format_validation_error(e)) from e
    return validate_state(model_to_state(envelope.state))


def dump_save(state: GameState, saved_at: float | None = None) -> dict[str, Any]:
    """Serialize a state into the current envelope."""
    envelope = SaveEnvelope(
        version=CURRENT_SCHEMA_VERSION,
        saved_at=time.time() if saved_at is None else saved_at,
        state=state_to_model(state),
    )
    return envelope.model_dump(by_alias=True, mode="json")


def dumps_save(state: GameState, saved_at: float | None = None) -> str:
    return json.dumps(dump_save(state, saved_at), ensure_ascii=False, indent=2)


def loads_save(text: str) -> tuple[GameState, list[str]]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise SaveValidationError([f"invalid JSON: {e}"]) from e
    return load_save(payload)
