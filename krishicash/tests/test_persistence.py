"""
Tests for save documents and stores.

Tests:
- Serialized shape (envelope, camelCase keys)
- Loading saved games back
- Legacy blob migration
- Validation errors and repairs
- File and memory stores
"""

import json

import pytest

from ..catalog.events import PEST_ATTACK
from ..catalog.goals import MOTORBIKE
from ..engine_core.stability import with_stability
from ..engine_core.state import GamePhase, GameState, MonthRecord
from ..persistence.schema import (
    CURRENT_SCHEMA_VERSION,
    SaveValidationError,
    dump_save,
    dumps_save,
    load_save,
    loads_save,
    migrate,
    validate_state,
)
from ..persistence.store import FileSaveStore, MemorySaveStore
from ..session import SessionManager


@pytest.fixture
def midgame_state() -> GameState:
    record = MonthRecord(
        month=1, income=150_000, expenses=80_000, savings=25_000,
        balance=45_000, event=PEST_ATTACK,
    )
    return with_stability(GameState(
        month=2,
        balance=45_000,
        savings=25_000,
        has_insurance=True,
        insurance_amount=5_000,
        debt=50_000,
        loan_months_remaining=5,
        consecutive_saving_months=1,
        total_saved_this_streak=25_000,
        phase=GamePhase.SUMMARY,
        month_history=(record,),
        selected_goal=MOTORBIKE,
    ))


def legacy_blob(**overrides):
    """A bare state object as the web client stored it."""
    blob = {
        "month": 3,
        "balance": 20000,
        "monthlyIncome": 150000,
        "savings": 50000,
        "stabilityScore": 61,
        "hasInsurance": False,
        "insuranceAmount": 0,
        "debt": 0,
        "loanMonthsRemaining": 0,
        "consecutiveSavingMonths": 2,
        "totalSavedThisStreak": 50000,
        "gamePhase": "playing",
        "currentEvent": None,
        "monthHistory": [],
        "selectedGoal": {"id": "cycle", "name": "Cycle", "cost": 7000, "emoji": "🚲"},
        "goalAchieved": False,
        "propertyConfiscated": False,
        "difficulty": "medium",
        "expenseMultiplier": 1,
    }
    blob.update(overrides)
    return blob


class TestSaveShape:
    """Tests for dump_save output."""

    def test_envelope(self, midgame_state):
        document = dump_save(midgame_state, saved_at=1700000000.0)

        assert document["version"] == CURRENT_SCHEMA_VERSION
        assert document["saved_at"] == 1700000000.0
        assert document["state"]["gamePhase"] == "summary"
        assert document["state"]["loanMonthsRemaining"] == 5
        assert document["state"]["selectedGoal"]["id"] == "motorbike"
        assert document["state"]["monthHistory"][0]["event"]["type"] == "crop_loss"

    def test_dump_and_load(self, midgame_state):
        state, repairs = load_save(dump_save(midgame_state))
        assert state == midgame_state
        assert repairs == []

    def test_text_form(self, midgame_state):
        state, _ = loads_save(dumps_save(midgame_state))
        assert state == midgame_state


class TestMigration:
    """Tests for legacy documents."""

    def test_bare_blob_is_wrapped(self):
        document = migrate(legacy_blob())
        assert document["version"] == CURRENT_SCHEMA_VERSION
        assert document["state"]["gamePhase"] == "playing"

    def test_legacy_blob_loads(self):
        state, repairs = load_save(legacy_blob())

        assert state.month == 3
        assert state.phase == GamePhase.PLAYING
        assert state.selected_goal.cost == 7_000
        assert state.expense_multiplier == 1.0

    def test_newer_version_is_rejected(self):
        with pytest.raises(SaveValidationError):
            migrate({"version": CURRENT_SCHEMA_VERSION + 1, "state": {}})

    def test_non_object_is_rejected(self):
        with pytest.raises(SaveValidationError):
            migrate([1, 2, 3])

    def test_version_one_envelope_keeps_its_state(self, midgame_state):
        document = dump_save(midgame_state)
        document["version"] = 1

        state, _ = load_save(document)

        assert state.savings == 25_000
        assert state == midgame_state

    def test_unrelated_object_is_rejected(self):
        with pytest.raises(SaveValidationError) as excinfo:
            load_save({"foo": "bar"})
        assert "legacy save is missing gamePhase" in excinfo.value.errors

    def test_unknown_state_key_is_rejected(self):
        with pytest.raises(SaveValidationError):
            load_save(legacy_blob(cropYield=12))


class TestValidation:
    """Tests for structural errors and repairs."""

    def test_bad_phase(self):
        with pytest.raises(SaveValidationError) as exc_info:
            load_save(legacy_blob(gamePhase="paused"))
        assert any("gamePhase" in error for error in exc_info.value.errors)

    def test_negative_savings(self):
        with pytest.raises(SaveValidationError):
            load_save(legacy_blob(savings=-1))

    def test_event_phase_needs_event(self):
        with pytest.raises(SaveValidationError):
            load_save(legacy_blob(gamePhase="event"))

    def test_confiscation_needs_ended_game(self):
        with pytest.raises(SaveValidationError):
            load_save(legacy_blob(propertyConfiscated=True))

    def test_invalid_json(self):
        with pytest.raises(SaveValidationError):
            loads_save("{not json")

    def test_stability_is_recomputed(self):
        state, repairs = load_save(legacy_blob(stabilityScore=99))
        assert state.stability_score != 99
        assert any("stabilityScore" in repair for repair in repairs)

    def test_orphan_countdown_is_cleared(self):
        state, repairs = load_save(legacy_blob(loanMonthsRemaining=4))
        assert state.loan_months_remaining == 0
        assert any("loanMonthsRemaining" in repair for repair in repairs)

    def test_stale_event_is_dropped(self):
        event = {"id": "crop_loss_1", "type": "crop_loss", "title": "Pest Attack", "cost": 40000}
        state, repairs = load_save(legacy_blob(currentEvent=event))
        assert state.current_event is None

    def test_month_zero_is_raised(self):
        state, _ = load_save(legacy_blob(month=0))
        assert state.month == 1

    def test_validate_state_directly(self):
        state = GameState(insurance_amount=5_000)
        repaired, repairs = validate_state(state)
        assert repaired.insurance_amount == 0
        assert repairs


class TestStores:
    """Tests for FileSaveStore and MemorySaveStore."""

    def test_file_store_save_and_load(self, tmp_path, midgame_state):
        store = FileSaveStore(save_dir=tmp_path, slot="farm")
        result = store.save(midgame_state)

        assert result.success
        assert (tmp_path / "farm.json").exists()
        assert store.load() == midgame_state
        assert store.list_slots() == ["farm"]

    @pytest.mark.parametrize("slot", ["../escaped", "nested/slot", ""])
    def test_slot_must_stay_in_save_dir(self, tmp_path, slot):
        with pytest.raises(ValueError):
            FileSaveStore(save_dir=tmp_path / "saves", slot=slot)

    def test_escaping_session_id_writes_nothing(self, tmp_path):
        manager = SessionManager(
            store_factory=lambda sid: FileSaveStore(save_dir=tmp_path / "saves", slot=sid)
        )

        with pytest.raises(ValueError):
            manager.create_session(session_id="../escaped")

        assert not (tmp_path / "escaped.json").exists()
        assert len(manager) == 0

    def test_missing_file_is_no_save(self, tmp_path):
        assert FileSaveStore(save_dir=tmp_path).load() is None

    def test_corrupt_file_is_no_save(self, tmp_path):
        (tmp_path / "default.json").write_text("{broken", encoding="utf-8")
        assert FileSaveStore(save_dir=tmp_path).load() is None

    def test_invalid_document_is_no_save(self, tmp_path):
        document = {"version": 2, "saved_at": None, "state": {"gamePhase": "nowhere"}}
        (tmp_path / "default.json").write_text(json.dumps(document), encoding="utf-8")
        assert FileSaveStore(save_dir=tmp_path).load() is None

    def test_legacy_file_loads(self, tmp_path):
        (tmp_path / "default.json").write_text(json.dumps(legacy_blob()), encoding="utf-8")
        state = FileSaveStore(save_dir=tmp_path).load()
        assert state is not None
        assert state.month == 3

    def test_write_failure_is_reported(self, tmp_path, midgame_state):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        store = FileSaveStore(save_dir=blocker / "saves")

        result = store.save(midgame_state)

        assert not result.success
        assert result.error

    def test_delete(self, tmp_path, midgame_state):
        store = FileSaveStore(save_dir=tmp_path)
        store.save(midgame_state)

        assert store.delete()
        assert not store.exists()
        assert not store.delete()

    def test_memory_store(self, midgame_state):
        store = MemorySaveStore()
        assert store.load() is None

        store.save(midgame_state)

        assert store.save_count == 1
        assert store.load() == midgame_state
        assert store.delete()
        assert store.load() is None
