"""
Tests for API layer.

Tests:
- API service methods
- Session lifecycle via API
- Error handling
- HTTP endpoints
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ActionRequest,
    ActionResponse,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    LoadGameRequest,
    SessionStatus,
)
from ..api.service import APIService
from ..engine_core.action import ActionType
from ..engine_core.state import GameState, GamePhase
from ..persistence.schema import dump_save
from ..persistence.store import SaveResult, SaveStore
from ..session import SessionManager


def act(service, session_id, action_type, **kwargs):
    return service.apply_action(session_id, ActionRequest(action_type=action_type, **kwargs))


@pytest.fixture
def service():
    """Create a fresh API service."""
    return APIService()


@pytest.fixture
def session_id(service):
    return service.create_session(CreateSessionRequest(seed=5)).session_id


def reach_decision(service, session_id):
    act(service, session_id, "start_game", difficulty_id="easy")
    act(service, session_id, "select_goal", goal_id="cycle")
    act(service, session_id, "start_new_month")
    act(service, session_id, "handle_event")


class TestAPIService:
    """Tests for APIService."""

    def test_create_session(self, service):
        response = service.create_session(CreateSessionRequest(seed=5))

        assert response.session_id
        assert response.status == SessionStatus.ACTIVE
        assert response.seed == 5
        assert response.game_state.phase == "intro"
        assert response.game_state.stability.score == 43

    def test_get_nonexistent_session(self, service):
        response = service.get_session("nope")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_end_session(self, service, session_id):
        assert service.end_session(session_id)
        assert session_id not in service.list_sessions()

    def test_apply_action(self, service, session_id):
        response = act(service, session_id, "start_game", difficulty_id="easy")

        assert isinstance(response, ActionResponse)
        assert response.success
        assert response.game_state.monthly_income == 200_000
        assert response.game_state.monthly_expenses == 64_000
        assert response.game_state.phase == "goal_selection"

    def test_wrong_phase_is_invalid_action(self, service, session_id):
        response = act(service, session_id, "end_month")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_ACTION
        assert response.details["reducer_code"] == "INVALID_PHASE"

    def test_missing_amount_is_invalid_action(self, service, session_id):
        reach_decision(service, session_id)
        response = act(service, session_id, "save_money")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_ACTION

    def test_unaffordable_action_is_rejected(self, service, session_id):
        reach_decision(service, session_id)
        before = service.get_game_state(session_id)

        response = act(service, session_id, "save_money", amount=10_000_000)

        assert isinstance(response, ActionResponse)
        assert not response.success
        assert response.error_code == ErrorCode.ACTION_REJECTED
        assert response.game_state == before

    def test_end_month_reports_save(self, service, session_id):
        reach_decision(service, session_id)
        response = act(service, session_id, "end_month")

        assert response.success
        assert response.saved
        assert response.game_state.month == 2
        assert len(response.game_state.month_history) == 1

    def test_legal_actions(self, service, session_id):
        response = service.get_legal_actions(session_id)

        assert response.phase == "intro"
        assert [a.action_type for a in response.actions] == [ActionType.START_GAME] * 3

    def test_result(self, service, session_id):
        response = service.get_result(session_id)
        assert response.outcome
        assert not response.is_over

    def test_reset(self, service, session_id):
        act(service, session_id, "start_game", difficulty_id="hard")
        response = service.reset_game(session_id)
        assert response.phase == "intro"

    def test_catalog(self, service):
        catalog = service.get_catalog()

        assert [d.level for d in catalog.difficulties] == ["easy", "medium", "hard"]
        assert [g.goal_id for g in catalog.goals] == ["cycle", "motorbike", "car", "house"]
        assert len(catalog.events) == 16

    def test_health(self, service, session_id):
        assert service.health().active_sessions == 1

    def test_live_session_id_is_refused(self, service, session_id):
        response = service.create_session(CreateSessionRequest(session_id=session_id))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_EXISTS

    def test_session_id_must_be_a_plain_name(self):
        with pytest.raises(ValidationError):
            CreateSessionRequest(session_id="../escaped")

    def test_goal_progress_and_month_changes(self, service, session_id):
        reach_decision(service, session_id)

        response = act(service, session_id, "save_money", amount=3_500)
        assert response.game_state.goal_progress == 50.0
        assert response.game_state.balance_change is None

        response = act(service, session_id, "end_month")
        assert response.game_state.savings_change == 3_500
        assert response.game_state.balance_change == response.game_state.balance


class TestSaves:
    """Tests for save, export and load through the service."""

    def test_save_and_export(self, service, session_id):
        saved = service.save_game(session_id)
        document = service.export_game(session_id)

        assert saved.success
        assert document["version"] == 2
        assert document["state"]["gamePhase"] == "intro"

    def test_save_failure(self):
        class BrokenStore(SaveStore):
            def load(self):
                return None

            def save(self, state):
                return SaveResult(success=False, error="read-only filesystem")

            def delete(self):
                return False

        service = APIService(session_manager=SessionManager(store_factory=lambda sid: BrokenStore()))
        session_id = service.create_session(CreateSessionRequest()).session_id

        response = service.save_game(session_id)

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SAVE_FAILED

    def test_load_document(self, service, session_id):
        document = dump_save(GameState(month=6, balance=30_000, savings=90_000, phase=GamePhase.PLAYING))
        response = service.load_game(session_id, LoadGameRequest(document=document))

        assert response.game_state.month == 6
        assert response.game_state.savings == 90_000
        assert response.repairs

    def test_load_invalid_document(self, service, session_id):
        response = service.load_game(
            session_id,
            LoadGameRequest(document={"version": 2, "state": {"gamePhase": "event"}}),
        )

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR
        assert service.get_game_state(session_id).phase == "intro"


class TestHTTP:
    """Tests for the FastAPI application."""

    @pytest.fixture
    def client(self):
        from fastapi.testclient import TestClient
        from ..api.app import create_app
        from ..config import Settings

        return TestClient(create_app(settings=Settings(seed=9)))

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_game_flow(self, client):
        session = client.post("/api/v1/sessions", json={"seed": 3}).json()
        sid = session["session_id"]

        response = client.post(f"/api/v1/sessions/{sid}/actions",
                               json={"action_type": "start_game", "difficulty_id": "medium"})
        assert response.status_code == 200
        assert response.json()["game_state"]["phase"] == "goal_selection"

        client.post(f"/api/v1/sessions/{sid}/actions", json={"action_type": "select_goal", "goal_id": "car"})
        response = client.post(f"/api/v1/sessions/{sid}/actions", json={"action_type": "start_new_month"})
        body = response.json()

        assert body["game_state"]["phase"] == "event"
        assert body["game_state"]["current_event"] is not None

    def test_session_without_body(self, client):
        response = client.post("/api/v1/sessions")
        assert response.status_code == 200
        assert response.json()["seed"] == 9

    def test_unknown_session_is_404(self, client):
        response = client.get("/api/v1/sessions/missing/state")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_invalid_action_is_400(self, client):
        sid = client.post("/api/v1/sessions", json={}).json()["session_id"]
        response = client.post(f"/api/v1/sessions/{sid}/actions", json={"action_type": "end_month"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ACTION"

    def test_unknown_action_type_is_422(self, client):
        sid = client.post("/api/v1/sessions", json={}).json()["session_id"]
        response = client.post(f"/api/v1/sessions/{sid}/actions", json={"action_type": "fly"})
        assert response.status_code == 422

    def test_catalog(self, client):
        body = client.get("/api/v1/catalog").json()
        assert len(body["events"]) == 16
        assert body["goals"][1]["cost_display"] == "₹3,00,000"

    def test_load_invalid_document_is_422(self, client):
        sid = client.post("/api/v1/sessions", json={}).json()["session_id"]
        response = client.post(f"/api/v1/sessions/{sid}/load", json={"document": {"gamePhase": "nowhere"}})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_escaping_session_id_is_422(self, client):
        response = client.post("/api/v1/sessions", json={"session_id": "../escaped"})
        assert response.status_code == 422

    def test_duplicate_session_id_is_409(self, client):
        client.post("/api/v1/sessions", json={"session_id": "farm-1"})
        response = client.post("/api/v1/sessions", json={"session_id": "farm-1"})

        assert response.status_code == 409
        assert response.json()["error_code"] == "SESSION_EXISTS"

    def test_save_writes_into_save_dir(self, tmp_path):
        from fastapi.testclient import TestClient
        from ..api.app import create_app
        from ..config import Settings

        client = TestClient(create_app(settings=Settings(seed=9, save_dir=tmp_path)))
        client.post("/api/v1/sessions", json={"session_id": "farm-1"})

        response = client.post("/api/v1/sessions/farm-1/save")

        assert response.status_code == 200
        assert (tmp_path / "farm-1.json").exists()
