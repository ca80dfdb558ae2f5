"""
Pytest fixtures for KrishiCash tests.
"""

import pytest

from ..engine_core.rng import FixedRandomSource
from ..engine_core.stability import with_stability
from ..engine_core.state import Event, EventType, GamePhase, GameState
from ..engine_core.transitions import initial_state
from ..catalog.events import GAME_EVENTS, QUICK_LOAN_OFFER
from ..catalog.goals import MOTORBIKE
from ..persistence.store import MemorySaveStore
from ..session.controller import GameController


# Index of the loan offer in the draw order; it has no balance effect
LOAN_OFFER_INDEX = GAME_EVENTS.index(QUICK_LOAN_OFFER)


@pytest.fixture
def fresh_state() -> GameState:
    """The initial snapshot."""
    return initial_state()


@pytest.fixture
def playing_state() -> GameState:
    """Medium difficulty, motorbike goal, waiting for the first month."""
    return with_stability(GameState(
        phase=GamePhase.PLAYING,
        selected_goal=MOTORBIKE,
    ))


@pytest.fixture
def decision_state() -> GameState:
    """First month rolled over with a 70000 balance, ready for decisions."""
    return with_stability(GameState(
        balance=70_000,
        phase=GamePhase.DECISION,
        selected_goal=MOTORBIKE,
    ))


@pytest.fixture
def zero_event() -> Event:
    """An event with neither cost nor reward."""
    return Event(
        event_id="synthetic",
        event_type=EventType.FESTIVAL,
        title="Quiet Month",
        description="Nothing happened.",
    )


@pytest.fixture
def inert_rng() -> FixedRandomSource:
    """Always draws the loan offer."""
    return FixedRandomSource([LOAN_OFFER_INDEX])


@pytest.fixture
def memory_store() -> MemorySaveStore:
    return MemorySaveStore()


@pytest.fixture
def controller(memory_store, inert_rng) -> GameController:
    """A controller with an in-memory store and inert event draws."""
    return GameController(store=memory_store, rng=inert_rng)
