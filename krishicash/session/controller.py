"""
Game Controller - Single owner of one game's state.

The controller is the only place a GameState is replaced. Presentation
code reads `controller.state` and calls the action methods; it never
assembles a new state itself.

Per action the controller:
1. Dispatches an Action through the Reducer
2. Swaps in the new snapshot when the action applied
3. Queues advisories for the player
4. Saves through the SaveStore after a month ends

A failed save is logged and reported through `last_save`; the in-memory
game carries on.
"""

from __future__ import annotations
from typing import Any
import logging

from ..engine_core.action import Action, ActionResult, ActionType
from ..engine_core.action_generator import ActionGenerator
from ..engine_core.outcome import GameResult, Lesson, game_lessons, get_game_result
from ..engine_core.reducer import Reducer
from ..engine_core.rng import RandomSource, default_random_source
from ..engine_core.state import Advisory, GameState
from ..engine_core.transitions import initial_state
from ..persistence.schema import validate_state
from ..persistence.store import SaveResult, SaveStore

logger = logging.getLogger(__name__)


# Actions after which the game is written to the store
AUTOSAVE_ACTIONS = frozenset({ActionType.END_MONTH})


class GameController:
    """
    Owns one game's state and applies player actions to it.

    Usage:
        controller = GameController(store=FileSaveStore())
        controller.load()

        controller.start_game("easy")
        controller.select_goal("motorbike")
        controller.start_new_month()
        for advisory in controller.get_advisories():
            show(advisory)
    """

    def __init__(
        self,
        store: SaveStore | None = None,
        rng: RandomSource | None = None,
        autosave: bool = True,
    ):
        self.store = store
        self.autosave = autosave
        self.reducer = Reducer(rng=rng or default_random_source())
        self.generator = ActionGenerator()

        self._state: GameState = initial_state()
        self._pending_advisories: list[Advisory] = []
        self.action_history: list[Action] = []
        self.last_save: SaveResult | None = None

    @property
    def state(self) -> GameState:
        return self._state

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, action: Action) -> ActionResult:
        """Apply an action and keep the new state if it applied."""
        result = self.reducer.apply(self._state, action)
        if not result.success:
            logger.debug("Action %s rejected: %s", action.describe(), result.error)
            return result

        self._state = result.new_state
        self._pending_advisories.extend(result.advisories)
        self.action_history.append(action)

        if self.autosave and action.action_type in AUTOSAVE_ACTIONS:
            self.save()
        return result

    def legal_actions(self) -> list[Action]:
        return self.generator.generate(self._state)

    def get_advisories(self) -> list[Advisory]:
        """Get and clear advisories raised since the last call."""
        advisories = self._pending_advisories.copy()
        self._pending_advisories.clear()
        return advisories

    # =========================================================================
    # Player actions
    # =========================================================================

    def start_game(self, difficulty_id: str) -> ActionResult:
        return self.dispatch(Action.start_game(difficulty_id))

    def select_goal(self, goal_id: str) -> ActionResult:
        return self.dispatch(Action.select_goal(goal_id))

    def start_new_month(self) -> ActionResult:
        return self.dispatch(Action.start_new_month())

    def handle_event(self, event: Any | None = None) -> ActionResult:
        return self.dispatch(Action.handle_event(event))

    def end_month(self) -> ActionResult:
        return self.dispatch(Action.end_month())

    def continue_to_next_month(self) -> ActionResult:
        return self.dispatch(Action.continue_to_next_month())

    def save_money(self, amount: int) -> ActionResult:
        return self.dispatch(Action.save_money(amount))

    def withdraw_from_savings(self, amount: int) -> ActionResult:
        return self.dispatch(Action.withdraw(amount))

    def buy_insurance(self, amount: int) -> ActionResult:
        return self.dispatch(Action.buy_insurance(amount))

    def update_insurance(self, amount: int) -> ActionResult:
        return self.dispatch(Action.update_insurance(amount))

    def stop_insurance(self) -> ActionResult:
        return self.dispatch(Action.stop_insurance())

    def take_loan(self, amount: int) -> ActionResult:
        return self.dispatch(Action.take_loan(amount))

    def repay_loan(self, amount: int) -> ActionResult:
        return self.dispatch(Action.repay_loan(amount))

    def purchase_goal(self) -> ActionResult:
        return self.dispatch(Action.purchase_goal())

    # =========================================================================
    # Results
    # =========================================================================

    def get_game_result(self) -> GameResult:
        return get_game_result(self._state)

    def lessons(self) -> list[Lesson]:
        return game_lessons(self._state)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def load(self) -> bool:
        """
        Restore the saved game, if the store has a usable one.

        Returns True when a save was loaded. Without one the controller
        keeps its current state.
        """
        if self.store is None:
            return False
        saved = self.store.load()
        if saved is None:
            return False
        self._replace(saved)
        logger.info("Loaded saved game at month %d (%s)", saved.month, saved.phase.value)
        return True

    def load_game_state(self, state: GameState) -> list[str]:
        """
        Replace the whole state with an externally supplied snapshot.

        The snapshot is validated and repaired first; the repairs made are
        returned. Raises SaveValidationError if it cannot be repaired.
        """
        repaired, repairs = validate_state(state)
        self._replace(repaired)
        return repairs

    def save(self) -> SaveResult | None:
        if self.store is None:
            return None
        self.last_save = self.store.save(self._state)
        if not self.last_save.success:
            logger.warning("Autosave failed: %s", self.last_save.error)
        return self.last_save

    def reset(self) -> GameState:
        """Start over from the initial snapshot and discard the save."""
        self._replace(initial_state())
        if self.store is not None:
            self.store.delete()
        return self._state

    def _replace(self, state: GameState):
        self._state = state
        self._pending_advisories.clear()
        self.action_history.clear()
