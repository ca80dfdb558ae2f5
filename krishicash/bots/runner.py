"""
Simulation Runner - Plays a whole game with a policy.

The runner drives a GameController exactly as a player would: ask for the
legal actions, let the policy pick one, dispatch it, repeat until the game
has ended and nothing is left to do.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core.state import Advisory, GamePhase, GameState
from ..session.controller import GameController
from .policy import PlayerPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 1000


@dataclass
class SimulationResult:
    """Final state and transcript of a simulated game."""
    state: GameState
    steps: int
    finished: bool
    transcript: list[str] = field(default_factory=list)
    advisories: list[Advisory] = field(default_factory=list)


def play_game(
    policy: PlayerPolicy,
    controller: GameController | None = None,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> SimulationResult:
    """
    Play until the game ends or max_steps actions have been applied.

    Returns a SimulationResult; `finished` is False when the step limit
    cut the game short.
    """
    controller = controller or GameController()
    transcript: list[str] = []
    advisories: list[Advisory] = []
    steps = 0

    while steps < max_steps:
        legal = controller.legal_actions()
        if not legal:
            break

        decision = policy.select_action(controller.state, legal)
        month = controller.state.month
        result = controller.dispatch(decision.action)
        steps += 1

        if not result.success:
            # A policy must only pick legal actions
            raise RuntimeError(
                f"{policy.get_name()} chose {decision.action.describe()}: {result.error}"
            )

        transcript.append(f"[month {month:>2}] {decision.action.describe()} - {decision.explanation}")
        for advisory in controller.get_advisories():
            advisories.append(advisory)
            transcript.append(f"[month {month:>2}] ! {advisory.title}: {advisory.message}")

    finished = controller.state.phase == GamePhase.ENDED
    if not finished:
        logger.warning("Simulation stopped after %d steps at month %d", steps, controller.state.month)

    return SimulationResult(
        state=controller.state,
        steps=steps,
        finished=finished,
        transcript=transcript,
        advisories=advisories,
    )
