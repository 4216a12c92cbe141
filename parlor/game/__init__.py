"""Round engine and state management."""

from parlor.game.events import GameEvent, EventType
from parlor.game.state import RoundState
from parlor.game.engine import GameQuit, HumanAction, HumanController, RoundEngine

__all__ = [
    "GameEvent",
    "EventType",
    "RoundState",
    "GameQuit",
    "HumanAction",
    "HumanController",
    "RoundEngine",
]
