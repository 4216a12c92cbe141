"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: AWAITING_BETS → DEALING → AGENT_TURNS → SETTLING → ROUND_COMPLETE
    """

    # Collecting stakes from every agent with chips
    AWAITING_BETS = auto()

    # Two passes of one card per agent
    DEALING = auto()

    # Each agent hits until it stands or busts
    AGENT_TURNS = auto()

    # Determining winners and paying out
    SETTLING = auto()

    # Round finished, ready for next
    ROUND_COMPLETE = auto()

    # Fewer than two agents left, or the human quit
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

