"""Table participants and their per-round state."""

from dataclasses import dataclass, field
from enum import Enum, auto

from parlor.cards import Card
from parlor.hand import Hand


class Personality(Enum):
    """Decision heuristic attached to a computer-controlled agent."""

    CONSERVATIVE = auto()
    AGGRESSIVE = auto()
    ANALYTICAL = auto()
    ERRATIC = auto()
    DEFAULT = auto()

    def __str__(self) -> str:
        return self.name.title()


class AgentStatus(Enum):
    """Per-round status of an agent."""

    IN_PLAY = auto()
    STOOD = auto()
    BUSTED = auto()

    def __str__(self) -> str:
        return {
            AgentStatus.IN_PLAY: "PLAY",
            AgentStatus.STOOD: "STOOD",
            AgentStatus.BUSTED: "BUST",
        }[self]


@dataclass
class Agent:
    """One participant, human or computer, for the lifetime of a game."""

    name: str
    chips: int = 100
    is_human: bool = False
    personality: Personality | None = None
    hand: Hand = field(default_factory=Hand)
    status: AgentStatus = AgentStatus.IN_PLAY
    bet: int = 0
    last_bet: int = 0
    wager_history: list[int] = field(default_factory=list)
    speech: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.is_human and self.personality is None:
            self.personality = Personality.DEFAULT

    @property
    def is_active(self) -> bool:
        """Agents with chips take part in rounds."""
        return self.chips > 0

    @property
    def is_done(self) -> bool:
        """Check if the agent has stood or busted this round."""
        return self.status is not AgentStatus.IN_PLAY

    @property
    def value(self) -> int:
        return self.hand.value

    def reset_round(self) -> list[Card]:
        """Clear hand, status and bet for a new round, returning the old cards."""
        self.status = AgentStatus.IN_PLAY
        self.bet = 0
        return self.hand.clear()

    def stake(self, amount: int) -> None:
        """Move a bet from the chip balance onto the table."""
        self.chips -= amount
        self.bet = amount
        self.last_bet = amount
        self.wager_history.append(amount)

    def receive(self, card: Card) -> None:
        """Add a dealt card to the hand."""
        self.hand.add_card(card)

    def stand(self) -> None:
        self.status = AgentStatus.STOOD

    def bust(self) -> None:
        self.status = AgentStatus.BUSTED

    def next_line(self) -> str | None:
        """Return the next speech line, rotating the queue."""
        if not self.speech:
            return None
        line = self.speech.pop(0)
        self.speech.append(line)
        return line


def default_roster(starting_chips: int) -> list[Agent]:
    """Create the human seat followed by the four house personalities."""
    return [
        Agent("You", starting_chips, is_human=True),
        Agent(
            "Cautious Carl",
            starting_chips,
            personality=Personality.CONSERVATIVE,
            speech=["Mmm... 14 is too risky. I'll stand.", "I'll play it safe."],
        ),
        Agent(
            "Reckless Randy",
            starting_chips,
            personality=Personality.AGGRESSIVE,
            speech=["Hit me again! Let's go!", "All in baby!"],
        ),
        Agent(
            "Smart Samantha",
            starting_chips,
            personality=Personality.ANALYTICAL,
            speech=["Statistics say I should hit here.", "I'll play the odds."],
        ),
        Agent(
            "Chaotic Chad",
            starting_chips,
            personality=Personality.ERRATIC,
            speech=["Stand! No, hit! No wait, hit!", "Feeling unpredictable today."],
        ),
    ]
