"""Pytest fixtures for blackjack parlor tests."""

import pytest
from random import Random

from hypothesis import strategies as st

from parlor.agents import Agent, Personality
from parlor.cards import Card, Shoe, Rank, Suit
from parlor.game.engine import HumanAction, HumanController, RoundEngine
from parlor.hand import Hand
from parlor.records import RecordStore
from parlor.rules import TableRules


def make_hand(*codes: str) -> Hand:
    """Build a hand from card strings like 'AS', '10H'."""
    return Hand([Card.from_string(code) for code in codes])


def stacked_shoe(*codes: str, rng: Random | None = None) -> Shoe:
    """A shoe whose undealt pile starts with the given cards, in order."""
    shoe = Shoe(num_decks=1, rng=rng or Random(0))
    front = [Card.from_string(code) for code in codes]
    rest = list(shoe)
    for card in front:
        rest.remove(card)
    shoe._undealt.clear()
    shoe._undealt.extend(front + rest)
    return shoe


class ScriptedController(HumanController):
    """Feeds the human seat pre-recorded bets and actions."""

    def __init__(self, bets=(), actions=(), again=()) -> None:
        self.bets = list(bets)
        self.actions = list(actions)
        self.again = list(again)
        self.bet_defaults: list[int] = []

    def bet_input(self, agent, default):
        self.bet_defaults.append(default)
        return self.bets.pop(0) if self.bets else ""

    def choose_action(self, agent, engine):
        return self.actions.pop(0) if self.actions else HumanAction.STAND

    def play_again(self, engine):
        return self.again.pop(0) if self.again else False


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled single-deck shoe."""
    s = Shoe(num_decks=1, rng=rng)
    s.shuffle()
    return s


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def rules():
    """Default table rules."""
    return TableRules()


@pytest.fixture
def stats_path(tmp_path):
    return tmp_path / "player_stats.db"


@pytest.fixture
def store(stats_path):
    """An empty record store backed by a temp file."""
    return RecordStore(stats_path)


@pytest.fixture
def npc_agents():
    """Two computer agents with 100 chips each."""
    return [
        Agent("Cautious Carl", 100, personality=Personality.CONSERVATIVE),
        Agent("Reckless Randy", 100, personality=Personality.AGGRESSIVE),
    ]


@pytest.fixture
def make_engine(store, rng):
    """Factory for engines over a given roster and optional stacked shoe."""

    def factory(agents, human=None, shoe=None, rules=None):
        return RoundEngine(
            agents,
            store,
            rules=rules or TableRules(table_min=10),
            human=human,
            rng=rng,
            shoe=shoe,
        )

    return factory


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)
