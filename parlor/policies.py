"""Computer-agent decision heuristics, dispatched by personality tag."""

from random import Random
from typing import Callable, Iterable, Mapping

from parlor.agents import Agent, Personality
from parlor.hand import Hand

# Rank value assumed when no opponent shows a card
NO_UPCARD = 2

HitPolicy = Callable[[Hand, int, Random], bool]


def conservative_should_hit(hand: Hand, upcard: int, rng: Random) -> bool:
    """Hit while under 13."""
    return hand.value < 13


def aggressive_should_hit(hand: Hand, upcard: int, rng: Random) -> bool:
    """Hit while under 20."""
    return hand.value < 20


def erratic_should_hit(hand: Hand, upcard: int, rng: Random) -> bool:
    """Coin flip, regardless of the hand."""
    return rng.randint(0, 1) == 1


def analytical_should_hit(hand: Hand, upcard: int, rng: Random) -> bool:
    """
    Simplified basic strategy against the strongest visible opposing card.

    Soft hands hit through 17 and hit soft 18 only against 9 or better.
    Hard hands hit through 11, stand from 17, and in between stand only
    against a 2-6 upcard.
    """
    value = hand.value
    if hand.is_soft:
        if value <= 17:
            return True
        if value == 18:
            return upcard >= 9
        return False

    if value <= 11:
        return True
    if value >= 17:
        return False
    return not 2 <= upcard <= 6


def default_should_hit(hand: Hand, upcard: int, rng: Random) -> bool:
    """Hit while under 16."""
    return hand.value < 16


POLICIES: Mapping[Personality, HitPolicy] = {
    Personality.CONSERVATIVE: conservative_should_hit,
    Personality.AGGRESSIVE: aggressive_should_hit,
    Personality.ANALYTICAL: analytical_should_hit,
    Personality.ERRATIC: erratic_should_hit,
    Personality.DEFAULT: default_should_hit,
}


def highest_visible_card(agents: Iterable[Agent], self_name: str) -> int:
    """Return the highest first-card value shown by anyone but ``self_name``."""
    highest = NO_UPCARD
    for agent in agents:
        if agent.name == self_name:
            continue
        upcard = agent.hand.upcard
        if upcard is not None:
            highest = max(highest, upcard.value)
    return highest


def should_hit(
    personality: Personality | None,
    hand: Hand,
    upcard: int = NO_UPCARD,
    rng: Random | None = None,
) -> bool:
    """
    Decide whether a computer agent takes another card.

    Args:
        personality: The agent's heuristic (None falls back to the default)
        hand: The agent's current hand
        upcard: Highest card value visible among the other agents
        rng: Random source for the erratic heuristic

    Returns:
        True to hit, False to stand
    """
    policy = POLICIES.get(personality or Personality.DEFAULT, default_should_hit)
    return policy(hand, upcard, rng or Random())


def choose_bet(
    personality: Personality | None,
    chips: int,
    table_min: int,
    current_streak: int,
    rng: Random,
) -> int:
    """
    Pick a computer agent's bet for the round.

    Each personality adds a different premium over the table minimum; the
    result is always clamped to what the agent can cover.
    """
    if chips <= 0:
        return 0

    roll = rng.randint(0, 99)
    extra = 0

    if personality is Personality.CONSERVATIVE:
        # Rarely raises
        if roll > 90 and chips > table_min:
            extra = table_min // 2
    elif personality is Personality.AGGRESSIVE:
        if roll > 40 and chips > table_min:
            extra = table_min
    elif personality is Personality.ANALYTICAL:
        # Presses a winning streak
        if current_streak > 1 and chips > table_min:
            extra = table_min // 2
        if roll > 95 and chips > table_min * 2:
            extra = table_min * 2
    elif personality is Personality.ERRATIC:
        if roll % 2 == 0:
            extra = roll % (table_min + 1)

    bet = min(chips, table_min + extra)
    if roll < 6:
        bet = max(1, table_min // 2)
    return max(1, min(bet, chips))
