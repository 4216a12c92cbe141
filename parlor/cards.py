"""Card and Shoe classes - immutable cards and a reshuffling shoe."""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterator


class Suit(Enum):
    """Card suits, in shoe build order."""

    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    def __str__(self) -> str:
        return self.name.title()

    @property
    def initial(self) -> str:
        """Single-letter suit abbreviation."""
        return self.name[0]


class Rank(Enum):
    """Card ranks, in shoe build order."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    def __str__(self) -> str:
        return self.value

    @property
    def points(self) -> int:
        """Return the point value (Ace = 11, face cards = 10)."""
        if self is Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self is Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank} of {self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the point value of this card."""
        return self.rank.points

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def short(self) -> str:
        """Compact form such as 'KH' or '10S'."""
        return f"{self.rank}{self.suit.initial}"

    @property
    def canonical(self) -> str:
        """Bookkeeping identity, e.g. 'A-3'."""
        return f"{self.rank}-{self.suit.value}"

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like 'AS', '10d', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = "10" if s[:-1] == "T" else s[:-1]
        suit_str = s[-1]

        ranks = {rank.value: rank for rank in Rank}
        suits = {suit.initial: suit for suit in Suit}

        if rank_str not in ranks:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suits:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(ranks[rank_str], suits[suit_str])


def full_deck() -> list[Card]:
    """Return one 52-card set in fixed suit/rank order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Shoe:
    """
    One or more decks split into an undealt pile and a discard pile.

    Cards are dealt from the front of the undealt pile. When the undealt pile
    runs dry the discard pile, minus its top card, is folded back in and
    shuffled, so dealing never fails.
    """

    def __init__(self, num_decks: int = 1, rng: Random | None = None) -> None:
        """
        Initialize and build a shoe.

        Args:
            num_decks: Number of 52-card sets in the shoe
            rng: Random number generator for shuffling
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng or Random()
        self._undealt: deque[Card] = deque()
        self._discard: list[Card] = []
        self.seen: set[str] = set()
        self.build()

    def build(self, num_decks: int | None = None) -> None:
        """Replace the undealt pile with fresh decks in order and clear discards."""
        if num_decks is not None:
            if num_decks < 1:
                raise ValueError("Shoe must have at least 1 deck")
            self._num_decks = num_decks
        self._undealt = deque(card for _ in range(self._num_decks) for card in full_deck())
        self._discard.clear()
        self.seen.clear()

    def shuffle(self) -> None:
        """Shuffle the undealt pile in place."""
        cards = list(self._undealt)
        self._rng.shuffle(cards)
        self._undealt = deque(cards)

    def deal_one(self) -> Card:
        """Remove and return the front card, reshuffling first if needed."""
        if not self._undealt:
            self._replenish()
        card = self._undealt.popleft()
        self.seen.add(card.canonical)
        return card

    def _replenish(self) -> None:
        if len(self._discard) > 1:
            top = self._discard.pop()
            self._undealt.extend(reversed(self._discard))
            self._discard = [top]
        else:
            self.build()
        self.shuffle()

    def discard_card(self, card: Card) -> None:
        """Push a card onto the discard pile."""
        self._discard.append(card)

    def remaining_count(self) -> int:
        """Return the number of undealt cards."""
        return len(self._undealt)

    def needs_reshuffle(self, threshold: int) -> bool:
        """Check if the undealt pile has fallen below the low-card threshold."""
        return len(self._undealt) < threshold

    @property
    def discard_count(self) -> int:
        """Return the number of discarded cards."""
        return len(self._discard)

    @property
    def discard_top(self) -> Card | None:
        """Return the most recently discarded card, if any."""
        return self._discard[-1] if self._discard else None

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks

    @property
    def total_cards(self) -> int:
        """Return the number of cards in a full shoe."""
        return self._num_decks * 52

    def __len__(self) -> int:
        return len(self._undealt)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._undealt)
