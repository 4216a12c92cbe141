"""Hand evaluation."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from parlor.cards import Card


def _reduce(cards: Iterable[Card]) -> tuple[int, int]:
    """Return (total, aces still counted as 11) after ace reduction."""
    total = 0
    aces = 0
    for card in cards:
        total += card.value
        if card.is_ace:
            aces += 1

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total, aces


def hand_value(cards: Iterable[Card]) -> int:
    """Return the best total for the cards, counting aces as 11 or 1."""
    return _reduce(cards)[0]


def is_soft(cards: Iterable[Card]) -> bool:
    """Check whether an ace is still counted as 11 in the current total."""
    return _reduce(cards)[1] > 0


def is_blackjack(cards: Iterable[Card]) -> bool:
    """Check for a natural: exactly two cards totaling 21."""
    cards = list(cards)
    return len(cards) == 2 and hand_value(cards) == 21


@dataclass
class Hand:
    """The ordered cards one agent holds for the current round."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def remove_last(self) -> Card | None:
        """Remove and return the most recently received card."""
        if not self.cards:
            return None
        return self.cards.pop()

    def clear(self) -> list[Card]:
        """Remove all cards from the hand and return them."""
        cards = list(self.cards)
        self.cards.clear()
        return cards

    @property
    def value(self) -> int:
        """Calculate the best hand value."""
        return hand_value(self.cards)

    @property
    def is_soft(self) -> bool:
        """Check if the hand is soft (has an ace counted as 11)."""
        return is_soft(self.cards)

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return is_blackjack(self.cards)

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def upcard(self) -> Card | None:
        """Return the first card dealt, the one opponents can see."""
        return self.cards[0] if self.cards else None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        return ", ".join(str(card) for card in self.cards)

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
