"""Blackjack parlor: a round engine for one human against house personalities."""

from parlor.cards import Card, Shoe, Rank, Suit
from parlor.hand import Hand, hand_value, is_blackjack, is_soft
from parlor.agents import Agent, AgentStatus, Personality
from parlor.records import PlayerRecord, RecordStore
from parlor.rules import TableRules

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "Hand",
    "hand_value",
    "is_blackjack",
    "is_soft",
    "Agent",
    "AgentStatus",
    "Personality",
    "PlayerRecord",
    "RecordStore",
    "TableRules",
]
