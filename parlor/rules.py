"""Table rule configuration."""

from dataclasses import dataclass

ALLOWED_DECK_COUNTS = (1, 2, 4, 6)


@dataclass(frozen=True)
class TableRules:
    """
    Fixed settings for one session at the table.

    Supplied once at startup and never changed mid-game.
    """

    # Shoe configuration
    num_decks: int = 1
    low_card_threshold: int = 15  # Rebuild the shoe below this many undealt cards

    # Chips
    starting_chips: int = 200
    table_min: int = 20

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks not in ALLOWED_DECK_COUNTS:
            raise ValueError(f"num_decks must be one of {ALLOWED_DECK_COUNTS}")
        if self.starting_chips < 1:
            raise ValueError("starting_chips must be at least 1")
        if self.table_min < 1:
            raise ValueError("table_min must be at least 1")
        if self.low_card_threshold < 0:
            raise ValueError("low_card_threshold cannot be negative")

