"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field

from parlor.rules import ALLOWED_DECK_COUNTS, TableRules


def _parse_decks() -> int:
    """Parse PARLOR_DECKS, falling back to a single deck on bad values."""
    try:
        decks = int(os.getenv("PARLOR_DECKS", "1"))
    except ValueError:
        return 1
    return decks if decks in ALLOWED_DECK_COUNTS else 1


def _parse_text_speed() -> int:
    """Parse PARLOR_TEXT_SPEED (0=fast, 1=normal, 2=slow)."""
    try:
        speed = int(os.getenv("PARLOR_TEXT_SPEED", "1"))
    except ValueError:
        return 1
    return speed if 0 <= speed <= 2 else 1


@dataclass(frozen=True)
class GameConfig:
    """Session settings for the table."""

    num_decks: int = field(default_factory=_parse_decks)
    starting_chips: int = field(
        default_factory=lambda: int(os.getenv("PARLOR_STARTING_CHIPS", "200"))
    )
    table_min: int = field(default_factory=lambda: int(os.getenv("PARLOR_TABLE_MIN", "20")))
    upcard_mode: bool = field(
        default_factory=lambda: os.getenv("PARLOR_UPCARD_MODE", "false").lower() == "true"
    )
    low_card_threshold: int = 15
    text_speed: int = field(default_factory=_parse_text_speed)
    stats_file: str = field(
        default_factory=lambda: os.getenv("PARLOR_STATS_FILE", "player_stats.db")
    )

    @property
    def delay_seconds(self) -> float:
        """Pause between printed lines for the chosen text speed."""
        return {0: 0.01, 1: 0.12, 2: 0.3}[self.text_speed]

    def to_rules(self) -> TableRules:
        """Build the engine's table rules."""
        return TableRules(
            num_decks=self.num_decks,
            starting_chips=self.starting_chips,
            table_min=self.table_min,
            low_card_threshold=self.low_card_threshold,
        )


@dataclass(frozen=True)
class ApiConfig:
    """Profile API configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    game: GameConfig = field(default_factory=GameConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())


# Global configuration instance
config = AppConfig()
