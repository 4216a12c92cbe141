"""Pydantic schemas for API responses."""

from pydantic import BaseModel, Field

from parlor.records import PlayerRecord


class ProfileResponse(BaseModel):
    """One player's stored statistics."""

    name: str
    wins: int = Field(ge=0)
    losses: int = Field(ge=0)
    ties: int = Field(ge=0)
    best_streak: int = Field(ge=0)
    current_streak: int = Field(ge=0)
    biggest_win: int = Field(ge=0)
    total_games: int = Field(ge=0)
    blackjacks: int = Field(ge=0)
    win_rate: float
    achievements: list[str]

    @classmethod
    def from_record(cls, name: str, record: PlayerRecord) -> "ProfileResponse":
        return cls(
            name=name,
            wins=record.wins,
            losses=record.losses,
            ties=record.ties,
            best_streak=record.best_streak,
            current_streak=record.current_streak,
            biggest_win=record.biggest_win,
            total_games=record.total_games,
            blackjacks=record.blackjacks,
            win_rate=round(record.win_rate, 2),
            achievements=sorted(record.achievements),
        )


class ProfileListResponse(BaseModel):
    """Every stored profile."""

    profiles: list[ProfileResponse]


class AchievementResponse(BaseModel):
    """A catalog entry."""

    key: str
    description: str


class ResetResponse(BaseModel):
    """Result of a reset request."""

    reset: list[str]
