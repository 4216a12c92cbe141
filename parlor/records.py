"""Durable per-player statistics, one whitespace-separated record per line."""

import logging
import os
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Stands in for spaces in identities on disk; a literal "_" or "%" is percent-escaped
SPACE_PLACEHOLDER = "_"

_UNESCAPES = {SPACE_PLACEHOLDER: " ", "%5F": "_", "%25": "%"}
_ESCAPED_TOKEN = re.compile(r"_|%5F|%25")

NUMERIC_FIELDS = (
    "wins",
    "losses",
    "ties",
    "best_streak",
    "current_streak",
    "biggest_win",
    "total_games",
    "blackjacks",
)


@dataclass
class PlayerRecord:
    """Cumulative statistics and unlocked achievements for one identity."""

    wins: int = 0
    losses: int = 0
    ties: int = 0
    best_streak: int = 0
    current_streak: int = 0
    biggest_win: int = 0
    total_games: int = 0
    blackjacks: int = 0
    achievements: set[str] = field(default_factory=set)

    def record_win(self) -> None:
        self.wins += 1
        self.current_streak += 1
        self.best_streak = max(self.best_streak, self.current_streak)

    def record_loss(self) -> None:
        self.losses += 1
        self.current_streak = 0

    @property
    def win_rate(self) -> float:
        """Calculate win rate percentage over rounds played."""
        if self.total_games == 0:
            return 0.0
        return (self.wins / self.total_games) * 100


def escape_name(name: str) -> str:
    return name.replace("%", "%25").replace("_", "%5F").replace(" ", SPACE_PLACEHOLDER)


def unescape_name(name: str) -> str:
    return _ESCAPED_TOKEN.sub(lambda m: _UNESCAPES[m.group()], name)


def encode_record(identity: str, record: PlayerRecord) -> str:
    """Serialize one record as a single line (without newline)."""
    fields = [escape_name(identity)]
    fields.extend(str(getattr(record, name)) for name in NUMERIC_FIELDS)
    if record.achievements:
        fields.append(",".join(sorted(record.achievements)))
    return " ".join(fields)


def decode_line(line: str) -> tuple[str, PlayerRecord] | None:
    """
    Parse one stored line.

    Returns:
        (identity, record), or None when the line is blank or malformed
    """
    parts = line.split()
    if len(parts) < 1 + len(NUMERIC_FIELDS):
        return None

    try:
        numbers = [int(value) for value in parts[1 : 1 + len(NUMERIC_FIELDS)]]
    except ValueError:
        return None

    record = PlayerRecord(**dict(zip(NUMERIC_FIELDS, numbers)))
    rest = parts[1 + len(NUMERIC_FIELDS) :]
    if rest:
        record.achievements = {token for token in rest[0].split(",") if token}
    return unescape_name(parts[0]), record


class RecordStore:
    """PlayerRecords keyed by identity, backed by a flat file.

    The file is read once at construction and fully rewritten on every save.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """
        Initialize the store.

        Args:
            path: Location of the stats file (need not exist yet)
        """
        self.path = os.fspath(path)
        self._records: dict[str, PlayerRecord] = {}
        self.load()

    def load(self) -> None:
        """Load records from disk, skipping malformed lines."""
        self._records = {}
        if not os.path.exists(self.path):
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                decoded = decode_line(line)
                if decoded is None:
                    logger.warning("Skipping malformed record at %s:%d", self.path, lineno)
                    continue
                identity, record = decoded
                self._records[identity] = record

    def save(self) -> bool:
        """
        Rewrite the stats file with every record.

        Returns:
            True if the write succeeded
        """
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                for identity, record in self._records.items():
                    f.write(encode_record(identity, record) + "\n")
        except OSError as exc:
            logger.warning("Cannot save player stats to %s: %s", self.path, exc)
            return False
        return True

    def get(self, identity: str) -> PlayerRecord:
        """Return the record for an identity, creating an empty one if needed."""
        if identity not in self._records:
            self._records[identity] = PlayerRecord()
        return self._records[identity]

    def find(self, identity: str) -> PlayerRecord | None:
        return self._records.get(identity)

    def all(self) -> dict[str, PlayerRecord]:
        return dict(self._records)

    def reset(self, identity: str) -> bool:
        """Reset one profile's statistics; returns False for unknown identities."""
        if identity not in self._records:
            return False
        self._records[identity] = PlayerRecord()
        self.save()
        return True

    def reset_all(self) -> None:
        for identity in self._records:
            self._records[identity] = PlayerRecord()
        self.save()

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)
