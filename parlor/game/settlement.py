"""Winner determination, payouts and statistics updates for a finished round."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Mapping, Sequence

from parlor.records import PlayerRecord


class Result(Enum):
    """One agent's outcome for a round."""

    WIN = auto()
    LOSS = auto()


@dataclass(frozen=True)
class AgentSnapshot:
    """What settlement needs to know about one bettor."""

    name: str
    stake: int
    value: int
    busted: bool = False
    natural: bool = False
    stood: bool = False


@dataclass(frozen=True)
class Settlement:
    """Winners and the chips each of them collects."""

    pot: int
    winners: frozenset[str] = frozenset()
    payouts: Mapping[str, int] = field(default_factory=dict)

    @property
    def forfeited(self) -> bool:
        """Everyone busted and the house keeps the pot."""
        return not self.winners


@dataclass(frozen=True)
class AgentOutcome:
    """Per-agent line of a round report."""

    name: str
    stake: int
    payout: int
    value: int
    natural: bool
    busted: bool
    stood: bool
    result: Result
    chips: int

    @property
    def won(self) -> bool:
        return self.result is Result.WIN


@dataclass(frozen=True)
class RoundResult:
    """Everything that happened in one settled round."""

    round_number: int
    pot: int
    winners: frozenset[str]
    outcomes: tuple[AgentOutcome, ...]

    def outcome_for(self, name: str) -> AgentOutcome | None:
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None

    def opponents_of(self, name: str) -> list[AgentOutcome]:
        return [outcome for outcome in self.outcomes if outcome.name != name]


def pot_total(snapshots: Iterable[AgentSnapshot]) -> int:
    return sum(snapshot.stake for snapshot in snapshots)


def determine_winners(snapshots: Iterable[AgentSnapshot]) -> frozenset[str]:
    """
    Return every non-busted agent holding the best total of 21 or less.

    Ties are not broken; an empty set means everyone busted.
    """
    standing = [s for s in snapshots if not s.busted and s.value <= 21]
    if not standing:
        return frozenset()
    best = max(s.value for s in standing)
    return frozenset(s.name for s in standing if s.value == best)


def compute_payout(snapshot: AgentSnapshot, pot: int, winner_count: int) -> int:
    """
    Chips returned to a winner, stake included.

    A natural pays 3:2 on top of the stake, anything else 1:1. A winner with
    no recorded stake takes an equal share of the pot; betting always stakes
    at least one chip, so that branch is unreachable in normal play.
    """
    if snapshot.stake <= 0:
        return pot // max(winner_count, 1)
    if snapshot.natural:
        return snapshot.stake + (snapshot.stake * 3) // 2
    return snapshot.stake * 2


def settle(snapshots: Sequence[AgentSnapshot]) -> Settlement:
    """Determine winners and their payouts. An empty pot pays nothing."""
    pot = pot_total(snapshots)
    winners = determine_winners(snapshots)
    if pot <= 0 or not winners:
        return Settlement(pot=pot, winners=winners)

    payouts = {
        s.name: compute_payout(s, pot, len(winners))
        for s in snapshots
        if s.name in winners
    }
    return Settlement(pot=pot, winners=winners, payouts=payouts)


def result_for(name: str, winners: frozenset[str]) -> Result:
    """Every member of the winners set wins, including a shared best total."""
    return Result.WIN if name in winners else Result.LOSS


def apply_to_record(record: PlayerRecord, outcome: AgentOutcome) -> None:
    """Fold one agent's round outcome into its cumulative record."""
    record.total_games += 1
    if outcome.won:
        record.record_win()
    else:
        record.record_loss()

    if outcome.natural:
        record.blackjacks += 1
    record.biggest_win = max(record.biggest_win, outcome.payout)


@dataclass
class SessionTally:
    """One agent's counts for the rounds played since the program started."""

    wins: int = 0
    losses: int = 0
    blackjacks: int = 0
    chips: int = 0


def tally(results: Iterable[RoundResult]) -> dict[str, SessionTally]:
    """Sum round reports per agent, in the order agents first appear."""
    totals: dict[str, SessionTally] = {}
    for result in results:
        for outcome in result.outcomes:
            entry = totals.setdefault(outcome.name, SessionTally())
            if outcome.won:
                entry.wins += 1
            else:
                entry.losses += 1
            if outcome.natural:
                entry.blackjacks += 1
            entry.chips = outcome.chips
    return totals
