"""Achievement catalog and the predicates that unlock it."""

from typing import Callable, Mapping

from parlor.game.settlement import AgentOutcome, Result, RoundResult
from parlor.records import PlayerRecord

CATALOG: Mapping[str, str] = {
    "BLACKJACK": "Natural Blackjack: get a 2-card 21.",
    "HIGH_ROLLER": "Win a round with a payout of 40+ chips.",
    "HOT_STREAK": "Win 3 rounds in a row.",
    "CARD_SHARK": "Win 10 total rounds.",
    "SURVIVOR": "Reach 200 chips.",
    "UNSTOPPABLE": "Reach 300 chips.",
    "IT_HAPPENS": "Bust badly (22+).",
    "CLOSE_CALL": "Stand on 20 and still lose.",
    "AGAINST_ODDS": "Beat an opponent who had 20 or 21.",
    "MARATHONER": "Play 20 rounds.",
    "GAMBLER_SPIRIT": "Play 50 rounds.",
}

Predicate = Callable[[PlayerRecord, AgentOutcome, RoundResult], bool]


def _beat_strong_opponent(record: PlayerRecord, outcome: AgentOutcome, result: RoundResult) -> bool:
    if outcome.result is Result.LOSS:
        return False
    return any(
        other.result is Result.LOSS and other.value in (20, 21)
        for other in result.opponents_of(outcome.name)
    )


PREDICATES: Mapping[str, Predicate] = {
    "BLACKJACK": lambda rec, out, res: out.natural,
    "HIGH_ROLLER": lambda rec, out, res: out.payout >= 40,
    "HOT_STREAK": lambda rec, out, res: rec.current_streak >= 3,
    "CARD_SHARK": lambda rec, out, res: rec.wins >= 10,
    "SURVIVOR": lambda rec, out, res: out.chips >= 200,
    "UNSTOPPABLE": lambda rec, out, res: out.chips >= 300,
    "IT_HAPPENS": lambda rec, out, res: out.busted and out.value >= 22,
    "CLOSE_CALL": lambda rec, out, res: out.stood and out.value == 20 and out.result is Result.LOSS,
    "AGAINST_ODDS": _beat_strong_opponent,
    "MARATHONER": lambda rec, out, res: rec.total_games >= 20,
    "GAMBLER_SPIRIT": lambda rec, out, res: rec.total_games >= 50,
}


def evaluate(record: PlayerRecord, outcome: AgentOutcome, result: RoundResult) -> list[str]:
    """Return achievement ids that now hold and are not yet unlocked, in catalog order."""
    return [
        key
        for key, predicate in PREDICATES.items()
        if key not in record.achievements and predicate(record, outcome, result)
    ]


def unlock_new(record: PlayerRecord, outcome: AgentOutcome, result: RoundResult) -> list[str]:
    """Add newly earned achievements to the record and return their ids."""
    earned = evaluate(record, outcome, result)
    record.achievements.update(earned)
    return earned


def describe(key: str) -> str:
    return CATALOG.get(key, "")
