"""Tests for achievement evaluation."""

import pytest

from parlor import achievements
from parlor.game.settlement import AgentOutcome, Result, RoundResult
from parlor.records import PlayerRecord


def make_outcome(name="You", **kwargs):
    fields = dict(
        stake=10,
        payout=0,
        value=18,
        natural=False,
        busted=False,
        stood=True,
        result=Result.LOSS,
        chips=100,
    )
    fields.update(kwargs)
    return AgentOutcome(name=name, **fields)


def make_result(*outcomes):
    winners = frozenset(o.name for o in outcomes if o.result is not Result.LOSS)
    return RoundResult(1, sum(o.stake for o in outcomes), winners, tuple(outcomes))


def earned(record, out, *others):
    return achievements.evaluate(record, out, make_result(out, *others))


class TestCatalog:
    def test_every_entry_has_predicate(self):
        assert list(achievements.CATALOG) == list(achievements.PREDICATES)
        assert len(achievements.CATALOG) == 11

    def test_describe(self):
        assert achievements.describe("BLACKJACK") == "Natural Blackjack: get a 2-card 21."
        assert achievements.describe("NOPE") == ""


class TestPredicates:
    def test_nothing_for_plain_loss(self):
        assert earned(PlayerRecord(), make_outcome()) == []

    def test_blackjack(self):
        out = make_outcome(natural=True, value=21, result=Result.WIN, payout=25)
        assert "BLACKJACK" in earned(PlayerRecord(), out)

    @pytest.mark.parametrize("payout,expected", [(39, False), (40, True)])
    def test_high_roller(self, payout, expected):
        out = make_outcome(result=Result.WIN, payout=payout)
        assert ("HIGH_ROLLER" in earned(PlayerRecord(), out)) is expected

    def test_hot_streak(self):
        assert "HOT_STREAK" in earned(PlayerRecord(current_streak=3), make_outcome())
        assert "HOT_STREAK" not in earned(PlayerRecord(current_streak=2), make_outcome())

    def test_card_shark(self):
        assert "CARD_SHARK" in earned(PlayerRecord(wins=10), make_outcome())

    @pytest.mark.parametrize(
        "chips,expected",
        [(199, []), (200, ["SURVIVOR"]), (300, ["SURVIVOR", "UNSTOPPABLE"])],
    )
    def test_chip_milestones(self, chips, expected):
        assert earned(PlayerRecord(), make_outcome(chips=chips)) == expected

    def test_it_happens(self):
        out = make_outcome(value=22, busted=True, stood=False)
        assert earned(PlayerRecord(), out) == ["IT_HAPPENS"]

    def test_close_call(self):
        out = make_outcome(value=20, result=Result.LOSS)
        other = make_outcome("Carl", value=21, result=Result.WIN)
        assert earned(PlayerRecord(), out, other) == ["CLOSE_CALL"]

    def test_close_call_needs_stand(self):
        out = make_outcome(value=20, stood=False)
        assert earned(PlayerRecord(), out) == []

    def test_against_odds(self):
        out = make_outcome(value=21, result=Result.WIN, payout=20)
        other = make_outcome("Carl", value=20, result=Result.LOSS)
        assert "AGAINST_ODDS" in earned(PlayerRecord(), out, other)

    def test_against_odds_not_for_loser(self):
        out = make_outcome(value=19, result=Result.LOSS)
        other = make_outcome("Carl", value=20, result=Result.LOSS)
        assert "AGAINST_ODDS" not in earned(PlayerRecord(), out, other)

    @pytest.mark.parametrize(
        "games,expected",
        [(19, []), (20, ["MARATHONER"]), (50, ["MARATHONER", "GAMBLER_SPIRIT"])],
    )
    def test_rounds_played(self, games, expected):
        assert earned(PlayerRecord(total_games=games), make_outcome()) == expected


class TestUnlock:
    def test_unlock_records_and_returns(self):
        record = PlayerRecord()
        out = make_outcome(natural=True, value=21, result=Result.WIN, payout=50, chips=210)
        new = achievements.unlock_new(record, out, make_result(out))
        assert new == ["BLACKJACK", "HIGH_ROLLER", "SURVIVOR"]
        assert record.achievements == {"BLACKJACK", "HIGH_ROLLER", "SURVIVOR"}

    def test_unlock_is_idempotent(self):
        record = PlayerRecord()
        out = make_outcome(natural=True, value=21, result=Result.WIN, payout=50, chips=210)
        result = make_result(out)
        achievements.unlock_new(record, out, result)
        assert achievements.unlock_new(record, out, result) == []
        assert len(record.achievements) == 3
