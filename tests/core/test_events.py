"""Tests for the event emitter."""

from parlor.game.events import EventEmitter, EventType, GameEvent


class TestEventEmitter:
    def test_typed_and_catch_all_handlers(self):
        emitter = EventEmitter()
        typed, everything = [], []
        emitter.subscribe(typed.append, EventType.AGENT_HIT)
        emitter.subscribe(everything.append)

        emitter.emit_new(EventType.AGENT_HIT, agent="You")
        emitter.emit_new(EventType.AGENT_STAND, agent="You")

        assert [e.event_type for e in typed] == [EventType.AGENT_HIT]
        assert [e.event_type for e in everything] == [EventType.AGENT_HIT, EventType.AGENT_STAND]

    def test_unsubscribe(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append)
        emitter.unsubscribe(seen.append)
        emitter.emit_new(EventType.ROUND_STARTED, round=1)
        assert seen == []

    def test_of_type_filters_history(self):
        emitter = EventEmitter()
        emitter.emit_new(EventType.BET_PLACED, agent="A", amount=10)
        emitter.emit_new(EventType.CARD_DEALT, agent="A")
        emitter.emit_new(EventType.BET_PLACED, agent="B", amount=20)
        assert [e.data["agent"] for e in emitter.of_type(EventType.BET_PLACED)] == ["A", "B"]

    def test_event_str(self):
        event = GameEvent(EventType.PAYOUT, {"amount": 40})
        assert str(event) == "PAYOUT: {'amount': 40}"
