"""Tests for the event bus."""

from matchrecorder.util.events import EventBus, GameOver, SessionRestarted


class TestEventBus:
    def test_emit_triggers_handler(self):
        bus = EventBus()
        received = []
        bus.on(SessionRestarted, lambda e: received.append(e.map_name))
        bus.emit(SessionRestarted(map_name="arena"))
        assert received == ["arena"]

    def test_no_cross_event(self):
        bus = EventBus()
        received = []
        bus.on(SessionRestarted, lambda e: received.append("restart"))
        bus.emit(GameOver(winning_team=1))
        assert received == []

    def test_multiple_handlers(self):
        bus = EventBus()
        a, b = [], []
        bus.on(GameOver, lambda e: a.append(1))
        bus.on(GameOver, lambda e: b.append(2))
        bus.emit(GameOver())
        assert a == [1] and b == [2]

    def test_off_removes_handler(self):
        bus = EventBus()
        received = []
        handler = lambda e: received.append(1)
        bus.on(GameOver, handler)
        bus.off(GameOver, handler)
        bus.emit(GameOver())
        assert received == []

    def test_handler_may_unsubscribe_while_emitting(self):
        bus = EventBus()
        received = []

        def once(e):
            received.append(e.winning_team)
            bus.off(GameOver, once)

        bus.on(GameOver, once)
        bus.emit(GameOver(winning_team=0))
        bus.emit(GameOver(winning_team=1))
        assert received == [0]

    def test_clear(self):
        bus = EventBus()
        bus.on(GameOver, lambda e: None)
        bus.clear()
        # Should not raise
        bus.emit(GameOver())
