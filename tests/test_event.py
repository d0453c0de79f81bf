"""Tests for Event — synchronous broadcast with subscribe/unsubscribe."""

from entityfx import Event


class TestEmitSubscribe:
    def test_subscribe_receives_emitted_args(self):
        event = Event()
        received = []
        event.subscribe(lambda *args: received.append(args))
        event.emit(1, "a")
        event.emit(2, "b")
        assert received == [(1, "a"), (2, "b")]

    def test_multiple_subscribers_in_order(self):
        event = Event()
        order = []
        event.subscribe(lambda v: order.append(("first", v)))
        event.subscribe(lambda v: order.append(("second", v)))
        event.emit("x")
        assert order == [("first", "x"), ("second", "x")]

    def test_number_of_listeners(self):
        event = Event()
        assert event.number_of_listeners == 0
        dispose = event.subscribe(lambda: None)
        assert event.number_of_listeners == 1
        dispose()
        assert event.number_of_listeners == 0


class TestUnsubscribe:
    def test_disposer(self):
        event = Event()
        received = []
        dispose = event.subscribe(lambda v: received.append(v))
        event.emit(1)
        dispose()
        event.emit(2)
        assert received == [1]

    def test_disposer_idempotent(self):
        event = Event()
        dispose = event.subscribe(lambda: None)
        dispose()
        dispose()  # should not raise

    def test_disposer_removes_only_its_subscription(self):
        event = Event()
        received = []
        listener = received.append
        dispose = event.subscribe(listener)
        event.subscribe(listener)
        dispose()
        dispose()
        assert event.number_of_listeners == 1
        event.emit("x")
        assert received == ["x"]

    def test_unsubscribe_unknown_returns_false(self):
        event = Event()
        assert event.unsubscribe(lambda: None) is False

    def test_unsubscribe_bound_method(self):
        class Listener:
            def __init__(self):
                self.calls = 0

            def on_event(self):
                self.calls += 1

        listener = Listener()
        event = Event()
        event.subscribe(listener.on_event)
        event.emit()
        assert event.unsubscribe(listener.on_event) is True
        event.emit()
        assert listener.calls == 1


class TestEmitSnapshot:
    def test_unsubscribed_during_emit_is_skipped(self):
        event = Event()
        received = []

        def second(v):
            received.append(("second", v))

        def first(v):
            received.append(("first", v))
            event.unsubscribe(second)

        event.subscribe(first)
        event.subscribe(second)
        event.emit(1)
        assert received == [("first", 1)]

    def test_subscribed_during_emit_waits_for_next(self):
        event = Event()
        received = []

        def late(v):
            received.append(("late", v))

        def first(v):
            received.append(("first", v))
            if v == 1:
                event.subscribe(late)

        event.subscribe(first)
        event.emit(1)
        assert received == [("first", 1)]
        event.emit(2)
        assert received == [("first", 1), ("first", 2), ("late", 2)]

    def test_duplicate_subscription_removed_once_during_emit(self):
        event = Event()
        calls = []

        def listener(v):
            calls.append(v)
            if len(calls) == 1:
                event.unsubscribe(listener)

        event.subscribe(listener)
        event.subscribe(listener)
        event.emit(1)
        # first slot removed itself; the second subscription still runs
        assert calls == [1, 1]
        assert event.number_of_listeners == 1
        event.emit(2)
        assert calls == [1, 1, 2]

    def test_unsubscribe_during_nested_emit(self):
        event = Event()
        received = []

        def tail(v):
            received.append(("tail", v))

        def head(v):
            received.append(("head", v))
            if v == 1:
                event.emit(2)
                event.unsubscribe(tail)

        event.subscribe(head)
        event.subscribe(tail)
        event.emit(1)
        assert received == [("head", 1), ("head", 2), ("tail", 2)]
        assert event.number_of_listeners == 1

    def test_repr(self):
        event = Event()
        event.subscribe(lambda: None)
        assert "listeners=1" in repr(event)
