"""Tests for the synchronous event bus."""

import pytest

from larek.core.events import (
    INTENTS,
    MODEL_EVENTS,
    CartChanged,
    CartOpen,
    EventBus,
    EventDispatchError,
    ModalClose,
    ProductOpen,
)


class TestSubscribe:
    def test_handlers_run_in_registration_order(self, bus):
        calls = []
        bus.on(CartOpen.name, lambda e: calls.append("first"))
        bus.on(CartOpen.name, lambda e: calls.append("second"))
        bus.emit(CartOpen())
        assert calls == ["first", "second"]

    def test_only_matching_name_is_delivered(self, bus):
        calls = []
        bus.on(CartOpen.name, calls.append)
        bus.emit(ModalClose())
        assert calls == []

    def test_payload_is_the_event(self, bus):
        seen = []
        bus.on(ProductOpen.name, seen.append)
        bus.emit(ProductOpen(id="p1"))
        assert seen == [ProductOpen(id="p1")]

    def test_late_subscriber_misses_past_events(self, bus):
        bus.emit(CartOpen())
        seen = []
        bus.on(CartOpen.name, seen.append)
        assert seen == []


class TestPatterns:
    def test_wildcard_receives_everything(self, bus, events):
        bus.emit(CartOpen())
        bus.emit(CartChanged(items=(), total=0))
        assert [e.name for e in events] == ["view:cart-open", "cart:changed"]

    def test_prefix_pattern(self, bus):
        seen = []
        bus.on("view:*", seen.append)
        bus.emit(CartOpen())
        bus.emit(CartChanged(items=(), total=0))
        assert [e.name for e in seen] == ["view:cart-open"]

    def test_order_is_shared_between_exact_and_pattern_subscriptions(self, bus):
        calls = []
        bus.on("view:*", lambda e: calls.append("pattern"))
        bus.on(CartOpen.name, lambda e: calls.append("exact"))
        bus.emit(CartOpen())
        assert calls == ["pattern", "exact"]


class TestUnsubscribe:
    def test_off_removes_one_handler(self, bus):
        calls = []
        handler = calls.append
        bus.on(CartOpen.name, handler)
        bus.on(CartOpen.name, handler)
        bus.off(CartOpen.name, handler)
        bus.emit(CartOpen())
        assert len(calls) == 1

    def test_on_returns_unsubscribe(self, bus):
        calls = []
        unsubscribe = bus.on(CartOpen.name, calls.append)
        unsubscribe()
        bus.emit(CartOpen())
        assert calls == []

    def test_off_unknown_handler_is_noop(self, bus):
        bus.off(CartOpen.name, print)

    def test_unsubscribe_during_emit_does_not_skip_others(self, bus):
        calls = []

        def once(event):
            calls.append("once")
            unsubscribe()

        unsubscribe = bus.on(CartOpen.name, once)
        bus.on(CartOpen.name, lambda e: calls.append("other"))
        bus.emit(CartOpen())
        bus.emit(CartOpen())
        assert calls == ["once", "other", "other"]


class TestHandlerErrors:
    def test_failing_handler_does_not_block_others(self, bus):
        calls = []

        def broken(event):
            raise ValueError("boom")

        bus.on(CartOpen.name, broken)
        bus.on(CartOpen.name, lambda e: calls.append("after"))
        with pytest.raises(EventDispatchError) as exc:
            bus.emit(CartOpen())
        assert calls == ["after"]
        assert isinstance(exc.value.errors[0], ValueError)
        assert exc.value.event == CartOpen()

    def test_all_errors_are_collected(self, bus):
        def broken(event):
            raise RuntimeError("x")

        bus.on(CartOpen.name, broken)
        bus.on(CartOpen.name, broken)
        with pytest.raises(EventDispatchError) as exc:
            bus.emit(CartOpen())
        assert len(exc.value.errors) == 2


class TestEventSet:
    def test_event_names_are_unique(self):
        names = [cls.name for cls in MODEL_EVENTS + INTENTS]
        assert len(names) == len(set(names))

    def test_intents_live_under_view_prefix(self):
        assert all(cls.name.startswith("view:") for cls in INTENTS)

    def test_cart_changed_count(self):
        assert CartChanged(items=(), total=0).count == 0

    def test_bus_is_not_shared(self):
        a, b = EventBus(), EventBus()
        seen = []
        a.on_any(seen.append)
        b.emit(CartOpen())
        assert seen == []
