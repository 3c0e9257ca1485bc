"""Tests for the reference capability implementations."""

from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from card_engine.capabilities import LogLevel, MemoryStorage, SeededRandom, SimpleEventBus, StructlogLogger


class TestStructlogLogger:
    """Tests for StructlogLogger."""

    @pytest.mark.parametrize(
        ("method", "expected"),
        [("debug", "debug"), ("info", "info"), ("warn", "warning"), ("error", "error")],
    )
    def test_levels(self, method: str, expected: str) -> None:
        """Each helper maps onto the structlog level."""
        with capture_logs() as captured:
            getattr(StructlogLogger(), method)("Card played", card_id="fireball")

        assert captured == [{"event": "Card played", "card_id": "fireball", "log_level": expected}]

    def test_log_accepts_strings(self) -> None:
        """log takes the level as a plain string too."""
        with capture_logs() as captured:
            StructlogLogger().log("warn", "Low health")
        assert captured[0]["log_level"] == "warning"

    def test_unknown_level(self) -> None:
        """Levels outside LogLevel are rejected."""
        with pytest.raises(ValueError):
            StructlogLogger().log("fatal", "boom")

    def test_log_level_values(self) -> None:
        """The four accepted levels."""
        assert [level.value for level in LogLevel] == ["debug", "info", "warn", "error"]


class TestSeededRandom:
    """Tests for SeededRandom."""

    def test_same_seed_same_sequence(self) -> None:
        """Two generators with one seed agree on every method."""
        first, second = SeededRandom(7), SeededRandom(7)

        assert [first.random() for _ in range(5)] == [second.random() for _ in range(5)]
        assert [first.randint(1, 6) for _ in range(10)] == [second.randint(1, 6) for _ in range(10)]
        assert first.shuffle(range(10)) == second.shuffle(range(10))
        assert first.pick("abcdef") == second.pick("abcdef")

    def test_random_range(self) -> None:
        """random stays within [0, 1)."""
        rng = SeededRandom(1)
        assert all(0.0 <= rng.random() < 1.0 for _ in range(200))

    def test_randint_inclusive(self) -> None:
        """randint covers both bounds and nothing outside."""
        rng = SeededRandom(3)
        rolls = {rng.randint(1, 3) for _ in range(300)}
        assert rolls == {1, 2, 3}

    def test_randint_single_value(self) -> None:
        """A degenerate range always returns its only value."""
        assert SeededRandom(0).randint(5, 5) == 5

    def test_randint_empty_range(self) -> None:
        """low greater than high is an error."""
        with pytest.raises(ValueError):
            SeededRandom(0).randint(3, 1)

    def test_shuffle_is_permutation(self) -> None:
        """Shuffling returns a new list with the same elements."""
        items = ["a", "b", "c", "d", "e"]
        shuffled = SeededRandom(11).shuffle(items)

        assert sorted(shuffled) == items
        assert shuffled is not items
        assert items == ["a", "b", "c", "d", "e"]

    def test_pick_empty(self) -> None:
        """Picking from nothing is an error."""
        with pytest.raises(ValueError):
            SeededRandom(0).pick([])

    def test_unseeded_exposes_seed(self) -> None:
        """An unseeded generator records the seed it drew."""
        rng = SeededRandom()
        replay = SeededRandom(rng.seed)
        assert [rng.random() for _ in range(3)] == [replay.random() for _ in range(3)]


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    def test_save_and_load(self) -> None:
        """Stored values come back equal."""

        async def scenario() -> object:
            storage = MemoryStorage()
            await storage.save("game", {"turn": 3})
            return await storage.load("game")

        assert asyncio.run(scenario()) == {"turn": 3}

    def test_missing_key_is_none(self) -> None:
        """Loading an absent key returns None."""
        assert asyncio.run(MemoryStorage().load("nope")) is None

    def test_deep_copy_boundary(self) -> None:
        """Neither the saved object nor a loaded copy aliases storage."""

        async def scenario() -> tuple[object, object]:
            storage = MemoryStorage()
            original = {"hand": ["c1"]}
            await storage.save("game", original)
            original["hand"].append("c2")

            loaded = await storage.load("game")
            loaded["hand"].append("c3")
            return loaded, await storage.load("game")

        loaded, reloaded = asyncio.run(scenario())
        assert loaded == {"hand": ["c1", "c3"]}
        assert reloaded == {"hand": ["c1"]}

    def test_exists_and_delete(self) -> None:
        """delete removes the key; deleting twice is fine."""

        async def scenario() -> list[bool]:
            storage = MemoryStorage()
            await storage.save("k", 1)
            before = await storage.exists("k")
            await storage.delete("k")
            await storage.delete("k")
            return [before, await storage.exists("k")]

        assert asyncio.run(scenario()) == [True, False]

    def test_namespaces_are_isolated(self) -> None:
        """Keys are prefixed by namespace."""

        async def scenario() -> tuple[object, list[str]]:
            shared: dict[str, object] = {}
            left, right = MemoryStorage("left"), MemoryStorage("right")
            left._data = right._data = shared
            await left.save("k", "L")
            return await right.load("k"), await left.keys()

        other, keys = asyncio.run(scenario())
        assert other is None
        assert keys == ["k"]


class TestSimpleEventBus:
    """Tests for SimpleEventBus."""

    def test_delivers_in_subscription_order(self) -> None:
        """Handlers run synchronously in order."""
        bus = SimpleEventBus()
        seen: list[tuple[str, object]] = []
        bus.subscribe("played", lambda data: seen.append(("first", data)))
        bus.subscribe("played", lambda data: seen.append(("second", data)))

        bus.emit("played", "c1")
        assert seen == [("first", "c1"), ("second", "c1")]

    def test_emit_without_subscribers(self) -> None:
        """Emitting an unknown event is a no-op."""
        SimpleEventBus().emit("nothing", 1)

    def test_duplicate_subscription_runs_once(self) -> None:
        """A handler is stored at most once per event."""
        bus = SimpleEventBus()
        seen: list[object] = []
        bus.subscribe("e", seen.append)
        bus.subscribe("e", seen.append)

        bus.emit("e", 1)
        assert seen == [1]
        assert bus.subscriber_count("e") == 1

    def test_failing_handler_is_isolated(self) -> None:
        """A raising handler is logged; the rest still run."""
        bus = SimpleEventBus()
        seen: list[object] = []

        def broken(data: object) -> None:
            raise RuntimeError("boom")

        bus.subscribe("e", broken)
        bus.subscribe("e", seen.append)

        with capture_logs() as captured:
            bus.emit("e", 5)

        assert seen == [5]
        assert captured[0]["event"] == "Error in event handler"
        assert captured[0]["event_name"] == "e"
        assert captured[0]["log_level"] == "error"

    def test_unsubscribe(self) -> None:
        """Unsubscribing stops delivery and drops empty events."""
        bus = SimpleEventBus()
        seen: list[object] = []
        unsubscribe = bus.subscribe("e", seen.append)

        unsubscribe()
        unsubscribe()
        bus.emit("e", 1)

        assert seen == []
        assert bus.events == []

    def test_used_handle_does_not_remove_resubscription(self) -> None:
        """An unsubscribe handle only removes the subscription it came from."""
        bus = SimpleEventBus()
        seen: list[object] = []
        first_unsubscribe = bus.subscribe("e", seen.append)
        first_unsubscribe()

        bus.subscribe("e", seen.append)
        first_unsubscribe()
        bus.emit("e", 1)

        assert seen == [1]
        assert bus.events == ["e"]

    def test_used_handle_with_other_subscribers(self) -> None:
        """Handles stay scoped when the event keeps other subscribers."""
        bus = SimpleEventBus()
        seen: list[object] = []
        bus.subscribe("e", lambda data: None)
        first_unsubscribe = bus.subscribe("e", seen.append)
        first_unsubscribe()

        second_unsubscribe = bus.subscribe("e", seen.append)
        first_unsubscribe()
        bus.emit("e", 2)
        assert seen == [2]

        second_unsubscribe()
        bus.emit("e", 3)
        assert seen == [2]
        assert bus.subscriber_count("e") == 1

    def test_unsubscribe_during_emit(self) -> None:
        """Handlers removed mid-emit do not break the current delivery."""
        bus = SimpleEventBus()
        seen: list[str] = []
        unsubscribers: list = []

        def first(data: object) -> None:
            seen.append("first")
            unsubscribers[0]()

        unsubscribers.append(bus.subscribe("e", first))
        bus.subscribe("e", lambda data: seen.append("second"))

        bus.emit("e")
        bus.emit("e")
        assert seen == ["first", "second", "second"]
