"""Tests for the in-memory URL store."""

import random
import threading
from datetime import datetime, timedelta, timezone

import pytest

from lib.database.memory import InMemoryURLStore
from lib.exceptions import (
    InvalidShortCodeError,
    InvalidUrlError,
    NotFoundError,
    ShortCodeConflictError,
)
from lib.shortcode import ShortCodeGenerator


class ScriptedGenerator(ShortCodeGenerator):
    """Generator that replays a fixed list of codes."""

    def __init__(self, codes):
        super().__init__(default_length=6)
        self.codes = list(codes)
        self.lengths = []

    def generate_random(self, length=None):
        self.lengths.append(length)
        return self.codes.pop(0)


class TestCreate:
    """Test record creation."""

    def test_create_normalizes_scheme(self, store, clock):
        """Test create("example.com") stores an https URL with zero clicks."""
        record = store.create("example.com")

        assert record.original_url == "https://example.com"
        assert record.clicks == 0
        assert record.last_accessed is None
        assert record.created_at == clock.now
        assert len(record.short_code) == 6
        assert record.short_code.isalnum()

    @pytest.mark.parametrize("url", [
        "https://example.com/test",
        "http://example.com",
        "example.com/a/b?c=d",
        "  github.com/user/repo  ",
    ])
    def test_resolve_returns_normalized_url(self, store, url):
        """Test resolve(create(u).short_code) gives back the normalized URL."""
        record = store.create(url)

        assert store.resolve(record.short_code).original_url == record.original_url
        assert record.original_url.startswith(("http://", "https://"))
        assert record.original_url == record.original_url.strip()

    @pytest.mark.parametrize("url", ["", "   ", None, "ftp://example.com", "https://", "http://exa mple.com"])
    def test_create_invalid_url(self, store, url):
        """Test malformed input is rejected."""
        with pytest.raises(InvalidUrlError):
            store.create(url)

        assert store.count() == 0

    def test_create_with_custom_code(self, store):
        """Test creating with custom code."""
        record = store.create("https://example.com", short_code="my-link")

        assert record.short_code == "my-link"
        assert store.resolve("my-link").original_url == "https://example.com"

    @pytest.mark.parametrize("code", ["ab", "abcdefghijk", "bad_code", "stats", "url"])
    def test_create_invalid_custom_code(self, store, code):
        """Test malformed and reserved custom codes."""
        with pytest.raises(InvalidShortCodeError):
            store.create("https://example.com", short_code=code)

    def test_create_duplicate_custom_code(self, store):
        """Test duplicate custom code rejection."""
        store.create("https://example.com", short_code="dup")

        with pytest.raises(ShortCodeConflictError, match="already exists"):
            store.create("https://example.org", short_code="dup")

        assert store.resolve("dup").original_url == "https://example.com"

    def test_generated_codes_are_unique(self, store):
        """Test many generated codes never collide."""
        codes = {store.create(f"https://example.com/{i}").short_code for i in range(500)}

        assert len(codes) == 500
        assert store.count() == 500

    def test_collision_regenerates(self, clock):
        """Test a taken code is regenerated."""
        generator = ScriptedGenerator(["aaaaaa", "aaaaaa", "bbbbbb"])
        store = InMemoryURLStore(short_code_generator=generator, clock=clock)

        assert store.create("https://one.example").short_code == "aaaaaa"
        assert store.create("https://two.example").short_code == "bbbbbb"

    def test_collision_grows_length(self, clock):
        """Test repeated collisions move on to longer codes."""
        generator = ScriptedGenerator(["abc123", "abc123", "abc123", "abc1234"])
        store = InMemoryURLStore(
            short_code_generator=generator,
            max_collision_retries=2,
            clock=clock,
        )

        store.create("https://one.example")
        record = store.create("https://two.example")

        assert record.short_code == "abc1234"
        assert generator.lengths == [6, 6, 6, 7]

    def test_collision_exhaustion(self, clock):
        """Test giving up once the maximum length keeps colliding."""
        generator = ScriptedGenerator(["taken"] * 20)
        store = InMemoryURLStore(
            short_code_generator=generator,
            max_collision_retries=1,
            clock=clock,
        )
        store.create("https://one.example", short_code="taken")

        with pytest.raises(ShortCodeConflictError):
            store.create("https://two.example")

    def test_returned_record_is_a_copy(self, store):
        """Test callers can not mutate stored records."""
        record = store.create("https://example.com")
        record.clicks = 99
        record.original_url = "https://evil.example"

        stored = store.resolve(record.short_code)
        assert stored.clicks == 0
        assert stored.original_url == "https://example.com"


class TestResolveAndVisit:
    """Test lookups and click counting."""

    def test_resolve_unknown(self, store):
        """Test resolve("doesnotexist") fails."""
        with pytest.raises(NotFoundError):
            store.resolve("doesnotexist")

    def test_resolve_does_not_count(self, store):
        """Test resolve is a pure lookup."""
        record = store.create("https://example.com")

        store.resolve(record.short_code)
        store.resolve(record.short_code)

        assert store.resolve(record.short_code).clicks == 0

    def test_record_visit(self, store, clock):
        """Test a visit increments clicks and stamps last_accessed only."""
        record = store.create("https://example.com")
        clock.advance(minutes=5)

        assert store.record_visit(record.short_code) == 1

        visited = store.resolve(record.short_code)
        assert visited.clicks == 1
        assert visited.last_accessed == clock.now
        assert visited.created_at == record.created_at
        assert visited.original_url == record.original_url

    def test_record_visit_is_monotonic(self, store, clock):
        """Test clicks only ever go up."""
        record = store.create("https://example.com")

        counts = []
        for _ in range(20):
            clock.advance(seconds=1)
            counts.append(store.record_visit(record.short_code))

        assert counts == list(range(1, 21))

    def test_record_visit_unknown(self, store):
        """Test visiting an unknown code fails."""
        with pytest.raises(NotFoundError):
            store.record_visit("nope")

    def test_concurrent_visits_lose_no_updates(self, store):
        """Test per-record atomicity under threads."""
        record = store.create("https://example.com")
        threads_count, visits_per_thread = 8, 250

        def worker():
            for _ in range(visits_per_thread):
                store.record_visit(record.short_code)

        threads = [threading.Thread(target=worker) for _ in range(threads_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.resolve(record.short_code).clicks == threads_count * visits_per_thread

    def test_click_history(self, store, clock):
        """Test visits are kept newest first with client details."""
        record = store.create("https://example.com")

        store.record_visit(record.short_code, user_agent="agent-1", ip="10.0.0.1")
        clock.advance(seconds=30)
        store.record_visit(record.short_code, user_agent="agent-2", ip="10.0.0.2")

        history = store.click_history(record.short_code)
        assert [event.user_agent for event in history] == ["agent-2", "agent-1"]
        assert history[0].ip == "10.0.0.2"
        assert history[0].timestamp == clock.now

        assert len(store.click_history(record.short_code, limit=1)) == 1

    def test_click_history_is_bounded(self, clock):
        """Test only the newest events are retained."""
        store = InMemoryURLStore(max_click_history=3, clock=clock)
        record = store.create("https://example.com")

        for i in range(5):
            store.record_visit(record.short_code, ip=f"10.0.0.{i}")

        assert [event.ip for event in store.click_history(record.short_code)] == [
            "10.0.0.4", "10.0.0.3", "10.0.0.2",
        ]
        assert store.resolve(record.short_code).clicks == 5


class TestDelete:
    """Test record removal."""

    def test_delete_then_resolve(self, store):
        """Test delete followed by resolve fails with NotFound."""
        record = store.create("https://example.com")

        store.delete(record.short_code)

        with pytest.raises(NotFoundError):
            store.resolve(record.short_code)
        with pytest.raises(NotFoundError):
            store.click_history(record.short_code)
        assert store.count() == 0

    def test_delete_unknown(self, store):
        """Test deleting an unknown code fails."""
        with pytest.raises(NotFoundError):
            store.delete("nope")

    def test_deleted_code_can_be_reused(self, store):
        """Test there is no tombstoning."""
        store.create("https://old.example", short_code="reuse")
        store.record_visit("reuse")
        store.delete("reuse")

        record = store.create("https://new.example", short_code="reuse")

        assert record.clicks == 0
        assert store.resolve("reuse").original_url == "https://new.example"
        assert store.click_history("reuse") == []


class TestStats:
    """Test aggregate statistics."""

    def test_empty_stats(self, store, clock):
        """Test statistics of an empty store."""
        stats = store.stats()

        assert stats.total_urls == 0
        assert stats.total_clicks == 0
        assert stats.average_clicks == 0
        assert stats.top_urls == []
        assert len(stats.clicks_by_day) == 7
        assert all(day["clicks"] == 0 for day in stats.clicks_by_day)
        assert stats.clicks_by_day[-1]["date"] == "2024-03-15"
        assert stats.clicks_by_day[0]["date"] == "2024-03-09"

    def test_totals_and_average(self, store):
        """Test totals and a rounded average."""
        codes = [store.create(f"https://example.com/{i}").short_code for i in range(3)]
        for _ in range(2):
            store.record_visit(codes[0])
        store.record_visit(codes[1])
        store.record_visit(codes[1])
        store.record_visit(codes[1])

        stats = store.stats()

        assert stats.total_urls == 3
        assert stats.total_clicks == 5
        assert stats.average_clicks == 1.67

    def test_top_urls_order_and_ties(self, store):
        """Test ranking by clicks with insertion order breaking ties."""
        store.create("https://a.example", short_code="aaa")
        store.create("https://b.example", short_code="bbb")
        store.create("https://c.example", short_code="ccc")
        store.create("https://d.example", short_code="ddd")
        store.record_visit("ccc")
        store.record_visit("ccc")
        store.record_visit("bbb")
        store.record_visit("ddd")

        top = [record.short_code for record in store.stats().top_urls]

        assert top == ["ccc", "bbb", "ddd", "aaa"]

    def test_top_urls_truncated(self, store):
        """Test at most ten URLs are ranked."""
        for i in range(15):
            store.create(f"https://example.com/{i}")

        assert len(store.stats().top_urls) == 10

    def test_total_clicks_matches_live_records(self, store):
        """Test totals after an arbitrary mix of creates, visits and deletes."""
        rng = random.Random(7)
        live = []
        for step in range(300):
            action = rng.random()
            if action < 0.4 or not live:
                live.append(store.create(f"https://example.com/{step}").short_code)
            elif action < 0.85:
                store.record_visit(rng.choice(live))
            else:
                code = rng.choice(live)
                store.delete(code)
                live.remove(code)

            stats = store.stats()
            assert stats.total_clicks == sum(store.resolve(code).clicks for code in live)
            assert stats.total_urls == len(live)

    def test_clicks_by_day(self, store, clock):
        """Test daily click counts over the last week."""
        record = store.create("https://example.com")

        clock.advance(days=-10)
        store.record_visit(record.short_code)  # outside the window
        clock.advance(days=8)
        store.record_visit(record.short_code)
        store.record_visit(record.short_code)
        clock.advance(days=2)
        store.record_visit(record.short_code)

        by_day = {day["date"]: day["clicks"] for day in store.stats().clicks_by_day}

        assert by_day["2024-03-13"] == 2
        assert by_day["2024-03-15"] == 1
        assert sum(by_day.values()) == 3
        assert list(by_day) == sorted(by_day)

    def test_clicks_by_day_uses_utc(self, clock):
        """Test non-UTC timestamps are bucketed by UTC date."""
        store = InMemoryURLStore(clock=clock)
        record = store.create("https://example.com")
        # 2024-03-15 01:00 at UTC+3 is 2024-03-14 22:00 UTC
        clock.now = datetime(2024, 3, 15, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        store.record_visit(record.short_code)
        clock.now = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

        by_day = {day["date"]: day["clicks"] for day in store.stats().clicks_by_day}

        assert by_day["2024-03-14"] == 1
        assert by_day["2024-03-15"] == 0
