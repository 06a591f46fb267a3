import threading
import unittest
from datetime import timedelta

from euro_rss.feed_cache import FeedCache
from euro_rss.generate_feed import render_feed

from test_utils import FIXED_NOW, generate_test_channel, generate_test_item


class FakeClock:
    """Clock advanced manually by the tests."""

    def __init__(self):
        self.now = FIXED_NOW

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class CountingRenderer:
    """Render function counting its invocations."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return render_feed(
            channel=generate_test_channel(),
            items=[generate_test_item(self.calls)],
            self_url="https://feeds.example.org/test/news",
            max_items=20,
            now=FIXED_NOW,
        )


class TestFeedCache(unittest.TestCase):
    """Tests for the FeedCache class."""

    def setUp(self):
        self.clock = FakeClock()
        self.cache = FeedCache(expiry=timedelta(minutes=30), clock=self.clock)
        self.renderer = CountingRenderer()

    def test_hit_within_expiry(self):
        first = self.cache.get_or_render("test/news", self.renderer)
        self.clock.advance(minutes=29, seconds=59)
        second = self.cache.get_or_render("test/news", self.renderer)

        self.assertEqual(self.renderer.calls, 1)
        self.assertIs(first, second)

    def test_rerender_after_expiry(self):
        first = self.cache.get_or_render("test/news", self.renderer)
        self.clock.advance(minutes=30)
        second = self.cache.get_or_render("test/news", self.renderer)

        self.assertEqual(self.renderer.calls, 2)
        self.assertNotEqual(first.xml, second.xml)

    def test_keys_are_independent(self):
        self.cache.get_or_render("a/news", self.renderer)
        self.cache.get_or_render("b/news", self.renderer)

        self.assertEqual(self.renderer.calls, 2)

    def test_failure_not_cached(self):
        def failing():
            raise RuntimeError("render failed")

        with self.assertRaises(RuntimeError):
            self.cache.get_or_render("test/news", failing)

        feed = self.cache.get_or_render("test/news", self.renderer)
        self.assertEqual(self.renderer.calls, 1)
        self.assertEqual(feed.items[0].title, "Test Item 1")

    def test_expired_entry_not_served_on_failure(self):
        self.cache.get_or_render("test/news", self.renderer)
        self.clock.advance(hours=1)

        def failing():
            raise RuntimeError("render failed")

        with self.assertRaises(RuntimeError):
            self.cache.get_or_render("test/news", failing)

    def test_concurrent_misses_share_one_render(self):
        started = threading.Event()
        release = threading.Event()
        calls = []

        def slow_render():
            calls.append(1)
            started.set()
            release.wait(timeout=5)
            return CountingRenderer()()

        results = []

        def request():
            results.append(self.cache.get_or_render("test/news", slow_render))

        owner = threading.Thread(target=request)
        owner.start()
        self.assertTrue(started.wait(timeout=5))
        waiters = [threading.Thread(target=request) for _ in range(4)]
        for waiter in waiters:
            waiter.start()
        release.set()
        owner.join(timeout=5)
        for waiter in waiters:
            waiter.join(timeout=5)

        self.assertEqual(len(calls), 1)
        self.assertEqual(len(results), 5)
        self.assertTrue(all(result is results[0] for result in results))

    def test_concurrent_waiters_receive_failure(self):
        started = threading.Event()
        release = threading.Event()
        errors = []

        def failing_render():
            started.set()
            release.wait(timeout=5)
            raise RuntimeError("render failed")

        def request():
            try:
                self.cache.get_or_render("test/news", failing_render)
            except RuntimeError as e:
                errors.append(e)

        owner = threading.Thread(target=request)
        owner.start()
        self.assertTrue(started.wait(timeout=5))
        waiter = threading.Thread(target=request)
        waiter.start()
        release.set()
        owner.join(timeout=5)
        waiter.join(timeout=5)

        self.assertEqual(len(errors), 2)

    def test_rejected_render_not_cached(self):
        first = self.cache.get_or_render("test/news", self.renderer, cacheable=lambda feed: False)
        second = self.cache.get_or_render("test/news", self.renderer)
        third = self.cache.get_or_render("test/news", self.renderer)

        self.assertEqual(self.renderer.calls, 2)
        self.assertNotEqual(first.xml, second.xml)
        self.assertIs(second, third)


if __name__ == "__main__":
    unittest.main()
