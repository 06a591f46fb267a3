"""Time-boxed cache of rendered feeds."""

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from euro_rss.models import RenderedFeed, SiteKey

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """A rendered feed and the time it was rendered."""

    feed: RenderedFeed
    rendered_at: datetime


class FeedCache:
    """Serves a rendered feed until its expiry, then renders it again.

    Entries live for the process lifetime or until replaced by a fresh render
    of the same key. Failed renders are never stored, and an expired entry is
    never served in place of a failed render.

    Concurrent misses for the same key share a single render: the first caller
    renders while the others wait for its result.

    A render rejected by the `cacheable` predicate is returned to the waiting
    callers but not stored, so the next request renders again.
    """

    def __init__(self, expiry: timedelta = timedelta(minutes=30), clock: Clock = utc_now):
        self.expiry = expiry
        self._clock = clock
        self._entries: Dict[SiteKey, CacheEntry] = {}
        self._in_flight: Dict[SiteKey, Future] = {}
        self._lock = threading.Lock()

    def get_or_render(
        self,
        key: SiteKey,
        render_fn: Callable[[], RenderedFeed],
        cacheable: Callable[[RenderedFeed], bool] = lambda feed: True,
    ) -> RenderedFeed:
        """Return the cached feed for a key, rendering it on a miss or after expiry.

        Raises:
            Exception: Whatever render_fn raised, uncached.
        """
        with self._lock:
            entry = self._valid_entry(key)
            if entry is not None:
                logging.info(f"Cache hit for {key}, rendered at {entry.rendered_at.isoformat()}.")
                return entry.feed

            future = self._in_flight.get(key)
            is_owner = future is None
            if is_owner:
                future = Future()
                self._in_flight[key] = future

        if not is_owner:
            logging.info(f"Waiting for the in-flight render of {key}.")
            return future.result()

        logging.info(f"Cache miss for {key}, rendering.")
        try:
            feed = render_fn()
        except BaseException as e:
            with self._lock:
                del self._in_flight[key]
            future.set_exception(e)
            raise

        with self._lock:
            if cacheable(feed):
                self._entries[key] = CacheEntry(feed=feed, rendered_at=self._clock())
            else:
                self._entries.pop(key, None)
                logging.info(f"Not caching the render of {key}.")
            del self._in_flight[key]
        future.set_result(feed)
        return feed

    def _valid_entry(self, key: SiteKey) -> Optional[CacheEntry]:
        # Must be called with the lock held.
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.rendered_at < self.expiry:
            return entry
        return None
