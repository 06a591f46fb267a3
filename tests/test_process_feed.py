import xml.etree.ElementTree as ET
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from euro_rss.errors import HttpStatusError, NetworkError
from euro_rss.feed_cache import FeedCache
from euro_rss.process_feed import ERROR_CATEGORY, FeedService, materialize_items

from test_utils import FIXED_NOW, generate_test_page, generate_test_site

SELF_URL = "https://feeds.example.org/test/news"

def service_with(fetch_side_effect):
    fetcher = MagicMock()
    fetcher.fetch.side_effect = fetch_side_effect
    service = FeedService(
        fetcher=fetcher,
        cache=FeedCache(clock=lambda: FIXED_NOW),
        clock=lambda: FIXED_NOW,
    )
    return service, fetcher

def test_generate_feed_scraped_items():
    service, fetcher = service_with([generate_test_page(3)])
    feed = service.generate_feed(generate_test_site(), SELF_URL)

    assert [item.title for item in feed.items] == ["Headline 0", "Headline 1", "Headline 2"]
    assert feed.generated_at == FIXED_NOW
    fetcher.fetch.assert_called_once_with("https://example.com/news", "generic-bot")

def test_generate_feed_truncated_to_site_limit():
    service, _ = service_with([generate_test_page(30)])
    feed = service.generate_feed(generate_test_site(max_items=5), SELF_URL)

    assert len(feed.items) == 5
    assert feed.items[-1].title == "Headline 4"

def test_generate_feed_no_blocks_serves_exactly_fallback():
    service, _ = service_with(["<html><body>Nothing to see</body></html>"])
    feed = service.generate_feed(generate_test_site(fallback_count=2), SELF_URL)

    assert [item.title for item in feed.items] == ["Fallback 0", "Fallback 1"]
    assert feed.items[0].published_at == FIXED_NOW
    assert feed.items[1].published_at == FIXED_NOW - timedelta(hours=24)
    root = ET.fromstring(feed.xml.encode("utf-8"))
    guids = [guid.text for guid in root.findall("channel/item/guid")]
    assert len(guids) == 2
    assert all(guids)

def test_generate_feed_fetch_failure_serves_error_item_and_fallback():
    service, _ = service_with(HttpStatusError(503, url="https://example.com/news"))
    feed = service.generate_feed(generate_test_site(fallback_count=2), SELF_URL)

    assert len(feed.items) == 3
    assert feed.items[0].category == ERROR_CATEGORY
    assert feed.items[0].title == "Test Feed - Source Unavailable"
    assert "HTTP status 503" in feed.items[0].description
    assert [item.title for item in feed.items[1:]] == ["Fallback 0", "Fallback 1"]

def test_generate_feed_tries_next_url_after_fetch_failure():
    site = generate_test_site(source_urls=["https://example.com/a", "https://example.com/b"])
    service, fetcher = service_with([NetworkError("refused"), generate_test_page(2)])
    feed = service.generate_feed(site, SELF_URL)

    assert [item.title for item in feed.items] == ["Headline 0", "Headline 1"]
    assert fetcher.fetch.call_count == 2

def test_generate_feed_tries_next_url_after_empty_page():
    site = generate_test_site(source_urls=["https://example.com/a", "https://example.com/b"])
    service, fetcher = service_with(["<html></html>", generate_test_page(1)])
    feed = service.generate_feed(site, SELF_URL)

    assert [item.title for item in feed.items] == ["Headline 0"]

def test_generate_feed_stops_at_first_url_with_items():
    site = generate_test_site(source_urls=["https://example.com/a", "https://example.com/b"])
    service, fetcher = service_with([generate_test_page(1), generate_test_page(2)])
    service.generate_feed(site, SELF_URL)

    assert fetcher.fetch.call_count == 1

def test_generate_feed_partial_fetch_failure_without_items_serves_fallback_only():
    site = generate_test_site(source_urls=["https://example.com/a", "https://example.com/b"])
    service, _ = service_with([NetworkError("refused"), "<html></html>"])
    feed = service.generate_feed(site, SELF_URL)

    assert [item.title for item in feed.items] == ["Fallback 0", "Fallback 1"]

def test_generate_feed_static_site_not_fetched():
    service, fetcher = service_with([])
    feed = service.generate_feed(generate_test_site(live=False, fallback_count=3), SELF_URL)

    assert len(feed.items) == 3
    fetcher.fetch.assert_not_called()

def test_get_feed_cached():
    service, fetcher = service_with([generate_test_page(1), generate_test_page(2)])
    site = generate_test_site()

    first = service.get_feed(site, SELF_URL)
    second = service.get_feed(site, SELF_URL)

    assert first is second
    assert fetcher.fetch.call_count == 1

def test_get_feed_unexpected_error_propagates():
    service, _ = service_with(RuntimeError("bug"))

    with pytest.raises(RuntimeError):
        service.get_feed(generate_test_site(), SELF_URL)

def test_materialize_items():
    site = generate_test_site(fallback_count=2)
    items = materialize_items(site.fallback_items, FIXED_NOW)

    assert [item.link for item in items] == ["https://example.com/fallback-0", "https://example.com/fallback-1"]
    assert items[1].published_at == FIXED_NOW - timedelta(hours=24)

def test_get_feed_after_fetch_failure_not_cached():
    service, fetcher = service_with([NetworkError("refused"), generate_test_page(2)])
    site = generate_test_site(fallback_count=2)

    first = service.get_feed(site, SELF_URL)
    second = service.get_feed(site, SELF_URL)

    assert first.degraded
    assert [item.title for item in first.items] == ["Test Feed - Source Unavailable", "Fallback 0", "Fallback 1"]
    assert not second.degraded
    assert [item.title for item in second.items] == ["Headline 0", "Headline 1"]
    assert fetcher.fetch.call_count == 2

def test_get_feed_fallback_after_empty_extraction_cached():
    service, fetcher = service_with(["<html></html>", generate_test_page(2)])
    site = generate_test_site()

    first = service.get_feed(site, SELF_URL)
    second = service.get_feed(site, SELF_URL)

    assert not first.degraded
    assert first is second
    assert fetcher.fetch.call_count == 1
