import logging
from datetime import datetime, timedelta
from typing import Callable, List, Sequence, Tuple

from euro_rss.errors import ExtractionEmpty, FetchError
from euro_rss.extract_items import extract_items
from euro_rss.feed_cache import FeedCache, utc_now
from euro_rss.fetch_page import PageFetcher
from euro_rss.generate_feed import render_feed
from euro_rss.models import FeedItem, RenderedFeed, SiteConfig, StaticItem

ERROR_CATEGORY = "Feed Error"

def materialize_items(
    static_items: Sequence[StaticItem], # Configured fallback items.
    now: datetime, # Render time the item ages are relative to.
) -> List[FeedItem]:
    """
    Turn configured fallback items into feed items dated relative to the render time.
    """
    return [
        FeedItem(
            title=static_item.title,
            link=static_item.link,
            description=static_item.description,
            published_at=now - timedelta(hours=static_item.age_hours),
            category=static_item.category,
        )
        for static_item in static_items
    ]

def error_item(
    site: SiteConfig,
    error: Exception,
    now: datetime,
) -> FeedItem:
    """
    Placeholder item describing why the source could not be scraped.
    """
    return FeedItem(
        title=f"{site.channel.title} - Source Unavailable",
        link=site.channel.link,
        description=f"The source page could not be retrieved ({error}). Please check the official website directly.",
        published_at=now,
        category=ERROR_CATEGORY,
    )

class FeedService:
    """
    Generates the feed of a site: cache check, then fetch, extract, fallback and render.
    """
    def __init__(
            self,
            fetcher: PageFetcher,
            cache: FeedCache,
            clock: Callable[[], datetime] = utc_now,
        ):
        self.fetcher = fetcher
        self.cache = cache
        self._clock = clock

    def get_feed(
            self,
            site: SiteConfig, # The site to generate the feed for.
            self_url: str, # The URL the feed is served from.
        ) -> RenderedFeed:
        """
        Return the cached feed of the site or generate it.
        """
        return self.cache.get_or_render(
            site.key,
            lambda: self.generate_feed(site, self_url),
            cacheable=lambda feed: not feed.degraded,
        )

    def generate_feed(
            self,
            site: SiteConfig,
            self_url: str,
        ) -> RenderedFeed:
        """
        Generate the feed of the site, bypassing the cache.
        """
        now = self._clock()
        items, degraded = self.collect_items(site, now)
        return render_feed(
            channel=site.channel,
            items=items,
            self_url=self_url,
            max_items=site.max_items,
            now=now,
            degraded=degraded,
        )

    def collect_items(
            self,
            site: SiteConfig,
            now: datetime,
        ) -> Tuple[List[FeedItem], bool]:
        """
        Scraped items of the site, or its fallback items if nothing could be scraped.

        Returns:
            The items, and whether they stand in for a source that could not be retrieved.
        """
        if not site.is_live:
            logging.info(f"Serving static items for {site.key}.")
            return materialize_items(site.fallback_items, now), False

        try:
            return self._scrape_items(site, now), False
        except ExtractionEmpty as e:
            logging.warning(f"{e} Using fallback content.")
            return materialize_items(site.fallback_items, now), False
        except FetchError as e:
            logging.error(f"Scraping {site.key} failed: {e}. Using fallback content.")
            return [error_item(site, e, now)] + materialize_items(site.fallback_items, now), True

    def _scrape_items(
            self,
            site: SiteConfig,
            now: datetime,
        ) -> List[FeedItem]:
        """
        Try the source pages in order, returning the items of the first one that yields any.

        Raises:
            ExtractionEmpty: If at least one page was retrieved but none yielded items.
            FetchError: The last fetch error, if no page could be retrieved.
        """
        last_error = None
        fetched_any = False
        for url in site.source_urls:
            try:
                raw_text = self.fetcher.fetch(url, site.header_profile)
            except FetchError as e:
                logging.warning(f"Failed to fetch {url} for {site.key}: {e}")
                last_error = e
                continue

            fetched_any = True
            items = extract_items(raw_text, site.rule, now=now)
            logging.info(f"Extracted {len(items)} items from {url}.")
            if items:
                return items

        if fetched_any or last_error is None:
            raise ExtractionEmpty(f"No items found for {site.key}.")
        raise last_error
