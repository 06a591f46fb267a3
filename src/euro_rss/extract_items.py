import logging
import re
from datetime import datetime, timezone
from html import unescape
from typing import List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from euro_rss.models import BlockStrategy, ExtractionRule, FeedItem
from euro_rss.utils.date_parser import DateParserProtocol, FormatDateParser
from euro_rss.utils.html_text import clean_text

PATTERN_FLAGS = re.DOTALL | re.IGNORECASE

def extract_items(
    raw_text: str, # Markup of the source page.
    rule: ExtractionRule, # Parsing configuration of the site.
    now: Optional[datetime] = None, # Fallback publication time, the current time if None.
) -> List[FeedItem]:
    """
    Extract feed items from a page using the first block strategy of the rule that yields items.

    Never raises: on any failure an empty list is returned and the caller substitutes fallback content.
    """
    if not raw_text:
        return []
    now = now or datetime.now(timezone.utc)

    try:
        date_parser = FormatDateParser(rule.date_format)
        for index, strategy in enumerate(rule.strategies):
            try:
                items = _extract_with_strategy(raw_text, strategy, rule, date_parser, now)
            except re.error as e:
                logging.error(f"Invalid pattern in strategy {index} for {rule.base_url}: {e}, skipping...")
                continue
            logging.info(f"Strategy {index} for {rule.base_url} extracted {len(items)} items.")
            # First successful strategy wins, the others are not tried.
            if items:
                return items
    except Exception as e:
        logging.error(f"Extraction failed for {rule.base_url}: {e}")
        return []

    return []

def _extract_with_strategy(
    raw_text: str,
    strategy: BlockStrategy,
    rule: ExtractionRule,
    date_parser: DateParserProtocol,
    now: datetime,
) -> List[FeedItem]:
    """
    Extract items from every block located by the strategy, in document order.
    """
    items = []
    for block_match in re.finditer(strategy.block_pattern, raw_text, PATTERN_FLAGS):
        block = _match_value(block_match)
        if not block:
            continue
        item = _extract_item(block, strategy, rule, date_parser, now)
        if item is not None:
            items.append(item)
    return items

def _extract_item(
    block: str,
    strategy: BlockStrategy,
    rule: ExtractionRule,
    date_parser: DateParserProtocol,
    now: datetime,
) -> Optional[FeedItem]:
    """
    Build an item from a block. Returns None if the block has no usable title or link.
    """
    title = clean_text(_first_match(block, strategy.title_patterns) or "")
    if not title or len(title) < rule.min_title_length:
        return None

    link = _resolve_link(_first_match(block, strategy.link_patterns), rule.base_url)
    if not link:
        return None

    date_text = clean_text(_first_match(block, strategy.date_patterns) or "")
    published_at = date_parser.parse_date(date_text) or now

    description = clean_text(_first_match(block, strategy.description_patterns) or "") or title
    if rule.max_description_length is not None:
        description = description[:rule.max_description_length].rstrip()

    return FeedItem(
        title=title,
        link=link,
        description=description,
        published_at=published_at,
        category=rule.category,
    )

def _first_match(
    text: str,
    patterns: Sequence[str], # Patterns in priority order.
) -> Optional[str]:
    """
    Return the value of the first pattern that matches the text.
    """
    for pattern in patterns:
        match = re.search(pattern, text, PATTERN_FLAGS)
        if match is None:
            continue
        value = _match_value(match)
        if value:
            return value
    return None

def _match_value(match: re.Match) -> Optional[str]:
    # The first group if the pattern captures, else the whole match.
    if match.re.groups:
        return match.group(1)
    return match.group(0)

def _resolve_link(
    raw_link: Optional[str],
    base_url: str,
) -> Optional[str]:
    """
    Resolve a link against the base URL. Returns None for links that do not point to a page.
    """
    if not raw_link:
        return None
    link = unescape(raw_link).strip()
    if not link or link.startswith("#"):
        return None
    resolved = urljoin(base_url, link)
    if urlparse(resolved).scheme not in ("http", "https"):
        return None
    return resolved
