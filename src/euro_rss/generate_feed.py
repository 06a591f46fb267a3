import hashlib
import logging
import os
import re
from datetime import datetime, timezone
from email.utils import format_datetime
from functools import lru_cache
from typing import Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from euro_rss import __version__
from euro_rss.errors import RenderError
from euro_rss.models import ChannelInfo, FeedItem, RenderedFeed

GENERATOR = f"Euro RSS Generator {__version__}"
FEED_TEMPLATE = "feed.rss.j2"
TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")

# Characters outside the XML 1.0 Char production.
_INVALID_XML_CHARS = re.compile(r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

def xml_text(value: Optional[str]) -> str:
    """
    Remove characters that cannot appear in an XML document. Escaping is left to the template autoescape.
    """
    if value is None:
        return ""
    return _INVALID_XML_CHARS.sub("", str(value))

def rfc1123(value: datetime) -> str:
    """
    Format a datetime as an RFC 1123 date in GMT, e.g. `Wed, 25 Dec 2024 00:00:00 GMT`.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)

@lru_cache(maxsize=None)
def template_environment(template_dir: str = TEMPLATE_DIR) -> Environment:
    """
    Jinja2 environment escaping every interpolated value.
    """
    env = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["xml_text"] = xml_text
    env.filters["rfc1123"] = rfc1123
    return env

def item_guid(item: FeedItem) -> str:
    """
    GUID of an item: its link plus a digest of its content, so that updated content at a stable link is a new entry.
    """
    content = "\n".join([item.link, item.title, item.description])
    digest = hashlib.sha1(content.encode("utf-8")).hexdigest()[:12]
    return f"{item.link}#{digest}"

def assign_guids(items: Sequence[FeedItem]) -> List[str]:
    """
    GUIDs for the items of one document, suffixed with an occurrence number when an item repeats.
    """
    seen: Dict[str, int] = {}
    guids = []
    for item in items:
        guid = item_guid(item)
        occurrence = seen.get(guid, 0) + 1
        seen[guid] = occurrence
        guids.append(guid if occurrence == 1 else f"{guid}-{occurrence}")
    return guids

def render_feed(
    channel: ChannelInfo, # Channel metadata.
    items: Sequence[FeedItem], # Items in the order they should appear.
    self_url: str, # URL the feed is served from.
    max_items: int, # Maximum number of items in the document.
    now: Optional[datetime] = None, # Render time, the current time if None.
    degraded: bool = False, # Whether the items stand in for an unreachable source.
) -> RenderedFeed:
    """
    Render an RSS 2.0 document.
    """
    if max_items < 0:
        raise RenderError(f"max_items must not be negative, got {max_items}")
    for item in items:
        if not item.title or not item.link:
            raise RenderError(f"Item without title or link reached the renderer: {item!r}")

    generated_at = now or datetime.now(timezone.utc)
    limited_items = list(items[:max_items])
    logging.info(f"Rendering feed \"{channel.title}\" with {len(limited_items)} of {len(items)} items.")

    entries = [
        {"item": item, "guid": guid}
        for item, guid in zip(limited_items, assign_guids(limited_items))
    ]
    template = template_environment().get_template(FEED_TEMPLATE)
    xml = template.render(
        channel=channel,
        entries=entries,
        generated_at=generated_at,
        self_url=self_url,
        generator=GENERATOR,
    )

    return RenderedFeed(
        channel=channel,
        generated_at=generated_at,
        self_url=self_url,
        items=limited_items,
        xml=xml,
        degraded=degraded,
    )

def render_error_feed(
    message: str, # Description of the failure.
    self_url: str, # URL the feed was requested from.
    home_url: str, # Homepage of the service.
    now: Optional[datetime] = None,
) -> RenderedFeed:
    """
    Minimal valid feed describing an internal failure, so that feed readers keep polling the endpoint.
    """
    generated_at = now or datetime.now(timezone.utc)
    channel = ChannelInfo(
        title="Euro RSS - Error",
        link=home_url,
        description=f"An error occurred while generating the RSS feed: {message}",
    )
    item = FeedItem(
        title="Server Error",
        link=home_url,
        description=f"Error details: {message}",
        published_at=generated_at,
        category="Feed Error",
    )
    return render_feed(channel, [item], self_url, max_items=1, now=generated_at, degraded=True)
