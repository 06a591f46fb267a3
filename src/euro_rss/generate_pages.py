"""Module for generating the homepage and exporting feeds to static files using Jinja2 templates."""

import logging
import os
import re
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from euro_rss.generate_feed import GENERATOR, TEMPLATE_DIR
from euro_rss.models import SiteConfig, SiteKey
from euro_rss.process_feed import FeedService

INDEX_TEMPLATE = "index.html.j2"


def sanitize_filename(name: str) -> str:
    """Sanitize a string to be used as a safe filename."""
    name = name.replace(" ", "_").replace("/", "-")
    # Remove any characters that are not alphanumeric, underscore, or hyphen
    name = re.sub(r"[^a-zA-Z0-9_.-]", "", name)
    return name[:100]


def feed_filename(site: SiteConfig) -> str:
    """File name of an exported feed, e.g. `eeas-press-material.xml`."""
    return f"{sanitize_filename(site.key)}.xml"


def render_index(
    sites: Iterable[SiteConfig],
    feed_urls: Dict[SiteKey, str],
    cache_minutes: int = 30,
    now: Optional[datetime] = None,
) -> str:
    """Render the homepage listing every feed with the URL it is served from."""
    generation_time = now or datetime.now(timezone.utc)
    jinja_env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html.j2"]),
    )
    template = jinja_env.get_template(INDEX_TEMPLATE)
    return template.render(
        sites=list(sites),
        feed_urls=feed_urls,
        cache_minutes=cache_minutes,
        generator=GENERATOR,
        generation_time_display=generation_time.strftime("%Y-%m-%d %H:%M:%S UTC"),
    )


def export_feeds(
    service: FeedService,
    sites: Iterable[SiteConfig],
    output_dir: str,
    base_url: str,
    cache_minutes: int = 30,
) -> List[str]:
    """Write every feed and the homepage to the output directory.

    Args:
        service: The service generating the feeds.
        sites: The feeds to export.
        output_dir: The directory to write to, created if missing.
        base_url: The public URL prefix the exported feeds will be served from.
        cache_minutes: Refresh interval shown on the homepage.

    Returns:
        The paths of the written files.
    """
    sites = list(sites)
    output_dir = os.path.abspath(output_dir)
    os.makedirs(output_dir, exist_ok=True)
    base_url = base_url.rstrip("/")

    feed_urls = {site.key: f"{base_url}/{feed_filename(site)}" for site in sites}
    written = []
    for site in sites:
        feed = service.generate_feed(site, self_url=feed_urls[site.key])
        save_path = os.path.join(output_dir, feed_filename(site))
        logging.info(f"Saving feed {site.key} to \"{save_path}\"")
        with open(save_path, "w", encoding="utf-8") as f:
            f.write(feed.xml)
        written.append(save_path)

    index_path = os.path.join(output_dir, "index.html")
    with open(index_path, "w", encoding="utf-8") as f:
        f.write(render_index(sites, feed_urls, cache_minutes=cache_minutes))
    logging.info(f"Homepage saved to \"{index_path}\"")
    written.append(index_path)

    return written
