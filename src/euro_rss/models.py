from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Cache key of a site, `organization/feed-name`.
SiteKey = str
# Name of a request header profile.
HeaderProfile = str

GENERIC_BOT_PROFILE: HeaderProfile = "generic-bot"
BROWSER_LIKE_PROFILE: HeaderProfile = "browser-like"

### Item

class FeedItem(BaseModel):
    """
    Item extracted from an institutional website.
    """
    title: str # Plain text title, markup stripped.
    link: str # Absolute URL of the item.
    description: str # Free text description, the title if the source has none.
    published_at: datetime # Publication time, the fetch time if unknown.
    category: str # Classification label, a per-site constant by default.

    model_config = ConfigDict(
        frozen = True,
    )

class StaticItem(BaseModel):
    """
    Fallback item configured for a site.
    """
    title: str # The title of the item.
    link: str # The URL of the item.
    description: str # The description of the item.
    category: str # The category of the item.
    age_hours: int = 0 # How many hours before the render time the item is dated.

    model_config = ConfigDict(
        frozen = True,
    )

### Extraction

class DateFormat(str, Enum):
    """
    Date text formats understood by the extractor.
    """
    DOTTED = "dotted" # DD.MM.YYYY
    SLASHED = "slashed" # DD/MM/YYYY
    DAY_MONTH_YEAR = "day_month_year" # D Month YYYY, D Mon. YYYY
    ISO = "iso" # YYYY-MM-DD with optional time, as found in <time datetime="...">

class BlockStrategy(BaseModel):
    """
    One way of locating repeating item blocks and their fields in a page.

    Every pattern is a regular expression. When a pattern has a capture group
    the first group is the value, otherwise the whole match is.
    """
    block_pattern: str # Boundary of a repeating item block.
    title_patterns: List[str] # Title patterns in priority order.
    link_patterns: List[str] = [r'<a[^>]*href="([^"]*)"'] # Link patterns in priority order.
    date_patterns: List[str] = [] # Date patterns in priority order.
    description_patterns: List[str] = [] # Description patterns in priority order.

    model_config = ConfigDict(
        frozen = True,
    )

class ExtractionRule(BaseModel):
    """
    Parsing configuration of a site. Strategies are tried in order and the first one yielding items wins.
    """
    strategies: List[BlockStrategy] # Block strategies in priority order.
    base_url: str # Base for resolving relative links.
    date_format: DateFormat # The parser applied to date text.
    category: str # Category assigned to every extracted item.
    min_title_length: int = 1 # Titles shorter than this are discarded.
    max_description_length: Optional[int] = Field(200, gt=0) # Descriptions are cut to this many characters, no limit if None.

    model_config = ConfigDict(
        frozen = True,
    )

### Feed

class ChannelInfo(BaseModel):
    """
    Channel metadata of a rendered feed.
    """
    title: str # The title of the channel.
    link: str # The URL of the source page.
    description: str # The description of the channel.
    language: str = "en-us" # The language of the channel.
    category: Optional[str] = None # The category of the channel.

    model_config = ConfigDict(
        frozen = True,
    )

class RenderedFeed(BaseModel):
    """
    RSS 2.0 document together with the data it was rendered from.
    """
    channel: ChannelInfo # The channel metadata.
    generated_at: datetime # The render time.
    self_url: str # The URL the feed is served from.
    items: List[FeedItem] # The rendered items, already truncated.
    xml: str # The serialized RSS document.
    degraded: bool = False # Whether placeholder content stands in for an unreachable source.

    model_config = ConfigDict(
        frozen = True,
    )

### Site

class SiteConfig(BaseModel):
    """
    Feed published for one organization.
    """
    organization: str # First path segment of the feed route.
    feed_name: str # Second path segment of the feed route.
    channel: ChannelInfo # Channel metadata of the feed.
    source_urls: List[str] = [] # Pages to scrape, tried in order.
    header_profile: HeaderProfile = GENERIC_BOT_PROFILE # Request header profile used for the source pages.
    rule: Optional[ExtractionRule] = None # Extraction rule, None for static feeds.
    fallback_items: List[StaticItem] = [] # Items served when nothing can be extracted.
    max_items: int = 20 # Maximum number of items in the feed.

    model_config = ConfigDict(
        frozen = True,
    )

    @property
    def key(self) -> SiteKey:
        return f"{self.organization}/{self.feed_name}"

    @property
    def path(self) -> str:
        return f"/{self.key}"

    @property
    def is_live(self) -> bool:
        return self.rule is not None and len(self.source_urls) > 0

### App

class AppEnvSettings(BaseSettings):
    """
    App settings from environment variables.
    """
    host: Optional[str] = None # The interface to listen on.
    port: Optional[int] = None # The port to listen on.
    public_base_url: Optional[str] = None # The public URL prefix used in self links.
    cache_expiry_minutes: int = 30 # How long a rendered feed is served from the cache.
    request_timeout: float = 15 # Timeout for fetching a source page in seconds.
    max_redirects: int = 5 # Maximum number of redirects followed per fetch.
    max_body_bytes: int = 5 * 1024 * 1024 # Maximum size of a fetched page.
    log_level: str = "INFO" # The logging level.

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
        extra="ignore",
    )

class AppConfig(BaseModel):
    """
    Global app config.
    """
    host: str # The interface to listen on.
    port: int # The port to listen on.
    public_base_url: Optional[str] = None # The public URL prefix used in self links, the request host if None.
    cache_expiry_minutes: int = Field(30, gt=0) # How long a rendered feed is served from the cache.
    request_timeout: float = Field(15, gt=0) # Timeout for fetching a source page in seconds.
    max_redirects: int = Field(5, ge=0) # Maximum number of redirects followed per fetch.
    max_body_bytes: int = Field(5 * 1024 * 1024, gt=0) # Maximum size of a fetched page.
    log_level: str = "INFO" # The logging level.
    export_dir: Optional[str] = None # If set, feeds are written to this directory instead of being served.

    model_config = ConfigDict(
        frozen = True,
    )
