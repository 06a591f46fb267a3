"""Feeds published for the supported organizations."""

from typing import Dict, Iterator, List, Optional

from euro_rss.models import (
    BROWSER_LIKE_PROFILE,
    BlockStrategy,
    ChannelInfo,
    DateFormat,
    ExtractionRule,
    SiteConfig,
    SiteKey,
    StaticItem,
)

CHANNEL_CATEGORY = "European Institutions"

# Field patterns shared by card and list layouts.
HEADING_LINK_TITLES = [
    r"<h[234][^>]*>\s*<a[^>]*>(.*?)</a>\s*</h[234]>",
    r"<a[^>]*class=\"[^\"]*title[^\"]*\"[^>]*>(.*?)</a>",
]
DATE_SPAN = r"<span[^>]*class=\"[^\"]*date[^\"]*\"[^>]*>(.*?)</span>"
TIME_DATETIME = r"<time[^>]*datetime=\"([^\"]*)\""

EEAS = SiteConfig(
    organization="eeas",
    feed_name="press-material",
    channel=ChannelInfo(
        title="EEAS - Press Material",
        link="https://www.eeas.europa.eu/eeas/press-material_en",
        description="Latest press releases and statements of the European External Action Service",
        category=CHANNEL_CATEGORY,
    ),
    source_urls=["https://www.eeas.europa.eu/eeas/press-material_en"],
    rule=ExtractionRule(
        strategies=[
            BlockStrategy(
                block_pattern=r"<div class=\"card\">(.*?)</div>\s*</div>",
                title_patterns=[
                    r"<h4[^>]*>\s*<a[^>]*>(.*?)</a>",
                    r"<h3[^>]*>\s*<a[^>]*>(.*?)</a>",
                    r"<h4[^>]*>(.*?)</h4>",
                    r"<h3[^>]*>(.*?)</h3>",
                ],
                date_patterns=[r"<time[^>]*>(.*?)</time>", DATE_SPAN],
                description_patterns=[r"<p[^>]*>(.*?)</p>"],
            ),
        ],
        base_url="https://www.eeas.europa.eu",
        date_format=DateFormat.DOTTED,
        category="EEAS Press",
    ),
    fallback_items=[
        StaticItem(
            title="EEAS Press Material",
            link="https://www.eeas.europa.eu/eeas/press-material_en",
            description="No press material could be extracted; the EEAS website structure may have changed. Visit the official page for the latest updates.",
            category="EEAS System",
        ),
    ],
    max_items=20,
)

ECA = SiteConfig(
    organization="eca",
    feed_name="news",
    channel=ChannelInfo(
        title="ECA - News",
        link="https://www.eca.europa.eu/en/all-news",
        description="Latest news from the European Court of Auditors",
        category=CHANNEL_CATEGORY,
    ),
    source_urls=["https://www.eca.europa.eu/en/all-news"],
    rule=ExtractionRule(
        strategies=[
            BlockStrategy(
                block_pattern=r"<div class=\"card card-news\"[^>]*>(.*?)</div>\s*</div>",
                title_patterns=[
                    r"<h2[^>]*>\s*<a[^>]*>(.*?)</a>\s*</h2>",
                    r"<h3[^>]*>\s*<a[^>]*>(.*?)</a>\s*</h3>",
                ],
                date_patterns=[TIME_DATETIME],
                description_patterns=[
                    r"<p[^>]*class=\"[^\"]*teaser[^\"]*\"[^>]*>(.*?)</p>",
                    r"<p[^>]*>(.*?)</p>",
                ],
            ),
        ],
        base_url="https://www.eca.europa.eu",
        date_format=DateFormat.ISO,
        category="ECA News",
    ),
    fallback_items=[
        StaticItem(
            title="ECA - European Court of Auditors News",
            link="https://www.eca.europa.eu/en/all-news",
            description="ECA loads its news list with JavaScript. For the latest news, please visit the official website directly.",
            category="ECA System",
        ),
        StaticItem(
            title="ECA - Recent Audit Reports",
            link="https://www.eca.europa.eu/en/publications",
            description="The European Court of Auditors publishes audit reports on EU spending and policies.",
            category="ECA Reports",
            age_hours=24,
        ),
        StaticItem(
            title="ECA - Press Releases Archive",
            link="https://www.eca.europa.eu/en/press",
            description="Archive of European Court of Auditors press releases covering audit findings and institutional updates.",
            category="ECA Press",
            age_hours=48,
        ),
    ],
    max_items=20,
)

CONSILIUM = SiteConfig(
    organization="consilium",
    feed_name="press-releases",
    channel=ChannelInfo(
        title="Consilium - Press Releases",
        link="https://www.consilium.europa.eu/en/press/press-releases/",
        description="Latest press releases from the Council of the European Union",
        category=CHANNEL_CATEGORY,
    ),
    source_urls=["https://www.consilium.europa.eu/en/press/press-releases/"],
    header_profile=BROWSER_LIKE_PROFILE,
    rule=ExtractionRule(
        strategies=[
            # Card layout
            BlockStrategy(
                block_pattern=r"<div class=\"[^\"]*press-release[^\"]*\"[^>]*>(.*?)</div>",
                title_patterns=HEADING_LINK_TITLES,
                date_patterns=[DATE_SPAN, r"(\d{1,2}/\d{1,2}/\d{4})"],
            ),
            # List layout
            BlockStrategy(
                block_pattern=r"<li class=\"[^\"]*press[^\"]*\"[^>]*>(.*?)</li>",
                title_patterns=HEADING_LINK_TITLES,
                date_patterns=[DATE_SPAN, r"(\d{1,2}/\d{1,2}/\d{4})"],
            ),
            # Article layout
            BlockStrategy(
                block_pattern=r"<article[^>]*>(.*?)</article>",
                title_patterns=HEADING_LINK_TITLES,
                date_patterns=[DATE_SPAN, r"(\d{1,2}/\d{1,2}/\d{4})"],
            ),
        ],
        base_url="https://www.consilium.europa.eu",
        date_format=DateFormat.SLASHED,
        category="Consilium Press",
    ),
    fallback_items=[
        StaticItem(
            title="Consilium - Press Releases",
            link="https://www.consilium.europa.eu/en/press/press-releases/",
            description="The Consilium website blocks automated access. For the latest press releases, please visit the official website directly.",
            category="Consilium System",
        ),
        StaticItem(
            title="Council of the European Union - Latest Updates",
            link="https://www.consilium.europa.eu/en/",
            description="The Council of the EU coordinates policy and adopts legislation. Visit the official website for the latest updates and decisions.",
            category="Consilium General",
            age_hours=24,
        ),
        StaticItem(
            title="Consilium - Meeting Results and Conclusions",
            link="https://www.consilium.europa.eu/en/meetings/",
            description="Results and conclusions from Council meetings covering various policy areas and EU decision-making.",
            category="Consilium Meetings",
            age_hours=48,
        ),
    ],
    max_items=20,
)

NATO = SiteConfig(
    organization="nato",
    feed_name="news",
    channel=ChannelInfo(
        title="NATO - News",
        link="https://www.nato.int/cps/en/natohq/news.htm",
        description="Latest news and press releases from the North Atlantic Treaty Organization",
        category=CHANNEL_CATEGORY,
    ),
    source_urls=[
        "https://www.nato.int/cps/en/natohq/news.htm",
        "https://www.nato.int/cps/en/natohq/news_archive.htm",
        "https://www.nato.int/cps/en/natolive/news.htm",
    ],
    header_profile=BROWSER_LIKE_PROFILE,
    rule=ExtractionRule(
        strategies=[
            # News item containers
            BlockStrategy(
                block_pattern=r"<div class=\"[^\"]*news-item[^\"]*\"[^>]*>(.*?)</div>",
                title_patterns=HEADING_LINK_TITLES + [
                    r"<h[234][^>]*>(.*?)</h[234]>",
                    r"<strong[^>]*>\s*<a[^>]*>(.*?)</a>\s*</strong>",
                ],
                date_patterns=[DATE_SPAN, r"(\d{1,2} [A-Za-z]+\.? \d{4})"],
            ),
            # Article containers
            BlockStrategy(
                block_pattern=r"<article[^>]*class=\"[^\"]*news[^\"]*\"[^>]*>(.*?)</article>",
                title_patterns=HEADING_LINK_TITLES + [r"<h[234][^>]*>(.*?)</h[234]>"],
                date_patterns=[DATE_SPAN, r"(\d{1,2} [A-Za-z]+\.? \d{4})"],
            ),
            # List items
            BlockStrategy(
                block_pattern=r"<li class=\"[^\"]*news[^\"]*\"[^>]*>(.*?)</li>",
                title_patterns=HEADING_LINK_TITLES + [r"<a[^>]*>(.*?)</a>"],
                date_patterns=[DATE_SPAN, r"(\d{1,2} [A-Za-z]+\.? \d{4})"],
            ),
            # Linked headlines anywhere in the page
            BlockStrategy(
                block_pattern=r"<h[234][^>]*>\s*<a[^>]*>.*?</a>\s*</h[234]>",
                title_patterns=[r"<a[^>]*>(.*?)</a>"],
            ),
        ],
        base_url="https://www.nato.int/cps/en/natohq/",
        date_format=DateFormat.DAY_MONTH_YEAR,
        category="NATO News",
        min_title_length=11,
    ),
    fallback_items=[
        StaticItem(
            title="NATO - Secretary General's Statements",
            link="https://www.nato.int/cps/en/natolive/opinions.htm",
            description="Latest statements and speeches from the NATO Secretary General on security and defence matters.",
            category="NATO Official",
            age_hours=1,
        ),
        StaticItem(
            title="NATO - Press Releases",
            link="https://www.nato.int/cps/en/natolive/news.htm",
            description="Official NATO press releases on Alliance activities and policy developments.",
            category="NATO Press",
            age_hours=2,
        ),
    ],
    max_items=15,
)

CURIA = SiteConfig(
    organization="curia",
    feed_name="press-releases",
    channel=ChannelInfo(
        title="CJEU - Court of Justice Press & Updates",
        link="https://curia.europa.eu/jcms/jcms/Jo2_7000/en/",
        description="Latest press releases and updates from the Court of Justice of the European Union",
        category=CHANNEL_CATEGORY,
    ),
    fallback_items=[
        StaticItem(
            title="Court of Justice of the European Union - Press Releases",
            link="https://curia.europa.eu/jcms/jcms/Jo2_7000/en/",
            description="Latest press releases from the Court of Justice of the European Union on judicial decisions and court proceedings.",
            category="CJEU Press",
        ),
        StaticItem(
            title="CJEU - Recent Judgments and Orders",
            link="https://curia.europa.eu/juris/recherche.jsf?language=en",
            description="Recent judgments and orders from the Court of Justice and General Court.",
            category="CJEU Judgments",
            age_hours=24,
        ),
        StaticItem(
            title="CJEU - Pending Cases Information",
            link="https://curia.europa.eu/jcms/jcms/Jo2_7052/en/",
            description="Information about pending cases before the Court of Justice and General Court of the European Union.",
            category="CJEU Cases",
            age_hours=48,
        ),
    ],
)

EUROPARL = SiteConfig(
    organization="europarl",
    feed_name="news",
    channel=ChannelInfo(
        title="European Parliament - News & Updates",
        link="https://www.europarl.europa.eu/news/en/headlines",
        description="Latest news and updates from the European Parliament",
        category=CHANNEL_CATEGORY,
    ),
    fallback_items=[
        StaticItem(
            title="European Parliament - Latest News & Press Releases",
            link="https://www.europarl.europa.eu/news/en/headlines",
            description="Latest headlines and press releases from the European Parliament covering legislative activities.",
            category="EP News",
        ),
        StaticItem(
            title="European Parliament - Plenary Session Updates",
            link="https://www.europarl.europa.eu/plenary/en/home.html",
            description="Updates from European Parliament plenary sessions including voting results and key debates.",
            category="EP Plenary",
            age_hours=24,
        ),
        StaticItem(
            title="European Parliament - Committee Activities",
            link="https://www.europarl.europa.eu/committees/en/home.html",
            description="Latest activities and reports from European Parliament committees.",
            category="EP Committees",
            age_hours=48,
        ),
    ],
)

FRONTEX = SiteConfig(
    organization="frontex",
    feed_name="news",
    channel=ChannelInfo(
        title="Frontex - News & Operations",
        link="https://frontex.europa.eu/media-centre/news/news-releases/",
        description="Latest news and operational updates from the European Border and Coast Guard Agency",
        category=CHANNEL_CATEGORY,
    ),
    fallback_items=[
        StaticItem(
            title="Frontex - Latest Operations and News",
            link="https://frontex.europa.eu/media-centre/news/news-releases/",
            description="Latest news releases from Frontex covering border management operations across Europe.",
            category="Frontex News",
        ),
        StaticItem(
            title="Frontex - Operational Updates",
            link="https://frontex.europa.eu/we-know/situation-at-eu-external-borders/",
            description="Updates on the situation at EU external borders and Frontex operational activities.",
            category="Frontex Operations",
            age_hours=24,
        ),
        StaticItem(
            title="Frontex - Press and Publications",
            link="https://frontex.europa.eu/media-centre/",
            description="Frontex media centre with press releases, publications and multimedia content.",
            category="Frontex Media",
            age_hours=48,
        ),
    ],
)

EUROPOL = SiteConfig(
    organization="europol",
    feed_name="news",
    channel=ChannelInfo(
        title="Europol - News & Operations",
        link="https://www.europol.europa.eu/newsroom",
        description="Latest news and operational updates from the European Union Agency for Law Enforcement Cooperation",
        category=CHANNEL_CATEGORY,
    ),
    fallback_items=[
        StaticItem(
            title="Europol - Latest News and Press Releases",
            link="https://www.europol.europa.eu/newsroom",
            description="Latest news and press releases from Europol on European law enforcement cooperation.",
            category="Europol News",
        ),
        StaticItem(
            title="Europol - Operations and Investigations",
            link="https://www.europol.europa.eu/operations",
            description="Ongoing and completed Europol operations targeting organised crime and terrorism across Europe.",
            category="Europol Operations",
            age_hours=24,
        ),
        StaticItem(
            title="Europol - Threat Assessments and Reports",
            link="https://www.europol.europa.eu/publications-and-events/publications",
            description="Europol threat assessments, situation reports and publications on European security challenges.",
            category="Europol Reports",
            age_hours=48,
        ),
    ],
)

COE = SiteConfig(
    organization="coe",
    feed_name="newsroom",
    channel=ChannelInfo(
        title="Council of Europe - News & Updates",
        link="https://www.coe.int/en/web/portal/news",
        description="Latest news and updates from the Council of Europe",
        category=CHANNEL_CATEGORY,
    ),
    fallback_items=[
        StaticItem(
            title="Council of Europe - Latest News",
            link="https://www.coe.int/en/web/portal/news",
            description="Latest news from the Council of Europe on human rights, democracy and the rule of law.",
            category="COE News",
        ),
        StaticItem(
            title="Council of Europe - Press Releases",
            link="https://www.coe.int/en/web/portal/press-releases",
            description="Official press releases from the Council of Europe on institutional activities.",
            category="COE Press",
            age_hours=24,
        ),
        StaticItem(
            title="Council of Europe - Events and Meetings",
            link="https://www.coe.int/en/web/portal/events",
            description="Council of Europe events, conferences and official meetings.",
            category="COE Events",
            age_hours=48,
        ),
    ],
)

DEFAULT_SITES: List[SiteConfig] = [
    EEAS,
    CURIA,
    EUROPARL,
    ECA,
    CONSILIUM,
    FRONTEX,
    EUROPOL,
    COE,
    NATO,
]

class SiteRegistry:
    """
    Lookup of the configured feeds by route.
    """
    def __init__(self, sites: List[SiteConfig] = DEFAULT_SITES):
        self._sites: Dict[SiteKey, SiteConfig] = {}
        for site in sites:
            if site.key in self._sites:
                raise ValueError(f"Duplicate feed route: {site.path}")
            self._sites[site.key] = site

    def get(self, organization: str, feed_name: str) -> Optional[SiteConfig]:
        return self._sites.get(f"{organization}/{feed_name}")

    def __iter__(self) -> Iterator[SiteConfig]:
        return iter(self._sites.values())

    def __len__(self) -> int:
        return len(self._sites)
