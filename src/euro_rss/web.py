import logging
from datetime import timedelta
from typing import Optional

from flask import Flask, Response, request

from euro_rss.feed_cache import FeedCache
from euro_rss.fetch_page import PageFetcher
from euro_rss.generate_feed import render_error_feed
from euro_rss.generate_pages import render_index
from euro_rss.models import AppConfig
from euro_rss.process_feed import FeedService
from euro_rss.sites import SiteRegistry

RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"

def create_service(config: AppConfig) -> FeedService:
    """
    Feed service wired with a fetcher and cache built from the config.
    """
    return FeedService(
        fetcher=PageFetcher(
            timeout=config.request_timeout,
            max_redirects=config.max_redirects,
            max_body_bytes=config.max_body_bytes,
        ),
        cache=FeedCache(expiry=timedelta(minutes=config.cache_expiry_minutes)),
    )

def create_app(
        config: AppConfig,
        registry: Optional[SiteRegistry] = None, # The default sites if None.
        service: Optional[FeedService] = None, # Built from the config if None.
    ) -> Flask:
    """
    Create the Flask app serving one RSS feed per site and a homepage listing them.
    """
    registry = registry if registry is not None else SiteRegistry()
    service = service if service is not None else create_service(config)
    max_age = config.cache_expiry_minutes * 60

    app = Flask(__name__, static_folder=None)

    def base_url() -> str:
        return (config.public_base_url or request.host_url).rstrip("/")

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(404)
    def not_found(error) -> Response:
        return Response("Not Found", status=404, content_type="text/plain; charset=utf-8")

    @app.route("/")
    def index() -> Response:
        """Homepage listing the available feeds."""
        feed_urls = {site.key: f"{base_url()}{site.path}" for site in registry}
        html = render_index(registry, feed_urls, cache_minutes=config.cache_expiry_minutes)
        return Response(html, status=200, content_type=HTML_CONTENT_TYPE)

    @app.route("/<organization>/<feed_name>")
    def feed(organization: str, feed_name: str) -> Response:
        """RSS feed of a site."""
        site = registry.get(organization, feed_name)
        if site is None:
            return not_found(None)

        logging.info(f"RSS request: {request.path}")
        self_url = f"{base_url()}{request.path}"
        try:
            rendered = service.get_feed(site, self_url)
        except Exception as e:
            logging.exception(f"Failed to generate the feed {site.key}: {e}")
            error_feed = render_error_feed(str(e), self_url, home_url=f"{base_url()}/")
            return Response(error_feed.xml, status=500, content_type=RSS_CONTENT_TYPE)

        return Response(
            rendered.xml,
            status=200,
            content_type=RSS_CONTENT_TYPE,
            headers={"Cache-Control": f"public, max-age={max_age}"},
        )

    return app
