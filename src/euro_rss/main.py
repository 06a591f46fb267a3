import logging
import sys
from typing import Optional, Sequence

from euro_rss.config import load_config
from euro_rss.generate_pages import export_feeds
from euro_rss.models import AppConfig
from euro_rss.sites import SiteRegistry
from euro_rss.web import create_app, create_service

class Main:
    """
    Main class for the Euro RSS application.
    """
    def __init__(
            self,
            config: AppConfig,
            registry: Optional[SiteRegistry] = None,
            ):
        self.config = config
        self.registry = registry if registry is not None else SiteRegistry()
        self.service = create_service(config)

    def run(self):
        """
        Export the feeds if an export directory is configured, serve them otherwise.
        """
        if self.config.export_dir:
            written = export_feeds(
                service=self.service,
                sites=self.registry,
                output_dir=self.config.export_dir,
                base_url=self.config.public_base_url or ".",
                cache_minutes=self.config.cache_expiry_minutes,
            )
            logging.info(f"Exported {len(written)} files to \"{self.config.export_dir}\"")
            return

        app = create_app(
            config=self.config,
            registry=self.registry,
            service=self.service,
        )
        logging.info(f"Serving {len(self.registry)} feeds on http://{self.config.host}:{self.config.port}")
        app.run(host=self.config.host, port=self.config.port, threaded=True)

def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        config = load_config(argv)
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logging.error(str(e))
        return 2

    logging.basicConfig(level=config.log_level)
    Main(config=config).run()
    return 0

if __name__ == "__main__":
    sys.exit(main())
