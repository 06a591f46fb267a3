import logging
from typing import Optional, Sequence
from argparse import ArgumentParser, Namespace as ArgNamespace

from dotenv import load_dotenv
from pydantic import ValidationError

from euro_rss.models import AppEnvSettings, AppConfig

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def parse_cli_arguments(argv: Optional[Sequence[str]] = None) -> ArgNamespace:
    """
    Parse the command line arguments.
    """
    parser = ArgumentParser(description="RSS feeds for European institutions")
    parser.add_argument(
        "-H", "--host",
        type=str,
        help="The interface to listen on.",
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        help="The port to listen on.",
    )
    parser.add_argument(
        "-b", "--base-url",
        type=str,
        help="The public URL prefix used in feed self links, e.g. `https://feeds.example.org`.",
    )
    parser.add_argument(
        "-e", "--cache-expiry-minutes",
        type=int,
        help="How long a rendered feed is served from the cache.",
    )
    parser.add_argument(
        "-x", "--export",
        type=str,
        metavar="DIR",
        help="Write every feed and the homepage to this directory and exit instead of serving.",
    )
    parser.add_argument(
        "-l", "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="The logging level.",
    )
    return parser.parse_args(argv)

def load_config(argv: Optional[Sequence[str]] = None) -> AppConfig:
    """
    Load the configuration. Command line arguments take precedence over environment variables.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    load_dotenv(verbose=True)
    cli_args = parse_cli_arguments(argv)
    env_settings = AppEnvSettings()

    log_level = (cli_args.log_level or env_settings.log_level).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {log_level}")

    public_base_url = cli_args.base_url or env_settings.public_base_url
    if public_base_url:
        public_base_url = public_base_url.rstrip("/")
    if cli_args.export and not public_base_url:
        logging.warning("No public base URL provided, exported feeds will use relative self links.")

    try:
        return AppConfig(
            host=cli_args.host
                or env_settings.host
                or DEFAULT_HOST,
            port=cli_args.port
                or env_settings.port
                or DEFAULT_PORT,
            public_base_url=public_base_url or None,
            cache_expiry_minutes=cli_args.cache_expiry_minutes
                if cli_args.cache_expiry_minutes is not None
                else env_settings.cache_expiry_minutes,
            request_timeout=env_settings.request_timeout,
            max_redirects=env_settings.max_redirects,
            max_body_bytes=env_settings.max_body_bytes,
            log_level=log_level,
            export_dir=cli_args.export,
        )
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
