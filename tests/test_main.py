from unittest.mock import patch

from euro_rss.main import Main, main
from euro_rss.models import AppConfig
from euro_rss.sites import SiteRegistry

from test_utils import generate_test_site

def make_config(**kwargs) -> AppConfig:
    return AppConfig(host="127.0.0.1", port=3000, **kwargs)

@patch("euro_rss.main.create_app")
def test_run_serves(mock_create_app):
    config = make_config()
    Main(config=config).run()

    mock_create_app.return_value.run.assert_called_once_with(host="127.0.0.1", port=3000, threaded=True)

@patch("euro_rss.main.export_feeds")
@patch("euro_rss.main.create_app")
def test_run_exports(mock_create_app, mock_export_feeds):
    mock_export_feeds.return_value = ["docs/test-news.xml", "docs/index.html"]
    registry = SiteRegistry([generate_test_site()])
    config = make_config(export_dir="docs", public_base_url="https://feeds.example.org")
    Main(config=config, registry=registry).run()

    mock_create_app.assert_not_called()
    _, kwargs = mock_export_feeds.call_args
    assert kwargs["output_dir"] == "docs"
    assert kwargs["base_url"] == "https://feeds.example.org"
    assert kwargs["sites"] is registry

@patch("euro_rss.main.load_config", side_effect=ValueError("Invalid configuration"))
def test_main_invalid_config(mock_load_config):
    assert main([]) == 2

@patch("euro_rss.main.Main")
@patch("euro_rss.main.load_config")
def test_main_runs(mock_load_config, mock_main):
    mock_load_config.return_value = make_config()

    assert main([]) == 0
    mock_main.return_value.run.assert_called_once()
