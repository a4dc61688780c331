import pytest

from burst_crawler.config.crawler_config import ConfigLoader, CrawlerConfig, validate_config
from burst_crawler.core.options import CrawlOptions, PacingMode, TagPolicy
from burst_crawler.core.record import IdentityKey
from burst_crawler.exceptions import ConfigurationError


def write(tmp_path, text):
    p = tmp_path / "crawler.yaml"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_load_yaml_sections(tmp_path):
    path = write(tmp_path, """
crawl:
  max_pages: 3
  max_images: 40
  delay_between_pages_millis: 1500
  previously_crawled:
    - https://burst.shopify.com/photos/a
policy:
  tag_policy: EXPLICIT
  pacing: per_resource
  identity_key: content_url
site:
  base_url: https://burst.example.com/
fetch:
  timeout_seconds: 5
parse:
  parser: html.parser
""")

    config = ConfigLoader.load_from_yaml(path)

    assert config.options.max_pages == 3
    assert config.options.max_images == 40
    assert config.options.page_delay_seconds == 1.5
    assert config.options.previously_crawled == frozenset({"https://burst.shopify.com/photos/a"})
    assert config.options.policy.tag_policy is TagPolicy.EXPLICIT
    assert config.options.policy.pacing is PacingMode.PER_RESOURCE
    assert config.options.policy.identity_key is IdentityKey.CONTENT_URL
    assert config.site.base_url == "https://burst.example.com"
    assert config.site.sitemap_url == "https://burst.example.com/sitemap.xml"
    assert config.fetch.timeout_seconds == 5
    assert validate_config(config)


def test_save_then_load_keeps_values(tmp_path):
    config = CrawlerConfig(options=CrawlOptions(max_images=7, previously_crawled=["k2", "k1"]))
    out = tmp_path / "nested" / "saved.yaml"

    ConfigLoader.save_to_yaml(config, str(out))
    loaded = ConfigLoader.load_from_yaml(str(out))

    assert loaded.options == config.options
    assert loaded.site == config.site
    assert ConfigLoader.to_dict(loaded)["crawl"]["previously_crawled"] == ["k1", "k2"]


def test_missing_empty_and_invalid_files(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigLoader.load_from_yaml(str(tmp_path / "nope.yaml"))

    with pytest.raises(ConfigurationError, match="Empty"):
        ConfigLoader.load_from_yaml(write(tmp_path, ""))

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ConfigLoader.load_from_yaml(write(tmp_path, "crawl: [unclosed"))


@pytest.mark.parametrize("section", [
    {"policy": {"tag_policy": "sometimes"}},
    {"site": {"no_such_selector": "div"}},
    {"fetch": "not a mapping"},
    {"crawl": {"max_pages": "many"}},
])
def test_bad_values_raise_configuration_error(section):
    with pytest.raises(ConfigurationError):
        ConfigLoader.from_dict(section)


def test_validate_config_rejects_out_of_range_values():
    with pytest.raises(ConfigurationError):
        validate_config(CrawlerConfig(options=CrawlOptions(max_images=0)))

    with pytest.raises(ConfigurationError):
        validate_config(CrawlerConfig(options=CrawlOptions(start_page=3, end_page=2)))

    config = CrawlerConfig()
    config.site.base_url = "ftp://burst"
    with pytest.raises(ConfigurationError):
        validate_config(config)

    with pytest.raises(ConfigurationError):
        validate_config(None)
