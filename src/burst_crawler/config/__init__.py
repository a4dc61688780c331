"""
Configuration Module - Configuration management and loading.

This module handles loading, saving, and validating crawler configurations
from YAML files.

Components:
-----------
- CrawlerConfig: Run options, site profile, HTTP and parser settings
- ConfigLoader: Loads and saves configurations from/to YAML files
- validate_config: Validates configuration objects
- ConfigurationError: Exception raised for invalid configurations

Configuration File Format:
-------------------------
crawl:
  start_page: 1
  max_pages: 5
  max_images: -1
  delay_between_pages_millis: 1000
  populate_details: true
policy:
  tag_policy: implicit      # or explicit
  pacing: per_page          # or per_resource
  identity_key: source_url  # or content_url
site:
  base_url: https://burst.shopify.com
fetch:
  timeout_seconds: 30
parse:
  parser: html.parser
"""

from .crawler_config import ConfigLoader, CrawlerConfig, validate_config
from ..exceptions import ConfigurationError

__all__ = [
    'ConfigLoader',
    'CrawlerConfig',
    'validate_config',
    'ConfigurationError',
]
