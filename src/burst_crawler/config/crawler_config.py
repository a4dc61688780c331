"""
Crawler Configuration Management - Centralized configuration loading and validation.
Supports loading from YAML files with validation and defaults.
"""

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Type, TypeVar

import yaml

from ..core.options import CrawlOptions, CrawlPolicy, PacingMode, TagPolicy
from ..core.record import IdentityKey
from ..core.site_profile import SiteProfile
from ..exceptions import ConfigurationError
from ..fetch.transport import FetchConfig
from ..parsing.html_parser import ParseConfig

E = TypeVar('E', bound=Enum)


@dataclass
class CrawlerConfig:
    """Master configuration: run options plus the collaborators' settings."""
    options: CrawlOptions = field(default_factory=CrawlOptions)
    site: SiteProfile = field(default_factory=SiteProfile)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    parse: ParseConfig = field(default_factory=ParseConfig)


class ConfigLoader:
    """Loads and validates crawler configuration from YAML files."""

    @staticmethod
    def load_from_yaml(config_path: str) -> CrawlerConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            CrawlerConfig object

        Raises:
            ConfigurationError: If configuration is invalid
        """
        logger = logging.getLogger(__name__)

        # Check if file exists
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        # Load YAML
        try:
            with open(path, 'r') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read {config_path}: {e}")

        if not config_dict:
            raise ConfigurationError(f"Empty configuration file: {config_path}")

        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Configuration must be a mapping: {config_path}")

        logger.info(f"Loaded configuration from {config_path}")
        return ConfigLoader.from_dict(config_dict)

    @staticmethod
    def from_dict(config_dict: Dict[str, Any]) -> CrawlerConfig:
        """Parse configuration dictionary into CrawlerConfig object."""
        try:
            return ConfigLoader._parse_config(config_dict)
        except ConfigurationError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Failed to parse configuration: {e}")

    @staticmethod
    def _parse_config(config_dict: Dict[str, Any]) -> CrawlerConfig:
        defaults = CrawlOptions()

        # Strategy switches
        policy_cfg = config_dict.get('policy') or {}
        policy = CrawlPolicy(
            tag_policy=_enum(TagPolicy, policy_cfg.get('tag_policy', 'implicit')),
            pacing=_enum(PacingMode, policy_cfg.get('pacing', 'per_page')),
            identity_key=_enum(IdentityKey, policy_cfg.get('identity_key', 'source_url')),
            dom_details=bool(policy_cfg.get('dom_details', True)),
            download_fallback=bool(policy_cfg.get('download_fallback', False))
        )

        # Run options
        crawl_cfg = config_dict.get('crawl') or {}
        options = CrawlOptions(
            start_page=int(crawl_cfg.get('start_page', defaults.start_page)),
            end_page=int(crawl_cfg.get('end_page', defaults.end_page)),
            max_pages=int(crawl_cfg.get('max_pages', defaults.max_pages)),
            max_images=int(crawl_cfg.get('max_images', defaults.max_images)),
            delay_between_pages_millis=int(crawl_cfg.get(
                'delay_between_pages_millis', defaults.delay_between_pages_millis)),
            delay_between_resources_millis=int(crawl_cfg.get(
                'delay_between_resources_millis', defaults.delay_between_resources_millis)),
            populate_details=bool(crawl_cfg.get('populate_details', defaults.populate_details)),
            previously_crawled=crawl_cfg.get('previously_crawled') or (),
            suppress_duplicates=bool(crawl_cfg.get('suppress_duplicates', defaults.suppress_duplicates)),
            policy=policy
        )

        # Site contract, HTTP and parsing
        site = SiteProfile(**_known_fields(SiteProfile, config_dict.get('site') or {}))
        fetch = FetchConfig(**_known_fields(FetchConfig, config_dict.get('fetch') or {}))
        parse = ParseConfig(**_known_fields(ParseConfig, config_dict.get('parse') or {}))

        return CrawlerConfig(options=options, site=site, fetch=fetch, parse=parse)

    @staticmethod
    def to_dict(config: CrawlerConfig) -> Dict[str, Any]:
        """Convert configuration to plain YAML-friendly data."""
        options = config.options
        policy = options.policy
        return {
            'crawl': {
                'start_page': options.start_page,
                'end_page': options.end_page,
                'max_pages': options.max_pages,
                'max_images': options.max_images,
                'delay_between_pages_millis': options.delay_between_pages_millis,
                'delay_between_resources_millis': options.delay_between_resources_millis,
                'populate_details': options.populate_details,
                'previously_crawled': sorted(options.previously_crawled),
                'suppress_duplicates': options.suppress_duplicates,
            },
            'policy': {
                'tag_policy': policy.tag_policy.value,
                'pacing': policy.pacing.value,
                'identity_key': policy.identity_key.value,
                'dom_details': policy.dom_details,
                'download_fallback': policy.download_fallback,
            },
            'site': asdict(config.site),
            'fetch': asdict(config.fetch),
            'parse': asdict(config.parse),
        }

    @staticmethod
    def save_to_yaml(config: CrawlerConfig, output_path: str):
        """Save configuration to YAML file."""
        logger = logging.getLogger(__name__)

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, 'w') as f:
                yaml.safe_dump(ConfigLoader.to_dict(config), f,
                               default_flow_style=False, indent=2, sort_keys=False)
            logger.info(f"Configuration saved to {output_path}")
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    @staticmethod
    def create_default_config() -> CrawlerConfig:
        """Create a default configuration."""
        return CrawlerConfig()


def _enum(enum_type: Type[E], value: Any) -> E:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"Invalid {enum_type.__name__} '{value}' (expected one of: {allowed})")


def _known_fields(cls: type, values: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only keys the dataclass declares; reject anything else."""
    if not isinstance(values, dict):
        raise ConfigurationError(f"Section for {cls.__name__} must be a mapping")

    known = set(cls.__dataclass_fields__)
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unknown {cls.__name__} settings: {', '.join(unknown)}")
    return dict(values)


def validate_config(config: CrawlerConfig) -> bool:
    """Validate crawler configuration."""
    logger = logging.getLogger(__name__)

    if config is None:
        raise ConfigurationError("Configuration cannot be None")

    config.options.validate()

    if config.fetch.timeout_seconds <= 0:
        raise ConfigurationError("fetch timeout_seconds must be positive")

    if config.fetch.max_content_size_mb <= 0:
        raise ConfigurationError("fetch max_content_size_mb must be positive")

    if config.parse.max_html_size_mb <= 0:
        raise ConfigurationError("parse max_html_size_mb must be positive")

    if not config.site.base_url.startswith(('http://', 'https://')):
        raise ConfigurationError(f"site base_url must be an http(s) URL: {config.site.base_url}")

    logger.info("Configuration validated successfully")
    return True
