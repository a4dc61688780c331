"""
Command Line Interface for the Burst Crawler.

Usage Examples:
--------------

# Crawl the first two listing pages
burst-crawler pages -p 2

# Crawl the sitemap, stop after 50 records, write JSON lines to a file
burst-crawler sitemap -n 50 -o photos.jsonl

# Discovery only (no detail page downloads)
burst-crawler pages --no-details

# Crawl with a configuration file
burst-crawler pages -c config/burst.yaml

# Create default configuration
burst-crawler config --create-default -o config/default.yaml

# Validate configuration
burst-crawler config --validate config/my_config.yaml

# Verbose logging
burst-crawler -v pages -p 1
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config.crawler_config import ConfigLoader, CrawlerConfig, validate_config
from .core.record import Record
from .crawl import create_crawler
from .exceptions import ConfigurationError
from .fetch.transport import HTTPTransport
from .parsing.html_parser import HTMLParser


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """
    Setup logging configuration.

    Args:
        verbose: Enable debug-level logging if True
        log_file: Also write the log to this file
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

    # Set third-party loggers to WARNING to reduce noise
    if not verbose:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)


def build_config(args) -> CrawlerConfig:
    """Load the configuration and apply command line overrides."""
    logger = logging.getLogger(__name__)

    if args.config:
        logger.info(f"Loading configuration from {args.config}")
        config = ConfigLoader.load_from_yaml(args.config)
    else:
        config = ConfigLoader.create_default_config()

    overrides = {}
    if args.start_page is not None:
        overrides['start_page'] = args.start_page
    if args.end_page is not None:
        overrides['end_page'] = args.end_page
    if args.max_pages is not None:
        overrides['max_pages'] = args.max_pages
    if args.max_images is not None:
        overrides['max_images'] = args.max_images
    if args.delay_ms is not None:
        overrides['delay_between_pages_millis'] = args.delay_ms
        overrides['delay_between_resources_millis'] = args.delay_ms
    if args.no_details:
        overrides['populate_details'] = False
    if args.previously_crawled:
        overrides['previously_crawled'] = read_keys(args.previously_crawled)

    if overrides:
        logger.info(f"Command line overrides: {sorted(overrides)}")
        config.options = dataclasses.replace(config.options, **overrides)

    validate_config(config)
    return config


def read_keys(path: str) -> frozenset:
    """Read one identity key per line, ignoring blanks and # comments."""
    try:
        with open(path, 'r') as f:
            lines = [line.strip() for line in f]
    except OSError as e:
        raise ConfigurationError(f"Failed to read {path}: {e}")
    return frozenset(line for line in lines if line and not line.startswith('#'))


def crawl_command(args):
    """
    Execute the pages or sitemap command.

    Args:
        args: Parsed command-line arguments
    """
    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(f"Configuration validation failed: {e}")
        sys.exit(1)

    output = open(args.output, 'w') if args.output else sys.stdout

    def write_record(record: Record) -> bool:
        output.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")
        output.flush()
        return True

    try:
        with HTTPTransport(config.fetch) as transport:
            crawler = create_crawler(args.command, config.options, transport=transport,
                                     site=config.site, parser=HTMLParser(config.parse))
            summary = crawler.crawl(write_record)
    except KeyboardInterrupt:
        logger.info("Crawl interrupted by user")
        sys.exit(130)
    finally:
        if output is not sys.stdout:
            output.close()

    print(json.dumps(summary.to_dict()), file=sys.stderr)
    logger.info("Crawl finished successfully")


def config_command(args):
    """
    Execute the config command.

    Args:
        args: Parsed command-line arguments
    """
    try:
        if args.create_default:
            output_path = args.output or 'config/default.yaml'
            ConfigLoader.save_to_yaml(ConfigLoader.create_default_config(), output_path)
            print(f"Default configuration created at: {output_path}")

        elif args.validate:
            config = ConfigLoader.load_from_yaml(args.validate)
            validate_config(config)
            print(f"Configuration is valid: {args.validate}")

        else:
            print("Error: Please specify --create-default or --validate", file=sys.stderr)
            sys.exit(1)

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def _add_crawl_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        '-c', '--config',
        help='Path to YAML configuration file (default: use built-in defaults)'
    )
    parser.add_argument('--start-page', type=int, metavar='N', help='First listing page')
    parser.add_argument('--end-page', type=int, metavar='N', help='Last listing page')
    parser.add_argument('-p', '--max-pages', type=int, metavar='N',
                        help='Maximum number of listing pages to crawl')
    parser.add_argument('-n', '--max-images', type=int, metavar='N',
                        help='Maximum number of records to deliver')
    parser.add_argument('--delay-ms', type=int, metavar='MILLIS',
                        help='Delay between requests (milliseconds)')
    parser.add_argument('--no-details', action='store_true',
                        help='Only discover URLs, do not download detail pages')
    parser.add_argument('--previously-crawled', metavar='FILE',
                        help='File with one already crawled URL per line')
    parser.add_argument('-o', '--output', metavar='FILE',
                        help='Write JSON lines here (default: stdout)')
    parser.set_defaults(func=crawl_command)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='burst-crawler',
        description='Burst Crawler - stream photo records from Shopify Burst',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s pages -p 2
  %(prog)s sitemap -n 50 -o photos.jsonl
  %(prog)s config --create-default -o config/default.yaml
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose (debug) logging')
    parser.add_argument('--log-file', metavar='FILE', help='Also log to this file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    pages_parser = subparsers.add_parser('pages', help='Crawl the paginated listing')
    _add_crawl_arguments(pages_parser)

    sitemap_parser = subparsers.add_parser('sitemap', help='Crawl the sitemap index')
    _add_crawl_arguments(sitemap_parser)

    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Create or validate configuration files'
    )
    config_parser.add_argument('--create-default', action='store_true',
                               help='Create a default configuration file')
    config_parser.add_argument('--validate', metavar='FILE',
                               help='Validate a configuration file')
    config_parser.add_argument('-o', '--output', metavar='FILE',
                               help='Output path for created configuration (default: config/default.yaml)')
    config_parser.set_defaults(func=config_command)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == '__main__':
    main()
