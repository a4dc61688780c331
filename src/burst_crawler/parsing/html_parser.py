"""
HTML Parsing - Parses HTML into a selectable document.
Wraps BeautifulSoup and its CSS selector support.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment, FeatureNotFound
from bs4.element import Tag


@dataclass
class ParseConfig:
    """Configuration for HTML parsing."""
    parser: str = "html.parser"  # 'html.parser', 'lxml', or 'html5lib'
    strip_comments: bool = True

    # Performance
    max_html_size_mb: int = 5  # Skip parsing if HTML larger than this


class HTMLParser:
    """Handles HTML parsing with BeautifulSoup."""

    def __init__(self, config: ParseConfig = None):
        self.config = config or ParseConfig()
        self.logger = logging.getLogger(self.__class__.__name__)

        # Verify parser is available
        self._verify_parser()

    def _verify_parser(self):
        """Verify the configured parser is available."""
        try:
            BeautifulSoup("<html></html>", self.config.parser)
        except FeatureNotFound:
            self.logger.warning(f"Parser '{self.config.parser}' not available, "
                                f"falling back to 'html.parser'")
            self.config.parser = "html.parser"

    def parse(self, html: str) -> Optional[BeautifulSoup]:
        """
        Parse HTML string into BeautifulSoup object.

        Script blocks are kept: the structured data block lives in one.

        Returns:
            BeautifulSoup object or None if parsing failed
        """
        if not html:
            return None

        try:
            # Check HTML size
            html_size_mb = len(html.encode('utf-8')) / (1024 * 1024)
            if html_size_mb > self.config.max_html_size_mb:
                self.logger.warning(f"HTML too large to parse: {html_size_mb:.2f} MB")
                return None

            soup = BeautifulSoup(html, self.config.parser)

            if self.config.strip_comments:
                for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
                    comment.extract()

            return soup

        except Exception as e:
            self.logger.error(f"Failed to parse HTML: {e}", exc_info=True)
            return None


def select(node: Optional[Tag], selector: str) -> List[Tag]:
    """CSS select under node; a missing node selects nothing."""
    if node is None:
        return []
    return node.select(selector)


def select_first(node: Optional[Tag], selector: str) -> Optional[Tag]:
    """First element matching selector, or None."""
    if node is None:
        return None
    return node.select_one(selector)


def element_text(element: Optional[Tag]) -> str:
    """Whitespace-normalized text of an element."""
    if element is None:
        return ""
    return " ".join(element.get_text(" ", strip=True).split())


def resolved_attr(element: Optional[Tag], name: str, base_url: Optional[str]) -> str:
    """
    Attribute value resolved to an absolute URL.

    Falls back to the raw attribute value when no base URL is known.
    """
    if element is None:
        return ""

    value = element.get(name)
    if not value:
        return ""

    value = value.strip()
    if base_url:
        return urljoin(base_url, value)
    return value
