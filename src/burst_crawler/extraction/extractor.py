"""
Record Extraction - Turns a detail page body into a Record.

Two passes run over the same page:
1. DOM pass - reads the meta anchors (author, license, tags) and, when the
   policy asks for it, the title and description headings.
2. Structured data pass - reads the linked-data block; every field it
   provides overrides the DOM value.

Missing regions or a malformed data block are not errors: the record keeps
whatever fields could be filled.
"""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from ..core.options import CrawlPolicy, TagPolicy
from ..core.record import Record
from ..core.site_profile import SiteProfile
from ..fetch.transport import Transport
from ..parsing.html_parser import HTMLParser, element_text, resolved_attr, select, select_first
from ..parsing.structured_data import find_linked_data_block, parse_linked_data, strip_query


class Extractor:
    """Builds records from fetched detail pages."""

    def __init__(self, site: SiteProfile = None, policy: CrawlPolicy = None,
                 parser: HTMLParser = None):
        self.site = site or SiteProfile()
        self.policy = policy or CrawlPolicy()
        self.parser = parser or HTMLParser()
        self.logger = logging.getLogger(self.__class__.__name__)

    def new_record(self, page_url: str) -> Record:
        """Identity-only record for a discovered resource."""
        return Record(source_url=page_url, identity_key=self.policy.identity_key)

    def extract(self, page_body: str, page_url: str, populate_details: bool = True) -> Record:
        """
        Extract a record from a detail page.

        Args:
            page_body: HTML of the detail page
            page_url: URL the body was fetched from; becomes the record's source_url
            populate_details: When False, return the identity-only record untouched

        Returns:
            Record with as many fields populated as the page allowed
        """
        record = self.new_record(page_url)
        if not populate_details:
            return record

        soup = self.parser.parse(page_body)
        if soup is None:
            self.logger.debug(f"Unparseable detail page: {page_url}")
        else:
            self._populate_from_dom(record, soup, page_url)
            self._populate_from_linked_data(record, soup)

        if self.policy.download_fallback and not record.content_url:
            record.content_url = f"{page_url.rstrip('/')}/download"

        return record

    def extract_from_url(self, transport: Transport, page_url: str,
                         populate_details: bool = True) -> Optional[Record]:
        """
        Fetch a detail page and extract it.

        Returns:
            The record, or None when the page could not be fetched
        """
        if not populate_details:
            return self.new_record(page_url)

        self.logger.debug(f"Downloading detail page: {page_url}")
        body, ok = transport.fetch_text(page_url)
        if not ok or not body:
            self.logger.debug(f"Unable to download detail page: {page_url}")
            return None

        return self.extract(body, page_url)

    def _populate_from_dom(self, record: Record, soup: BeautifulSoup, page_url: str):
        main_node = select_first(soup, self.site.main_selector)
        if main_node is None:
            self.logger.debug(f"No main content region in {page_url}")
            return

        if self.policy.dom_details:
            title = element_text(select_first(main_node, self.site.title_selector))
            if title:
                record.title = title

            description = element_text(select_first(main_node, self.site.description_selector))
            if description:
                record.description = description

        for anchor in select(main_node, self.site.meta_anchor_selector):
            href = resolved_attr(anchor, 'href', page_url)
            text = element_text(anchor)

            # author profile
            if href.startswith(self.site.author_prefix):
                record.attribution_url = href
                record.attribution_name = text
                continue

            # license
            if self.site.license_marker in href:
                record.license_name = text
                continue

            if self.policy.tag_policy is TagPolicy.EXPLICIT and self.site.tags_marker not in href:
                continue

            record.tags.append(text)

    def _populate_from_linked_data(self, record: Record, soup: BeautifulSoup):
        data = parse_linked_data(find_linked_data_block(soup))
        if data is None:
            return

        if data.content_url:
            record.content_url = strip_query(data.content_url)
        if data.name:
            record.title = data.name
        if data.description:
            record.description = data.description
        if data.author:
            record.attribution_name = data.author
        if data.license:
            record.license_url = data.license
