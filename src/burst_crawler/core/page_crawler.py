"""
Paginated Crawler - Discovers resources by walking the numbered listing pages.

Page 1 tells the crawler how many pages exist (the "last page" link of the
pagination control). Crawling ends at the first limit reached, checked after
every page in this order: max images, max pages, end page, last page.
"""

from typing import Optional
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup

from .base_crawler import AbstractCrawler, CrawlRun, CrawlState, CrawlSummary
from .consumer import ConsumerLike
from .options import is_limit_reached
from ..parsing.html_parser import resolved_attr, select, select_first


class PageListCrawler(AbstractCrawler):
    """Crawl the listing pages of the site, page by page."""

    def crawl(self, consumer: ConsumerLike) -> CrawlSummary:
        options = self.options
        interval = options.resource_delay_seconds if self._paces_resources() else 0.0
        run = self._new_run(consumer, interval)
        summary = run.summary

        self.logger.info(f"Crawl starting: pages from {options.start_page}, "
                         f"max_pages={options.max_pages} max_images={options.max_images}")

        current_page = options.start_page
        while True:
            summary.state = CrawlState.FETCHING_PAGE
            keep_going = self._crawl_page(run, current_page)
            summary.pages_crawled += 1

            state = self._terminal_state(run, current_page, keep_going)
            if state is not None:
                break

            if not self._paces_resources() and options.delay_between_pages_millis > 0:
                if not run.pacer.sleep(options.page_delay_seconds):
                    state = CrawlState.DONE_STOPPED
                    break

            current_page += 1

        self.logger.info(f"Crawl finished ({state.value}): {summary.delivered} records "
                         f"from {summary.pages_crawled} pages")
        return self._finish(run, state)

    def _terminal_state(self, run: CrawlRun, page: int, keep_going: bool) -> Optional[CrawlState]:
        """Return the terminal state reached after crawling page, if any."""
        options = self.options
        summary = run.summary

        if self._stop_requested(run):
            return CrawlState.DONE_STOPPED

        if is_limit_reached(summary.delivered, options.max_images):
            self.logger.debug("Max images reached, breaking from crawling more images")
            return CrawlState.DONE_LIMIT_IMAGES

        if not keep_going:
            return CrawlState.DONE_NORMAL

        if is_limit_reached(summary.pages_crawled, options.max_pages):
            self.logger.debug("Max pages reached, breaking from crawling more images")
            return CrawlState.DONE_LIMIT_PAGES

        if is_limit_reached(page, options.end_page):
            self.logger.debug("End page limit reached, breaking from crawling more images")
            return CrawlState.DONE_END_PAGE

        if summary.last_page is not None and page >= summary.last_page:
            self.logger.debug("Last page reached")
            return CrawlState.DONE_LAST_PAGE

        return None

    def _crawl_page(self, run: CrawlRun, page: int) -> bool:
        """
        Crawl one listing page and deliver its resources.

        Returns:
            False once the crawl must stop, True otherwise
        """
        url = self.site.listing_url(page)
        self.logger.debug(f"Crawling page: {page} ({url})")

        body, ok = self.transport.fetch_text(url)
        if not ok or not body:
            self.logger.debug(f"Unable to download listing page: {url}")
            run.summary.fetch_failures += 1
            return True

        soup = self.parser.parse(body)
        if soup is None:
            return True

        # Only the first page that could be fetched is asked for the page count
        if not run.last_page_checked:
            run.last_page_checked = True
            run.summary.last_page = self._extract_last_page(soup, url)

        main_node = select_first(soup, self.site.main_selector)
        tiles = select(main_node, self.site.tile_selector)
        self.logger.debug(f"Found {len(tiles)} resources in page {page}")

        paced = self._paces_resources()
        for tile in tiles:
            resource_url = resolved_attr(tile, 'href', url)
            if not resource_url:
                continue

            if not self._process_resource(run, resource_url, paced):
                return False

        return True

    def _extract_last_page(self, soup: BeautifulSoup, page_url: str) -> Optional[int]:
        """Read the page number of the pagination control's last-page link."""
        anchor = select_first(soup, self.site.last_page_selector)
        href = resolved_attr(anchor, 'href', page_url)
        if not href:
            self.logger.debug("No last page indicator found")
            return None

        values = parse_qs(urlparse(href).query).get(self.site.page_param)
        if not values:
            return None

        try:
            page_num = int(values[0])
        except ValueError:
            self.logger.debug(f"Unparseable last page link: {href}")
            return None

        if page_num <= 0:
            return None

        self.logger.info(f"Last page detected as: {page_num}")
        return page_num
