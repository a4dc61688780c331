"""
Sitemap Crawler - Discovers resources by walking the sitemap index.

The root sitemap lists child sitemaps; child sitemaps list resource pages
and, possibly, further sitemaps. Sitemaps are processed as a growing work
list and a visited set keeps cyclic references from being fetched twice.
"""

from typing import List, Set

from .base_crawler import AbstractCrawler, CrawlRun, CrawlState, CrawlSummary
from .consumer import ConsumerLike
from .options import is_limit_reached
from ..parsing.sitemap_reader import iter_locations


class SitemapCrawler(AbstractCrawler):
    """
    Crawl every resource reachable from the root sitemap.

    Only ``max_images`` and the consumer's stop signal bound the run; page
    limits do not apply. Resource fetches are always paced by
    ``delay_between_resources_millis``.
    """

    def crawl(self, consumer: ConsumerLike) -> CrawlSummary:
        run = self._new_run(consumer, self.options.resource_delay_seconds)
        summary = run.summary
        root_url = self.site.sitemap_url

        self.logger.info(f"Crawl starting from sitemap: {root_url}")

        sitemaps = self._read_root_sitemap(root_url)
        if not sitemaps:
            self.logger.warning(f"No sitemaps were discovered from {root_url}")
            return self._finish(run, CrawlState.DONE_NORMAL)

        visited: Set[str] = {root_url}
        summary.sitemaps_visited = 1

        # The list grows while it is walked
        index = 0
        state = CrawlState.DONE_NORMAL
        while index < len(sitemaps):
            sitemap = sitemaps[index]
            index += 1

            if self._stop_requested(run) or not self._crawl_sitemap(run, sitemap, sitemaps, visited):
                state = self._stop_state(run)
                break

        self.logger.info(f"Crawl finished ({state.value}): {summary.delivered} records "
                         f"from {summary.sitemaps_visited} sitemaps")
        return self._finish(run, state)

    def _stop_state(self, run: CrawlRun) -> CrawlState:
        if self._stop_requested(run):
            return CrawlState.DONE_STOPPED
        if is_limit_reached(run.summary.delivered, self.options.max_images):
            return CrawlState.DONE_LIMIT_IMAGES
        return CrawlState.DONE_NORMAL

    def _read_root_sitemap(self, root_url: str) -> List[str]:
        """Read the child sitemap URLs listed by the root sitemap."""
        self.logger.debug(f"Downloading main sitemap XML: {root_url}")
        content, ok = self.transport.fetch_text(root_url)
        if not ok or not content:
            self.logger.debug(f"No content for main sitemap: {root_url}")
            return []

        return list(iter_locations(content))

    def _crawl_sitemap(self, run: CrawlRun, sitemap: str, sitemaps: List[str],
                       visited: Set[str]) -> bool:
        """
        Process one sitemap document.

        Returns:
            False once the whole crawl must stop, True otherwise
        """
        if sitemap in visited:
            self.logger.debug(f"Sitemap XML already visited: {sitemap}")
            return True

        visited.add(sitemap)
        run.summary.sitemaps_visited += 1

        self.logger.debug(f"Downloading sitemap XML: {sitemap}")
        xml, ok = self.transport.fetch_text(sitemap)
        if not ok or not xml:
            # Skip this subtree only
            self.logger.debug(f"No content for sitemap: {sitemap}")
            run.summary.fetch_failures += 1
            return True

        self.logger.debug(f"Extracting resource urls from xml length: {len(xml)}")
        for url in iter_locations(xml):
            if self.site.is_sitemap_url(url):
                if url not in visited:
                    self.logger.debug(f"Adding sitemap XML: {url}")
                    sitemaps.append(url)
                continue

            if self.site.is_resource_url(url):
                if not self._process_resource(run, url, paced=True):
                    return False

            # other page urls, like authors or categories, are skipped

        return True
