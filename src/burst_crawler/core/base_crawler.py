"""
Base Crawler - Code shared by the paginated and sitemap crawl strategies.

Both strategies discover resource URLs their own way, then hand each URL to
the same pipeline: duplicate check, paced detail fetch, extraction and
delivery to the consumer. Delivery decides whether the crawl goes on.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

from .consumer import CollectingConsumer, ConsumerLike, RecordConsumer, as_consumer
from .dedup import SeenFilter
from .options import CrawlOptions, PacingMode, ensure_options, is_limit_reached
from .pacing import Pacer
from .record import IdentityKey, Record
from .site_profile import SiteProfile
from ..extraction.extractor import Extractor
from ..fetch.transport import HTTPTransport, Transport
from ..parsing.html_parser import HTMLParser


class CrawlState(Enum):
    """States of a crawl run. Every DONE_* state is a normal completion."""
    START = "start"
    FETCHING_PAGE = "fetching_page"
    DONE_NORMAL = "done_normal"
    DONE_LIMIT_PAGES = "done_limit_pages"
    DONE_LIMIT_IMAGES = "done_limit_images"
    DONE_END_PAGE = "done_end_page"
    DONE_LAST_PAGE = "done_last_page"
    DONE_STOPPED = "done_stopped"  # Consumer returned False or the crawl was stopped


@dataclass
class CrawlSummary:
    """Outcome of one crawl run."""
    state: CrawlState = CrawlState.START
    delivered: int = 0
    pages_crawled: int = 0
    last_page: Optional[int] = None
    suppressed: int = 0
    fetch_failures: int = 0
    sitemaps_visited: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'state': self.state.value,
            'delivered': self.delivered,
            'pages_crawled': self.pages_crawled,
            'last_page': self.last_page,
            'suppressed': self.suppressed,
            'fetch_failures': self.fetch_failures,
            'sitemaps_visited': self.sitemaps_visited,
        }


@dataclass
class CrawlRun:
    """
    Mutable state of a single crawl invocation.

    Kept out of the crawler instance so one configured crawler can serve
    several runs.
    """
    consumer: RecordConsumer
    seen: SeenFilter
    pacer: Pacer
    summary: CrawlSummary = field(default_factory=CrawlSummary)
    stopped: bool = False
    last_page_checked: bool = False

    def finish(self, state: CrawlState) -> CrawlSummary:
        self.summary.state = state
        return self.summary


class AbstractCrawler(ABC):
    """
    Base class for crawl strategies.

    Subclasses implement ``crawl(consumer)``; ``crawl_all()`` collects the
    whole stream into a list.
    """

    def __init__(self, options: CrawlOptions, transport: Transport = None,
                 site: SiteProfile = None, parser: HTMLParser = None):
        """
        Args:
            options: Limits and pacing for every run of this crawler
            transport: Fetcher to use (default: a new HTTPTransport)
            site: URL layout and selectors of the target site
            parser: HTML parser shared by listing and detail pages

        Raises:
            ConfigurationError: If options are missing or invalid
        """
        self.options = ensure_options(options)
        self.site = site or SiteProfile()
        self.parser = parser or HTMLParser()
        self.transport = transport or HTTPTransport()
        self.extractor = Extractor(self.site, self.options.policy, self.parser)
        self.logger = logging.getLogger(self.__class__.__name__)

        # Pacers of the runs in progress, so stop() can reach them
        self._active_pacers: Set[Pacer] = set()
        self._pacers_lock = threading.Lock()

    @abstractmethod
    def crawl(self, consumer: ConsumerLike) -> CrawlSummary:
        """
        Crawl and stream every record to consumer.

        Blocks until a terminal state is reached.
        """
        pass

    def crawl_all(self) -> List[Record]:
        """
        Crawl everything reachable and return the records in discovery order.

        This may take a long time; use ``crawl`` for streaming results.
        """
        collector = CollectingConsumer()
        self.crawl(collector)
        return collector.records

    def stop(self):
        """
        Ask every run in progress on this crawler to stop.

        Safe to call from another thread. A sleeping run wakes up at once;
        a busy run stops before its next fetch and ends in DONE_STOPPED.
        """
        with self._pacers_lock:
            pacers = list(self._active_pacers)

        self.logger.info(f"Stop requested for {len(pacers)} running crawl(s)")
        for pacer in pacers:
            pacer.interrupt()

    def populate(self, records: Iterable[Record]) -> List[Record]:
        """
        Fill in the details of records discovered with populate_details off.

        Each record's detail page is fetched again and its fields are
        replaced in place. Fetches are paced by delay_between_resources_millis.
        Records whose page cannot be fetched are left untouched. An
        interrupted wait ends the pass early.

        Returns:
            The records that were populated, in input order
        """
        records = [record for record in records if record is not None]
        self.logger.info(f"Request to populate details for {len(records)} records")

        pacer = self._register(Pacer(self.options.resource_delay_seconds))
        populated = []
        try:
            for index, record in enumerate(records):
                if not record.source_url:
                    continue

                if not pacer.wait_turn():
                    self.logger.info(f"Populating stopped after {len(populated)} records")
                    break

                self.logger.debug(f"[{index}] Populating details for url: {record.source_url}")
                fresh = self.extractor.extract_from_url(self.transport, record.source_url)
                if fresh is None:
                    continue

                for f in fields(Record):
                    setattr(record, f.name, getattr(fresh, f.name))
                populated.append(record)
        finally:
            self._unregister(pacer)

        return populated

    def _register(self, pacer: Pacer) -> Pacer:
        with self._pacers_lock:
            self._active_pacers.add(pacer)
        return pacer

    def _unregister(self, pacer: Pacer):
        with self._pacers_lock:
            self._active_pacers.discard(pacer)

    def _new_run(self, consumer: ConsumerLike, pacing_interval: float) -> CrawlRun:
        return CrawlRun(
            consumer=as_consumer(consumer),
            seen=SeenFilter(self.options.previously_crawled),
            pacer=self._register(Pacer(pacing_interval)),
        )

    def _finish(self, run: CrawlRun, state: CrawlState) -> CrawlSummary:
        self._unregister(run.pacer)
        return run.finish(state)

    def _stop_requested(self, run: CrawlRun) -> bool:
        """True once stop() reached this run; marks the run stopped."""
        if run.pacer.interrupted:
            run.stopped = True
        return run.stopped

    def _process_resource(self, run: CrawlRun, url: str, paced: bool) -> bool:
        """
        Fetch, extract and deliver one resource.

        Args:
            run: Current crawl run
            url: Absolute detail page URL
            paced: Wait for the pacer before fetching the detail page

        Returns:
            True to keep crawling, False once the crawl must stop
        """
        options = self.options
        by_source = options.policy.identity_key is IdentityKey.SOURCE_URL

        if self._stop_requested(run):
            return False

        # The source URL is known before fetching, so skip early
        if by_source and run.seen.is_seen(url):
            self.logger.debug(f"Skipping already crawled resource: {url}")
            run.summary.suppressed += 1
            return True

        if paced and options.populate_details and not run.pacer.wait_turn():
            run.stopped = True
            return False

        record = self.extractor.extract_from_url(self.transport, url, options.populate_details)
        if record is None:
            run.summary.fetch_failures += 1
            return True

        return self._deliver(run, record)

    def _deliver(self, run: CrawlRun, record: Record) -> bool:
        """Hand a record to the consumer and apply the stop/limit rules."""
        options = self.options
        key = record.identity()

        if run.seen.is_seen(key):
            self.logger.debug(f"Suppressing duplicate record: {key}")
            run.summary.suppressed += 1
            return True

        if options.suppress_duplicates:
            run.seen.mark_seen(key)

        run.summary.delivered += 1
        if not run.consumer.consume(record):
            self.logger.debug(f"Consumer returned False after record: {key}. Further collection stopped.")
            run.stopped = True
            return False

        if is_limit_reached(run.summary.delivered, options.max_images):
            self.logger.debug("Max images reached, stopping crawl")
            return False

        return True

    def _paces_resources(self) -> bool:
        return self.options.policy.pacing is PacingMode.PER_RESOURCE
