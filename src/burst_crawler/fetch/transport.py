"""
HTTP Transport - Downloads listing pages, detail pages and sitemaps.

The crawlers only need ``fetch_text(url) -> (body, ok)``. Any network error,
non-2xx status or oversized body is reported as ``ok=False`` and never
raised; nothing is retried.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Tuple

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException, Timeout

from ..exceptions import FetchFailure


@dataclass
class FetchConfig:
    """Configuration for the HTTP transport."""
    timeout_seconds: int = 30
    max_redirects: int = 5
    verify_ssl: bool = True
    user_agent: str = "BurstCrawler/1.0"
    max_content_size_mb: int = 10  # Treat larger bodies as failures

    # Request headers
    accept_language: str = "en-US,en;q=0.9"
    accept_encoding: str = "gzip, deflate"

    # Connection pooling
    pool_connections: int = 10
    pool_maxsize: int = 10


class Transport(ABC):
    """Blocking text fetcher."""

    @abstractmethod
    def fetch_text(self, url: str) -> Tuple[str, bool]:
        """
        Fetch a URL as text.

        Returns:
            (body, ok) - ok is False on any network/HTTP failure, in which case body is ""
        """
        pass

    def close(self):
        """Release any held resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class HTTPTransport(Transport):
    """Transport backed by a pooled requests session."""

    def __init__(self, config: FetchConfig = None):
        self.config = config or FetchConfig()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session = self._create_session()

        self.stats = {
            'total_fetched': 0, 'successful': 0, 'failed': 0,
            'timeouts': 0, 'http_errors': {},
            'total_bytes': 0, 'total_response_time': 0.0,
        }
        self.stats_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=0,
                              pool_connections=self.config.pool_connections,
                              pool_maxsize=self.config.pool_maxsize)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.max_redirects = self.config.max_redirects
        session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': self.config.accept_language,
            'Accept-Encoding': self.config.accept_encoding,
        })
        return session

    def fetch_text(self, url: str) -> Tuple[str, bool]:
        start_time = time.time()
        try:
            body = self._download(url)
        except FetchFailure as e:
            self._record(False, time.time() - start_time, 0, e.reason)
            self.logger.debug(str(e))
            return "", False

        self._record(True, time.time() - start_time, len(body), None)
        self.logger.debug(f"Fetched: {url} ({len(body)} chars, {time.time() - start_time:.2f}s)")
        return body, True

    def _download(self, url: str) -> str:
        """
        Download a URL, enforcing status and size limits.

        Raises:
            FetchFailure: On any network error, non-2xx status or oversized/empty body
        """
        max_bytes = self.config.max_content_size_mb * 1024 * 1024
        try:
            response = self.session.get(
                url, timeout=self.config.timeout_seconds,
                allow_redirects=True, verify=self.config.verify_ssl, stream=True
            )
        except Timeout:
            raise FetchFailure(url, f"Timeout after {self.config.timeout_seconds}s")
        except RequestException as e:
            raise FetchFailure(url, f"Request Error: {e}")

        try:
            if not 200 <= response.status_code < 300:
                raise FetchFailure(url, f"HTTP {response.status_code}")

            content_length = response.headers.get('Content-Length')
            if content_length and content_length.isdigit() and int(content_length) > max_bytes:
                raise FetchFailure(url, "Content too large")

            content = bytearray()
            for chunk in response.iter_content(chunk_size=8192):
                content.extend(chunk)
                if len(content) > max_bytes:
                    raise FetchFailure(url, "Content exceeded size limit")
        except RequestException as e:
            raise FetchFailure(url, f"Request Error: {e}")
        finally:
            response.close()

        if not content:
            raise FetchFailure(url, "Empty response body")

        return self._decode(bytes(content), response)

    def _decode(self, content: bytes, response) -> str:
        """
        Decode a body as UTF-8 unless the response declares another charset.

        A text/* response without a charset is decoded as UTF-8, not as
        the ISO-8859-1 requests falls back to.
        """
        content_type = response.headers.get('Content-Type', '') or ''
        if 'charset=' in content_type.lower() and response.encoding:
            try:
                return content.decode(response.encoding, errors='replace')
            except LookupError:
                self.logger.debug(f"Unknown charset {response.encoding}, decoding as UTF-8")

        return content.decode('utf-8', errors='replace')

    def _record(self, success: bool, response_time: float, size: int, error):
        with self.stats_lock:
            self.stats['total_fetched'] += 1
            self.stats['total_response_time'] += response_time
            if success:
                self.stats['successful'] += 1
                self.stats['total_bytes'] += size
                return

            self.stats['failed'] += 1
            if error and error.startswith('Timeout'):
                self.stats['timeouts'] += 1
            if error and error.startswith('HTTP '):
                status = error[5:]
                self.stats['http_errors'][status] = self.stats['http_errors'].get(status, 0) + 1

    def get_stats(self) -> Dict:
        """Get transport statistics."""
        with self.stats_lock:
            stats = dict(self.stats)
            stats['http_errors'] = dict(self.stats['http_errors'])
            return stats

    def close(self):
        self.logger.debug("Closing HTTP session")
        self.session.close()
