"""
Sitemap Reader - Streams <loc> entries out of a sitemap document.

Sitemaps of the target site are flat lists of location tags, so a plain text
scan is enough; no XML tree is built.
"""

from typing import Iterator

LOC_OPEN = "<loc>"
LOC_CLOSE = "</loc>"


def iter_locations(xml: str) -> Iterator[str]:
    """
    Yield the URL inside each <loc>...</loc> pair in document order.

    The scan ends at the first unclosed tag.
    """
    if not xml:
        return

    position = 0
    while True:
        start = xml.find(LOC_OPEN, position)
        if start < 0:
            return

        start += len(LOC_OPEN)
        end = xml.find(LOC_CLOSE, start)
        if end < 0:
            return

        position = end + len(LOC_CLOSE)
        url = _unescape(xml[start:end].strip())
        if url:
            yield url


def _unescape(url: str) -> str:
    # Sitemap URLs escape ampersands as XML entities
    return url.replace("&amp;", "&")
