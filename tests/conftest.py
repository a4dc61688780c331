from pathlib import Path
from typing import Dict, List, Optional

import pytest

from burst_crawler.core.site_profile import SiteProfile
from burst_crawler.fetch.transport import Transport

BASE = "https://burst.shopify.com"


def read_fixture(name: str) -> str:
    p = Path(__file__).parent / "fixtures" / name
    return p.read_text(encoding="utf-8")


class FakeTransport(Transport):
    """Serves canned bodies and records every URL fetched."""

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages = dict(pages or {})
        self.fetched: List[str] = []

    def fetch_text(self, url):
        self.fetched.append(url)
        body = self.pages.get(url)
        if body is None:
            return "", False
        return body, True


def photo_url(slug: str) -> str:
    return f"{BASE}/photos/{slug}"


def photo_page(title: str, content_url: Optional[str] = None) -> str:
    content_url = content_url or f"https://cdn.example/{title}.jpg?width=100"
    return (
        "<html><head>"
        '<script type="application/ld+json">'
        f'{{"contentUrl": "{content_url}", "name": "{title}"}}'
        "</script></head><body><main>"
        '<div class="photo__meta"><a href="/tags/t">t</a></div>'
        "</main></body></html>"
    )


def listing_page(slugs: List[str], last_page: Optional[int] = None) -> str:
    tiles = "".join(
        f'<a class="photo-tile__image-wrapper" href="/photos/{slug}"><img></a>' for slug in slugs
    )
    pagination = ""
    if last_page is not None:
        pagination = f'<span class="last"><a href="/photos?page={last_page}">Last</a></span>'
    return f"<html><body><main>{tiles}</main><nav>{pagination}</nav></body></html>"


def sitemap(*urls: str) -> str:
    entries = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset>{entries}</urlset>'


@pytest.fixture
def site():
    return SiteProfile()


@pytest.fixture
def photo_html():
    return read_fixture("photo_page.html")
