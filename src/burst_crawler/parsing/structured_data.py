"""
Structured Data - Reads the linked-data (JSON-LD) block of a detail page.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup

from ..exceptions import ParseFailure

logger = logging.getLogger(__name__)

LINKED_DATA_TYPE = "application/ld+json"


@dataclass
class LinkedData:
    """Fields of the linked-data payload the extractor cares about."""
    content_url: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    license: Optional[str] = None


def find_linked_data_block(soup: Optional[BeautifulSoup]) -> Optional[str]:
    """Return the text of the first linked-data script, or None."""
    if soup is None:
        return None

    script = soup.find('script', attrs={'type': LINKED_DATA_TYPE})
    if script is None:
        return None

    text = script.string or script.get_text()
    text = text.strip() if text else ""
    return text or None


def parse_linked_data(text: Optional[str]) -> Optional[LinkedData]:
    """
    Deserialize a linked-data payload.

    Missing or invalid payloads are not errors; they yield None.
    """
    if not text:
        return None

    try:
        payload = _main_entity(json.loads(text))
    except (ValueError, ParseFailure) as e:
        logger.debug(f"Ignoring linked data block: {e}")
        return None

    return LinkedData(
        content_url=_as_text(payload.get('contentUrl')),
        name=_as_text(payload.get('name')),
        description=_as_text(payload.get('description')),
        author=_as_text(payload.get('author'), 'name'),
        license=_as_text(payload.get('license'), 'url', '@id', 'name'),
    )


def _main_entity(data: Any) -> Dict[str, Any]:
    """Pick the object describing the page's main resource."""
    if isinstance(data, dict) and isinstance(data.get('@graph'), list):
        data = data['@graph']

    if isinstance(data, list):
        objects = [item for item in data if isinstance(item, dict)]
        for item in objects:
            if 'contentUrl' in item:
                return item
        if objects:
            return objects[0]
        raise ParseFailure("linked data list holds no objects")

    if not isinstance(data, dict):
        raise ParseFailure(f"linked data is a {type(data).__name__}, not an object")

    return data


def _as_text(value: Any, *keys: str) -> Optional[str]:
    """Plain string value; objects are searched for the first of keys."""
    if isinstance(value, list):
        value = value[0] if value else None

    if isinstance(value, dict):
        for key in keys:
            if isinstance(value.get(key), str):
                value = value[key]
                break
        else:
            return None

    if not isinstance(value, str):
        return None

    value = value.strip()
    return value or None


def strip_query(url: Optional[str]) -> Optional[str]:
    """Cut a URL at its first '?'."""
    if not url:
        return url

    index = url.find('?')
    if index < 0:
        return url
    return url[:index]
