"""
Fetch Module - Blocking HTTP transport used by the crawlers.

Components:
-----------
- Transport: Abstract ``fetch_text(url) -> (body, ok)`` capability
- HTTPTransport: requests-based implementation
- FetchConfig: Timeouts, headers and size limits
"""

from .transport import FetchConfig, HTTPTransport, Transport

__all__ = [
    'FetchConfig',
    'HTTPTransport',
    'Transport',
]
