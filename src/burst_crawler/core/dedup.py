"""
Duplicate Suppression - Keeps already seen identity keys out of the stream.
"""

import logging
from typing import Iterable, Optional, Set


class SeenFilter:
    """
    Simple set-based duplicate detection.

    Seeded with the keys of previously crawled records; a crawl run marks
    every delivered key so that a resource reachable from two places is
    delivered once. Lookups are exact string matches unless
    ``case_sensitive`` is turned off.
    """

    def __init__(self, seed: Optional[Iterable[str]] = None, case_sensitive: bool = True):
        self.case_sensitive = case_sensitive
        self.seen_keys: Set[str] = set()
        self.logger = logging.getLogger(self.__class__.__name__)

        for key in seed or ():
            self.mark_seen(key)

    def _normalize(self, key: str) -> str:
        return key if self.case_sensitive else key.lower()

    def is_seen(self, key: Optional[str]) -> bool:
        """Check if key has been seen before. None is never seen."""
        if key is None:
            return False
        return self._normalize(key) in self.seen_keys

    def mark_seen(self, key: Optional[str]) -> bool:
        """
        Mark key as seen.

        Returns:
            True if key was newly added, False if it already existed or is None
        """
        if key is None:
            return False

        check_key = self._normalize(key)
        if check_key in self.seen_keys:
            return False

        self.seen_keys.add(check_key)
        return True

    def count(self) -> int:
        """Get count of seen keys."""
        return len(self.seen_keys)
