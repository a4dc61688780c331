"""
Record Model - The normalized entity produced for every discovered resource.
File: src/burst_crawler/core/record.py
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class IdentityKey(Enum):
    """Field used for equality, hashing and de-duplication of records."""
    SOURCE_URL = "source_url"  # Page the record was discovered at
    CONTENT_URL = "content_url"  # Resolved primary asset


@dataclass(eq=False)
class Record:
    """
    One discovered resource.

    A record is created empty at discovery time with only ``source_url`` set,
    filled in by the extractor and never mutated after it has been handed to
    a consumer.

    Equality and hashing use the identity key only: two records with the same
    key are equal even when every other field differs. A record whose key is
    None is equal to nothing but itself.
    """
    # Identity - set once at discovery
    source_url: Optional[str] = None

    # Extracted data
    content_url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    attribution_name: Optional[str] = None
    attribution_url: Optional[str] = None
    license_name: Optional[str] = None
    license_url: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    identity_key: IdentityKey = field(default=IdentityKey.SOURCE_URL, repr=False)

    def identity(self) -> Optional[str]:
        """Return the value of the identity key field."""
        return getattr(self, self.identity_key.value)

    def __eq__(self, other: Any) -> bool:
        if other is self:
            return True

        key = self.identity()
        if key is None:
            return False

        if isinstance(other, Record):
            return key == other.identity()

        # Records compare equal to their bare identity key
        if isinstance(other, str):
            return key == other

        return NotImplemented

    def __hash__(self) -> int:
        key = self.identity()
        if key is None:
            return 0
        return hash(key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for output/serialization"""
        return {
            'source_url': self.source_url,
            'content_url': self.content_url,
            'title': self.title,
            'description': self.description,
            'attribution_name': self.attribution_name,
            'attribution_url': self.attribution_url,
            'license_name': self.license_name,
            'license_url': self.license_url,
            'tags': list(self.tags),
        }

    def __repr__(self) -> str:
        return f"<Record {self.identity_key.value}={self.identity()!r}>"
