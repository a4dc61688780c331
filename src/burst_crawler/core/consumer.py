"""
Record Consumers - The streaming delivery contract used by both crawlers.

A crawler calls ``consume(record)`` once per discovered resource. Returning
True keeps the crawl going; returning False stops it immediately. This return
value is the only cancellation channel the caller has.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Union

from .record import Record
from ..exceptions import ConfigurationError


class RecordConsumer(ABC):
    """Receives records as they are discovered."""

    @abstractmethod
    def consume(self, record: Record) -> bool:
        """
        Accept one record.

        Args:
            record: Fully extracted record; must not be mutated by the crawler afterwards

        Returns:
            True to continue crawling, False to stop immediately
        """
        pass


class CallbackConsumer(RecordConsumer):
    """Adapts a plain callable. A None return is treated as "continue"."""

    def __init__(self, callback: Callable[[Record], Optional[bool]]):
        self.callback = callback

    def consume(self, record: Record) -> bool:
        result = self.callback(record)
        if result is None:
            return True
        return bool(result)


class CollectingConsumer(RecordConsumer):
    """Collects every record into an ordered list."""

    def __init__(self):
        self.records: List[Record] = []

    def consume(self, record: Record) -> bool:
        self.records.append(record)
        return True

    def __len__(self) -> int:
        return len(self.records)


ConsumerLike = Union[RecordConsumer, Callable[[Record], Optional[bool]]]


def as_consumer(consumer: ConsumerLike) -> RecordConsumer:
    """Wrap callables; reject anything that cannot consume records."""
    if isinstance(consumer, RecordConsumer):
        return consumer

    if callable(consumer):
        return CallbackConsumer(consumer)

    raise ConfigurationError(f"Not a record consumer: {consumer!r}")
