from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .cell_keys import ALL_DAY_PREFIX, TIMED_PREFIX, day_token
from ..domain import EventId, ScheduledEvent

logger = logging.getLogger(__name__)


@dataclass
class BucketMap:
    """In-memory placement of scheduled events, keyed by cell key.

    ``locations`` mirrors ``buckets`` as ``event id -> key``; every mutation
    goes through the methods below so the two never diverge.
    """

    buckets: Dict[str, List[ScheduledEvent]] = field(default_factory=dict)
    locations: Dict[EventId, str] = field(default_factory=dict)

    def hydrate(self, placements: Iterable[Tuple[str, ScheduledEvent]]) -> None:
        """Replace the contents with ``placements``.

        A repeated id is kept in both buckets; the reverse index points at the
        later placement.
        """

        self.clear()
        for key, event in placements:
            previous = self.locations.get(event.id)
            if previous is not None:
                logger.warning("Duplicate event id %r in %s and %s", event.id, previous, key)
            self.buckets.setdefault(key, []).append(event)
            self.locations[event.id] = key

    def append(self, key: str, event: ScheduledEvent) -> None:
        stale = self.locations.get(event.id)
        if stale is not None:
            self._drop(stale, event.id)
        self.buckets.setdefault(key, []).append(event)
        self.locations[event.id] = key

    def remove(self, key: str, event_id: EventId) -> Optional[ScheduledEvent]:
        removed = self._drop(key, event_id)
        if removed is not None and self.locations.get(event_id) == key:
            self.locations.pop(event_id, None)
        return removed

    def _drop(self, key: str, event_id: EventId) -> Optional[ScheduledEvent]:
        events = self.buckets.get(key)
        if not events:
            return None
        removed: Optional[ScheduledEvent] = None
        remaining: list[ScheduledEvent] = []
        for event in events:
            if event.id == event_id:
                removed = event
            else:
                remaining.append(event)
        if remaining:
            self.buckets[key] = remaining
        else:
            self.buckets.pop(key, None)
        return removed

    def discard_everywhere(self, event_id: EventId) -> int:
        """Remove ``event_id`` from every bucket, returning how many entries went."""

        removed = 0
        for key in list(self.buckets):
            before = len(self.buckets[key])
            self._drop(key, event_id)
            removed += before - len(self.buckets.get(key, ()))
        self.locations.pop(event_id, None)
        return removed

    def locate(self, event_id: EventId) -> Optional[str]:
        return self.locations.get(event_id)

    def find(self, event_id: EventId) -> Optional[ScheduledEvent]:
        key = self.locations.get(event_id)
        if key is None:
            return None
        for event in self.buckets.get(key, ()):
            if event.id == event_id:
                return event
        return None

    def get(self, key: str) -> List[ScheduledEvent]:
        return list(self.buckets.get(key, ()))

    def keys(self) -> List[str]:
        return list(self.buckets)

    def snapshot(self) -> Dict[str, List[ScheduledEvent]]:
        return {key: list(events) for key, events in self.buckets.items()}

    def timed_events_for_day(self, target_day: date) -> List[ScheduledEvent]:
        return self._collect(f"{TIMED_PREFIX}-{day_token(target_day)}-")

    def all_day_events_for_day(self, target_day: date) -> List[ScheduledEvent]:
        return self._collect(f"{ALL_DAY_PREFIX}-{day_token(target_day)}")

    def _collect(self, prefix: str) -> List[ScheduledEvent]:
        collected: list[ScheduledEvent] = []
        seen: set[EventId] = set()
        for key, events in self.buckets.items():
            if not (key == prefix or key.startswith(prefix)):
                continue
            for event in events:
                if event.id in seen:
                    continue
                seen.add(event.id)
                collected.append(event)
        return collected

    def clear(self) -> None:
        self.buckets.clear()
        self.locations.clear()

    def __contains__(self, key: object) -> bool:
        return key in self.buckets

    def __getitem__(self, key: str) -> List[ScheduledEvent]:
        return self.buckets[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)
