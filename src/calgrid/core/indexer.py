from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from ..domain import Event, ScheduledEvent, parse_datetime
from .buckets import BucketMap
from .cell_keys import all_day_key_for, timed_key_for
from .config import DEFAULT_EVENT_MINUTES, SLOT_MINUTES

logger = logging.getLogger(__name__)

RawEvent = Union[Event, Mapping[str, Any]]


def schedule_event(
    raw: RawEvent,
    *,
    default_minutes: int = DEFAULT_EVENT_MINUTES,
) -> Optional[Tuple[str, ScheduledEvent]]:
    """Project one store event onto the grid.

    Returns the bucket key and the scheduled value, or ``None`` when the event
    has no usable start and therefore cannot be placed.
    """

    event = raw if isinstance(raw, Event) else Event.from_record(dict(raw))
    start = parse_datetime(event.start)
    if start is None:
        logger.debug("Skipping event %s: missing or invalid start %r", event.id, event.start)
        return None
    end = parse_datetime(event.end) or start + timedelta(minutes=default_minutes)
    duration = max(0, int((end - start).total_seconds() // 60))

    if event.all_day:
        key = all_day_key_for(start.date()).encode()
    else:
        key = timed_key_for(start).encode()

    scheduled = ScheduledEvent(
        id=event.id,
        title=event.title,
        description=event.description if event.description is not None else event.title,
        start=start,
        end=end,
        duration=duration,
        all_day=event.all_day,
        slot=start.minute // SLOT_MINUTES,
        type=event.type or "other",
        colour=event.colour,
    )
    return key, scheduled


def index_events(
    events: Iterable[RawEvent],
    buckets: Optional[BucketMap] = None,
    *,
    default_minutes: int = DEFAULT_EVENT_MINUTES,
) -> BucketMap:
    """Group events into quarter-hour and all-day buckets.

    When ``buckets`` is given it is re-hydrated in place so that every holder
    of that map sees the new placement.
    """

    target = buckets if buckets is not None else BucketMap()
    placements = []
    for raw in events:
        placed = schedule_event(raw, default_minutes=default_minutes)
        if placed is not None:
            placements.append(placed)
    target.hydrate(placements)
    logger.debug("Indexed %d events into %d buckets", len(placements), len(target))
    return target


__all__ = ["index_events", "schedule_event"]
