"""Drag-and-drop reconciliation for the calendar grid.

The engine is driven by three notifications per gesture: ``on_drag_start``,
any number of ``on_drag_over`` and one ``on_drag_end`` (or
``on_month_drag_end`` from the month view). Drops produce a moved copy of the
event, update the shared :class:`BucketMap` and write the copy back through
the event store. The local update is optimistic: a failed write is reported
in the returned :class:`DropOutcome` and left for the caller to reconcile.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, time as day_time, timedelta
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from ..domain import DropAction, Event, EventId, ScheduledEvent
from .buckets import BucketMap
from .cell_keys import (
    EVENT_LIST,
    AllDayCellKey,
    TimedCellKey,
    all_day_key_for,
    parse_cell_key,
)
from .config import ALL_DAY_DROP_MINUTES, DROP_DEDUPE_MS
from .geometry import DragPreview, GeometryProvider, preview_for

if TYPE_CHECKING:
    from ..data.store import EventStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PersistResult:
    ok: bool
    event: Optional[Event] = None
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DropOutcome:
    action: DropAction
    event_id: Optional[EventId] = None
    origin_key: Optional[str] = None
    target_key: Optional[str] = None
    original: Optional[ScheduledEvent] = None
    moved: Optional[ScheduledEvent] = None
    persisted: Optional[PersistResult] = None

    @property
    def persist_failed(self) -> bool:
        return self.persisted is not None and not self.persisted.ok


@dataclass
class DragState:
    active_event: Optional[ScheduledEvent] = None
    origin_key: Optional[str] = None
    drag_over: Optional[TimedCellKey] = None
    preview: Optional[DragPreview] = None

    @property
    def is_dragging(self) -> bool:
        return self.active_event is not None

    def reset(self) -> None:
        self.active_event = None
        self.origin_key = None
        self.drag_over = None
        self.preview = None


class DropDeduplicator:
    """Suppress a repeated ``(source, target)`` drop inside a short window."""

    def __init__(self, window_ms: int = DROP_DEDUPE_MS, clock: Callable[[], float] = time.monotonic) -> None:
        self.window = window_ms / 1000
        self._clock = clock
        self._last: Optional[Tuple[Tuple[Optional[EventId], Optional[str]], float]] = None

    def is_duplicate(self, source_id: Optional[EventId], target_id: Optional[str]) -> bool:
        key = (source_id, target_id)
        now = self._clock()
        if self._last is not None and self._last[0] == key and now - self._last[1] < self.window:
            return True
        self._last = (key, now)
        return False


class DragEngine:
    def __init__(
        self,
        buckets: BucketMap,
        store: "EventStore",
        *,
        all_day_drop_minutes: int = ALL_DAY_DROP_MINUTES,
        dedupe_window_ms: int = DROP_DEDUPE_MS,
        clock: Callable[[], float] = time.monotonic,
        geometry: Optional[GeometryProvider] = None,
    ) -> None:
        self.buckets = buckets
        self.store = store
        self.all_day_drop_minutes = all_day_drop_minutes
        self.geometry = geometry
        self.state = DragState()
        self.deduplicator = DropDeduplicator(dedupe_window_ms, clock)
        self._handling_drop = False

    def on_drag_start(self, event: ScheduledEvent) -> DragPreview:
        self.state.active_event = event
        self.state.origin_key = self.buckets.locate(event.id) or EVENT_LIST
        self.state.drag_over = None
        self.state.preview = preview_for(self.geometry, event.id)
        logger.debug("Drag started for event %s from %s", event.id, self.state.origin_key)
        return self.state.preview

    def on_drag_over(self, candidate_key: Optional[str]) -> Optional[TimedCellKey]:
        cell = parse_cell_key(candidate_key)
        self.state.drag_over = cell if isinstance(cell, TimedCellKey) else None
        return self.state.drag_over

    def on_drag_end(self, target_key: Optional[str]) -> DropOutcome:
        try:
            active = self.state.active_event
            if active is None or not target_key:
                return DropOutcome(DropAction.IGNORED, target_key=target_key)
            if target_key == EVENT_LIST:
                return self._unschedule(active)
            cell = parse_cell_key(target_key)
            if isinstance(cell, TimedCellKey):
                return self._drop_on_slot(active, cell)
            if isinstance(cell, AllDayCellKey):
                return self._drop_on_all_day(active, cell)
            logger.debug("Ignoring drop on unrecognized target %r", target_key)
            return self._ignored(active, target_key)
        finally:
            self.state.reset()

    def on_month_drag_end(self, target_key: Optional[str], *, source_id: Optional[EventId] = None) -> DropOutcome:
        """Month-view drop: moves the date and keeps the time of day.

        Identical ``(source, target)`` notifications inside the dedupe window
        and notifications arriving while a drop is being handled are ignored.
        """

        if self._handling_drop:
            logger.debug("Ignored re-entrant drag end for %r", target_key)
            return DropOutcome(DropAction.REENTRANT, event_id=source_id, target_key=target_key)
        self._handling_drop = True
        try:
            active = self.state.active_event
            if source_id is None and active is not None:
                source_id = active.id
            if self.deduplicator.is_duplicate(source_id, target_key):
                logger.debug("Ignored duplicate drag end %s -> %s", source_id, target_key)
                return DropOutcome(DropAction.DUPLICATE, event_id=source_id, target_key=target_key)
            if active is None or not target_key:
                return DropOutcome(DropAction.IGNORED, event_id=source_id, target_key=target_key)
            if target_key == EVENT_LIST:
                return self._unschedule(active)
            cell = parse_cell_key(target_key)
            if isinstance(cell, TimedCellKey):
                return self._move_date(active, cell)
            if isinstance(cell, AllDayCellKey):
                return self._drop_on_all_day(active, cell)
            return self._ignored(active, target_key)
        finally:
            self._handling_drop = False
            self.state.reset()

    def revert(self, outcome: DropOutcome) -> bool:
        """Put a moved event back where it was before ``outcome``."""

        if outcome.action is not DropAction.MOVED or outcome.moved is None or outcome.original is None:
            return False
        if outcome.target_key:
            self.buckets.remove(outcome.target_key, outcome.moved.id)
        if outcome.origin_key and outcome.origin_key != EVENT_LIST:
            self.buckets.append(outcome.origin_key, outcome.original)
        logger.info("Reverted move of event %s to %s", outcome.moved.id, outcome.origin_key)
        return True

    def _drop_on_slot(self, active: ScheduledEvent, cell: TimedCellKey) -> DropOutcome:
        destination = cell.starts_at
        if destination == active.start:
            return self._ignored(active, cell.encode())
        if active.all_day:
            minutes = self.all_day_drop_minutes
            moved = active.moved(
                start=destination,
                end=destination + timedelta(minutes=minutes),
                duration=minutes,
                all_day=False,
                slot=cell.slot,
            )
        else:
            moved = active.moved(
                start=destination,
                end=destination + timedelta(minutes=active.duration),
                slot=cell.slot,
            )
        return self._relocate(active, moved, cell.encode())

    def _drop_on_all_day(self, active: ScheduledEvent, cell: AllDayCellKey) -> DropOutcome:
        if active.all_day and active.start.date() == cell.date:
            return self._ignored(active, cell.encode())
        midnight = datetime.combine(cell.date, day_time.min)
        moved = active.moved(start=midnight, end=midnight, duration=0, all_day=True, slot=None)
        return self._relocate(active, moved, cell.encode())

    def _move_date(self, active: ScheduledEvent, cell: TimedCellKey) -> DropOutcome:
        if cell.date == active.start.date():
            return self._ignored(active, cell.encode())
        if active.all_day:
            return self._drop_on_all_day(active, all_day_key_for(cell.date))
        origin = parse_cell_key(self.state.origin_key)
        if isinstance(origin, TimedCellKey):
            cell = origin.with_date(cell.date)
        destination = cell.starts_at
        moved = active.moved(
            start=destination,
            end=destination + timedelta(minutes=active.duration),
            slot=cell.slot,
        )
        return self._relocate(active, moved, cell.encode())

    def _relocate(self, active: ScheduledEvent, moved: ScheduledEvent, key: str) -> DropOutcome:
        origin = self.state.origin_key
        if origin and origin != EVENT_LIST:
            self.buckets.remove(origin, active.id)
        self.buckets.append(key, moved)
        logger.debug("Moved event %s from %s to %s", active.id, origin, key)
        return DropOutcome(
            DropAction.MOVED,
            event_id=active.id,
            origin_key=origin,
            target_key=key,
            original=active,
            moved=moved,
            persisted=self._persist(moved),
        )

    def _unschedule(self, active: ScheduledEvent) -> DropOutcome:
        removed = self.buckets.discard_everywhere(active.id)
        logger.debug("Unscheduled event %s from %d bucket(s)", active.id, removed)
        return DropOutcome(
            DropAction.UNSCHEDULED,
            event_id=active.id,
            origin_key=self.state.origin_key,
            target_key=EVENT_LIST,
            original=active,
        )

    def _ignored(self, active: ScheduledEvent, target_key: str) -> DropOutcome:
        return DropOutcome(
            DropAction.IGNORED,
            event_id=active.id,
            origin_key=self.state.origin_key,
            target_key=target_key,
            original=active,
        )

    def _persist(self, moved: ScheduledEvent) -> PersistResult:
        try:
            saved = self.store.update(moved.to_event())
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to persist move of event %s", moved.id)
            return PersistResult(ok=False, error=str(exc))
        return PersistResult(ok=True, event=saved)


__all__ = ["DragEngine", "DragState", "DropDeduplicator", "DropOutcome", "PersistResult"]
