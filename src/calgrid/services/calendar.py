from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Hashable, List, Optional, Union

from ..core import (
    DragPreview,
    DropOutcome,
    LayoutEntry,
    TimedCellKey,
    fetch_token,
    index_events,
    layout_events,
    schedule_event,
    view_range,
    week_days,
)
from ..core.cell_keys import ALL_DAY_PREFIX, TIMED_PREFIX, day_token
from ..data import EventNotFoundError
from ..domain import Event, EventDraft, EventId, ScheduledEvent, ViewBy
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext
    _loaded: Optional[Hashable] = field(default=None, init=False)

    @property
    def buckets(self):
        return self.context.buckets

    def fetch(self, view: Union[ViewBy, str], selected: date, *, force: bool = False) -> bool:
        """Load the events visible in ``view`` around ``selected`` into the bucket map.

        Week, month and year views skip the store when the same range is
        already loaded; the day view always refetches. Returns whether the
        store was queried.
        """

        view = ViewBy(view)
        token = fetch_token(view, selected)
        if not force and token is not None and token == self._loaded:
            return False

        self.buckets.clear()
        start, end = view_range(view, selected)
        try:
            events = self.context.store.list(start, end)
        except Exception:  # noqa: BLE001
            logger.exception("Error fetching events for %s view of %s", view.value, selected)
            self._loaded = None
            return True
        index_events(events, self.buckets, default_minutes=self.context.settings.grid.default_event_minutes)
        self._loaded = token
        logger.info("Loaded %d buckets for %s view of %s", len(self.buckets), view.value, selected)
        return True

    def grid_for_day(self, target_day: date) -> Dict[str, List[ScheduledEvent]]:
        token = day_token(target_day)
        timed_prefix = f"{TIMED_PREFIX}-{token}-"
        all_day_key = f"{ALL_DAY_PREFIX}-{token}"
        return {
            key: events
            for key, events in self.buckets.snapshot().items()
            if key.startswith(timed_prefix) or key == all_day_key
        }

    def day_layout(self, target_day: date) -> Dict[EventId, LayoutEntry]:
        return layout_events(self.buckets.timed_events_for_day(target_day))

    def week_layouts(self, anchor: date) -> Dict[str, Dict[EventId, LayoutEntry]]:
        return {day_token(day): self.day_layout(day) for day in week_days(anchor)}

    def month_cell_events(self, target_day: date) -> List[ScheduledEvent]:
        events = self.buckets.all_day_events_for_day(target_day) + self.buckets.timed_events_for_day(target_day)
        return sorted(events, key=lambda ev: (not ev.all_day, ev.start))

    def create_event(self, draft: EventDraft) -> Event:
        created = self.context.store.create(draft)
        placed = schedule_event(created, default_minutes=self.context.settings.grid.default_event_minutes)
        if placed is not None:
            self.buckets.append(*placed)
        return created

    def update_event(self, event: Event) -> Event:
        """Write ``event`` to the store and move its grid placement to match."""

        saved = self.context.store.update(event)
        self.buckets.discard_everywhere(event.id)
        if saved.id != event.id:
            self.buckets.discard_everywhere(saved.id)
        placed = schedule_event(saved, default_minutes=self.context.settings.grid.default_event_minutes)
        if placed is None:
            logger.info("Event %s no longer has a usable start; removed from the grid", saved.id)
        else:
            self.buckets.append(*placed)
        return saved

    def delete_event(self, event_id: EventId) -> bool:
        try:
            self.context.store.delete(event_id)
        except EventNotFoundError:
            logger.warning("Delete requested for unknown event %s", event_id)
            return False
        self.buckets.discard_everywhere(event_id)
        return True

    def start_drag(self, event_id: EventId) -> Optional[DragPreview]:
        event = self.buckets.find(event_id)
        if event is None:
            logger.debug("Drag start for unplaced event %s ignored", event_id)
            return None
        return self.context.drag.on_drag_start(event)

    def start_drag_unscheduled(self, event: Union[Event, ScheduledEvent]) -> Optional[DragPreview]:
        if isinstance(event, Event):
            placed = schedule_event(event)
            if placed is None:
                return None
            event = placed[1]
        return self.context.drag.on_drag_start(event)

    def drag_over(self, candidate_key: Optional[str]) -> Optional[TimedCellKey]:
        return self.context.drag.on_drag_over(candidate_key)

    def drop(self, target_key: Optional[str]) -> DropOutcome:
        return self._reconcile(self.context.drag.on_drag_end(target_key))

    def month_drop(self, target_key: Optional[str], *, source_id: Optional[EventId] = None) -> DropOutcome:
        return self._reconcile(self.context.drag.on_month_drag_end(target_key, source_id=source_id))

    def _reconcile(self, outcome: DropOutcome) -> DropOutcome:
        if outcome.persist_failed and self.context.settings.grid.rollback_on_persist_failure:
            self.context.drag.revert(outcome)
        return outcome

    @staticmethod
    def parse_day(value: Union[str, date, datetime]) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(value[:10])
        except ValueError as exc:
            raise ValueError("day must be formatted YYYY-MM-DD") from exc
