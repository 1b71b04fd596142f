from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core import view_range
from ..domain import EventId, ViewBy, parse_datetime
from .models import EventDraftPayload, EventPayload
from .registry import register_api
from .serializers import (
    serialize_buckets,
    serialize_event,
    serialize_layout,
    serialize_outcome,
    serialize_preview,
    serialize_scheduled,
)
from .state import api_state


def _parse_datetime(timestamp: str) -> datetime:
    parsed = parse_datetime(timestamp)
    if parsed is None:
        raise ValueError(f"Invalid ISO timestamp: {timestamp}")
    return parsed


@register_api(
    "list_events",
    description="Return stored events whose start falls in the inclusive range.",
    category="events",
    tags=("read", "store"),
)
def list_events(start: str, end: str) -> Dict[str, Any]:
    events = api_state.context.store.list(_parse_datetime(start), _parse_datetime(end))
    return {"start": start, "end": end, "events": [serialize_event(event) for event in events]}


@register_api(
    "create_event",
    description="Create an event in the store and place it on the grid.",
    category="events",
    tags=("write", "store"),
)
def create_event(event: Dict[str, Any]) -> Dict[str, Any]:
    draft = EventDraftPayload.model_validate(event).to_domain()
    created = api_state.calendar.create_event(draft)
    return {"event": serialize_event(created)}


@register_api(
    "update_event",
    description="Replace an event in the store and move it to its new cell on the grid.",
    category="events",
    tags=("write", "store"),
)
def update_event(event: Dict[str, Any]) -> Dict[str, Any]:
    payload = EventPayload.model_validate(event).to_domain()
    saved = api_state.calendar.update_event(payload)
    return {"event": serialize_event(saved)}


@register_api(
    "delete_event",
    description="Delete an event from the store and remove it from the grid.",
    category="events",
    tags=("write", "store"),
)
def delete_event(event_id: EventId) -> Dict[str, Any]:
    return {"event_id": event_id, "deleted": api_state.calendar.delete_event(event_id)}


@register_api(
    "fetch_view",
    description="Load the events of a day, week, month or year view into the grid.",
    category="grid",
    tags=("read", "view"),
)
def fetch_view(view: str, day: str, force: bool = False) -> Dict[str, Any]:
    view_by = ViewBy(view)
    target = api_state.calendar.parse_day(day)
    fetched = api_state.calendar.fetch(view_by, target, force=force)
    start, end = view_range(view_by, target)
    return {
        "view": view_by.value,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "fetched": fetched,
        "bucket_count": len(api_state.context.buckets),
    }


@register_api(
    "grid_for_day",
    description="Return the timed and all-day buckets of a day.",
    category="grid",
    tags=("read",),
)
def grid_for_day(day: str) -> Dict[str, Any]:
    target = api_state.calendar.parse_day(day)
    return {"day": target.isoformat(), "buckets": serialize_buckets(api_state.calendar.grid_for_day(target))}


@register_api(
    "day_layout",
    description="Return column widths and offsets for the timed events of a day.",
    category="grid",
    tags=("read", "layout"),
)
def day_layout(day: str) -> Dict[str, Any]:
    target = api_state.calendar.parse_day(day)
    return {"day": target.isoformat(), "layout": serialize_layout(api_state.calendar.day_layout(target))}


@register_api(
    "week_layouts",
    description="Return per-day layouts for the Monday-based week containing the day.",
    category="grid",
    tags=("read", "layout"),
)
def week_layouts(day: str) -> Dict[str, Any]:
    target = api_state.calendar.parse_day(day)
    layouts = api_state.calendar.week_layouts(target)
    return {"layouts": {key: serialize_layout(layout) for key, layout in layouts.items()}}


@register_api(
    "month_cell",
    description="Return a month cell's events, all-day first then by start.",
    category="grid",
    tags=("read", "month"),
)
def month_cell(day: str) -> Dict[str, Any]:
    target = api_state.calendar.parse_day(day)
    events = api_state.calendar.month_cell_events(target)
    return {"day": target.isoformat(), "events": [serialize_scheduled(event) for event in events]}


@register_api(
    "drag_start",
    description="Begin dragging a placed event.",
    category="drag",
    tags=("drag",),
)
def drag_start(event_id: EventId) -> Dict[str, Any]:
    preview = api_state.calendar.start_drag(event_id)
    return {"event_id": event_id, "dragging": preview is not None, "preview": serialize_preview(preview) if preview else None}


@register_api(
    "drag_over",
    description="Report the cell currently under the dragged event.",
    category="drag",
    tags=("drag",),
)
def drag_over(key: Optional[str] = None) -> Dict[str, Any]:
    cell = api_state.calendar.drag_over(key)
    if cell is None:
        return {"cell": None}
    return {"cell": {"year": cell.year, "month": cell.month, "day": cell.day, "hour": cell.hour, "slot": cell.slot}}


@register_api(
    "drag_end",
    description="Drop the dragged event on a timed cell, an all-day cell or the unscheduled list.",
    category="drag",
    tags=("drag", "write"),
)
def drag_end(key: Optional[str] = None) -> Dict[str, Any]:
    return serialize_outcome(api_state.calendar.drop(key))


@register_api(
    "month_drag_end",
    description="Drop the dragged event on a month cell, keeping its time of day.",
    category="drag",
    tags=("drag", "write", "month"),
)
def month_drag_end(key: Optional[str] = None, source_id: Optional[EventId] = None) -> Dict[str, Any]:
    return serialize_outcome(api_state.calendar.month_drop(key, source_id=source_id))
