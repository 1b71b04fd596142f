from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from ..core import DragPreview, DropOutcome, LayoutEntry
from ..domain import Event, EventId, ScheduledEvent
from .models import (
    DragPreviewPayload,
    DropOutcomePayload,
    EventPayload,
    LayoutPayload,
    ScheduledEventPayload,
)


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_scheduled(event: ScheduledEvent) -> Dict[str, Any]:
    return ScheduledEventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_buckets(buckets: Mapping[str, Iterable[ScheduledEvent]]) -> Dict[str, List[Dict[str, Any]]]:
    return {key: [serialize_scheduled(event) for event in events] for key, events in buckets.items()}


def serialize_layout(layout: Mapping[EventId, LayoutEntry]) -> Dict[str, Dict[str, float]]:
    return {str(event_id): LayoutPayload.from_domain(entry).model_dump() for event_id, entry in layout.items()}


def serialize_preview(preview: DragPreview) -> Dict[str, Any]:
    return DragPreviewPayload.from_domain(preview).model_dump()


def serialize_outcome(outcome: DropOutcome) -> Dict[str, Any]:
    return DropOutcomePayload.from_domain(outcome).model_dump(by_alias=True)
