"""Domain values for the calendar grid."""

from __future__ import annotations

from .enums import CellKind, DropAction, ViewBy
from .models import Event, EventDraft, EventId, ScheduledEvent, parse_datetime

__all__ = [
    "CellKind",
    "DropAction",
    "Event",
    "EventDraft",
    "EventId",
    "ScheduledEvent",
    "ViewBy",
    "parse_datetime",
]
