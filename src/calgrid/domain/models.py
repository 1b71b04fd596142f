from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Union

EventId = Union[str, int]


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp, returning ``None`` for missing or invalid input.

    Aware values are converted to local wall-clock time and made naive so that
    every instant handled by the grid lives in a single local zone.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _iso(value: Union[str, datetime, None]) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass(frozen=True, slots=True)
class Event:
    """Event as owned by the external store.

    ``start`` and ``end`` are kept exactly as received; they may be missing or
    unparsable, which the slot indexer handles.
    """

    id: EventId
    title: str
    start: Union[str, datetime, None] = None
    end: Union[str, datetime, None] = None
    all_day: bool = False
    description: Optional[str] = None
    type: str = "other"
    colour: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        return cls(
            id=record["id"],
            title=str(record.get("title") or ""),
            start=record.get("start"),
            end=record.get("end"),
            all_day=_as_bool(record.get("allDay", record.get("all_day", False))),
            description=record.get("description"),
            type=str(record.get("type") or "other"),
            colour=str(record.get("colour") or ""),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start": _iso(self.start),
            "end": _iso(self.end),
            "allDay": self.all_day,
            "type": self.type,
            "colour": self.colour,
        }


@dataclass(frozen=True, slots=True)
class EventDraft:
    """Event payload without an identifier, used for creation."""

    title: str
    start: Union[str, datetime, None]
    end: Union[str, datetime, None] = None
    all_day: bool = False
    description: Optional[str] = None
    type: str = "other"
    colour: str = ""

    def with_id(self, identifier: EventId) -> Event:
        return Event(
            id=identifier,
            title=self.title,
            start=self.start,
            end=self.end,
            all_day=self.all_day,
            description=self.description,
            type=self.type,
            colour=self.colour,
        )


@dataclass(frozen=True, slots=True)
class ScheduledEvent:
    id: EventId
    title: str
    start: datetime
    end: datetime
    duration: int
    all_day: bool = False
    slot: Optional[int] = None
    description: Optional[str] = None
    type: str = "other"
    colour: str = ""

    def moved(self, **changes: Any) -> "ScheduledEvent":
        return replace(self, **changes)

    def to_event(self) -> Event:
        return Event(
            id=self.id,
            title=self.title,
            start=self.start.isoformat(),
            end=self.end.isoformat(),
            all_day=self.all_day,
            description=self.description,
            type=self.type,
            colour=self.colour,
        )
