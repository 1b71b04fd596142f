from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol
from uuid import uuid4

import orjson

from ..core.config import EVENTS_FILE
from ..domain import Event, EventDraft, EventId, parse_datetime

logger = logging.getLogger(__name__)

DEFAULT_STORE_STATE: Dict[str, Any] = {
    "events": [],
    "metadata": {"schema_version": 1},
}


class EventNotFoundError(LookupError):
    """Raised when an operation targets an event id the store does not hold."""


class EventStore(Protocol):
    def list(self, start: datetime, end: datetime) -> List[Event]:
        """Events whose start falls inside the inclusive range."""

    def create(self, draft: EventDraft) -> Event:
        ...

    def update(self, event: Event) -> Event:
        ...

    def delete(self, event_id: EventId) -> None:
        ...


def starts_within(record: Dict[str, Any], start: datetime, end: datetime) -> bool:
    moment = parse_datetime(record.get("start"))
    return moment is not None and start <= moment <= end


class JsonEventStore:
    """Event store backed by a local JSON document."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path else EVENTS_FILE
        self._state: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_materialized(self) -> Dict[str, Any]:
        if self._state is not None:
            return self._state
        if not self._path.exists():
            self._state = {"events": [], "metadata": dict(DEFAULT_STORE_STATE["metadata"])}
            self._persist()
            return self._state
        raw = self._path.read_bytes()
        data = orjson.loads(raw) if raw.strip() else {}
        self._state = {
            "events": list(data.get("events", [])),
            "metadata": dict(data.get("metadata", DEFAULT_STORE_STATE["metadata"])),
        }
        return self._state

    def _persist(self) -> None:
        if self._state is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = orjson.dumps(self._state, option=orjson.OPT_INDENT_2)
        self._path.write_bytes(payload + b"\n")

    def all(self) -> List[Event]:
        return [Event.from_record(record) for record in self._ensure_materialized()["events"]]

    def list(self, start: datetime, end: datetime) -> List[Event]:
        records = self._ensure_materialized()["events"]
        return [Event.from_record(record) for record in records if starts_within(record, start, end)]

    def get(self, event_id: EventId) -> Optional[Event]:
        for record in self._ensure_materialized()["events"]:
            if str(record.get("id")) == str(event_id):
                return Event.from_record(record)
        return None

    def create(self, draft: EventDraft) -> Event:
        event = draft.with_id(str(uuid4()))
        self._ensure_materialized()["events"].append(event.to_record())
        self._persist()
        logger.debug("Created event %s", event.id)
        return event

    def update(self, event: Event) -> Event:
        records = self._ensure_materialized()["events"]
        for index, record in enumerate(records):
            if str(record.get("id")) == str(event.id):
                # Keep the stored id so integer ids survive a round trip through the grid.
                records[index] = {**event.to_record(), "id": record["id"]}
                self._persist()
                return Event.from_record(records[index])
        logger.warning("Update for unknown event %s ignored", event.id)
        return event

    def delete(self, event_id: EventId) -> None:
        state = self._ensure_materialized()
        before = len(state["events"])
        state["events"] = [record for record in state["events"] if str(record.get("id")) != str(event_id)]
        if len(state["events"]) == before:
            raise EventNotFoundError(f"Event {event_id} not found.")
        self._persist()


__all__ = ["EventNotFoundError", "EventStore", "JsonEventStore", "starts_within"]
