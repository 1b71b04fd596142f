from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import List
from uuid import uuid4

import pytest

from calgrid.config import get_settings
from calgrid.core import BucketMap, DragEngine, index_events
from calgrid.domain import Event, EventDraft
from calgrid.services import CalendarService, ServiceContext


class RecordingStore:
    """In-memory event store that records every update call."""

    def __init__(self, events: List[Event] | None = None, *, fail_updates: bool = False) -> None:
        self.events = {str(event.id): event for event in events or []}
        self.updates: List[Event] = []
        self.list_calls = 0
        self.fail_updates = fail_updates

    def list(self, start: datetime, end: datetime) -> List[Event]:
        self.list_calls += 1
        return list(self.events.values())

    def create(self, draft: EventDraft) -> Event:
        event = draft.with_id(str(uuid4()))
        self.events[str(event.id)] = event
        return event

    def update(self, event: Event) -> Event:
        self.updates.append(event)
        if self.fail_updates:
            raise ConnectionError("store offline")
        self.events[str(event.id)] = event
        return event

    def delete(self, event_id) -> None:
        from calgrid.data import EventNotFoundError

        if self.events.pop(str(event_id), None) is None:
            raise EventNotFoundError(f"Event {event_id} not found.")


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_event(event_id, start, end=None, *, all_day=False, title=None) -> Event:
    return Event(id=event_id, title=title or f"Event {event_id}", start=start, end=end, all_day=all_day)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore(
        [
            make_event("meeting", "2023-10-27T10:00:00", "2023-10-27T11:00:00"),
            make_event("lunch", "2023-10-27T12:15:00", "2023-10-27T13:00:00"),
            make_event("holiday", "2023-10-28T00:00:00", all_day=True),
        ]
    )


@pytest.fixture
def buckets(store: RecordingStore) -> BucketMap:
    return index_events(store.events.values())


@pytest.fixture
def engine(buckets: BucketMap, store: RecordingStore, clock: FakeClock) -> DragEngine:
    return DragEngine(buckets, store, clock=clock)


@pytest.fixture
def service(store: RecordingStore, clock: FakeClock) -> CalendarService:
    context = ServiceContext(settings=get_settings(), store=store, clock=clock)
    return CalendarService(context)


@pytest.fixture
def rollback_service(store: RecordingStore, clock: FakeClock) -> CalendarService:
    settings = get_settings()
    settings = replace(settings, grid=replace(settings.grid, rollback_on_persist_failure=True))
    store.fail_updates = True
    return CalendarService(ServiceContext(settings=settings, store=store, clock=clock))
