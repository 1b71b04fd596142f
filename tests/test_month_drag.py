from datetime import datetime

from calgrid.core import EVENT_LIST, DragEngine, DropDeduplicator
from calgrid.domain import DropAction


def test_deduplicator_window(clock):
    dedupe = DropDeduplicator(300, clock)
    assert not dedupe.is_duplicate("1", "event-2023-10-29-0-0")
    clock.advance(0.1)
    assert dedupe.is_duplicate("1", "event-2023-10-29-0-0")
    assert not dedupe.is_duplicate("2", "event-2023-10-29-0-0")
    clock.advance(0.31)
    assert not dedupe.is_duplicate("2", "event-2023-10-29-0-0")


def test_month_drop_keeps_time_of_day(engine, buckets, store):
    engine.on_drag_start(buckets.find("lunch"))
    outcome = engine.on_month_drag_end("event-2023-10-30-0-0", source_id="lunch")

    assert outcome.action is DropAction.MOVED
    assert outcome.moved.start == datetime(2023, 10, 30, 12, 15)
    assert outcome.moved.end == datetime(2023, 10, 30, 13, 0)
    assert outcome.target_key == "event-2023-10-30-12-1"
    assert buckets.locate("lunch") == "event-2023-10-30-12-1"
    assert len(store.updates) == 1


def test_duplicate_month_drop_is_suppressed(engine, buckets, store, clock):
    engine.on_drag_start(buckets.find("meeting"))
    first = engine.on_month_drag_end("event-2023-10-29-0-0", source_id="meeting")
    after_first = buckets.snapshot()

    clock.advance(0.05)
    engine.on_drag_start(buckets.find("meeting"))
    second = engine.on_month_drag_end("event-2023-10-29-0-0", source_id="meeting")

    assert first.action is DropAction.MOVED
    assert second.action is DropAction.DUPLICATE
    assert buckets.snapshot() == after_first
    assert len(store.updates) == 1
    assert not engine.state.is_dragging


def test_repeat_after_window_is_processed(engine, buckets, store, clock):
    engine.on_drag_start(buckets.find("meeting"))
    engine.on_month_drag_end("event-2023-10-29-0-0", source_id="meeting")
    clock.advance(0.5)
    engine.on_drag_start(buckets.find("meeting"))
    outcome = engine.on_month_drag_end("event-2023-10-29-0-0", source_id="meeting")
    # Already on that date, so the second drop is a no-op rather than a duplicate.
    assert outcome.action is DropAction.IGNORED
    assert len(store.updates) == 1


def test_same_date_month_drop_is_a_no_op(engine, buckets, store):
    before = buckets.snapshot()
    engine.on_drag_start(buckets.find("meeting"))
    outcome = engine.on_month_drag_end("event-2023-10-27-0-0", source_id="meeting")
    assert outcome.action is DropAction.IGNORED
    assert buckets.snapshot() == before
    assert store.updates == []


def test_reentrant_month_drop_is_rejected(buckets, clock):
    class ReentrantStore:
        def __init__(self):
            self.engine = None
            self.inner = []
            self.updates = []

        def update(self, event):
            self.updates.append(event)
            self.inner.append(self.engine.on_month_drag_end("event-2023-11-01-0-0", source_id="other"))
            return event

    store = ReentrantStore()
    engine = DragEngine(buckets, store, clock=clock)
    store.engine = engine

    engine.on_drag_start(buckets.find("meeting"))
    outcome = engine.on_month_drag_end("event-2023-10-29-0-0", source_id="meeting")

    assert outcome.action is DropAction.MOVED
    assert [inner.action for inner in store.inner] == [DropAction.REENTRANT]
    assert len(store.updates) == 1
    assert not engine.state.is_dragging


def test_unscheduled_origin_falls_back_to_target_slot(engine, buckets):
    outsider = buckets.find("meeting").moved(id="outsider")
    engine.on_drag_start(outsider)
    outcome = engine.on_month_drag_end("event-2023-10-30-0-0", source_id="outsider")
    assert outcome.moved.start == datetime(2023, 10, 30, 0, 0)
    assert buckets.locate("outsider") == "event-2023-10-30-0-0"


def test_all_day_event_stays_all_day_in_month_view(engine, buckets):
    engine.on_drag_start(buckets.find("holiday"))
    outcome = engine.on_month_drag_end("event-2023-10-31-0-0", source_id="holiday")
    assert outcome.moved.all_day
    assert buckets.locate("holiday") == "all-day-2023-10-31"


def test_month_drop_on_unscheduled_list(engine, buckets):
    engine.on_drag_start(buckets.find("meeting"))
    outcome = engine.on_month_drag_end(EVENT_LIST, source_id="meeting")
    assert outcome.action is DropAction.UNSCHEDULED
    assert buckets.locate("meeting") is None


def test_malformed_month_target_clears_state(engine, buckets, store):
    engine.on_drag_start(buckets.find("meeting"))
    outcome = engine.on_month_drag_end("event-2023-10", source_id="meeting")
    assert outcome.action is DropAction.IGNORED
    assert not engine.state.is_dragging
    assert store.updates == []


def test_integer_and_string_sources_are_not_duplicates(clock):
    dedupe = DropDeduplicator(300, clock)
    assert not dedupe.is_duplicate(1, "event-2023-10-29-0-0")
    assert not dedupe.is_duplicate("1", "event-2023-10-29-0-0")
