from datetime import datetime, timezone

import pytest

from calgrid.core import BucketMap, index_events
from calgrid.domain import Event


def test_groups_events_by_quarter_hour():
    events = [
        {"id": 1, "title": "Event 1", "start": "2023-10-27T10:00:00", "end": "2023-10-27T10:30:00"},
        {"id": 2, "title": "Event 2", "start": "2023-10-27T10:15:00", "end": "2023-10-27T10:45:00"},
    ]

    buckets = index_events(events)

    assert [ev.title for ev in buckets["event-2023-10-27-10-0"]] == ["Event 1"]
    assert [ev.title for ev in buckets["event-2023-10-27-10-1"]] == ["Event 2"]
    assert buckets["event-2023-10-27-10-0"][0].id == 1


@pytest.mark.parametrize(
    "start, key",
    [
        ("2023-10-27T10:00:00", "event-2023-10-27-10-0"),
        ("2023-10-27T10:15:00", "event-2023-10-27-10-1"),
        ("2023-10-27T10:44:00", "event-2023-10-27-10-2"),
        ("2023-10-27T10:59:00", "event-2023-10-27-10-3"),
        ("2023-10-27T09:05:00", "event-2023-10-27-9-0"),
    ],
)
def test_quarter_slot_keying(start, key):
    buckets = index_events([Event(id="a", title="a", start=start)])
    assert buckets.keys() == [key]


@pytest.mark.parametrize("start", ["invalid-date", None, "", "2023-13-40T10:00:00"])
def test_unparsable_start_is_dropped(start):
    buckets = index_events(
        [
            Event(id="bad", title="Invalid Event", start=start),
            Event(id="good", title="Valid", start="2023-10-27T08:00:00"),
        ]
    )
    assert buckets.locate("bad") is None
    assert all(ev.id != "bad" for events in buckets.snapshot().values() for ev in events)
    assert buckets.locate("good") == "event-2023-10-27-8-0"


def test_missing_end_defaults_to_fifteen_minutes():
    buckets = index_events([{"id": 1, "title": "No End Event", "start": "2023-10-27T10:00:00"}])
    event = buckets["event-2023-10-27-10-0"][0]
    assert event.duration == 15
    assert event.end == datetime(2023, 10, 27, 10, 15)


def test_invalid_end_defaults_and_negative_duration_clamps():
    buckets = index_events(
        [
            Event(id="x", title="x", start="2023-10-27T10:00:00", end="soon"),
            Event(id="y", title="y", start="2023-10-27T11:00:00", end="2023-10-27T10:00:00"),
        ]
    )
    assert buckets.find("x").duration == 15
    assert buckets.find("y").duration == 0


def test_all_day_events_use_date_key():
    buckets = index_events(
        [
            {"id": 1, "title": "All Day Event", "start": "2023-10-27T00:00:00", "allDay": True},
            {"id": 2, "title": "Late All Day", "start": "2023-10-27T18:45:00", "allDay": True},
        ]
    )
    events = buckets["all-day-2023-10-27"]
    assert [ev.title for ev in events] == ["All Day Event", "Late All Day"]
    assert all(ev.all_day for ev in events)


def test_arrival_order_and_single_placement():
    events = [Event(id=str(n), title=str(n), start="2023-10-27T10:05:00") for n in (3, 1, 2)]
    buckets = index_events(events)
    assert [ev.id for ev in buckets["event-2023-10-27-10-0"]] == ["3", "1", "2"]
    assert len(buckets) == 1


def test_description_defaults_to_title_and_type_to_other():
    event = index_events([{"id": 5, "title": "Standup", "start": "2023-10-27T09:00:00"}]).find(5)
    assert event.description == "Standup"
    assert event.type == "other"


def test_aware_start_is_converted_to_local_time():
    start = datetime(2023, 10, 27, 10, 0, tzinfo=timezone.utc)
    event = index_events([Event(id="z", title="z", start=start.isoformat())]).find("z")
    assert event.start == start.astimezone().replace(tzinfo=None)
    assert event.start.tzinfo is None


def test_rehydrates_injected_bucket_map():
    shared = BucketMap()
    index_events([Event(id="old", title="old", start="2023-10-26T10:00:00")], shared)
    result = index_events([Event(id="new", title="new", start="2023-10-27T10:00:00")], shared)
    assert result is shared
    assert shared.locate("old") is None
    assert shared.locate("new") == "event-2023-10-27-10-0"


def test_integer_and_string_ids_stay_distinct():
    buckets = index_events(
        [
            Event(id=1, title="int one", start="2023-10-27T10:00:00"),
            Event(id="1", title="str one", start="2023-10-27T14:00:00"),
        ]
    )

    placed = [ev for events in buckets.snapshot().values() for ev in events]
    assert sorted(ev.title for ev in placed) == ["int one", "str one"]
    assert buckets.locate(1) == "event-2023-10-27-10-0"
    assert buckets.locate("1") == "event-2023-10-27-14-0"
    assert buckets.find(1).id == 1


def test_repeated_id_is_kept_and_reported(caplog):
    with caplog.at_level("WARNING", logger="calgrid.core.buckets"):
        buckets = index_events(
            [
                Event(id="dup", title="first", start="2023-10-27T10:00:00"),
                Event(id="dup", title="second", start="2023-10-27T11:00:00"),
            ]
        )

    assert buckets.keys() == ["event-2023-10-27-10-0", "event-2023-10-27-11-0"]
    assert buckets.locate("dup") == "event-2023-10-27-11-0"
    assert "Duplicate event id 'dup'" in caplog.text


@pytest.mark.parametrize("flag, expected", [("false", False), ("0", False), ("true", True), ("True", True), (1, True)])
def test_all_day_flag_accepts_string_values(flag, expected):
    event = index_events([{"id": "s", "title": "s", "start": "2023-10-27T09:00:00", "allDay": flag}]).find("s")
    assert event.all_day is expected
