import pytest
from fastapi.testclient import TestClient

from calgrid.api import api_state, call_api, get_api_functions, register_api
from calgrid.config import get_settings
from calgrid.data import EventNotFoundError
from calgrid.services import ServiceContext
from calgrid.services.http import app

from conftest import make_event


@pytest.fixture
def client(store, clock):
    api_state.configure(ServiceContext(settings=get_settings(), store=store, clock=clock))
    return TestClient(app)


def _call(client, name, **arguments):
    return client.post(f"/api/functions/{name}", json={"arguments": arguments})


def test_lists_registered_functions(client):
    response = client.get("/api/functions")
    assert response.status_code == 200
    functions = {entry["name"]: entry for entry in response.json()["functions"]}
    assert {"fetch_view", "drag_start", "drag_end", "month_drag_end", "day_layout"} <= set(functions)
    assert functions["fetch_view"]["required"] == ["view", "day"]


def test_fetch_then_read_grid(client):
    fetched = _call(client, "fetch_view", view="week", day="2023-10-27").json()["result"]
    assert fetched["fetched"] is True
    assert fetched["start"] == "2023-10-23T00:00:00"

    grid = _call(client, "grid_for_day", day="2023-10-27").json()["result"]["buckets"]
    assert grid["event-2023-10-27-10-0"][0]["id"] == "meeting"
    assert grid["event-2023-10-27-10-0"][0]["allDay"] is False

    layout = _call(client, "day_layout", day="2023-10-27").json()["result"]["layout"]
    assert layout["meeting"] == {"width": 100.0, "left": 0.0}


def test_drag_round_trip(client, store):
    _call(client, "fetch_view", view="day", day="2023-10-27")
    started = _call(client, "drag_start", event_id="meeting").json()["result"]
    assert started["dragging"] is True
    assert started["preview"]["column_size"] == 120

    over = _call(client, "drag_over", key="event-2023-10-27-14-1").json()["result"]
    assert over["cell"]["slot"] == 1

    outcome = _call(client, "drag_end", key="event-2023-10-27-14-1").json()["result"]
    assert outcome["action"] == "moved"
    assert outcome["moved"]["start"] == "2023-10-27T14:15:00"
    assert outcome["persisted"]["ok"] is True
    assert store.events["meeting"].start == "2023-10-27T14:15:00"


def test_create_and_delete_events(client):
    payload = {"title": "Retro", "start": "2023-10-27T16:00:00", "allDay": False}
    created = _call(client, "create_event", event=payload).json()["result"]["event"]
    assert created["title"] == "Retro"

    deleted = _call(client, "delete_event", event_id=created["id"]).json()["result"]
    assert deleted["deleted"] is True


def test_unknown_function_is_404(client):
    assert _call(client, "nope").status_code == 404


def test_bad_arguments_are_400(client):
    assert _call(client, "fetch_view", view="week").status_code == 400
    assert _call(client, "fetch_view", view="decade", day="2023-10-27").status_code == 400
    assert _call(client, "grid_for_day", day="27/10/2023").status_code == 400


def test_registry_rejects_duplicate_names():
    with pytest.raises(ValueError):
        register_api("fetch_view", description="again", category="grid")(lambda: None)


def test_call_api_reports_missing_arguments():
    with pytest.raises(ValueError, match="day"):
        call_api("grid_for_day")
    assert all(fn.category for fn in get_api_functions())


def test_update_event_is_visible_in_grid_without_refetch(client, store):
    _call(client, "fetch_view", view="week", day="2023-10-27")
    payload = {"id": "meeting", "title": "Meeting", "start": "2023-10-27T16:00:00", "end": "2023-10-27T17:00:00"}

    assert _call(client, "update_event", event=payload).status_code == 200

    grid = _call(client, "grid_for_day", day="2023-10-27").json()["result"]["buckets"]
    assert "event-2023-10-27-10-0" not in grid
    assert grid["event-2023-10-27-16-0"][0]["title"] == "Meeting"
    assert store.list_calls == 1


def test_missing_event_maps_to_404(client, store, monkeypatch):
    def missing(event):
        raise EventNotFoundError(f"Event {event.id} not found.")

    monkeypatch.setattr(store, "update", missing)
    response = _call(client, "update_event", event={"id": 99, "title": "Gone", "start": "2023-10-27T09:00:00"})
    assert response.status_code == 404
    assert "99" in response.json()["detail"]


def test_integer_ids_survive_the_drag_flow(client, store):
    store.events["7"] = make_event(7, "2023-10-27T08:00:00", "2023-10-27T08:30:00")
    _call(client, "fetch_view", view="day", day="2023-10-27")

    assert _call(client, "drag_start", event_id=7).json()["result"]["dragging"] is True
    outcome = _call(client, "drag_end", key="event-2023-10-27-9-0").json()["result"]
    assert outcome["event_id"] == 7
    assert outcome["moved"]["id"] == 7
    assert store.events["7"].start == "2023-10-27T09:00:00"


def test_health_reports_store_and_grid(client):
    _call(client, "fetch_view", view="week", day="2023-10-27")
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["buckets"] == 3
    assert body["dragging"] is False
