"""Side-by-side layout for events that share time on one day."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..domain import EventId, ScheduledEvent


@dataclass(frozen=True, slots=True)
class LayoutEntry:
    width: float
    left: float

    def to_dict(self) -> dict:
        return {"width": self.width, "left": self.left}


def _sort_key(event: ScheduledEvent):
    # Longer events first when starts coincide.
    return (event.start, -(event.end - event.start))


def _clusters(events: List[ScheduledEvent]) -> List[List[ScheduledEvent]]:
    clusters: list[list[ScheduledEvent]] = []
    current: list[ScheduledEvent] = []
    cluster_end = None
    for event in events:
        if current and event.start < cluster_end:
            current.append(event)
            if event.end > cluster_end:
                cluster_end = event.end
            continue
        if current:
            clusters.append(current)
        current = [event]
        cluster_end = event.end
    if current:
        clusters.append(current)
    return clusters


def _pack(cluster: List[ScheduledEvent], layout: Dict[EventId, LayoutEntry]) -> None:
    columns: list[list[ScheduledEvent]] = []
    for event in cluster:
        for column in columns:
            if event.start >= column[-1].end:
                column.append(event)
                break
        else:
            columns.append([event])

    width = 100 / len(columns)
    for index, column in enumerate(columns):
        for event in column:
            layout[event.id] = LayoutEntry(width=width, left=index * width)


def layout_events(events: Iterable[ScheduledEvent]) -> Dict[EventId, LayoutEntry]:
    """Compute ``width``/``left`` percentages per event id.

    Events are swept into clusters of transitively overlapping intervals
    (touching intervals do not overlap) and each cluster is packed greedily
    into equal-width columns. Callers pass the events of a single day.
    """

    ordered = sorted(events, key=_sort_key)
    layout: Dict[EventId, LayoutEntry] = {}
    for cluster in _clusters(ordered):
        _pack(cluster, layout)
    return layout


__all__ = ["LayoutEntry", "layout_events"]
