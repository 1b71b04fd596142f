"""Scheduling and layout engine: cell keys, slot indexing, column layout, drag reconciliation."""

from .config import APP_NAME, DATA_DIR, EVENTS_FILE, ensure_data_dir
from .cell_keys import (
    EVENT_LIST,
    AllDayCellKey,
    CellKey,
    TimedCellKey,
    build_cell_key,
    parse_cell_key,
)
from .buckets import BucketMap
from .indexer import index_events, schedule_event
from .layout import LayoutEntry, layout_events
from .geometry import DragPreview, GeometryProvider, Transform, snap_to_quarter_hour
from .drag import DragEngine, DragState, DropDeduplicator, DropOutcome, PersistResult
from .views import fetch_token, view_range, week_days

__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "EVENTS_FILE",
    "EVENT_LIST",
    "AllDayCellKey",
    "BucketMap",
    "CellKey",
    "DragEngine",
    "DragPreview",
    "DragState",
    "DropDeduplicator",
    "DropOutcome",
    "GeometryProvider",
    "LayoutEntry",
    "PersistResult",
    "TimedCellKey",
    "Transform",
    "build_cell_key",
    "ensure_data_dir",
    "fetch_token",
    "index_events",
    "layout_events",
    "parse_cell_key",
    "schedule_event",
    "snap_to_quarter_hour",
    "view_range",
    "week_days",
]
