from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..config import AppSettings, get_settings
from ..core import BucketMap, DragEngine, GeometryProvider
from ..data import EventStore, JsonEventStore, SupabaseEventStore, SupabaseGateway

logger = logging.getLogger(__name__)


def build_store(settings: AppSettings) -> EventStore:
    backend = settings.storage.backend
    if backend == "supabase":
        gateway = SupabaseGateway(settings.supabase)
        return SupabaseEventStore(gateway=gateway, table_name=settings.storage.events_table)
    if backend != "json":
        raise ValueError(f"Unknown event store backend: {backend!r}")
    return JsonEventStore(settings.storage.events_file)


@dataclass(slots=True)
class ServiceContext:
    """Owns the shared bucket map and wires it to the store and drag engine."""

    settings: AppSettings = field(default_factory=get_settings)
    store: Optional[EventStore] = None
    geometry: Optional[GeometryProvider] = None
    clock: Callable[[], float] = time.monotonic
    buckets: BucketMap = field(default_factory=BucketMap)
    drag: DragEngine = field(init=False)

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = build_store(self.settings)
            logger.debug("Using %s event store", self.settings.storage.backend)
        self.drag = DragEngine(
            self.buckets,
            self.store,
            all_day_drop_minutes=self.settings.grid.all_day_drop_minutes,
            dedupe_window_ms=self.settings.grid.drop_dedupe_ms,
            clock=self.clock,
            geometry=self.geometry,
        )
