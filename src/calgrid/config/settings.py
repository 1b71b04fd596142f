from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.config import (
    ALL_DAY_DROP_MINUTES,
    APP_NAME,
    DEFAULT_EVENT_MINUTES,
    DROP_DEDUPE_MS,
    EVENTS_FILE,
)

load_dotenv()


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    events_file: Path
    events_table: str


@dataclass(frozen=True)
class GridSettings:
    default_event_minutes: int
    all_day_drop_minutes: int
    drop_dedupe_ms: int
    rollback_on_persist_failure: bool


@dataclass(frozen=True)
class UiSettings:
    app_name: str


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    grid: GridSettings
    ui: UiSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _bool_from_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    storage = StorageSettings(
        backend=os.getenv("CALGRID_STORE", "json").lower(),
        events_file=Path(os.getenv("CALGRID_EVENTS_FILE") or EVENTS_FILE),
        events_table=os.getenv("SUPABASE_EVENTS_TABLE", "calendar_events"),
    )

    grid = GridSettings(
        default_event_minutes=_int_from_env("CALGRID_DEFAULT_EVENT_MINUTES", DEFAULT_EVENT_MINUTES),
        all_day_drop_minutes=_int_from_env("CALGRID_ALL_DAY_DROP_MINUTES", ALL_DAY_DROP_MINUTES),
        drop_dedupe_ms=_int_from_env("CALGRID_DROP_DEDUPE_MS", DROP_DEDUPE_MS),
        rollback_on_persist_failure=_bool_from_env("CALGRID_ROLLBACK_ON_PERSIST_FAILURE"),
    )

    ui = UiSettings(app_name=os.getenv("CALGRID_APP_NAME", APP_NAME))

    return AppSettings(supabase=supabase, storage=storage, grid=grid, ui=ui)
