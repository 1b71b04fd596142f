"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, GridSettings, StorageSettings, SupabaseSettings, UiSettings, get_settings

__all__ = ["AppSettings", "GridSettings", "StorageSettings", "SupabaseSettings", "UiSettings", "get_settings"]
