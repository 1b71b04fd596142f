from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "calgrid"
APP_AUTHOR = "calgrid"
DATA_DIR = Path(os.getenv("CALGRID_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))
EVENTS_FILE = DATA_DIR / "events.json"

# Grid geometry
HOURS = 25
SLOTS_PER_HOUR = 4
SLOT_MINUTES = 60 // SLOTS_PER_HOUR
CELL_WIDTH = 120
CELL_HEIGHT = 15
EVENT_ROW_HEIGHT = 22
DEFAULT_START_HOUR = 9

# Scheduling defaults
DEFAULT_EVENT_MINUTES = 15
ALL_DAY_DROP_MINUTES = 60
DROP_DEDUPE_MS = 300

EVENT_TYPES = (
    "birthday",
    "holiday",
    "meeting",
    "other",
    "personal",
    "reminder",
    "task",
    "work",
)


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
