# src/posematch/settings_cell.py
from __future__ import annotations
import threading
from typing import Optional

from .data_models import Settings


class SettingsCell:
    """
    Single-slot holder for the most recent Settings.

    A control thread publishes updates at any time; the frame thread takes one
    snapshot at the top of each frame. Older values are simply overwritten.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._lock = threading.Lock()
        self._settings = (settings or Settings()).model_copy()

    def publish(self, settings: Settings) -> None:
        with self._lock:
            self._settings = settings.model_copy()

    def update(self, **changes) -> Settings:
        """Apply a partial change; raises pydantic.ValidationError on bad values."""
        with self._lock:
            merged = Settings(**{**self._settings.model_dump(), **changes})
            self._settings = merged
            return merged.model_copy()

    def snapshot(self) -> Settings:
        with self._lock:
            return self._settings.model_copy()
