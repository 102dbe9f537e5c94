from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Optional

from src.core.config import get_settings

logger = logging.getLogger(__name__)


class RefreshStateRepository:
    """Persists the directory's last successful refresh as one ISO-8601 string."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or get_settings().directory_refresh_state_path

    def get_last_refresh(self) -> Optional[datetime]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as state_file:
                raw = state_file.read().strip()
        except OSError:
            return None
        if not raw:
            return None
        try:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    def set_last_refresh(self, value: datetime) -> bool:
        """Write the timestamp; returns False when the state file could not be written."""
        temp_path = f"{self.path}.tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as state_file:
                state_file.write(value.isoformat())
            os.replace(temp_path, self.path)
        except OSError as exc:
            logger.warning("Could not persist directory refresh time to %s: %s", self.path, exc)
            return False
        return True
