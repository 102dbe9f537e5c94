from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable, Optional

from src.analytics.employee_directory import build_snapshot
from src.core.errors import UpstreamFetchError
from src.models.employee_directory import DirectorySnapshot
from src.repositories.employee_report_repository import EmployeeReportRepository
from src.repositories.refresh_state_repository import RefreshStateRepository

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EmployeeDirectoryCache:
    """In-memory employee directory snapshot with a freshness window.

    The snapshot is replaced wholesale by ``refresh()``. Readers always see
    either the previous complete snapshot or the new complete one, and at most
    one reload runs at a time.
    """

    def __init__(
        self,
        report_repository: EmployeeReportRepository,
        state_repository: RefreshStateRepository,
        freshness_window: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.report_repository = report_repository
        self.state_repository = state_repository
        self.freshness_window = freshness_window
        self.clock = clock
        self._snapshot: Optional[DirectorySnapshot] = None
        self._state_persisted = False
        self._refresh_lock = Lock()

    @property
    def current(self) -> Optional[DirectorySnapshot]:
        return self._snapshot

    def now(self) -> datetime:
        return self.clock()

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        snapshot = self._snapshot
        if snapshot is None:
            return True
        refreshed_at = snapshot.loaded_at
        # A state file this process failed to write says nothing about its snapshot.
        if self._state_persisted:
            last_refresh = self.state_repository.get_last_refresh()
            if last_refresh is None:
                return True
            refreshed_at = min(refreshed_at, last_refresh)
        return (now or self.clock()) - refreshed_at > self.freshness_window

    def snapshot(self) -> DirectorySnapshot:
        snapshot = self._snapshot
        if snapshot is not None and not self.is_stale():
            return snapshot
        with self._refresh_lock:
            # Another request may have finished a reload while this one waited.
            if self._snapshot is not None and not self.is_stale():
                return self._snapshot
            return self._reload()

    def refresh(self) -> DirectorySnapshot:
        with self._refresh_lock:
            return self._reload()

    def _reload(self) -> DirectorySnapshot:
        started_at = self.clock()
        logger.info("Reloading employee directory snapshot")
        try:
            rows = self.report_repository.fetch_rows()
            snapshot = build_snapshot(rows, started_at)
        except UpstreamFetchError as exc:
            logger.warning("Employee directory reload failed: %s", exc.message)
            raise
        except ValueError as exc:
            logger.warning("Employee directory reload failed: %s", exc)
            raise UpstreamFetchError(f"Malformed employee report: {exc}") from exc
        self._state_persisted = self.state_repository.set_last_refresh(started_at)
        self._snapshot = snapshot
        logger.info(
            "Employee directory snapshot loaded: %d employees, %d departments",
            len(snapshot.employees),
            len(snapshot.departments),
        )
        return snapshot
