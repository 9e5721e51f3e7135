# services/pending_delete.py
"""
Undoable delete - a deletion is held back for a short window so it can be
cancelled. Only one deletion is pending at a time; scheduling another one
drops the previous.

The deferred run is a one-shot APScheduler "date" job on the app's event loop.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Hashable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from constants.station_config import UNDO_DELETE_SECONDS

logger = logging.getLogger(__name__)


def job_id_for(key: Hashable) -> str:
    parts = key if isinstance(key, tuple) else (key,)
    return "delete:" + ":".join(str(p) for p in parts)


class PendingDeletion:
    """A scheduled deletion for one row, cleared on cancel or completion."""

    def __init__(self, key: Hashable, execute_at: datetime):
        self.key = key
        self.execute_at = execute_at
        self.job_id = job_id_for(key)

    def __repr__(self):
        return f"PendingDeletion(key={self.key!r}, execute_at={self.execute_at.isoformat()})"


class PendingDeleteManager:
    def __init__(self, delay: float = UNDO_DELETE_SECONDS):
        self.delay = delay
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._pending: Optional[PendingDeletion] = None

    @property
    def pending(self) -> Optional[PendingDeletion]:
        return self._pending

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    # ---------- lifecycle (app startup / shutdown) ----------
    def start(self):
        """Start a scheduler bound to the running event loop."""
        if self.running:
            return
        self.scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
        self.scheduler.start()
        logger.info("⏱️  Deletion scheduler started")

    def shutdown(self):
        if self.scheduler is None:
            return
        if self._pending is not None:
            self.cancel()
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.scheduler = None
        logger.info("Deletion scheduler stopped")

    # ---------- pending slot ----------
    def schedule(self, key: Hashable, action: Callable[[], Awaitable[Any]]) -> PendingDeletion:
        if not self.running:
            raise RuntimeError("Deletion scheduler is not running")

        if self._pending is not None:
            logger.info(f"Replacing pending deletion {self._pending.key} with {key}")
            self.cancel()

        pending = PendingDeletion(key, datetime.now(timezone.utc) + timedelta(seconds=self.delay))
        self.scheduler.add_job(
            self._run,
            "date",
            run_date=pending.execute_at,
            args=[pending, action],
            id=pending.job_id,
            replace_existing=True,
        )
        self._pending = pending
        logger.info(f"⏳ Deletion of {key} scheduled in {self.delay:g}s")
        return pending

    def cancel(self, key: Optional[Hashable] = None) -> bool:
        pending = self._pending
        if pending is None:
            return False
        if key is not None and pending.key != key:
            return False

        try:
            self.scheduler.remove_job(pending.job_id)
        except JobLookupError:
            # already handed to the executor; the job clears the slot itself
            return False

        self._pending = None
        logger.info(f"↩️  Deletion of {pending.key} cancelled")
        return True

    async def _run(self, pending: PendingDeletion, action: Callable[[], Awaitable[Any]]):
        # past the window: no longer cancellable
        if self._pending is pending:
            self._pending = None

        try:
            await action()
        except Exception:
            logger.exception(f"❌ Deferred deletion of {pending.key} failed")
