"""Background task for sweeping chunks left behind by abandoned uploads."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from common.logging_config import get_logger
from common.types import SweepResult
from gridstore.config import ORPHAN_GRACE_SECONDS, SWEEP_INTERVAL_SECONDS
from gridstore.repositories.document_collection import DocumentCollection
from gridstore.utils import utc_now

logger = get_logger(__name__)


class OrphanSweeper:
    """
    Removes chunks whose file id has no metadata record.

    Chunks still covered by a pending upload younger than the grace period
    are left alone, since that upload may yet publish its metadata.
    """

    def __init__(
        self,
        files: DocumentCollection,
        chunks: DocumentCollection,
        pending: DocumentCollection,
        grace_seconds: int = ORPHAN_GRACE_SECONDS,
        interval_seconds: int = SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize sweeper.

        Args:
            files: Files collection
            chunks: Chunks collection
            pending: Pending uploads collection
            grace_seconds: Minimum age of a pending upload before its chunks are swept
            interval_seconds: Time between sweeps when running in the background
            clock: Source of the current time
        """
        self.files = files
        self.chunks = chunks
        self.pending = pending
        self.grace_seconds = grace_seconds
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._running = False
        self._task = None

    @classmethod
    def for_store(cls, store, **kwargs) -> "OrphanSweeper":
        return cls(store.files, store.chunks, store.pending, **kwargs)

    def _is_fresh(self, pending_record: Optional[dict], now: datetime) -> bool:
        if pending_record is None:
            return False
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        started_at = datetime.fromisoformat(pending_record["startedAt"])
        return now - started_at < timedelta(seconds=self.grace_seconds)

    def sweep(self, now: Optional[datetime] = None) -> SweepResult:
        """
        Run one sweep over the chunks and pending collections.

        Args:
            now: Reference time for the grace period (defaults to the clock)

        Returns:
            SweepResult with the swept file ids and removed chunk count
        """
        if now is None:
            now = self.clock()

        swept = []
        removed_chunks = 0
        skipped = 0

        for files_id in self.chunks.distinct("files_id"):
            # Pending before files: an upload publishes metadata before it drops its pending record.
            if self._is_fresh(self.pending.find_one({"_id": files_id}), now):
                skipped += 1
                continue

            if self.files.count({"_id": files_id}) > 0:
                continue

            removed = self.chunks.remove({"files_id": files_id})
            self.pending.remove({"_id": files_id})
            removed_chunks += removed
            swept.append(files_id)
            logger.info(f"Swept {removed} orphaned chunks [files_id={files_id}]")

        for record in list(self.pending.find()):
            if self.files.count({"_id": record["_id"]}) > 0 or not self._is_fresh(record, now):
                self.pending.remove({"_id": record["_id"]})
                logger.debug(f"Removed stale pending upload record [file_id={record['_id']}]")

        if swept:
            logger.info(f"Sweep complete: {len(swept)} files, {removed_chunks} chunks removed, {skipped} pending skipped")
        else:
            logger.debug(f"Sweep complete: nothing to remove, {skipped} pending skipped")

        return SweepResult(swept_file_ids=tuple(swept), removed_chunks=removed_chunks, skipped_pending=skipped)

    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            logger.warning("Sweep task already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Started orphaned chunk sweep task (interval: {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("Stopped orphaned chunk sweep task")

    async def _run(self) -> None:
        """Main loop for sweep task."""
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)

                if not self._running:
                    break

                await asyncio.to_thread(self.sweep)

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in sweep task: {e}", exc_info=True)
