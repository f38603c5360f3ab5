"""Run a merge off the event loop and stream its progress into an asyncio queue."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Sequence

from cbztools.archive.config import MergeSettings
from cbztools.archive.events import MergeEvent
from cbztools.archive.merger import ArchiveMerger
from cbztools.archive.models import MergeResult


LOGGER = logging.getLogger(__name__)


class MergeWorker:
    """Execute one merge per ``run`` call on an executor thread.

    Events are handed to the loop with ``call_soon_threadsafe`` and never
    block the merge; a full bounded queue drops the event. Started merges are
    not cancellable.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        queue: asyncio.Queue[MergeEvent],
        settings: MergeSettings | None = None,
    ) -> None:
        self._loop = loop
        self._queue = queue
        self._settings = settings or MergeSettings()

    def _put(self, event: MergeEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            LOGGER.debug("Progress queue full, dropping %s event", event.stage.value)

    def _emit(self, event: MergeEvent) -> None:
        self._loop.call_soon_threadsafe(self._put, event)

    def _merger(self) -> ArchiveMerger:
        return ArchiveMerger(self._settings, listener=self._emit)

    async def run(self, source_paths: Sequence[str | Path], output_dir: str | Path) -> MergeResult:
        merger = self._merger()
        return await self._loop.run_in_executor(None, merger.merge, list(source_paths), output_dir)

    async def run_directory(self, input_dir: str | Path, output_dir: str | Path) -> MergeResult:
        merger = self._merger()
        return await self._loop.run_in_executor(None, merger.merge_directory, input_dir, output_dir)
