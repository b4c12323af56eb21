"""Fixed-size worker pool that runs one video pipeline per task.

Discovery submits descriptors onto a single unbounded queue. Each worker
takes one video at a time and runs it to completion, so the pool size is
also the ceiling on concurrent ffmpeg/ffprobe processes. ``close()`` puts
one stop marker per worker behind the real work and ``join()`` waits for
every worker to drain the queue.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from .contracts import ContactSheetConfig, VideoDescriptor
from .errors import ContactSheetError

logger = logging.getLogger(__name__)

_STOP = object()


@dataclass
class DispatchSummary:
    succeeded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, outcome: str, filename: str) -> None:
        with self._lock:
            getattr(self, outcome).append(filename)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.skipped) + len(self.failed)


class Dispatcher:
    """Bounded pool of worker threads sharing one task queue.

    ``process`` returns ``None`` for a skipped video and anything else on
    success. Exceptions are logged and counted; they never stop a worker.
    """

    def __init__(self, config: ContactSheetConfig, process: Callable[[VideoDescriptor], Any]):
        self.workers = config.workers
        self._process = process
        self._queue: queue.Queue = queue.Queue()
        self._threads: list[threading.Thread] = []
        self._closed = False
        self.summary = DispatchSummary()

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Dispatcher already started")
        if self._closed:
            raise RuntimeError("Dispatcher is closed")
        logger.info(f"Starting {self.workers} sheet workers")
        for worker_id in range(1, self.workers + 1):
            thread = threading.Thread(
                target=self._work, args=(worker_id,), name=f"sheet-worker-{worker_id}", daemon=True
            )
            thread.start()
            self._threads.append(thread)

    def submit(self, descriptor: VideoDescriptor) -> None:
        if self._closed:
            raise RuntimeError("Dispatcher is closed")
        logger.info(f"Adding {descriptor.filename} to queue")
        self._queue.put(descriptor)

    def close(self) -> None:
        """Stop accepting work; workers exit once the queue is drained."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._queue.put(_STOP)

    def join(self) -> DispatchSummary:
        """Block until every submitted video has been processed."""
        if not self._threads:
            raise RuntimeError("Dispatcher was never started")
        if not self._closed:
            self.close()
        for thread in self._threads:
            thread.join()
        logger.info(
            f"Processed {self.summary.total} videos: {len(self.summary.succeeded)} ok, "
            f"{len(self.summary.skipped)} skipped, {len(self.summary.failed)} failed"
        )
        return self.summary

    def __enter__(self) -> Dispatcher:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.join()

    def _work(self, worker_id: int) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._run_one(worker_id, item)
            finally:
                self._queue.task_done()

    def _run_one(self, worker_id: int, descriptor: VideoDescriptor) -> None:
        logger.info(f"Worker {worker_id} processing {descriptor.filename}")
        try:
            result = self._process(descriptor)
        except ContactSheetError as exc:
            logger.error(f"[{exc.stage}] {descriptor.filename} failed: {exc}")
            self.summary.record("failed", descriptor.filename)
        except Exception:
            logger.exception(f"Worker {worker_id}: unexpected error on {descriptor.filename}")
            self.summary.record("failed", descriptor.filename)
        else:
            self.summary.record("skipped" if result is None else "succeeded", descriptor.filename)
