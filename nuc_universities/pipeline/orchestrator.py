"""Scrape orchestrator -- fans out one worker per source, publishes the merge."""

from __future__ import annotations

import itertools
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from nuc_universities.data.collection import CollectionStore
from nuc_universities.data.models import Source, University
from nuc_universities.pipeline.source_worker import SourceResult, SourceWorker
from nuc_universities.pipeline.status import CycleStatus
from nuc_universities.scrapers.fetcher import FetchError, SourceFetcher
from nuc_universities.scrapers.row_extractor import DEFAULT_ROW_SELECTOR

logger = logging.getLogger("nuc_universities")


@dataclass
class CycleSummary:
    """What one scrape cycle produced."""

    cycle: int
    count: int = 0
    succeeded: int = 0
    failed: int = 0
    published: bool = False
    errors: list[FetchError] = field(default_factory=list)
    elapsed: float = 0.0


class Orchestrator:
    """Run scrape cycles over all configured sources.

    Every source gets its own worker thread, so a slow listing page only
    delays the cycle and never blocks its siblings. Results are joined,
    failures are logged per source, and the merged records replace the
    store's snapshot in one step.

    :meth:`start` launches a cycle in the background (used at server
    startup); :meth:`wait` blocks until no cycle is running, so callers
    and tests can await completion instead of racing it.
    """

    def __init__(
        self,
        sources: list[Source],
        fetcher: SourceFetcher,
        store: CollectionStore | None = None,
        config: dict[str, Any] | None = None,
    ):
        self.sources = list(sources)
        self.fetcher = fetcher
        self.store = store or CollectionStore()
        self.config = config or {}
        self.row_selector = self.config.get("row_selector", DEFAULT_ROW_SELECTOR)

        self._cycle_counter = itertools.count(1)
        self._state_lock = threading.Lock()
        self._running = 0
        self._completed_any = False
        self._idle = threading.Event()
        self._idle.set()

        self._stop_event = threading.Event()
        self._refresh_thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def status(self) -> CycleStatus:
        with self._state_lock:
            if self._running:
                return CycleStatus.RUNNING
            if self._completed_any:
                return CycleStatus.COMPLETED
            return CycleStatus.IDLE

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no cycle is running.

        Returns:
            True if the orchestrator is idle, False if *timeout* expired.
        """
        return self._idle.wait(timeout)

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    def run_cycle(self) -> CycleSummary:
        """Scrape every source concurrently and publish the merged records."""
        cycle = self._begin_cycle()
        start = time.monotonic()
        try:
            results = self._scrape_all()
            summary = self._merge(cycle, results)
        finally:
            self._end_cycle()

        summary.elapsed = time.monotonic() - start
        logger.info(
            "Scrape cycle complete",
            extra={
                "cycle": cycle,
                "count": summary.count,
                "succeeded": summary.succeeded,
                "failed": summary.failed,
                "published": summary.published,
            },
        )
        return summary

    def start(self) -> threading.Thread:
        """Run one cycle on a background thread and return immediately."""
        # Mark running before the thread starts so wait() can't slip through
        with self._state_lock:
            self._running += 1
            self._idle.clear()

        def _target() -> None:
            try:
                self.run_cycle()
            except Exception:
                logger.exception("Background scrape cycle crashed")
            finally:
                self._end_cycle()

        thread = threading.Thread(target=_target, name="scrape-cycle", daemon=True)
        thread.start()
        return thread

    def start_periodic(self, interval: float) -> threading.Thread:
        """Re-run a cycle every *interval* seconds until :meth:`stop`."""
        if interval <= 0:
            raise ValueError("interval must be > 0")

        def _loop() -> None:
            while not self._stop_event.wait(interval):
                try:
                    self.run_cycle()
                except Exception:
                    logger.exception("Periodic scrape cycle crashed")

        self._stop_event.clear()
        self._refresh_thread = threading.Thread(
            target=_loop, name="scrape-refresh", daemon=True
        )
        self._refresh_thread.start()
        return self._refresh_thread

    def stop(self) -> None:
        """Stop periodic refreshes. In-flight cycles are left to finish."""
        self._stop_event.set()
        if self._refresh_thread is not None:
            self._refresh_thread.join(timeout=1)
            self._refresh_thread = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_cycle(self) -> int:
        with self._state_lock:
            self._running += 1
            self._idle.clear()
            return next(self._cycle_counter)

    def _end_cycle(self) -> None:
        with self._state_lock:
            self._running -= 1
            if self._running == 0:
                self._completed_any = True
                self._idle.set()

    def _scrape_all(self) -> list[SourceResult]:
        """Run every source worker and join on all of them, in source order."""
        if not self.sources:
            return []

        with ThreadPoolExecutor(
            max_workers=len(self.sources), thread_name_prefix="source"
        ) as executor:
            futures = [
                executor.submit(self._process_source, source)
                for source in self.sources
            ]
            return [future.result() for future in futures]

    def _process_source(self, source: Source) -> SourceResult:
        """Process a single source (runs in worker thread)."""
        worker = SourceWorker(
            source=source,
            fetcher=self.fetcher,
            row_selector=self.row_selector,
        )
        try:
            return worker.run()
        except Exception as e:
            logger.error(
                "Worker crashed",
                extra={"url": source.url, "error": str(e)},
            )
            return SourceResult(
                source=source,
                error=FetchError(url=source.url, message=str(e) or type(e).__name__),
            )

    def _merge(self, cycle: int, results: list[SourceResult]) -> CycleSummary:
        summary = CycleSummary(cycle=cycle)
        universities: list[University] = []

        for result in results:
            if result.ok:
                summary.succeeded += 1
                universities.extend(result.universities)
            else:
                summary.failed += 1
                summary.errors.append(result.error)
                logger.error(
                    "Source scrape failed",
                    extra={
                        "url": result.source.url,
                        "university_type": result.source.university_type.value,
                        "error": result.error.message,
                    },
                )

        summary.count = len(universities)
        summary.published = self.store.publish(
            universities, cycle=cycle, errors=summary.errors
        )
        return summary
