"""Process-wide university collection, published as immutable snapshots."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from nuc_universities.data.models import University
from nuc_universities.scrapers.fetcher import FetchError

logger = logging.getLogger("nuc_universities")


@dataclass(frozen=True)
class Snapshot:
    """One published version of the collection.

    Attributes:
        universities: Records in source-configuration, then row order.
        cycle: Number of the scrape cycle that produced it (0 = initial).
        completed_at: When the cycle finished, or None for the initial
            empty snapshot.
        errors: Per-source fetch failures seen by the cycle.
    """

    universities: tuple[University, ...] = ()
    cycle: int = 0
    completed_at: datetime | None = None
    errors: tuple[FetchError, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.universities)


class CollectionStore:
    """Hold the current :class:`Snapshot` behind a single reference.

    Readers call :attr:`snapshot` and work on the returned object; it is
    never mutated, so no lock is needed on the read path. Writers go
    through :meth:`publish`, which swaps the reference in one step and
    refuses snapshots from a cycle older than the one already published.
    """

    def __init__(self) -> None:
        self._snapshot = Snapshot()
        self._publish_lock = threading.Lock()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def publish(
        self,
        universities: list[University] | tuple[University, ...],
        cycle: int,
        errors: list[FetchError] | tuple[FetchError, ...] = (),
    ) -> bool:
        """Replace the collection with *universities*.

        Returns:
            True if the snapshot was applied, False if a newer cycle had
            already been published.
        """
        snapshot = Snapshot(
            universities=tuple(universities),
            cycle=cycle,
            completed_at=datetime.now(timezone.utc),
            errors=tuple(errors),
        )
        with self._publish_lock:
            if cycle < self._snapshot.cycle:
                logger.info(
                    "Discarding stale scrape cycle",
                    extra={"cycle": cycle, "current_cycle": self._snapshot.cycle},
                )
                return False
            self._snapshot = snapshot
        return True
