"""Per-source worker -- runs one listing page through fetch, extract, normalize."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from nuc_universities.data.models import Source, University
from nuc_universities.scrapers.fetcher import FetchError, SourceFetcher
from nuc_universities.scrapers.row_extractor import DEFAULT_ROW_SELECTOR, extract_rows
from nuc_universities.utils.normalize import normalize_row

logger = logging.getLogger("nuc_universities")


@dataclass(frozen=True)
class SourceResult:
    """Outcome of one source: its records, or the error that stopped it."""

    source: Source
    universities: tuple[University, ...] = ()
    error: FetchError | None = None
    skipped_rows: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class SourceWorker:
    """Process a single configured source into normalized records."""

    def __init__(
        self,
        source: Source,
        fetcher: SourceFetcher,
        row_selector: str = DEFAULT_ROW_SELECTOR,
    ):
        self.source = source
        self.fetcher = fetcher
        self.row_selector = row_selector

    def run(self) -> SourceResult:
        """Fetch the source and normalize every well-formed row.

        Returns:
            A :class:`SourceResult`; failures are carried in ``error``.
        """
        url = self.source.url
        logger.info(
            "Scraping source",
            extra={"url": url, "university_type": self.source.university_type.value},
        )

        document = self.fetcher.fetch(url)
        if isinstance(document, FetchError):
            return SourceResult(source=self.source, error=document)

        universities: list[University] = []
        skipped = 0
        for row in extract_rows(document, self.row_selector):
            try:
                universities.append(normalize_row(row, self.source.university_type))
            except ValidationError as e:
                # Row survived extraction but not the record invariants
                skipped += 1
                logger.debug(
                    "Skipping invalid row",
                    extra={"url": url, "university": row.name, "error": str(e)},
                )

        logger.info(
            "Source scraped",
            extra={"url": url, "count": len(universities), "skipped": skipped},
        )
        return SourceResult(
            source=self.source,
            universities=tuple(universities),
            skipped_rows=skipped,
        )
