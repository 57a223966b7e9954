"""Listing table row extraction."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from bs4 import BeautifulSoup, Tag

from nuc_universities.data.models import RawRow
from nuc_universities.utils.normalize import collapse_whitespace

logger = logging.getLogger("nuc_universities")

DEFAULT_ROW_SELECTOR = "tbody tr"
# lxml doesn't insert an implied <tbody>, so bare tables need this
FALLBACK_ROW_SELECTOR = "table tr"
MIN_CELLS = 5

# Column positions within a listing row (column 0 is the serial number).
NAME_COL = 1
VICE_CHANCELLOR_COL = 2
WEBSITE_COL = 3
YEAR_COL = 4


def extract_rows(
    document: BeautifulSoup | Tag,
    selector: str = DEFAULT_ROW_SELECTOR,
    min_cells: int = MIN_CELLS,
) -> Iterator[RawRow]:
    """Yield a :class:`RawRow` for every well-formed row in *document*.

    Rows with fewer than *min_cells* ``td`` cells, or with an empty name
    cell, are skipped. Text is whitespace-collapsed; the website is the
    ``href`` of the first anchor in its cell, or ``""``.

    When the default selector matches nothing, rows are taken from
    ``table tr`` instead; header rows there have no ``td`` cells and are
    skipped like any other short row.
    """
    rows = document.select(selector)
    if not rows and selector == DEFAULT_ROW_SELECTOR:
        rows = document.select(FALLBACK_ROW_SELECTOR)
        if rows:
            logger.debug("No tbody rows, falling back", extra={"rows": len(rows)})

    for index, row in enumerate(rows):
        cells = row.find_all("td")
        if len(cells) < min_cells:
            logger.debug(
                "Skipping malformed row",
                extra={"row": index, "cells": len(cells)},
            )
            continue

        name = _cell_text(cells[NAME_COL])
        if not name:
            logger.debug("Skipping row without a name", extra={"row": index})
            continue

        yield RawRow(
            name=name,
            vice_chancellor=_cell_text(cells[VICE_CHANCELLOR_COL]),
            website=_cell_href(cells[WEBSITE_COL]),
            year_of_establishment=cells[YEAR_COL].get_text().strip(),
        )


def _cell_text(cell: Tag) -> str:
    return collapse_whitespace(cell.get_text())


def _cell_href(cell: Tag) -> str:
    link = cell.find("a", href=True)
    if link is None:
        return ""
    return link["href"].strip()
