"""Atomic JSON export of scraped universities."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from nuc_universities.data.models import University


def atomic_write(filepath: Path, text: str) -> None:
    """Write *text* to *filepath* so readers never see a partial file.

    The data goes to a temp file in the target directory first and is
    then renamed over the destination (same filesystem, atomic on POSIX).
    Parent directories are created as needed.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=filepath.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, filepath)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def export_universities(
    filepath: Path,
    universities: Iterable[University],
    meta: dict[str, Any] | None = None,
) -> int:
    """Write *universities* to *filepath* as pretty-printed JSON.

    The document has the API's list envelope shape, plus an optional
    ``meta`` object (cycle number, errors, ...).

    Returns:
        Number of records written.
    """
    records = [u.model_dump() for u in universities]
    document: dict[str, Any] = {"success": True, "data": {"universities": records}}
    if meta:
        document["meta"] = meta
    atomic_write(filepath, json.dumps(document, indent=2, ensure_ascii=False) + "\n")
    return len(records)
