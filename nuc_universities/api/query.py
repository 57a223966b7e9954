"""Read-only queries over the current university snapshot."""

from __future__ import annotations

from typing import Final

from nuc_universities.data.collection import CollectionStore
from nuc_universities.data.models import University, UniversityType


class _NotFound:
    """Sentinel for an identifier lookup that matched nothing."""

    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = _NotFound()


def _equals(value: str, wanted: str) -> bool:
    return value.lower() == wanted.lower()


class QueryService:
    """Filter and look up universities.

    Each call reads the store's snapshot reference once, so a cycle
    publishing mid-call can't produce a mixed result. Nothing here
    raises for a miss: filters return ``[]`` and :meth:`by_identifier`
    returns :data:`NOT_FOUND`.
    """

    def __init__(self, store: CollectionStore):
        self.store = store

    def _universities(self) -> tuple[University, ...]:
        return self.store.snapshot.universities

    def list(
        self,
        state: str | None = None,
        city: str | None = None,
        type: str | None = None,
        search: str | None = None,
    ) -> list[University]:
        """Return universities matching every given filter.

        ``state``, ``city`` and ``type`` are exact, case-insensitive
        matches; ``search`` is a case-insensitive substring of the name
        or the abbreviation. Empty filters are ignored.
        """
        result = list(self._universities())
        if state:
            result = [u for u in result if _equals(u.state, state)]
        if city:
            result = [u for u in result if _equals(u.city, city)]
        if type:
            result = [u for u in result if _equals(u.university_type, type)]
        if search:
            term = search.lower()
            result = [
                u for u in result
                if term in u.name.lower() or term in u.abbreviation.lower()
            ]
        return result

    def by_city(self, city: str) -> list[University]:
        return [u for u in self._universities() if _equals(u.city, city)]

    def by_state(self, state: str) -> list[University]:
        return [u for u in self._universities() if _equals(u.state, state)]

    def private_only(self) -> list[University]:
        return [
            u for u in self._universities()
            if u.university_type == UniversityType.PRIVATE.value
        ]

    def private_by_state(self, state: str) -> list[University]:
        return [
            u for u in self._universities()
            if u.university_type == UniversityType.PRIVATE.value
            and _equals(u.state, state)
        ]

    def by_identifier(self, identifier: str) -> University | _NotFound:
        """Find a university by full name or abbreviation (any case)."""
        wanted = identifier.lower()
        for u in self._universities():
            if u.name.lower() == wanted or u.abbreviation.lower() == wanted:
                return u
        return NOT_FOUND
