"""Tests for nuc_universities.api.app module."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from bs4 import BeautifulSoup
from fastapi.testclient import TestClient

from nuc_universities.api.app import create_app
from nuc_universities.data.models import RawRow, Source, UniversityType
from nuc_universities.pipeline.orchestrator import Orchestrator
from nuc_universities.scrapers.fetcher import SourceFetcher
from nuc_universities.utils.normalize import normalize_row

RECORD_KEYS = {
    "name",
    "state",
    "city",
    "abbreviation",
    "vice_chancellor",
    "year_of_establishment",
    "website",
    "university_type",
}


def _make(name: str, university_type: UniversityType, website: str = ""):
    return normalize_row(
        RawRow(name=name, vice_chancellor="Prof. X", website=website, year_of_establishment="2000"),
        university_type,
    )


UNIVERSITIES = [
    _make("University of Lagos, Akoka, Lagos State", UniversityType.FEDERAL, "https://unilag.edu.ng"),
    _make("Federal University, Oye-Ekiti", UniversityType.FEDERAL),
    _make("Lagos State University, Ojo, Lagos State", UniversityType.STATE),
    _make("Pan-Atlantic University, Lekki, Lagos State", UniversityType.PRIVATE),
    _make("Covenant University, Ota, Ogun State", UniversityType.PRIVATE),
]


@pytest.fixture()
def orchestrator() -> Orchestrator:
    """An orchestrator whose store already holds UNIVERSITIES."""
    orch = Orchestrator(sources=[], fetcher=MagicMock(spec=SourceFetcher))
    orch.store.publish(UNIVERSITIES, cycle=1)
    return orch


@pytest.fixture()
def client(orchestrator: Orchestrator) -> TestClient:
    return TestClient(create_app(orchestrator, scrape_on_startup=False))


def _names(response) -> list[str]:
    return [u["name"] for u in response.json()["data"]["universities"]]


class TestListEndpoint:
    """GET /api/universities"""

    def test_envelope(self, client: TestClient) -> None:
        response = client.get("/api/universities")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]["universities"]) == len(UNIVERSITIES)

    def test_record_shape(self, client: TestClient) -> None:
        record = client.get("/api/universities").json()["data"]["universities"][0]
        assert set(record) == RECORD_KEYS
        assert record == {
            "name": "University of Lagos, Akoka, Lagos State",
            "state": "Lagos",
            "city": "Akoka",
            "abbreviation": "ULALS",
            "vice_chancellor": "Prof. X",
            "year_of_establishment": "2000",
            "website": "https://unilag.edu.ng",
            "university_type": "Federal",
        }

    def test_type_and_search(self, client: TestClient) -> None:
        response = client.get("/api/universities", params={"type": "private", "search": "lag"})
        assert _names(response) == ["Pan-Atlantic University, Lekki, Lagos State"]

    def test_state_and_city(self, client: TestClient) -> None:
        response = client.get("/api/universities", params={"state": "lagos", "city": "OJO"})
        assert _names(response) == ["Lagos State University, Ojo, Lagos State"]

    def test_no_match_is_empty_success(self, client: TestClient) -> None:
        body = client.get("/api/universities", params={"state": "Kano"}).json()
        assert body == {"success": True, "data": {"universities": []}}


class TestFilterEndpoints:
    """City, state and private routes."""

    def test_by_city(self, client: TestClient) -> None:
        assert _names(client.get("/api/universities/city/oye-ekiti")) == [
            "Federal University, Oye-Ekiti"
        ]

    def test_by_state(self, client: TestClient) -> None:
        assert len(_names(client.get("/api/universities/state/LAGOS"))) == 3

    def test_by_state_single_match(self, client: TestClient) -> None:
        assert _names(client.get("/api/universities/state/Ogun")) == [
            "Covenant University, Ota, Ogun State"
        ]

    def test_private(self, client: TestClient) -> None:
        response = client.get("/api/universities/private")
        assert response.status_code == 200
        assert _names(response) == [
            "Pan-Atlantic University, Lekki, Lagos State",
            "Covenant University, Ota, Ogun State",
        ]

    def test_private_by_state(self, client: TestClient) -> None:
        assert _names(client.get("/api/universities/private/state/lagos")) == [
            "Pan-Atlantic University, Lekki, Lagos State"
        ]


class TestDetailEndpoint:
    """GET /api/universities/{identifier}"""

    def test_by_abbreviation(self, client: TestClient) -> None:
        response = client.get("/api/universities/fuo")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["university"]["name"] == "Federal University, Oye-Ekiti"

    def test_by_full_name(self, client: TestClient) -> None:
        response = client.get("/api/universities/covenant university, ota, ogun state")
        assert response.status_code == 200
        assert response.json()["data"]["university"]["abbreviation"] == "CUOOS"

    def test_not_found(self, client: TestClient) -> None:
        response = client.get("/api/universities/nowhere")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "University not found"}


class TestHealth:
    """GET /healthz"""

    def test_reports_snapshot(self, client: TestClient) -> None:
        body = client.get("/healthz").json()
        assert body["status"] == "ok"
        assert body["cycle"] == 1
        assert body["count"] == len(UNIVERSITIES)
        assert body["scrape_status"] == "idle"


class TestCors:
    """Cross-origin requests are allowed from anywhere."""

    def test_allow_origin_header(self, client: TestClient) -> None:
        response = client.get("/api/universities", headers={"Origin": "https://example.com"})
        assert response.headers["access-control-allow-origin"] == "*"


class TestStartupScrape:
    """The app launches a background scrape when it starts."""

    def test_startup_scrape_populates_collection(self) -> None:
        fetcher = MagicMock(spec=SourceFetcher)
        fetcher.fetch.return_value = BeautifulSoup(
            "<table><tbody><tr><td>1</td><td>Bowen University, Iwo</td>"
            "<td>VC</td><td></td><td>2001</td></tr></tbody></table>",
            "lxml",
        )
        orch = Orchestrator(
            sources=[Source(url="https://nuc.example/private/", university_type=UniversityType.PRIVATE)],
            fetcher=fetcher,
        )

        with TestClient(create_app(orch)) as client:
            assert orch.wait(timeout=5)
            body = client.get("/api/universities/private").json()

        assert [u["name"] for u in body["data"]["universities"]] == ["Bowen University, Iwo"]
        assert client.app.state.orchestrator is orch
