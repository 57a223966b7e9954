"""FastAPI application exposing the university queries as JSON."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nuc_universities.api.query import NOT_FOUND, QueryService
from nuc_universities.data.models import University
from nuc_universities.pipeline.orchestrator import Orchestrator

logger = logging.getLogger("nuc_universities")


def _envelope(universities: list[University]) -> dict[str, Any]:
    return {
        "success": True,
        "data": {"universities": [u.model_dump() for u in universities]},
    }


def create_app(
    orchestrator: Orchestrator,
    scrape_on_startup: bool = True,
    refresh_interval: float = 0,
) -> FastAPI:
    """Build the API around *orchestrator*'s collection.

    Args:
        orchestrator: Owns the collection store the routes read from.
        scrape_on_startup: Launch a background scrape cycle when the
            app starts.
        refresh_interval: Seconds between periodic re-scrapes; 0 disables.
    """
    queries = QueryService(orchestrator.store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scrape_on_startup:
            logger.info("Starting initial scrape", extra={"sources": len(orchestrator.sources)})
            orchestrator.start()
        if refresh_interval > 0:
            orchestrator.start_periodic(refresh_interval)
        yield
        orchestrator.stop()

    app = FastAPI(title="Nigerian Universities API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.orchestrator = orchestrator
    app.state.queries = queries

    @app.get("/healthz")
    def health():
        snapshot = orchestrator.store.snapshot
        return {
            "status": "ok",
            "scrape_status": orchestrator.status.value,
            "cycle": snapshot.cycle,
            "count": len(snapshot),
        }

    @app.get("/api/universities")
    def list_universities(
        state: Optional[str] = Query(None),
        city: Optional[str] = Query(None),
        type: Optional[str] = Query(None),
        search: Optional[str] = Query(None),
    ):
        return _envelope(
            queries.list(state=state, city=city, type=type, search=search)
        )

    @app.get("/api/universities/city/{city}")
    def universities_by_city(city: str):
        return _envelope(queries.by_city(city))

    @app.get("/api/universities/state/{state}")
    def universities_by_state(state: str):
        return _envelope(queries.by_state(state))

    # Declared before /{identifier} so "private" isn't taken as a name
    @app.get("/api/universities/private")
    def private_universities():
        return _envelope(queries.private_only())

    @app.get("/api/universities/private/state/{state}")
    def private_universities_by_state(state: str):
        return _envelope(queries.private_by_state(state))

    @app.get("/api/universities/{identifier}")
    def university_detail(identifier: str):
        university = queries.by_identifier(identifier)
        if university is NOT_FOUND:
            return JSONResponse(
                status_code=404,
                content={"success": False, "message": "University not found"},
            )
        return {"success": True, "data": {"university": university.model_dump()}}

    return app
