"""
main.py – FastAPI entry point
=============================

Hosts the ETL as a small service:

* a **background loop** runs one batch every ``POLL_INTERVAL_SEC`` seconds
  and submits it to the sink (disabled with ``POLL_INTERVAL_SEC=0``);
* ``GET /features.geojson`` serves the latest collection;
* ``POST /run`` triggers a batch on demand (protected by ``RUN_TOKEN``).

Run locally with::

    uvicorn adsbx_cot.main:app --reload
"""

from __future__ import annotations

# ─── Std-lib / third-party ────────────────────────────────────────────
import asyncio
import contextlib
import datetime as dt
import secrets
from contextlib import asynccontextmanager
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, PlainTextResponse

# ─── Project modules ──────────────────────────────────────────────────
from .config import Settings, load_settings
from .features import FeatureCollection
from .sink_service import json_safe
from .task_service import run_task

# ─── Logging ──────────────────────────────────────────────────────────
import logging
import sys

LOG = logging.getLogger("etl_loop")

# ---------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------
load_dotenv()

# Loaded on first use so importing the app never depends on the environment.
SETTINGS: Settings | None = None

UTC = dt.timezone.utc

# Every module logs under its own name, so the handler sits on the root.
_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter("%(levelname)s:     %(name)s - %(message)s"))
logging.getLogger().addHandler(_handler)
logging.getLogger().setLevel(logging.INFO)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def get_settings() -> Settings:
    global SETTINGS
    if SETTINGS is None:
        SETTINGS = load_settings()
        if SETTINGS.debug:
            logging.getLogger().setLevel(logging.DEBUG)
    return SETTINGS


def _remember(app: FastAPI, collection: FeatureCollection) -> FeatureCollection:
    app.state.last_collection = collection
    app.state.last_run = dt.datetime.now(UTC)
    return collection


def _run_once(app: FastAPI) -> FeatureCollection:
    return _remember(app, run_task(get_settings()))


# ---------------------------------------------------------------------
# Lifespan – scheduled ETL runs
# ---------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: N802 – FastAPI naming style
    """Start the polling loop that runs one batch per interval."""
    app.state.last_collection = None
    app.state.last_run = None

    settings = get_settings()

    async def _loop() -> None:
        while True:
            try:
                collection = await asyncio.to_thread(_run_once, app)
                LOG.info("[loop] tick → %d features", len(collection["features"]))
            except Exception as exc:
                LOG.error("[loop] crashed: %s", exc, exc_info=True)
            await asyncio.sleep(settings.poll_interval_sec)

    task = None
    if settings.poll_interval_sec > 0:
        task = asyncio.create_task(_loop())
    else:
        LOG.info("[loop] disabled (POLL_INTERVAL_SEC=0)")

    yield  # ⇢ application runs here

    if task is not None:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


# ---------------------------------------------------------------------
# FastAPI instance
# ---------------------------------------------------------------------
app = FastAPI(title="ADSBX to CoT", lifespan=lifespan)


# Health probe --------------------------------------------------------
@app.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> PlainTextResponse:
    """Return HTTP 200 with body “ok” if the app is up."""
    return PlainTextResponse("ok", status_code=200)


# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------
@app.get("/features.geojson")
def features_geojson() -> JSONResponse:
    """
    Return the most recent feature collection.

    Runs one batch first when nothing has been produced yet (e.g. the loop
    is disabled or has not ticked).
    """
    collection = getattr(app.state, "last_collection", None)
    if collection is None:
        collection = _run_once(app)
    return JSONResponse(
        content=json_safe(collection), media_type="application/geo+json"
    )


@app.post("/run")
def run_route(token: str = Query(...)) -> dict[str, Any]:
    """Run and submit one batch right now (protected by a token)."""
    expected = get_settings().run_token.strip()
    if not expected or not secrets.compare_digest(token.strip(), expected):
        raise HTTPException(status_code=403, detail="Forbidden")
    collection = _run_once(app)
    return {
        "ok": True,
        "features": len(collection["features"]),
        "ran_at": app.state.last_run.isoformat(),
    }
