"""FastAPI application factory."""
from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..client import DataGolfClient
from ..config import Settings
from ..pipeline import LabDataLoader, LabState, fallback_result, run_forever
from .routes import lab_router

logger = logging.getLogger(__name__)


def create_app(state: Optional[LabState] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    With an explicit `state` the app only serves it; otherwise it starts a
    background refresher against DataGolf on startup.
    """
    lab_state = state or LabState()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        stop = threading.Event()
        if state is None:
            cfg = settings or Settings.from_env()
            try:
                client = DataGolfClient(api_key=cfg.api_key, cache_dir=cfg.cache_dir)
            except KeyError:
                logger.error("DATAGOLF_API_KEY is not set; serving placeholder lab data")
                lab_state.publish(fallback_result())
                yield
                return
            loader = LabDataLoader(client, tour=cfg.tour)
            threading.Thread(
                target=run_forever,
                args=(loader, lab_state, cfg.refresh_seconds, stop),
                daemon=True,
            ).start()
            logger.info("Lab refresher started (every %.0fs)", cfg.refresh_seconds)
        yield
        stop.set()

    app = FastAPI(
        title="Divot Lab",
        description=(
            "Tournament analytics derived from DataGolf feeds: current event, "
            "field strength, predictions and chart projections."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.lab_state = lab_state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(lab_router, prefix="/api/v1")

    @app.get("/health")
    def health():
        latest = lab_state.latest
        return {
            "status": "ok",
            "service": "divot-lab",
            "loaded": latest is not None,
            "fallback": latest.is_fallback if latest else None,
        }

    return app


def main() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


# Entry point for `uvicorn divot_lab.api.app:app`
app = create_app()
