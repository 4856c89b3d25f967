from __future__ import annotations

import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .routers import health, ui
from .runtime import Storefront, build_storefront
from .sink import MemorySink
from .version import APP_VERSION

logger = logging.getLogger(__name__)


def setup_refresh_scheduler(app: FastAPI) -> None:
    @app.on_event("startup")
    async def _start_scheduler() -> None:
        await app.state.storefront.start()

    @app.on_event("shutdown")
    async def _stop_scheduler() -> None:
        await app.state.storefront.stop()


def create_app(storefront: Storefront | None = None) -> FastAPI:
    if storefront is None:
        storefront = build_storefront(sink=MemorySink())
    app = FastAPI(title="Storefront Console", version=APP_VERSION)
    app.state.storefront = storefront
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.include_router(health.router)
    app.include_router(ui.router)

    @app.get("/metrics")
    def metrics() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    setup_refresh_scheduler(app)
    logger.info("storefront app created", extra={"endpoints": storefront.registry.ids()})
    return app


app = create_app()
