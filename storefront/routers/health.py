from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ..version import APP_VERSION

router = APIRouter()


class HealthOut(BaseModel):
    ok: bool
    version: str
    scheduler_running: bool


@router.get("/healthz", response_model=HealthOut, include_in_schema=False)
def health(request: Request) -> HealthOut:
    storefront = request.app.state.storefront
    return HealthOut(ok=True, version=APP_VERSION, scheduler_running=storefront.scheduler.running)
