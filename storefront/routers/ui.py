from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..errors import HttpError, TransportError, ValidationError
from ..runtime import Storefront

router = APIRouter(prefix="/api/ui")


class CheckoutIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    item_id: str = Field("", alias="productId")
    quantity: int = 0
    payment_method: str = Field("CREDIT_CARD", alias="paymentMethod")


def _storefront(request: Request) -> Storefront:
    return request.app.state.storefront


@router.get("/health")
def health_snapshot(request: Request) -> dict[str, Any]:
    snapshot = _storefront(request).state.health
    if snapshot is None:
        return {"pending": True, "services": []}
    return {"pending": False, **snapshot.to_dict()}


@router.get("/catalog")
def catalog(request: Request) -> dict[str, Any]:
    storefront = _storefront(request)
    state = storefront.state
    current = state.current_catalog()
    threshold = storefront.config.catalog.low_stock_threshold
    payload = current.to_dict()
    payload["low_stock"] = [item.item_id for item in current.low_stock(threshold)]
    payload["fallback_active"] = state.fallback_active
    payload["error"] = state.last_catalog_error
    return payload


@router.get("/state")
def state_snapshot(request: Request) -> dict[str, Any]:
    return _storefront(request).state.as_dict()


@router.post("/checkout")
async def checkout(payload: CheckoutIn, request: Request):
    result = await _storefront(request).checkout(
        payload.item_id, payload.quantity, payload.payment_method
    )
    if result.validation_failure:
        return JSONResponse(
            status_code=422,
            content=result.to_dict(),
        )
    return result.to_dict()


@router.get("/explore")
async def explore(request: Request, path: str = Query(...)) -> dict[str, Any]:
    try:
        result = await _storefront(request).explore(path)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (HttpError, TransportError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return result.to_dict()
