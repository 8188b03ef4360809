"""Analytics API routes: dashboard summary, low-stock list, recent transactions."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from logistx.config import RECENT_TRANSACTIONS_LIMIT

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _dashboard(request: Request):
    dashboard = getattr(request.app.state, "dashboard", None)
    if dashboard is None:
        raise HTTPException(status_code=503, detail="Dashboard is not running")
    return dashboard


@router.get("/summary")
async def analytics_summary(request: Request) -> dict[str, Any]:
    """Cross-entity figures computed from the cached view-model rows."""
    return _dashboard(request).summary().model_dump(mode="json")


@router.get("/low-stock")
async def analytics_low_stock(request: Request) -> dict[str, Any]:
    items = _dashboard(request).inventory.low_stock_items()
    return {
        "count": len(items),
        "items": [
            {
                "id": i.id,
                "name": i.name,
                "sku": i.sku,
                "quantity": i.quantity,
                "min_quantity": i.min_quantity,
                "shortage": i.min_quantity - i.quantity,
            }
            for i in items
        ],
    }


@router.get("/transactions/recent")
async def analytics_recent_transactions(
    request: Request,
    limit: int = Query(RECENT_TRANSACTIONS_LIMIT, ge=1, le=100),
) -> dict[str, Any]:
    rows = _dashboard(request).transactions.recent_transactions(limit)
    return {"transactions": [t.model_dump(mode="json") for t in rows]}
