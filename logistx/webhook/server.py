"""FastAPI receiver for hosted-database change notifications, plus health, status and analytics."""

import hmac
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response

from logistx.config import WEBHOOK_SECRET
from logistx.dashboard import Dashboard, store_status
from logistx.store import ChangeFeed, RemoteStore
from logistx.store.schema import TABLES
from logistx.utils.logger import get_logger
from logistx.webhook.analytics_routes import router as analytics_router
from logistx.webhook.models import parse_notifications

logger = get_logger("logistx.webhook.server")

_ACCEPTED = '{"status":"accepted"}'


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Start the dashboard (initial loads + subscriptions) in the server's event loop."""
    dashboard = getattr(app.state, "dashboard", None)
    if dashboard is not None and not dashboard.loaded:
        await dashboard.start()
        logger.info("webhook.lifespan.dashboard_started")
    yield
    if dashboard is not None:
        dashboard.close()
    await app.state.store.aclose()
    logger.info("webhook.lifespan.stopped")


def create_app(
    store: RemoteStore,
    dashboard: Dashboard | None = None,
    *,
    feed: ChangeFeed | None = None,
    secret: str | None = None,
) -> FastAPI:
    """
    Create FastAPI app. Change notifications are published to `feed` (default: the store's own
    feed), which re-fetches every subscribed view-model. `secret` (default WEBHOOK_SECRET) is
    compared with the x-webhook-secret header when non-empty.
    """
    app = FastAPI(title="LogistX Webhook", version="0.1.0", lifespan=_lifespan)
    app.state.store = store
    app.state.dashboard = dashboard
    app.state.feed = feed or store.feed
    app.state.secret = WEBHOOK_SECRET if secret is None else secret

    app.include_router(analytics_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/status")
    async def status() -> dict[str, Any]:
        """Row counts per table, as the store reports them."""
        return (await store_status(store)).model_dump()

    @app.post("/webhook/changes", response_model=None)
    async def changes(request: Request) -> Response:
        expected = app.state.secret
        if expected:
            given = request.headers.get("x-webhook-secret", "")
            if not hmac.compare_digest(given, expected):
                logger.warning("webhook.changes.bad_secret")
                raise HTTPException(status_code=401, detail="Invalid webhook secret")

        try:
            body = await request.json()
            notifications = parse_notifications(body)
        except Exception as e:
            logger.warning("webhook.changes.parse_error", error=str(e))
            return Response(status_code=202, content=_ACCEPTED, media_type="application/json")

        published = 0
        for n in notifications:
            if n.table not in TABLES:
                logger.debug("webhook.changes.unknown_table", table=n.table)
                continue
            await app.state.feed.publish(n.to_event())
            published += 1
        logger.info("webhook.changes.received", count=len(notifications), published=published)
        return Response(status_code=202, content=_ACCEPTED, media_type="application/json")

    return app
