from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from dydx_alert_bridge.engine.trader import AlertTrader
from dydx_alert_bridge.runtime import build_notifier, build_trader
from dydx_alert_bridge.settings import Settings
from dydx_alert_bridge.webhook.routes import router

logger = logging.getLogger("dydx_alert_bridge.webhook")


def create_app(
    settings: Optional[Settings] = None,
    *,
    trader: Optional[AlertTrader] = None,
) -> FastAPI:
    settings = settings if settings is not None else Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        notifier = None
        if trader is None:
            notifier = build_notifier(settings)
            app.state.trader = build_trader(settings, notifier=notifier)
        logger.info("webhook_started", extra={"network": settings.network})
        try:
            yield
        finally:
            if notifier is not None:
                await notifier.aclose()
            logger.info("webhook_stopped", extra={"network": settings.network})

    app = FastAPI(title="dydx-alert-bridge", lifespan=lifespan)
    app.state.settings = settings
    if trader is not None:
        app.state.trader = trader
    app.include_router(router)
    return app
