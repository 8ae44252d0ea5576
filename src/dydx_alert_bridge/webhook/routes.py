from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, HTTPException, Request

from dydx_alert_bridge.engine.trader import AlertTrader
from dydx_alert_bridge.exchange.base import ExchangeConnectionError, OrderPlacementError
from dydx_alert_bridge.settings import Settings
from dydx_alert_bridge.types import Alert, AlertError

logger = logging.getLogger("dydx_alert_bridge.webhook")

router = APIRouter()


def _trader(request: Request) -> AlertTrader:
    return request.app.state.trader


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _passphrase_ok(expected: str, given: str) -> bool:
    if not expected:
        return True
    return hmac.compare_digest(expected.encode("utf-8"), given.encode("utf-8"))


@router.get("/health")
async def health(request: Request):
    ready = await _trader(request).is_account_ready()
    return {"ok": True, "account_ready": ready}


@router.post("/webhook")
async def receive_alert(alert: Alert, request: Request):
    if not _passphrase_ok(_settings(request).webhook_passphrase, alert.passphrase):
        logger.warning("alert_rejected_passphrase", extra={"market": alert.market})
        raise HTTPException(status_code=401, detail="invalid passphrase")

    logger.info("alert_received", extra={"market": alert.market, "side": alert.order})
    try:
        result = await _trader(request).place_order(alert)
    except AlertError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except OrderPlacementError as e:
        raise HTTPException(
            status_code=502,
            detail={"error": str(e), "failed_legs": list(e.failed_legs)},
        ) from e
    except ExchangeConnectionError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    if result is None:
        raise HTTPException(status_code=503, detail="wallet is not configured")

    return {
        "ok": True,
        "side": result.side,
        "size": str(result.size),
        "order_id": result.order_id,
        "take_profit_id": result.take_profit_id,
        "stop_loss_id": result.stop_loss_id,
    }
