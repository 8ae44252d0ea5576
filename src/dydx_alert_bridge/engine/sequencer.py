from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from dydx_alert_bridge.engine.translator import OrderPlan
from dydx_alert_bridge.exchange.base import ExchangeGateway, OrderPlacementError
from dydx_alert_bridge.types import OrderResult, OrderSpec

logger = logging.getLogger("dydx_alert_bridge.sequencer")

Sleep = Callable[[float], Awaitable[None]]


def _extra(spec: OrderSpec, leg: str) -> dict[str, object]:
    return {
        "market": spec.market,
        "side": spec.side,
        "size": str(spec.size),
        "client_id": spec.client_id,
        "leg": leg,
    }


class OrderSequencer:
    """
    Places an `OrderPlan` leg by leg: primary, then take-profit, then stop-loss.

    A failed primary aborts before any protective order. A failed protective
    leg is logged and the remaining one is still attempted; the sequence then
    raises `OrderPlacementError` listing the failed legs. Nothing is retried
    and nothing is cancelled.
    """

    def __init__(self, *, fill_wait_seconds: float = 60.0, sleep: Sleep = asyncio.sleep) -> None:
        self._fill_wait_seconds = max(0.0, fill_wait_seconds)
        self._sleep = sleep

    async def run(self, gateway: ExchangeGateway, plan: OrderPlan) -> OrderResult:
        primary = plan.primary
        try:
            tx = await gateway.place_order(primary)
        except Exception as e:
            logger.exception("order_failed", extra=_extra(primary, "primary"))
            raise OrderPlacementError(failed_legs=("primary",)) from e
        logger.info("order_placed", extra=_extra(primary, "primary"))
        logger.debug("order_tx %r", tx)

        # Crude settle delay so the fill reaches the indexer before the exits go in.
        if self._fill_wait_seconds > 0:
            await self._sleep(self._fill_wait_seconds)

        failed: list[str] = []
        last_error: Exception | None = None
        for leg, spec in (("take_profit", plan.take_profit), ("stop_loss", plan.stop_loss)):
            if spec is None:
                continue
            try:
                await gateway.place_order(spec)
            except Exception as e:
                logger.exception("protective_order_failed", extra=_extra(spec, leg))
                failed.append(leg)
                last_error = e
                continue
            logger.info("order_placed", extra=_extra(spec, leg))

        if failed:
            raise OrderPlacementError(failed_legs=failed) from last_error

        return OrderResult(
            side=primary.side,
            size=primary.size,
            order_id=str(primary.client_id),
            take_profit_id=str(plan.take_profit.client_id) if plan.take_profit else None,
            stop_loss_id=str(plan.stop_loss.client_id) if plan.stop_loss else None,
        )
