from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Optional

from dydx_alert_bridge.engine.sequencer import OrderSequencer, Sleep
from dydx_alert_bridge.engine.translator import (
    IdGenerator,
    build_order_params,
    build_order_plan,
    needs_equity,
)
from dydx_alert_bridge.exchange.base import (
    ExchangeConnectionError,
    ExchangeGateway,
    GatewayFactory,
    OrderPlacementError,
)
from dydx_alert_bridge.notifications import TelegramNotifier
from dydx_alert_bridge.settings import Settings
from dydx_alert_bridge.types import Alert, ExchangeOrder, OrderParams, OrderResult, SubAccount

logger = logging.getLogger("dydx_alert_bridge.trader")

_MAX_INT32 = 2_147_483_647


def random_client_id() -> int:
    return random.randint(0, _MAX_INT32)


class AlertTrader:
    def __init__(
        self,
        *,
        settings: Settings,
        connect: GatewayFactory,
        notifier: Optional[TelegramNotifier] = None,
        next_client_id: IdGenerator = random_client_id,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._connect = connect
        self._notifier = notifier
        self._next_client_id = next_client_id
        self._sequencer = OrderSequencer(
            fill_wait_seconds=settings.fill_wait_seconds,
            sleep=sleep,
        )

    @property
    def address(self) -> str:
        return self._settings.dydx_address

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[ExchangeGateway]:
        try:
            gateway = await self._connect()
        except ExchangeConnectionError:
            raise
        except Exception as e:
            logger.exception("connect_failed", extra={"network": self._settings.network})
            raise ExchangeConnectionError() from e
        try:
            yield gateway
        finally:
            await gateway.aclose()

    def _wallet_ready(self) -> bool:
        if self._settings.has_wallet():
            return True
        logger.warning("wallet_not_configured", extra={"network": self._settings.network})
        return False

    async def get_sub_account(self) -> SubAccount | None:
        if not self._wallet_ready():
            return None
        try:
            async with self._session() as gateway:
                sub = await gateway.get_subaccount(self.address, self._settings.subaccount_number)
        except Exception:
            logger.exception("get_subaccount_failed", extra={"address": self.address})
            return None
        logger.info(
            "subaccount",
            extra={
                "address": sub.address,
                "equity": str(sub.equity),
                "free_collateral": str(sub.free_collateral),
            },
        )
        return sub

    async def is_account_ready(self) -> bool:
        sub = await self.get_sub_account()
        if sub is None:
            return False
        return sub.free_collateral > 0

    async def build_order_params(self, alert: Alert) -> OrderParams:
        equity: Decimal | None = None
        if needs_equity(alert):
            sub = await self.get_sub_account()
            if sub is None:
                raise ExchangeConnectionError(
                    "Failed to fetch subaccount equity for sizeByLeverage"
                )
            equity = sub.equity
        params = build_order_params(alert, equity=equity)
        logger.info(
            "order_params",
            extra={"market": params.market, "side": params.side, "size": str(params.size)},
        )
        return params

    async def place_order(self, alert: Alert) -> OrderResult | None:
        """
        Place the primary order for `alert` plus its take-profit/stop-loss legs.

        Returns None when no wallet is configured. Raises
        `ExchangeConnectionError` when the exchange is unreachable and
        `OrderPlacementError` when any leg fails.
        """
        if not self._wallet_ready():
            return None

        params = await self.build_order_params(alert)
        plan = build_order_plan(
            alert,
            params,
            next_client_id=self._next_client_id,
            slippage=Decimal(str(self._settings.order_slippage)),
            good_til_seconds=self._settings.order_good_til_seconds,
        )

        async with self._session() as gateway:
            try:
                result = await self._sequencer.run(gateway, plan)
            except OrderPlacementError as e:
                if "primary" not in e.failed_legs:
                    await self._safe_notify(
                        f"[PARTIAL] {params.market} {params.side} size={params.size} "
                        f"order_id={plan.primary.client_id} failed={','.join(e.failed_legs)}"
                    )
                raise

        await self._safe_notify(
            f"[LIVE] {params.market} {result.side} size={result.size} order_id={result.order_id} "
            f"tp={alert.tp if alert.tp is not None else '-'} "
            f"sl={alert.sl if alert.sl is not None else '-'}"
        )
        return result

    async def get_orders(self) -> list[ExchangeOrder] | None:
        if not self._wallet_ready():
            return None
        try:
            async with self._session() as gateway:
                return await gateway.list_orders(self.address, self._settings.subaccount_number)
        except Exception:
            logger.exception("get_orders_failed", extra={"address": self.address})
            return None

    async def is_order_filled(self, client_id: int | str) -> bool:
        orders = await self.get_orders()
        if not orders:
            return False
        wanted = str(client_id)
        order = next((o for o in orders if o.client_id == wanted), None)
        if order is None:
            return False
        logger.info("order_status", extra={"order_id": order.id, "client_id": wanted})
        return order.status == "FILLED"

    async def _safe_notify(self, message: str) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier.send(message)
        except Exception:
            logger.exception("notify_failed")
