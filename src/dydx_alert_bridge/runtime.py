from __future__ import annotations

from typing import Optional

from dydx_alert_bridge.config import DydxV4Config, load_dydx_v4_config
from dydx_alert_bridge.engine.trader import AlertTrader
from dydx_alert_bridge.exchange.base import ExchangeGateway, GatewayFactory
from dydx_alert_bridge.notifications import TelegramNotifier
from dydx_alert_bridge.settings import Settings


def load_network_config(settings: Settings) -> DydxV4Config:
    if settings.is_mainnet():
        return load_dydx_v4_config(settings.config_path)
    return DydxV4Config()


def dydx_v4_connector(settings: Settings, config: DydxV4Config) -> GatewayFactory:
    async def _connect() -> ExchangeGateway:
        # The SDK pulls in grpc/protobuf; load it only when a connection is opened.
        from dydx_alert_bridge.exchange.dydx_v4 import DydxV4Gateway

        return await DydxV4Gateway.connect(settings=settings, config=config)

    return _connect


def build_notifier(settings: Settings) -> TelegramNotifier:
    return TelegramNotifier(
        bot_token=settings.telegram_bot_token,
        chat_id=settings.telegram_chat_id,
        prefix=f"[dydx-{settings.network}]",
    )


def build_trader(settings: Settings, *, notifier: Optional[TelegramNotifier] = None) -> AlertTrader:
    config = load_network_config(settings)
    return AlertTrader(
        settings=settings,
        connect=dydx_v4_connector(settings, config),
        notifier=notifier,
    )
