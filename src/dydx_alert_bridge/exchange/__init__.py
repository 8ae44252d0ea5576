__all__ = [
    "ExchangeConnectionError",
    "ExchangeGateway",
    "GatewayFactory",
    "OrderPlacementError",
]

from dydx_alert_bridge.exchange.base import (
    ExchangeConnectionError,
    ExchangeGateway,
    GatewayFactory,
    OrderPlacementError,
)
