from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from dydx_alert_bridge.types import ExchangeOrder, OrderSpec, SubAccount


class ExchangeConnectionError(RuntimeError):
    def __init__(self, message: str = "Failed to connect to dYdX v4 client") -> None:
        super().__init__(message)


class OrderPlacementError(RuntimeError):
    def __init__(
        self,
        message: str = "Failed to place order with TP/SL",
        *,
        failed_legs: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.failed_legs = tuple(failed_legs)


class ExchangeGateway(Protocol):
    """
    The slice of the exchange SDK the bridge depends on.

    One gateway is opened per operation and closed with `aclose()`.
    """

    async def get_subaccount(self, address: str, subaccount_number: int) -> SubAccount: ...

    async def list_orders(self, address: str, subaccount_number: int) -> list[ExchangeOrder]: ...

    async def place_order(self, spec: OrderSpec) -> object: ...

    async def aclose(self) -> None: ...


GatewayFactory = Callable[[], Awaitable[ExchangeGateway]]
