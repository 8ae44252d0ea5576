from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from dydx_alert_bridge.markets import to_exchange_market
from dydx_alert_bridge.types import Alert, AlertError, OrderParams, OrderSpec, Side

IdGenerator = Callable[[], int]

DEFAULT_SLIPPAGE = Decimal("0.05")
DEFAULT_GOOD_TIL_SECONDS = 120_000


@dataclass(frozen=True)
class OrderPlan:
    primary: OrderSpec
    take_profit: OrderSpec | None = None
    stop_loss: OrderSpec | None = None

    def specs(self) -> list[OrderSpec]:
        return [s for s in (self.primary, self.take_profit, self.stop_loss) if s is not None]


def order_side(order: str) -> Side:
    return "BUY" if order.strip().lower() == "buy" else "SELL"


def opposite_side(side: Side) -> Side:
    return "SELL" if side == "BUY" else "BUY"


def needs_equity(alert: Alert) -> bool:
    return alert.size_by_leverage is not None


def resolve_size(alert: Alert, *, equity: Decimal | None = None) -> Decimal:
    """
    Size in base units from exactly one sizing source.

    Precedence: sizeByLeverage > sizeUsd > size. Leverage sizing needs the
    subaccount equity, fetched by the caller.
    """
    if alert.size_by_leverage is not None:
        if equity is None:
            raise AlertError("sizeByLeverage requires the subaccount equity")
        size = equity * alert.size_by_leverage / alert.price
    elif alert.size_usd is not None:
        size = alert.size_usd / alert.price
    elif alert.size is not None:
        size = alert.size
    else:
        raise AlertError("one of size, sizeUsd or sizeByLeverage is required")

    if size <= 0:
        raise AlertError(f"resolved order size must be > 0, got {size}")
    return size


def double_size_if_reverse_order(alert: Alert, size: Decimal) -> Decimal:
    # Reversal closes the current position and opens the opposite one in a single order.
    if alert.reverse:
        return size * 2
    return size


def build_order_params(alert: Alert, *, equity: Decimal | None = None) -> OrderParams:
    size = resolve_size(alert, equity=equity)
    size = double_size_if_reverse_order(alert, size)
    return OrderParams(
        market=to_exchange_market(alert.market),
        side=order_side(alert.order),
        size=size,
        price=alert.price,
    )


def apply_slippage(side: Side, price: Decimal, slippage: Decimal) -> Decimal:
    if side == "BUY":
        return price * (Decimal(1) + slippage)
    return price * (Decimal(1) - slippage)


def build_order_plan(
    alert: Alert,
    params: OrderParams,
    *,
    next_client_id: IdGenerator,
    slippage: Decimal = DEFAULT_SLIPPAGE,
    good_til_seconds: int = DEFAULT_GOOD_TIL_SECONDS,
) -> OrderPlan:
    primary = OrderSpec(
        market=params.market,
        side=params.side,
        order_type="MARKET",
        size=params.size,
        price=apply_slippage(params.side, params.price, slippage),
        client_id=next_client_id(),
        good_til_seconds=good_til_seconds,
    )

    exit_side = opposite_side(params.side)
    # Conditional market orders reject DEFAULT execution; they trigger as IOC.
    take_profit = None
    if alert.tp is not None:
        take_profit = OrderSpec(
            market=params.market,
            side=exit_side,
            order_type="TAKE_PROFIT_MARKET",
            size=params.size,
            price=alert.tp,
            trigger_price=alert.tp,
            reduce_only=True,
            client_id=next_client_id(),
            good_til_seconds=good_til_seconds,
            execution="IOC",
        )

    stop_loss = None
    if alert.sl is not None:
        stop_loss = OrderSpec(
            market=params.market,
            side=exit_side,
            order_type="STOP_MARKET",
            size=params.size,
            price=alert.sl,
            trigger_price=alert.sl,
            reduce_only=True,
            client_id=next_client_id(),
            good_til_seconds=good_til_seconds,
            execution="IOC",
        )

    return OrderPlan(primary=primary, take_profit=take_profit, stop_loss=stop_loss)
