import asyncio
from decimal import Decimal

import pytest

from dydx_alert_bridge.engine.sequencer import OrderSequencer
from dydx_alert_bridge.engine.translator import build_order_params, build_order_plan
from dydx_alert_bridge.exchange.base import OrderPlacementError
from dydx_alert_bridge.types import Alert, ExchangeOrder, OrderSpec, SubAccount


class _FakeGateway:
    def __init__(self, *, fail_types: set[str] | None = None) -> None:
        self.placed: list[OrderSpec] = []
        self.attempted: list[str] = []
        self._fail_types = fail_types or set()

    async def get_subaccount(self, address: str, subaccount_number: int) -> SubAccount:
        raise AssertionError("not used")

    async def list_orders(self, address: str, subaccount_number: int) -> list[ExchangeOrder]:
        raise AssertionError("not used")

    async def place_order(self, spec: OrderSpec) -> object:
        self.attempted.append(spec.order_type)
        if spec.order_type in self._fail_types:
            raise RuntimeError(f"{spec.order_type} rejected")
        self.placed.append(spec)
        return {"hash": f"tx-{spec.client_id}"}

    async def aclose(self) -> None:
        return


class _Sleeps:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _plan(**overrides: object):
    raw: dict[str, object] = {"market": "ETH_USD", "order": "buy", "price": 3000, "size": 1}
    raw.update(overrides)
    alert = Alert.model_validate(raw)
    ids = iter(range(1, 10))
    return build_order_plan(alert, build_order_params(alert), next_client_id=lambda: next(ids))


def test_places_primary_then_take_profit_then_stop_loss() -> None:
    gateway = _FakeGateway()
    sleeps = _Sleeps()
    sequencer = OrderSequencer(fill_wait_seconds=60, sleep=sleeps)

    result = asyncio.run(sequencer.run(gateway, _plan(tp=3200, sl=2800)))

    assert [s.order_type for s in gateway.placed] == [
        "MARKET",
        "TAKE_PROFIT_MARKET",
        "STOP_MARKET",
    ]
    assert sleeps.calls == [60]
    assert result.side == "BUY"
    assert result.size == Decimal("1")
    assert result.order_id == "1"
    assert result.take_profit_id == "2"
    assert result.stop_loss_id == "3"


def test_single_sell_order_without_exits() -> None:
    gateway = _FakeGateway()
    sequencer = OrderSequencer(fill_wait_seconds=0, sleep=_Sleeps())

    result = asyncio.run(sequencer.run(gateway, _plan(order="sell")))

    assert len(gateway.placed) == 1
    assert gateway.placed[0].side == "SELL"
    assert result.take_profit_id is None
    assert result.stop_loss_id is None


def test_zero_fill_wait_skips_sleep() -> None:
    sleeps = _Sleeps()
    sequencer = OrderSequencer(fill_wait_seconds=0, sleep=sleeps)
    asyncio.run(sequencer.run(_FakeGateway(), _plan()))
    assert sleeps.calls == []


def test_primary_failure_skips_exits() -> None:
    gateway = _FakeGateway(fail_types={"MARKET"})
    sleeps = _Sleeps()
    sequencer = OrderSequencer(fill_wait_seconds=60, sleep=sleeps)

    with pytest.raises(OrderPlacementError) as excinfo:
        asyncio.run(sequencer.run(gateway, _plan(tp=3200, sl=2800)))

    assert gateway.attempted == ["MARKET"]
    assert gateway.placed == []
    assert sleeps.calls == []
    assert excinfo.value.failed_legs == ("primary",)
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_take_profit_failure_still_attempts_stop_loss() -> None:
    gateway = _FakeGateway(fail_types={"TAKE_PROFIT_MARKET"})
    sequencer = OrderSequencer(fill_wait_seconds=0, sleep=_Sleeps())

    with pytest.raises(OrderPlacementError) as excinfo:
        asyncio.run(sequencer.run(gateway, _plan(tp=3200, sl=2800)))

    assert gateway.attempted == ["MARKET", "TAKE_PROFIT_MARKET", "STOP_MARKET"]
    assert [s.order_type for s in gateway.placed] == ["MARKET", "STOP_MARKET"]
    assert excinfo.value.failed_legs == ("take_profit",)
    assert str(excinfo.value) == "Failed to place order with TP/SL"


def test_both_exit_failures_are_reported() -> None:
    gateway = _FakeGateway(fail_types={"TAKE_PROFIT_MARKET", "STOP_MARKET"})
    sequencer = OrderSequencer(fill_wait_seconds=0, sleep=_Sleeps())

    with pytest.raises(OrderPlacementError) as excinfo:
        asyncio.run(sequencer.run(gateway, _plan(tp=3200, sl=2800)))

    assert excinfo.value.failed_legs == ("take_profit", "stop_loss")
