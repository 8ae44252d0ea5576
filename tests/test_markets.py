import pytest

from dydx_alert_bridge.markets import to_alert_market, to_exchange_market


def test_alert_market_is_converted_to_exchange_delimiter() -> None:
    assert to_exchange_market("ETH_USD") == "ETH-USD"
    assert to_exchange_market("ETH-USD") == "ETH-USD"


def test_exchange_market_is_converted_to_alert_delimiter() -> None:
    assert to_alert_market("BTC-USD") == "BTC_USD"


@pytest.mark.parametrize("market", ["ETH_USD", "BTC_USD", "SOL_USD", "1INCH_USD"])
def test_market_round_trip(market: str) -> None:
    assert to_alert_market(to_exchange_market(market)) == market
