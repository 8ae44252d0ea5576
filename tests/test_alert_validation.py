from decimal import Decimal

import pytest
from pydantic import ValidationError

from dydx_alert_bridge.types import Alert


def test_alert_reads_camel_case_sizing_fields() -> None:
    alert = Alert.model_validate(
        {
            "market": "BTC_USD",
            "order": "sell",
            "price": "65000",
            "sizeUsd": "1300",
            "sizeByLeverage": "0.5",
            "reverse": True,
        }
    )
    assert alert.size_usd == Decimal("1300")
    assert alert.size_by_leverage == Decimal("0.5")
    assert alert.size is None
    assert alert.reverse is True


def test_alert_ignores_unknown_fields() -> None:
    alert = Alert.model_validate(
        {"market": "ETH_USD", "order": "buy", "price": 3000, "size": 1, "comment": "x"}
    )
    assert alert.market == "ETH_USD"


@pytest.mark.parametrize(
    "raw",
    [
        {"market": "ETH_USD", "order": "hold", "price": 3000, "size": 1},
        {"market": "ETH_USD", "order": "buy", "price": 0, "size": 1},
        {"market": "ETH_USD", "order": "buy", "price": 3000},
        {"market": "ETH_USD", "order": "buy", "price": 3000, "size": -1},
        {"market": "ETH_USD", "order": "buy", "price": 3000, "size": 1, "tp": 0},
        {"market": "", "order": "buy", "price": 3000, "size": 1},
    ],
)
def test_invalid_alerts_are_rejected(raw: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        Alert.model_validate(raw)
