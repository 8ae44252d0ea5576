from __future__ import annotations

# Alert sources use "ETH_USD"; the dYdX v4 indexer and node use "ETH-USD".
ALERT_DELIMITER = "_"
EXCHANGE_DELIMITER = "-"


def to_exchange_market(market: str) -> str:
    return market.replace(ALERT_DELIMITER, EXCHANGE_DELIMITER)


def to_alert_market(market: str) -> str:
    return market.replace(EXCHANGE_DELIMITER, ALERT_DELIMITER)
