from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from dydx_alert_bridge.types import ExchangeOrder, SubAccount


def _decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def parse_subaccount(payload: dict[str, Any], *, address: str, subaccount_number: int) -> SubAccount:
    # The indexer wraps the snapshot: {"subaccount": {...}}.
    raw = payload.get("subaccount", payload)
    if not isinstance(raw, dict):
        raw = {}
    return SubAccount(
        address=str(raw.get("address", address)),
        subaccount_number=int(raw.get("subaccountNumber", subaccount_number)),
        equity=_decimal(raw.get("equity", "0")),
        free_collateral=_decimal(raw.get("freeCollateral", "0")),
    )


def parse_orders(payload: Any) -> list[ExchangeOrder]:
    if isinstance(payload, dict):
        payload = payload.get("orders", [])
    if not isinstance(payload, list):
        return []
    orders: list[ExchangeOrder] = []
    for row in payload:
        if not isinstance(row, dict):
            continue
        orders.append(
            ExchangeOrder(
                id=str(row.get("id", "")),
                client_id=str(row.get("clientId", "")),
                status=str(row.get("status", "")).upper(),
                market=str(row.get("ticker", "")),
                side=str(row.get("side", "")).upper(),
                size=_decimal(row.get("size", "0")),
            )
        )
    return orders
