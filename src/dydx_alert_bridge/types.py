from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Side = Literal["BUY", "SELL"]
OrderType = Literal["MARKET", "TAKE_PROFIT_MARKET", "STOP_MARKET"]
TimeInForce = Literal["GTT", "IOC", "FOK"]
Execution = Literal["DEFAULT", "IOC", "FOK", "POST_ONLY"]


class AlertError(ValueError):
    pass


class Alert(BaseModel):
    """
    Alert as posted by the signal source (TradingView style JSON).

    JSON keys keep the source's camelCase names (`sizeUsd`, `sizeByLeverage`).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    market: str
    order: str
    price: Decimal = Field(gt=0)
    size: Optional[Decimal] = None
    size_usd: Optional[Decimal] = Field(default=None, alias="sizeUsd")
    size_by_leverage: Optional[Decimal] = Field(default=None, alias="sizeByLeverage")
    tp: Optional[Decimal] = None
    sl: Optional[Decimal] = None
    reverse: bool = False

    passphrase: str = ""

    @model_validator(mode="after")
    def check_alert(self) -> Alert:
        if self.order.strip().lower() not in ("buy", "sell"):
            raise ValueError("order must be 'buy' or 'sell'")
        if not self.market.strip():
            raise ValueError("market is empty")
        sizing = (self.size, self.size_usd, self.size_by_leverage)
        if all(v is None for v in sizing):
            raise ValueError("one of size, sizeUsd or sizeByLeverage is required")
        for name, value in (
            ("size", self.size),
            ("sizeUsd", self.size_usd),
            ("sizeByLeverage", self.size_by_leverage),
            ("tp", self.tp),
            ("sl", self.sl),
        ):
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be > 0")
        return self


@dataclass(frozen=True)
class OrderParams:
    market: str
    side: Side
    size: Decimal
    price: Decimal


@dataclass(frozen=True)
class OrderSpec:
    market: str
    side: Side
    order_type: OrderType
    size: Decimal
    # MARKET: worst acceptable price (slippage applied).
    # TP/SL: same as trigger_price.
    price: Decimal
    client_id: int
    trigger_price: Decimal | None = None
    reduce_only: bool = False
    time_in_force: TimeInForce = "GTT"
    good_til_seconds: int = 120_000
    execution: Execution = "DEFAULT"
    post_only: bool = False


@dataclass(frozen=True)
class SubAccount:
    address: str
    subaccount_number: int
    equity: Decimal
    free_collateral: Decimal


@dataclass(frozen=True)
class ExchangeOrder:
    id: str
    client_id: str
    status: str
    market: str = ""
    side: str = ""
    size: Decimal = Decimal("0")


@dataclass(frozen=True)
class OrderResult:
    side: Side
    size: Decimal
    order_id: str
    take_profit_id: str | None = None
    stop_loss_id: str | None = None
