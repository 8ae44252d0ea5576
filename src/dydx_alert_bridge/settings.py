from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # dYdX v4 wallet
    dydx_mnemonic: str = Field(default="", validation_alias="DYDX_V4_MNEMONIC")
    dydx_address: str = Field(default="", validation_alias="DYDX_V4_ADDRESS")
    subaccount_number: int = Field(default=0, ge=0, validation_alias="DYDX_V4_SUBACCOUNT")

    # Network
    network: Literal["testnet", "mainnet"] = Field(default="testnet", validation_alias="DYDX_NETWORK")
    config_path: Path = Field(
        default=Path("configs/dydx_v4.toml"),
        validation_alias="DYDX_CONFIG_PATH",
    )

    # Orders
    order_slippage: float = Field(default=0.05, ge=0, lt=1, validation_alias="ORDER_SLIPPAGE")
    order_good_til_seconds: int = Field(
        default=120_000,
        gt=0,
        validation_alias="ORDER_GOOD_TIL_SECONDS",
    )
    fill_wait_seconds: float = Field(default=60.0, ge=0, validation_alias="FILL_WAIT_SECONDS")

    # Webhook
    webhook_passphrase: str = Field(default="", validation_alias="WEBHOOK_PASSPHRASE")

    # Telegram
    telegram_bot_token: str = Field(default="", validation_alias="TELEGRAM_BOT_TOKEN")
    telegram_chat_id: str = Field(default="", validation_alias="TELEGRAM_CHAT_ID")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def has_wallet(self) -> bool:
        return bool(self.dydx_mnemonic.strip() and self.dydx_address.strip())

    def is_mainnet(self) -> bool:
        return self.network == "mainnet"
