from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field


class IndexerConfig(BaseModel):
    https_endpoint: str = "https://indexer.dydx.trade/v4"
    wss_endpoint: str = "wss://indexer.dydx.trade/v4/ws"


class ValidatorConfig(BaseModel):
    grpc_endpoint: str = "dydx-ops-grpc.kingnodes.com:443"


class DydxV4Config(BaseModel):
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)

    def validate_logic(self) -> None:
        if not self.indexer.https_endpoint.startswith("https://"):
            raise ValueError("indexer.https_endpoint must be an https:// URL")
        if not self.indexer.wss_endpoint.startswith("wss://"):
            raise ValueError("indexer.wss_endpoint must be a wss:// URL")
        if not self.validator.grpc_endpoint.strip():
            raise ValueError("validator.grpc_endpoint is empty")


def load_dydx_v4_config(path: Path) -> DydxV4Config:
    raw = tomllib.loads(path.read_text(encoding="utf-8"))
    cfg = DydxV4Config.model_validate(raw)
    cfg.validate_logic()
    return cfg
