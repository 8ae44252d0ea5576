from pathlib import Path

import pytest

from dydx_alert_bridge.config.dydx_v4 import DydxV4Config, load_dydx_v4_config
from dydx_alert_bridge.runtime import load_network_config
from dydx_alert_bridge.settings import Settings


def test_load_dydx_v4_config(tmp_path: Path) -> None:
    path = tmp_path / "dydx_v4.toml"
    path.write_text(
        "\n".join(
            [
                "[indexer]",
                'https_endpoint = "https://indexer.example.com/v4"',
                'wss_endpoint = "wss://indexer.example.com/v4/ws"',
                "",
                "[validator]",
                'grpc_endpoint = "grpc.example.com:443"',
                "",
            ]
        ),
        encoding="utf-8",
    )

    cfg = load_dydx_v4_config(path)

    assert cfg.indexer.https_endpoint == "https://indexer.example.com/v4"
    assert cfg.indexer.wss_endpoint == "wss://indexer.example.com/v4/ws"
    assert cfg.validator.grpc_endpoint == "grpc.example.com:443"


def test_load_dydx_v4_config_rejects_plain_http(tmp_path: Path) -> None:
    path = tmp_path / "dydx_v4.toml"
    path.write_text('[indexer]\nhttps_endpoint = "http://indexer.example.com"\n', encoding="utf-8")

    with pytest.raises(ValueError, match="https_endpoint"):
        load_dydx_v4_config(path)


def test_repo_config_is_valid() -> None:
    path = Path(__file__).resolve().parents[1] / "configs" / "dydx_v4.toml"
    cfg = load_dydx_v4_config(path)
    assert cfg.indexer.https_endpoint.startswith("https://")


def test_testnet_ignores_config_file(tmp_path: Path) -> None:
    settings = Settings(DYDX_NETWORK="testnet", DYDX_CONFIG_PATH=str(tmp_path / "missing.toml"))
    assert load_network_config(settings) == DydxV4Config()


def test_mainnet_requires_config_file(tmp_path: Path) -> None:
    settings = Settings(DYDX_NETWORK="mainnet", DYDX_CONFIG_PATH=str(tmp_path / "missing.toml"))
    with pytest.raises(FileNotFoundError):
        load_network_config(settings)
