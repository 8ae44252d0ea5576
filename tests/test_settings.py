from dydx_alert_bridge.settings import Settings


def test_has_wallet_requires_mnemonic_and_address() -> None:
    settings = Settings(DYDX_V4_MNEMONIC="", DYDX_V4_ADDRESS="dydx1abc")
    assert settings.has_wallet() is False

    settings = Settings(DYDX_V4_MNEMONIC="word " * 24, DYDX_V4_ADDRESS="")
    assert settings.has_wallet() is False

    settings = Settings(DYDX_V4_MNEMONIC="word " * 24, DYDX_V4_ADDRESS="dydx1abc")
    assert settings.has_wallet() is True


def test_network_switch() -> None:
    assert Settings(DYDX_NETWORK="testnet").is_mainnet() is False
    assert Settings(DYDX_NETWORK="mainnet").is_mainnet() is True


def test_order_defaults() -> None:
    settings = Settings(ORDER_SLIPPAGE=0.05, ORDER_GOOD_TIL_SECONDS=120000, FILL_WAIT_SECONDS=60)
    assert settings.order_slippage == 0.05
    assert settings.order_good_til_seconds == 120_000
    assert settings.fill_wait_seconds == 60.0
