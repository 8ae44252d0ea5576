__all__ = ["DydxV4Config", "load_dydx_v4_config"]

from dydx_alert_bridge.config.dydx_v4 import DydxV4Config, load_dydx_v4_config
