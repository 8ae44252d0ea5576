__all__ = ["create_app"]

from dydx_alert_bridge.webhook.app import create_app
