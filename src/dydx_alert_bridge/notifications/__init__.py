__all__ = ["TelegramNotifier"]

from dydx_alert_bridge.notifications.telegram import TelegramNotifier
