__all__ = ["AlertTrader", "OrderPlan", "OrderSequencer"]

from dydx_alert_bridge.engine.sequencer import OrderSequencer
from dydx_alert_bridge.engine.trader import AlertTrader
from dydx_alert_bridge.engine.translator import OrderPlan
