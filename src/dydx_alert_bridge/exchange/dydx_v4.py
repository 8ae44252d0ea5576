from __future__ import annotations

import logging
from decimal import Decimal

from dydx_v4_client import OrderFlags
from dydx_v4_client.indexer.rest.constants import OrderExecution, OrderType
from dydx_v4_client.indexer.rest.indexer_client import IndexerClient
from dydx_v4_client.network import Network, make_mainnet, make_testnet
from dydx_v4_client.node.client import NodeClient
from dydx_v4_client.node.market import Market, since_now
from dydx_v4_client.wallet import Wallet
from v4_proto.dydxprotocol.clob.order_pb2 import Order

from dydx_alert_bridge.config import DydxV4Config
from dydx_alert_bridge.exchange.indexer import parse_orders, parse_subaccount
from dydx_alert_bridge.settings import Settings
from dydx_alert_bridge.types import ExchangeOrder, OrderSpec, SubAccount

logger = logging.getLogger("dydx_alert_bridge.exchange")

# Short-term orders live for a window of blocks rather than seconds.
_SHORT_TERM_BLOCK_WINDOW = 20

_ORDER_TYPES = {
    "MARKET": OrderType.MARKET,
    "TAKE_PROFIT_MARKET": OrderType.TAKE_PROFIT_MARKET,
    "STOP_MARKET": OrderType.STOP_MARKET,
}

_SIDES = {
    "BUY": Order.Side.SIDE_BUY,
    "SELL": Order.Side.SIDE_SELL,
}

_TIME_IN_FORCE = {
    "GTT": Order.TimeInForce.TIME_IN_FORCE_UNSPECIFIED,
    "IOC": Order.TimeInForce.TIME_IN_FORCE_IOC,
    "FOK": Order.TimeInForce.TIME_IN_FORCE_FILL_OR_KILL,
}

# The SDK leaves STOP_MARKET without a condition type; set it explicitly.
_CONDITION_TYPES = {
    "MARKET": Order.ConditionType.CONDITION_TYPE_UNSPECIFIED,
    "TAKE_PROFIT_MARKET": Order.ConditionType.CONDITION_TYPE_TAKE_PROFIT,
    "STOP_MARKET": Order.ConditionType.CONDITION_TYPE_STOP_LOSS,
}

_EXECUTIONS = {
    "DEFAULT": OrderExecution.DEFAULT,
    "IOC": OrderExecution.IOC,
    "FOK": OrderExecution.FOK,
    "POST_ONLY": OrderExecution.POST_ONLY,
}


class OrderRejectedError(RuntimeError):
    def __init__(self, message: str, *, code: int, client_id: int) -> None:
        super().__init__(message)
        self.code = code
        self.client_id = client_id


class DydxV4Gateway:
    """
    `ExchangeGateway` backed by the dYdX v4 Python client.

    Reads go to the indexer REST API; orders are broadcast through the
    validator node and signed by the wallet derived from the mnemonic.
    """

    def __init__(
        self,
        *,
        node: NodeClient,
        indexer: IndexerClient,
        wallet: Wallet | None,
        address: str,
        subaccount_number: int = 0,
    ) -> None:
        self._node = node
        self._indexer = indexer
        self._wallet = wallet
        self._address = address
        self._subaccount_number = subaccount_number

    @classmethod
    async def connect(cls, *, settings: Settings, config: DydxV4Config) -> DydxV4Gateway:
        network = build_network(settings, config)
        node = await NodeClient.connect(network.node)
        indexer = IndexerClient(network.rest_indexer)
        wallet: Wallet | None = None
        if settings.has_wallet():
            try:
                wallet = await Wallet.from_mnemonic(node, settings.dydx_mnemonic, settings.dydx_address)
            except Exception:
                node.channel.close()
                raise
        logger.info(
            "dydx_connected",
            extra={"network": settings.network, "address": settings.dydx_address},
        )
        return cls(
            node=node,
            indexer=indexer,
            wallet=wallet,
            address=settings.dydx_address,
            subaccount_number=settings.subaccount_number,
        )

    async def aclose(self) -> None:
        self._node.channel.close()

    async def get_subaccount(self, address: str, subaccount_number: int) -> SubAccount:
        payload = await self._indexer.account.get_subaccount(address, subaccount_number)
        return parse_subaccount(payload, address=address, subaccount_number=subaccount_number)

    async def list_orders(self, address: str, subaccount_number: int) -> list[ExchangeOrder]:
        payload = await self._indexer.account.get_subaccount_orders(address, subaccount_number)
        return parse_orders(payload)

    async def place_order(self, spec: OrderSpec) -> object:
        if self._wallet is None:
            raise RuntimeError("DYDX_V4_MNEMONIC and DYDX_V4_ADDRESS are required to place orders")

        markets = await self._indexer.markets.get_perpetual_markets(spec.market)
        market = Market(markets["markets"][spec.market])

        short_term = spec.order_type == "MARKET"
        order_flags = OrderFlags.SHORT_TERM if short_term else OrderFlags.CONDITIONAL
        order_id = market.order_id(
            self._address,
            self._subaccount_number,
            spec.client_id,
            order_flags,
        )

        good_til_block = None
        good_til_block_time = None
        if short_term:
            good_til_block = await self._node.latest_block_height() + _SHORT_TERM_BLOCK_WINDOW
        else:
            good_til_block_time = since_now(seconds=spec.good_til_seconds)

        trigger_subticks = 0
        if spec.trigger_price is not None:
            trigger_subticks = market.calculate_subticks(_f(spec.trigger_price))

        order = market.order(
            order_id=order_id,
            order_type=_ORDER_TYPES[spec.order_type],
            side=_SIDES[spec.side],
            size=_f(spec.size),
            price=_f(spec.price),
            time_in_force=_TIME_IN_FORCE[spec.time_in_force],
            reduce_only=spec.reduce_only,
            post_only=spec.post_only,
            good_til_block=good_til_block,
            good_til_block_time=good_til_block_time,
            execution=_EXECUTIONS[spec.execution],
            condition_type=_CONDITION_TYPES[spec.order_type],
            conditional_order_trigger_subticks=trigger_subticks,
        )
        tx = await self._node.place_order(wallet=self._wallet, order=order)
        response = tx.tx_response
        if response.code != 0:
            raise OrderRejectedError(
                f"{spec.order_type} order rejected: {response.raw_log}",
                code=response.code,
                client_id=spec.client_id,
            )
        return tx


def build_network(settings: Settings, config: DydxV4Config) -> Network:
    # A fresh gRPC channel per session; `aclose` shuts it.
    if settings.is_mainnet():
        return make_mainnet(
            rest_indexer=config.indexer.https_endpoint,
            websocket_indexer=config.indexer.wss_endpoint,
            node_url=config.validator.grpc_endpoint,
        )
    return make_testnet()


def _f(value: Decimal) -> float:
    return float(value)
