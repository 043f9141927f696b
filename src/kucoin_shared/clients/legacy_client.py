# src/kucoin_shared/clients/legacy_client.py

# --- Built Ins  ---
from decimal import Decimal
from typing import Any, List, Optional

# --- Installed  ---
from loguru import logger as log

# --- Local Application Imports ---
from .base import BaseKuCoinClient
from .pagination import PaginatedAggregator
from ..core.enums import ApiGeneration, EnvelopeShape, Side, TransactionStatus, TransactionType
from ..core.exceptions import MalformedResponseError
from ..core.models import (
    DepositAddress,
    LegacyBalance,
    LegacyCoin,
    LegacyDealtOrder,
    LegacyOpenOrders,
    LegacyOrderBook,
    LegacyOrderDetail,
    LegacyTick,
    LegacyTransaction,
    LegacyWithdrawalRequest,
    Page,
    parse_model,
    parse_models,
)
from ..exchanges.constants import LegacyApiMethods
from ..security.canonical import ParamsInput
from ..utils.formatter import to_dashed_pair


class LegacyKuCoinClient(BaseKuCoinClient):
    """
    Typed client for the legacy v1 KuCoin REST API.

    Symbols may be given dashed ('ETH-BTC') or undashed ('ETHBTC'); they are
    normalized before being sent. Trade history is partitioned by side, so
    `get_all_dealt_orders` walks BUY then SELL unless a side is given.
    """

    GENERATION = ApiGeneration.LEGACY

    async def _get(self, path: str, params: ParamsInput = None, signed: bool = True) -> Any:
        return await self.dispatcher.dispatch("GET", path, params=params, signed=signed)

    # --- Public ---

    async def get_server_time(self) -> int:
        data = await self.dispatcher.dispatch("GET", LegacyApiMethods.SERVER_TIME, envelope=EnvelopeShape.BARE)
        if isinstance(data, bool) or not isinstance(data, int):
            raise MalformedResponseError(f"Server time is not an integer: {data!r}")
        return data

    async def get_ticks(self) -> List[LegacyTick]:
        data = await self._get(LegacyApiMethods.TICK, signed=False)
        return parse_models(data, LegacyTick)

    async def get_tick(self, symbol: str) -> LegacyTick:
        data = await self._get(LegacyApiMethods.TICK, {"symbol": to_dashed_pair(symbol)}, signed=False)
        return parse_model(data, LegacyTick)

    async def get_markets(self) -> List[str]:
        data = await self._get(LegacyApiMethods.MARKETS, signed=False)
        if not isinstance(data, list):
            raise MalformedResponseError(f"Markets are not a list: {data!r}")
        return [str(market) for market in data]

    async def get_coins(self) -> List[LegacyCoin]:
        data = await self._get(LegacyApiMethods.COINS, signed=False)
        return parse_models(data, LegacyCoin)

    async def get_coin(self, coin: str) -> LegacyCoin:
        data = await self._get(LegacyApiMethods.COIN_INFO, {"coin": coin}, signed=False)
        return parse_model(data, LegacyCoin)

    async def get_order_book(self, symbol: str, limit: int = 100) -> LegacyOrderBook:
        params = {"symbol": to_dashed_pair(symbol), "limit": limit}
        data = await self._get(LegacyApiMethods.ORDER_BOOK, params, signed=False)
        return parse_model(data, LegacyOrderBook)

    # --- Account ---

    async def get_balance(self) -> List[LegacyBalance]:
        data = await self._get(LegacyApiMethods.BALANCE)
        return parse_models(data, LegacyBalance)

    async def get_deposit_address(self, coin: str) -> DepositAddress:
        data = await self._get(LegacyApiMethods.DEPOSIT_ADDRESS.format(coin=coin))
        return parse_model(data, DepositAddress)

    async def get_transactions(
        self,
        coin: str,
        tx_type: TransactionType,
        status: Optional[TransactionStatus] = None,
        page: int = 1,
    ) -> Page[LegacyTransaction]:
        params = {"type": tx_type, "status": status, "page": page}
        data = await self._get(LegacyApiMethods.WALLET_RECORDS.format(coin=coin), params)
        return Page.from_legacy(data, LegacyTransaction)

    async def get_all_transactions(
        self,
        coin: str,
        tx_type: TransactionType,
        status: Optional[TransactionStatus] = None,
    ) -> List[LegacyTransaction]:
        async def fetch_page(_side: Optional[Side], page_number: int) -> Page:
            return await self.get_transactions(coin, tx_type, status, page_number)

        return await PaginatedAggregator(label=f"{coin} {tx_type.value} records").collect(fetch_page)

    async def apply_withdrawal(self, coin: str, amount: Decimal, address: str) -> Any:
        """The body is signed flattened, as 'amount=...&address=...'."""
        log.info(f"Requesting withdrawal of {amount} {coin}.")
        return await self.dispatcher.dispatch(
            "POST",
            LegacyApiMethods.WITHDRAW_APPLY.format(coin=coin),
            body=LegacyWithdrawalRequest(amount=amount, address=address),
            signed=True,
        )

    # --- Orders ---

    async def get_dealt_orders(
        self,
        symbol: str,
        side: Optional[Side] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[LegacyDealtOrder]:
        params = {"symbol": to_dashed_pair(symbol), "type": side, "limit": limit, "page": page}
        data = await self._get(LegacyApiMethods.DEALT_ORDERS, params)
        return Page.from_legacy(data, LegacyDealtOrder)

    async def get_all_dealt_orders(
        self,
        symbol: str,
        side: Optional[Side] = None,
        limit: int = 20,
    ) -> List[LegacyDealtOrder]:
        """Every dealt order for the symbol, both sides unless `side` is given, newest first."""

        async def fetch_page(page_side: Optional[Side], page_number: int) -> Page:
            return await self.get_dealt_orders(symbol, page_side, page_number, limit)

        aggregator = PaginatedAggregator(label=f"{symbol} dealt orders")
        return await aggregator.collect(fetch_page, side=side, sided=True)

    async def get_order_detail(
        self,
        symbol: str,
        side: Side,
        order_id: str,
        page: int = 1,
        limit: int = 20,
    ) -> LegacyOrderDetail:
        params = {
            "symbol": to_dashed_pair(symbol),
            "type": side,
            "limit": limit,
            "page": page,
            "orderOid": order_id,
        }
        data = await self._get(LegacyApiMethods.ORDER_DETAIL, params)
        if isinstance(data, dict) and "datas" in data:
            data = data["datas"]
        return parse_model(data, LegacyOrderDetail)

    async def get_open_orders(self, symbol: str) -> LegacyOpenOrders:
        data = await self._get(LegacyApiMethods.ACTIVE_ORDERS, {"symbol": to_dashed_pair(symbol)})
        return parse_model(data, LegacyOpenOrders)

    async def post_trade(self, symbol: str, side: Side, price: Decimal, amount: Decimal) -> str:
        """Places a limit order. Returns the order oid."""
        params = {"symbol": to_dashed_pair(symbol), "amount": amount, "price": price, "type": side}
        log.info(f"Posting legacy {side.value} order on {params['symbol']}.")
        data = await self.dispatcher.dispatch("POST", LegacyApiMethods.ORDER, params=params, signed=True)
        if not isinstance(data, dict) or "orderOid" not in data:
            raise MalformedResponseError(f"post_trade: expected 'orderOid' in response data, got {data!r}")
        return data["orderOid"]

    async def cancel_trade(self, symbol: str, order_oid: str, side: Side):
        params = {"symbol": to_dashed_pair(symbol), "orderOid": order_oid, "type": side}
        await self.dispatcher.dispatch("POST", LegacyApiMethods.CANCEL_ORDER, params=params, signed=True)
        log.info(f"Cancelled legacy order {order_oid} on {params['symbol']}.")
