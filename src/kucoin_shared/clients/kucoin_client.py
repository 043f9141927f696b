# src/kucoin_shared/clients/kucoin_client.py

# --- Built Ins  ---
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type

# --- Installed  ---
from loguru import logger as log

# --- Local Application Imports ---
from .base import BaseKuCoinClient
from .pagination import PaginatedAggregator
from ..core.enums import (
    AccountType,
    ApiGeneration,
    DepositStatus,
    Interval,
    OrderStatus,
    OrderType,
    SelfTradeProtect,
    Side,
    StopType,
    TimeInForce,
    WithdrawalStatus,
)
from ..core.exceptions import MalformedResponseError, ValidationError
from ..core.models import (
    AccountHold,
    AccountLedgerEntry,
    AppBaseModel,
    Balance,
    Candlestick,
    Currency,
    Deposit,
    DepositAddress,
    Fill,
    Order,
    OrderBook,
    Page,
    Ticker,
    TradeHistory,
    TradingPairDetail,
    TradingPairStats,
    Withdrawal,
    WithdrawalQuota,
    parse_model,
    parse_models,
)
from ..exchanges.constants import ApiMethods
from ..security.canonical import ParamsInput
from ..utils.formatter import to_unix_ms, to_unix_seconds

Timestamp = datetime | int


def _side_param(side: Optional[Side]) -> Optional[str]:
    return side.value.lower() if side else None


def _ms(value: Optional[Timestamp]) -> Optional[int]:
    return None if value is None else to_unix_ms(value)


def _require_key(payload: Any, key: str, context: str) -> Any:
    if not isinstance(payload, dict) or key not in payload:
        raise MalformedResponseError(f"{context}: expected '{key}' in response data")
    return payload[key]


class KuCoinClient(BaseKuCoinClient):
    """
    Typed client for the current KuCoin REST API (`/api/v1/...` endpoints).

    Paged endpoints come in two forms: `get_x(..., page, page_size)` returns a
    single `Page`, and `get_all_x(...)` walks every page into one list,
    newest first.
    """

    GENERATION = ApiGeneration.CURRENT

    # --- Plumbing ---

    async def _get(self, path: str, params: ParamsInput = None, signed: bool = True) -> Any:
        return await self.dispatcher.dispatch("GET", path, params=params, signed=signed)

    async def _get_page(self, path: str, params: Dict[str, Any], model: Type[AppBaseModel]) -> Page:
        data = await self._get(path, params)
        return Page.from_current(data, model)

    async def _collect(self, path: str, params: Dict[str, Any], model: Type[AppBaseModel], page_size: int) -> list:
        async def fetch_page(_side: Optional[Side], page_number: int) -> Page:
            return await self._get_page(path, {**params, "currentPage": page_number, "pageSize": page_size}, model)

        return await PaginatedAggregator(label=path).collect(fetch_page)

    # --- Accounts ---

    async def get_balances(
        self,
        currency: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        hide_zero: bool = False,
    ) -> List[Balance]:
        data = await self._get(ApiMethods.ACCOUNTS, {"currency": currency, "type": account_type})
        balances = parse_models(data, Balance)
        if hide_zero:
            balances = [b for b in balances if b.balance != 0]
        return balances

    async def get_balance(self, account_id: str) -> Balance:
        data = await self._get(ApiMethods.ACCOUNT.format(account_id=account_id))
        return parse_model(data, Balance)

    async def create_account(self, currency: str, account_type: AccountType) -> str:
        """Returns the new account id."""
        data = await self.dispatcher.dispatch(
            "POST",
            ApiMethods.ACCOUNTS,
            body={"currency": currency, "type": account_type},
            signed=True,
        )
        return _require_key(data, "id", "create_account")

    async def get_account_history(
        self,
        account_id: str,
        start_at: Timestamp,
        end_at: Timestamp,
        page: int = 1,
        page_size: int = 100,
    ) -> Page[AccountLedgerEntry]:
        start_ms, end_ms = _ms(start_at), _ms(end_at)
        self._check_range(start_ms, end_ms)
        params = {"startAt": start_ms, "endAt": end_ms, "currentPage": page, "pageSize": page_size}
        return await self._get_page(ApiMethods.ACCOUNT_LEDGERS.format(account_id=account_id), params, AccountLedgerEntry)

    async def get_all_account_history(
        self,
        account_id: str,
        start_at: Timestamp,
        end_at: Timestamp,
        page_size: int = 100,
    ) -> List[AccountLedgerEntry]:
        start_ms, end_ms = _ms(start_at), _ms(end_at)
        self._check_range(start_ms, end_ms)
        path = ApiMethods.ACCOUNT_LEDGERS.format(account_id=account_id)
        return await self._collect(path, {"startAt": start_ms, "endAt": end_ms}, AccountLedgerEntry, page_size)

    async def get_holds(self, account_id: str, page: int = 1, page_size: int = 100) -> Page[AccountHold]:
        params = {"currentPage": page, "pageSize": page_size}
        return await self._get_page(ApiMethods.ACCOUNT_HOLDS.format(account_id=account_id), params, AccountHold)

    async def inner_transfer(
        self,
        from_id: str,
        to_id: str,
        amount: Decimal,
        client_oid: Optional[str] = None,
    ) -> str:
        """Moves funds between the user's own accounts. Returns the transfer's order id."""
        body = {
            "clientOid": client_oid or uuid.uuid4().hex,
            "payAccountId": from_id,
            "recAccountId": to_id,
            "amount": amount,
        }
        data = await self.dispatcher.dispatch("POST", ApiMethods.INNER_TRANSFER, body=body, signed=True)
        return _require_key(data, "orderId", "inner_transfer")

    # --- Orders ---

    async def _place_order(self, body: Dict[str, Any]) -> str:
        log.info(f"Placing {body['side']} order on {body['symbol']} (clientOid={body['clientOid']})")
        data = await self.dispatcher.dispatch("POST", ApiMethods.ORDERS, body=body, signed=True)
        return _require_key(data, "orderId", "place_order")

    async def place_limit_order(
        self,
        pair: str,
        side: Side,
        price: Decimal,
        size: Decimal,
        client_oid: Optional[str] = None,
        time_in_force: Optional[TimeInForce] = None,
        cancel_after: Optional[int] = None,
        post_only: Optional[bool] = None,
        stp: Optional[SelfTradeProtect] = None,
        remark: Optional[str] = None,
    ) -> str:
        return await self._place_order(
            {
                "clientOid": client_oid or uuid.uuid4().hex,
                "symbol": pair,
                "side": _side_param(side),
                "type": OrderType.LIMIT,
                "price": price,
                "size": size,
                "timeInForce": time_in_force,
                "cancelAfter": cancel_after,
                "postOnly": post_only,
                "stp": stp,
                "remark": remark,
            }
        )

    async def place_market_order(
        self,
        pair: str,
        side: Side,
        size: Optional[Decimal] = None,
        funds: Optional[Decimal] = None,
        client_oid: Optional[str] = None,
        stp: Optional[SelfTradeProtect] = None,
        remark: Optional[str] = None,
    ) -> str:
        """Exactly one of `size` (base amount) or `funds` (quote amount) must be given."""
        if (size is None) == (funds is None):
            raise ValidationError("Market orders take exactly one of size or funds.")
        return await self._place_order(
            {
                "clientOid": client_oid or uuid.uuid4().hex,
                "symbol": pair,
                "side": _side_param(side),
                "type": OrderType.MARKET,
                "size": size,
                "funds": funds,
                "stp": stp,
                "remark": remark,
            }
        )

    async def place_stop_order(
        self,
        pair: str,
        side: Side,
        price: Decimal,
        size: Decimal,
        stop_price: Decimal,
        stop_type: StopType,
        client_oid: Optional[str] = None,
        time_in_force: Optional[TimeInForce] = None,
        remark: Optional[str] = None,
    ) -> str:
        return await self._place_order(
            {
                "clientOid": client_oid or uuid.uuid4().hex,
                "symbol": pair,
                "side": _side_param(side),
                "type": OrderType.LIMIT,
                "price": price,
                "size": size,
                "stop": stop_type,
                "stopPrice": stop_price,
                "timeInForce": time_in_force,
                "remark": remark,
            }
        )

    async def cancel_order(self, order_id: str) -> List[str]:
        """Returns the ids the exchange reports as cancelled."""
        data = await self.dispatcher.dispatch("DELETE", ApiMethods.ORDER.format(order_id=order_id), signed=True)
        return list(_require_key(data, "cancelledOrderIds", "cancel_order"))

    async def cancel_all_orders(self, pair: Optional[str] = None) -> List[str]:
        data = await self.dispatcher.dispatch("DELETE", ApiMethods.ORDERS, params={"symbol": pair}, signed=True)
        cancelled = list(_require_key(data, "cancelledOrderIds", "cancel_all_orders"))
        log.info(f"Cancelled {len(cancelled)} open orders.")
        return cancelled

    def _order_params(
        self,
        pair: Optional[str],
        status: Optional[OrderStatus],
        side: Optional[Side],
        order_type: Optional[OrderType],
        start_at: Optional[Timestamp],
        end_at: Optional[Timestamp],
    ) -> Dict[str, Any]:
        start_ms, end_ms = _ms(start_at), _ms(end_at)
        self._check_range(start_ms, end_ms)
        return {
            "status": status,
            "symbol": pair,
            "side": _side_param(side),
            "type": order_type,
            "startAt": start_ms,
            "endAt": end_ms,
        }

    async def get_orders(
        self,
        pair: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        side: Optional[Side] = None,
        order_type: Optional[OrderType] = None,
        start_at: Optional[Timestamp] = None,
        end_at: Optional[Timestamp] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Page[Order]:
        params = self._order_params(pair, status, side, order_type, start_at, end_at)
        return await self._get_page(ApiMethods.ORDERS, {**params, "currentPage": page, "pageSize": page_size}, Order)

    async def get_all_orders(
        self,
        pair: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        side: Optional[Side] = None,
        order_type: Optional[OrderType] = None,
        start_at: Optional[Timestamp] = None,
        end_at: Optional[Timestamp] = None,
        page_size: int = 50,
    ) -> List[Order]:
        params = self._order_params(pair, status, side, order_type, start_at, end_at)
        return await self._collect(ApiMethods.ORDERS, params, Order, page_size)

    async def get_order(self, order_id: str) -> Order:
        data = await self._get(ApiMethods.ORDER.format(order_id=order_id))
        return parse_model(data, Order)

    # --- Fills ---

    def _fill_params(
        self,
        order_id: Optional[str],
        pair: Optional[str],
        side: Optional[Side],
        order_type: Optional[OrderType],
        start_at: Optional[Timestamp],
        end_at: Optional[Timestamp],
    ) -> Dict[str, Any]:
        start_ms, end_ms = _ms(start_at), _ms(end_at)
        self._check_range(start_ms, end_ms)
        return {
            "orderId": order_id,
            "symbol": pair,
            "side": _side_param(side),
            "type": order_type,
            "startAt": start_ms,
            "endAt": end_ms,
        }

    async def get_fills(
        self,
        order_id: Optional[str] = None,
        pair: Optional[str] = None,
        side: Optional[Side] = None,
        order_type: Optional[OrderType] = None,
        start_at: Optional[Timestamp] = None,
        end_at: Optional[Timestamp] = None,
        page: int = 1,
        page_size: int = 100,
    ) -> Page[Fill]:
        params = self._fill_params(order_id, pair, side, order_type, start_at, end_at)
        return await self._get_page(ApiMethods.FILLS, {**params, "currentPage": page, "pageSize": page_size}, Fill)

    async def get_all_fills(
        self,
        order_id: Optional[str] = None,
        pair: Optional[str] = None,
        side: Optional[Side] = None,
        order_type: Optional[OrderType] = None,
        start_at: Optional[Timestamp] = None,
        end_at: Optional[Timestamp] = None,
        page_size: int = 100,
    ) -> List[Fill]:
        params = self._fill_params(order_id, pair, side, order_type, start_at, end_at)
        return await self._collect(ApiMethods.FILLS, params, Fill, page_size)

    # --- Deposits & Withdrawals ---

    async def create_deposit_address(self, currency: str) -> DepositAddress:
        data = await self.dispatcher.dispatch(
            "POST", ApiMethods.DEPOSIT_ADDRESSES, body={"currency": currency}, signed=True
        )
        return parse_model(data, DepositAddress)

    async def get_deposit_address(self, currency: str) -> DepositAddress:
        data = await self._get(ApiMethods.DEPOSIT_ADDRESSES, {"currency": currency})
        return parse_model(data, DepositAddress)

    async def get_deposit_history(
        self,
        currency: Optional[str] = None,
        start_at: Optional[Timestamp] = None,
        end_at: Optional[Timestamp] = None,
        status: Optional[DepositStatus] = None,
        page: int = 1,
        page_size: int = 100,
    ) -> Page[Deposit]:
        start_ms, end_ms = _ms(start_at), _ms(end_at)
        self._check_range(start_ms, end_ms)
        params = {
            "currency": currency,
            "startAt": start_ms,
            "endAt": end_ms,
            "status": status,
            "currentPage": page,
            "pageSize": page_size,
        }
        return await self._get_page(ApiMethods.DEPOSITS, params, Deposit)

    async def get_withdrawal_history(
        self,
        currency: Optional[str] = None,
        start_at: Optional[Timestamp] = None,
        end_at: Optional[Timestamp] = None,
        status: Optional[WithdrawalStatus] = None,
        page: int = 1,
        page_size: int = 100,
    ) -> Page[Withdrawal]:
        start_ms, end_ms = _ms(start_at), _ms(end_at)
        self._check_range(start_ms, end_ms)
        params = {
            "currency": currency,
            "startAt": start_ms,
            "endAt": end_ms,
            "status": status,
            "currentPage": page,
            "pageSize": page_size,
        }
        return await self._get_page(ApiMethods.WITHDRAWALS, params, Withdrawal)

    async def get_withdrawal_quota(self, currency: str) -> WithdrawalQuota:
        data = await self._get(ApiMethods.WITHDRAWAL_QUOTA, {"currency": currency})
        return parse_model(data, WithdrawalQuota)

    async def withdraw(
        self,
        currency: str,
        address: str,
        amount: Decimal,
        memo: Optional[str] = None,
        is_inner: bool = False,
        remark: Optional[str] = None,
    ) -> str:
        """Returns the withdrawal id."""
        body = {
            "currency": currency,
            "address": address,
            "memo": memo,
            "amount": amount,
            "isInner": is_inner,
            "remark": remark,
        }
        log.info(f"Requesting withdrawal of {amount} {currency}.")
        data = await self.dispatcher.dispatch("POST", ApiMethods.WITHDRAWALS, body=body, signed=True)
        return _require_key(data, "withdrawalId", "withdraw")

    async def cancel_withdrawal(self, withdrawal_id: str):
        await self.dispatcher.dispatch(
            "DELETE", ApiMethods.WITHDRAWAL.format(withdrawal_id=withdrawal_id), signed=True
        )

    # --- Public ---

    async def get_server_time(self) -> int:
        data = await self._get(ApiMethods.SERVER_TIME, signed=False)
        if isinstance(data, bool) or not isinstance(data, int):
            raise MalformedResponseError(f"Server time is not an integer: {data!r}")
        return data

    async def get_trading_pair_details(self, market: Optional[str] = None) -> List[TradingPairDetail]:
        data = await self._get(ApiMethods.SYMBOLS, {"market": market}, signed=False)
        return parse_models(data, TradingPairDetail)

    async def get_markets(self) -> List[str]:
        data = await self._get(ApiMethods.MARKETS, signed=False)
        if not isinstance(data, list):
            raise MalformedResponseError(f"Markets are not a list: {data!r}")
        return [str(market) for market in data]

    async def get_ticker(self, pair: str) -> Ticker:
        data = await self._get(ApiMethods.TICKER, {"symbol": pair}, signed=False)
        return parse_model(data, Ticker)

    async def get_part_order_book(self, pair: str) -> OrderBook:
        """Top 100 levels per side."""
        data = await self._get(ApiMethods.PART_ORDER_BOOK, {"symbol": pair}, signed=False)
        return parse_model(data, OrderBook)

    async def get_full_order_book(self, pair: str) -> OrderBook:
        data = await self._get(ApiMethods.FULL_ORDER_BOOK, {"symbol": pair}, signed=False)
        return parse_model(data, OrderBook)

    async def get_trade_history(self, pair: str) -> List[TradeHistory]:
        data = await self._get(ApiMethods.TRADE_HISTORY, {"symbol": pair}, signed=False)
        return parse_models(data, TradeHistory)

    async def get_candlesticks(
        self,
        pair: str,
        start_at: Timestamp,
        end_at: Timestamp,
        interval: Interval,
    ) -> List[Candlestick]:
        # Candles take second resolution bounds.
        start_s, end_s = to_unix_seconds(start_at), to_unix_seconds(end_at)
        self._check_range(start_s, end_s)
        params = {"symbol": pair, "startAt": start_s, "endAt": end_s, "type": interval}
        data = await self._get(ApiMethods.CANDLES, params, signed=False)
        if not isinstance(data, list):
            raise MalformedResponseError(f"Candles are not a list: {data!r}")
        return [Candlestick.from_row(row) for row in data]

    async def get_24hr_stats(self, pair: str) -> TradingPairStats:
        data = await self._get(ApiMethods.STATS_24HR, {"symbol": pair}, signed=False)
        return parse_model(data, TradingPairStats)

    async def get_currencies(self) -> List[Currency]:
        data = await self._get(ApiMethods.CURRENCIES, signed=False)
        return parse_models(data, Currency)

    async def get_currency(self, currency: str) -> Currency:
        data = await self._get(ApiMethods.CURRENCY.format(currency=currency), signed=False)
        return parse_model(data, Currency)
