# src/kucoin_shared/core/models.py

# --- Built Ins  ---
from decimal import Decimal
from typing import Any, Generic, Optional, Type, TypeVar

# --- Installed  ---
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

# --- Local Application Imports ---
from .exceptions import MalformedResponseError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class AppBaseModel(BaseModel):
    """Base model for all exchange records. Fields map to the exchange's camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


def parse_model(payload: Any, model: Type[M]) -> M:
    """Validates one payload into a record. A bad payload is an error, never a default."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedResponseError(f"Unexpected {model.__name__} payload: {e}") from e


def parse_models(payload: Any, model: Type[M]) -> list[M]:
    try:
        return TypeAdapter(list[model]).validate_python(payload)
    except PydanticValidationError as e:
        raise MalformedResponseError(f"Unexpected list of {model.__name__} payload: {e}") from e


# --- Pagination ---


def _page_number(data: dict, key: str, default: int) -> int:
    value = data.get(key) or default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Page field {key!r} is not an integer: {value!r}") from e


class Page(BaseModel, Generic[T]):
    """One page of a paged endpoint, normalized across API generations."""

    items: list[T] = Field(default_factory=list)
    page_index: int = 1
    total_pages: int = 1
    is_last_page: bool = True

    @classmethod
    def from_current(cls, data: Any, item_model: Type[M]) -> "Page[M]":
        # {currentPage, pageSize, totalNum, totalPage, items}
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Expected a paged object, got {type(data).__name__}")
        page_index = _page_number(data, "currentPage", 1)
        total_pages = _page_number(data, "totalPage", 0)
        return cls(
            items=parse_models(data.get("items") or [], item_model),
            page_index=page_index,
            total_pages=total_pages,
            is_last_page=page_index >= total_pages,
        )

    @classmethod
    def from_legacy(cls, data: Any, item_model: Type[M]) -> "Page[M]":
        # {datas, currPageNo, pageNos, total, limit, firstPage, lastPage}
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Expected a paged object, got {type(data).__name__}")
        page_index = _page_number(data, "currPageNo", 1)
        total_pages = _page_number(data, "pageNos", 0)
        last_page = data.get("lastPage")
        return cls(
            items=parse_models(data.get("datas") or [], item_model),
            page_index=page_index,
            total_pages=total_pages,
            is_last_page=bool(last_page) if last_page is not None else page_index >= total_pages,
        )


# --- Current API Records ---


class Balance(AppBaseModel):
    id: str
    currency: str
    type: str
    balance: Decimal
    available: Decimal
    holds: Decimal = Decimal(0)


class AccountLedgerEntry(AppBaseModel):
    currency: str
    amount: Decimal
    fee: Decimal = Decimal(0)
    balance: Decimal
    biz_type: Optional[str] = None
    direction: Optional[str] = None
    created_at: int
    context: Any = None


class AccountHold(AppBaseModel):
    currency: str
    hold_amount: Decimal
    biz_type: Optional[str] = None
    order_id: Optional[str] = None
    created_at: int
    updated_at: Optional[int] = None


class Order(AppBaseModel):
    id: str
    symbol: str
    op_type: Optional[str] = None
    type: str
    side: str
    price: Decimal = Decimal(0)
    size: Decimal = Decimal(0)
    funds: Decimal = Decimal(0)
    deal_funds: Decimal = Decimal(0)
    deal_size: Decimal = Decimal(0)
    fee: Decimal = Decimal(0)
    fee_currency: Optional[str] = None
    stp: Optional[str] = None
    stop: Optional[str] = None
    stop_triggered: bool = False
    stop_price: Decimal = Decimal(0)
    time_in_force: Optional[str] = None
    post_only: bool = False
    hidden: bool = False
    iceberg: bool = False
    visible_size: Decimal = Decimal(0)
    cancel_after: int = 0
    channel: Optional[str] = None
    client_oid: Optional[str] = None
    remark: Optional[str] = None
    tags: Optional[str] = None
    is_active: bool = False
    cancel_exist: bool = False
    created_at: int


class Fill(AppBaseModel):
    symbol: str
    trade_id: str
    order_id: str
    counter_order_id: Optional[str] = None
    side: str
    liquidity: Optional[str] = None
    force_taker: bool = False
    price: Decimal
    size: Decimal
    funds: Decimal = Decimal(0)
    fee: Decimal = Decimal(0)
    fee_rate: Decimal = Decimal(0)
    fee_currency: Optional[str] = None
    stop: Optional[str] = None
    type: Optional[str] = None
    created_at: int


class DepositAddress(AppBaseModel):
    address: str
    memo: Optional[str] = None


class Deposit(AppBaseModel):
    address: Optional[str] = None
    memo: Optional[str] = None
    amount: Decimal
    fee: Decimal = Decimal(0)
    currency: str
    is_inner: bool = False
    wallet_tx_id: Optional[str] = None
    status: str
    created_at: int
    updated_at: Optional[int] = None


class Withdrawal(AppBaseModel):
    id: str
    address: Optional[str] = None
    memo: Optional[str] = None
    currency: str
    amount: Decimal
    fee: Decimal = Decimal(0)
    wallet_tx_id: Optional[str] = None
    is_inner: bool = False
    status: str
    created_at: int
    updated_at: Optional[int] = None


class WithdrawalQuota(AppBaseModel):
    currency: str
    available_amount: Decimal
    remain_amount: Decimal
    withdraw_min_size: Decimal
    limit_btc_amount: Optional[Decimal] = None
    inner_withdraw_min_fee: Optional[Decimal] = None
    is_withdraw_enabled: bool = True
    withdraw_min_fee: Decimal
    precision: int


class Ticker(AppBaseModel):
    sequence: str
    price: Decimal
    size: Decimal
    best_bid: Decimal
    best_bid_size: Decimal
    best_ask: Decimal
    best_ask_size: Decimal


class TradingPairDetail(AppBaseModel):
    symbol: str
    name: Optional[str] = None
    base_currency: str
    quote_currency: str
    base_min_size: Decimal
    quote_min_size: Decimal
    base_max_size: Decimal
    quote_max_size: Decimal
    base_increment: Decimal
    quote_increment: Decimal
    price_increment: Decimal
    enable_trading: bool = True


class TradingPairStats(AppBaseModel):
    symbol: str
    change_rate: Optional[Decimal] = None
    change_price: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    vol: Optional[Decimal] = None
    last: Optional[Decimal] = None
    buy: Optional[Decimal] = None
    sell: Optional[Decimal] = None


class Currency(AppBaseModel):
    currency: str
    name: str
    full_name: str
    precision: int


class TradeHistory(AppBaseModel):
    sequence: str
    price: Decimal
    size: Decimal
    side: str
    time: int


class OrderBook(AppBaseModel):
    sequence: str
    bids: list[list[Decimal]] = Field(default_factory=list)
    asks: list[list[Decimal]] = Field(default_factory=list)


class Candlestick(AppBaseModel):
    time: int
    open: Decimal
    close: Decimal
    high: Decimal
    low: Decimal
    volume: Decimal
    turnover: Decimal

    @classmethod
    def from_row(cls, row: list[Any]) -> "Candlestick":
        """Rows arrive as [time, open, close, high, low, volume, turnover]."""
        if not isinstance(row, list) or len(row) < 7:
            raise MalformedResponseError(f"Unexpected candlestick row: {row!r}")
        return parse_model(dict(zip(("time", "open", "close", "high", "low", "volume", "turnover"), row)), cls)


# --- Legacy API Records ---


class LegacyBalance(AppBaseModel):
    coin_type: str
    balance: Decimal
    freeze_balance: Decimal = Decimal(0)


class LegacyDealtOrder(AppBaseModel):
    oid: str
    order_oid: Optional[str] = None
    coin_type: str
    coin_type_pair: str
    direction: Optional[str] = None
    deal_direction: Optional[str] = None
    deal_price: Decimal
    amount: Decimal
    deal_value: Decimal = Decimal(0)
    fee: Decimal = Decimal(0)
    fee_rate: Decimal = Decimal(0)
    created_at: int


class LegacyOpenOrders(AppBaseModel):
    # Each entry is [timestamp, side, price, amount, dealAmount, orderOid].
    buy: list[list[Any]] = Field(default_factory=list, alias="BUY")
    sell: list[list[Any]] = Field(default_factory=list, alias="SELL")


class LegacyOrderBook(AppBaseModel):
    buy: list[list[Decimal]] = Field(default_factory=list, alias="BUY")
    sell: list[list[Decimal]] = Field(default_factory=list, alias="SELL")


class LegacyOrderDetail(AppBaseModel):
    coin_type: Optional[str] = None
    coin_type_pair: Optional[str] = None
    order_oid: Optional[str] = None
    type: Optional[str] = None
    order_price: Optional[Decimal] = None
    deal_amount: Decimal = Decimal(0)
    pending_amount: Decimal = Decimal(0)
    deal_value_total: Decimal = Decimal(0)
    deal_price_average: Decimal = Decimal(0)
    is_active: bool = False
    create_at: Optional[int] = None
    deal_orders: Any = None


class LegacyTick(AppBaseModel):
    coin_type: str
    coin_type_pair: str
    symbol: Optional[str] = None
    last_deal_price: Optional[Decimal] = None
    buy: Optional[Decimal] = None
    sell: Optional[Decimal] = None
    change: Optional[Decimal] = None
    vol: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    datetime: Optional[int] = None


class LegacyCoin(AppBaseModel):
    coin: str
    name: Optional[str] = None
    trade_precision: Optional[int] = None
    withdraw_min_amount: Optional[Decimal] = None
    withdraw_min_fee: Optional[Decimal] = None
    enable_withdraw: bool = True
    enable_deposit: bool = True


class LegacyTransaction(AppBaseModel):
    oid: str
    address: Optional[str] = None
    amount: Decimal
    coin_type: str
    confirmation: int = 0
    created_at: int
    fee: Decimal = Decimal(0)
    outer_wallet_txid: Optional[str] = None
    remark: Optional[str] = None
    status: str
    type: str
    updated_at: Optional[int] = None


class LegacyWithdrawalRequest(BaseModel):
    """Body of a legacy withdrawal; signed as 'amount=..&address=..' in field order."""

    amount: Decimal
    address: str
