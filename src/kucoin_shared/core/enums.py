# src/kucoin_shared/core/enums.py

from enum import Enum


class ApiGeneration(str, Enum):
    """
    The two incompatible generations of the KuCoin REST API.
    Every generation-specific rule (canonical string, signature encoding,
    auth headers, envelope shape) is selected from this tag.
    """

    LEGACY = "v1"
    CURRENT = "v2"


class SignatureEncoding(str, Enum):
    # base64(HMAC-SHA256(secret, message))
    BASE64_DIGEST = "base64_digest"
    # hex(HMAC-SHA256(secret, base64(message)))
    HEX_OF_BASE64_MESSAGE = "hex_of_base64_message"


class EnvelopeShape(str, Enum):
    """The outer JSON wrappers the exchange uses around a payload."""

    LEGACY = "success_code_msg_data"  # {success, code, msg, data}
    CURRENT = "code_data"  # {code, data, msg?}
    BARE = "bare"  # the document itself is the payload


class TimeUnit(str, Enum):
    SECONDS = "s"
    MILLISECONDS = "ms"

    @property
    def to_ms_factor(self) -> int:
        return 1000 if self is TimeUnit.SECONDS else 1


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class AccountType(str, Enum):
    MAIN = "main"
    TRADE = "trade"


class OrderType(str, Enum):
    LIMIT = "limit"
    MARKET = "market"
    LIMIT_STOP = "limit_stop"
    MARKET_STOP = "market_stop"


class OrderStatus(str, Enum):
    DONE = "done"
    ACTIVE = "active"


class TimeInForce(str, Enum):
    GTC = "GTC"
    GTT = "GTT"
    IOC = "IOC"
    FOK = "FOK"


class SelfTradeProtect(str, Enum):
    CN = "CN"
    CO = "CO"
    CB = "CB"
    DC = "DC"


class StopType(str, Enum):
    ENTRY = "entry"
    LOSS = "loss"


class DepositStatus(str, Enum):
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class WithdrawalStatus(str, Enum):
    PROCESSING = "PROCESSING"
    WALLET_PROCESSING = "WALLET_PROCESSING"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class TransactionType(str, Enum):
    """Legacy deposit/withdrawal record type."""

    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


class TransactionStatus(str, Enum):
    CANCEL = "CANCEL"
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"


class Interval(str, Enum):
    """Candlestick sizes, valued with the current API's `type` parameter."""

    ONE_MINUTE = "1min"
    THREE_MINUTES = "3min"
    FIVE_MINUTES = "5min"
    FIFTEEN_MINUTES = "15min"
    THIRTY_MINUTES = "30min"
    ONE_HOUR = "1hour"
    TWO_HOURS = "2hour"
    FOUR_HOURS = "4hour"
    SIX_HOURS = "6hour"
    EIGHT_HOURS = "8hour"
    TWELVE_HOURS = "12hour"
    ONE_DAY = "1day"
    ONE_WEEK = "1week"
