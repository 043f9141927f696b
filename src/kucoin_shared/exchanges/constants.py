# src/kucoin_shared/exchanges/constants.py

"""
Static application constants
"""


class BaseUrls:
    LEGACY = "https://api.kucoin.com"
    CURRENT = "https://openapi-v2.kucoin.com"
    CURRENT_SANDBOX = "https://openapi-sandbox.kucoin.com"


class Headers:
    API_KEY = "KC-API-KEY"
    # Current
    SIGN = "KC-API-SIGN"
    TIMESTAMP = "KC-API-TIMESTAMP"
    PASSPHRASE = "KC-API-PASSPHRASE"
    # Legacy
    NONCE = "KC-API-NONCE"
    SIGNATURE = "KC-API-SIGNATURE"


CURRENT_SUCCESS_CODE = "200000"

# Quote markets used to split undashed legacy symbols, e.g. 'ETHBTC' -> 'ETH-BTC'.
LEGACY_QUOTE_MARKETS = ("USDT", "BTC", "ETH", "KCS", "NEO", "DAI", "TUSD", "USDC")


class ApiMethods:
    """Centralizes the endpoint paths of the current API."""

    # Public
    SERVER_TIME = "/api/v1/timestamp"
    SYMBOLS = "/api/v1/symbols"
    TICKER = "/api/v1/market/orderbook/level1"
    PART_ORDER_BOOK = "/api/v1/market/orderbook/level2_100"
    FULL_ORDER_BOOK = "/api/v1/market/orderbook/level2"
    TRADE_HISTORY = "/api/v1/market/histories"
    CANDLES = "/api/v1/market/candles"
    STATS_24HR = "/api/v1/market/stats"
    MARKETS = "/api/v1/markets"
    CURRENCIES = "/api/v1/currencies"
    CURRENCY = "/api/v1/currencies/{currency}"

    # Private
    ACCOUNTS = "/api/v1/accounts"
    ACCOUNT = "/api/v1/accounts/{account_id}"
    ACCOUNT_LEDGERS = "/api/v1/accounts/{account_id}/ledgers"
    ACCOUNT_HOLDS = "/api/v1/accounts/{account_id}/holds"
    INNER_TRANSFER = "/api/v1/accounts/inner-transfer"
    ORDERS = "/api/v1/orders"
    ORDER = "/api/v1/orders/{order_id}"
    FILLS = "/api/v1/fills"
    DEPOSIT_ADDRESSES = "/api/v1/deposit-addresses"
    DEPOSITS = "/api/v1/deposits"
    WITHDRAWALS = "/api/v1/withdrawals"
    WITHDRAWAL = "/api/v1/withdrawals/{withdrawal_id}"
    WITHDRAWAL_QUOTA = "/api/v1/withdrawals/quota"


class LegacyApiMethods:
    """Centralizes the endpoint paths of the legacy v1 API."""

    # Public
    SERVER_TIME = "/v1/time"
    TICK = "/v1/open/tick"
    MARKETS = "/v1/open/markets"
    ORDER_BOOK = "/v1/open/orders"
    COINS = "/v1/market/open/coins"
    COIN_INFO = "/v1/market/open/coin-info"

    # Private
    BALANCE = "/v1/account/balance"
    DEALT_ORDERS = "/v1/order/dealt"
    ORDER_DETAIL = "/v1/order/detail"
    ACTIVE_ORDERS = "/v1/order/active"
    ORDER = "/v1/order"
    CANCEL_ORDER = "/v1/cancel-order"
    DEPOSIT_ADDRESS = "/v1/account/{coin}/wallet/address"
    WALLET_RECORDS = "/v1/account/{coin}/wallet/records"
    WITHDRAW_APPLY = "/v1/account/{coin}/withdraw/apply"
