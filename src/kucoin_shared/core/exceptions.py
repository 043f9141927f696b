# src/kucoin_shared/core/exceptions.py

"""
Error taxonomy for the KuCoin clients.

Each failure mode has its own type so callers can tell apart
"credentials are wrong", "clock/signature is wrong", "the exchange
rejected the request" and "the network is unreachable".
"""

from typing import Optional


class KuCoinError(Exception):
    """Base class for every error raised by this library."""

    pass


class ConfigurationError(KuCoinError):
    """Missing or empty credentials for a signed call. Raised before any I/O."""

    pass


class ValidationError(KuCoinError):
    """A caller-supplied argument violates an invariant. Raised before any I/O."""

    pass


class ClockDriftError(KuCoinError):
    """
    The server-time probe failed. The clock source records this and degrades
    to fetching server time on every signed call.
    """

    pass


class TransportError(KuCoinError):
    """Connection, timeout or DNS level failure, or an unusable response body."""

    def __init__(self, message: str, http_status: Optional[int] = None):
        super().__init__(message)
        self.http_status = http_status


class MalformedResponseError(TransportError):
    """The response body is not JSON or does not match the expected envelope/record."""

    pass


class ExchangeBusinessError(KuCoinError):
    """A well-formed envelope reporting failure. Code and message are verbatim."""

    def __init__(self, code: Optional[str], message: Optional[str], http_status: Optional[int] = None):
        super().__init__(f"KuCoin rejected the request (code={code}): {message}")
        self.code = code
        self.message = message
        self.http_status = http_status
