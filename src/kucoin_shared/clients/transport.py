# src/kucoin_shared/clients/transport.py

# --- Built Ins ---
import asyncio
from abc import ABC, abstractmethod
from typing import Dict, NamedTuple, Optional

# --- Installed ---
import aiohttp
from loguru import logger as log
from yarl import URL

# --- Local Application Imports ---
from ..core.exceptions import TransportError


class RawResponse(NamedTuple):
    status: int
    body: bytes


class BaseTransport(ABC):
    """
    The HTTP collaborator the dispatcher sends through. Implementations return
    the raw body for every response the exchange produced, including non-2xx
    ones, and raise TransportError only when no response was obtained.
    """

    async def connect(self):
        """Hook for transports that own a session. A no-op by default."""
        pass

    async def close(self):
        """Hook for transports that own a session. A no-op by default."""
        pass

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str] = None,
    ) -> RawResponse:
        raise NotImplementedError

    async def get(self, url: str, headers: Dict[str, str]) -> RawResponse:
        return await self.request("GET", url, headers)

    async def post(self, url: str, headers: Dict[str, str], body: Optional[str] = None) -> RawResponse:
        return await self.request("POST", url, headers, body)

    async def delete(self, url: str, headers: Dict[str, str]) -> RawResponse:
        return await self.request("DELETE", url, headers)


class AiohttpTransport(BaseTransport):
    """aiohttp-backed transport. Uses a shared session when given one, else owns its own."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None, timeout_s: float = 10.0):
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout_s)

    async def connect(self):
        if self._owns_session and (self._session is None or self._session.closed):
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            log.info("Aiohttp session established for KuCoin API.")

    async def close(self):
        """Closes the session only if this transport created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            log.info("Aiohttp session for KuCoin API closed.")

    async def request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str] = None,
    ) -> RawResponse:
        if self._session is None:
            await self.connect()
        if self._session is None or self._session.closed:
            raise TransportError("Session is not active.")

        data = body.encode("utf-8") if body else None
        try:
            # encoded=True: the query was signed byte-for-byte and must not be re-quoted.
            async with self._session.request(
                method,
                URL(url, encoded=True),
                headers=headers,
                data=data,
                timeout=self._timeout,
            ) as response:
                payload = await response.read()
                return RawResponse(response.status, payload)
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} {url} timed out") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
