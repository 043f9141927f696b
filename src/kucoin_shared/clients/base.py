# src/kucoin_shared/clients/base.py

# --- Built Ins  ---
from abc import ABC, abstractmethod
from typing import Optional, Self

# --- Installed  ---
import aiohttp
from loguru import logger as log

# --- Local Application Imports ---
from .dispatcher import RequestDispatcher
from .transport import AiohttpTransport, BaseTransport
from ..config.models import Credentials, ExchangeSettings
from ..core.enums import ApiGeneration, TimeUnit
from ..core.exceptions import ConfigurationError, ValidationError
from ..security.clock import ClockSource


class BaseKuCoinClient(ABC):
    """
    Contract shared by the legacy and current KuCoin clients: construction
    through `create()`, session lifecycle and the clock probe.
    """

    GENERATION: ApiGeneration
    SERVER_TIME_UNIT: TimeUnit = TimeUnit.MILLISECONDS

    def __init__(
        self,
        settings: ExchangeSettings,
        credentials: Credentials,
        transport: BaseTransport,
    ):
        if settings.generation is not self.GENERATION:
            raise ConfigurationError(
                f"{type(self).__name__} needs {self.GENERATION.name} settings, got {settings.generation.name}."
            )
        self._settings = settings
        self._transport = transport
        self.clock = ClockSource(
            self.get_server_time,
            server_time_unit=self.SERVER_TIME_UNIT,
            skew_threshold_ms=settings.clock_skew_threshold_ms,
            reprobe_interval_s=settings.clock_reprobe_interval_s,
        )
        self.dispatcher = RequestDispatcher(settings, credentials, transport, self.clock)

    @classmethod
    async def create(
        cls,
        settings: Optional[ExchangeSettings] = None,
        credentials: Optional[Credentials] = None,
        transport: Optional[BaseTransport] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> Self:
        """
        Builds a ready client. The clock is probed only when credentials can
        sign; a public-only client never needs a timestamp.
        """
        settings = settings or ExchangeSettings.for_generation(cls.GENERATION)
        credentials = credentials or Credentials()
        if transport is None:
            transport = AiohttpTransport(session=session, timeout_s=settings.request_timeout_s)
        await transport.connect()

        try:
            client = cls(settings, credentials, transport)
            if client.is_configured():
                await client.clock.initialize()
        except BaseException:
            await transport.close()
            raise
        log.info(
            f"{cls.__name__} ready at {settings.base_url} "
            f"(signed={client.is_configured()}, local_clock={client.clock.use_local_clock})"
        )
        return client

    async def close(self):
        await self._transport.close()
        log.info(f"{type(self).__name__} closed.")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def is_configured(self) -> bool:
        """True when every credential this API generation signs with is present."""
        return self.dispatcher.is_configured

    @staticmethod
    def _check_range(start_at: Optional[int], end_at: Optional[int]):
        # Checked before any I/O; an open range is allowed.
        if start_at is not None and end_at is not None and start_at >= end_at:
            raise ValidationError(f"Start time {start_at} cannot be >= end time {end_at}.")

    @abstractmethod
    async def get_server_time(self) -> int:
        """Exchange time, in SERVER_TIME_UNIT."""
        raise NotImplementedError
