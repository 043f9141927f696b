# src/kucoin_shared/security/clock.py

# --- Built Ins  ---
import time
from collections.abc import Awaitable, Callable
from typing import Optional

# --- Installed  ---
from loguru import logger as log
from pydantic import BaseModel, ConfigDict

# --- Local Application Imports ---
from ..core.enums import TimeUnit
from ..core.exceptions import ClockDriftError, KuCoinError

ServerTimeFetcher = Callable[[], Awaitable[int]]

DEFAULT_SKEW_THRESHOLD_MS = 1000


def local_time_ms() -> int:
    return int(time.time() * 1000)


class ClockState(BaseModel):
    model_config = ConfigDict(frozen=True)

    use_local_clock: bool = False
    last_known_server_offset_ms: Optional[int] = None
    probed_at: Optional[float] = None  # time.monotonic() of the last probe


class ClockSource:
    """
    Supplies the nonce/timestamp used to sign requests.

    The local clock is used when a probe found it within the skew threshold
    of the exchange's clock; otherwise every call fetches server time first.
    Until `initialize()` runs, the local clock is not trusted.
    """

    def __init__(
        self,
        fetch_server_time: ServerTimeFetcher,
        server_time_unit: TimeUnit = TimeUnit.MILLISECONDS,
        skew_threshold_ms: int = DEFAULT_SKEW_THRESHOLD_MS,
        reprobe_interval_s: Optional[float] = None,
        local_clock_ms: Callable[[], int] = local_time_ms,
    ):
        self._fetch_server_time = fetch_server_time
        # Unit conversion is fixed here so no call site ever compares seconds with ms.
        self._server_to_ms = server_time_unit.to_ms_factor
        self._skew_threshold_ms = skew_threshold_ms
        self._reprobe_interval_s = reprobe_interval_s
        self._local_clock_ms = local_clock_ms
        self._state = ClockState()
        self.last_probe_error: Optional[ClockDriftError] = None

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def use_local_clock(self) -> bool:
        return self._state.use_local_clock

    async def server_time_ms(self) -> int:
        return int(await self._fetch_server_time()) * self._server_to_ms

    async def initialize(self) -> ClockState:
        """Probes the exchange clock once and decides whether the local clock is trusted."""
        try:
            server_ms = await self.server_time_ms()
        except KuCoinError as e:
            drift_error = ClockDriftError(f"Server time probe failed: {e}")
            drift_error.__cause__ = e
            self.last_probe_error = drift_error
            self._state = ClockState(use_local_clock=False, probed_at=time.monotonic())
            log.warning(f"{drift_error}. Every signed call will fetch server time first.")
            return self._state

        offset_ms = server_ms - self._local_clock_ms()
        trusted = abs(offset_ms) < self._skew_threshold_ms
        self.last_probe_error = None
        self._state = ClockState(
            use_local_clock=trusted,
            last_known_server_offset_ms=offset_ms,
            probed_at=time.monotonic(),
        )
        if trusted:
            log.info(f"Local clock is within {abs(offset_ms)}ms of server time. Using local timestamps.")
        else:
            log.warning(
                f"Local clock is {offset_ms}ms off server time (threshold {self._skew_threshold_ms}ms). "
                "Fetching server time for every signed call."
            )
        return self._state

    def _reprobe_due(self) -> bool:
        if self._reprobe_interval_s is None or self._state.probed_at is None:
            return False
        return time.monotonic() - self._state.probed_at >= self._reprobe_interval_s

    async def get_timestamp(self) -> int:
        """
        Returns a signing timestamp in ms. May perform network I/O; transport
        failures propagate to the caller rather than falling back to a stale value.
        """
        if self._reprobe_due():
            log.debug("Clock re-probe interval elapsed. Re-probing server time.")
            await self.initialize()
        if self._state.use_local_clock:
            return self._local_clock_ms()
        return await self.server_time_ms()
