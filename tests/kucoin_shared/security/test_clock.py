# tests/kucoin_shared/security/test_clock.py

from unittest.mock import AsyncMock

import pytest

from kucoin_shared.core.enums import TimeUnit
from kucoin_shared.core.exceptions import ClockDriftError, ExchangeBusinessError, TransportError
from kucoin_shared.security.clock import ClockSource

LOCAL_NOW_MS = 1_700_000_000_000


def _local_clock():
    return LOCAL_NOW_MS


@pytest.mark.asyncio
class TestClockSelection:
    async def test_within_threshold_trusts_local_clock(self):
        # Arrange
        fetch = AsyncMock(return_value=LOCAL_NOW_MS + 999)
        clock = ClockSource(fetch, local_clock_ms=_local_clock)

        # Act
        state = await clock.initialize()
        timestamps = [await clock.get_timestamp() for _ in range(3)]

        # Assert
        assert state.use_local_clock is True
        assert state.last_known_server_offset_ms == 999
        assert timestamps == [LOCAL_NOW_MS] * 3
        fetch.assert_awaited_once()  # only the probe

    async def test_beyond_threshold_fetches_server_time_every_call(self):
        # Arrange
        fetch = AsyncMock(return_value=LOCAL_NOW_MS - 5000)
        clock = ClockSource(fetch, local_clock_ms=_local_clock)

        # Act
        await clock.initialize()
        timestamps = [await clock.get_timestamp() for _ in range(3)]

        # Assert
        assert clock.use_local_clock is False
        assert timestamps == [LOCAL_NOW_MS - 5000] * 3
        assert fetch.await_count == 4

    async def test_exact_threshold_is_not_trusted(self):
        clock = ClockSource(AsyncMock(return_value=LOCAL_NOW_MS + 1000), local_clock_ms=_local_clock)
        await clock.initialize()
        assert clock.use_local_clock is False

    async def test_untrusted_before_initialize(self):
        fetch = AsyncMock(return_value=LOCAL_NOW_MS)
        clock = ClockSource(fetch, local_clock_ms=_local_clock)

        assert await clock.get_timestamp() == LOCAL_NOW_MS
        fetch.assert_awaited_once()
        assert clock.state.probed_at is None

    async def test_custom_threshold(self):
        clock = ClockSource(
            AsyncMock(return_value=LOCAL_NOW_MS + 1500), skew_threshold_ms=2000, local_clock_ms=_local_clock
        )
        await clock.initialize()
        assert clock.use_local_clock is True


@pytest.mark.asyncio
class TestUnitConversion:
    async def test_seconds_fetcher_is_converted_to_ms(self):
        # Arrange
        fetch = AsyncMock(return_value=LOCAL_NOW_MS // 1000)
        clock = ClockSource(fetch, server_time_unit=TimeUnit.SECONDS, local_clock_ms=_local_clock)

        # Act
        state = await clock.initialize()

        # Assert
        assert state.use_local_clock is True
        assert state.last_known_server_offset_ms == 0
        assert await clock.server_time_ms() == LOCAL_NOW_MS


@pytest.mark.asyncio
class TestProbeFailure:
    @pytest.mark.parametrize(
        "error",
        [TransportError("connection refused"), ExchangeBusinessError("400001", "bad request", 400)],
    )
    async def test_probe_failure_degrades_without_raising(self, error):
        # Arrange
        fetch = AsyncMock(side_effect=[error, LOCAL_NOW_MS + 10])
        clock = ClockSource(fetch, local_clock_ms=_local_clock)

        # Act
        state = await clock.initialize()
        timestamp = await clock.get_timestamp()

        # Assert
        assert state.use_local_clock is False
        assert isinstance(clock.last_probe_error, ClockDriftError)
        assert clock.last_probe_error.__cause__ is error
        assert timestamp == LOCAL_NOW_MS + 10

    async def test_fetch_failure_after_probe_propagates(self):
        # Arrange
        error = TransportError("timed out")
        fetch = AsyncMock(side_effect=[LOCAL_NOW_MS + 5000, error])
        clock = ClockSource(fetch, local_clock_ms=_local_clock)
        await clock.initialize()

        # Act / Assert
        with pytest.raises(TransportError) as exc_info:
            await clock.get_timestamp()
        assert exc_info.value is error

    async def test_successful_probe_clears_previous_error(self):
        fetch = AsyncMock(side_effect=[TransportError("down"), LOCAL_NOW_MS])
        clock = ClockSource(fetch, local_clock_ms=_local_clock)

        await clock.initialize()
        await clock.initialize()

        assert clock.last_probe_error is None
        assert clock.use_local_clock is True


@pytest.mark.asyncio
class TestReprobe:
    async def test_no_reprobe_by_default(self, mocker):
        # Arrange
        fake_time = mocker.patch("kucoin_shared.security.clock.time")
        fake_time.monotonic.return_value = 100.0
        fetch = AsyncMock(return_value=LOCAL_NOW_MS)
        clock = ClockSource(fetch, local_clock_ms=_local_clock)
        await clock.initialize()

        # Act
        fake_time.monotonic.return_value = 1_000_000.0
        await clock.get_timestamp()

        # Assert
        fetch.assert_awaited_once()

    async def test_reprobe_after_interval_can_revoke_trust(self, mocker):
        # Arrange
        fake_time = mocker.patch("kucoin_shared.security.clock.time")
        fake_time.monotonic.return_value = 100.0
        fetch = AsyncMock(side_effect=[LOCAL_NOW_MS, LOCAL_NOW_MS + 3000, LOCAL_NOW_MS + 3000])
        clock = ClockSource(fetch, reprobe_interval_s=60, local_clock_ms=_local_clock)
        await clock.initialize()

        # Act
        fake_time.monotonic.return_value = 130.0
        before_interval = await clock.get_timestamp()
        fake_time.monotonic.return_value = 161.0
        after_interval = await clock.get_timestamp()

        # Assert
        assert before_interval == LOCAL_NOW_MS
        assert after_interval == LOCAL_NOW_MS + 3000
        assert clock.use_local_clock is False
        assert fetch.await_count == 3  # probe, re-probe, server-time fetch
