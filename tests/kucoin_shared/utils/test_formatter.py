# tests/kucoin_shared/utils/test_formatter.py

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from kucoin_shared.core.enums import Side
from kucoin_shared.utils.formatter import format_invariant, to_dashed_pair, to_unix_ms, to_unix_seconds


class TestFormatInvariant:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            (0, "0"),
            (-42, "-42"),
            (1e-08, "0.00000001"),
            (1e21, "1000000000000000000000"),
            (0.1, "0.1"),
            (Decimal("1E-8"), "0.00000001"),
            (Decimal("2.50"), "2.50"),
            (Decimal("1.2E+3"), "1200"),
            (Side.BUY, "BUY"),
            ("ETH-BTC", "ETH-BTC"),
        ],
    )
    def test_renders_without_exponent_or_locale(self, value, expected):
        assert format_invariant(value) == expected

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN"), Decimal("-Infinity")])
    def test_non_finite_is_rejected(self, value):
        with pytest.raises(ValueError):
            format_invariant(value)


class TestToDashedPair:
    @pytest.mark.parametrize(
        "pair, expected",
        [
            ("ETHBTC", "ETH-BTC"),
            ("KCSUSDT", "KCS-USDT"),
            ("NEOKCS", "NEO-KCS"),
            ("ETH-BTC", "ETH-BTC"),
            ("BTC", "BTC"),
            ("XYZABC", "XYZABC"),
        ],
    )
    def test_splits_on_known_quote_markets(self, pair, expected):
        assert to_dashed_pair(pair) == expected

    def test_custom_markets(self):
        assert to_dashed_pair("DOGEXRP", markets=("XRP",)) == "DOGE-XRP"


class TestUnixTime:
    def test_aware_datetime(self):
        moment = datetime(2019, 1, 9, 6, 26, 26, 532000, tzinfo=timezone.utc)
        assert to_unix_ms(moment) == 1547015186532

    def test_naive_datetime_is_utc(self):
        assert to_unix_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000

    def test_integers_pass_through_as_ms(self):
        assert to_unix_ms(1547015186532) == 1547015186532
        assert to_unix_seconds(1547015186532) == 1547015186
