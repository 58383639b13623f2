"""
Adapter tests with mocked HTTP: credential checks, response normalization,
sentinel rejection and percent-change rules. No live network.
"""
from __future__ import annotations

from unittest.mock import patch

import pytest

from market_indicators.core.errors import ConfigError, DataShapeError, TransportError
from market_indicators.providers.base import SourceAdapter
from market_indicators.providers.csv_history import CboeCsvAdapter, StooqCsvAdapter
from market_indicators.providers.fmp import FmpQuoteAdapter
from market_indicators.providers.fred import FredLatestPairAdapter, FredLatestValueAdapter
from market_indicators.providers.twelvedata import TwelveDataQuoteAdapter
from tests.fakes.http import fred_payload, make_response

GET = "market_indicators.providers.transport.requests.get"


@pytest.fixture
def keys(monkeypatch):
    monkeypatch.setenv("FRED_KEY", "fred-test")
    monkeypatch.setenv("FMP_KEY", "fmp-test")
    monkeypatch.setenv("TWELVE_KEY", "twelve-test")


@pytest.mark.parametrize(
    "adapter",
    [
        FredLatestPairAdapter("VIXCLS"),
        FredLatestValueAdapter("DGS10"),
        FmpQuoteAdapter("^VIX"),
        TwelveDataQuoteAdapter("XAU/USD"),
        CboeCsvAdapter(),
        StooqCsvAdapter(),
    ],
)
def test_adapters_satisfy_protocol(adapter):
    assert isinstance(adapter, SourceAdapter)
    assert adapter.source_label


@pytest.mark.parametrize(
    "adapter,message",
    [
        (FredLatestPairAdapter("VIXCLS"), "FRED_KEY missing"),
        (FredLatestValueAdapter("DGS2"), "FRED_KEY missing"),
        (FmpQuoteAdapter("^VIX"), "FMP_KEY missing"),
        (TwelveDataQuoteAdapter("XAU/USD"), "TWELVE_KEY missing"),
    ],
)
@patch(GET)
def test_missing_key_fails_fast_without_network(mock_get, adapter, message):
    with pytest.raises(ConfigError, match=message):
        adapter.attempt()
    mock_get.assert_not_called()


class TestFred:
    @patch(GET)
    def test_vix_latest_pair(self, mock_get, keys):
        mock_get.return_value = make_response(
            200,
            fred_payload(("2026-01-06", "."), ("2026-01-05", "25.004"), ("2026-01-02", "20.00")),
        )
        adapter = FredLatestPairAdapter("VIXCLS", "FRED VIXCLS (daily close)")
        quote = adapter.attempt()

        assert quote.price == 25.0
        assert quote.change_percent == 25.02
        assert quote.source == "FRED VIXCLS (daily close)"
        params = mock_get.call_args.kwargs["params"]
        assert params["series_id"] == "VIXCLS"
        assert params["api_key"] == "fred-test"
        assert params["sort_order"] == "desc"

    @patch(GET)
    def test_previous_is_by_date_not_raw_adjacency(self, mock_get, keys):
        # Unsorted, with a sentinel between the two most recent real values.
        mock_get.return_value = make_response(
            200,
            fred_payload(
                ("2026-01-02", "100"),
                ("2026-01-08", "110"),
                ("2026-01-07", "."),
                ("2026-01-06", "105"),
            ),
        )
        quote = FredLatestPairAdapter("DTWEXBGS").attempt()
        assert quote.price == 110.0
        assert quote.change_percent == 4.76

    @patch(GET)
    def test_single_observation_gives_null_change(self, mock_get, keys):
        mock_get.return_value = make_response(200, fred_payload(("2026-01-05", "120.5")))
        quote = FredLatestPairAdapter("DTWEXBGS").attempt()
        assert quote.price == 120.5
        assert quote.change_percent is None

    @patch(GET)
    def test_previous_zero_gives_null_change(self, mock_get, keys):
        mock_get.return_value = make_response(200, fred_payload(("2026-01-02", "0"), ("2026-01-05", "3")))
        assert FredLatestPairAdapter("X").attempt().change_percent is None

    @patch(GET)
    def test_only_sentinels_is_data_shape_error(self, mock_get, keys):
        mock_get.return_value = make_response(200, fred_payload(("2026-01-05", "."), ("2026-01-06", ".")))
        with pytest.raises(DataShapeError):
            FredLatestPairAdapter("VIXCLS").attempt()
        assert mock_get.call_count == 1

    @patch(GET)
    def test_gold_fix_keeps_full_precision(self, mock_get, keys):
        mock_get.return_value = make_response(200, fred_payload(("2026-01-05", "2650.125")))
        quote = FredLatestPairAdapter("GOLDPMGBD228NLBM", round_price=False).attempt()
        assert quote.price == 2650.125
        assert quote.source == "FRED GOLDPMGBD228NLBM"

    @patch(GET)
    def test_http_failure_is_transport_error(self, mock_get, keys):
        mock_get.return_value = make_response(500)
        with pytest.raises(TransportError):
            FredLatestPairAdapter("VIXCLS").attempt()
        assert mock_get.call_count == 3

    @patch(GET)
    def test_latest_value_skips_future_dates(self, mock_get, keys, monkeypatch):
        monkeypatch.setenv("MARKET_INDICATORS_DETERMINISTIC_TIME", "2026-01-06T12:00:00Z")
        mock_get.return_value = make_response(
            200,
            fred_payload(("2026-01-07", "4.9"), ("2026-01-06", "."), ("2026-01-05", "4.20")),
        )
        quote = FredLatestValueAdapter("DGS10").attempt()
        assert quote.price == 4.20
        assert quote.change_percent is None
        assert quote.source == "FRED DGS10"


class TestFmp:
    @patch(GET)
    def test_quote(self, mock_get, keys):
        mock_get.return_value = make_response(
            200, [{"symbol": "^VIX", "price": 18.4567, "changesPercentage": -3.14159}]
        )
        quote = FmpQuoteAdapter("^VIX", round_price=True).attempt()
        assert quote.price == 18.46
        assert quote.change_percent == -3.14
        assert quote.source == "FMP ^VIX"
        assert mock_get.call_args.args[0].endswith("/api/v3/quote/%5EVIX")
        assert mock_get.call_args.kwargs["params"] == {"apikey": "fmp-test"}

    @patch(GET)
    def test_price_falls_back_to_previous_close(self, mock_get, keys):
        mock_get.return_value = make_response(200, [{"price": None, "previousClose": "2400.5"}])
        quote = FmpQuoteAdapter("GC=F").attempt()
        assert quote.price == 2400.5
        assert quote.change_percent is None

    @patch(GET)
    def test_sentinel_price_rejected_not_retried(self, mock_get, keys):
        mock_get.return_value = make_response(200, [{"price": ".", "changesPercentage": 1.0}])
        with pytest.raises(DataShapeError, match="non-numeric"):
            FmpQuoteAdapter("GC=F").attempt()
        assert mock_get.call_count == 1

    @pytest.mark.parametrize("bad_price", [".", "N/A", "abc"])
    @patch(GET)
    def test_sentinel_price_does_not_fall_back_to_previous_close(self, mock_get, bad_price, keys):
        mock_get.return_value = make_response(200, [{"price": bad_price, "previousClose": 18.0}])
        with pytest.raises(DataShapeError, match="non-numeric"):
            FmpQuoteAdapter("^VIX").attempt()

    @patch(GET)
    def test_no_price_fields_at_all(self, mock_get, keys):
        mock_get.return_value = make_response(200, [{"symbol": "GC=F", "changesPercentage": 0.2}])
        with pytest.raises(DataShapeError, match="no usable price"):
            FmpQuoteAdapter("GC=F").attempt()

    @pytest.mark.parametrize("payload", [[], {}, {"Error Message": "Limit Reach"}, [None]])
    @patch(GET)
    def test_empty_payload(self, mock_get, payload, keys):
        mock_get.return_value = make_response(200, payload)
        with pytest.raises(DataShapeError, match="empty response"):
            FmpQuoteAdapter("^VIX").attempt()

    @patch(GET)
    def test_rate_limit_uses_two_attempts(self, mock_get, keys, sleeps):
        mock_get.return_value = make_response(429)
        with pytest.raises(TransportError, match="HTTP 429"):
            FmpQuoteAdapter("^VIX").attempt()
        assert mock_get.call_count == 2
        assert sleeps == pytest.approx([0.4])


class TestTwelveData:
    @patch(GET)
    def test_quote(self, mock_get, keys):
        mock_get.return_value = make_response(200, {"close": "2651.30", "percent_change": "0.45"})
        quote = TwelveDataQuoteAdapter("XAU/USD").attempt()
        assert quote.price == 2651.30
        assert quote.change_percent == 0.45
        assert quote.source == "TwelveData XAU/USD"
        assert mock_get.call_args.kwargs["params"]["symbol"] == "XAU/USD"

    @patch(GET)
    def test_error_status(self, mock_get, keys):
        mock_get.return_value = make_response(
            200, {"status": "error", "code": 429, "message": "API credits exhausted"}
        )
        with pytest.raises(DataShapeError, match="API credits exhausted"):
            TwelveDataQuoteAdapter("XAU/USD").attempt()

    @patch(GET)
    def test_non_numeric_close(self, mock_get, keys):
        mock_get.return_value = make_response(200, {"close": ".", "percent_change": "1"})
        with pytest.raises(DataShapeError):
            TwelveDataQuoteAdapter("SPY").attempt()

    @patch(GET)
    def test_bad_percent_is_null(self, mock_get, keys):
        mock_get.return_value = make_response(200, {"close": "500", "percent_change": "n/a"})
        assert TwelveDataQuoteAdapter("SPY").attempt().change_percent is None


class TestCsvHistory:
    @patch(GET)
    def test_cboe(self, mock_get):
        mock_get.return_value = make_response(
            200,
            text="DATE,OPEN,HIGH,LOW,CLOSE\n01/02/2026,1,1,1,20.00\n01/05/2026,1,1,1,25.00\n",
        )
        quote = CboeCsvAdapter().attempt()
        assert quote.price == 25.0
        assert quote.change_percent == 25.0
        assert quote.source == "CBOE CSV"

    @patch(GET)
    def test_cboe_single_row(self, mock_get):
        mock_get.return_value = make_response(200, text="DATE,OPEN,HIGH,LOW,CLOSE\n01/05/2026,1,1,1,25.00\n")
        quote = CboeCsvAdapter().attempt()
        assert quote.change_percent is None

    @patch(GET)
    def test_stooq(self, mock_get):
        mock_get.return_value = make_response(
            200,
            text="Date,Open,High,Low,Close\n2026-01-02,1,1,1,16.0\n2026-01-05,1,1,1,17.6\n",
        )
        quote = StooqCsvAdapter().attempt()
        assert quote.price == 17.6
        assert quote.change_percent == 10.0
        assert quote.source == "Stooq CSV"
        assert mock_get.call_args.kwargs["params"] == {"s": "^vix", "i": "d"}

    @patch(GET)
    def test_stooq_no_data(self, mock_get):
        mock_get.return_value = make_response(200, text="NO DATA")
        with pytest.raises(DataShapeError, match="NO DATA"):
            StooqCsvAdapter().attempt()
