"""Tests for indicators (SMA, SMA at index, ATR, average volume, 52-week range)."""
import pytest

from indicators import sma, sma_at, atr, atr_series, avg_volume, week52_high_low, true_range
from bar_factory import make_frame, flat_frame


def test_sma_last_period_closes():
    """sma averages the last `period` closes."""
    hist = make_frame(list(range(1, 11)))
    assert sma(hist, 5) == pytest.approx(8.0)
    assert sma(hist, 10) == pytest.approx(5.5)


def test_sma_unavailable_when_too_short():
    """sma returns None (not 0) with fewer bars than the period."""
    hist = make_frame([1.0, 2.0, 3.0])
    assert sma(hist, 4) is None
    assert sma(hist, 3) == pytest.approx(2.0)


def test_avg_volume_zero_is_a_valid_value():
    """A genuine zero average is distinguishable from unavailable."""
    hist = make_frame([1.0, 2.0, 3.0], volumes=[0, 0, 0])
    assert avg_volume(hist, 3) == 0.0
    assert avg_volume(hist, 3) is not None


def test_sma_at_anchors_window_at_index():
    """sma_at uses closes [index - period + 1, index]."""
    hist = make_frame(list(range(1, 11)))
    assert sma_at(hist, 3, 4) == pytest.approx(4.0)  # closes 3, 4, 5
    assert sma_at(hist, 3, 9) == pytest.approx(sma(hist, 3))


def test_sma_at_out_of_range_is_unavailable():
    """Window underflowing the start or index past the end gives None."""
    hist = make_frame(list(range(1, 11)))
    assert sma_at(hist, 5, 3) is None
    assert sma_at(hist, 5, 10) is None
    assert sma_at(hist, 5, -1) is None


def test_true_range_first_bar_uses_own_close():
    """First bar's previous close is its own close."""
    hist = make_frame([9.0, 10.0, 14.0], highs=[10.0, 11.0, 15.0], lows=[8.0, 9.0, 10.0])
    tr = true_range(hist)
    assert list(tr) == [2.0, 2.0, 5.0]


def test_atr_mean_of_last_true_ranges():
    """atr is the mean of the last `period` true ranges and needs period + 1 bars."""
    hist = make_frame([9.0, 10.0, 14.0], highs=[10.0, 11.0, 15.0], lows=[8.0, 9.0, 10.0])
    assert atr(hist, 2) == pytest.approx(3.5)
    assert atr(hist, 3) is None


def test_atr_series_rolls():
    """atr_series is NaN until the window fills."""
    hist = flat_frame(n=20)
    values = atr_series(hist, 14)
    assert values.iloc[:13].isna().all()
    assert values.iloc[-1] == 0.0


def test_avg_volume_unavailable_when_too_short():
    """avg_volume returns None with fewer bars than the period."""
    hist = make_frame([10.0] * 4, volumes=[100, 200, 300, 400])
    assert avg_volume(hist, 5) is None
    assert avg_volume(hist, 2) == pytest.approx(350.0)


def test_week52_uses_trailing_252_sessions():
    """52-week window ignores bars older than 252 sessions."""
    closes = [500.0] + [50.0] * 260
    hist = make_frame(closes)
    high, low = week52_high_low(hist)
    assert high == pytest.approx(50.5)
    assert low == pytest.approx(49.5)


def test_week52_short_history_uses_all_bars():
    """With fewer than 252 sessions, all history counts."""
    hist = make_frame([10.0, 20.0, 30.0])
    high, low = week52_high_low(hist)
    assert high == pytest.approx(30.3)
    assert low == pytest.approx(9.9)


def test_week52_empty_frame():
    """Empty frame gives (None, None)."""
    empty = make_frame([])
    assert week52_high_low(empty) == (None, None)
