"""
Indicator library: SMA, SMA anchored at an index, ATR, average volume, 52-week range.
All functions are pure and take the OHLCV frame from bar_series.bars_to_frame.
None means "unavailable" (not enough bars) and is never the same as 0.0.
"""
from typing import Optional, Tuple

import pandas as pd

from sepa_config import WEEK_52_SESSIONS


def sma(hist: pd.DataFrame, period: int) -> Optional[float]:
    """Arithmetic mean of the last `period` closes."""
    if period <= 0 or len(hist) < period:
        return None
    return float(hist["Close"].iloc[-period:].mean())


def sma_at(hist: pd.DataFrame, period: int, index: int) -> Optional[float]:
    """SMA of closes ending at positional `index` (inclusive); None if the window leaves the series."""
    if period <= 0 or index < period - 1 or index >= len(hist):
        return None
    return float(hist["Close"].iloc[index - period + 1:index + 1].mean())


def true_range(hist: pd.DataFrame) -> pd.Series:
    """max(high-low, |high-prevClose|, |low-prevClose|); the first bar uses its own close."""
    high = hist["High"]
    low = hist["Low"]
    close = hist["Close"]
    prev_close = close.shift(1)
    if len(prev_close):
        prev_close.iloc[0] = close.iloc[0]
    return pd.concat([high - low, (high - prev_close).abs(), (low - prev_close).abs()], axis=1).max(axis=1)


def atr_series(hist: pd.DataFrame, period: int) -> pd.Series:
    """Rolling mean of true range (NaN until `period` values exist)."""
    return true_range(hist).rolling(window=period).mean()


def atr(hist: pd.DataFrame, period: int = 14) -> Optional[float]:
    """Average True Range over the last `period` bars; needs period + 1 bars."""
    if period <= 0 or len(hist) < period + 1:
        return None
    value = atr_series(hist, period).iloc[-1]
    return float(value) if not pd.isna(value) else None


def avg_volume(hist: pd.DataFrame, period: int) -> Optional[float]:
    """Arithmetic mean of the last `period` volumes."""
    if period <= 0 or len(hist) < period:
        return None
    return float(hist["Volume"].iloc[-period:].mean())


def week52_high_low(hist: pd.DataFrame) -> Tuple[Optional[float], Optional[float]]:
    """(max High, min Low) over the trailing 252 sessions, or all history if shorter."""
    if hist.empty:
        return None, None
    year_data = hist.tail(WEEK_52_SESSIONS)
    return float(year_data["High"].max()), float(year_data["Low"].min())
