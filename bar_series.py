"""
Bar and bar-series handling.
A series is a list of Bar or an OHLCV DataFrame; internally everything runs on a
DataFrame with a DatetimeIndex and columns Open, High, Low, Close, Volume.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence, Union

import pandas as pd

OHLCV_COLUMNS = ["Open", "High", "Low", "Close", "Volume"]

_COLUMN_ALIASES = {
    "Open": ["open", "o"],
    "High": ["high", "h"],
    "Low": ["low", "l"],
    "Close": ["close", "c", "adj close", "adj_close"],
    "Volume": ["volume", "vol", "v"],
}


class SeriesContractError(ValueError):
    """Raised when a bar series breaks the ordering contract (unsorted, duplicate dates, missing columns)."""


@dataclass(frozen=True)
class Bar:
    """One trading session."""
    date: Union[date, datetime, str]
    open: float
    high: float
    low: float
    close: float
    volume: int


BarSeries = Union[Sequence[Bar], pd.DataFrame]


def parse_bar_date(value) -> pd.Timestamp:
    """Accept date/datetime/Timestamp or YYYYMMDD / ISO strings."""
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 8 and text.isdigit():
            return pd.to_datetime(text, format="%Y%m%d")
        ts = pd.Timestamp(text)
    else:
        ts = pd.Timestamp(value)
    return ts.tz_localize(None) if ts.tzinfo is not None else ts


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    lower = {str(col).strip().lower(): col for col in df.columns}
    rename = {}
    for target, aliases in _COLUMN_ALIASES.items():
        if target in df.columns:
            continue
        for alias in [target.lower()] + aliases:
            if alias in lower:
                rename[lower[alias]] = target
                break
    return df.rename(columns=rename)


def date_column(df: pd.DataFrame) -> Optional[str]:
    """First column that holds session dates (date / datetime / timestamp / ts_event), or None."""
    for col in df.columns:
        name = str(col).lower()
        if "date" in name or "time" in name or name == "ts_event":
            return col
    return None


def _frame_dates(df: pd.DataFrame) -> pd.DatetimeIndex:
    """Session dates for a frame: a DatetimeIndex as is, else a date column, else a string index."""
    if isinstance(df.index, pd.DatetimeIndex):
        return df.index.tz_localize(None) if df.index.tz is not None else df.index
    col = date_column(df)
    if col is not None:
        return pd.DatetimeIndex([parse_bar_date(str(v)) for v in df[col]])
    if len(df.index) and all(isinstance(v, (str, date)) for v in df.index):
        return pd.DatetimeIndex([parse_bar_date(v) for v in df.index])
    if len(df.index) == 0:
        return pd.DatetimeIndex([])
    raise SeriesContractError("Bar frame has no dates: need a DatetimeIndex or a date column")


def bars_to_frame(series: BarSeries) -> pd.DataFrame:
    """
    Convert a list of Bar (or an OHLCV DataFrame) to the internal frame.
    Always returns a copy; ordering is NOT fixed here (see validate_series).
    """
    if isinstance(series, pd.DataFrame):
        df = _normalize_columns(series.copy())
        missing = [c for c in OHLCV_COLUMNS if c not in df.columns]
        if missing:
            raise SeriesContractError(f"Bar frame missing columns: {', '.join(missing)}")
        dates = _frame_dates(df)
        df = df[OHLCV_COLUMNS].astype(float)
        df.index = dates
        return df

    bars = list(series)
    if not bars:
        return pd.DataFrame(columns=OHLCV_COLUMNS, index=pd.DatetimeIndex([]), dtype=float)
    index = pd.DatetimeIndex([parse_bar_date(b.date) for b in bars])
    return pd.DataFrame(
        {
            "Open": [float(b.open) for b in bars],
            "High": [float(b.high) for b in bars],
            "Low": [float(b.low) for b in bars],
            "Close": [float(b.close) for b in bars],
            "Volume": [float(b.volume) for b in bars],
        },
        index=index,
    )


def validate_series(df: pd.DataFrame, label: str = "series") -> pd.DataFrame:
    """Raise SeriesContractError unless dates are strictly ascending with no duplicates."""
    missing = [c for c in OHLCV_COLUMNS if c not in df.columns]
    if missing:
        raise SeriesContractError(f"{label}: missing columns {', '.join(missing)}")
    if df.index.has_duplicates:
        dupes = df.index[df.index.duplicated()].unique()
        raise SeriesContractError(f"{label}: duplicate dates ({dupes[0].date()} ...)")
    if not df.index.is_monotonic_increasing:
        raise SeriesContractError(f"{label}: dates are not in ascending order")
    return df
