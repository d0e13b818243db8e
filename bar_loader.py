"""
Load daily OHLCV bars from CSV files (one file per symbol: <SYMBOL>.csv).
Columns: a date column (date / ts_event / timestamp ...) plus open, high, low, close, volume
in any case. Dates may be YYYYMMDD or ISO.
"""
from pathlib import Path
from typing import Dict, Iterable, Optional

import pandas as pd

from bar_series import OHLCV_COLUMNS, bars_to_frame, date_column, parse_bar_date
from logger_config import get_logger

logger = get_logger(__name__)


def load_bars_csv(path, start: Optional[str] = None, end: Optional[str] = None) -> pd.DataFrame:
    """
    Read one symbol's bars. Optional start/end (YYYYMMDD or ISO) keep rows inside the range.
    Rows are returned in file order; unsorted files fail later in validate_series.
    """
    p = Path(path)
    df = pd.read_csv(p)
    if date_column(df) is None:
        raise ValueError(f"{p.name}: no date column")
    frame = bars_to_frame(df)
    if start:
        frame = frame[frame.index >= parse_bar_date(start)]
    if end:
        frame = frame[frame.index <= parse_bar_date(end)]
    return frame


def load_bars_dir(
    directory,
    symbols: Optional[Iterable[str]] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Load <SYMBOL>.csv for each symbol (or every CSV in the directory).
    File names match symbols case-insensitively. Missing or unreadable files are logged
    and left out of the mapping.
    """
    d = Path(directory)
    files = {p.stem.upper(): p for p in sorted(d.glob("*.csv"))}
    if symbols is None:
        wanted = sorted(files)
    else:
        wanted = [s.strip().upper() for s in symbols if s and s.strip()]

    out: Dict[str, pd.DataFrame] = {}
    for symbol in wanted:
        path = files.get(symbol)
        if path is None:
            logger.warning("No bar file for %s in %s", symbol, d)
            continue
        try:
            frame = load_bars_csv(path, start=start, end=end)
        except Exception as e:
            logger.error("Could not load bars for %s: %s", symbol, e)
            continue
        if frame.empty:
            logger.warning("No bars for %s in range", symbol)
            continue
        out[symbol] = frame[OHLCV_COLUMNS]
    logger.info("Loaded bars for %d of %d symbols from %s", len(out), len(wanted), d)
    return out
