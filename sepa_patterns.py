"""
SEPA pattern detectors: liquidity floor, Trend Template (7 structural criteria),
Volatility Contraction Pattern and volume-confirmed Breakout with letter grade.

Each detector works on the OHLCV frame from bar_series and never raises on short
history: it fails the check (or returns None for breakout) instead.
"""
from typing import Dict, Optional

import pandas as pd

from indicators import sma, sma_at, atr_series, avg_volume, week52_high_low
from logger_config import get_logger
from sepa_config import (
    MIN_PRICE, MIN_DOLLAR_VOLUME_50D, LIQUIDITY_VOLUME_PERIOD,
    MIN_HISTORY_SESSIONS, SMA_50_PERIOD, SMA_150_PERIOD, SMA_200_PERIOD, ATR_PERIOD,
    MA200_RISE_SESSIONS, MIN_ABOVE_52W_LOW_RATIO, MIN_OF_52W_HIGH_RATIO,
    TEMPLATE_CRITERIA_TOTAL,
    VCP_MIN_SESSIONS, VCP_RECENT_ATR_SESSIONS, VCP_BASELINE_ATR_SESSIONS, VCP_ATR_RATIO,
    VCP_SHORT_VOLUME_PERIOD, VCP_LONG_VOLUME_PERIOD, VCP_VOLUME_RATIO,
    VCP_RANGE_SESSIONS, VCP_RANGE_MAX, VCP_HIGH_SESSIONS, VCP_NEAR_HIGH_RATIO, VCP_LOW_BUFFER,
    BO_PIVOT_SESSIONS, BO_MIN_EXTRA_SESSIONS, BO_VOLUME_PERIOD, BO_VOLUME_MULT,
    BO_BASE_SESSIONS, BO_BASE_MAX_WIDTH,
    BO_GRADE_A_PCT_ABOVE, BO_GRADE_A_VOLUME_RATIO, BO_GRADE_B_PCT_ABOVE, BO_GRADE_B_VOLUME_RATIO,
)

logger = get_logger(__name__)


def passes_liquidity(hist: pd.DataFrame) -> bool:
    """Latest close >= MIN_PRICE and close * 50-day avg volume >= MIN_DOLLAR_VOLUME_50D."""
    if hist.empty:
        return False
    price = float(hist["Close"].iloc[-1])
    if price < MIN_PRICE:
        return False
    avg_vol = avg_volume(hist, LIQUIDITY_VOLUME_PERIOD)
    if avg_vol is None:
        return False
    return price * avg_vol >= MIN_DOLLAR_VOLUME_50D


def check_trend_template(hist: pd.DataFrame) -> Dict:
    """
    Structural Trend Template (RS >= 70 is applied later, once the batch is ranked).

    Criteria (each counted independently):
    1. Price above 150 SMA and 200 SMA
    2. 150 SMA above 200 SMA
    3. 200 SMA higher than 22 sessions ago
    4. 50 SMA above 150 SMA and 200 SMA
    5. Price above 50 SMA
    6. Price at least 25% above 52-week low
    7. Price within 25% of 52-week high

    Returns {"passed", "criteria_count", "failures", "details"}.
    """
    results = {
        "passed": False,
        "criteria_count": 0,
        "failures": [],
        "details": {},
    }
    if len(hist) < MIN_HISTORY_SESSIONS:
        results["failures"].append(f"Insufficient data ({len(hist)} sessions, need {MIN_HISTORY_SESSIONS})")
        return results

    ma50 = sma(hist, SMA_50_PERIOD)
    ma150 = sma(hist, SMA_150_PERIOD)
    ma200 = sma(hist, SMA_200_PERIOD)
    if ma50 is None or ma150 is None or ma200 is None:
        results["failures"].append("Moving averages unavailable")
        return results

    price = float(hist["Close"].iloc[-1])
    ma200_ago = sma_at(hist, SMA_200_PERIOD, len(hist) - 1 - MA200_RISE_SESSIONS)
    high_52w, low_52w = week52_high_low(hist)

    checks = [
        (price > ma150 and price > ma200, "Price not above 150 and 200 SMA"),
        (ma150 > ma200, "150 SMA not above 200 SMA"),
        (ma200_ago is not None and ma200 > ma200_ago, f"200 SMA not rising over {MA200_RISE_SESSIONS} sessions"),
        (ma50 > ma150 and ma50 > ma200, "50 SMA not above 150 and 200 SMA"),
        (price > ma50, "Price not above 50 SMA"),
        (low_52w is not None and low_52w > 0 and price >= low_52w * MIN_ABOVE_52W_LOW_RATIO,
         f"Price less than {(MIN_ABOVE_52W_LOW_RATIO - 1) * 100:.0f}% above 52W low"),
        (high_52w is not None and high_52w > 0 and price / high_52w >= MIN_OF_52W_HIGH_RATIO,
         f"Price more than {(1 - MIN_OF_52W_HIGH_RATIO) * 100:.0f}% below 52W high"),
    ]
    count = 0
    for ok, failure in checks:
        if ok:
            count += 1
        else:
            results["failures"].append(failure)

    results["criteria_count"] = count
    results["passed"] = count >= TEMPLATE_CRITERIA_TOTAL
    results["details"] = {
        "current_price": price,
        "sma_50": ma50,
        "sma_150": ma150,
        "sma_200": ma200,
        "sma_200_prior": ma200_ago,
        "52_week_high": high_52w,
        "52_week_low": low_52w,
    }
    return results


def check_vcp(hist: pd.DataFrame) -> Dict:
    """
    Volatility Contraction Pattern (all required):
    - mean 14d ATR over last 20 sessions < 75% of mean 14d ATR over last 60 sessions
    - 5d avg volume < 80% of 50d avg volume
    - 10-day range / price <= 8%
    - price >= 85% of 60-day high
    - 10-day low stays more than 2% above the 52-week low
    """
    results = {"passed": False, "failures": [], "details": {}}
    if len(hist) < VCP_MIN_SESSIONS:
        results["failures"].append(f"Insufficient data ({len(hist)} sessions, need {VCP_MIN_SESSIONS})")
        return results

    price = float(hist["Close"].iloc[-1])
    atr_values = atr_series(hist, ATR_PERIOD)
    recent_atr = atr_values.tail(VCP_RECENT_ATR_SESSIONS).dropna().mean()
    baseline_atr = atr_values.tail(VCP_BASELINE_ATR_SESSIONS).dropna().mean()
    vol_short = avg_volume(hist, VCP_SHORT_VOLUME_PERIOD)
    vol_long = avg_volume(hist, VCP_LONG_VOLUME_PERIOD)

    last_range = hist.tail(VCP_RANGE_SESSIONS)
    range_pct = (float(last_range["High"].max()) - float(last_range["Low"].min())) / price if price > 0 else None
    high_60 = float(hist["High"].tail(VCP_HIGH_SESSIONS).max())
    _, low_52w = week52_high_low(hist)
    recent_low = float(last_range["Low"].min())

    atr_ok = bool(
        not pd.isna(recent_atr) and not pd.isna(baseline_atr)
        and recent_atr < baseline_atr * VCP_ATR_RATIO
    )
    volume_ok = vol_short is not None and vol_long is not None and vol_short < vol_long * VCP_VOLUME_RATIO
    range_ok = range_pct is not None and range_pct <= VCP_RANGE_MAX
    near_high_ok = price >= high_60 * VCP_NEAR_HIGH_RATIO
    no_breakdown_ok = low_52w is not None and recent_low > low_52w * VCP_LOW_BUFFER

    if not atr_ok:
        results["failures"].append("Volatility not contracting")
    if not volume_ok:
        results["failures"].append("Volume not drying up")
    if not range_ok:
        results["failures"].append(f"{VCP_RANGE_SESSIONS}-day range too wide")
    if not near_high_ok:
        results["failures"].append(f"Price not within {(1 - VCP_NEAR_HIGH_RATIO) * 100:.0f}% of {VCP_HIGH_SESSIONS}-day high")
    if not no_breakdown_ok:
        results["failures"].append("Recent low too close to 52W low")

    results["passed"] = bool(atr_ok and volume_ok and range_ok and near_high_ok and no_breakdown_ok)
    results["details"] = {
        "recent_atr": None if pd.isna(recent_atr) else float(recent_atr),
        "baseline_atr": None if pd.isna(baseline_atr) else float(baseline_atr),
        "volume_5d": vol_short,
        "volume_50d": vol_long,
        "range_10d_pct": range_pct,
        "high_60d": high_60,
    }
    return results


def grade_breakout(percent_above: float, volume_ratio: float) -> str:
    """A: >=3% above pivot on >=2.0x volume; B: >=2% on >=1.5x; otherwise C."""
    if percent_above >= BO_GRADE_A_PCT_ABOVE and volume_ratio >= BO_GRADE_A_VOLUME_RATIO:
        return "A"
    if percent_above >= BO_GRADE_B_PCT_ABOVE and volume_ratio >= BO_GRADE_B_VOLUME_RATIO:
        return "B"
    return "C"


def check_breakout(hist: pd.DataFrame) -> Optional[Dict]:
    """
    Today closes above the pivot (max High of the prior 10 sessions) on >= 1.4x 50-day
    average volume, out of a prior-20-session base no wider than 25% of price.
    Returns None when there is no qualifying breakout, else
    {"grade", "pivot_high", "percent_above", "volume_ratio", "base_width"}.
    """
    if len(hist) < BO_PIVOT_SESSIONS + BO_MIN_EXTRA_SESSIONS:
        return None
    avg_vol = avg_volume(hist, BO_VOLUME_PERIOD)
    if avg_vol is None or avg_vol <= 0:
        return None

    price = float(hist["Close"].iloc[-1])
    volume = float(hist["Volume"].iloc[-1])
    prior = hist.iloc[:-1]
    pivot_high = float(prior["High"].tail(BO_PIVOT_SESSIONS).max())

    if price <= pivot_high:
        return None
    volume_ratio = volume / avg_vol
    if volume < avg_vol * BO_VOLUME_MULT:
        return None

    base = prior.tail(BO_BASE_SESSIONS)
    base_width = (float(base["High"].max()) - float(base["Low"].min())) / price
    if base_width > BO_BASE_MAX_WIDTH:
        logger.debug("Breakout rejected: base width %.1f%% > %.0f%%", base_width * 100, BO_BASE_MAX_WIDTH * 100)
        return None

    percent_above = (price - pivot_high) / pivot_high
    return {
        "grade": grade_breakout(percent_above, volume_ratio),
        "pivot_high": pivot_high,
        "percent_above": percent_above,
        "volume_ratio": volume_ratio,
        "base_width": base_width,
    }
