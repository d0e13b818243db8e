"""
Minervini SEPA screener – pipeline orchestrator.

Two phases:
  1. run_pipeline(symbol, series, benchmark_series) – per symbol, independent, pure.
     Liquidity → indicators → raw RS → detectors → provisional ScreenerResult (rs=0, grade N/A).
  2. post_process_results(results) – once per batch, after every phase-1 result is in.
     Percentile RS → RS gate on the template (and VCP) → overall grade.

screen_universe() wires both phases for a mapping of symbol → bars.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from bar_series import BarSeries, bars_to_frame, validate_series
from indicators import sma, atr, week52_high_low
from logger_config import get_logger
from relative_strength import raw_rs_score, percentile_ranks
from sepa_config import (
    MIN_HISTORY_SESSIONS, SMA_50_PERIOD, SMA_150_PERIOD, SMA_200_PERIOD, ATR_PERIOD,
    RS_MIN_PERCENTILE, RS_GRADE_A_PERCENTILE, GRADE_NOT_APPLICABLE,
)
from sepa_patterns import passes_liquidity, check_trend_template, check_vcp, check_breakout

logger = get_logger(__name__)


@dataclass
class ScreenerResult:
    """
    One symbol's screen. Phase-1 fields are final once run_pipeline returns;
    rs, grade, passes_template and passes_vcp are provisional until ranked is True.
    """
    symbol: str
    price: float
    raw_rs: float
    passes_liquidity: bool
    distance_52w_low: float
    distance_52w_high: float
    ma50: float
    ma150: float
    ma200: float
    atr: float
    criteria_count: int
    structural_template: bool
    structural_vcp: bool
    passes_breakout: bool
    breakout_grade: Optional[str] = None
    rs: int = 0
    grade: str = GRADE_NOT_APPLICABLE
    passes_template: bool = False
    passes_vcp: bool = False
    ranked: bool = False

    def __post_init__(self):
        if not self.ranked:
            self.passes_template = self.structural_template
            self.passes_vcp = self.structural_vcp


def run_pipeline(symbol: str, series: BarSeries, benchmark_series: BarSeries) -> Optional[ScreenerResult]:
    """
    Phase 1 for a single symbol. Returns None ("no opinion") for short history,
    illiquid names or unavailable indicators. Raises SeriesContractError if either
    series is unsorted or has duplicate dates.
    """
    hist = validate_series(bars_to_frame(series), label=symbol)
    benchmark_hist = validate_series(bars_to_frame(benchmark_series), label="benchmark")
    return _evaluate(symbol, hist, benchmark_hist)


def _evaluate(symbol: str, hist: pd.DataFrame, benchmark_hist: pd.DataFrame) -> Optional[ScreenerResult]:
    """Phase 1 on frames that already passed validate_series."""
    if len(hist) < MIN_HISTORY_SESSIONS:
        logger.debug("%s: %d sessions < %d, no result", symbol, len(hist), MIN_HISTORY_SESSIONS)
        return None
    if not passes_liquidity(hist):
        logger.debug("%s: fails liquidity filter, no result", symbol)
        return None

    ma50 = sma(hist, SMA_50_PERIOD)
    ma150 = sma(hist, SMA_150_PERIOD)
    ma200 = sma(hist, SMA_200_PERIOD)
    atr_14 = atr(hist, ATR_PERIOD)
    if ma50 is None or ma150 is None or ma200 is None or atr_14 is None:
        logger.debug("%s: indicators unavailable, no result", symbol)
        return None

    price = float(hist["Close"].iloc[-1])
    high_52w, low_52w = week52_high_low(hist)

    trend = check_trend_template(hist)
    # VCP is a refinement of the template, never independent of it
    vcp_passed = trend["passed"] and check_vcp(hist)["passed"]
    breakout = check_breakout(hist)

    return ScreenerResult(
        symbol=symbol,
        price=price,
        raw_rs=raw_rs_score(hist, benchmark_hist),
        passes_liquidity=True,
        distance_52w_low=price / low_52w if low_52w else 0.0,
        distance_52w_high=price / high_52w if high_52w else 0.0,
        ma50=ma50,
        ma150=ma150,
        ma200=ma200,
        atr=atr_14,
        criteria_count=trend["criteria_count"],
        structural_template=trend["passed"],
        structural_vcp=vcp_passed,
        passes_breakout=breakout is not None,
        breakout_grade=breakout["grade"] if breakout else None,
    )


def assign_grade(result: ScreenerResult) -> str:
    """Overall grade by priority; uses the finalized rs and template/VCP flags."""
    if result.passes_breakout and result.passes_template and result.rs >= RS_GRADE_A_PERCENTILE:
        return "A"
    if result.passes_breakout and result.passes_template:
        return "B"
    if result.passes_template and result.passes_vcp and result.rs >= RS_MIN_PERCENTILE:
        return "B"
    if result.passes_template and result.rs >= RS_MIN_PERCENTILE:
        return "C"
    if result.passes_template:
        return "D"
    return GRADE_NOT_APPLICABLE


def post_process_results(results: List[ScreenerResult]) -> None:
    """
    Phase 2, in place: percentile RS over the whole batch, RS >= 70 gate on the
    template (VCP falls with it), then grades. Idempotent: gates are recomputed
    from the phase-1 structural verdicts every time.
    """
    ranks = percentile_ranks([r.raw_rs for r in results])
    for result, rank in zip(results, ranks):
        result.rs = rank
        result.passes_template = result.structural_template and rank >= RS_MIN_PERCENTILE
        result.passes_vcp = result.structural_vcp and result.passes_template
        result.grade = assign_grade(result)
        result.ranked = True


def sort_by_rs(results: Iterable[ScreenerResult]) -> List[ScreenerResult]:
    """Presentation order: highest rs first (stable)."""
    return sorted(results, key=lambda r: r.rs, reverse=True)


def _screen_one(symbol: str, series: BarSeries, benchmark_hist: pd.DataFrame) -> Optional[ScreenerResult]:
    try:
        hist = validate_series(bars_to_frame(series), label=symbol)
        return _evaluate(symbol, hist, benchmark_hist)
    except Exception as e:
        logger.error("Error screening %s: %s", symbol, e, exc_info=True)
        return None


def screen_universe(
    series_by_symbol: Mapping[str, BarSeries],
    benchmark_series: BarSeries,
    symbols: Optional[Iterable[str]] = None,
    max_workers: int = 1,
) -> List[ScreenerResult]:
    """
    Run phase 1 for every symbol (optionally on a thread pool), then phase 2 once.
    A bad symbol is logged and skipped; a bad benchmark fails the whole run.
    Returns the finished batch sorted by rs descending.
    """
    benchmark_hist = validate_series(bars_to_frame(benchmark_series), label="benchmark")
    if benchmark_hist.empty:
        raise ValueError("Benchmark series is empty")

    tickers = list(symbols) if symbols is not None else list(series_by_symbol)
    jobs: List[tuple] = []
    for symbol in tickers:
        series = series_by_symbol.get(symbol)
        if series is None or len(series) == 0:
            logger.warning("No data found for %s", symbol)
            continue
        jobs.append((symbol, series))

    if max_workers and max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(jobs))) as ex:
            screened = list(ex.map(lambda job: _screen_one(job[0], job[1], benchmark_hist), jobs))
    else:
        screened = [_screen_one(symbol, series, benchmark_hist) for symbol, series in jobs]

    results = [r for r in screened if r is not None]
    post_process_results(results)
    logger.info(
        "Screened %d symbols: %d results, %d pass template, %d breakouts",
        len(tickers),
        len(results),
        sum(1 for r in results if r.passes_template),
        sum(1 for r in results if r.passes_breakout),
    )
    return sort_by_rs(results)


def results_by_grade(results: Iterable[ScreenerResult]) -> Dict[str, List[ScreenerResult]]:
    """Group finished results by overall grade (A, B, C, D, N/A)."""
    grouped: Dict[str, List[ScreenerResult]] = {}
    for r in results:
        grouped.setdefault(r.grade, []).append(r)
    return grouped
