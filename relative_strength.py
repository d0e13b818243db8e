"""
Relative Strength engine.
Raw score: quarter-weighted outperformance vs a benchmark (40/20/20/20, most recent first).
Rank: population-relative percentile (1-99) over one batch of raw scores.
"""
import math
from typing import List, Sequence

import pandas as pd

from logger_config import get_logger
from sepa_config import (
    RS_MIN_ALIGNED_SESSIONS,
    RS_QUARTER_SESSIONS,
    RS_QUARTER_WEIGHTS,
    RS_RANK_MIN,
    RS_RANK_MAX,
)

logger = get_logger(__name__)


def align_with_benchmark(hist: pd.DataFrame, benchmark_hist: pd.DataFrame) -> pd.DataFrame:
    """Inner join of closes on date. Columns: stock, benchmark."""
    aligned = pd.concat(
        [hist["Close"].rename("stock"), benchmark_hist["Close"].rename("benchmark")],
        axis=1,
        join="inner",
    )
    return aligned.sort_index()


def _window_return(closes: pd.Series) -> float:
    """Simple return last/first - 1 over the window."""
    first = float(closes.iloc[0])
    if first <= 0:
        return 0.0
    return float(closes.iloc[-1]) / first - 1.0


def quarter_outperformance(aligned: pd.DataFrame) -> List[float]:
    """
    Stock return minus benchmark return for Q1..Q4, counting back from the latest session.
    Q1 = last 63 sessions, Q2 = the 63 before that, and so on. Windows are clipped at the
    start of history; a window with fewer than 2 sessions contributes 0.
    """
    n = len(aligned)
    out: List[float] = []
    for k in range(len(RS_QUARTER_WEIGHTS)):
        end = n - RS_QUARTER_SESSIONS * k
        start = max(0, end - RS_QUARTER_SESSIONS)
        if end - start < 2:
            out.append(0.0)
            continue
        window = aligned.iloc[start:end]
        out.append(_window_return(window["stock"]) - _window_return(window["benchmark"]))
    return out


def raw_rs_score(hist: pd.DataFrame, benchmark_hist: pd.DataFrame) -> float:
    """Weighted quarterly outperformance; 0.0 when fewer than 60 aligned sessions exist."""
    aligned = align_with_benchmark(hist, benchmark_hist)
    if len(aligned) < RS_MIN_ALIGNED_SESSIONS:
        logger.debug("Only %d aligned sessions vs benchmark; raw RS = 0", len(aligned))
        return 0.0
    quarters = quarter_outperformance(aligned)
    return float(sum(w * q for w, q in zip(RS_QUARTER_WEIGHTS, quarters)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentile_ranks(raw_scores: Sequence[float]) -> List[int]:
    """
    Rank for each input position: round(((pos + 1) / n) * 99) over a stable ascending sort,
    clamped to [1, 99]. Equal raw scores keep input order, so ties get different ranks.
    """
    n = len(raw_scores)
    ranks = [0] * n
    if n == 0:
        return ranks
    order = sorted(range(n), key=lambda i: raw_scores[i])
    for pos, idx in enumerate(order):
        rank = _round_half_up((pos + 1) / n * RS_RANK_MAX)
        ranks[idx] = min(RS_RANK_MAX, max(RS_RANK_MIN, rank))
    return ranks
