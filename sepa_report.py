"""
SEPA screen – text summary report and CSV export.
Consumes finished (post-processed) ScreenerResult lists only; no metric computation.
"""
import csv
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from sepa_config import (
    REPORTS_DIR,
    SEPA_CSV_PREFIX,
    GRADE_ORDER,
    RS_MIN_PERCENTILE,
    TEMPLATE_CRITERIA_TOTAL,
)
from sepa_screener import ScreenerResult, results_by_grade, sort_by_rs

CSV_COLUMNS = [
    "symbol", "price", "rs", "raw_rs", "grade",
    "passes_template", "passes_vcp", "passes_breakout", "breakout_grade", "passes_liquidity",
    "criteria_count", "distance_52w_low", "distance_52w_high",
    "ma50", "ma150", "ma200", "atr",
]

_ROUND_2 = ("price", "distance_52w_low", "distance_52w_high", "ma50", "ma150", "ma200", "atr")


def result_to_dict(result: ScreenerResult) -> Dict:
    """Output record; prices, ratios and MAs rounded to 2 decimals, raw_rs to 4."""
    out = asdict(result)
    for key in _ROUND_2:
        out[key] = round(float(out[key]), 2)
    out["raw_rs"] = round(float(out["raw_rs"]), 4)
    return {key: out[key] for key in CSV_COLUMNS}


def export_results_to_csv(results: List[ScreenerResult], filepath: Optional[Path] = None) -> str:
    """Write results (rs descending) to CSV; returns the path written."""
    if filepath is None:
        filepath = REPORTS_DIR / f"{SEPA_CSV_PREFIX}{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        w.writeheader()
        for r in sort_by_rs(results):
            w.writerow(result_to_dict(r))
    return str(filepath)


def _flag(value: bool) -> str:
    return "Y" if value else "-"


def generate_summary_report(
    results: List[ScreenerResult],
    benchmark: str,
    universe_size: Optional[int] = None,
    report_run_timestamp: Optional[str] = None,
    max_rows: int = 50,
) -> str:
    """Executive summary, grade counts and an rs-ranked table."""
    if report_run_timestamp is None:
        report_run_timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    ranked = sort_by_rs(results)
    grouped = results_by_grade(ranked)

    lines = []
    lines.append(f"Report run: {report_run_timestamp}")
    lines.append(f"Benchmark: {benchmark}")
    lines.append("")
    lines.append("=" * 60)
    lines.append("MINERVINI SEPA SCREEN - SUMMARY")
    lines.append("=" * 60)
    if universe_size is not None:
        lines.append(f"Universe: {universe_size} symbols")
    lines.append(f"Liquid results: {len(ranked)}")
    lines.append(f"Trend Template (RS >= {RS_MIN_PERCENTILE}): {sum(1 for r in ranked if r.passes_template)}")
    lines.append(f"VCP: {sum(1 for r in ranked if r.passes_vcp)}")
    lines.append(f"Breakouts today: {sum(1 for r in ranked if r.passes_breakout)}")
    lines.append("")
    lines.append("----- Grades -----")
    for grade in GRADE_ORDER:
        members = grouped.get(grade, [])
        symbols = ", ".join(r.symbol for r in members[:15])
        more = f" (+{len(members) - 15} more)" if len(members) > 15 else ""
        lines.append(f"{grade:>3}: {len(members):3d}  {symbols}{more}")
    lines.append("")
    lines.append("----- Ranked by RS -----")
    lines.append("| Rank | Symbol | Grade | RS | Price | TT | Crit | VCP | BO | vs 52W Low | vs 52W High |")
    lines.append("|" + "---|" * 11)
    for i, r in enumerate(ranked[:max_rows], 1):
        bo = r.breakout_grade if r.passes_breakout else "-"
        lines.append(
            f"| {i} | {r.symbol} | {r.grade} | {r.rs} | {r.price:.2f} | {_flag(r.passes_template)} | "
            f"{r.criteria_count}/{TEMPLATE_CRITERIA_TOTAL} | {_flag(r.passes_vcp)} | {bo} | {r.distance_52w_low:.2f} | {r.distance_52w_high:.2f} |"
        )
    if len(ranked) > max_rows:
        lines.append(f"... {len(ranked) - max_rows} more")
    return "\n".join(lines) + "\n"
