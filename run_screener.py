"""
Run the SEPA screen over local daily bars.

  python run_screener.py                                  # curated universe, data/bars/, benchmark QQQ
  python run_screener.py --data-dir mybars --all          # every <SYMBOL>.csv in the directory
  python run_screener.py --symbols AAPL,NVDA,MSFT --csv   # subset + CSV export in reports/
  python run_screener.py --workers 8 --days 300

Bars are read from <data-dir>/<SYMBOL>.csv and the benchmark from <data-dir>/<BENCHMARK>.csv.
SEPA_DATA_DIR, SEPA_BENCHMARK and SEPA_LOG_LEVEL (environment or .env) override the defaults.
"""
import argparse
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from bar_loader import load_bars_csv, load_bars_dir
from logger_config import setup_logging, get_logger
from sepa_config import (
    DEFAULT_ENV_PATH,
    DEFAULT_DATA_DIR,
    REPORTS_DIR,
    SEPA_CSV_PREFIX,
    SEPA_REPORT_PREFIX,
)
from sepa_report import export_results_to_csv, generate_summary_report
from sepa_screener import screen_universe
from universe import CURATED_UNIVERSE, DEFAULT_BENCHMARK, get_date_range

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Minervini SEPA screen: Trend Template + VCP + Breakout, ranked by RS")
    parser.add_argument("--data-dir", default=os.getenv("SEPA_DATA_DIR", str(DEFAULT_DATA_DIR)), help="Directory of <SYMBOL>.csv bar files")
    parser.add_argument("--benchmark", default=os.getenv("SEPA_BENCHMARK", DEFAULT_BENCHMARK), help="Benchmark symbol (file <BENCHMARK>.csv in data dir)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--symbols", type=str, help="Comma-separated symbols (default: curated universe)")
    group.add_argument("--all", action="store_true", help="Screen every CSV in the data dir (except the benchmark)")
    parser.add_argument("--days", type=int, default=None, help="Only use bars from the last N trading days (calendar-approximated)")
    parser.add_argument("--workers", type=int, default=1, help="Threads for per-symbol evaluation")
    parser.add_argument("--csv", action="store_true", help="Also export CSV to reports/")
    parser.add_argument("--save-report", action="store_true", help="Write the text summary to reports/")
    parser.add_argument("--log-level", default=os.getenv("SEPA_LOG_LEVEL", "INFO"), help="Logging level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    env_file = Path(DEFAULT_ENV_PATH)
    if env_file.exists():
        load_dotenv(env_file)
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level, log_to_file=False)

    data_dir = Path(args.data_dir)
    if not data_dir.is_dir():
        logger.error("Data directory not found: %s", data_dir)
        return 1

    start, end = get_date_range(args.days) if args.days else (None, None)
    benchmark_symbol = args.benchmark.strip().upper()
    benchmark_file = data_dir / f"{benchmark_symbol}.csv"
    if not benchmark_file.exists():
        logger.error("Benchmark file not found: %s", benchmark_file)
        return 1
    try:
        benchmark = load_bars_csv(benchmark_file, start=start, end=end)
    except Exception as e:
        logger.error("Could not load benchmark %s: %s", benchmark_symbol, e)
        return 1

    if args.all:
        symbols = None
    elif args.symbols:
        symbols = [s.strip().upper() for s in args.symbols.split(",") if s.strip()]
    else:
        symbols = list(CURATED_UNIVERSE)
    if symbols is not None:
        symbols = [s for s in symbols if s != benchmark_symbol]
    bars = load_bars_dir(data_dir, symbols=symbols, start=start, end=end)
    bars.pop(benchmark_symbol, None)
    universe_size = len(symbols) if symbols is not None else len(bars)

    try:
        results = screen_universe(bars, benchmark, symbols=symbols, max_workers=args.workers)
    except ValueError as e:
        logger.error("Screen failed: %s", e)
        return 1

    report_txt = generate_summary_report(results, benchmark=benchmark_symbol, universe_size=universe_size)
    print(report_txt)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    if args.save_report:
        REPORTS_DIR.mkdir(parents=True, exist_ok=True)
        report_file = REPORTS_DIR / f"{SEPA_REPORT_PREFIX}{ts}.txt"
        report_file.write_text(report_txt, encoding="utf-8")
        print(f"Report saved: {report_file}")
    if args.csv:
        csv_path = export_results_to_csv(results, REPORTS_DIR / f"{SEPA_CSV_PREFIX}{ts}.csv")
        print(f"CSV saved: {csv_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
