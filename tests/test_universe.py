"""Tests for universe and logger_config modules."""
import logging
from datetime import datetime

from universe import CURATED_UNIVERSE, DEFAULT_BENCHMARK, get_date_range
from logger_config import setup_logging, get_logger


def test_curated_universe_unique_symbols():
    """100 distinct upper-case tickers, benchmark not among them."""
    assert len(CURATED_UNIVERSE) == 100
    assert len(set(CURATED_UNIVERSE)) == 100
    assert all(s == s.upper() for s in CURATED_UNIVERSE)
    assert DEFAULT_BENCHMARK not in CURATED_UNIVERSE


def test_get_date_range_one_trading_year():
    """252 trading days back is ~365 calendar days."""
    start, end = get_date_range(252, end=datetime(2024, 1, 2))
    assert end == "20240102"
    assert start == "20230101"


def test_get_date_range_defaults_to_today():
    """End defaults to today's date."""
    _, end = get_date_range(10)
    assert end == datetime.now().strftime("%Y%m%d")


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    """Calling setup_logging twice leaves one console and one file handler."""
    setup_logging("DEBUG", log_to_file=True, log_dir=str(tmp_path), log_file="t.log")
    root = setup_logging("WARNING", log_to_file=True, log_dir=str(tmp_path), log_file="t.log")
    ours = [h for h in root.handlers if getattr(h, "_sepa_handler", False)]
    assert len(ours) == 2
    assert root.level == logging.WARNING
    get_logger("sepa_test").warning("written")
    for h in ours:
        h.flush()
    assert "written" in (tmp_path / "t.log").read_text(encoding="utf-8")
    setup_logging("INFO")
