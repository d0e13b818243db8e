"""Tests for sepa_report (record rounding, CSV export, summary report)."""
import csv

from sepa_report import CSV_COLUMNS, result_to_dict, export_results_to_csv, generate_summary_report
from sepa_screener import ScreenerResult


def _finished(symbol, rs, grade, template=False, vcp=False, breakout_grade=None):
    return ScreenerResult(
        symbol=symbol,
        price=123.4567,
        raw_rs=0.123456,
        passes_liquidity=True,
        distance_52w_low=1.87654,
        distance_52w_high=0.91234,
        ma50=120.111,
        ma150=110.555,
        ma200=100.999,
        atr=3.14159,
        criteria_count=7 if template else 4,
        structural_template=template,
        structural_vcp=vcp,
        passes_breakout=breakout_grade is not None,
        breakout_grade=breakout_grade,
        rs=rs,
        grade=grade,
        passes_template=template,
        passes_vcp=vcp,
        ranked=True,
    )


def _batch():
    return [
        _finished("LOW", 20, "N/A"),
        _finished("TOP", 95, "A", template=True, breakout_grade="A"),
        _finished("MID", 75, "B", template=True, vcp=True),
    ]


def test_result_to_dict_rounds_values():
    """Prices, ratios and MAs to 2 decimals; raw_rs to 4."""
    row = result_to_dict(_batch()[1])
    assert list(row) == CSV_COLUMNS
    assert row["price"] == 123.46
    assert row["distance_52w_low"] == 1.88
    assert row["distance_52w_high"] == 0.91
    assert row["ma200"] == 101.0
    assert row["atr"] == 3.14
    assert row["raw_rs"] == 0.1235
    assert row["breakout_grade"] == "A"


def test_export_results_to_csv_rows_by_rs(tmp_path):
    """CSV has the header and rows ordered by rs descending."""
    out = tmp_path / "reports" / "screen.csv"
    path = export_results_to_csv(_batch(), out)
    assert path == str(out)
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["symbol"] for r in rows] == ["TOP", "MID", "LOW"]
    assert rows[0]["rs"] == "95"
    assert rows[0]["passes_template"] == "True"
    assert rows[2]["breakout_grade"] == ""


def test_export_results_to_csv_default_path(monkeypatch, tmp_path):
    """Without a path the file goes to REPORTS_DIR with the screen prefix."""
    monkeypatch.setattr("sepa_report.REPORTS_DIR", tmp_path)
    path = export_results_to_csv(_batch())
    assert path.startswith(str(tmp_path))
    assert "sepa_screen_" in path


def test_summary_report_sections():
    """Summary has header, counts, grade groups and the ranked table."""
    text = generate_summary_report(_batch(), benchmark="QQQ", universe_size=100, report_run_timestamp="2024-01-02 16:00:00")
    assert "Report run: 2024-01-02 16:00:00" in text
    assert "Benchmark: QQQ" in text
    assert "MINERVINI SEPA SCREEN - SUMMARY" in text
    assert "Universe: 100 symbols" in text
    assert "Trend Template (RS >= 70): 2" in text
    assert "Breakouts today: 1" in text
    assert "----- Grades -----" in text
    assert "----- Ranked by RS -----" in text
    assert "| 1 | TOP | A | 95 |" in text
    assert "7/7" in text


def test_summary_report_truncates_table():
    """Rows beyond max_rows are summarised."""
    text = generate_summary_report(_batch(), benchmark="QQQ", report_run_timestamp="x", max_rows=1)
    assert "| 1 | TOP |" in text
    assert "MID |" not in text.split("----- Ranked by RS -----")[1]
    assert "... 2 more" in text


def test_summary_report_empty_batch():
    """An empty screen still renders."""
    text = generate_summary_report([], benchmark="QQQ", report_run_timestamp="x")
    assert "Liquid results: 0" in text
