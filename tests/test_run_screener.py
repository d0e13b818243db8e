"""Smoke tests for the run_screener CLI over CSV bar files."""
from run_screener import build_parser, main
from bar_factory import flat_frame, uptrend_frame


def _write_bars(path, frame):
    out = frame.copy()
    out.insert(0, "date", out.index.strftime("%Y%m%d"))
    out.to_csv(path, index=False)


def _data_dir(tmp_path):
    data = tmp_path / "bars"
    data.mkdir()
    _write_bars(data / "QQQ.csv", flat_frame(n=300, price=100.0))
    _write_bars(data / "AAPL.csv", uptrend_frame())
    _write_bars(data / "MSFT.csv", flat_frame(n=300))
    return data


def test_parser_defaults_from_env(monkeypatch):
    """SEPA_* environment variables set the defaults."""
    monkeypatch.setenv("SEPA_DATA_DIR", "/tmp/somewhere")
    monkeypatch.setenv("SEPA_BENCHMARK", "SPY")
    args = build_parser().parse_args([])
    assert args.data_dir == "/tmp/somewhere"
    assert args.benchmark == "SPY"
    assert args.workers == 1
    assert args.csv is False


def test_main_writes_csv_and_report(monkeypatch, tmp_path, capsys):
    """Full run over two symbols exports CSV and prints the summary."""
    data = _data_dir(tmp_path)
    monkeypatch.chdir(tmp_path)
    rc = main(["--data-dir", str(data), "--symbols", "AAPL,MSFT", "--csv", "--save-report"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "MINERVINI SEPA SCREEN - SUMMARY" in out
    assert "| 1 | AAPL |" in out
    reports = tmp_path / "reports"
    assert len(list(reports.glob("sepa_screen_2*.csv"))) == 1
    assert len(list(reports.glob("sepa_screen_report_*.txt"))) == 1


def test_main_all_excludes_benchmark(monkeypatch, tmp_path, capsys):
    """--all screens every file except the benchmark itself."""
    data = _data_dir(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["--data-dir", str(data), "--all", "--workers", "2"]) == 0
    out = capsys.readouterr().out
    assert "Universe: 2 symbols" in out
    assert "| QQQ |" not in out


def test_main_missing_data_dir(tmp_path):
    """Non-existent data directory is an error exit."""
    assert main(["--data-dir", str(tmp_path / "nope")]) == 1


def test_main_missing_benchmark(monkeypatch, tmp_path):
    """No benchmark file is an error exit."""
    data = _data_dir(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["--data-dir", str(data), "--benchmark", "SPY"]) == 1


def test_main_benchmark_in_symbol_list(monkeypatch, tmp_path, capsys, caplog):
    """A benchmark named in --symbols is not screened, counted or reported missing."""
    data = _data_dir(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert main(["--data-dir", str(data), "--symbols", "QQQ,AAPL"]) == 0
    out = capsys.readouterr().out
    assert "Universe: 1 symbols" in out
    assert "No data found for QQQ" not in caplog.text
