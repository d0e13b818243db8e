"""
SEPA Screener – Configuration
Used by indicators, relative_strength, sepa_patterns, sepa_screener and the CLI.
All thresholds are config-driven; no hardcoding in screener logic.
"""
from pathlib import Path

# ----------------------------------------------------------------------------
# LIQUIDITY FILTER – runs first; failing names get no result at all
# ----------------------------------------------------------------------------
MIN_PRICE = 10.0                  # Latest close must be at least $10
MIN_DOLLAR_VOLUME_50D = 500_000.0  # price * 50-day avg share volume
LIQUIDITY_VOLUME_PERIOD = 50

# ----------------------------------------------------------------------------
# HISTORY / MOVING AVERAGES
# ----------------------------------------------------------------------------
MIN_HISTORY_SESSIONS = 200  # ~one trading year plus buffer; shorter → no result
SMA_50_PERIOD = 50
SMA_150_PERIOD = 150
SMA_200_PERIOD = 200
ATR_PERIOD = 14
WEEK_52_SESSIONS = 252      # Trailing window for 52-week high/low

# ----------------------------------------------------------------------------
# TREND TEMPLATE – 7 structural criteria + RS gate applied after ranking
# ----------------------------------------------------------------------------
MA200_RISE_SESSIONS = 22          # 200 SMA today vs ~1 month ago
MIN_ABOVE_52W_LOW_RATIO = 1.25    # price >= 1.25 * 52w low
MIN_OF_52W_HIGH_RATIO = 0.75      # price / 52w high >= 0.75
TEMPLATE_CRITERIA_TOTAL = 7
RS_MIN_PERCENTILE = 70            # 8th criterion; checked in post-processing
RS_GRADE_A_PERCENTILE = 80

# ----------------------------------------------------------------------------
# RELATIVE STRENGTH – quarter-weighted outperformance vs benchmark
# ----------------------------------------------------------------------------
RS_MIN_ALIGNED_SESSIONS = 60
RS_QUARTER_SESSIONS = 63                  # ~63 trading days per quarter
RS_QUARTER_WEIGHTS = (0.4, 0.2, 0.2, 0.2)  # Q1 (most recent) .. Q4
RS_RANK_MIN = 1
RS_RANK_MAX = 99

# ----------------------------------------------------------------------------
# VCP – volatility contraction (only meaningful after structural template pass)
# ----------------------------------------------------------------------------
VCP_MIN_SESSIONS = 65
VCP_RECENT_ATR_SESSIONS = 20
VCP_BASELINE_ATR_SESSIONS = 60
VCP_ATR_RATIO = 0.75          # recent ATR < 75% of baseline ATR
VCP_SHORT_VOLUME_PERIOD = 5
VCP_LONG_VOLUME_PERIOD = 50
VCP_VOLUME_RATIO = 0.80       # 5d avg volume < 80% of 50d avg volume
VCP_RANGE_SESSIONS = 10
VCP_RANGE_MAX = 0.08          # 10-day (high - low) / price <= 8%
VCP_HIGH_SESSIONS = 60
VCP_NEAR_HIGH_RATIO = 0.85    # price >= 85% of 60-day high
VCP_LOW_BUFFER = 1.02         # 10-day low must stay > 52w low * 1.02

# ----------------------------------------------------------------------------
# BREAKOUT – pivot, volume confirmation, base width, letter grade
# ----------------------------------------------------------------------------
BO_PIVOT_SESSIONS = 10        # Pivot = max High of the 10 sessions before today
BO_MIN_EXTRA_SESSIONS = 5     # Need pivot lookback + 5 sessions
BO_VOLUME_PERIOD = 50
BO_VOLUME_MULT = 1.4          # Today's volume >= 1.4x 50-day average
BO_BASE_SESSIONS = 20
BO_BASE_MAX_WIDTH = 0.25      # Prior-20 range <= 25% of price
BO_GRADE_A_PCT_ABOVE = 0.03
BO_GRADE_A_VOLUME_RATIO = 2.0
BO_GRADE_B_PCT_ABOVE = 0.02
BO_GRADE_B_VOLUME_RATIO = 1.5

# ----------------------------------------------------------------------------
# GRADES
# ----------------------------------------------------------------------------
GRADE_NOT_APPLICABLE = "N/A"
GRADE_ORDER = ("A", "B", "C", "D", GRADE_NOT_APPLICABLE)

# ----------------------------------------------------------------------------
# CLI / FILES
# ----------------------------------------------------------------------------
DEFAULT_ENV_PATH = ".env"
DEFAULT_DATA_DIR = Path("data/bars")
REPORTS_DIR = Path("reports")
SEPA_CSV_PREFIX = "sepa_screen_"
SEPA_REPORT_PREFIX = "sepa_screen_report_"
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "sepa_screener.log"

# ----------------------------------------------------------------------------
# LOGGING
# ----------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB per file before rotation
LOG_BACKUP_COUNT = 5
