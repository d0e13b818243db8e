"""
Static screening universe and benchmark.
Curated NASDAQ growth names screened against QQQ; configuration data, not logic.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

DEFAULT_BENCHMARK = "QQQ"

CURATED_UNIVERSE = [
    "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "META", "TSLA", "INTC", "CSCO", "CMCSA",
    "NFLX", "PYPL", "ADBE", "INTU", "NOW", "AMAT", "LRCX", "ASML", "QCOM", "AMD",
    "AVGO", "MU", "SNPS", "MCHP", "CDNS", "NXPI", "MRVL", "PSTG", "CRWD", "ZS",
    "OKTA", "DDOG", "NET", "FTNT", "ORCL", "SHOP", "UBER", "DASH", "RBLX", "CHWY",
    "ABNB", "LYFT", "ROKU", "COIN", "MDB", "SNOW", "TWLO", "ZM", "WDAY", "VEEV",
    "DKNG", "PENN", "MSTR", "RIOT", "MARA", "HOOD", "CLSK", "CPRT", "UPST", "BILL",
    "SMCI", "PANW", "MNST", "TEAM", "TTD", "TOST", "DUOL", "ARM", "ON", "MELI",
    "LULU", "COST", "PDD", "JD", "BIDU", "REGN", "GILD", "ILMN", "ISRG", "MRNA",
    "BIIB", "AMGN", "ADP", "SBUX", "MDLZ", "ADI", "KLAC", "KDP", "CTAS", "EXC",
    "XEL", "EA", "VRSK", "ANSS", "IDXX", "TTWO", "FAST", "FANG", "ODFL", "GEHC",
]

TRADING_DAYS_PER_YEAR = 252
CALENDAR_DAYS_PER_YEAR = 365.25


def get_date_range(
    trading_days_back: int = TRADING_DAYS_PER_YEAR,
    end: Optional[Union[date, datetime]] = None,
) -> Tuple[str, str]:
    """
    (start, end) as YYYYMMDD strings covering roughly `trading_days_back` sessions.
    Calendar span = trading_days_back / 252 * 365.25 days.
    """
    end_dt = end or datetime.now()
    span = timedelta(days=trading_days_back / TRADING_DAYS_PER_YEAR * CALENDAR_DAYS_PER_YEAR)
    start_dt = end_dt - span
    return start_dt.strftime("%Y%m%d"), end_dt.strftime("%Y%m%d")
