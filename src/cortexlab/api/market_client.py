import logging
import math
import threading
import time
from typing import TypedDict

import pandas as pd
import yfinance as yf
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from cortexlab.exceptions import MarketDataError

logger = logging.getLogger(__name__)

# Lookback per range key; ALL is capped at five years
RANGE_OFFSETS = {
    "1D": pd.DateOffset(days=1),
    "1W": pd.DateOffset(days=7),
    "1M": pd.DateOffset(months=1),
    "3M": pd.DateOffset(months=3),
    "1Y": pd.DateOffset(years=1),
    "ALL": pd.DateOffset(years=5),
}
DEFAULT_RANGE = "1M"


class PricePoint(TypedDict):
    date: str  # ISO date
    open: float | None
    close: float


class Quote(TypedDict):
    symbol: str
    price: float
    previous_close: float | None


def normalize_range(range_key: str | None) -> str:
    """Canonical range key. Missing or unknown keys mean 1M."""
    key = (range_key or DEFAULT_RANGE).upper()
    if key not in RANGE_OFFSETS:
        logger.debug("Unknown range %r, falling back to %s", range_key, DEFAULT_RANGE)
        return DEFAULT_RANGE
    return key


def resolve_range(range_key: str | None, now: pd.Timestamp | None = None) -> tuple[pd.Timestamp, pd.Timestamp]:
    """Translate a range key into a ``(start, end)`` window."""
    end = now if now is not None else pd.Timestamp.now().normalize()
    return end - RANGE_OFFSETS[normalize_range(range_key)], end


def frame_to_points(df: pd.DataFrame) -> list[PricePoint]:
    """Convert a daily OHLC frame into PricePoints sorted oldest first."""
    if df is None or df.empty or "Close" not in df.columns:
        return []

    df = df.sort_index()
    points: list[PricePoint] = []
    for ts, row in df.iterrows():
        close = row["Close"]
        if pd.isna(close):
            continue
        open_ = row.get("Open")
        points.append(PricePoint(
            date=pd.Timestamp(ts).date().isoformat(),
            open=None if open_ is None or pd.isna(open_) else float(open_),
            close=float(close),
        ))
    return points


class MarketDataClient:
    """Rate-limited, retry-enabled wrapper around yfinance."""

    def __init__(self, delay: float = 0.5, max_retries: int = 3, backoff: float = 2.0):
        self._delay = delay
        self._max_retries = max_retries
        self._backoff = backoff
        self._last_request_time: float = 0.0
        # Shared by every request thread
        self._rate_lock = threading.Lock()

    def _rate_limit(self):
        with self._rate_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._delay:
                time.sleep(self._delay - elapsed)
            self._last_request_time = time.monotonic()

    def _call(self, func, *args, **kwargs):
        @retry(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._backoff, min=2, max=60),
            retry=retry_if_exception_type((ConnectionError, TimeoutError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        def _inner():
            self._rate_limit()
            return func(*args, **kwargs)

        try:
            return _inner()
        except RetryError as e:
            raise MarketDataError(f"Market data request failed after retries: {e}") from e
        except MarketDataError:
            raise
        except Exception as e:
            raise MarketDataError(f"Market data request failed: {e}") from e

    def get_history(self, symbol: str, range_key: str | None = DEFAULT_RANGE) -> list[PricePoint]:
        """Daily open/close history for a symbol, oldest first."""
        start, end = resolve_range(range_key)
        df = self._call(
            yf.Ticker(symbol).history,
            start=start.to_pydatetime(),
            end=(end + pd.Timedelta(days=1)).to_pydatetime(),
            interval="1d",
            auto_adjust=True,
        )
        points = frame_to_points(df)
        logger.info("Fetched %d history points for %s (%s)", len(points), symbol, range_key)
        return points

    def get_quote(self, symbol: str) -> Quote:
        """Latest traded price for a symbol."""
        def _fetch():
            info = yf.Ticker(symbol).fast_info
            return info.last_price, info.previous_close

        price, previous_close = self._call(_fetch)
        if price is None or not math.isfinite(price) or price <= 0:
            raise MarketDataError(f"No live price available for {symbol}")

        return Quote(
            symbol=symbol.upper(),
            price=float(price),
            previous_close=None if previous_close is None else float(previous_close),
        )
