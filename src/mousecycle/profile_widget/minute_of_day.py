"""Minute-of-day conventions shared by the aggregator, view state and renderer.

Single source of truth for the day length, recording length and estrus
cycle constants. Profiles are indexed by integer minute-of-day
(0 = midnight, 1439 = 23:59); conversion to wall-clock timestamps only
happens at the render boundary (figure generation and relayout parsing).
"""

from __future__ import annotations

import math
from typing import Union

import pandas as pd

MINUTES_PER_DAY = 1440
LAST_MINUTE = MINUTES_PER_DAY - 1

# Length of a full recording; male profiles are always divided by this.
RECORDING_DAYS = 14

# Day d (1-based) is an estrus day iff (d - ESTRUS_CYCLE_OFFSET) % ESTRUS_CYCLE_LENGTH == 0.
ESTRUS_CYCLE_LENGTH = 4
ESTRUS_CYCLE_OFFSET = 2

# Arbitrary calendar day the minute-of-day axis is drawn on.
REFERENCE_DAY = pd.Timestamp("2000-01-01")


def clamp_minute(minute: float, upper: int = LAST_MINUTE) -> int:
    """Floor to an int and clamp to [0, upper]. Infinities clamp to the bounds.

    Raises:
        ValueError: If minute is NaN.
    """
    if math.isnan(minute):
        raise ValueError("Cannot clamp NaN minute")
    if math.isinf(minute):
        return 0 if minute < 0 else upper
    return int(max(0, min(upper, math.floor(minute))))


def minute_to_timestamp(minute: int) -> pd.Timestamp:
    """Wall-clock timestamp for a minute-of-day on REFERENCE_DAY."""
    return REFERENCE_DAY + pd.Timedelta(minutes=int(minute))


def minutes_to_timestamps(n: int = MINUTES_PER_DAY) -> pd.DatetimeIndex:
    """Timestamps for minutes 0..n-1, used as the x values of every trace."""
    return pd.date_range(REFERENCE_DAY, periods=n, freq="min")


def timestamp_to_minute(value: Union[str, pd.Timestamp, float, int]) -> float:
    """Convert a Plotly axis value back to (fractional) minutes since midnight.

    Plotly reports date axes as strings like "2000-01-01 03:15:22.5".
    Numeric values are taken to be minutes already.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Not a timestamp: {value!r}")
    delta = ts - REFERENCE_DAY
    return delta.total_seconds() / 60.0


def floor_minute(value: float) -> int:
    return int(math.floor(value))


def ceil_minute(value: float) -> int:
    return int(math.ceil(value))


def format_minute(minute: int) -> str:
    """'HH:MM' label for a minute-of-day."""
    minute = int(minute) % MINUTES_PER_DAY
    return f"{minute // 60:02d}:{minute % 60:02d}"
