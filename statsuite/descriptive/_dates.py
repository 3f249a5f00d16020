"""
SPSS date representation.

Dates are stored as seconds since the start of the Gregorian calendar
(14 October 1582, 00:00), which makes them ordinary numbers for sorting,
percentiles and summary statistics. Displayed as dd-mm-yyyy.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any

import numpy as np

from statsuite.core.exceptions import ValidationError

SPSS_EPOCH = dt.datetime(1582, 10, 14)
SECONDS_PER_DAY = 86400

_DMY = re.compile(r"^\s*(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})\s*$")
_YMD = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})\s*$")


def parse_date_string(text: str) -> dt.datetime:
    """Parse dd-mm-yyyy (also / or . separators) or ISO yyyy-mm-dd."""
    m = _DMY.match(text)
    if m:
        day, month, year = (int(g) for g in m.groups())
    else:
        m = _YMD.match(text)
        if not m:
            raise ValidationError(f"unrecognized date {text!r}; expected dd-mm-yyyy")
        year, month, day = (int(g) for g in m.groups())
    try:
        return dt.datetime(year, month, day)
    except ValueError as e:
        raise ValidationError(f"invalid date {text!r}: {e}") from e


def to_spss_seconds(value: Any) -> float:
    """
    Convert a date cell to SPSS seconds.

    Accepts datetime.date/datetime, date strings, or a number already in
    SPSS seconds.
    """
    if isinstance(value, dt.datetime):
        moment = value.replace(tzinfo=None)
    elif isinstance(value, dt.date):
        moment = dt.datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        moment = parse_date_string(value)
    elif isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
        return float(value)
    else:
        raise ValidationError(f"cannot interpret {value!r} as a date")
    return (moment - SPSS_EPOCH).total_seconds()


def from_spss_seconds(seconds: float) -> str:
    """Format SPSS seconds as dd-mm-yyyy."""
    moment = SPSS_EPOCH + dt.timedelta(seconds=float(seconds))
    return f"{moment.day:02d}-{moment.month:02d}-{moment.year:04d}"
