from datetime import date, datetime, timedelta
from typing import Optional

try:  # pragma: no cover
    from .models import DateRange
except Exception:  # pragma: no cover
    from models import DateRange

DATE_FORMAT = "%Y-%m-%d"


def yesterday(today: Optional[date] = None) -> str:
    today = today or datetime.now().date()
    return (today - timedelta(days=1)).strftime(DATE_FORMAT)


def resolve_date_range(
    start_date: Optional[str], end_date: Optional[str], today: Optional[date] = None
) -> DateRange:
    """
    Use the caller's range verbatim when both ends are given.

    A half-specified range is discarded: both ends fall back to yesterday so
    we never query a mismatched pair. Malformed dates are not validated here,
    the FIO API rejects them.
    """
    if not start_date or not end_date:
        default = yesterday(today)
        return DateRange(start=default, end=default)
    return DateRange(start=start_date, end=end_date)
