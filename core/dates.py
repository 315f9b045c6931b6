"""
dates.py -- Legacy spreadsheet date decoding and warranty status.

Build dates arrive as integers: milliseconds counted against the spreadsheet
serial-date epoch. The decoding below deliberately adds 25569 days to a
1900-01-01 base. That lands two days later than the "true" 1899-12-30
epoch, but every downstream report was produced with this exact arithmetic,
so it is preserved as-is.
"""

from datetime import date, timedelta
from typing import Optional

from .models import WARRANTY_DAYS, Assembly, WarrantyStatus

MS_PER_DAY = 86_400_000
EPOCH_OFFSET_DAYS = 25569
BASE_DATE = date(1900, 1, 1)


def _truncating_days(raw: int) -> int:
    """Whole days in raw milliseconds, truncated toward zero (not floored)."""
    days = abs(raw) // MS_PER_DAY
    return days if raw >= 0 else -days


def decode_legacy_date(raw: int) -> date:
    """Decode a legacy serial date to a calendar date.

    Never raises. Values that fall outside the range datetime.date can
    represent saturate to date.min / date.max.
    """
    days = _truncating_days(raw) + EPOCH_OFFSET_DAYS
    try:
        return BASE_DATE + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def build_date(assembly: Assembly) -> Optional[date]:
    """Return the decoded build date, or None when none was recorded."""
    if assembly.built_date == 0:
        return None
    return decode_legacy_date(assembly.built_date)


def warranty_status(built_date: int, today: Optional[date] = None) -> WarrantyStatus:
    """Classify a raw build date against the three-year warranty window.

    A raw value of 0 means the date was never recorded. Dates in the future
    count as in warranty.
    """
    if built_date == 0:
        return WarrantyStatus.UNKNOWN
    today = today or date.today()
    age = today - decode_legacy_date(built_date)
    if age <= timedelta(days=WARRANTY_DAYS):
        return WarrantyStatus.IN_WARRANTY
    return WarrantyStatus.OUT_OF_WARRANTY
