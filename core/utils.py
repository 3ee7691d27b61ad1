import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)


def round_half_up(value: float, places: int) -> float:
    """Round to a fixed number of decimals, ties away from zero.

    Uses the exact binary value of the float, so 2.675 (stored as
    2.67499999...) rounds to 2.67 while a true tie such as 0.125 rounds
    to 0.13 instead of Python's banker's 0.12.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a value to [lo, hi]."""
    return max(lo, min(hi, value))


def as_utc(moment: datetime) -> datetime:
    """Normalise a timestamp to an aware UTC datetime.

    Naive values are treated as UTC; some backends (SQLite) drop tzinfo on
    the way back from the database.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
