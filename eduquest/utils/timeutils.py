"""Time helpers"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what the DateTime columns store"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (round() uses banker's rounding)"""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
