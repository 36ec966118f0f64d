"""Clock, ID and arithmetic helpers shared by the engine components"""

import math
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]
IdFactory = Callable[[str], str]


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def make_id(prefix: str) -> str:
    """Default ID factory, e.g. review_3f2a..."""
    return f"{prefix}_{uuid.uuid4().hex}"


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values: 2.5 -> 3, 12.5 -> 13"""
    return int(math.floor(value + 0.5))


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, 0.0 when the denominator is zero"""
    if not denominator:
        return 0.0
    return numerator / denominator
