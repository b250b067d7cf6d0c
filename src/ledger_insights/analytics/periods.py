from __future__ import annotations

import logging
from datetime import date, timedelta
from enum import Enum

from ..errors import InputError

logger = logging.getLogger(__name__)

# used when the caller has no data-driven lower bound
TRAILING_PERIODS = 11


class Period(str, Enum):
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"

    @classmethod
    def parse(cls, raw: str) -> "Period":
        s = (raw or "").strip().lower()
        for p in cls:
            if p.value == s:
                return p
        raise InputError(f"Unknown period {raw!r}")


def add_months(day: date, months: int) -> date:
    """Shift by whole months. Only ever called with day 1 anchors, so no clamping."""
    total = day.month - 1 + months
    return day.replace(year=day.year + total // 12, month=total % 12 + 1)


def period_start(period: Period, day: date) -> date:
    if period == Period.weekly:
        return day - timedelta(days=day.weekday())
    if period == Period.monthly:
        return day.replace(day=1)
    return day.replace(month=1, day=1)


def step(period: Period, anchor: date, count: int = 1) -> date:
    if period == Period.weekly:
        return anchor + timedelta(days=7 * count)
    if period == Period.monthly:
        return add_months(anchor, count)
    return add_months(anchor, 12 * count)


def origin_anchor(period: Period, reference_end: date) -> date:
    """Start of the period after the one containing reference_end."""
    return step(period, period_start(period, reference_end))


def generate_buckets(
    period: Period,
    reference_end: date,
    earliest: date | None = None,
) -> list[date]:
    """
    Ascending period anchors from the floor up to the origin, both inclusive.

    floor = period start of `earliest`, or TRAILING_PERIODS periods before the
    origin when no earliest date is known.
    """
    origin = origin_anchor(period, reference_end)
    if earliest is None:
        current = step(period, origin, -TRAILING_PERIODS)
    else:
        current = period_start(period, earliest)

    buckets: list[date] = []
    while current <= origin:
        buckets.append(current)
        current = step(period, current)

    logger.debug(
        "Generated %d %s buckets for %s (floor=%s)",
        len(buckets),
        period.value,
        reference_end,
        buckets[0] if buckets else None,
    )
    return buckets
