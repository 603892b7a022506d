"""Review SLA clock.

Status is always recomputed from ``pending_since``; nothing is accumulated,
so polling it once a minute cannot drift.
"""

from datetime import datetime
from typing import Optional

import pendulum

from .models import ClockReport, Urgency

DEFAULT_SLA_HOURS = 120
CRITICAL_HOURS = 24
WARNING_HOURS = 48


def _as_utc(value: datetime) -> pendulum.DateTime:
    # Naive timestamps are stored as UTC
    return pendulum.instance(value, tz="UTC")


def clock_status(
    pending_since: datetime,
    now: Optional[datetime] = None,
    sla_hours: float = DEFAULT_SLA_HOURS,
) -> ClockReport:
    """
    Compute the SLA status of an article in review.

    Args:
        pending_since: When the article entered review
        now: Evaluation instant, defaults to the current time
        sla_hours: Length of the review window

    Returns:
        ClockReport for ``now``
    """
    if pending_since is None:
        raise ValueError("pending_since is required to compute the review clock")

    start = _as_utc(pending_since)
    current = _as_utc(now) if now is not None else pendulum.now("UTC")

    hours_elapsed = (current - start).total_seconds() / 3600
    hours_remaining = sla_hours - hours_elapsed

    if hours_remaining <= CRITICAL_HOURS:
        urgency = Urgency.CRITICAL
    elif hours_remaining <= WARNING_HOURS:
        urgency = Urgency.WARNING
    else:
        urgency = Urgency.NORMAL

    return ClockReport(
        hours_elapsed=hours_elapsed,
        hours_remaining=hours_remaining,
        urgency=urgency,
        expired=hours_remaining <= 0,
        deadline=start.add(seconds=int(sla_hours * 3600)),
    )


def format_remaining(report: ClockReport) -> str:
    """Short human readable remaining time, e.g. ``2d 4h`` or ``overdue 3h``."""
    hours = abs(report.hours_remaining)
    days, rest = divmod(int(hours), 24)
    text = f"{days}d {rest}h" if days else f"{rest}h"
    return f"overdue {text}" if report.expired else text
