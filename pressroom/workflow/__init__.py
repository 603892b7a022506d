"""Article lifecycle, review SLA clock and editorial review actions."""

from .clock import DEFAULT_SLA_HOURS, clock_status, format_remaining
from .lifecycle import TRANSITIONS, allowed_targets, expire, transition
from .models import (
    BulkItemResult,
    BulkResult,
    ClockReport,
    QueueEntry,
    SweepItem,
    SweepOutcome,
    SweepReport,
    TransitionContext,
    Urgency,
)
from .review import ReviewService, save_transition

__all__ = [
    "BulkItemResult",
    "BulkResult",
    "ClockReport",
    "DEFAULT_SLA_HOURS",
    "QueueEntry",
    "ReviewService",
    "SweepItem",
    "SweepOutcome",
    "SweepReport",
    "TRANSITIONS",
    "TransitionContext",
    "Urgency",
    "allowed_targets",
    "clock_status",
    "expire",
    "format_remaining",
    "save_transition",
    "transition",
]
