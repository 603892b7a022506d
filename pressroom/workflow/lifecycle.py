"""Article lifecycle state machine.

This module is the only writer of ``Article.status``. Every function returns a
new Article and leaves its input untouched.
"""

from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional, Union

import pendulum

from ..errors import InvalidTransition, PublishBlocked
from ..models import ApprovalMode, Article, ArticleStatus
from ..quality.gate import DEFAULT_SITE_DOMAIN, evaluate
from .clock import DEFAULT_SLA_HOURS, clock_status
from .models import TransitionContext

S = ArticleStatus

# needs_attention is an exit from automatic handling, not a final state: a
# human resolves it by override approval or by rejection.
TRANSITIONS: Dict[ArticleStatus, FrozenSet[ArticleStatus]] = {
    S.DRAFT: frozenset({S.PENDING_REVIEW}),
    S.PENDING_REVIEW: frozenset({S.APPROVED, S.REJECTED, S.NEEDS_ATTENTION}),
    S.APPROVED: frozenset({S.SCHEDULED, S.PUBLISHED}),
    S.SCHEDULED: frozenset({S.PUBLISHED}),
    S.NEEDS_ATTENTION: frozenset({S.APPROVED, S.REJECTED}),
    S.PUBLISHED: frozenset(),
    S.REJECTED: frozenset(),
}

SLA_ACTOR = "sla"


def allowed_targets(status: ArticleStatus) -> FrozenSet[ArticleStatus]:
    """States reachable from ``status`` in one step."""
    return TRANSITIONS[ArticleStatus(status)]


def _coerce_target(article: Article, target) -> ArticleStatus:
    try:
        return ArticleStatus(target)
    except ValueError:
        raise InvalidTransition(article.status.value, str(target), "unknown status")


def _check_edge(article: Article, target: ArticleStatus) -> None:
    if target not in TRANSITIONS[article.status]:
        raise InvalidTransition(article.status.value, target.value)


def _apply(article: Article, target: ArticleStatus, updates: Dict[str, Any]) -> Article:
    updates["status"] = target
    # pending_since is set on entry to review and cleared on every exit
    if target != S.PENDING_REVIEW:
        updates["pending_since"] = None
    return article.model_copy(update=updates, deep=True)


def _now(context: TransitionContext) -> datetime:
    return context.now or pendulum.now("UTC")


def transition(
    article: Article,
    target: ArticleStatus,
    context: Union[TransitionContext, Dict[str, Any], None] = None,
) -> Article:
    """
    Move an article along one lifecycle edge.

    Args:
        article: Current article snapshot
        target: Desired status
        context: TransitionContext, or a dict of its fields

    Returns:
        A new Article in the target status

    Raises:
        InvalidTransition: the edge does not exist or its requirements are not met
        PublishBlocked: approval without override while critical checks fail
    """
    if not isinstance(context, TransitionContext):
        context = TransitionContext.model_validate(context or {})
    target = _coerce_target(article, target)
    _check_edge(article, target)
    now = _now(context)
    current = article.status.value

    if target == S.PENDING_REVIEW:
        return _apply(article, target, {"pending_since": now})

    if target == S.NEEDS_ATTENTION:
        raise InvalidTransition(current, target.value, "only reachable when the review SLA expires")

    if target == S.APPROVED:
        report = evaluate(article, site_domain=context.site_domain)
        if article.status == S.NEEDS_ATTENTION and not context.override:
            raise InvalidTransition(current, target.value, "approval after SLA escalation requires an override")
        if not report.can_publish and not context.override:
            raise PublishBlocked(current, target.value, report)
        return _apply(
            article,
            target,
            {
                "approval_mode": ApprovalMode.OVERRIDE if context.override else ApprovalMode.HUMAN,
                "approved_by": context.actor,
                "approved_at": now,
                "quality_score": report.score,
                "can_publish": report.can_publish,
            },
        )

    if target == S.REJECTED:
        reason = (context.rejection_reason or "").strip()
        if not reason:
            raise InvalidTransition(current, target.value, "a rejection reason is required")
        return _apply(article, target, {"rejection_reason": reason})

    if target == S.SCHEDULED:
        if context.scheduled_for is None:
            raise InvalidTransition(current, target.value, "a publication time is required")
        return _apply(article, target, {"scheduled_for": context.scheduled_for})

    # S.PUBLISHED
    updates: Dict[str, Any] = {"published_at": now}
    if context.published_url:
        updates["published_url"] = context.published_url
    if context.wordpress_post_id is not None:
        updates["wordpress_post_id"] = context.wordpress_post_id
    return _apply(article, target, updates)


def expire(
    article: Article,
    now: Optional[datetime] = None,
    sla_hours: float = DEFAULT_SLA_HOURS,
    site_domain: str = DEFAULT_SITE_DOMAIN,
) -> Article:
    """
    Escalate an article whose review window has run out.

    Articles that pass every critical check are approved automatically.
    Anything else moves to ``needs_attention`` with the failing checks
    recorded, so nothing failing the gate goes out without a human.

    Raises:
        InvalidTransition: the article is not in review or its window is still open
    """
    if article.status != S.PENDING_REVIEW:
        raise InvalidTransition(article.status.value, S.APPROVED.value, "only articles in review can expire")

    now = now or pendulum.now("UTC")
    clock = clock_status(article.pending_since, now, sla_hours)
    if not clock.expired:
        raise InvalidTransition(
            article.status.value,
            S.APPROVED.value,
            f"review window still open ({clock.hours_remaining:.1f}h remaining)",
        )

    report = evaluate(article, site_domain=site_domain)
    if report.can_publish:
        return _apply(
            article,
            S.APPROVED,
            {
                "approval_mode": ApprovalMode.SLA_AUTO,
                "approved_by": SLA_ACTOR,
                "approved_at": now,
                "quality_score": report.score,
                "can_publish": True,
            },
        )

    failing = ", ".join(report.failed_critical())
    return _apply(
        article,
        S.NEEDS_ATTENTION,
        {
            "attention_reason": f"Review SLA expired with failing critical checks: {failing}",
            "quality_score": report.score,
            "can_publish": False,
        },
    )
