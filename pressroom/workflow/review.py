"""Editorial review actions and the review SLA sweep.

Every status change is computed by the lifecycle module and written back as a
partial update of the fields that changed.
"""

from datetime import datetime
from typing import Callable, Iterable, List, Optional

import pendulum
from rich.console import Console

from ..db.articles import ArticleStore
from ..errors import PressroomError
from ..models import Article, ArticleStatus
from ..quality.gate import DEFAULT_SITE_DOMAIN
from .clock import DEFAULT_SLA_HOURS, clock_status
from .lifecycle import expire, transition
from .models import (
    BulkItemResult,
    BulkResult,
    QueueEntry,
    SweepItem,
    SweepOutcome,
    SweepReport,
    TransitionContext,
)

console = Console()


def save_transition(store: ArticleStore, before: Article, after: Article) -> Article:
    """Persist only the fields a transition changed."""
    old = before.model_dump()
    partial = {key: value for key, value in after.model_dump().items() if old.get(key) != value}
    partial.pop("id", None)
    partial.pop("created_at", None)
    partial.pop("updated_at", None)
    return store.update(before.id, partial)


class ReviewService:
    """Approve, reject and schedule articles, singly or in bulk."""

    def __init__(
        self,
        store: ArticleStore,
        sla_hours: float = DEFAULT_SLA_HOURS,
        site_domain: str = DEFAULT_SITE_DOMAIN,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.sla_hours = sla_hours
        self.site_domain = site_domain
        self.clock = clock or (lambda: pendulum.now("UTC"))

    def _context(self, **kwargs) -> TransitionContext:
        return TransitionContext(now=self.clock(), site_domain=self.site_domain, **kwargs)

    def _move(self, article_id: str, target: ArticleStatus, context: TransitionContext) -> Article:
        article = self.store.require(article_id)
        return save_transition(self.store, article, transition(article, target, context))

    def approve(self, article_id: str, override: bool = False, actor: Optional[str] = None) -> Article:
        """Approve an article; without ``override`` the quality gate must pass."""
        return self._move(article_id, ArticleStatus.APPROVED, self._context(override=override, actor=actor))

    def reject(self, article_id: str, reason: str, actor: Optional[str] = None) -> Article:
        """Reject an article with a reason."""
        return self._move(
            article_id, ArticleStatus.REJECTED, self._context(rejection_reason=reason, actor=actor)
        )

    def schedule(self, article_id: str, when: datetime, actor: Optional[str] = None) -> Article:
        """Schedule an approved article for publication."""
        return self._move(article_id, ArticleStatus.SCHEDULED, self._context(scheduled_for=when, actor=actor))

    def _bulk(self, article_ids: Iterable[str], action: Callable[[str], Article]) -> BulkResult:
        result = BulkResult()
        for article_id in article_ids:
            try:
                article = action(article_id)
            except PressroomError as e:
                result.items.append(BulkItemResult(article_id=article_id, success=False, error=str(e)))
                continue
            result.items.append(BulkItemResult(article_id=article_id, success=True, status=article.status))
        return result

    def bulk_approve(
        self,
        article_ids: Iterable[str],
        override: bool = False,
        actor: Optional[str] = None,
    ) -> BulkResult:
        """Approve each article independently; failures do not stop the batch."""
        return self._bulk(article_ids, lambda article_id: self.approve(article_id, override, actor))

    def bulk_reject(self, article_ids: Iterable[str], reason: str, actor: Optional[str] = None) -> BulkResult:
        """Reject each article independently; failures do not stop the batch."""
        return self._bulk(article_ids, lambda article_id: self.reject(article_id, reason, actor))

    def review_queue(self, now: Optional[datetime] = None) -> List[QueueEntry]:
        """Articles awaiting review, most urgent first."""
        now = now or self.clock()
        pending = self.store.find({"status": ArticleStatus.PENDING_REVIEW}, order_by="pending_since")
        entries = [
            QueueEntry(article=article, clock=clock_status(article.pending_since, now, self.sla_hours))
            for article in pending
        ]
        entries.sort(key=lambda entry: entry.clock.hours_remaining)
        return entries

    def sweep_expired(self, now: Optional[datetime] = None) -> SweepReport:
        """
        Escalate every pending article whose review window has run out.

        Passing articles are approved automatically; failing ones are moved to
        needs_attention. One article failing to save does not stop the sweep.
        """
        now = now or self.clock()
        report = SweepReport()

        for entry in self.review_queue(now):
            report.checked += 1
            if not entry.clock.expired:
                continue

            article = entry.article
            try:
                escalated = save_transition(
                    self.store, article, expire(article, now, self.sla_hours, self.site_domain)
                )
            except PressroomError as e:
                console.print(f"[red]SLA escalation failed for {article.id}: {e}[/red]")
                report.items.append(SweepItem(article_id=article.id, outcome=SweepOutcome.ERROR, detail=str(e)))
                continue

            if escalated.status == ArticleStatus.APPROVED:
                report.items.append(SweepItem(article_id=article.id, outcome=SweepOutcome.AUTO_APPROVED))
            else:
                report.items.append(
                    SweepItem(
                        article_id=article.id,
                        outcome=SweepOutcome.NEEDS_ATTENTION,
                        detail=escalated.attention_reason,
                    )
                )

        return report
