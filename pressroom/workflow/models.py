"""Data models for review workflow."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import Article, ArticleStatus
from ..quality.gate import DEFAULT_SITE_DOMAIN


class Urgency(str, Enum):
    """How close a pending article is to its review deadline."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class ClockReport(BaseModel):
    """Review SLA status for one pending article at one instant."""

    hours_elapsed: float = Field(..., description="Hours since the article entered review")
    hours_remaining: float = Field(..., description="Hours left in the SLA window (negative once overdue)")
    urgency: Urgency = Field(..., description="Urgency band")
    expired: bool = Field(..., description="Whether the SLA window has run out")
    deadline: datetime = Field(..., description="When the SLA window closes")


class TransitionContext(BaseModel):
    """Inputs a lifecycle transition may need."""

    override: bool = Field(False, description="Human override of a failing quality gate")
    rejection_reason: Optional[str] = Field(None, description="Required when rejecting")
    actor: Optional[str] = Field(None, description="Who performed the action")
    now: Optional[datetime] = Field(None, description="Transition time; defaults to the current time")
    scheduled_for: Optional[datetime] = Field(None, description="Required when scheduling")
    published_url: Optional[str] = Field(None, description="Public URL, when publishing")
    wordpress_post_id: Optional[int] = Field(None, description="Remote post id, when publishing")
    site_domain: str = Field(DEFAULT_SITE_DOMAIN, description="Domain marker for the quality gate")


class BulkItemResult(BaseModel):
    """Outcome of one article inside a bulk action."""

    article_id: str = Field(..., description="Article id")
    success: bool = Field(..., description="Whether the action applied")
    status: Optional[ArticleStatus] = Field(None, description="Status after the action")
    error: Optional[str] = Field(None, description="Why the action did not apply")


class BulkResult(BaseModel):
    """Per-article outcomes of a bulk action."""

    items: List[BulkItemResult] = Field(default_factory=list, description="One entry per requested id")

    @property
    def succeeded(self) -> List[str]:
        return [item.article_id for item in self.items if item.success]

    @property
    def failed(self) -> List[str]:
        return [item.article_id for item in self.items if not item.success]


class QueueEntry(BaseModel):
    """A pending article with its SLA clock."""

    article: Article = Field(..., description="Pending article")
    clock: ClockReport = Field(..., description="SLA status")


class SweepOutcome(str, Enum):
    """What the SLA sweep did with one expired article."""

    AUTO_APPROVED = "auto_approved"
    NEEDS_ATTENTION = "needs_attention"
    ERROR = "error"


class SweepItem(BaseModel):
    """Result of escalating one expired article."""

    article_id: str = Field(..., description="Article id")
    outcome: SweepOutcome = Field(..., description="Escalation outcome")
    detail: Optional[str] = Field(None, description="Failing checks or error message")


class SweepReport(BaseModel):
    """Summary of one SLA sweep."""

    checked: int = Field(0, description="Pending articles examined")
    items: List[SweepItem] = Field(default_factory=list, description="Expired articles and what happened")

    def count(self, outcome: SweepOutcome) -> int:
        return sum(1 for item in self.items if item.outcome == outcome)
