"""Article model: the record that moves through generation, review and publishing."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .base import DBModel


class ContentType(str, Enum):
    """Article formats the generator knows how to write."""

    RANKING = "ranking"
    CAREER_GUIDE = "career_guide"
    LISTICLE = "listicle"
    GUIDE = "guide"
    FAQ = "faq"


class ArticleStatus(str, Enum):
    """Lifecycle states. Only the lifecycle module writes this field."""

    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    REJECTED = "rejected"
    NEEDS_ATTENTION = "needs_attention"


class ApprovalMode(str, Enum):
    """How an article reached the approved state."""

    HUMAN = "human"
    OVERRIDE = "override"
    SLA_AUTO = "sla_auto"


class FAQ(BaseModel):
    """Question and answer pair."""

    question: str = Field(..., description="Question text")
    answer: str = Field(..., description="Answer text (may contain HTML)")


class LinkTarget(BaseModel):
    """Published article that may be cited as an internal link."""

    title: str = Field(..., description="Article title")
    url: str = Field(..., description="Absolute URL on the site")
    excerpt: str = Field("", description="Short summary")


class Article(DBModel):
    """Generated article."""

    title: str = Field(..., description="Article title")
    excerpt: str = Field("", description="Short summary shown in listings")
    content: str = Field(..., description="Article body as HTML")
    content_type: ContentType = Field(ContentType.GUIDE, description="Article format")
    target_keywords: List[str] = Field(default_factory=list, description="Ordered target keywords")
    faqs: List[FAQ] = Field(default_factory=list, description="FAQ pairs")

    # Cached measurements, recomputable from content
    word_count: Optional[int] = Field(None, description="Word count at generation time")
    internal_link_count: Optional[int] = Field(None, description="Internal links at generation time")
    external_link_count: Optional[int] = Field(None, description="External links at generation time")
    required_internal_links: int = Field(
        2, ge=0, description="Internal link target (0 when no link candidates were available)"
    )
    quality_score: Optional[int] = Field(None, ge=0, le=100, description="Last quality score")
    can_publish: Optional[bool] = Field(None, description="Last quality verdict")

    status: ArticleStatus = Field(ArticleStatus.DRAFT, description="Lifecycle state")
    pending_since: Optional[datetime] = Field(None, description="When the article entered review")
    rejection_reason: Optional[str] = Field(None, description="Why the article was rejected")
    attention_reason: Optional[str] = Field(None, description="Why the SLA escalation needs a human")

    approval_mode: Optional[ApprovalMode] = Field(None, description="How approval happened")
    approved_by: Optional[str] = Field(None, description="Who approved the article")
    approved_at: Optional[datetime] = Field(None, description="When the article was approved")

    scheduled_for: Optional[datetime] = Field(None, description="Planned publication time")
    published_at: Optional[datetime] = Field(None, description="When the article went live")
    published_url: Optional[str] = Field(None, description="Public URL after publishing")
    wordpress_post_id: Optional[int] = Field(None, description="Post id on the publishing target")

    generation_tokens: Optional[int] = Field(None, ge=0, description="Tokens used by generation calls")
    generation_cost: Optional[float] = Field(None, ge=0, description="Estimated USD cost of generation calls")
    generation_warnings: List[str] = Field(
        default_factory=list, description="Non-fatal problems seen during generation"
    )
