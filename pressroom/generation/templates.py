"""Per-format article templates.

Link, length and FAQ minimums are not repeated here: prompts read them from
the same THRESHOLDS object the quality gate checks against.
"""

import re
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..models import ContentType
from ..quality.thresholds import THRESHOLDS


class ContentTemplate(BaseModel):
    """Structural requirements for one article format."""

    content_type: ContentType
    label: str = Field(..., description="Human readable format name")
    sections: List[str] = Field(..., description="Ordered H2 section skeleton")
    word_range: Tuple[int, int] = Field(..., description="Target length for the prompt")
    tone: str = Field(..., description="Voice the article should use")
    faq_range: Tuple[int, int] = Field((3, 5), description="FAQ pairs to request")
    list_items: Optional[Tuple[int, int]] = Field(None, description="Numbered items for list formats")
    section_notes: Dict[str, str] = Field(default_factory=dict, description="Per-section guidance")


TEMPLATES: Dict[ContentType, ContentTemplate] = {
    ContentType.RANKING: ContentTemplate(
        content_type=ContentType.RANKING,
        label="Ranking Article",
        sections=[
            "What Is This Degree or Program?",
            "Career Opportunities",
            "Salary and Job Outlook",
            "How to Choose the Right Program",
        ],
        word_range=(1500, 2000),
        tone="Professional, helpful, consumer-focused",
        faq_range=(3, 5),
        section_notes={"Salary and Job Outlook": "cite government labor statistics with a link"},
    ),
    ContentType.CAREER_GUIDE: ContentTemplate(
        content_type=ContentType.CAREER_GUIDE,
        label="Career Guide",
        sections=[
            "What Is This Role?",
            "How to Enter This Field",
            "Step-by-Step Career Path",
            "Essential Skills",
            "Education Requirements",
            "Career Outlook and Growth",
            "Salary Information",
            "Advancement Opportunities",
        ],
        word_range=(2000, 2500),
        tone="Encouraging, practical, step-by-step",
        faq_range=(5, 7),
        section_notes={
            "Step-by-Step Career Path": "use a numbered list",
            "Education Requirements": "link to relevant degree pages from the internal list",
            "Career Outlook and Growth": "cite government labor statistics with a link",
        },
    ),
    ContentType.LISTICLE: ContentTemplate(
        content_type=ContentType.LISTICLE,
        label="Listicle",
        sections=["Introduction", "The List", "Conclusion"],
        word_range=(2500, 3500),
        tone="Informative, data-driven, optimistic",
        faq_range=(5, 7),
        list_items=(15, 25),
        section_notes={"The List": "each item gets an H3 title, key details and a short description"},
    ),
    ContentType.GUIDE: ContentTemplate(
        content_type=ContentType.GUIDE,
        label="Comprehensive Guide",
        sections=[
            "Overview",
            "Key Concepts",
            "Step-by-Step Process",
            "Best Practices",
            "Common Mistakes to Avoid",
            "Resources and Tools",
        ],
        word_range=(1500, 2500),
        tone="Educational, authoritative, helpful",
        faq_range=(3, 6),
        section_notes={"Resources and Tools": "include internal and external links"},
    ),
    ContentType.FAQ: ContentTemplate(
        content_type=ContentType.FAQ,
        label="FAQ Article",
        sections=[
            "General Information",
            "Education Requirements",
            "Career Prospects",
            "Salary Information",
        ],
        word_range=(2000, 3000),
        tone="Conversational, helpful, comprehensive",
        faq_range=(15, 20),
        section_notes={"General Information": "open with a brief overview linking related site content"},
    ),
}


def get_template(content_type: ContentType) -> ContentTemplate:
    """Return the template for a content type."""
    return TEMPLATES[ContentType(content_type)]


_LISTICLE_HINTS = re.compile(r"\btop\b|\bbest\b|\d")
_CAREER_HINTS = re.compile(r"career|\bjobs?\b|become")
_RANKING_HINTS = re.compile(r"degree|program")


def infer_content_type(topic: str, audience: str = "") -> ContentType:
    """Pick a format for a topic when the editor did not choose one."""
    text = f"{topic} {audience}".lower()

    if _LISTICLE_HINTS.search(text):
        return ContentType.LISTICLE
    if _CAREER_HINTS.search(text):
        return ContentType.CAREER_GUIDE
    if _RANKING_HINTS.search(text):
        return ContentType.RANKING
    return ContentType.GUIDE
