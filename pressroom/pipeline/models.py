"""Data models for the generation pipeline."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models import ContentType


class ArticleRequest(BaseModel):
    """What an editor asks the pipeline to write."""

    topic: str = Field(..., description="Subject of the article")
    content_type: Optional[ContentType] = Field(None, description="Format; inferred from the topic when omitted")
    title: Optional[str] = Field(None, description="Editor-chosen title; generated when omitted")
    keywords: List[str] = Field(default_factory=list, description="Target keywords, most important first")
    target_audience: str = Field("", description="Who the article is for")
    additional_context: str = Field("", description="Free-form notes for the writer")

    @field_validator("topic")
    @classmethod
    def topic_not_empty(cls, v: str) -> str:
        """Reject blank topics."""
        v = v.strip()
        if not v:
            raise ValueError("Topic must not be empty")
        return v

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, v: List[str]) -> List[str]:
        """Drop blank keywords, keeping order."""
        return [keyword.strip() for keyword in v if keyword and keyword.strip()]
