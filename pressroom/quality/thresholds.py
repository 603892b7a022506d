"""Publishing thresholds shared by the quality gate and the prompt builder."""

from pydantic import BaseModel, Field


class QualityThresholds(BaseModel):
    """Minimums every publishable article must meet."""

    min_words: int = Field(800, description="Word count floor")
    min_internal_links: int = Field(2, description="Internal links to existing articles")
    min_external_links: int = Field(1, description="Citations to authoritative outside sources")
    min_faqs: int = Field(3, description="FAQ pairs (advisory)")


THRESHOLDS = QualityThresholds()
