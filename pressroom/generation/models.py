"""Data models for generation."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ..models import FAQ, ContentType, LinkTarget

# USD spent on provider calls for one article before it is flagged
DEFAULT_COST_BUDGET = 10.0


class GenerationOptions(BaseModel):
    """Sampling options for a single generation call."""

    temperature: float = Field(0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_output_tokens: int = Field(8000, ge=1, description="Upper bound on output size")


class GenerationStats(BaseModel):
    """Token usage and estimated cost of the provider calls made for one article."""

    api_calls: int = Field(0, description="Number of API calls made")
    prompt_tokens: int = Field(0, description="Prompt tokens used")
    completion_tokens: int = Field(0, description="Completion tokens used")
    cost_estimate: float = Field(0.0, description="Estimated cost in USD")

    @property
    def tokens_used(self) -> int:
        """Total tokens used."""
        return self.prompt_tokens + self.completion_tokens

    def within_budget(self, budget: float = DEFAULT_COST_BUDGET) -> bool:
        """True while the estimated cost stays strictly below the budget."""
        return self.cost_estimate < budget

    def record(self, prompt_tokens: int, completion_tokens: int, cost: float) -> None:
        """Add one answered call."""
        self.api_calls += 1
        self.prompt_tokens += prompt_tokens
        self.completion_tokens += completion_tokens
        self.cost_estimate += cost


class PromptRequest(BaseModel):
    """Everything the prompt builder needs to write a draft prompt."""

    content_type: ContentType = Field(ContentType.GUIDE, description="Article format")
    title: str = Field(..., description="Chosen article title")
    keywords: List[str] = Field(default_factory=list, description="Target keywords, most important first")
    target_audience: str = Field("", description="Who the article is for")
    additional_context: str = Field("", description="Free-form editor notes")
    link_inventory: List[LinkTarget] = Field(default_factory=list, description="Internal link candidates")
    site_name: str = Field("GetEducated.com", description="Site name used in the prompt")
    site_domain: str = Field("geteducated.com", description="Internal link domain marker")


class DraftPrompt(BaseModel):
    """Structured draft generation request produced by the prompt builder."""

    prompt: str = Field(..., description="Full prompt text")
    output_schema: Dict[str, Any] = Field(..., description="JSON schema the output must match")
    required_internal_links: int = Field(..., description="Internal links the article must carry")
    required_external_links: int = Field(..., description="External citations the article must carry")
    internal_links_relaxed: bool = Field(
        False, description="True when the inventory was empty and internal links were not required"
    )
    link_inventory: List[LinkTarget] = Field(default_factory=list, description="Candidates offered")


class DraftArticle(BaseModel):
    """Validated, cleaned draft returned by the draft generator."""

    title: str = Field(..., description="Article title")
    excerpt: str = Field(..., description="Article summary")
    content: str = Field(..., description="HTML body")
    faqs: List[FAQ] = Field(default_factory=list, description="FAQ pairs")
    word_count: int = Field(0, description="Measured word count")
    internal_link_count: int = Field(0, description="Measured internal links")
    external_link_count: int = Field(0, description="Measured external links")


class DraftResult(BaseModel):
    """Outcome of both draft generator stages."""

    draft: DraftArticle = Field(..., description="Draft to persist")
    prompt: DraftPrompt = Field(..., description="Prompt the draft was generated from")
    humanized: bool = Field(False, description="Whether the humanize stage replaced the content")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal problems")
    stats: GenerationStats = Field(default_factory=GenerationStats, description="Usage of both stages")
