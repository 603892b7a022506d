"""Prompt building, LLM calls, draft generation and title selection."""

from .client import GenerationClient, clean_output
from .drafts import DraftGenerator, coerce_faqs, describe_prompt
from .links import LinkInventory, PublishedSource
from .llm_provider import LLMProvider, MockLLMProvider, OpenAIProvider, mock_article_payload
from .models import (
    DraftArticle,
    DraftPrompt,
    DraftResult,
    GenerationOptions,
    GenerationStats,
    PromptRequest,
)
from .prompts import (
    DRAFT_SCHEMA,
    MAX_LINK_INVENTORY,
    TITLE_SCHEMA,
    build_draft_prompt,
    build_humanize_prompt,
    build_title_prompt,
)
from .templates import TEMPLATES, ContentTemplate, get_template, infer_content_type
from .titles import AITitleSelection, HumanTitleChoice, TitleStrategy

__all__ = [
    "AITitleSelection",
    "ContentTemplate",
    "DRAFT_SCHEMA",
    "DraftArticle",
    "DraftGenerator",
    "DraftPrompt",
    "DraftResult",
    "GenerationClient",
    "GenerationOptions",
    "GenerationStats",
    "HumanTitleChoice",
    "LLMProvider",
    "LinkInventory",
    "MAX_LINK_INVENTORY",
    "MockLLMProvider",
    "OpenAIProvider",
    "PromptRequest",
    "PublishedSource",
    "TEMPLATES",
    "TITLE_SCHEMA",
    "TitleStrategy",
    "build_draft_prompt",
    "build_humanize_prompt",
    "build_title_prompt",
    "clean_output",
    "coerce_faqs",
    "describe_prompt",
    "get_template",
    "infer_content_type",
    "mock_article_payload",
]
