"""Article generation pipeline and the operations it exposes to callers."""

from ..quality.gate import evaluate as evaluate_quality
from ..workflow.clock import clock_status
from ..workflow.lifecycle import transition
from .models import ArticleRequest
from .orchestrator import PipelineOrchestrator, PipelineStage, get_llm_provider

__all__ = [
    "ArticleRequest",
    "PipelineOrchestrator",
    "PipelineStage",
    "clock_status",
    "evaluate_quality",
    "get_llm_provider",
    "transition",
]
