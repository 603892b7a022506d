"""Two-stage article draft generation: structured draft, then humanize pass."""

from typing import Any, List, Optional

from rich.console import Console

from ..errors import GenerationError, InvalidGenerationOutput
from ..models import FAQ
from ..quality.gate import count_external_links, count_h2, count_internal_links, count_words
from .client import GenerationClient, clean_output
from .models import DraftArticle, DraftPrompt, DraftResult, GenerationOptions, GenerationStats, PromptRequest
from .prompts import build_draft_prompt, build_humanize_prompt

console = Console()


def coerce_faqs(value: Any) -> List[FAQ]:
    """Turn whatever the model returned for ``faqs`` into a clean FAQ list.

    Anything that is not a list becomes an empty list. Items without a
    non-empty question and answer are dropped.
    """
    if not isinstance(value, list):
        return []

    faqs = []
    for item in value:
        if not isinstance(item, dict):
            continue
        question = item.get("question")
        answer = item.get("answer")
        if isinstance(question, str) and isinstance(answer, str) and question.strip() and answer.strip():
            faqs.append(FAQ(question=question.strip(), answer=answer.strip()))
    return faqs


class DraftGenerator:
    """Generate a validated article draft and optionally humanize it.

    The two provider calls run strictly one after the other. Nothing is
    persisted here; the orchestrator owns storage.
    """

    def __init__(
        self,
        client: GenerationClient,
        min_content_chars: int = 100,
        humanize: bool = True,
        draft_options: Optional[GenerationOptions] = None,
        humanize_options: Optional[GenerationOptions] = None,
    ) -> None:
        """
        Initialize draft generator.

        Args:
            client: Generation client used for both stages
            min_content_chars: Raw character floor for the content field
            humanize: Whether to run the humanize stage
            draft_options: Sampling options for the draft call
            humanize_options: Sampling options for the humanize call
        """
        self.client = client
        self.min_content_chars = min_content_chars
        self.humanize = humanize
        self.draft_options = draft_options or GenerationOptions(temperature=0.7)
        self.humanize_options = humanize_options or GenerationOptions(temperature=0.8)

    def generate(self, request: PromptRequest, stats: Optional[GenerationStats] = None) -> DraftResult:
        """
        Run the draft stage and then the humanize stage.

        Args:
            request: Prompt inputs for the article
            stats: Usage accumulator shared with earlier calls for the same article

        Returns:
            DraftResult with the draft to persist and any warnings

        Raises:
            GenerationTimeout, GenerationProviderError: the draft call failed
            InvalidGenerationOutput: the draft broke the output contract
        """
        stats = stats if stats is not None else GenerationStats()
        prompt = build_draft_prompt(request)
        raw = self.client.generate(
            prompt.prompt, schema=prompt.output_schema, options=self.draft_options, stats=stats
        )
        draft = self.validate_draft(raw, request)

        warnings: List[str] = []
        humanized = False
        if self.humanize:
            content, warning = self._humanize(draft.content, request.site_name, request.site_domain, stats)
            if warning:
                warnings.append(warning)
                console.print(f"[yellow]{warning}; keeping the original draft[/yellow]")
            else:
                draft = draft.model_copy(update={"content": content})
                humanized = True

        draft = self._measure(draft, request.site_domain)
        return DraftResult(draft=draft, prompt=prompt, humanized=humanized, warnings=warnings, stats=stats)

    def validate_draft(self, raw: Any, request: PromptRequest) -> DraftArticle:
        """Check the draft payload shape and build a DraftArticle from it."""
        if not isinstance(raw, dict):
            raise InvalidGenerationOutput(f"Draft output must be an object, got {type(raw).__name__}")

        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            raise InvalidGenerationOutput("Draft is missing a title")

        content = raw.get("content")
        if not isinstance(content, str):
            raise InvalidGenerationOutput("Draft is missing content")
        content = clean_output(content)
        if len(content) < self.min_content_chars:
            raise InvalidGenerationOutput(
                f"Draft content is {len(content)} characters, below the {self.min_content_chars} floor"
            )

        excerpt = raw.get("excerpt")
        if not isinstance(excerpt, str) or not excerpt.strip():
            excerpt = f"A {request.site_name} guide to {title.strip()}."

        return DraftArticle(
            title=title.strip(),
            excerpt=excerpt.strip(),
            content=content,
            faqs=coerce_faqs(raw.get("faqs")),
        )

    def _humanize(self, content: str, site_name: str, site_domain: str, stats: GenerationStats):
        """Return (content, None) on success or (None, warning) on failure."""
        try:
            result = self.client.generate(
                build_humanize_prompt(content, site_name=site_name),
                options=self.humanize_options,
                stats=stats,
            )
        except GenerationError as e:
            return None, f"Humanize stage failed: {e}"

        if not isinstance(result, str) or not result.strip():
            return None, "Humanize stage returned empty content"
        if len(result) < self.min_content_chars:
            return None, f"Humanize stage returned {len(result)} characters, below the floor"

        # The rewrite may reword text but must keep every link and heading it was given
        lost_internal = count_internal_links(result, site_domain) < count_internal_links(content, site_domain)
        lost_external = count_external_links(result, site_domain) < count_external_links(content, site_domain)
        if lost_internal or lost_external:
            return None, "Humanize stage dropped link markup"
        if count_h2(result) < count_h2(content):
            return None, "Humanize stage dropped section headings"

        return result, None

    def _measure(self, draft: DraftArticle, site_domain: str) -> DraftArticle:
        return draft.model_copy(
            update={
                "word_count": count_words(draft.content),
                "internal_link_count": count_internal_links(draft.content, site_domain),
                "external_link_count": count_external_links(draft.content, site_domain),
            }
        )


def describe_prompt(prompt: DraftPrompt) -> str:
    """One-line summary of a draft prompt's link requirements."""
    if prompt.internal_links_relaxed:
        return f"no internal link candidates, {prompt.required_external_links}+ external"
    return (
        f"{len(prompt.link_inventory)} link candidates, "
        f"{prompt.required_internal_links}+ internal, {prompt.required_external_links}+ external"
    )
