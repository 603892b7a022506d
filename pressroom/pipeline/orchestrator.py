"""Pipeline orchestrator that turns an article request into a record awaiting review."""

import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

import pendulum
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..db.articles import ArticleStore, PostgresArticleStore, new_article_id
from ..generation import (
    AITitleSelection,
    DraftGenerator,
    GenerationClient,
    GenerationOptions,
    GenerationStats,
    HumanTitleChoice,
    LinkInventory,
    MockLLMProvider,
    OpenAIProvider,
    PromptRequest,
    TitleStrategy,
    describe_prompt,
    infer_content_type,
)
from ..generation.models import DEFAULT_COST_BUDGET
from ..models import Article, ArticleStatus
from ..quality.gate import DEFAULT_SITE_DOMAIN, evaluate
from ..workflow.lifecycle import transition
from ..workflow.models import TransitionContext
from .models import ArticleRequest

console = Console()


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None
        self.stats: Dict = {}

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def new_stages() -> List[PipelineStage]:
    """Fresh stage records for one generation."""
    return [
        PipelineStage("inventory", "Loading internal link candidates"),
        PipelineStage("content_type", "Choosing article format"),
        PipelineStage("title", "Choosing title"),
        PipelineStage("draft", "Generating and humanizing draft"),
        PipelineStage("quality", "Running quality gate"),
        PipelineStage("review", "Submitting for review"),
        PipelineStage("storage", "Saving article"),
    ]


def get_llm_provider(llm_config: Dict):
    """Build the configured LLM provider, falling back to the mock provider."""
    provider = llm_config.get("provider")

    if provider == "openai":
        api_key = llm_config.get("api_key")
        if not api_key:
            console.print("[yellow]Warning: No OpenAI API key found. Using mock LLM provider.[/yellow]")
            return MockLLMProvider()
        return OpenAIProvider(
            api_key=api_key,
            model=llm_config.get("model", "gpt-4o-mini"),
            base_url=llm_config.get("base_url"),
            timeout=llm_config.get("timeout_seconds"),
        )

    if provider != "mock":
        console.print(f"[yellow]Warning: Unknown LLM provider '{provider}'. Using mock provider.[/yellow]")
    return MockLLMProvider()


class PipelineOrchestrator:
    """Runs one article request through generation, quality gate and review intake.

    Every call works on its own local state, so one orchestrator can serve
    concurrent requests. Each successful call creates exactly one record;
    a failed call creates none.
    """

    def __init__(
        self,
        draft_generator: DraftGenerator,
        store: ArticleStore,
        link_inventory: LinkInventory,
        title_client: Optional[GenerationClient] = None,
        site_domain: str = DEFAULT_SITE_DOMAIN,
        site_name: str = "GetEducated.com",
        title_options: Optional[GenerationOptions] = None,
        cost_budget: float = DEFAULT_COST_BUDGET,
        clock: Optional[Callable[[], datetime]] = None,
        verbose: bool = False,
    ) -> None:
        """
        Initialize pipeline orchestrator.

        Args:
            draft_generator: Two-stage draft generator
            store: Where finished articles are created
            link_inventory: Shared internal link candidates
            title_client: Client for AI title selection (defaults to the draft client)
            site_domain: Domain marker for internal links
            site_name: Site name used in prompts
            title_options: Sampling options for title generation
            cost_budget: USD of provider usage per article before a warning is recorded
            clock: Source of the current time
            verbose: Print a stage summary after each run
        """
        self.draft_generator = draft_generator
        self.store = store
        self.link_inventory = link_inventory
        self.title_client = title_client or draft_generator.client
        self.site_domain = site_domain
        self.site_name = site_name
        self.title_options = title_options
        self.cost_budget = cost_budget
        self.clock = clock or (lambda: pendulum.now("UTC"))
        self.verbose = verbose

    @classmethod
    def from_config(
        cls,
        config: Config,
        store: Optional[ArticleStore] = None,
        verbose: bool = False,
    ) -> "PipelineOrchestrator":
        """Build the orchestrator and its collaborators from configuration."""
        llm_config = config.get_llm_config()
        settings = config.config

        client = GenerationClient(get_llm_provider(llm_config), timeout_seconds=settings.llm.timeout_seconds)
        draft_generator = DraftGenerator(
            client,
            min_content_chars=settings.workflow.min_content_chars,
            humanize=settings.workflow.humanize,
            draft_options=GenerationOptions(
                temperature=settings.llm.draft_temperature,
                max_output_tokens=settings.llm.max_output_tokens,
            ),
            humanize_options=GenerationOptions(
                temperature=settings.llm.humanize_temperature,
                max_output_tokens=settings.llm.max_output_tokens,
            ),
        )

        store = store or PostgresArticleStore(config.get_db_config())
        inventory = LinkInventory(
            store,
            limit=settings.workflow.link_inventory_limit,
            ttl_seconds=settings.workflow.link_inventory_ttl_seconds,
        )

        return cls(
            draft_generator,
            store,
            inventory,
            site_domain=settings.site.domain,
            site_name=settings.site.name,
            title_options=GenerationOptions(temperature=settings.llm.title_temperature, max_output_tokens=2000),
            cost_budget=settings.workflow.cost_budget,
            verbose=verbose,
        )

    def _title_strategy(self, request: ArticleRequest) -> TitleStrategy:
        if request.title and request.title.strip():
            return HumanTitleChoice(request.title)
        return AITitleSelection(self.title_client, options=self.title_options, site_name=self.site_name)

    def generate_article(self, request: ArticleRequest) -> Article:
        """
        Generate, gate and store one article.

        Args:
            request: Topic, optional format and title, keywords and notes

        Returns:
            The stored article, in pending_review

        Raises:
            GenerationTimeout, GenerationProviderError: a provider call failed
            InvalidGenerationOutput: the draft broke the output contract
        """
        stages = new_stages()
        by_name = {stage.name: stage for stage in stages}
        started = time.time()
        stage = stages[0]
        usage = GenerationStats()

        try:
            stage = by_name["inventory"]
            stage.start()
            inventory = self.link_inventory.list()
            stage.complete({"candidates": len(inventory)})

            stage = by_name["content_type"]
            stage.start()
            content_type = request.content_type or infer_content_type(request.topic, request.target_audience)
            stage.complete({"content_type": content_type.value, "inferred": request.content_type is None})

            stage = by_name["title"]
            stage.start()
            title = self._title_strategy(request).choose(
                request.topic, content_type, request.keywords, request.target_audience, stats=usage
            )
            stage.complete({"title": title})

            stage = by_name["draft"]
            stage.start()
            result = self.draft_generator.generate(
                PromptRequest(
                    content_type=content_type,
                    title=title,
                    keywords=request.keywords,
                    target_audience=request.target_audience,
                    additional_context=request.additional_context,
                    link_inventory=inventory,
                    site_name=self.site_name,
                    site_domain=self.site_domain,
                ),
                stats=usage,
            )
            warnings = list(result.warnings)
            if not usage.within_budget(self.cost_budget):
                warnings.append(
                    f"Generation cost ${usage.cost_estimate:.2f} exceeded the ${self.cost_budget:.2f} budget"
                )
                console.print(f"[yellow]{warnings[-1]}[/yellow]")
            stage.complete(
                {
                    "words": result.draft.word_count,
                    "humanized": result.humanized,
                    "links": describe_prompt(result.prompt),
                    "tokens_used": usage.tokens_used,
                    "cost_estimate": usage.cost_estimate,
                }
            )

            stage = by_name["quality"]
            stage.start()
            draft = result.draft
            article = Article(
                id=new_article_id(),
                title=title,
                excerpt=draft.excerpt,
                content=draft.content,
                content_type=content_type,
                target_keywords=request.keywords,
                faqs=draft.faqs,
                word_count=draft.word_count,
                internal_link_count=draft.internal_link_count,
                external_link_count=draft.external_link_count,
                required_internal_links=result.prompt.required_internal_links,
                status=ArticleStatus.DRAFT,
                generation_tokens=usage.tokens_used,
                generation_cost=usage.cost_estimate,
                generation_warnings=warnings,
            )
            report = evaluate(article, site_domain=self.site_domain)
            article = article.model_copy(update={"quality_score": report.score, "can_publish": report.can_publish})
            stage.complete({"score": report.score, "can_publish": report.can_publish})

            # Failing quality does not block entering review, only leaving it
            stage = by_name["review"]
            stage.start()
            article = transition(article, ArticleStatus.PENDING_REVIEW, TransitionContext(now=self.clock()))
            stage.complete()

            stage = by_name["storage"]
            stage.start()
            stored = self.store.create(article)
            stage.complete({"id": stored.id})

            return stored

        except Exception as e:
            stage.fail(str(e))
            raise
        finally:
            if self.verbose:
                print_summary(stages, time.time() - started)


def _stage_details(stage: PipelineStage) -> str:
    if not stage.success:
        return stage.error or ("Failed" if stage.start_time else "Skipped")
    stats = stage.stats
    if stage.name == "inventory":
        return f"{stats.get('candidates', 0)} candidates"
    if stage.name == "content_type":
        return stats.get("content_type", "") + (" (inferred)" if stats.get("inferred") else "")
    if stage.name == "title":
        return stats.get("title", "")
    if stage.name == "draft":
        humanized = "humanized" if stats.get("humanized") else "not humanized"
        return (
            f"{stats.get('words', 0)} words, {humanized}; {stats.get('links', '')}; "
            f"{stats.get('tokens_used', 0)} tokens, ${stats.get('cost_estimate', 0):.3f}"
        )
    if stage.name == "quality":
        verdict = "publishable" if stats.get("can_publish") else "blocked"
        return f"score {stats.get('score', 0)}, {verdict}"
    if stage.name == "storage":
        return str(stats.get("id", ""))
    return ""


def print_summary(stages: List[PipelineStage], total_duration: float) -> None:
    """Print pipeline execution summary."""
    table = Table(title=f"Pipeline Summary ({total_duration:.1f}s)")
    table.add_column("Stage", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Duration", style="yellow")
    table.add_column("Details", style="dim")

    for stage in stages:
        if stage.success:
            status = "[green]✓[/green]"
        elif stage.start_time:
            status = "[red]✗[/red]"
        else:
            status = "[dim]-[/dim]"
        duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"
        table.add_row(stage.name.replace("_", " ").title(), status, duration, _stage_details(stage))

    console.print(table)
