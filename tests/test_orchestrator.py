"""End-to-end tests for the pipeline orchestrator."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import NOW, draft_payload, internal_url
from pressroom.config import Config, ConfigModel
from pressroom.errors import GenerationProviderError, GenerationTimeout, InvalidGenerationOutput, PublishBlocked
from pressroom.generation import DraftGenerator, GenerationClient, LinkInventory, MockLLMProvider
from pressroom.models import ArticleStatus, ContentType
from pressroom.pipeline import (
    ArticleRequest,
    PipelineOrchestrator,
    clock_status,
    evaluate_quality,
    transition,
)
from pressroom.quality import count_external_links, count_internal_links, count_words


def build(store, responses=None, humanize=True, cost_per_call=0.0, **kwargs):
    provider = MockLLMProvider(responses, cost_per_call=cost_per_call)
    client = GenerationClient(provider, timeout_seconds=5)
    orchestrator = PipelineOrchestrator(
        DraftGenerator(client, humanize=humanize),
        store,
        LinkInventory(store),
        clock=lambda: NOW,
        **kwargs,
    )
    return orchestrator, provider


def guide_request(**kwargs):
    return ArticleRequest(
        topic="online degrees",
        content_type=kwargs.pop("content_type", ContentType.GUIDE),
        title=kwargs.pop("title", "Online Degrees Explained"),
        keywords=["online degrees"],
        **kwargs,
    )


def test_guide_with_three_candidates_reaches_review_with_full_score(inventory_store):
    payload = draft_payload(words=850, internal_urls=[internal_url(1), internal_url(2)], faqs=4)
    orchestrator, provider = build(inventory_store, [payload])

    article = orchestrator.generate_article(guide_request())

    assert article.status == ArticleStatus.PENDING_REVIEW
    assert article.pending_since == NOW
    report = evaluate_quality(article)
    assert report.score == 100
    assert report.can_publish
    assert article.quality_score == 100
    assert article.required_internal_links == 2
    # inventory made it into the prompt
    for n in range(1, 4):
        assert internal_url(n) in provider.calls[0]["prompt"]


def test_humanize_failure_still_returns_the_draft(inventory_store):
    payload = draft_payload()
    orchestrator, _ = build(inventory_store, [payload, GenerationProviderError("overloaded", kind="rate_limit")])

    article = orchestrator.generate_article(guide_request())

    assert article.status == ArticleStatus.PENDING_REVIEW
    assert article.content == payload["content"]
    assert len(article.generation_warnings) == 1


def test_generation_usage_is_recorded_on_the_article(store):
    orchestrator, provider = build(store, cost_per_call=0.25)

    article = orchestrator.generate_article(ArticleRequest(topic="How to become a paralegal"))

    # title, draft and humanize calls
    assert len(provider.calls) == 3
    assert article.generation_cost == pytest.approx(0.75)
    assert article.generation_tokens > 0
    assert article.generation_warnings == []
    assert store.get(article.id).generation_cost == pytest.approx(0.75)


@pytest.mark.parametrize("cost_per_call", [5.0, 6.0])
def test_generation_at_or_over_budget_is_flagged(inventory_store, cost_per_call):
    orchestrator, _ = build(inventory_store, [draft_payload()], cost_per_call=cost_per_call)

    article = orchestrator.generate_article(guide_request())

    assert article.status == ArticleStatus.PENDING_REVIEW
    assert article.generation_cost == pytest.approx(2 * cost_per_call)
    assert any("exceeded the $10.00 budget" in w for w in article.generation_warnings)


def test_cost_budget_is_configurable(inventory_store):
    orchestrator, _ = build(inventory_store, [draft_payload()], cost_per_call=0.5, cost_budget=2.0)
    assert orchestrator.generate_article(guide_request()).generation_warnings == []

    orchestrator.cost_budget = 0.75
    article = orchestrator.generate_article(guide_request())
    assert article.generation_warnings == ["Generation cost $1.00 exceeded the $0.75 budget"]


def test_cached_counts_recompute_equal(inventory_store):
    orchestrator, _ = build(inventory_store, [draft_payload(words=1200)])
    article = orchestrator.generate_article(guide_request())
    assert article.word_count == count_words(article.content)
    assert article.internal_link_count == count_internal_links(article.content)
    assert article.external_link_count == count_external_links(article.content)


def test_each_success_creates_exactly_one_record(inventory_store):
    orchestrator, _ = build(inventory_store, [draft_payload(), draft_payload()])
    first = orchestrator.generate_article(guide_request())
    second = orchestrator.generate_article(guide_request())

    assert first.id != second.id
    assert inventory_store.create_calls == 3 + 2
    assert len(inventory_store.find({"status": ArticleStatus.PENDING_REVIEW})) == 2


@pytest.mark.parametrize(
    "failure,error",
    [
        ({"title": "", "excerpt": "", "content": "", "faqs": []}, InvalidGenerationOutput),
        ("no json here", InvalidGenerationOutput),
        (GenerationTimeout(5), GenerationTimeout),
        (GenerationProviderError("bad key", kind="auth"), GenerationProviderError),
    ],
)
def test_failed_generation_leaves_no_record(store, failure, error):
    orchestrator, _ = build(store, [failure])
    with pytest.raises(error):
        orchestrator.generate_article(guide_request())
    assert store.create_calls == 0
    assert store.find() == []


def test_failing_quality_still_enters_review(store):
    payload = draft_payload(internal_urls=[internal_url(1)])
    orchestrator, _ = build(store, [payload])

    article = orchestrator.generate_article(guide_request())

    assert article.status == ArticleStatus.PENDING_REVIEW
    assert article.can_publish is True  # no candidates, internal links not required
    assert article.required_internal_links == 0


def test_failing_article_is_blocked_at_approval(inventory_store):
    payload = draft_payload(internal_urls=[internal_url(1)])
    orchestrator, _ = build(inventory_store, [payload])

    article = orchestrator.generate_article(guide_request())

    assert article.status == ArticleStatus.PENDING_REVIEW
    assert article.can_publish is False
    with pytest.raises(PublishBlocked) as excinfo:
        transition(article, ArticleStatus.APPROVED)
    assert "internal_links" in str(excinfo.value)


def test_ai_title_and_inferred_type(store):
    orchestrator, provider = build(store)

    article = orchestrator.generate_article(ArticleRequest(topic="How to become a paralegal"))

    assert article.title == "How to become a paralegal: A Complete Guide"
    assert article.content_type == ContentType.CAREER_GUIDE
    assert "Topic: How to become a paralegal" in provider.calls[0]["prompt"]
    assert article.can_publish


def test_editor_title_skips_title_generation(store):
    orchestrator, provider = build(store, [draft_payload(title="Model Title")])
    article = orchestrator.generate_article(guide_request(title="Editor Title"))
    assert article.title == "Editor Title"
    assert provider.calls[0]["schema"]["required"] == ["title", "excerpt", "content", "faqs"]


def test_concurrent_generations_do_not_share_state(inventory_store):
    orchestrator, _ = build(inventory_store, humanize=False)
    topics = [f"Guide number {n}" for n in range(6)]

    with ThreadPoolExecutor(max_workers=3) as pool:
        articles = list(pool.map(lambda t: orchestrator.generate_article(guide_request(title=t)), topics))

    assert len({a.id for a in articles}) == 6
    assert sorted(a.title for a in articles) == sorted(topics)
    assert len(inventory_store.find({"status": ArticleStatus.PENDING_REVIEW})) == 6


def test_clock_status_is_exposed(inventory_store):
    orchestrator, _ = build(inventory_store, [draft_payload()])
    article = orchestrator.generate_article(guide_request())
    assert clock_status(article.pending_since, NOW).hours_remaining == 120


def test_from_config_uses_mock_provider_without_key(monkeypatch, store):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    config = Config.from_model(ConfigModel(llm={"provider": "openai"}, workflow={"humanize": False}))

    orchestrator = PipelineOrchestrator.from_config(config, store=store)
    article = orchestrator.generate_article(ArticleRequest(topic="Online accounting degree programs"))

    assert isinstance(orchestrator.draft_generator.client.provider, MockLLMProvider)
    assert article.content_type == ContentType.RANKING
    assert article.status == ArticleStatus.PENDING_REVIEW
    assert store.get(article.id) == article


def test_request_validation():
    with pytest.raises(ValueError):
        ArticleRequest(topic="   ")
    assert ArticleRequest(topic="x", keywords=[" a ", "", "b"]).keywords == ["a", "b"]


def test_verbose_run_prints_summary(inventory_store, capsys):
    orchestrator, _ = build(inventory_store, [draft_payload()])
    orchestrator.verbose = True
    orchestrator.generate_article(guide_request())
    assert "Pipeline Summary" in capsys.readouterr().out
