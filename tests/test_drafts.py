"""Tests for the two-stage draft generator."""

import pytest

from conftest import draft_payload, make_content
from pressroom.errors import GenerationProviderError, GenerationTimeout, InvalidGenerationOutput
from pressroom.generation import (
    DraftGenerator,
    GenerationClient,
    MockLLMProvider,
    PromptRequest,
    coerce_faqs,
)
from pressroom.quality import count_external_links, count_internal_links, count_words, evaluate_content


def generator(responses, **kwargs):
    provider = MockLLMProvider(responses)
    return DraftGenerator(GenerationClient(provider), **kwargs), provider


def request(**kwargs):
    return PromptRequest(title="Online Degrees Explained", keywords=["online degrees"], **kwargs)


def test_draft_and_humanize_run_in_order():
    payload = draft_payload()
    humanized = payload["content"].replace("word word", "word, word", 1)
    drafts, provider = generator([payload, humanized])

    result = drafts.generate(request())

    assert result.humanized
    assert result.warnings == []
    assert result.draft.content == humanized
    assert len(provider.calls) == 2
    assert provider.calls[0]["schema"] is not None
    assert provider.calls[1]["schema"] is None
    assert payload["content"] in provider.calls[1]["prompt"]


def test_counts_are_measured_from_final_content():
    drafts, _ = generator([draft_payload(words=900)])
    draft = drafts.generate(request()).draft
    assert draft.word_count == count_words(draft.content) == 900
    assert draft.internal_link_count == count_internal_links(draft.content) == 2
    assert draft.external_link_count == count_external_links(draft.content) == 1


@pytest.mark.parametrize(
    "failure",
    [
        GenerationProviderError("overloaded", kind="rate_limit"),
        GenerationTimeout(120),
        RuntimeError("connection reset"),
    ],
)
def test_humanize_failure_keeps_draft(failure):
    payload = draft_payload()
    drafts, _ = generator([payload, failure])

    result = drafts.generate(request())

    assert not result.humanized
    assert result.draft.content == payload["content"]
    assert len(result.warnings) == 1
    assert "Humanize stage failed" in result.warnings[0]


def test_humanize_output_that_drops_links_is_ignored():
    payload = draft_payload()
    stripped = "<h2>Heading</h2><p>" + "plain words " * 100 + "</p>"
    drafts, _ = generator([payload, stripped])

    result = drafts.generate(request())

    assert not result.humanized
    assert result.draft.content == payload["content"]
    assert "dropped link markup" in result.warnings[0]


def test_humanize_output_that_drops_headings_is_ignored():
    payload = draft_payload()
    flattened = payload["content"].replace("<h2", "<p").replace("</h2>", "</p>")
    drafts, _ = generator([payload, flattened])

    result = drafts.generate(request())

    assert not result.humanized
    assert result.draft.content == payload["content"]
    assert "dropped section headings" in result.warnings[0]
    assert evaluate_content(result.draft.content, result.draft.faqs).can_publish


@pytest.mark.parametrize("output", ["", "```\n```", "<p>Too short.</p>"])
def test_empty_or_short_humanize_output_is_ignored(output):
    payload = draft_payload()
    drafts, _ = generator([payload, output])
    result = drafts.generate(request())
    assert not result.humanized
    assert result.draft.content == payload["content"]
    assert result.warnings


def test_humanize_can_be_disabled():
    drafts, provider = generator([draft_payload()], humanize=False)
    result = drafts.generate(request())
    assert not result.humanized
    assert len(provider.calls) == 1


@pytest.mark.parametrize(
    "payload",
    [
        ["not", "an", "object"],
        {"excerpt": "x", "content": make_content(), "faqs": []},
        {"title": "   ", "excerpt": "x", "content": make_content(), "faqs": []},
        {"title": "T", "excerpt": "x", "faqs": []},
        {"title": "T", "excerpt": "x", "content": 42, "faqs": []},
        {"title": "T", "excerpt": "x", "content": "<p>Too short</p>", "faqs": []},
    ],
)
def test_contract_violations_fail_the_draft(payload):
    drafts, provider = generator([payload])
    with pytest.raises(InvalidGenerationOutput):
        drafts.generate(request())
    assert len(provider.calls) == 1


def test_draft_timeout_propagates():
    drafts, _ = generator([GenerationTimeout(120)])
    with pytest.raises(GenerationTimeout):
        drafts.generate(request())


def test_malformed_faqs_never_fail_the_draft():
    payload = draft_payload()
    payload["faqs"] = "see below"
    drafts, _ = generator([payload], humanize=False)
    assert drafts.generate(request()).draft.faqs == []


def test_fenced_content_is_cleaned():
    payload = draft_payload()
    body = payload["content"]
    payload["content"] = f"```html\n{body}\n```"
    drafts, _ = generator([payload], humanize=False)
    assert drafts.generate(request()).draft.content == body


def test_missing_excerpt_falls_back_to_title():
    payload = draft_payload()
    del payload["excerpt"]
    drafts, _ = generator([payload], humanize=False)
    assert "Online Degrees Explained" in drafts.generate(request()).draft.excerpt


def test_coerce_faqs_keeps_only_complete_pairs():
    faqs = coerce_faqs(
        [
            {"question": "Q1?", "answer": "A1."},
            {"question": "Q2?"},
            {"question": "", "answer": "A3."},
            "loose string",
            {"question": " Q5? ", "answer": " A5. "},
        ]
    )
    assert [(f.question, f.answer) for f in faqs] == [("Q1?", "A1."), ("Q5?", "A5.")]
    assert coerce_faqs(None) == []
    assert coerce_faqs({"question": "Q", "answer": "A"}) == []
