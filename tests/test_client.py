"""Tests for output cleaning and the generation client."""

import threading

import pytest

from pressroom.errors import GenerationProviderError, GenerationTimeout, InvalidGenerationOutput
from pressroom.generation import (
    GenerationClient,
    GenerationOptions,
    GenerationStats,
    MockLLMProvider,
    OpenAIProvider,
    clean_output,
)

RAW_OUTPUTS = [
    "",
    "   ",
    "<p>Already clean.</p>",
    "```html\n<h2>Title</h2><p>Body</p>\n```",
    "```json\n{\"title\": \"x\"}\n```",
    "```\n```",
    "Here's your article:\n<p>Body</p>",
    "Here is the humanized version:\n\n```html\n<p>Body</p>\n```\n",
    "Sure! Here is the JSON: {\"a\": 1}",
    "I've rewritten the article below.\n<h2 id=\"a\">A</h2>",
    "Below is the article\nHere's your article:\n<p>Nested</p>",
    "```\nHere's your article:\n```\n<p>x</p>\n```\n```",
    "  \n\t<p>Padded</p>\n\n",
]


@pytest.mark.parametrize("raw", RAW_OUTPUTS)
def test_cleaning_is_idempotent(raw):
    once = clean_output(raw)
    assert clean_output(once) == once


def test_cleaning_strips_fences_and_commentary():
    assert clean_output("```html\n<h2>Title</h2>\n```") == "<h2>Title</h2>"
    assert clean_output("Here's your article:\n<p>Body</p>") == "<p>Body</p>"
    assert clean_output("Sure! Here is the JSON: {\"a\": 1}") == "{\"a\": 1}"
    assert clean_output("Here is the humanized version:\n\n```html\n<p>Body</p>\n```\n") == "<p>Body</p>"


def test_cleaning_leaves_article_text_alone():
    body = "<p>Here is what most students ask first.</p>"
    assert clean_output(body) == body


@pytest.mark.parametrize(
    "text",
    [
        "Sure-fire ways to pay for college\n\nMost students borrow.",
        "Okay, so you want a degree.\n\nStart with cost.",
        "Certainly the cheapest route is community college.",
        "Here are the schools we ranked\n<p>Body</p>",
    ],
)
def test_opening_words_in_article_text_are_kept(text):
    assert clean_output(text) == text


def test_commentary_openers_are_stripped():
    assert clean_output("Certainly! Here is your article.\n<p>Body</p>") == "<p>Body</p>"
    assert clean_output("Sure, here's the rewritten version:\n<p>Body</p>") == "<p>Body</p>"
    assert clean_output("Of course! <p>Body</p>") == "<p>Body</p>"


def test_text_output_is_cleaned():
    client = GenerationClient(MockLLMProvider(["```\n<p>Body</p>\n```"]))
    assert client.generate("prompt") == "<p>Body</p>"


def test_schema_output_is_parsed_from_fenced_json():
    client = GenerationClient(MockLLMProvider(["```json\n{\"title\": \"T\"}\n```"]))
    assert client.generate("prompt", schema={"type": "object"}) == {"title": "T"}


def test_decoded_objects_pass_through():
    client = GenerationClient(MockLLMProvider([{"title": "T"}]))
    assert client.generate("prompt", schema={"type": "object"}) == {"title": "T"}


def test_unparsable_schema_output_is_invalid():
    client = GenerationClient(MockLLMProvider(["I could not write that article."]))
    with pytest.raises(InvalidGenerationOutput):
        client.generate("prompt", schema={"type": "object"})


def test_unexpected_exceptions_are_wrapped():
    client = GenerationClient(MockLLMProvider([RuntimeError("socket closed")]))
    with pytest.raises(GenerationProviderError) as excinfo:
        client.generate("prompt")
    assert excinfo.value.kind == "RuntimeError"
    assert "socket closed" in str(excinfo.value)


def test_provider_errors_propagate_unchanged():
    error = GenerationProviderError("slow down", kind="rate_limit")
    client = GenerationClient(MockLLMProvider([error]))
    with pytest.raises(GenerationProviderError) as excinfo:
        client.generate("prompt")
    assert excinfo.value is error


def test_slow_provider_times_out_and_late_result_is_discarded():
    release = threading.Event()

    def slow(prompt, **kwargs):
        release.wait(5)
        return "late"

    provider = MockLLMProvider([slow, "next answer"])
    client = GenerationClient(provider, timeout_seconds=0.2)
    try:
        with pytest.raises(GenerationTimeout) as excinfo:
            client.generate("prompt")
        assert excinfo.value.timeout_seconds == 0.2
    finally:
        release.set()

    # The client is still usable and never returns the abandoned answer
    assert client.generate("prompt") == "next answer"


def test_options_reach_the_provider():
    provider = MockLLMProvider(["ok"])
    GenerationClient(provider).generate("prompt", options=GenerationOptions(temperature=0.2, max_output_tokens=50))
    assert provider.calls[0]["temperature"] == 0.2


def test_client_does_not_retry():
    provider = MockLLMProvider([GenerationProviderError("down", kind="connection"), "second"])
    client = GenerationClient(provider)
    with pytest.raises(GenerationProviderError):
        client.generate("prompt")
    assert len(provider.calls) == 1


def test_usage_is_recorded_per_call():
    stats = GenerationStats()
    client = GenerationClient(MockLLMProvider(["a" * 400, {"title": "T"}], cost_per_call=0.5))

    client.generate("p" * 80, stats=stats)
    client.generate("prompt", schema={"type": "object"}, stats=stats)

    assert stats.api_calls == 2
    assert stats.prompt_tokens == 20 + 1
    assert stats.completion_tokens >= 100
    assert stats.tokens_used == stats.prompt_tokens + stats.completion_tokens
    assert stats.cost_estimate == 1.0


def test_failed_calls_cost_nothing():
    stats = GenerationStats()
    client = GenerationClient(MockLLMProvider([RuntimeError("down")], cost_per_call=0.5))
    with pytest.raises(GenerationProviderError):
        client.generate("prompt", stats=stats)
    assert stats.api_calls == 0
    assert stats.cost_estimate == 0.0


def test_budget_is_strictly_below_the_limit():
    stats = GenerationStats()
    stats.record(1000, 500, 4.0)
    assert stats.within_budget()
    stats.record(1000, 500, 6.0)
    assert not stats.within_budget()
    assert stats.within_budget(budget=10.5)


def test_openai_cost_estimate_uses_model_rates():
    provider = OpenAIProvider(api_key="sk-test", model="gpt-4o-mini")
    assert provider.estimate_cost(1000, 1000) == pytest.approx(0.00015 + 0.0006)
    assert OpenAIProvider(api_key="sk-test", model="unknown-model").estimate_cost(1000, 1000) == 0.0
