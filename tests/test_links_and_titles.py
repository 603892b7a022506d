"""Tests for the link inventory cache and title strategies."""

import pytest

from conftest import internal_url
from pressroom.errors import GenerationTimeout
from pressroom.generation import (
    AITitleSelection,
    GenerationClient,
    HumanTitleChoice,
    LinkInventory,
    MockLLMProvider,
)
from pressroom.models import ContentType, LinkTarget


class CountingSource:
    def __init__(self, size):
        self.size = size
        self.calls = []

    def list_published(self, limit):
        self.calls.append(limit)
        return [LinkTarget(title=f"Article {n}", url=internal_url(n)) for n in range(1, self.size + 1)]


def test_inventory_is_cached_within_ttl():
    source = CountingSource(3)
    inventory = LinkInventory(source, ttl_seconds=300)
    assert inventory.list() == inventory.list()
    assert len(source.calls) == 1


def test_inventory_refetches_when_ttl_is_zero():
    source = CountingSource(3)
    inventory = LinkInventory(source, ttl_seconds=0)
    inventory.list()
    inventory.list()
    assert len(source.calls) == 2


def test_inventory_invalidate():
    source = CountingSource(3)
    inventory = LinkInventory(source)
    inventory.list()
    inventory.invalidate()
    inventory.list()
    assert len(source.calls) == 2


def test_inventory_is_capped_at_twenty():
    source = CountingSource(30)
    inventory = LinkInventory(source, limit=50)
    assert inventory.limit == 20
    assert len(inventory.list()) == 20
    assert source.calls == [20]


def test_callers_cannot_mutate_the_cache():
    inventory = LinkInventory(CountingSource(3))
    inventory.list().clear()
    assert len(inventory.list()) == 3


def test_zero_limit_never_queries():
    source = CountingSource(3)
    assert LinkInventory(source, limit=0).list() == []
    assert source.calls == []


def test_human_title_choice():
    assert HumanTitleChoice("  My Title ").choose("topic", ContentType.GUIDE, []) == "My Title"
    with pytest.raises(ValueError):
        HumanTitleChoice("   ")


def test_ai_title_selection_takes_first_candidate():
    provider = MockLLMProvider([{"titles": [{"title": "Best Pick"}, {"title": "Second"}]}])
    strategy = AITitleSelection(GenerationClient(provider))
    assert strategy.choose("Online MBA", ContentType.RANKING, ["mba"]) == "Best Pick"
    assert "Topic: Online MBA" in provider.calls[0]["prompt"]


def test_ai_title_selection_skips_blank_candidates():
    provider = MockLLMProvider([{"titles": [{"title": "  "}, "Plain String Title"]}])
    assert AITitleSelection(GenerationClient(provider)).choose("t", ContentType.GUIDE, []) == "Plain String Title"


@pytest.mark.parametrize("response", ["not json at all", {"titles": []}, {"other": 1}])
def test_ai_title_selection_falls_back_to_topic(response):
    provider = MockLLMProvider([response])
    assert AITitleSelection(GenerationClient(provider)).choose(" Online MBA ", ContentType.GUIDE, []) == "Online MBA"


def test_ai_title_selection_propagates_timeouts():
    provider = MockLLMProvider([GenerationTimeout(30)])
    with pytest.raises(GenerationTimeout):
        AITitleSelection(GenerationClient(provider)).choose("t", ContentType.GUIDE, [])
