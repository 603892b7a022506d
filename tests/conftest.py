"""Shared fixtures and builders for the test suite."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from pressroom.db import InMemoryArticleStore
from pressroom.models import FAQ, Article, ArticleStatus, ContentType, LinkTarget

DOMAIN = "geteducated.com"
NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def internal_url(n: int) -> str:
    return f"https://www.{DOMAIN}/online-degrees/article-{n}/"


def make_content(
    words: int = 850,
    internal: int = 2,
    external: int = 1,
    h2: int = 1,
    internal_urls: Optional[List[str]] = None,
) -> str:
    """HTML body with an exact measured word count and link mix.

    Each heading and each anchor contributes one word; plain filler words
    make up the rest.
    """
    urls = internal_urls or [internal_url(i) for i in range(1, internal + 1)]
    headings = "".join(f'<h2 id="section-{i}">Heading</h2>' for i in range(1, h2 + 1))
    anchors = [f'<a href="{url}">related</a>' for url in urls[:internal]]
    anchors += [
        f'<a href="https://www.bls.gov/ooh/item-{i}/" target="_blank" rel="noopener">BLS</a>'
        for i in range(external)
    ]
    filler = words - h2 - len(anchors)
    assert filler >= 0
    return f"{headings}<p>{' '.join(['word'] * filler)}</p><p>{' '.join(anchors)}</p>"


def make_faqs(n: int = 4) -> List[FAQ]:
    return [FAQ(question=f"Question {i}?", answer=f"Answer {i}.") for i in range(n)]


def make_article(
    status: ArticleStatus = ArticleStatus.PENDING_REVIEW,
    content: Optional[str] = None,
    faqs: Optional[List[FAQ]] = None,
    pending_since: Optional[datetime] = None,
    **fields,
) -> Article:
    """Article in any status, publishable unless told otherwise."""
    if status == ArticleStatus.PENDING_REVIEW and pending_since is None:
        pending_since = NOW - timedelta(hours=1)
    return Article(
        title=fields.pop("title", "Online Degrees Explained"),
        content=content if content is not None else make_content(),
        content_type=fields.pop("content_type", ContentType.GUIDE),
        faqs=faqs if faqs is not None else make_faqs(),
        status=status,
        pending_since=pending_since,
        **fields,
    )


def failing_content() -> str:
    """900 words and one H2 but only one internal and no external link."""
    return make_content(words=900, internal=1, external=0, h2=1)


def draft_payload(
    words: int = 850,
    internal_urls: Optional[List[str]] = None,
    faqs: int = 4,
    title: str = "Online Degrees Explained",
) -> dict:
    urls = internal_urls or [internal_url(1), internal_url(2)]
    return {
        "title": title,
        "excerpt": "What to know before you enroll.",
        "content": make_content(words=words, internal=len(urls), external=1, h2=1, internal_urls=urls),
        "faqs": [{"question": f"Question {i}?", "answer": f"Answer {i}."} for i in range(faqs)],
    }


def published_article(n: int) -> Article:
    return Article(
        title=f"Published Article {n}",
        excerpt=f"Excerpt {n}",
        content="<p>Already live.</p>",
        status=ArticleStatus.PUBLISHED,
        published_url=internal_url(n),
        published_at=NOW - timedelta(days=n),
    )


@pytest.fixture
def store():
    return InMemoryArticleStore()


@pytest.fixture
def inventory_store():
    """Store holding three published articles."""
    return InMemoryArticleStore([published_article(n) for n in range(1, 4)])


@pytest.fixture
def link_targets() -> List[LinkTarget]:
    return [LinkTarget(title=f"Article {n}", url=internal_url(n), excerpt=f"About {n}") for n in range(1, 4)]
