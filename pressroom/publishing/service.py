"""Publishing approved and scheduled articles."""

from datetime import datetime
from typing import Callable, Optional

import pendulum
from rich.console import Console

from ..db.articles import ArticleStore
from ..errors import InvalidTransition, PressroomError
from ..models import Article, ArticleStatus
from ..workflow.lifecycle import transition
from ..workflow.models import BulkItemResult, BulkResult, TransitionContext
from ..workflow.review import save_transition
from .wordpress import PublishedPost, WordPressClient

console = Console()

PUBLISHABLE = (ArticleStatus.APPROVED, ArticleStatus.SCHEDULED)


class PublishingService:
    """Push articles to WordPress and record the result on the article."""

    def __init__(
        self,
        store: ArticleStore,
        client: WordPressClient,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.client = client
        self.clock = clock or (lambda: pendulum.now("UTC"))

    def publish(self, article_id: str) -> Article:
        """
        Publish one article.

        Raises:
            ArticleNotFound: no such article
            InvalidTransition: the article is not approved or scheduled
            PublishingError: WordPress rejected the post
        """
        article = self.store.require(article_id)
        if article.status not in PUBLISHABLE:
            raise InvalidTransition(
                article.status.value,
                ArticleStatus.PUBLISHED.value,
                "only approved or scheduled articles can be published",
            )

        if article.wordpress_post_id is not None:
            # Posted by an earlier attempt whose status write failed
            post = PublishedPost(id=article.wordpress_post_id, url=article.published_url or "")
            console.print(f"[yellow]{article.id} is already post {post.id}; recording it as published[/yellow]")
        else:
            post = self.client.create_post(
                article.title, article.content, status="publish", excerpt=article.excerpt
            )
            console.print(f"[green]Published {article.title!r} as post {post.id}[/green]")

        context = TransitionContext(now=self.clock(), published_url=post.url, wordpress_post_id=post.id)
        try:
            return save_transition(self.store, article, transition(article, ArticleStatus.PUBLISHED, context))
        except Exception:
            self.store.update(article.id, {"wordpress_post_id": post.id, "published_url": post.url})
            raise

    def publish_due(self, now: Optional[datetime] = None) -> BulkResult:
        """Publish every scheduled article whose time has come."""
        now = pendulum.instance(now or self.clock(), tz="UTC")
        result = BulkResult()

        scheduled = self.store.find({"status": ArticleStatus.SCHEDULED}, order_by="scheduled_for", descending=False)
        for article in scheduled:
            if article.scheduled_for is None or pendulum.instance(article.scheduled_for, tz="UTC") > now:
                continue
            try:
                published = self.publish(article.id)
            except PressroomError as e:
                console.print(f"[red]Failed to publish {article.id}: {e}[/red]")
                result.items.append(BulkItemResult(article_id=article.id, success=False, error=str(e)))
                continue
            result.items.append(BulkItemResult(article_id=article.id, success=True, status=published.status))

        return result
