"""Publishing approved articles to WordPress."""

from .service import PublishingService
from .wordpress import PublishedPost, WordPressClient

__all__ = ["PublishedPost", "PublishingService", "WordPressClient"]
