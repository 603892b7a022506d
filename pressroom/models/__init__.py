"""Data models for the article pipeline."""

from .article import (
    FAQ,
    ApprovalMode,
    Article,
    ArticleStatus,
    ContentType,
    LinkTarget,
)
from .base import DBModel

__all__ = [
    "Article",
    "ArticleStatus",
    "ApprovalMode",
    "ContentType",
    "DBModel",
    "FAQ",
    "LinkTarget",
]
