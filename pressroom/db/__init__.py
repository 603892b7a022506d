"""Article storage backed by PostgreSQL (or memory, for development)."""

from .articles import ArticleStore, InMemoryArticleStore, PostgresArticleStore, new_article_id
from .connection import get_connection, get_connection_pool
from .init import init_database, validate_connection

__all__ = [
    "ArticleStore",
    "InMemoryArticleStore",
    "PostgresArticleStore",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "new_article_id",
    "validate_connection",
]
