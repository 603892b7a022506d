"""Article storage.

``ArticleStore`` is the persistence interface the pipeline, review service
and publisher depend on. Records follow last-write-wins per article; nothing
here spans more than one record.
"""

import threading
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import pendulum
from psycopg import sql
from psycopg.types.json import Jsonb

from ..errors import ArticleNotFound
from ..models import Article, ArticleStatus, LinkTarget
from .connection import get_connection

ARTICLE_COLUMNS = [name for name in Article.model_fields if name not in ("created_at", "updated_at")]
UPDATABLE_COLUMNS = frozenset(ARTICLE_COLUMNS) - {"id"}
SORTABLE_COLUMNS = frozenset(Article.model_fields)
JSON_COLUMNS = frozenset({"faqs", "generation_warnings"})


def new_article_id() -> str:
    """Opaque identifier for a new article."""
    return uuid.uuid4().hex


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _check_columns(columns: Iterable[str], allowed: frozenset) -> None:
    unknown = sorted(set(columns) - allowed)
    if unknown:
        raise ValueError(f"Unknown article field(s): {', '.join(unknown)}")


class ArticleStore(ABC):
    """Abstract article storage."""

    @abstractmethod
    def create(self, article: Article) -> Article:
        """Insert a new record and return it as stored."""
        pass

    @abstractmethod
    def update(self, article_id: str, partial: Dict[str, Any]) -> Article:
        """Apply a partial update and return the stored record.

        Raises:
            ArticleNotFound: no record with this id
        """
        pass

    @abstractmethod
    def get(self, article_id: str) -> Optional[Article]:
        pass

    @abstractmethod
    def find(
        self,
        filter: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> List[Article]:
        """Records whose fields equal the filter values (a list value matches any of its items)."""
        pass

    @abstractmethod
    def list_published(self, limit: int = 20) -> List[LinkTarget]:
        """Most recently published articles as internal link candidates."""
        pass

    def require(self, article_id: str) -> Article:
        """Like ``get`` but raises ArticleNotFound."""
        article = self.get(article_id)
        if article is None:
            raise ArticleNotFound(article_id)
        return article


def _db_value(column: str, value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if column in JSON_COLUMNS:
        return Jsonb([item.model_dump() if hasattr(item, "model_dump") else item for item in value or []])
    return value


class PostgresArticleStore(ArticleStore):
    """Article storage in the ``articles`` table."""

    def __init__(self, db_config: Dict[str, Any]) -> None:
        """
        Initialize Postgres storage.

        Args:
            db_config: Connection settings as returned by ``Config.get_db_config``
        """
        self.db_config = db_config

    def create(self, article: Article) -> Article:
        if article.id is None:
            article = article.model_copy(update={"id": new_article_id()})

        values = {column: getattr(article, column) for column in ARTICLE_COLUMNS}
        query = sql.SQL("INSERT INTO articles ({}) VALUES ({}) RETURNING *").format(
            sql.SQL(", ").join(map(sql.Identifier, values)),
            sql.SQL(", ").join(sql.Placeholder() * len(values)),
        )

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, [_db_value(column, value) for column, value in values.items()])
                row = cur.fetchone()
            conn.commit()
        return Article.model_validate(row)

    def update(self, article_id: str, partial: Dict[str, Any]) -> Article:
        _check_columns(partial, UPDATABLE_COLUMNS)
        if not partial:
            return self.require(article_id)

        query = sql.SQL("UPDATE articles SET {} WHERE id = {} RETURNING *").format(
            sql.SQL(", ").join(
                sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder()) for column in partial
            ),
            sql.Placeholder(),
        )
        params = [_db_value(column, value) for column, value in partial.items()] + [article_id]

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise ArticleNotFound(article_id)
        return Article.model_validate(row)

    def get(self, article_id: str) -> Optional[Article]:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM articles WHERE id = %s", (article_id,))
                row = cur.fetchone()
        return Article.model_validate(row) if row else None

    def find(
        self,
        filter: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> List[Article]:
        filter = filter or {}
        _check_columns(filter, SORTABLE_COLUMNS)
        _check_columns([order_by], SORTABLE_COLUMNS)

        conditions = []
        params: List[Any] = []
        for column, value in filter.items():
            if isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(sql.SQL("{} = ANY({})").format(sql.Identifier(column), sql.Placeholder()))
                params.append([_db_value(column, item) for item in value])
            elif value is None:
                conditions.append(sql.SQL("{} IS NULL").format(sql.Identifier(column)))
            else:
                conditions.append(sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder()))
                params.append(_db_value(column, value))

        query = sql.SQL("SELECT * FROM articles")
        if conditions:
            query += sql.SQL(" WHERE ") + sql.SQL(" AND ").join(conditions)
        query += sql.SQL(" ORDER BY {} {} NULLS LAST").format(
            sql.Identifier(order_by), sql.SQL("DESC" if descending else "ASC")
        )
        if limit is not None:
            query += sql.SQL(" LIMIT {}").format(sql.Literal(int(limit)))

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        return [Article.model_validate(row) for row in rows]

    def list_published(self, limit: int = 20) -> List[LinkTarget]:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT title, published_url AS url, excerpt
                    FROM articles
                    WHERE status = %s AND published_url IS NOT NULL
                    ORDER BY published_at DESC NULLS LAST
                    LIMIT %s
                    """,
                    (ArticleStatus.PUBLISHED.value, limit),
                )
                rows = cur.fetchall()
        return [LinkTarget.model_validate(row) for row in rows]


class InMemoryArticleStore(ArticleStore):
    """Process-local article storage for development and tests.

    Records are copied on the way in and out, so callers never share state
    with the store.
    """

    def __init__(self, articles: Optional[Iterable[Article]] = None) -> None:
        self._articles: Dict[str, Article] = {}
        self._lock = threading.Lock()
        self.create_calls = 0
        for article in articles or []:
            self.create(article)

    def create(self, article: Article) -> Article:
        now = pendulum.now("UTC")
        with self._lock:
            article_id = article.id or new_article_id()
            if article_id in self._articles:
                raise ValueError(f"Article already exists: {article_id}")
            stored = article.model_copy(
                update={
                    "id": article_id,
                    "created_at": article.created_at or now,
                    "updated_at": now,
                },
                deep=True,
            )
            self._articles[article_id] = stored
            self.create_calls += 1
            return stored.model_copy(deep=True)

    def update(self, article_id: str, partial: Dict[str, Any]) -> Article:
        _check_columns(partial, UPDATABLE_COLUMNS)
        with self._lock:
            current = self._articles.get(article_id)
            if current is None:
                raise ArticleNotFound(article_id)
            merged = current.model_dump()
            merged.update(partial)
            merged["updated_at"] = pendulum.now("UTC")
            stored = Article.model_validate(merged)
            self._articles[article_id] = stored
            return stored.model_copy(deep=True)

    def get(self, article_id: str) -> Optional[Article]:
        with self._lock:
            article = self._articles.get(article_id)
            return article.model_copy(deep=True) if article else None

    def find(
        self,
        filter: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> List[Article]:
        filter = filter or {}
        _check_columns(filter, SORTABLE_COLUMNS)
        _check_columns([order_by], SORTABLE_COLUMNS)

        with self._lock:
            matches = [a for a in self._articles.values() if self._matches(a, filter)]

        present = [a for a in matches if getattr(a, order_by) is not None]
        missing = [a for a in matches if getattr(a, order_by) is None]
        present.sort(key=lambda a: getattr(a, order_by), reverse=descending)
        ordered = present + missing
        if limit is not None:
            ordered = ordered[:limit]
        return [a.model_copy(deep=True) for a in ordered]

    @staticmethod
    def _matches(article: Article, filter: Dict[str, Any]) -> bool:
        for column, expected in filter.items():
            value = _plain(getattr(article, column))
            if isinstance(expected, (list, tuple, set, frozenset)):
                if value not in {_plain(item) for item in expected}:
                    return False
            elif value != _plain(expected):
                return False
        return True

    def list_published(self, limit: int = 20) -> List[LinkTarget]:
        published = [
            a
            for a in self.find({"status": ArticleStatus.PUBLISHED}, order_by="published_at")
            if a.published_url
        ]
        return [
            LinkTarget(title=a.title, url=a.published_url, excerpt=a.excerpt) for a in published[:limit]
        ]
