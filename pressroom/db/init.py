"""Database initialization and schema management."""

from typing import Any, Dict

from psycopg.errors import DatabaseError
from rich.console import Console

from .connection import get_connection

console = Console()


SCHEMA_SQL = """
-- Articles table
CREATE TABLE IF NOT EXISTS articles (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    excerpt TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL,
    content_type TEXT NOT NULL
        CHECK (content_type IN ('ranking', 'career_guide', 'listicle', 'guide', 'faq')),
    target_keywords TEXT[] NOT NULL DEFAULT '{}',
    faqs JSONB NOT NULL DEFAULT '[]',
    word_count INTEGER,
    internal_link_count INTEGER,
    external_link_count INTEGER,
    required_internal_links INTEGER NOT NULL DEFAULT 2,
    quality_score INTEGER CHECK (quality_score BETWEEN 0 AND 100),
    can_publish BOOLEAN,
    status TEXT NOT NULL DEFAULT 'draft'
        CHECK (status IN ('draft', 'pending_review', 'approved', 'scheduled',
                          'published', 'rejected', 'needs_attention')),
    pending_since TIMESTAMPTZ,
    rejection_reason TEXT,
    attention_reason TEXT,
    approval_mode TEXT CHECK (approval_mode IN ('human', 'override', 'sla_auto')),
    approved_by TEXT,
    approved_at TIMESTAMPTZ,
    scheduled_for TIMESTAMPTZ,
    published_at TIMESTAMPTZ,
    published_url TEXT,
    wordpress_post_id INTEGER,
    generation_tokens INTEGER,
    generation_cost DOUBLE PRECISION,
    generation_warnings JSONB NOT NULL DEFAULT '[]',
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CHECK ((status = 'pending_review') = (pending_since IS NOT NULL))
);

-- Create indexes
CREATE INDEX IF NOT EXISTS idx_articles_status ON articles(status);
CREATE INDEX IF NOT EXISTS idx_articles_pending_since ON articles(pending_since);
CREATE INDEX IF NOT EXISTS idx_articles_scheduled_for ON articles(scheduled_for);
CREATE INDEX IF NOT EXISTS idx_articles_published_at ON articles(published_at);

-- Update trigger function
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

-- Create update triggers
DROP TRIGGER IF EXISTS update_articles_updated_at ON articles;
CREATE TRIGGER update_articles_updated_at BEFORE UPDATE ON articles
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def validate_connection(config: Dict[str, Any]) -> bool:
    """Check that the database answers a trivial query."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except DatabaseError as e:
        console.print(f"[red]Database connection failed: {e}[/red]")
        return False


def init_database(config: Dict[str, Any]) -> None:
    """Create the articles table, indexes and update trigger."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
                conn.commit()
                console.print("[green]Database schema initialized successfully[/green]")
    except DatabaseError as e:
        console.print(f"[red]Failed to initialize database schema: {e}[/red]")
        raise
