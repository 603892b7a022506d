"""Generate command implementation."""

from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from ..config import Config
from ..db import PostgresArticleStore, validate_connection
from ..errors import PressroomError
from ..models import ContentType
from ..pipeline import ArticleRequest, PipelineOrchestrator

console = Console()


def generate_command(
    topic: str = typer.Argument(..., help="What the article is about"),
    content_type: Optional[ContentType] = typer.Option(
        None,
        "--type",
        "-t",
        help="Article format. Default: inferred from the topic",
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Use this title instead of generating one"),
    keywords: List[str] = typer.Option([], "--keyword", "-k", help="Target keyword (repeatable)"),
    audience: str = typer.Option("", "--audience", "-a", help="Target audience"),
    context: str = typer.Option("", "--context", help="Additional notes for the writer"),
) -> None:
    """Generate an article and submit it for review."""
    try:
        config = Config()

        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(config.get_db_config()):
            console.print("[red]❌ Database connection failed![/red]")
            console.print("Please check your database configuration and ensure Postgres is running.")
            raise typer.Exit(1)

        request = ArticleRequest(
            topic=topic,
            content_type=content_type,
            title=title,
            keywords=keywords,
            target_audience=audience,
            additional_context=context,
        )
        orchestrator = PipelineOrchestrator.from_config(
            config, store=PostgresArticleStore(config.get_db_config()), verbose=True
        )
        article = orchestrator.generate_article(request)

    except KeyboardInterrupt:
        console.print("\n[yellow]Generation interrupted by user[/yellow]")
        raise typer.Exit(1)
    except (PressroomError, ValidationError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Generation failed: {e}[/red]")
        console.print("[dim]Nothing was saved. Re-run the command to retry.[/dim]")
        raise typer.Exit(1)

    warnings = "\n".join(f"[yellow]⚠ {w}[/yellow]" for w in article.generation_warnings)
    verdict = "[green]publishable[/green]" if article.can_publish else "[red]blocked by quality gate[/red]"
    console.print(
        Panel(
            f"[bold]{article.title}[/bold]\n\n"
            f"ID: {article.id}\n"
            f"Type: {article.content_type.value}\n"
            f"Words: {article.word_count}\n"
            f"Quality: {article.quality_score}/100, {verdict}\n"
            f"Generation: {article.generation_tokens or 0} tokens, ${article.generation_cost or 0:.3f}\n"
            f"Status: {article.status.value}"
            + (f"\n\n{warnings}" if warnings else ""),
            title="Article submitted for review",
            style="green",
        )
    )
