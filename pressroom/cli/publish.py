"""Publish commands."""

import typer
from rich.console import Console

from ..config import Config
from ..db import PostgresArticleStore
from ..errors import PressroomError
from ..publishing import PublishingService, WordPressClient

console = Console()


def _service() -> PublishingService:
    config = Config()
    wp = config.get_wordpress_config()
    if not wp.get("base_url") or not wp.get("username") or not wp.get("app_password"):
        console.print(
            "[red]WordPress is not configured.[/red]\n"
            "Set wordpress.base_url and wordpress.username in the config file and "
            f"export {wp.get('app_password_env') or 'WORDPRESS_APP_PASSWORD'}."
        )
        raise typer.Exit(1)

    client = WordPressClient(
        wp["base_url"],
        wp["username"],
        wp["app_password"],
        timeout=wp.get("timeout_seconds", 30.0),
    )
    return PublishingService(PostgresArticleStore(config.get_db_config()), client)


def publish_command(
    article_id: str = typer.Argument(..., help="Article ID"),
) -> None:
    """Publish an approved or scheduled article to WordPress."""
    try:
        article = _service().publish(article_id)
    except PressroomError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Published: {article.published_url}[/green]")


def publish_due_command() -> None:
    """Publish every scheduled article whose time has come."""
    result = _service().publish_due()

    if not result.items:
        console.print("[green]Nothing due for publishing.[/green]")
        return

    for item in result.items:
        if item.success:
            console.print(f"[green]✅ {item.article_id}[/green]")
        else:
            console.print(f"[red]❌ {item.article_id}: {item.error}[/red]")

    console.print(f"{len(result.succeeded)} published, {len(result.failed)} failed")
    if result.failed:
        raise typer.Exit(1)
