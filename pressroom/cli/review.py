"""Review commands: queue, approve, reject, schedule and the SLA check."""

from typing import List, Optional

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..db import PostgresArticleStore
from ..errors import PressroomError, PublishBlocked
from ..quality import evaluate
from ..workflow import BulkResult, ReviewService, SweepOutcome, Urgency, format_remaining

console = Console()

URGENCY_STYLES = {
    Urgency.NORMAL: "green",
    Urgency.WARNING: "yellow",
    Urgency.CRITICAL: "red",
}


def _service() -> ReviewService:
    config = Config()
    return ReviewService(
        PostgresArticleStore(config.get_db_config()),
        sla_hours=config.config.workflow.sla_hours,
        site_domain=config.config.site.domain,
    )


def _print_bulk(result: BulkResult, action: str) -> None:
    table = Table(title=f"Bulk {action}")
    table.add_column("Article", style="cyan")
    table.add_column("Result", style="bold")
    table.add_column("Details", style="dim")

    for item in result.items:
        if item.success:
            table.add_row(item.article_id, "[green]✓[/green]", item.status.value if item.status else "")
        else:
            table.add_row(item.article_id, "[red]✗[/red]", item.error or "")

    console.print(table)
    console.print(f"{len(result.succeeded)} succeeded, {len(result.failed)} failed")


def queue_command() -> None:
    """List articles awaiting review, most urgent first."""
    service = _service()
    entries = service.review_queue()

    if not entries:
        console.print("[green]Review queue is empty.[/green]")
        return

    table = Table(title=f"Review Queue ({len(entries)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Score", justify="right")
    table.add_column("Publishable")
    table.add_column("Time left")

    for entry in entries:
        article = entry.article
        report = evaluate(article, site_domain=service.site_domain)
        style = URGENCY_STYLES[entry.clock.urgency]
        table.add_row(
            article.id,
            article.title,
            str(report.score),
            "[green]yes[/green]" if report.can_publish else f"[red]no[/red] ({report.summary()})",
            f"[{style}]{format_remaining(entry.clock)}[/{style}]",
        )

    console.print(table)


def approve_command(
    article_id: str = typer.Argument(..., help="Article ID"),
    override: bool = typer.Option(False, "--override", help="Approve even though quality checks fail"),
    by: Optional[str] = typer.Option(None, "--by", help="Reviewer name"),
) -> None:
    """Approve an article for publishing."""
    try:
        article = _service().approve(article_id, override=override, actor=by)
    except PublishBlocked as e:
        console.print(f"[red]{e}[/red]")
        console.print(f"[dim]{e.report.summary()}. Use --override to approve anyway.[/dim]")
        raise typer.Exit(1)
    except PressroomError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    mode = article.approval_mode.value if article.approval_mode else "human"
    console.print(f"[green]✅ Approved {article.id} ({mode})[/green]")


def reject_command(
    article_id: str = typer.Argument(..., help="Article ID"),
    reason: str = typer.Option(..., "--reason", "-r", help="Why the article is rejected"),
    by: Optional[str] = typer.Option(None, "--by", help="Reviewer name"),
) -> None:
    """Reject an article."""
    try:
        article = _service().reject(article_id, reason, actor=by)
    except PressroomError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Rejected {article.id}[/green]")


def schedule_command(
    article_id: str = typer.Argument(..., help="Article ID"),
    at: str = typer.Option(..., "--at", help="Publication time, ISO 8601 (UTC unless an offset is given)"),
    by: Optional[str] = typer.Option(None, "--by", help="Reviewer name"),
) -> None:
    """Schedule an approved article for publish-due."""
    try:
        when = pendulum.parse(at, tz="UTC")
    except ValueError as e:
        console.print(f"[red]Invalid time {at!r}: {e}[/red]")
        raise typer.Exit(1)

    try:
        article = _service().schedule(article_id, when, actor=by)
    except PressroomError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Scheduled {article.id} for {when.to_iso8601_string()}[/green]")


def bulk_approve_command(
    article_ids: List[str] = typer.Argument(..., help="Article IDs"),
    override: bool = typer.Option(False, "--override", help="Approve even though quality checks fail"),
    by: Optional[str] = typer.Option(None, "--by", help="Reviewer name"),
) -> None:
    """Approve several articles; each succeeds or fails on its own."""
    result = _service().bulk_approve(article_ids, override=override, actor=by)
    _print_bulk(result, "approve")
    if result.failed:
        raise typer.Exit(1)


def bulk_reject_command(
    article_ids: List[str] = typer.Argument(..., help="Article IDs"),
    reason: str = typer.Option(..., "--reason", "-r", help="Why the articles are rejected"),
    by: Optional[str] = typer.Option(None, "--by", help="Reviewer name"),
) -> None:
    """Reject several articles; each succeeds or fails on its own."""
    result = _service().bulk_reject(article_ids, reason, actor=by)
    _print_bulk(result, "reject")
    if result.failed:
        raise typer.Exit(1)


def sla_check_command() -> None:
    """Escalate articles whose review window has expired."""
    report = _service().sweep_expired()

    console.print(f"Checked {report.checked} pending article(s)")
    if not report.items:
        console.print("[green]No expired reviews.[/green]")
        return

    table = Table(title="SLA Escalations")
    table.add_column("Article", style="cyan")
    table.add_column("Outcome", style="bold")
    table.add_column("Details", style="dim")

    styles = {
        SweepOutcome.AUTO_APPROVED: "green",
        SweepOutcome.NEEDS_ATTENTION: "yellow",
        SweepOutcome.ERROR: "red",
    }
    for item in report.items:
        style = styles[item.outcome]
        table.add_row(item.article_id, f"[{style}]{item.outcome.value}[/{style}]", item.detail or "")

    console.print(table)
    if report.count(SweepOutcome.ERROR):
        raise typer.Exit(1)
