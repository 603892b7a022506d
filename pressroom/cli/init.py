"""Init command implementation."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, save_config
from ..db import init_database, validate_connection

console = Console()


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "pressroom",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("pressroom", "--db-name", help="Database name"),
    db_user: str = typer.Option("pressroom_user", "--db-user", help="Database user"),
    site_name: str = typer.Option("GetEducated.com", "--site-name", help="Site name used in prompts"),
    site_domain: str = typer.Option("geteducated.com", "--site-domain", help="Domain marking internal links"),
    wordpress_url: str = typer.Option(None, "--wordpress-url", help="WordPress site URL"),
    wordpress_user: str = typer.Option(None, "--wordpress-user", help="WordPress user"),
) -> None:
    """Initialize configuration and the article database."""
    console.print(Panel.fit("Pressroom - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "PRESSROOM_DB_PASSWORD",
        },
        site={"name": site_name, "domain": site_domain},
        wordpress={"base_url": wordpress_url, "username": wordpress_user},
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: [bold]export PRESSROOM_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    console.print("\n[bold]Initializing database schema...[/bold]")
    init_database(db_config)

    console.print(
        Panel(
            f"[green]✅ Pressroom initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export PRESSROOM_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set LLM API key: [bold]export OPENAI_API_KEY=your_key[/bold]\n"
            f"3. Set WordPress application password: [bold]export WORDPRESS_APP_PASSWORD=...[/bold]\n"
            f"4. Run: [bold]pressroom generate \"online MBA programs\"[/bold]",
            style="green",
        )
    )
