"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .generate import generate_command
from .init import init_command
from .publish import publish_command, publish_due_command
from .review import (
    approve_command,
    bulk_approve_command,
    bulk_reject_command,
    queue_command,
    reject_command,
    schedule_command,
    sla_check_command,
)

app = typer.Typer(
    name="pressroom",
    help="Pressroom - AI article generation with editorial review",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("generate")(generate_command)
app.command("queue")(queue_command)
app.command("approve")(approve_command)
app.command("reject")(reject_command)
app.command("schedule")(schedule_command)
app.command("bulk-approve")(bulk_approve_command)
app.command("bulk-reject")(bulk_reject_command)
app.command("sla-check")(sla_check_command)
app.command("publish")(publish_command)
app.command("publish-due")(publish_due_command)


if __name__ == "__main__":
    app()
