"""Main CLI entry point."""

import click

from famtrack.ai.factories import create_providers
from famtrack.database.factories import create_sqlite_database
from famtrack.logging import setup_logging

# Import and register all commands at module level
from famtrack.cli.commands import (
    add,
    card,
    category,
    family,
    import_cmd,
    init_categories,
    view,
)

DEFAULT_USER = "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FAMTRACK_DB_PATH environment variable)",
    envvar="FAMTRACK_DB_PATH",
)
@click.option(
    "--user",
    default=DEFAULT_USER,
    show_default=True,
    envvar="FAMTRACK_USER",
    help="User the records belong to",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="FAMTRACK_LOG_LEVEL",
    help="Diagnostic log level (logs go to stderr)",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str, log_level: str):
    """Famtrack - family finance tracking.

    Import Brazilian bank and credit card statements, categorize them with
    a language model and record installments and recurring bills.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user"] = user
        if "providers" not in ctx.obj:
            try:
                ctx.obj["providers"] = create_providers()
            except ValueError as e:
                raise click.UsageError(str(e))


# Register all commands
init_categories.register_commands(cli)
category.register_commands(cli)
card.register_commands(cli)
family.register_commands(cli)
import_cmd.register_commands(cli)
add.register_commands(cli)
view.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
