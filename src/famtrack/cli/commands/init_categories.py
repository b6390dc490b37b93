"""Initialize default categories."""

import click

from famtrack.domain.category import CategoryService


@click.command("init-categories")
@click.option("--force", is_flag=True, help="Add missing default categories even if some exist")
@click.pass_context
def init_categories(ctx, force: bool):
    """Initialize database with the default category catalog."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    # Check if categories already exist
    existing = service.list_categories(ctx.obj["user"])
    if existing and not force:
        click.echo("Categories already exist. Use --force to overwrite.")
        return

    click.echo("Creating default category catalog...")
    created = service.seed_default_categories()
    if created:
        click.echo(f"Successfully created {created} categories.")
    else:
        click.echo("All default categories are already present.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
