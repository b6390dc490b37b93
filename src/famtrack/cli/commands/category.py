"""Category management commands."""

import click

from famtrack.domain.category import CategoryService


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--ids/--no-ids", default=True, help="Show category IDs")
@click.pass_context
def list_categories(ctx, ids: bool):
    """List all categories in tree format."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    tree = service.get_category_tree(ctx.obj["user"])
    if not tree:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    for parent, children in tree:
        suffix = f" (ID: {parent.id})" if ids else ""
        click.echo(f"{parent.name} [{parent.type}]{suffix}")
        for child in children:
            suffix = f" (ID: {child.id})" if ids else ""
            click.echo(f"  {child.name}{suffix}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
