"""Family member commands."""

import click

from famtrack.cli.error_handling import handle_domain_error
from famtrack.domain.entities import RELATIONSHIPS
from famtrack.domain.errors import DomainError
from famtrack.domain.family import FamilyService


@click.group()
def family_group():
    """Manage family members."""
    pass


@family_group.command("add")
@click.argument("name")
@click.option(
    "--relationship",
    type=click.Choice(RELATIONSHIPS),
    default="other",
    show_default=True,
    help="Relationship to the account owner",
)
@click.pass_context
def add_member(ctx, name: str, relationship: str):
    """Add a family member."""
    service = FamilyService(ctx.obj["db"])
    try:
        member = service.add_member(ctx.obj["user"], name, relationship)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added {member.name} ({member.relationship}) (ID: {member.id})")


@family_group.command("list")
@click.pass_context
def list_members(ctx):
    """List family members, including those created by statement imports."""
    members = FamilyService(ctx.obj["db"]).list_members(ctx.obj["user"])
    if not members:
        click.echo("No family members found.")
        return

    for member in members:
        click.echo(f"{member.name} ({member.relationship}) (ID: {member.id})")


def register_commands(cli):
    """Register family commands with main CLI."""
    cli.add_command(family_group, name="family")
