"""Credit card management commands."""

import click

from famtrack.cli.error_handling import handle_domain_error
from famtrack.domain.card import CardService
from famtrack.domain.errors import DomainError


@click.group()
def card_group():
    """Manage credit cards."""
    pass


@card_group.command("add")
@click.option("--name", required=True, help="Card display name")
@click.option("--last-four", required=True, help="Last four digits printed on statements")
@click.option("--closing-day", type=int, help="Day of month the billing cycle closes")
@click.option("--due-day", type=int, help="Day of month the invoice is due")
@click.option("--holder", help="Name of the family member holding the card")
@click.pass_context
def add_card(ctx, name: str, last_four: str, closing_day: int | None, due_day: int | None, holder: str | None):
    """Register a credit card.

    Examples:
        famtrack card add --name "Nubank Roxinho" --last-four 1234 --closing-day 3 --due-day 10
    """
    service = CardService(ctx.obj["db"])
    try:
        card_id = service.create_card(
            user_id=ctx.obj["user"],
            name=name,
            last_four_digits=last_four,
            closing_day=closing_day,
            due_day=due_day,
            holder_name=holder,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created card '{name}' ending in {last_four} (ID: {card_id})")


@card_group.command("list")
@click.pass_context
def list_cards(ctx):
    """List registered credit cards."""
    cards = CardService(ctx.obj["db"]).list_cards(ctx.obj["user"])
    if not cards:
        click.echo("No cards found. Use 'card add' to register one.")
        return

    click.echo(f"\n{'Name':<25} {'Digits':<8} {'Closes':<8} {'Due':<6} ID")
    click.echo("-" * 80)
    for card in cards:
        closing = str(card.closing_day) if card.closing_day else "-"
        due = str(card.due_day) if card.due_day else "-"
        click.echo(f"{card.name:<25} {card.last_four_digits:<8} {closing:<8} {due:<6} {card.id}")


def register_commands(cli):
    """Register card commands with main CLI."""
    cli.add_command(card_group, name="card")
