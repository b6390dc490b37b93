"""Add transaction command."""

from typing import Optional

import click

from famtrack.ai.categories import resolve_category_reference
from famtrack.cli.error_handling import handle_domain_error
from famtrack.domain.card import CardService
from famtrack.domain.category import CategoryService
from famtrack.domain.category_mapping import LEGACY_CATEGORY_ID_MAP, is_valid_uuid
from famtrack.domain.due_dates import calculate_due_date
from famtrack.domain.entities import (
    CREDIT_CARD,
    EXPENSE,
    MODE_INSTALLMENT,
    MODE_SINGLE,
    TRANSACTION_TYPES,
    CreditCard,
    NewTransaction,
)
from famtrack.domain.errors import DomainError, card_not_found
from famtrack.domain.transaction import TransactionService
from famtrack.utils.amount_parser import parse_amount
from famtrack.utils.date_parser import parse_date


def resolve_card(cards: list[CreditCard], reference: str) -> Optional[CreditCard]:
    """Find a card by ID, last four digits or name."""
    reference = reference.strip()
    for card in cards:
        if reference in (card.id, card.last_four_digits):
            return card
    for card in cards:
        if card.name.lower() == reference.lower():
            return card
    return None


@click.command("add")
@click.option(
    "--date",
    "date_str",
    required=True,
    help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today')",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45 or 1.234,56)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", required=True, help="Category name, UUID or legacy numeric ID")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(TRANSACTION_TYPES),
    default=EXPENSE,
    show_default=True,
    help="Transaction direction",
)
@click.option("--installments", type=int, help="Total number of installments")
@click.option("--installment-number", type=int, help="Installment this entry starts at (default 1)")
@click.option("--recurring-months", type=int, help="Repeat monthly for this many months")
@click.option("--due-date", help="Due date (defaults to the card's next due date)")
@click.option("--paid", is_flag=True, help="Mark the first record as paid")
@click.option("--card", help="Card ID, last four digits or name")
@click.pass_context
def add_transaction(
    ctx,
    date_str: str,
    amount: str,
    description: str,
    category: str,
    txn_type: str,
    installments: int | None,
    installment_number: int | None,
    recurring_months: int | None,
    due_date: str | None,
    paid: bool,
    card: str | None,
):
    """Add a transaction manually.

    Installments and recurring entries are expanded into one record per month.

    Examples:
        famtrack add --date 2025-01-15 --amount 50.00 --description "Padaria" --category Padaria
        famtrack add --date 2025-01-15 --amount 300 --description "TV" --category Eletrônicos --installments 10 --card 1234
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user"]

    try:
        txn_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_id = category.strip()
    if not is_valid_uuid(category_id) and category_id not in LEGACY_CATEGORY_ID_MAP:
        catalog = CategoryService(db).list_categories(user_id)
        category_id = resolve_category_reference(category, catalog)
        if category_id is None:
            click.echo(f"Error: Category '{category}' not found", err=True)
            ctx.exit(1)

    card_obj = None
    if card:
        card_obj = resolve_card(CardService(db).list_cards(user_id), card)
        if card_obj is None:
            click.echo(f"Error: {card_not_found(card)}", err=True)
            ctx.exit(1)

    due = None
    if due_date:
        try:
            due = parse_date(due_date)
        except ValueError as e:
            click.echo(f"Error: Invalid due date: {e}", err=True)
            ctx.exit(1)
    elif card_obj is not None:
        due = calculate_due_date(txn_date, CREDIT_CARD, card_obj)

    base = NewTransaction(
        date=txn_date,
        amount=txn_amount,
        type=txn_type,
        category_id=category_id,
        description=description,
        mode=MODE_INSTALLMENT if installments else MODE_SINGLE,
        installment_number=(installment_number or 1) if installments else None,
        installments_total=installments,
        card_id=card_obj.id if card_obj else None,
        family_member_id=card_obj.holder_family_member_id if card_obj else None,
        due_date=due,
        is_paid=paid,
        is_recurring=bool(recurring_months),
        recurring_months=recurring_months,
    )

    try:
        ids = TransactionService(db).create_transaction(user_id, base)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if len(ids) == 1:
        click.echo(f"Created transaction {ids[0]}")
    else:
        click.echo(f"Created {len(ids)} transactions")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Amount: R$ {txn_amount:,.2f}")
    click.echo(f"  Description: {description}")
    if card_obj is not None:
        click.echo(f"  Card: {card_obj.name} ({card_obj.last_four_digits})")
    if due:
        click.echo(f"  Due: {due}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
