"""Transaction listing command."""

import click

from famtrack.cli.date_filters import period_options, resolve_cli_date_range
from famtrack.cli.error_handling import handle_domain_error
from famtrack.domain.category import CategoryService
from famtrack.domain.entities import INCOME, MODE_INSTALLMENT
from famtrack.domain.errors import DomainError
from famtrack.domain.transaction import TransactionService


@click.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@period_options
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    next_month: bool,
):
    """List stored transactions ordered by date."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
            "next-month": next_month,
        },
    )

    try:
        transactions = TransactionService(db).list_transactions(user_id, start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    names = {c.id: c.name for c in CategoryService(db).list_categories(user_id)}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'Date':<12} {'Amount':>14} {'Category':<24} {'Paid':<5} {'Description':<40}")
    click.echo("-" * 100)
    for txn in transactions:
        sign = "+" if txn.type == INCOME else "-"
        amount_str = f"{sign}R$ {txn.amount:,.2f}"
        description = txn.description
        if txn.mode == MODE_INSTALLMENT and txn.installment_number:
            description = f"{description} ({txn.installment_number}/{txn.installments_total})"
        category_name = names.get(txn.category_id, "?")[:24]
        paid = "yes" if txn.is_paid else "no"
        click.echo(
            f"{str(txn.date):<12} {amount_str:>14} {category_name:<24} {paid:<5} {description[:40]:<40}"
        )


def register_commands(cli):
    """Register list command with main CLI."""
    cli.add_command(list_transactions)
