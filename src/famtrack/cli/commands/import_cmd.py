"""Statement import command."""

import asyncio
import json

import click

from famtrack.cli.error_handling import handle_domain_error
from famtrack.domain.entities import INCOME, STATEMENT_TYPES
from famtrack.domain.errors import DomainError
from famtrack.domain.statement_import import ImportResult, StatementImportService
from famtrack.utils.statement_text import read_statement_text


def print_import_result(result: ImportResult) -> None:
    """Print an import result as a table with a metadata summary."""
    meta = result.metadata
    click.echo(f"\nBank: {meta.bank}")
    click.echo(f"Statement type: {meta.statement_type}")
    click.echo(f"Method: {meta.method} ({meta.parsing_method}, confidence {meta.confidence:.2f})")
    click.echo(f"Transactions: {meta.total_transactions} in {meta.processing_time_ms} ms")
    click.echo("-" * 100)
    for txn in result.transactions:
        sign = "+" if txn.type == INCOME else "-"
        amount_str = f"{sign}R$ {txn.amount:,.2f}"
        description = txn.description
        if txn.installment_number:
            description = f"{description} ({txn.installment_number}/{txn.installments_total})"
        category_name = result.category_name(txn.category_id)[:24]
        due = str(txn.due_date) if txn.due_date else ""
        click.echo(
            f"{str(txn.date):<12} {amount_str:>14} {category_name:<24} {due:<12} {description[:36]}"
        )


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--type",
    "statement_type",
    type=click.Choice(STATEMENT_TYPES),
    help="Statement type (detected from the text when omitted)",
)
@click.option("--dry-run", is_flag=True, help="Show the extracted transactions without storing them")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def import_statement(ctx, statement_file: str, statement_type: str | None, dry_run: bool, as_json: bool):
    """Import transactions from a bank or credit card statement.

    Accepts PDF statements and plain text exports (.txt, .csv, .ofx).

    Examples:
        famtrack import fatura-nubank.pdf --type credit_card --dry-run
        famtrack import extrato.txt --json
    """
    try:
        text = read_statement_text(statement_file)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    service = StatementImportService(ctx.obj["db"], ctx.obj["providers"])
    user_id = ctx.obj["user"]
    try:
        if dry_run:
            result = asyncio.run(service.extract_transactions(text, user_id, statement_type))
        else:
            result = asyncio.run(service.import_statement(text, user_id, statement_type))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        payload = result.to_dict()
        if result.transaction_ids:
            payload["transactionIds"] = result.transaction_ids
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    if not result.transactions:
        click.echo(f"{result.metadata.warning}. Nothing was imported.")
        return

    print_import_result(result)
    if dry_run:
        click.echo("\nDry run: nothing was stored.")
    else:
        click.echo(f"\nImported {len(result.transaction_ids)} transactions.")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
