"""CLI helpers for date range resolution."""

from datetime import date

import click

from famtrack.utils.date_parser import get_date_range, parse_date

PERIOD_OPTIONS = "--this-month, --this-year, --last-month, --last-year, --next-month"


def period_options(command):
    """Attach the period flags shared by listing commands."""
    for flag, help_text in reversed(
        [
            ("--this-month", "Filter to current month"),
            ("--this-year", "Filter to current year"),
            ("--last-month", "Filter to previous month"),
            ("--last-year", "Filter to previous year"),
            ("--next-month", "Filter to next month (upcoming installments)"),
        ]
    ):
        command = click.option(flag, is_flag=True, help=help_text)(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({PERIOD_OPTIONS}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined "
            "with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        period = next(name for name, is_set in period_flags.items() if is_set)
        return get_date_range(period)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return start, end
