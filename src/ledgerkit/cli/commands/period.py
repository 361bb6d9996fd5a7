"""Fiscal period commands."""

import click
from ledgerkit.domain.period import FiscalPeriodService
from ledgerkit.domain.errors import DomainError
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.utils.date_parser import parse_date, parse_month


@click.group()
def period_group():
    """Manage fiscal periods."""
    pass


@period_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--start", "start_str", help="First day of the period (YYYY-MM-DD)")
@click.option("--end", "end_str", help="Last day of the period (YYYY-MM-DD)")
@click.option("--month", "month_str", help="Calendar month (YYYY-MM) instead of --start/--end")
@click.pass_context
def create_period(ctx, name: str, start_str: str | None, end_str: str | None, month_str: str | None):
    """Create a fiscal period.

    Examples:
        ledgerkit period create FY2024 --start 2024-03-01 --end 2025-02-28
        ledgerkit period create 2024-03 --month 2024-03
    """
    db = ctx.obj["db"]
    service = FiscalPeriodService(db)

    try:
        if month_str is not None:
            if start_str is not None or end_str is not None:
                raise ValueError("Use either --month or --start/--end, not both")
            start_date, end_date = parse_month(month_str)
        else:
            if start_str is None or end_str is None:
                raise ValueError("Both --start and --end are required (or use --month)")
            start_date = parse_date(start_str)
            end_date = parse_date(end_str)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        period_id = service.create_period(ctx.obj["company_id"], name, start_date, end_date)
        click.echo(
            f"Created fiscal period '{name}' (ID: {period_id}) "
            f"{start_date.isoformat()} to {end_date.isoformat()}"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@period_group.command("list")
@click.pass_context
def list_periods(ctx):
    """List fiscal periods."""
    db = ctx.obj["db"]
    service = FiscalPeriodService(db)

    periods = service.list_periods(ctx.obj["company_id"])
    if not periods:
        click.echo("No fiscal periods found.")
        return

    click.echo("\nFiscal periods:")
    click.echo("-" * 60)
    for p in periods:
        click.echo(f"ID: {p.id:3d} | {p.name:15s} | {p.start_date.isoformat()} to {p.end_date.isoformat()}")


def register_commands(cli):
    """Register fiscal period commands with main CLI."""
    cli.add_command(period_group, name="period")
