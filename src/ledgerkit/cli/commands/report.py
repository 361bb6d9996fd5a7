"""Ledger balance commands."""

import click
from decimal import Decimal, InvalidOperation
from ledgerkit.domain.ledger import LedgerService
from ledgerkit.domain.period import FiscalPeriodService
from ledgerkit.domain.entities import ZERO
from ledgerkit.domain.errors import DomainError
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.period_resolution import resolve_period_or_exit


def _money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


@click.command("balances")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.pass_context
def balances(ctx, period: str):
    """Show closing balances per account for a fiscal period.

    Balances are signed by the account's normal side: a positive figure is
    the usual position of the account, a negative one the opposite.
    """
    db = ctx.obj["db"]
    company_id = ctx.obj["company_id"]
    service = LedgerService(db)

    fiscal_period_id = resolve_period_or_exit(ctx, FiscalPeriodService(db), company_id, period)
    try:
        result = service.closing_balances(company_id, fiscal_period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not result:
        click.echo("No postings in this period.")
        return

    click.echo(f"\n{'Account':10s} | {'Name':35s} | {'Side':4s} | {'Balance':>15s}")
    click.echo("-" * 72)
    for balance in result.values():
        click.echo(
            f"{balance.account_code:10s} | {balance.account_name[:35]:35s} | "
            f"{balance.normal_balance.value:4s} | {_money(balance.closing_balance):>15s}"
        )


@click.command("trial-balance")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.pass_context
def trial_balance(ctx, period: str):
    """Show the trial balance for a fiscal period."""
    db = ctx.obj["db"]
    company_id = ctx.obj["company_id"]
    service = LedgerService(db)

    fiscal_period_id = resolve_period_or_exit(ctx, FiscalPeriodService(db), company_id, period)
    try:
        tb = service.trial_balance(company_id, fiscal_period_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\n{'Account':10s} | {'Name':35s} | {'Debit':>15s} | {'Credit':>15s}")
    click.echo("-" * 84)
    for row in tb.rows:
        debit = _money(row.trial_balance_debit) if row.trial_balance_debit != ZERO else ""
        credit = _money(row.trial_balance_credit) if row.trial_balance_credit != ZERO else ""
        click.echo(f"{row.account_code:10s} | {row.account_name[:35]:35s} | {debit:>15s} | {credit:>15s}")
    click.echo("-" * 84)
    click.echo(f"{'Total':48s} | {_money(tb.total_debits):>15s} | {_money(tb.total_credits):>15s}")
    if not tb.is_balanced:
        click.echo("Warning: trial balance does not balance", err=True)
        ctx.exit(1)


@click.command("balance-sheet")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.option("--tolerance", default="0.01", show_default=True, help="Allowed rounding difference")
@click.pass_context
def balance_sheet(ctx, period: str, tolerance: str):
    """Show balance-sheet totals and check Assets = Liabilities + Equity."""
    db = ctx.obj["db"]
    company_id = ctx.obj["company_id"]
    service = LedgerService(db)

    try:
        tolerance_amount = Decimal(tolerance)
    except InvalidOperation:
        click.echo(f"Error: Invalid tolerance '{tolerance}'", err=True)
        ctx.exit(1)

    fiscal_period_id = resolve_period_or_exit(ctx, FiscalPeriodService(db), company_id, period)
    try:
        totals = service.balance_sheet_totals(company_id, fiscal_period_id, tolerance=tolerance_amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Total assets:       {_money(totals.total_assets):>15s}")
    click.echo(f"Total liabilities:  {_money(totals.total_liabilities):>15s}")
    click.echo(f"Opening equity:     {_money(totals.opening_equity):>15s}")
    click.echo(f"Net profit:         {_money(totals.net_profit):>15s}")
    click.echo(f"Retained earnings:  {_money(totals.retained_earnings):>15s}")
    click.echo(f"Total equity:       {_money(totals.total_equity):>15s}")
    if totals.is_balanced:
        click.echo("Balanced: assets = liabilities + equity")
    else:
        click.echo(f"Out of balance by {_money(totals.difference)}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balances)
    cli.add_command(trial_balance)
    cli.add_command(balance_sheet)
