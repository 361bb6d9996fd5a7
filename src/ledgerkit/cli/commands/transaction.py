"""Transaction commands."""

import click
from decimal import Decimal
from ledgerkit.domain.transaction import TransactionService
from ledgerkit.domain.period import FiscalPeriodService
from ledgerkit.domain.entities import ZERO
from ledgerkit.domain.errors import DomainError
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.period_resolution import resolve_period_or_exit
from ledgerkit.utils.date_parser import parse_date
from ledgerkit.utils.amount_parser import parse_amount


@click.command("add")
@click.option(
    "--date",
    "date_str",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", required=True, help="Bank statement narrative")
@click.option("--debit", "debit_str", help="Money out of the bank account (e.g., 150.00)")
@click.option("--credit", "credit_str", help="Money into the bank account (e.g., 2500.00)")
@click.option("--period", help="Fiscal period name or ID (defaults to the period containing the date)")
@click.pass_context
def add_transaction(
    ctx,
    date_str: str,
    description: str,
    debit_str: str | None,
    credit_str: str | None,
    period: str | None,
):
    """Record a bank transaction.

    Examples:
        ledgerkit add --date 2024-03-15 --description "MONTHLY SERVICE FEE" --debit 150.00
        ledgerkit add --date 2024-03-20 --description "CREDIT TRANSFER COROBRIK" --credit 12500.00
    """
    db = ctx.obj["db"]
    company_id = ctx.obj["company_id"]
    service = TransactionService(db)

    try:
        txn_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        debit = parse_amount(debit_str) if debit_str is not None else ZERO
        credit = parse_amount(credit_str) if credit_str is not None else ZERO
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    fiscal_period_id = None
    if period is not None:
        fiscal_period_id = resolve_period_or_exit(ctx, FiscalPeriodService(db), company_id, period)

    try:
        txn_id = service.create_transaction(
            company_id=company_id,
            date=txn_date,
            description=description,
            debit_amount=debit,
            credit_amount=credit,
            fiscal_period_id=fiscal_period_id,
        )
        click.echo(f"Created transaction {txn_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def _format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}" if amount != ZERO else ""


@click.command("transactions")
@click.option("--unclassified", is_flag=True, help="Only transactions without an account")
@click.option("--unposted", is_flag=True, help="Only classified transactions not posted yet")
@click.option("--period", help="Fiscal period name or ID")
@click.pass_context
def list_transactions(ctx, unclassified: bool, unposted: bool, period: str | None):
    """List bank transactions with their classification status."""
    db = ctx.obj["db"]
    company_id = ctx.obj["company_id"]
    service = TransactionService(db)

    if unclassified and unposted:
        click.echo("Error: --unclassified and --unposted cannot be combined", err=True)
        ctx.exit(1)

    fiscal_period_id = None
    if period is not None:
        fiscal_period_id = resolve_period_or_exit(ctx, FiscalPeriodService(db), company_id, period)

    transactions = service.list_transactions(
        company_id,
        unclassified=unclassified,
        classified_unposted=unposted,
        fiscal_period_id=fiscal_period_id,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(
        f"\n{'ID':>5s} | {'Date':10s} | {'Description':35s} | {'Debit':>12s} | {'Credit':>12s} | "
        f"{'Account':10s} | Status"
    )
    click.echo("-" * 110)
    for txn in transactions:
        desc = (txn.description or "")[:35]
        click.echo(
            f"{txn.id:5d} | {txn.date.isoformat():10s} | {desc:35s} | "
            f"{_format_amount(txn.debit_amount):>12s} | {_format_amount(txn.credit_amount):>12s} | "
            f"{txn.account_code or '-':10s} | {txn.status.value}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(add_transaction)
    cli.add_command(list_transactions)
