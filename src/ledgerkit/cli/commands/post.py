"""Ledger posting commands."""

import click
from ledgerkit.domain.posting import LedgerPostingService, PAYROLL_SIDES
from ledgerkit.domain.period import FiscalPeriodService
from ledgerkit.domain.errors import DomainError
from ledgerkit.cli.actor import resolve_actor
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.period_resolution import resolve_period_or_exit
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_date


@click.command("post")
@click.option("--actor", help="Name recorded on the journal entries (defaults to the current user)")
@click.option("--bank-account", help="Offsetting bank account code (overrides LEDGERKIT_BANK_ACCOUNT)")
@click.pass_context
def post(ctx, actor: str | None, bank_account: str | None):
    """Post every classified, unposted transaction to the ledger."""
    db = ctx.obj["db"]
    service = LedgerPostingService(db)

    summary = service.post_classified_transactions(
        ctx.obj["company_id"], actor=resolve_actor(actor), bank_account_code=bank_account
    )
    click.echo(f"Posted {summary.posted}, skipped {summary.skipped}, failed {summary.failed}")
    for error in summary.errors:
        click.echo(f"  {error}", err=True)
    if summary.failed:
        ctx.exit(1)


@click.command("unpost")
@click.argument("transaction_id", type=int, metavar="TRANSACTION_ID")
@click.option("--actor", help="Name recorded in the log (defaults to the current user)")
@click.pass_context
def unpost(ctx, transaction_id: int, actor: str | None):
    """Remove a transaction's journal entry so it can be reclassified."""
    db = ctx.obj["db"]
    service = LedgerPostingService(db)

    try:
        service.unpost_transaction(transaction_id, actor=resolve_actor(actor))
        click.echo(f"Unposted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.command("post-aggregate")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.option("--source-key", required=True, help="Identity of the run, e.g. PAYROLL-2024-03")
@click.option("--gross", "gross_str", required=True, help="Gross amount (debited)")
@click.option("--deductions", "deductions_str", default="0", help="Deductions amount (credited)")
@click.option("--net", "net_str", required=True, help="Net amount (credited)")
@click.option("--gross-account", default="8100", show_default=True, help="Account debited with gross")
@click.option("--deductions-account", default="3400", show_default=True, help="Account credited with deductions")
@click.option("--net-account", default="1100", show_default=True, help="Account credited with net")
@click.option("--date", "date_str", help="Entry date (defaults to the period's last day)")
@click.option("--description", help="Entry description")
@click.option("--actor", help="Name recorded on the journal entry (defaults to the current user)")
@click.pass_context
def post_aggregate(
    ctx,
    period: str,
    source_key: str,
    gross_str: str,
    deductions_str: str,
    net_str: str,
    gross_account: str,
    deductions_account: str,
    net_account: str,
    date_str: str | None,
    description: str | None,
    actor: str | None,
):
    """Post payroll-style totals as one balanced journal entry.

    Posting again with the same --source-key replaces the earlier entry.

    Examples:
        ledgerkit post-aggregate --period FY2024 --source-key PAYROLL-2024-03 \\
            --gross 10000.00 --deductions 2500.00 --net 7500.00
    """
    db = ctx.obj["db"]
    company_id = ctx.obj["company_id"]
    service = LedgerPostingService(db)

    fiscal_period_id = resolve_period_or_exit(ctx, FiscalPeriodService(db), company_id, period)
    try:
        totals = {
            "gross": parse_amount(gross_str),
            "deductions": parse_amount(deductions_str),
            "net": parse_amount(net_str),
        }
        entry_date = parse_date(date_str) if date_str is not None else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    account_map = {"gross": gross_account, "deductions": deductions_account, "net": net_account}
    try:
        entry_id = service.post_aggregate(
            company_id,
            fiscal_period_id,
            totals,
            account_map,
            actor=resolve_actor(actor),
            source_key=source_key,
            entry_date=entry_date,
            description=description,
            sides=PAYROLL_SIDES,
        )
        click.echo(f"Posted {source_key} as journal entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register posting commands with main CLI."""
    cli.add_command(post)
    cli.add_command(unpost)
    cli.add_command(post_aggregate)
