"""Chart of accounts commands."""

import click
from ledgerkit.domain.account import ChartOfAccountsService
from ledgerkit.domain.categories import category_for_code
from ledgerkit.domain.errors import DomainError
from ledgerkit.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.pass_context
def create_account(ctx, code: str, name: str):
    """Create a general-ledger account.

    CODE is a four-digit account code with an optional sub-account suffix.
    Its range decides the category (1000-2999 assets, 3000-4999 liabilities,
    5000-5999 equity, 6000-7999 revenue, 8000-9999 expenses).

    Examples:
        ledgerkit account create 1100 "Bank - Current Account"
        ledgerkit account create 8500-001 "Cartrack Vehicle Tracking"
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    try:
        service.create_account(ctx.obj["company_id"], code, name)
        click.echo(f"Created account {code} '{name}' ({category_for_code(code).value})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List the chart of accounts."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    accounts = service.list_accounts(ctx.obj["company_id"])
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        category = acc.category.value if acc.category is not None else "-"
        click.echo(f"{acc.code:10s} | {acc.name:35s} | {category}")


@account_group.command("seed")
@click.pass_context
def seed_accounts(ctx):
    """Create the default chart of accounts.

    Accounts that already exist are left alone.
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    try:
        created = service.seed_default_chart(ctx.obj["company_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created {created} account{'s' if created != 1 else ''}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
