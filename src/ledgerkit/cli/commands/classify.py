"""Classification commands."""

import click
from ledgerkit.domain.classification import AUTO_CLASSIFIER, ClassificationService
from ledgerkit.domain.entities import ClassificationSummary
from ledgerkit.domain.errors import DomainError
from ledgerkit.cli.actor import resolve_actor
from ledgerkit.cli.error_handling import handle_domain_error


def _echo_summary(summary: ClassificationSummary) -> None:
    click.echo(
        f"Classified {summary.classified}, unmatched {summary.unmatched}, failed {summary.failed}"
    )
    if summary.unpostings:
        click.echo(f"Removed {summary.unpostings} posting(s) whose account changed; run 'ledgerkit post' again")
    for error in summary.errors:
        click.echo(f"  {error}", err=True)


@click.command("classify")
@click.option("--actor", default=AUTO_CLASSIFIER, show_default=True, help="Name recorded on classified rows")
@click.pass_context
def classify(ctx, actor: str):
    """Classify transactions that have no account yet.

    Unmatched transactions stay unclassified.
    """
    db = ctx.obj["db"]
    service = ClassificationService(db)

    summary = service.classify_unclassified(ctx.obj["company_id"], actor=actor)
    _echo_summary(summary)
    if summary.failed:
        ctx.exit(1)


@click.command("reclassify")
@click.option("--actor", help="Name recorded on classified rows (defaults to the current user)")
@click.pass_context
def reclassify(ctx, actor: str | None):
    """Re-run the rules over every transaction.

    Matched transactions take the winning rule's account; unmatched ones keep
    their current account. A posted transaction whose account changes loses
    its journal entry and has to be posted again.
    """
    db = ctx.obj["db"]
    service = ClassificationService(db)

    summary = service.reclassify_all(ctx.obj["company_id"], actor=resolve_actor(actor))
    _echo_summary(summary)
    if summary.failed:
        ctx.exit(1)


@click.command("assign")
@click.argument("transaction_id", type=int, metavar="TRANSACTION_ID")
@click.argument("account_code", metavar="ACCOUNT")
@click.option("--actor", help="Name recorded on the transaction (defaults to the current user)")
@click.pass_context
def assign(ctx, transaction_id: int, account_code: str, actor: str | None):
    """Assign an account to a transaction by hand.

    Examples:
        ledgerkit assign 42 8700
    """
    db = ctx.obj["db"]
    service = ClassificationService(db)

    try:
        service.classify_transaction(transaction_id, account_code, actor=resolve_actor(actor))
        click.echo(f"Assigned transaction {transaction_id} to {account_code}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register classification commands with main CLI."""
    cli.add_command(classify)
    cli.add_command(reclassify)
    cli.add_command(assign)
