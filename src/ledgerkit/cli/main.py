"""Main CLI entry point."""

import logging

import click
from ledgerkit.config import DEFAULT_COMPANY_ID
from ledgerkit.database.factories import create_sqlite_database

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    account,
    period,
    transaction,
    rules,
    classify,
    post,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--company",
    "company_id",
    type=int,
    default=DEFAULT_COMPANY_ID,
    show_default=True,
    envvar="LEDGERKIT_COMPANY_ID",
    help="Company ID to work on (overrides LEDGERKIT_COMPANY_ID environment variable)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, company_id: int, verbose: bool):
    """Ledgerkit - bank transaction classification and double-entry posting.

    Classify bank statement lines against prioritized mapping rules, post
    them as balanced journal entries and read closing balances per period.
    """
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["company_id"] = company_id


# Register all commands
account.register_commands(cli)
period.register_commands(cli)
transaction.register_commands(cli)
rules.register_commands(cli)
classify.register_commands(cli)
post.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
