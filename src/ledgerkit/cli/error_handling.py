"""CLI error handling helpers."""

import logging

import click

from ledgerkit.domain.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Store failures keep their traceback in the log; the ledger was rolled back,
    so the message says so.
    """
    if isinstance(error, PersistenceError):
        logger.error("Store rejected the write", exc_info=error)
        click.echo(f"Error: {error} (nothing was written)", err=True)
    else:
        logger.debug("Command failed: %s", error)
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
