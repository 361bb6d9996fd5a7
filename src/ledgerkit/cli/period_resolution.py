"""CLI helpers for fiscal period resolution."""

from __future__ import annotations

import click
from ledgerkit.domain.period import FiscalPeriodService


def resolve_period(period_service: FiscalPeriodService, company_id: int, period: str) -> int:
    """Resolve a fiscal period name or ID to its ID.

    Raises:
        ValueError: If no such period exists for the company
    """
    periods = period_service.list_periods(company_id)
    for p in periods:
        if p.name == period:
            return p.id

    try:
        period_id = int(period)
    except ValueError:
        raise ValueError(f"Fiscal period '{period}' not found")

    for p in periods:
        if p.id == period_id:
            return p.id
    raise ValueError(f"Fiscal period {period_id} not found for company {company_id}")


def resolve_period_or_exit(
    ctx: click.Context, period_service: FiscalPeriodService, company_id: int, period: str
) -> int:
    """Resolve fiscal period name or ID, or exit with a CLI error."""
    try:
        return resolve_period(period_service, company_id, period)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
