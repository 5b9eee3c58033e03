"""CLI helpers for resolving user input, exiting with an error on failure.

This keeps error messaging and exit behavior consistent across commands.
"""

from __future__ import annotations

from datetime import date

import click
from ledgerbook.cli.error_handling import echo_error, handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.organization import OrganizationService
from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.money import parse_amount, to_cents
from ledgerbook.utils.resolver import resolve_account, resolve_organization


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_organization_or_exit(
    ctx: click.Context, organization_service: OrganizationService, organization: str | int
) -> int:
    """Resolve organization name or ID, or exit with a CLI error."""
    try:
        return resolve_organization(organization_service, organization)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def parse_cents_or_exit(ctx: click.Context, amount: str) -> int:
    """Parse an amount string into cents, or exit with a CLI error."""
    try:
        return to_cents(parse_amount(amount))
    except ValueError as e:
        echo_error(ctx, f"Invalid amount format: {e}")


def parse_date_or_exit(ctx: click.Context, value: str) -> date:
    """Parse a date string, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        echo_error(ctx, f"Invalid date format: {e}")
