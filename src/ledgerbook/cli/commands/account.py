"""Account management commands."""

from datetime import timedelta

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.resolution import (
    parse_cents_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
    resolve_organization_or_exit,
)
from ledgerbook.domain import credit_card
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountKind, CreditCardTerms
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.money import format_amount

KIND_CHOICES = [kind.value for kind in AccountKind]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--org", "organization", required=True, help="Organization name or ID")
@click.option("--kind", type=click.Choice(KIND_CHOICES), default="cash", show_default=True)
@click.option("--balance", help="Opening posted balance (e.g., 1,250.00)")
@click.option("--due-day", type=int, help="Credit card payment due day (1-31)")
@click.option("--statement-day", type=int, help="Credit card statement day (1-31)")
@click.option("--credit-limit", help="Credit card limit")
@click.pass_context
def create_account(
    ctx,
    name: str,
    organization: str,
    kind: str,
    balance: str | None,
    due_day: int | None,
    statement_day: int | None,
    credit_limit: str | None,
):
    """Create a new account.

    Credit card accounts need --due-day, --statement-day and --credit-limit.
    When the organization has a cash account, a monthly payment schedule
    for the card is created as well.

    Examples:
        ledgerbook account create "Checking" --org Household --balance 2500
        ledgerbook account create "Visa" --org Household --kind credit_card \\
            --due-day 15 --statement-day 1 --credit-limit 4000
    """
    service = AccountService(ctx.obj["db"])
    organization_id = resolve_organization_or_exit(ctx, service.organizations, organization)

    opening = parse_cents_or_exit(ctx, balance) if balance is not None else None
    terms = None
    if kind == AccountKind.CREDIT_CARD.value:
        terms = CreditCardTerms(
            due_day=due_day,
            statement_day=statement_day,
            credit_limit=parse_cents_or_exit(ctx, credit_limit) if credit_limit else None,
        )

    try:
        created = service.create_account(
            organization_id=organization_id,
            name=name,
            kind=AccountKind(kind),
            posted_balance=opening,
            credit_card=terms,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{created.account.name}' (ID: {created.account.id})")
    if created.payment_schedule is not None:
        click.echo(
            f"Created payment schedule '{created.payment_schedule.name}' "
            f"starting {created.payment_schedule.starts_on}"
        )


@account_group.command("list")
@click.option("--org", "organization", help="Organization name or ID")
@click.option("--kind", type=click.Choice(KIND_CHOICES), help="Only accounts of this kind")
@click.option("--all", "show_all", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, organization: str | None, kind: str | None, show_all: bool):
    """List accounts with their posted balances."""
    service = AccountService(ctx.obj["db"])
    organization_id = None
    if organization is not None:
        organization_id = resolve_organization_or_exit(ctx, service.organizations, organization)

    accounts = service.list_accounts(
        organization_id=organization_id,
        kind=AccountKind(kind) if kind else None,
        active=None if show_all else True,
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        balance = format_amount(service.posted_balance(acc.id))
        status = "" if acc.active else " (inactive)"
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {acc.kind.value:12s} | {balance:>14s}{status}")


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Horizon for the planned balance (default: 30 days from today)")
@click.pass_context
def show_account(ctx, account: str, as_of: str | None):
    """Show an account's balances and, for credit cards, its billing calendar."""
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    today = service.clock()
    horizon = parse_date_or_exit(ctx, as_of) if as_of else today + timedelta(days=30)

    click.echo(f"{account_obj.name} ({account_obj.kind.value})")
    click.echo(f"  Posted balance:  {format_amount(service.posted_balance(account_id))}")
    click.echo(f"  Pending balance: {format_amount(service.pending_balance(account_id))}")
    click.echo(
        f"  Planned balance through {horizon}: "
        f"{format_amount(service.planned_balance(account_id, horizon))}"
    )
    terms = account_obj.credit_card
    if terms is not None:
        click.echo(f"  Credit limit:    {format_amount(terms.credit_limit)}")
        click.echo(
            f"  Next statement:  {credit_card.next_statement_date(terms, today)} "
            f"({credit_card.days_until_statement(terms, today)} days)"
        )
        click.echo(
            f"  Next due date:   {credit_card.next_due_date(terms, today)} "
            f"({credit_card.days_until_due(terms, today)} days)"
        )


@account_group.command("set-balance")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@click.pass_context
def set_balance(ctx, account: str, amount: str):
    """Seed an account's posted balance.

    Examples:
        ledgerbook account set-balance "Checking" 2500.00
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    cents = parse_cents_or_exit(ctx, amount)

    try:
        service.set_posted_balance(account_id, cents)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted balance set to {format_amount(cents)}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str) -> None:
    """Rename an account."""
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.rename_account(account_id=account_id, name=new_name)
        click.echo(f"Renamed account to '{new_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def _set_active(ctx, account: str, active: bool) -> None:
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    service.set_active(account_id, active)
    click.echo(f"Account {account_id} {'activated' if active else 'deactivated'}")


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Hide an account from listings without deleting it."""
    _set_active(ctx, account, False)


@account_group.command("activate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def activate_account(ctx, account: str) -> None:
    """Make a deactivated account active again."""
    _set_active(ctx, account, True)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    The account can only be deleted if no transfers, schedules or
    adjustments reference it.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    # Confirm deletion
    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
