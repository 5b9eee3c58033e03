"""Transfer commands."""

import click
from ledgerbook.cli.error_handling import echo_error, handle_domain_error
from ledgerbook.cli.resolution import (
    parse_cents_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
)
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import TransferState
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.transfer import TransferService
from ledgerbook.utils.money import format_amount


@click.group()
def transfer_group():
    """Record, post and delete transfers."""
    pass


@transfer_group.command("add")
@click.option("--debit", "debit_account", required=True, help="Debit account name or ID")
@click.option("--credit", "credit_account", required=True, help="Credit account name or ID")
@click.option("--amount", required=True, help="Transfer amount (e.g., 125.50)")
@click.option("--date", "date_str", default="today", show_default=True, help="Pending date")
@click.option("--posted", is_flag=True, help="Record the transfer as already posted")
@click.pass_context
def add_transfer(
    ctx,
    debit_account: str,
    credit_account: str,
    amount: str,
    date_str: str,
    posted: bool,
):
    """Add a transfer between two accounts.

    Examples:
        ledgerbook transfer add --debit "Groceries" --credit "Checking" --amount 84.20
        ledgerbook transfer add --debit "Rent" --credit "Checking" --amount 1500 \\
            --date 2026-01-01 --posted
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = TransferService(db)

    debit_id = resolve_account_or_exit(ctx, account_service, debit_account)
    credit_id = resolve_account_or_exit(ctx, account_service, credit_account)
    cents = parse_cents_or_exit(ctx, amount)
    pending_on = parse_date_or_exit(ctx, date_str)

    try:
        transfer_id = service.create_transfer(
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            amount=cents,
            pending_on=pending_on,
            state=TransferState.POSTED if posted else TransferState.PENDING,
            posted_on=pending_on if posted else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    state = "posted" if posted else "pending"
    click.echo(f"Created {state} transfer {transfer_id} for {format_amount(cents)}")


@transfer_group.command("list")
@click.option("--account", help="Only transfers touching this account (name or ID)")
@click.option(
    "--state", type=click.Choice([s.value for s in TransferState]), help="Filter by state"
)
@click.option("--schedule", "schedule_id", type=int, help="Only transfers from this schedule")
@click.pass_context
def list_transfers(ctx, account: str | None, state: str | None, schedule_id: int | None):
    """List transfers."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = TransferService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    transfers = service.list_transfers(
        account_id=account_id,
        state=TransferState(state) if state else None,
        schedule_id=schedule_id,
    )
    if not transfers:
        click.echo("No transfers found.")
        return

    names = {acc.id: acc.name for acc in account_service.list_accounts()}
    click.echo(
        f"{'ID':>5} {'Date':<10} {'State':<8} {'Debit':<20} {'Credit':<20} {'Amount':>12}"
    )
    click.echo("-" * 80)
    for t in transfers:
        click.echo(
            f"{t.id:5d} {t.pending_on.isoformat():<10} {t.state.value:<8} "
            f"{names.get(t.debit_account_id, '?')[:20]:<20} "
            f"{names.get(t.credit_account_id, '?')[:20]:<20} "
            f"{format_amount(t.amount):>12}"
        )


@transfer_group.command("post")
@click.argument("transfer_id", type=int)
@click.pass_context
def post_transfer(ctx, transfer_id: int):
    """Post a pending transfer to its accounts."""
    service = TransferService(ctx.obj["db"])

    try:
        result = service.post_transfer(transfer_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result:
        echo_error(ctx, result.error)
    click.echo(f"Posted transfer {transfer_id}")


@transfer_group.command("delete")
@click.argument("transfer_id", type=int)
@click.pass_context
def delete_transfer(ctx, transfer_id: int):
    """Delete a transfer. Posted transfers are reversed first."""
    service = TransferService(ctx.obj["db"])

    try:
        service.delete_transfer(transfer_id)
        click.echo(f"Deleted transfer {transfer_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
