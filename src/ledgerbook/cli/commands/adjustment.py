"""Balance adjustment commands."""

import click
from ledgerbook.cli.error_handling import echo_error, handle_domain_error
from ledgerbook.cli.resolution import parse_cents_or_exit, resolve_account_or_exit
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.adjustment import AdjustmentService
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.money import format_amount


@click.group()
def adjustment_group():
    """Adjust account totals directly."""
    pass


def _amounts(ctx, credit: str | None, debit: str | None) -> tuple[int | None, int | None]:
    credit_cents = parse_cents_or_exit(ctx, credit) if credit is not None else None
    debit_cents = parse_cents_or_exit(ctx, debit) if debit is not None else None
    return credit_cents, debit_cents


def _check_target_alone(ctx, target: str | None, credit: str | None, debit: str | None) -> None:
    if target is not None and (credit is not None or debit is not None):
        echo_error(ctx, "--target cannot be combined with --credit or --debit")


@adjustment_group.command("create")
@click.argument("account", metavar="ACCOUNT")
@click.option("--credit", help="Amount to add to the account's credits")
@click.option("--debit", help="Amount to add to the account's debits")
@click.option("--target", help="Posted balance the account should end up with")
@click.option("--note", required=True, help="Reason for the adjustment")
@click.pass_context
def create_adjustment(
    ctx, account: str, credit: str | None, debit: str | None, target: str | None, note: str
):
    """Record an adjustment against an account.

    Give either --credit or --debit, or --target to let the side and amount
    be worked out from the current posted balance.

    Examples:
        ledgerbook adjust create "Checking" --debit 12.00 --note "Bank interest"
        ledgerbook adjust create "Checking" --target 1,204.17 --note "Match statement"
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    _check_target_alone(ctx, target, credit, debit)
    credit_cents, debit_cents = _amounts(ctx, credit, debit)
    service = AdjustmentService(db)

    try:
        if target is not None:
            adjustment_id = service.create_adjustment_to_balance(
                account_id, parse_cents_or_exit(ctx, target), note=note
            )
        else:
            adjustment_id = service.create_adjustment(
                account_id, note=note, credit_amount=credit_cents, debit_amount=debit_cents
            )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created adjustment {adjustment_id}")


@adjustment_group.command("update")
@click.argument("adjustment_id", type=int)
@click.option("--credit", help="New credit amount (replaces any debit amount)")
@click.option("--debit", help="New debit amount (replaces any credit amount)")
@click.option("--target", help="Posted balance the account should end up with")
@click.option("--note", help="New note")
@click.pass_context
def update_adjustment(
    ctx,
    adjustment_id: int,
    credit: str | None,
    debit: str | None,
    target: str | None,
    note: str | None,
):
    """Change an adjustment. The account moves by the difference."""
    _check_target_alone(ctx, target, credit, debit)
    credit_cents, debit_cents = _amounts(ctx, credit, debit)
    service = AdjustmentService(ctx.obj["db"])

    try:
        if target is not None:
            service.update_adjustment_to_balance(
                adjustment_id, parse_cents_or_exit(ctx, target), note=note
            )
        else:
            service.update_adjustment(
                adjustment_id, credit_amount=credit_cents, debit_amount=debit_cents, note=note
            )
        click.echo(f"Updated adjustment {adjustment_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@adjustment_group.command("delete")
@click.argument("adjustment_id", type=int)
@click.pass_context
def delete_adjustment(ctx, adjustment_id: int):
    """Delete an adjustment and reverse its effect."""
    try:
        AdjustmentService(ctx.obj["db"]).delete_adjustment(adjustment_id)
        click.echo(f"Deleted adjustment {adjustment_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@adjustment_group.command("list")
@click.option("--account", help="Only adjustments to this account (name or ID)")
@click.pass_context
def list_adjustments(ctx, account: str | None):
    """List adjustments."""
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    adjustments = AdjustmentService(db).list_adjustments(account_id=account_id)
    if not adjustments:
        click.echo("No adjustments found.")
        return

    for adj in adjustments:
        if adj.credit_amount is not None:
            side, amount = "credit", adj.credit_amount
        else:
            side, amount = "debit", adj.debit_amount
        click.echo(
            f"ID: {adj.id:3d} | account {adj.account_id:3d} | {side:6s} "
            f"{format_amount(amount):>12s} | {adj.note}"
        )


def register_commands(cli):
    """Register adjustment commands with main CLI."""
    cli.add_command(adjustment_group, name="adjust")
