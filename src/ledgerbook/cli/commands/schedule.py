"""Schedule commands."""

from datetime import timedelta

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.resolution import (
    parse_cents_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
)
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import Period
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.schedule import ScheduleService
from ledgerbook.utils.money import format_amount


@click.group()
def schedule_group():
    """Manage schedules and generate their transfers."""
    pass


def _describe(schedule) -> str:
    if schedule.is_recurring:
        unit = schedule.period.value + ("s" if schedule.frequency != 1 else "")
        recurrence = f"every {schedule.frequency} {unit}"
    else:
        recurrence = "once"
    if schedule.amount is not None:
        amount = format_amount(schedule.amount)
    else:
        amount = f"balance of account {schedule.relative_account_id}"
    return f"{recurrence}, {amount}"


@schedule_group.command("create")
@click.argument("name", metavar="SCHEDULE_NAME")
@click.option("--debit", "debit_account", required=True, help="Debit account name or ID")
@click.option("--credit", "credit_account", required=True, help="Credit account name or ID")
@click.option("--start", "start_str", required=True, help="First occurrence")
@click.option("--amount", help="Fixed amount; optional with --relative")
@click.option("--period", type=click.Choice([p.value for p in Period]), help="Recurrence unit")
@click.option("--every", "frequency", type=int, help="Number of periods between occurrences")
@click.option("--end", "end_str", help="Last possible occurrence")
@click.option("--relative", "relative_account", help="Account whose balance drives the amount")
@click.pass_context
def create_schedule(
    ctx,
    name: str,
    debit_account: str,
    credit_account: str,
    start_str: str,
    amount: str | None,
    period: str | None,
    frequency: int | None,
    end_str: str | None,
    relative_account: str | None,
):
    """Create a schedule.

    Without --period the schedule fires once on its start date. --period
    alone means every one period.

    Examples:
        ledgerbook schedule create "Rent" --debit Landlord --credit Checking \\
            --amount 1500 --start 2026-01-01 --period month
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = ScheduleService(db)

    debit_id = resolve_account_or_exit(ctx, account_service, debit_account)
    credit_id = resolve_account_or_exit(ctx, account_service, credit_account)
    relative_id = None
    if relative_account is not None:
        relative_id = resolve_account_or_exit(ctx, account_service, relative_account)
    starts_on = parse_date_or_exit(ctx, start_str)
    ends_on = parse_date_or_exit(ctx, end_str) if end_str else None
    cents = parse_cents_or_exit(ctx, amount) if amount is not None else None
    if period is not None and frequency is None:
        frequency = 1

    try:
        schedule_id = service.create_schedule(
            name=name,
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            starts_on=starts_on,
            amount=cents,
            period=Period(period) if period else None,
            frequency=frequency,
            ends_on=ends_on,
            relative_account_id=relative_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created schedule '{name}' (ID: {schedule_id})")


@schedule_group.command("list")
@click.option("--account", help="Only schedules touching this account (name or ID)")
@click.pass_context
def list_schedules(ctx, account: str | None):
    """List schedules."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = ScheduleService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    schedules = service.list_schedules(account_id=account_id)
    if not schedules:
        click.echo("No schedules found.")
        return

    click.echo("\nSchedules:")
    click.echo("-" * 70)
    for s in schedules:
        last = s.last_materialized_on.isoformat() if s.last_materialized_on else "never"
        click.echo(f"ID: {s.id:3d} | {s.name:20s} | {_describe(s)} | from {s.starts_on} | last run {last}")


@schedule_group.command("dates")
@click.argument("schedule_id", type=int)
@click.option("--until", "until_str", help="Horizon (default: 90 days from today)")
@click.pass_context
def schedule_dates(ctx, schedule_id: int, until_str: str | None):
    """Show upcoming transfers a schedule would produce."""
    service = ScheduleService(ctx.obj["db"])
    today = service.clock()
    horizon = parse_date_or_exit(ctx, until_str) if until_str else today + timedelta(days=90)

    try:
        dates = [d for d in service.transfer_dates(schedule_id, horizon) if d >= today]
        planned = service.planned_transfers(schedule_id, dates)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not planned:
        click.echo("No upcoming transfers.")
        return
    for t in planned:
        click.echo(f"{t.pending_on.isoformat()}  {format_amount(t.amount):>12}")


@schedule_group.command("materialize")
@click.argument("schedule_id", type=int, required=False)
@click.pass_context
def materialize(ctx, schedule_id: int | None):
    """Create the pending transfers that are due.

    With no SCHEDULE_ID every schedule is processed. This is the command to
    run once a day.
    """
    service = ScheduleService(ctx.obj["db"])

    if schedule_id is not None:
        try:
            created = service.create_pending_transfers(schedule_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Created {len(created)} pending transfer(s)")
        return

    results = service.create_all_pending_transfers()
    total = sum(len(ids) for ids in results.values())
    click.echo(f"Created {total} pending transfer(s) from {len(results)} schedule(s)")


@schedule_group.command("delete")
@click.argument("schedule_id", type=int)
@click.pass_context
def delete_schedule(ctx, schedule_id: int):
    """Delete a schedule. Transfers it created are kept."""
    service = ScheduleService(ctx.obj["db"])

    try:
        service.delete_schedule(schedule_id)
        click.echo(f"Deleted schedule {schedule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register schedule commands with main CLI."""
    cli.add_command(schedule_group, name="schedule")
