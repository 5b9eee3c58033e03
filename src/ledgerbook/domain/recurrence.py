"""Schedule date generation and amount resolution.

Everything here is pure: the caller supplies "today" and, for schedules with
a relative account, that account's current posted balance.
"""

from datetime import date, timedelta
from typing import Iterator, Optional

from dateutil.relativedelta import relativedelta

from ledgerbook.domain.entities import Period, Schedule, Transfer, TransferState


def advance(starts_on: date, period: Period, steps: int) -> date:
    """Return the date ``steps`` periods after ``starts_on``.

    Month and year steps clamp to the end of a shorter month.
    """
    if period is Period.DAY:
        return starts_on + timedelta(days=steps)
    if period is Period.WEEK:
        return starts_on + timedelta(weeks=steps)
    if period is Period.MONTH:
        return starts_on + relativedelta(months=steps)
    if period is Period.YEAR:
        return starts_on + relativedelta(years=steps)
    raise ValueError(f"Unknown period: {period!r}")


def occurrences(schedule: Schedule) -> Iterator[date]:
    """Yield every occurrence of a schedule in order.

    One-shot schedules yield ``starts_on`` only. Recurring schedules stop
    after ``ends_on`` when it is set and are unbounded otherwise.
    """
    if not schedule.is_recurring:
        yield schedule.starts_on
        return

    current = schedule.starts_on
    while schedule.ends_on is None or current <= schedule.ends_on:
        yield current
        # Each step starts from the previous occurrence, so a clamped day sticks
        current = advance(current, schedule.period, schedule.frequency)


def find_next_date_from(schedule: Schedule, from_date: date) -> Optional[date]:
    """Return the first occurrence on or after ``from_date``, or None."""
    for occurrence in occurrences(schedule):
        if occurrence >= from_date:
            return occurrence
    return None


def is_balance_driven(schedule: Schedule) -> bool:
    """True when the amount comes only from the relative account's balance."""
    return schedule.relative_account_id is not None and schedule.amount is None


def is_dormant(schedule: Schedule, relative_balance: Optional[int]) -> bool:
    """True when a balance-driven schedule has nothing to transfer."""
    return is_balance_driven(schedule) and not relative_balance


def transfer_dates(
    schedule: Schedule,
    up_to_date: date,
    today: date,
    relative_balance: Optional[int] = None,
) -> list[date]:
    """List the dates on which the schedule wants a transfer, up to ``up_to_date``.

    Balance-driven schedules produce at most one date, the next occurrence on
    or after ``today``, and none at all while the relative balance is zero.
    Every other schedule produces all occurrences from ``starts_on`` through
    ``up_to_date`` (inclusive).
    """
    if is_balance_driven(schedule):
        if is_dormant(schedule, relative_balance):
            return []
        next_date = find_next_date_from(schedule, today)
        if next_date is None or next_date > up_to_date:
            return []
        return [next_date]

    dates = []
    for occurrence in occurrences(schedule):
        if occurrence > up_to_date:
            break
        dates.append(occurrence)
    return dates


def calculate_transfer_amount(
    schedule: Schedule, index: int, relative_balance: Optional[int] = None
) -> int:
    """Resolve the amount of the ``index``-th planned occurrence.

    With a non-zero relative balance the first occurrence takes the live
    balance and later ones fall back to the fixed amount (zero when there is
    none).
    """
    if schedule.relative_account_id is None:
        return schedule.amount
    fixed = schedule.amount if schedule.amount is not None else 0
    if relative_balance and index == 0:
        return relative_balance
    return fixed


def planned_transfers(
    schedule: Schedule, dates: list[date], relative_balance: Optional[int] = None
) -> list[Transfer]:
    """Build unsaved pending transfers for ``dates``.

    Occurrences that resolve to no positive amount are left out.
    """
    if is_dormant(schedule, relative_balance):
        return []

    transfers = []
    for index, pending_on in enumerate(dates):
        amount = calculate_transfer_amount(schedule, index, relative_balance)
        if amount <= 0:
            continue
        transfers.append(
            Transfer(
                id=None,
                state=TransferState.PENDING,
                amount=amount,
                pending_on=pending_on,
                posted_on=None,
                debit_account_id=schedule.debit_account_id,
                credit_account_id=schedule.credit_account_id,
                schedule_id=schedule.id,
            )
        )
    return transfers
