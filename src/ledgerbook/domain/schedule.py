"""Schedule domain service."""

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain import recurrence
from ledgerbook.domain.balance import posted_balance
from ledgerbook.domain.entities import (
    Period,
    Schedule as ScheduleEntity,
    Transfer as TransferEntity,
)
from ledgerbook.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    account_not_found,
    same_accounts,
    schedule_not_found,
)
from ledgerbook.domain.transfer import TransferService

logger = logging.getLogger(__name__)


class ScheduleService:
    """Service for managing schedules and materializing their transfers."""

    def __init__(self, db: Database, clock: Optional[Callable[[], date]] = None):
        """Initialize schedule service.

        Args:
            db: Database instance
            clock: Callable returning today's date (defaults to date.today)
        """
        self.db = db
        self.clock = clock or date.today
        self.transfers = TransferService(db, clock=self.clock)

    def _require_schedule(self, schedule_id: int) -> ScheduleEntity:
        schedule = self.db.get_schedule(schedule_id)
        if schedule is None:
            raise NotFoundError(schedule_not_found(schedule_id))
        return schedule

    def _require_account_exists(self, account_id: int) -> None:
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

    def relative_balance(self, schedule: ScheduleEntity) -> Optional[int]:
        """Return the live posted balance of the schedule's relative account, if any."""
        if schedule.relative_account_id is None:
            return None
        account = self.db.get_account(schedule.relative_account_id)
        if account is None:
            raise NotFoundError(account_not_found(schedule.relative_account_id))
        return posted_balance(account)

    def create_schedule(
        self,
        name: str,
        debit_account_id: int,
        credit_account_id: int,
        starts_on: date,
        amount: Optional[int] = None,
        period: Optional[Period] = None,
        frequency: Optional[int] = None,
        ends_on: Optional[date] = None,
        relative_account_id: Optional[int] = None,
    ) -> int:
        """Create a schedule.

        Args:
            name: Schedule name
            debit_account_id: Debit side of produced transfers
            credit_account_id: Credit side of produced transfers
            starts_on: First occurrence
            amount: Fixed amount in cents; optional when relative_account_id is set
            period: Recurrence unit, None for a one-shot schedule
            frequency: Number of periods between occurrences
            ends_on: Optional last possible occurrence
            relative_account_id: Account whose balance drives the amount

        Returns:
            Schedule ID

        Raises:
            ValidationError: If a field is missing or the combination is invalid
            NotFoundError: If a referenced account doesn't exist
        """
        if not name or not name.strip():
            raise ValidationError("Schedule name is required")
        if starts_on is None:
            raise ValidationError("Start date is required")
        if amount is None and relative_account_id is None:
            raise ValidationError("Amount is required unless a relative account is set")
        if amount is not None and amount <= 0:
            raise ValidationError("Amount must be greater than 0")
        if frequency is not None and period is None:
            raise ValidationError("Period must be present when frequency is set")
        if period is not None and frequency is None:
            raise ValidationError("Frequency must be present when period is set")
        if frequency is not None and frequency <= 0:
            raise ValidationError("Frequency must be greater than 0")
        if ends_on is not None and ends_on < starts_on:
            raise ValidationError("End date must be on or after the start date")
        if debit_account_id == credit_account_id:
            raise ValidationError(same_accounts())

        self._require_account_exists(debit_account_id)
        self._require_account_exists(credit_account_id)
        if relative_account_id is not None:
            self._require_account_exists(relative_account_id)

        return self.db.create_schedule(
            name=name.strip(),
            debit_account_id=debit_account_id,
            credit_account_id=credit_account_id,
            starts_on=starts_on,
            amount=amount,
            period=period,
            frequency=frequency,
            ends_on=ends_on,
            relative_account_id=relative_account_id,
        )

    def get_schedule(self, schedule_id: int) -> Optional[ScheduleEntity]:
        """Get schedule by ID.

        Args:
            schedule_id: Schedule ID

        Returns:
            Schedule entity or None if not found
        """
        return self.db.get_schedule(schedule_id)

    def list_schedules(self, account_id: Optional[int] = None) -> list[ScheduleEntity]:
        """List schedules, optionally only those with the account on either side."""
        if account_id is None:
            return self.db.list_schedules()
        schedules = {
            s.id: s
            for s in self.db.list_schedules(debit_account_id=account_id)
            + self.db.list_schedules(credit_account_id=account_id)
        }
        return [schedules[key] for key in sorted(schedules)]

    def delete_schedule(self, schedule_id: int) -> None:
        """Delete a schedule. Transfers it produced are kept and detached."""
        self._require_schedule(schedule_id)
        self.db.delete_schedule(schedule_id)
        logger.info("Deleted schedule %s", schedule_id)

    def find_next_date_from(self, schedule_id: int, from_date: date) -> Optional[date]:
        """Return the schedule's first occurrence on or after from_date."""
        return recurrence.find_next_date_from(self._require_schedule(schedule_id), from_date)

    def transfer_dates(self, schedule_id: int, up_to_date: date) -> list[date]:
        """List the dates, up to and including up_to_date, on which transfers are due."""
        schedule = self._require_schedule(schedule_id)
        return recurrence.transfer_dates(
            schedule,
            up_to_date,
            today=self.clock(),
            relative_balance=self.relative_balance(schedule),
        )

    def calculate_transfer_amount(self, schedule_id: int, index: int) -> int:
        """Resolve the amount of the index-th planned occurrence."""
        schedule = self._require_schedule(schedule_id)
        return recurrence.calculate_transfer_amount(
            schedule, index, self.relative_balance(schedule)
        )

    def planned_transfers(self, schedule_id: int, dates: list[date]) -> list[TransferEntity]:
        """Build (without saving) the pending transfers for the given dates."""
        schedule = self._require_schedule(schedule_id)
        return recurrence.planned_transfers(schedule, dates, self.relative_balance(schedule))

    def create_pending_transfers(self, schedule_id: int) -> list[int]:
        """Materialize the schedule's due occurrences into pending transfers.

        Covers the window after the watermark (or from ``starts_on`` on the
        first run) through today, then moves the watermark to today. Running
        it again on the same day creates nothing.

        Returns:
            IDs of the created transfers

        Raises:
            NotFoundError: If the schedule doesn't exist
            DomainError: If a produced transfer fails validation; nothing is
                saved and the watermark is left unchanged
        """
        today = self.clock()
        created = []

        with self.db.transaction():
            schedule = self._require_schedule(schedule_id)
            if schedule.last_materialized_on is not None:
                from_date = schedule.last_materialized_on + timedelta(days=1)
            else:
                from_date = schedule.starts_on

            relative_balance = self.relative_balance(schedule)
            dates = [
                d
                for d in recurrence.transfer_dates(
                    schedule, today, today=today, relative_balance=relative_balance
                )
                if from_date <= d <= today
            ]
            for planned in recurrence.planned_transfers(schedule, dates, relative_balance):
                created.append(
                    self.transfers.create_transfer(
                        debit_account_id=planned.debit_account_id,
                        credit_account_id=planned.credit_account_id,
                        amount=planned.amount,
                        pending_on=planned.pending_on,
                        schedule_id=schedule.id,
                    )
                )
            self.db.update_schedule_watermark(schedule.id, today)

        if created:
            logger.info(
                "Schedule %s materialized %d transfer(s) through %s",
                schedule_id,
                len(created),
                today,
            )
        return created

    def create_all_pending_transfers(self) -> dict[int, list[int]]:
        """Materialize every schedule. This is the daily job's entry point.

        A schedule that fails with a domain error is logged and skipped; its
        watermark stays where it was so the next run retries it.

        Returns:
            Mapping of schedule ID to the IDs of transfers created for it
        """
        results = {}
        for schedule in self.db.list_schedules():
            try:
                results[schedule.id] = self.create_pending_transfers(schedule.id)
            except DomainError as e:
                logger.warning("Schedule %s not materialized: %s", schedule.id, e)
        return results
