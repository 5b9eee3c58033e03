"""Tests for schedules: date generation, amounts and materialization."""

import pytest
from datetime import date, timedelta

from ledgerbook.cli.main import cli
from ledgerbook.domain import recurrence
from ledgerbook.domain.entities import AccountKind, Period, Schedule
from ledgerbook.domain.errors import NotFoundError, ValidationError
from ledgerbook.domain.schedule import ScheduleService


def make_schedule(**overrides):
    """Build an unsaved schedule with sensible defaults."""
    fields = dict(
        id=1,
        name="Rent",
        amount=5000,
        period=Period.MONTH,
        frequency=1,
        starts_on=date(2026, 1, 15),
        ends_on=None,
        last_materialized_on=None,
        debit_account_id=1,
        credit_account_id=2,
        relative_account_id=None,
    )
    fields.update(overrides)
    return Schedule(**fields)


class TestRecurrence:
    """Tests for the pure date generation helpers."""

    def test_monthly_dates(self):
        """Test three monthly occurrences 28 to 31 days apart."""
        dates = recurrence.transfer_dates(
            make_schedule(), date(2026, 3, 31), today=date(2026, 3, 10)
        )

        assert dates == [date(2026, 1, 15), date(2026, 2, 15), date(2026, 3, 15)]
        gaps = [(b - a).days for a, b in zip(dates, dates[1:])]
        assert all(28 <= gap <= 31 for gap in gaps)

    def test_monthly_schedule_started_75_days_ago(self, today):
        schedule = make_schedule(amount=10000, starts_on=today - timedelta(days=75))

        dates = recurrence.transfer_dates(schedule, today, today=today)

        assert len(dates) == 3
        assert dates[0] == today - timedelta(days=75)
        assert all(28 <= (b - a).days <= 31 for a, b in zip(dates, dates[1:]))

    def test_month_end_start_steps_from_previous_date(self):
        """Test that a day clamped in February stays clamped afterwards."""
        schedule = make_schedule(starts_on=date(2026, 1, 31))
        dates = recurrence.transfer_dates(schedule, date(2026, 4, 30), today=date(2026, 1, 1))
        assert dates == [date(2026, 1, 31), date(2026, 2, 28), date(2026, 3, 28), date(2026, 4, 28)]

    def test_every_two_weeks_until_end_date(self):
        schedule = make_schedule(
            period=Period.WEEK,
            frequency=2,
            starts_on=date(2026, 1, 1),
            ends_on=date(2026, 2, 1),
        )
        assert list(recurrence.occurrences(schedule)) == [
            date(2026, 1, 1),
            date(2026, 1, 15),
            date(2026, 1, 29),
        ]

    def test_daily_and_yearly_steps(self):
        assert recurrence.advance(date(2026, 1, 30), Period.DAY, 3) == date(2026, 2, 2)
        assert recurrence.advance(date(2024, 2, 29), Period.YEAR, 1) == date(2025, 2, 28)

    def test_one_shot_schedule(self):
        schedule = make_schedule(period=None, frequency=None, starts_on=date(2026, 5, 1))
        assert list(recurrence.occurrences(schedule)) == [date(2026, 5, 1)]
        assert recurrence.transfer_dates(schedule, date(2026, 4, 30), today=date(2026, 3, 10)) == []

    def test_find_next_date_from(self):
        schedule = make_schedule(ends_on=date(2026, 6, 30))
        assert recurrence.find_next_date_from(schedule, date(2026, 2, 16)) == date(2026, 3, 15)
        assert recurrence.find_next_date_from(schedule, date(2026, 3, 15)) == date(2026, 3, 15)
        assert recurrence.find_next_date_from(schedule, date(2026, 7, 1)) is None


class TestAmounts:
    """Tests for amount resolution with a relative account."""

    def test_fixed_amount(self):
        assert recurrence.calculate_transfer_amount(make_schedule(), 3) == 5000

    def test_balance_driven_schedule_with_zero_balance_is_dormant(self):
        """Test that a zero relative balance produces no dates at all."""
        schedule = make_schedule(amount=None, relative_account_id=3)

        assert recurrence.transfer_dates(
            schedule, date(2026, 12, 31), today=date(2026, 3, 10), relative_balance=0
        ) == []
        assert recurrence.planned_transfers(schedule, [date(2026, 3, 15)], 0) == []

    def test_balance_driven_schedule_produces_next_date_only(self):
        schedule = make_schedule(amount=None, relative_account_id=3)

        dates = recurrence.transfer_dates(
            schedule, date(2026, 12, 31), today=date(2026, 3, 10), relative_balance=7500
        )
        planned = recurrence.planned_transfers(schedule, dates, 7500)

        assert dates == [date(2026, 3, 15)]
        assert [(t.pending_on, t.amount) for t in planned] == [(date(2026, 3, 15), 7500)]

    def test_relative_balance_then_fixed_amount(self):
        """Test that only the first occurrence takes the live balance."""
        schedule = make_schedule(amount=1000, relative_account_id=3)
        dates = [date(2026, 4, 15), date(2026, 5, 15), date(2026, 6, 15)]

        planned = recurrence.planned_transfers(schedule, dates, 7500)

        assert [t.amount for t in planned] == [7500, 1000, 1000]
        assert all(t.is_pending and t.schedule_id == 1 for t in planned)

    def test_zero_relative_balance_falls_back_to_fixed_amount(self):
        schedule = make_schedule(amount=1000, relative_account_id=3)
        assert recurrence.calculate_transfer_amount(schedule, 0, 0) == 1000

    def test_negative_relative_balance_is_dropped(self):
        schedule = make_schedule(amount=None, relative_account_id=3)
        assert recurrence.planned_transfers(schedule, [date(2026, 3, 15)], -500) == []


class TestScheduleService:
    """Tests for ScheduleService."""

    @pytest.fixture
    def rent(self, schedule_service, vendor_account, cash_account):
        return schedule_service.create_schedule(
            name="Rent",
            debit_account_id=vendor_account.id,
            credit_account_id=cash_account.id,
            starts_on=date(2026, 1, 15),
            amount=5000,
            period=Period.MONTH,
            frequency=1,
        )

    def test_create_and_get(self, schedule_service, rent, vendor_account):
        schedule = schedule_service.get_schedule(rent)
        assert schedule.name == "Rent"
        assert schedule.period is Period.MONTH
        assert schedule.last_materialized_on is None
        assert [s.id for s in schedule_service.list_schedules(vendor_account.id)] == [rent]

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"amount": None}, "Amount is required"),
            ({"amount": 0}, "greater than 0"),
            ({"frequency": None}, "Frequency must be present"),
            ({"period": None}, "Period must be present"),
            ({"frequency": 0}, "Frequency must be greater than 0"),
            ({"ends_on": date(2026, 1, 1)}, "End date"),
        ],
    )
    def test_create_validation(
        self, schedule_service, vendor_account, cash_account, overrides, message
    ):
        fields = dict(
            name="Rent",
            debit_account_id=vendor_account.id,
            credit_account_id=cash_account.id,
            starts_on=date(2026, 1, 15),
            amount=5000,
            period=Period.MONTH,
            frequency=1,
        )
        fields.update(overrides)
        with pytest.raises(ValidationError, match=message):
            schedule_service.create_schedule(**fields)

    def test_create_with_same_accounts(self, schedule_service, cash_account):
        with pytest.raises(ValidationError):
            schedule_service.create_schedule(
                name="Loop",
                debit_account_id=cash_account.id,
                credit_account_id=cash_account.id,
                starts_on=date(2026, 1, 1),
                amount=100,
            )

    def test_materialize_is_idempotent(self, schedule_service, rent, today):
        """Test that a second run on the same day creates nothing."""
        first = schedule_service.create_pending_transfers(rent)
        second = schedule_service.create_pending_transfers(rent)

        transfers = schedule_service.transfers.list_transfers(schedule_id=rent)
        assert len(first) == 2
        assert second == []
        assert [t.pending_on for t in transfers] == [date(2026, 1, 15), date(2026, 2, 15)]
        assert all(t.is_pending and t.amount == 5000 for t in transfers)
        assert schedule_service.get_schedule(rent).last_materialized_on == today

    def test_materialize_later_picks_up_new_occurrences(
        self, schedule_service, temp_db, rent
    ):
        schedule_service.create_pending_transfers(rent)

        later = ScheduleService(temp_db, clock=lambda: date(2026, 3, 20))
        created = later.create_pending_transfers(rent)

        assert [temp_db.get_transfer(i).pending_on for i in created] == [date(2026, 3, 15)]
        assert later.get_schedule(rent).last_materialized_on == date(2026, 3, 20)

    def test_materialize_balance_driven_schedule(
        self, schedule_service, account_service, organization, cash_account
    ):
        customer = account_service.create_account(
            organization_id=organization,
            name="Acme Corp",
            kind=AccountKind.CUSTOMER,
            posted_balance=7500,
        ).account
        schedule_id = schedule_service.create_schedule(
            name="Invoice",
            debit_account_id=customer.id,
            credit_account_id=cash_account.id,
            relative_account_id=customer.id,
            starts_on=date(2026, 3, 1),
            period=Period.WEEK,
            frequency=1,
        )

        created = schedule_service.create_pending_transfers(schedule_id)

        # Next occurrence on or after 2026-03-10 is 2026-03-15, which is not due yet
        assert created == []
        assert schedule_service.transfer_dates(schedule_id, date(2026, 3, 31)) == [
            date(2026, 3, 15)
        ]
        assert schedule_service.calculate_transfer_amount(schedule_id, 0) == 7500

    def test_delete_keeps_transfers(self, schedule_service, rent):
        created = schedule_service.create_pending_transfers(rent)

        schedule_service.delete_schedule(rent)

        assert schedule_service.get_schedule(rent) is None
        for transfer_id in created:
            transfer = schedule_service.transfers.get_transfer(transfer_id)
            assert transfer is not None
            assert transfer.schedule_id is None

    def test_delete_missing_schedule(self, schedule_service):
        with pytest.raises(NotFoundError):
            schedule_service.delete_schedule(999)

    def test_create_all_skips_failing_schedule(
        self, schedule_service, account_service, organization, cash_account, card_terms, rent
    ):
        """Test that one broken schedule does not stop the daily run."""
        card = account_service.create_account(
            organization_id=organization,
            name="Visa",
            kind=AccountKind.CREDIT_CARD,
            credit_card=card_terms,
        ).account
        # Debiting an unused card breaks its credit floor
        broken = schedule_service.create_schedule(
            name="Broken",
            debit_account_id=card.id,
            credit_account_id=cash_account.id,
            starts_on=date(2026, 3, 1),
            amount=5000,
        )

        results = schedule_service.create_all_pending_transfers()

        assert broken not in results
        assert len(results[rent]) == 2
        assert schedule_service.get_schedule(broken).last_materialized_on is None
        assert schedule_service.transfers.list_transfers(schedule_id=broken) == []


def test_schedule_cli(cli_runner, temp_db, cash_account, vendor_account):
    """Test creating, listing and materializing a schedule from the command line."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "schedule",
            "create",
            "Rent",
            "--debit",
            "Grocer",
            "--credit",
            "Checking",
            "--amount",
            "50.00",
            "--start",
            "2026-01-15",
            "--period",
            "month",
            "--end",
            "2026-02-28",
        ],
    )
    assert result.exit_code == 0
    assert "Created schedule 'Rent'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "schedule", "list"])
    assert result.exit_code == 0
    assert "every 1 month, $50.00" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "schedule", "materialize"]
    )
    assert result.exit_code == 0
    assert "Created 2 pending transfer(s) from 1 schedule(s)" in result.output


def test_schedule_cli_rejects_missing_amount(cli_runner, temp_db, cash_account, vendor_account):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "schedule",
            "create",
            "Rent",
            "--debit",
            "Grocer",
            "--credit",
            "Checking",
            "--start",
            "2026-01-15",
        ],
    )
    assert result.exit_code == 1
    assert "Amount is required" in result.output
