"""Tests for balance adjustments."""

import pytest

from ledgerbook.cli.main import cli
from ledgerbook.domain.adjustment import net_effect
from ledgerbook.domain.entities import AccountKind
from ledgerbook.domain.errors import BalanceError, NotFoundError, ValidationError


def test_create_credit_adjustment(adjustment_service, account_service, cash_account):
    """Test that a credit adjustment lowers a cash balance."""
    adjustment_id = adjustment_service.create_adjustment(
        cash_account.id, note="Bank fee", credit_amount=2000
    )

    adjustment = adjustment_service.get_adjustment(adjustment_id)
    assert adjustment.credit_amount == 2000
    assert adjustment.debit_amount is None
    assert adjustment.note == "Bank fee"
    assert net_effect(adjustment, AccountKind.CASH) == -2000
    assert net_effect(adjustment, AccountKind.CUSTOMER) == 2000
    assert account_service.posted_balance(cash_account.id) == 98000


def test_adjustment_round_trip(adjustment_service, account_service, cash_account):
    """Test that deleting an adjustment restores the exact totals."""
    before = account_service.get_account(cash_account.id)
    adjustment_id = adjustment_service.create_adjustment(
        cash_account.id, note="Interest", debit_amount=1234
    )

    adjustment_service.delete_adjustment(adjustment_id)

    after = account_service.get_account(cash_account.id)
    assert (after.debits, after.credits) == (before.debits, before.credits)
    assert adjustment_service.get_adjustment(adjustment_id) is None


def test_update_adjustment_applies_difference(adjustment_service, account_service, cash_account):
    adjustment_id = adjustment_service.create_adjustment(
        cash_account.id, note="Interest", debit_amount=500
    )

    adjustment_service.update_adjustment(adjustment_id, debit_amount=1500)
    assert account_service.posted_balance(cash_account.id) == 101500

    adjustment_service.update_adjustment(adjustment_id, credit_amount=300, note="Fee")
    account = account_service.get_account(cash_account.id)
    assert (account.debits, account.credits) == (100000, 300)
    assert adjustment_service.get_adjustment(adjustment_id).note == "Fee"


def test_update_note_only(adjustment_service, account_service, cash_account):
    adjustment_id = adjustment_service.create_adjustment(
        cash_account.id, note="Interest", debit_amount=500
    )

    adjustment_service.update_adjustment(adjustment_id, note="March interest")

    adjustment = adjustment_service.get_adjustment(adjustment_id)
    assert adjustment.debit_amount == 500
    assert adjustment.note == "March interest"
    assert account_service.posted_balance(cash_account.id) == 100500


@pytest.mark.parametrize(
    "kwargs",
    [
        {"note": "Nothing"},
        {"note": "Both", "credit_amount": 100, "debit_amount": 100},
        {"note": "Zero", "credit_amount": 0},
        {"note": "Negative", "debit_amount": -100},
        {"note": "   ", "debit_amount": 100},
    ],
)
def test_invalid_adjustment(adjustment_service, cash_account, kwargs):
    with pytest.raises(ValidationError):
        adjustment_service.create_adjustment(cash_account.id, **kwargs)


def test_adjustment_cannot_overdraw_cash(adjustment_service, account_service, cash_account):
    """Test that a rejected adjustment leaves no row behind."""
    with pytest.raises(BalanceError):
        adjustment_service.create_adjustment(
            cash_account.id, note="Too much", credit_amount=100001
        )

    assert adjustment_service.list_adjustments(cash_account.id) == []
    assert account_service.posted_balance(cash_account.id) == 100000


def test_adjustment_on_missing_account(adjustment_service):
    with pytest.raises(NotFoundError):
        adjustment_service.create_adjustment(999, note="Ghost", debit_amount=100)


def test_adjust_cli(cli_runner, temp_db, cash_account):
    """Test creating and listing adjustments from the command line."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "adjust",
            "create",
            "Checking",
            "--debit",
            "12.00",
            "--note",
            "Bank interest",
        ],
    )
    assert result.exit_code == 0
    assert "Created adjustment" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "adjust", "list"])
    assert result.exit_code == 0
    assert "Bank interest" in result.output
    assert "$12.00" in result.output
    assert temp_db.get_account(cash_account.id).debits == 101200


def test_account_service_records_adjustment(account_service, cash_account):
    """Test adjusting through the account service."""
    adjustment_id = account_service.create_adjustment(
        cash_account.id, note="Opening correction", debit_amount=700
    )

    assert account_service.adjustments.get_adjustment(adjustment_id).debit_amount == 700
    assert account_service.posted_balance(cash_account.id) == 100700


def test_adjustment_scenario(adjustment_service, temp_db, cash_account):
    """Test credit 1.00, switch to debit 0.50, then delete, on an account with 5.00 of credits."""
    temp_db.set_account_totals(cash_account.id, debits=100000, credits=500)

    adjustment_id = adjustment_service.create_adjustment(
        cash_account.id, note="Correction", credit_amount=100
    )
    account = temp_db.get_account(cash_account.id)
    assert (account.debits, account.credits) == (100000, 600)

    adjustment_service.update_adjustment(adjustment_id, debit_amount=50)
    account = temp_db.get_account(cash_account.id)
    assert (account.debits, account.credits) == (100050, 500)

    adjustment_service.delete_adjustment(adjustment_id)
    account = temp_db.get_account(cash_account.id)
    assert (account.debits, account.credits) == (100000, 500)


class TestAdjustToTargetBalance:
    """Tests for adjustments sized from a target posted balance."""

    @pytest.fixture
    def card_account(self, account_service, organization, card_terms):
        created = account_service.create_account(
            organization_id=organization,
            name="Visa",
            kind=AccountKind.CREDIT_CARD,
            credit_card=card_terms,
            posted_balance=30000,
        )
        return created.account

    def test_raise_cash_balance_is_a_debit(self, adjustment_service, account_service, cash_account):
        """Test that raising a cash balance records a debit for the difference."""
        adjustment_id = adjustment_service.create_adjustment_to_balance(
            cash_account.id, 120000, note="Match statement"
        )

        adjustment = adjustment_service.get_adjustment(adjustment_id)
        assert (adjustment.credit_amount, adjustment.debit_amount) == (None, 20000)
        assert account_service.posted_balance(cash_account.id) == 120000

    def test_lower_cash_balance_is_a_credit(self, adjustment_service, account_service, cash_account):
        """Test that lowering a cash balance records a credit for the difference."""
        adjustment_id = adjustment_service.create_adjustment_to_balance(
            cash_account.id, 90000, note="Match statement"
        )

        adjustment = adjustment_service.get_adjustment(adjustment_id)
        assert (adjustment.credit_amount, adjustment.debit_amount) == (10000, None)
        assert account_service.posted_balance(cash_account.id) == 90000

    def test_raise_card_balance_is_a_credit(self, adjustment_service, account_service, card_account):
        """Test that raising a credit card balance records a credit."""
        adjustment_id = adjustment_service.create_adjustment_to_balance(
            card_account.id, 50000, note="Missed charge"
        )

        adjustment = adjustment_service.get_adjustment(adjustment_id)
        assert (adjustment.credit_amount, adjustment.debit_amount) == (20000, None)
        assert account_service.posted_balance(card_account.id) == 50000

    def test_lower_card_balance_is_a_debit(self, adjustment_service, account_service, card_account):
        """Test that lowering a credit card balance records a debit."""
        adjustment_id = adjustment_service.create_adjustment_to_balance(
            card_account.id, 10000, note="Refund"
        )

        adjustment = adjustment_service.get_adjustment(adjustment_id)
        assert (adjustment.credit_amount, adjustment.debit_amount) == (None, 20000)
        assert account_service.posted_balance(card_account.id) == 10000

    def test_update_measures_from_balance_without_adjustment(
        self, adjustment_service, account_service, cash_account
    ):
        """Test that updating to a new target ignores the adjustment's own effect."""
        adjustment_id = adjustment_service.create_adjustment_to_balance(
            cash_account.id, 120000, note="Match statement"
        )

        adjustment_service.update_adjustment_to_balance(adjustment_id, 95000)

        adjustment = adjustment_service.get_adjustment(adjustment_id)
        assert (adjustment.credit_amount, adjustment.debit_amount) == (5000, None)
        assert adjustment.note == "Match statement"
        assert account_service.posted_balance(cash_account.id) == 95000
        account = account_service.get_account(cash_account.id)
        assert (account.debits, account.credits) == (100000, 5000)

    def test_update_on_card_account(self, adjustment_service, account_service, card_account):
        adjustment_id = adjustment_service.create_adjustment_to_balance(
            card_account.id, 10000, note="Refund"
        )

        adjustment_service.update_adjustment_to_balance(adjustment_id, 45000, note="Late charge")

        adjustment = adjustment_service.get_adjustment(adjustment_id)
        assert (adjustment.credit_amount, adjustment.debit_amount) == (15000, None)
        assert adjustment.note == "Late charge"
        assert account_service.posted_balance(card_account.id) == 45000

    def test_already_at_target(self, adjustment_service, cash_account):
        with pytest.raises(ValidationError):
            adjustment_service.create_adjustment_to_balance(cash_account.id, 100000, note="Nothing")

    def test_update_back_to_base_balance(self, adjustment_service, cash_account):
        """Test that a target equal to the balance before the adjustment is rejected."""
        adjustment_id = adjustment_service.create_adjustment_to_balance(
            cash_account.id, 120000, note="Match statement"
        )

        with pytest.raises(ValidationError):
            adjustment_service.update_adjustment_to_balance(adjustment_id, 100000)

    def test_target_below_floor(self, adjustment_service, account_service, cash_account):
        with pytest.raises(BalanceError):
            adjustment_service.create_adjustment_to_balance(cash_account.id, -100, note="Overdraft")
        assert account_service.posted_balance(cash_account.id) == 100000

    def test_target_on_missing_account(self, adjustment_service):
        with pytest.raises(NotFoundError):
            adjustment_service.create_adjustment_to_balance(999, 100, note="Ghost")


def test_adjust_cli_target(cli_runner, temp_db, cash_account):
    """Test that --target sizes the adjustment from the posted balance."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "adjust",
            "create",
            "Checking",
            "--target",
            "1,250.00",
            "--note",
            "Match statement",
        ],
    )
    assert result.exit_code == 0
    assert "Created adjustment" in result.output
    assert temp_db.get_account(cash_account.id).debits == 125000


def test_adjust_cli_target_with_amount(cli_runner, temp_db, cash_account):
    """Test that --target cannot be combined with --debit."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "adjust",
            "create",
            "Checking",
            "--target",
            "1,250.00",
            "--debit",
            "5.00",
            "--note",
            "Match statement",
        ],
    )
    assert result.exit_code == 1
    assert "--target cannot be combined" in result.output
    assert temp_db.get_account(cash_account.id).debits == 100000
