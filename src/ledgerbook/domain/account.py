"""Account domain service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain import balance, recurrence
from ledgerbook.domain.adjustment import AdjustmentService
from ledgerbook.domain.credit_card import next_payment_date, validate_terms
from ledgerbook.domain.entities import (
    Account as AccountEntity,
    AccountKind,
    CreditCardTerms,
    Period,
    Schedule as ScheduleEntity,
)
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    organization_not_found,
)
from ledgerbook.domain.organization import OrganizationService
from ledgerbook.domain.schedule import ScheduleService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountCreation:
    """A newly created account and the payment schedule created alongside it."""

    account: AccountEntity
    payment_schedule: Optional[ScheduleEntity] = None


class AccountService:
    """Service for managing accounts and reading their balances."""

    def __init__(self, db: Database, clock: Optional[Callable[[], date]] = None):
        """Initialize account service.

        Args:
            db: Database instance
            clock: Callable returning today's date (defaults to date.today)
        """
        self.db = db
        self.clock = clock or date.today
        self.organizations = OrganizationService(db)
        self.schedules = ScheduleService(db, clock=self.clock)
        self.adjustments = AdjustmentService(db)

    def _require_account(self, account_id: int) -> AccountEntity:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _check_unique_name(
        self, organization_id: int, name: str, exclude_id: Optional[int] = None
    ) -> None:
        for acc in self.db.list_accounts(organization_id=organization_id):
            if acc.id != exclude_id and acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

    def create_account(
        self,
        organization_id: int,
        name: str,
        kind: AccountKind,
        posted_balance: Optional[int] = None,
        credit_card: Optional[CreditCardTerms] = None,
        active: bool = True,
    ) -> AccountCreation:
        """Create a new account.

        A credit card account whose organization already has a cash account
        also gets a monthly payment schedule that pays the card's balance from
        that cash account the day before each statement.

        Args:
            organization_id: Owning organization
            name: Account name, unique within the organization
            kind: Account kind
            posted_balance: Optional opening balance in cents
            credit_card: Billing terms, required for credit card accounts
            active: Whether the account starts active

        Returns:
            AccountCreation with the account and the payment schedule, if one
            was created

        Raises:
            ValidationError: If name is blank or terms are missing or misplaced
            NotFoundError: If the organization doesn't exist
            ConflictError: If the name is already taken in the organization
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        name = name.strip()
        if self.db.get_organization(organization_id) is None:
            raise NotFoundError(organization_not_found(organization_id))
        if kind is AccountKind.CREDIT_CARD:
            validate_terms(credit_card)
        elif credit_card is not None:
            raise ValidationError("Only credit card accounts carry credit card terms")
        self._check_unique_name(organization_id, name)

        debits, credits = balance.seeded_totals(kind, posted_balance or 0)

        with self.db.transaction():
            account_id = self.db.create_account(
                organization_id=organization_id,
                name=name,
                kind=kind,
                debits=debits,
                credits=credits,
                active=active,
                due_day=credit_card.due_day if credit_card else None,
                statement_day=credit_card.statement_day if credit_card else None,
                credit_limit=credit_card.credit_limit if credit_card else None,
            )
            account = self._require_account(account_id)
            payment_schedule = None
            if kind is AccountKind.CREDIT_CARD:
                payment_schedule = self._create_payment_schedule(account)

        logger.info("Created %s account %s '%s'", kind.value, account_id, name)
        return AccountCreation(account=account, payment_schedule=payment_schedule)

    def _create_payment_schedule(self, account: AccountEntity) -> Optional[ScheduleEntity]:
        terms = account.credit_card
        if terms is None or terms.due_day is None or terms.statement_day is None:
            return None
        cash_account = self.organizations.first_cash_account(account.organization_id)
        if cash_account is None:
            return None

        schedule_id = self.schedules.create_schedule(
            name=f"Payment for {account.name}",
            debit_account_id=account.id,
            credit_account_id=cash_account.id,
            relative_account_id=account.id,
            starts_on=next_payment_date(terms, self.clock()),
            period=Period.MONTH,
            frequency=1,
        )
        logger.info("Created payment schedule %s for account %s", schedule_id, account.id)
        return self.schedules.get_schedule(schedule_id)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(
        self,
        organization_id: Optional[int] = None,
        kind: Optional[AccountKind] = None,
        active: Optional[bool] = None,
    ) -> list[AccountEntity]:
        """List accounts, optionally filtered by organization, kind or active flag."""
        return self.db.list_accounts(organization_id=organization_id, kind=kind, active=active)

    def rename_account(self, account_id: int, name: str) -> None:
        """Rename an account.

        Raises:
            ValidationError: If name is blank
            NotFoundError: If account not found
            ConflictError: If name already exists in the organization
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        account = self._require_account(account_id)
        self._check_unique_name(account.organization_id, name.strip(), exclude_id=account_id)
        self.db.update_account(account_id, name=name.strip())

    def set_active(self, account_id: int, active: bool) -> None:
        """Activate or deactivate an account."""
        self._require_account(account_id)
        self.db.update_account(account_id, active=active)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If account not found
            DependencyError: If transfers, schedules or adjustments reference it
        """
        self._require_account(account_id)

        transfer_count = self.db.get_account_transfer_count(account_id)
        schedule_count = self.db.get_account_schedule_count(account_id)
        adjustment_count = self.db.get_account_adjustment_count(account_id)
        if transfer_count or schedule_count or adjustment_count:
            raise DependencyError(
                account_delete_blocked(account_id, transfer_count, schedule_count, adjustment_count)
            )

        self.db.delete_account(account_id)

    def posted_balance(self, account_id: int) -> int:
        """Balance of everything posted to the account, in cents."""
        return balance.posted_balance(self._require_account(account_id))

    def set_posted_balance(self, account_id: int, amount: int) -> None:
        """Seed an account's posted balance.

        The whole amount goes on the side that increases the balance for the
        account's kind and the other side is zeroed.

        Raises:
            ValidationError: If amount is negative
        """
        account = self._require_account(account_id)
        debits, credits = balance.seeded_totals(account.kind, amount)
        self.db.set_account_totals(account_id, debits=debits, credits=credits)

    def pending_balance(self, account_id: int) -> int:
        """Balance of the account's pending transfers alone, in cents."""
        account = self._require_account(account_id)
        debit_total, credit_total = self.db.get_pending_totals(account_id)
        return balance.signed_balance(account.kind, debit_total, credit_total)

    def planned_balance(self, account_id: int, as_of_date: date) -> int:
        """Balance of schedule occurrences from today through as_of_date, in cents."""
        account = self._require_account(account_id)
        today = self.clock()

        def planned_total(schedules: list[ScheduleEntity]) -> int:
            total = 0
            for schedule in schedules:
                relative_balance = self.schedules.relative_balance(schedule)
                dates = [
                    d
                    for d in recurrence.transfer_dates(
                        schedule, as_of_date, today=today, relative_balance=relative_balance
                    )
                    if d >= today
                ]
                planned = recurrence.planned_transfers(schedule, dates, relative_balance)
                total += sum(t.amount for t in planned)
            return total

        debit_total = planned_total(self.db.list_schedules(debit_account_id=account_id))
        credit_total = planned_total(self.db.list_schedules(credit_account_id=account_id))
        return balance.signed_balance(account.kind, debit_total, credit_total)

    def create_adjustment(
        self,
        account_id: int,
        note: str,
        credit_amount: Optional[int] = None,
        debit_amount: Optional[int] = None,
    ) -> int:
        """Record an adjustment against the account. Returns adjustment ID."""
        return self.adjustments.create_adjustment(
            account_id, note=note, credit_amount=credit_amount, debit_amount=debit_amount
        )

