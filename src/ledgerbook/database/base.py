"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AccountKind,
    Adjustment,
    Organization,
    Period,
    Schedule,
    Transfer,
    TransferState,
)


class Database(ABC):
    """Abstract database interface for ledgerbook.

    Write methods commit immediately unless called inside ``transaction()``,
    in which case they are flushed and committed (or rolled back) together
    when the outermost block exits.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes into one atomic unit. Nested blocks join the outer one."""
        pass

    # Organization operations
    @abstractmethod
    def create_organization(self, name: str) -> int:
        """Create a new organization. Returns organization ID."""
        pass

    @abstractmethod
    def get_organization(self, organization_id: int) -> Optional[Organization]:
        """Get organization by ID."""
        pass

    @abstractmethod
    def list_organizations(self) -> list[Organization]:
        """List all organizations."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        organization_id: int,
        name: str,
        kind: AccountKind,
        debits: int = 0,
        credits: int = 0,
        active: bool = True,
        due_day: Optional[int] = None,
        statement_day: Optional[int] = None,
        credit_limit: Optional[int] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        organization_id: Optional[int] = None,
        kind: Optional[AccountKind] = None,
        active: Optional[bool] = None,
    ) -> list[Account]:
        """List accounts ordered by ID, optionally filtered."""
        pass

    @abstractmethod
    def update_account(
        self, account_id: int, name: Optional[str] = None, active: Optional[bool] = None
    ) -> None:
        """Update account name and/or active flag."""
        pass

    @abstractmethod
    def set_account_totals(self, account_id: int, debits: int, credits: int) -> None:
        """Overwrite an account's running totals."""
        pass

    @abstractmethod
    def increment_account_totals(
        self, account_id: int, debits_delta: int = 0, credits_delta: int = 0
    ) -> None:
        """Add deltas to an account's running totals in a single statement."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transfer_count(self, account_id: int) -> int:
        """Count transfers on either side of an account."""
        pass

    @abstractmethod
    def get_account_schedule_count(self, account_id: int) -> int:
        """Count schedules referencing an account on any side."""
        pass

    @abstractmethod
    def get_account_adjustment_count(self, account_id: int) -> int:
        """Count adjustments of an account."""
        pass

    # Transfer operations
    @abstractmethod
    def create_transfer(
        self,
        debit_account_id: int,
        credit_account_id: int,
        amount: int,
        pending_on: date,
        state: TransferState = TransferState.PENDING,
        posted_on: Optional[date] = None,
        schedule_id: Optional[int] = None,
    ) -> int:
        """Create a transfer. Returns transfer ID."""
        pass

    @abstractmethod
    def get_transfer(self, transfer_id: int) -> Optional[Transfer]:
        """Get transfer by ID."""
        pass

    @abstractmethod
    def list_transfers(
        self,
        account_id: Optional[int] = None,
        state: Optional[TransferState] = None,
        schedule_id: Optional[int] = None,
    ) -> list[Transfer]:
        """List transfers ordered by pending date, optionally filtered."""
        pass

    @abstractmethod
    def update_transfer(
        self,
        transfer_id: int,
        amount: int,
        pending_on: date,
        debit_account_id: int,
        credit_account_id: int,
    ) -> None:
        """Overwrite the editable fields of a transfer."""
        pass

    @abstractmethod
    def mark_transfer_posted(self, transfer_id: int, posted_on: date) -> None:
        """Move a transfer to the posted state."""
        pass

    @abstractmethod
    def delete_transfer(self, transfer_id: int) -> None:
        """Delete a transfer."""
        pass

    @abstractmethod
    def get_pending_totals(self, account_id: int) -> tuple[int, int]:
        """Return (debit-side, credit-side) sums of pending transfers of an account."""
        pass

    # Schedule operations
    @abstractmethod
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
        """Create a schedule. Returns schedule ID."""
        pass

    @abstractmethod
    def get_schedule(self, schedule_id: int) -> Optional[Schedule]:
        """Get schedule by ID."""
        pass

    @abstractmethod
    def list_schedules(
        self,
        debit_account_id: Optional[int] = None,
        credit_account_id: Optional[int] = None,
    ) -> list[Schedule]:
        """List schedules ordered by ID, optionally filtered by side."""
        pass

    @abstractmethod
    def update_schedule_watermark(self, schedule_id: int, materialized_on: date) -> None:
        """Record the date up to which a schedule has been materialized."""
        pass

    @abstractmethod
    def delete_schedule(self, schedule_id: int) -> None:
        """Delete a schedule, detaching (not deleting) its transfers."""
        pass

    # Adjustment operations
    @abstractmethod
    def create_adjustment(
        self,
        account_id: int,
        note: str,
        credit_amount: Optional[int] = None,
        debit_amount: Optional[int] = None,
    ) -> int:
        """Create an adjustment. Returns adjustment ID."""
        pass

    @abstractmethod
    def get_adjustment(self, adjustment_id: int) -> Optional[Adjustment]:
        """Get adjustment by ID."""
        pass

    @abstractmethod
    def list_adjustments(self, account_id: Optional[int] = None) -> list[Adjustment]:
        """List adjustments ordered by ID."""
        pass

    @abstractmethod
    def update_adjustment(
        self,
        adjustment_id: int,
        note: str,
        credit_amount: Optional[int],
        debit_amount: Optional[int],
    ) -> None:
        """Overwrite an adjustment's amounts and note."""
        pass

    @abstractmethod
    def delete_adjustment(self, adjustment_id: int) -> None:
        """Delete an adjustment."""
        pass
