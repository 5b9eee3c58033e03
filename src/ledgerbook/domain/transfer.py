"""Transfer domain service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import apply_account_totals, check_totals
from ledgerbook.domain.entities import (
    Account,
    AccountKind,
    Transfer as TransferEntity,
    TransferState,
)
from ledgerbook.domain.errors import (
    BalanceError,
    ImmutableTransferError,
    NotFoundError,
    ValidationError,
    account_not_found,
    credit_card_below_debits,
    posted_transfer_immutable,
    same_accounts,
    transfer_not_found,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostingResult:
    """Outcome of posting a transfer. Truthy only when the transfer was posted."""

    posted: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.posted


class TransferService:
    """Service for creating, posting and deleting transfers."""

    def __init__(self, db: Database, clock: Optional[Callable[[], date]] = None):
        """Initialize transfer service.

        Args:
            db: Database instance
            clock: Callable returning today's date (defaults to date.today)
        """
        self.db = db
        self.clock = clock or date.today

    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_transfer(self, transfer_id: int) -> TransferEntity:
        transfer = self.db.get_transfer(transfer_id)
        if transfer is None:
            raise NotFoundError(transfer_not_found(transfer_id))
        return transfer

    def _validate(
        self,
        debit_account_id: int,
        credit_account_id: int,
        amount: int,
        pending_on: Optional[date],
        state: TransferState,
        posted_on: Optional[date],
    ) -> tuple[Account, Account]:
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be greater than 0")
        if pending_on is None:
            raise ValidationError("Pending date is required")
        if state is TransferState.POSTED and posted_on is None:
            raise ValidationError("Posted date must be set for posted transfers")
        if debit_account_id == credit_account_id:
            raise ValidationError(same_accounts())

        debit_account = self._require_account(debit_account_id)
        credit_account = self._require_account(credit_account_id)
        return debit_account, credit_account

    @staticmethod
    def _check_credit_card_direction(
        debit_account: Account, credit_account: Account, amount: int
    ) -> None:
        """Reject a pending transfer whose posting would overdraw a credit card.

        Uses the accounts' current totals plus this transfer's effect.
        """
        if debit_account.kind is AccountKind.CREDIT_CARD:
            if debit_account.credits < debit_account.debits + amount:
                raise BalanceError(credit_card_below_debits())
        if credit_account.kind is AccountKind.CREDIT_CARD:
            if credit_account.credits + amount < credit_account.debits:
                raise BalanceError(credit_card_below_debits())

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
        """Create a transfer.

        A transfer created directly in the posted state is applied to both
        accounts in the same transaction.

        Args:
            debit_account_id: Account whose debits grow
            credit_account_id: Account whose credits grow
            amount: Amount in cents
            pending_on: Date the transfer is expected
            state: Initial state
            posted_on: Posting date, required when state is POSTED
            schedule_id: Schedule that produced the transfer, if any

        Returns:
            Transfer ID

        Raises:
            ValidationError: If a field is missing or invalid
            NotFoundError: If either account doesn't exist
            BalanceError: If the transfer would break a balance constraint
        """
        debit_account, credit_account = self._validate(
            debit_account_id, credit_account_id, amount, pending_on, state, posted_on
        )
        if state is TransferState.PENDING:
            self._check_credit_card_direction(debit_account, credit_account, amount)

        with self.db.transaction():
            transfer_id = self.db.create_transfer(
                debit_account_id=debit_account_id,
                credit_account_id=credit_account_id,
                amount=amount,
                pending_on=pending_on,
                state=state,
                posted_on=posted_on,
                schedule_id=schedule_id,
            )
            if state is TransferState.POSTED:
                apply_account_totals(self.db, debit_account_id, debits_delta=amount)
                apply_account_totals(self.db, credit_account_id, credits_delta=amount)

        logger.debug("Created %s transfer %s for %d", state.value, transfer_id, amount)
        return transfer_id

    def get_transfer(self, transfer_id: int) -> Optional[TransferEntity]:
        """Get transfer by ID.

        Args:
            transfer_id: Transfer ID

        Returns:
            Transfer entity or None if not found
        """
        return self.db.get_transfer(transfer_id)

    def list_transfers(
        self,
        account_id: Optional[int] = None,
        state: Optional[TransferState] = None,
        schedule_id: Optional[int] = None,
    ) -> list[TransferEntity]:
        """List transfers, optionally filtered by account, state or schedule."""
        return self.db.list_transfers(
            account_id=account_id, state=state, schedule_id=schedule_id
        )

    def update_transfer(
        self,
        transfer_id: int,
        amount: Optional[int] = None,
        pending_on: Optional[date] = None,
        debit_account_id: Optional[int] = None,
        credit_account_id: Optional[int] = None,
    ) -> None:
        """Update a pending transfer.

        Raises:
            NotFoundError: If the transfer doesn't exist
            ImmutableTransferError: If the transfer has been posted
            ValidationError: If the merged fields are invalid
            BalanceError: If the change would overdraw a credit card
        """
        transfer = self._require_transfer(transfer_id)
        if transfer.is_posted:
            raise ImmutableTransferError(posted_transfer_immutable())

        new_amount = amount if amount is not None else transfer.amount
        new_pending_on = pending_on if pending_on is not None else transfer.pending_on
        new_debit_id = (
            debit_account_id if debit_account_id is not None else transfer.debit_account_id
        )
        new_credit_id = (
            credit_account_id if credit_account_id is not None else transfer.credit_account_id
        )

        debit_account, credit_account = self._validate(
            new_debit_id, new_credit_id, new_amount, new_pending_on, TransferState.PENDING, None
        )
        self._check_credit_card_direction(debit_account, credit_account, new_amount)

        self.db.update_transfer(
            transfer_id=transfer_id,
            amount=new_amount,
            pending_on=new_pending_on,
            debit_account_id=new_debit_id,
            credit_account_id=new_credit_id,
        )

    def check_posting(self, transfer: TransferEntity) -> Optional[str]:
        """Return why the transfer cannot be posted right now, or None if it can."""
        debit_account = self._require_account(transfer.debit_account_id)
        credit_account = self._require_account(transfer.credit_account_id)
        try:
            check_totals(
                debit_account.kind,
                debit_account.debits + transfer.amount,
                debit_account.credits,
            )
            check_totals(
                credit_account.kind,
                credit_account.debits,
                credit_account.credits + transfer.amount,
            )
        except BalanceError as e:
            return str(e)
        return None

    def post_transfer(self, transfer_id: int) -> PostingResult:
        """Post a pending transfer.

        Both account totals and the transfer state change in one transaction;
        the balance check runs inside that transaction right before the
        mutation. Balance failures are reported through the result and leave
        the transfer pending. Storage errors propagate after rollback.

        Raises:
            NotFoundError: If the transfer doesn't exist
        """
        transfer = self._require_transfer(transfer_id)
        if not transfer.is_pending:
            return PostingResult(posted=False, error="Transfer is already posted")

        with self.db.transaction():
            error = self.check_posting(transfer)
            if error is not None:
                logger.warning("Transfer %s not posted: %s", transfer_id, error)
                return PostingResult(posted=False, error=error)

            apply_account_totals(self.db, transfer.debit_account_id, debits_delta=transfer.amount)
            apply_account_totals(self.db, transfer.credit_account_id, credits_delta=transfer.amount)
            self.db.mark_transfer_posted(transfer_id, self.clock())

        logger.info("Posted transfer %s for %d", transfer_id, transfer.amount)
        return PostingResult(posted=True)

    def delete_transfer(self, transfer_id: int) -> None:
        """Delete a transfer, reversing its effect on both accounts if posted.

        Raises:
            NotFoundError: If the transfer doesn't exist
            BalanceError: If reversing would break an account's constraint
        """
        transfer = self._require_transfer(transfer_id)

        with self.db.transaction():
            if transfer.is_posted:
                apply_account_totals(
                    self.db, transfer.debit_account_id, debits_delta=-transfer.amount
                )
                apply_account_totals(
                    self.db, transfer.credit_account_id, credits_delta=-transfer.amount
                )
            self.db.delete_transfer(transfer_id)

        logger.info("Deleted %s transfer %s", transfer.state.value, transfer_id)
