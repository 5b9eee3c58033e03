"""Adjustment domain service.

An adjustment nudges one of an account's running totals directly, outside
the transfer pipeline. Creating, changing and deleting an adjustment each
update the account in the same transaction as the adjustment row.
"""

import logging
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.balance import (
    apply_account_totals,
    polarity,
    posted_balance,
    signed_balance,
)
from ledgerbook.domain.entities import (
    Account as AccountEntity,
    AccountKind,
    Adjustment as AdjustmentEntity,
    Polarity,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    adjustment_not_found,
)

logger = logging.getLogger(__name__)


def net_effect(adjustment: AdjustmentEntity, kind: AccountKind) -> int:
    """Signed change the adjustment makes to a posted balance of the given kind."""
    return signed_balance(kind, adjustment.debit_amount or 0, adjustment.credit_amount or 0)


def amounts_for_difference(kind: AccountKind, difference: int) -> tuple[Optional[int], Optional[int]]:
    """Return (credit_amount, debit_amount) that move a balance of this kind by ``difference``.

    Raises:
        ValidationError: If difference is zero
    """
    if difference == 0:
        raise ValidationError("Account is already at the target balance")
    grows_with_debits = polarity(kind) is Polarity.DEBTOR
    if (difference > 0) == grows_with_debits:
        return None, abs(difference)
    return abs(difference), None


def _validate(credit_amount: Optional[int], debit_amount: Optional[int], note: Optional[str]) -> None:
    if credit_amount is None and debit_amount is None:
        raise ValidationError("Adjustment must change the account balance")
    if credit_amount is not None and debit_amount is not None:
        raise ValidationError("Cannot have both credit amount and debit amount")
    amount = credit_amount if credit_amount is not None else debit_amount
    if amount <= 0:
        raise ValidationError("Adjustment amount must be greater than 0")
    if not note or not note.strip():
        raise ValidationError("Note is required")


class AdjustmentService:
    """Service for managing balance adjustments."""

    def __init__(self, db: Database):
        """Initialize adjustment service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_adjustment(self, adjustment_id: int) -> AdjustmentEntity:
        adjustment = self.db.get_adjustment(adjustment_id)
        if adjustment is None:
            raise NotFoundError(adjustment_not_found(adjustment_id))
        return adjustment

    def _require_account(self, account_id: int) -> AccountEntity:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def create_adjustment(
        self,
        account_id: int,
        note: str,
        credit_amount: Optional[int] = None,
        debit_amount: Optional[int] = None,
    ) -> int:
        """Create an adjustment and apply it to the account.

        Args:
            account_id: Account to adjust
            note: Reason for the adjustment
            credit_amount: Amount added to the account's credits
            debit_amount: Amount added to the account's debits

        Returns:
            Adjustment ID

        Raises:
            ValidationError: If not exactly one positive amount is given or note is blank
            NotFoundError: If the account doesn't exist
            BalanceError: If the adjustment would break the account's constraint
        """
        _validate(credit_amount, debit_amount, note)
        self._require_account(account_id)

        with self.db.transaction():
            adjustment_id = self.db.create_adjustment(
                account_id=account_id,
                note=note.strip(),
                credit_amount=credit_amount,
                debit_amount=debit_amount,
            )
            apply_account_totals(
                self.db,
                account_id,
                debits_delta=debit_amount or 0,
                credits_delta=credit_amount or 0,
            )

        logger.info("Adjustment %s applied to account %s", adjustment_id, account_id)
        return adjustment_id

    def get_adjustment(self, adjustment_id: int) -> Optional[AdjustmentEntity]:
        return self.db.get_adjustment(adjustment_id)

    def list_adjustments(self, account_id: Optional[int] = None) -> list[AdjustmentEntity]:
        return self.db.list_adjustments(account_id=account_id)

    def update_adjustment(
        self,
        adjustment_id: int,
        credit_amount: Optional[int] = None,
        debit_amount: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        """Change an adjustment and move the account by the difference.

        The amounts are replaced as a pair: passing only ``debit_amount``
        turns a credit adjustment into a debit adjustment. When neither
        amount is given the amounts are left as they are.

        Raises:
            NotFoundError: If the adjustment doesn't exist
            ValidationError: If the resulting adjustment is invalid
            BalanceError: If the change would break the account's constraint
        """
        adjustment = self._require_adjustment(adjustment_id)
        if credit_amount is None and debit_amount is None:
            credit_amount = adjustment.credit_amount
            debit_amount = adjustment.debit_amount
        new_note = note if note is not None else adjustment.note
        _validate(credit_amount, debit_amount, new_note)

        credits_delta = (credit_amount or 0) - (adjustment.credit_amount or 0)
        debits_delta = (debit_amount or 0) - (adjustment.debit_amount or 0)

        with self.db.transaction():
            self.db.update_adjustment(
                adjustment_id,
                note=new_note.strip(),
                credit_amount=credit_amount,
                debit_amount=debit_amount,
            )
            apply_account_totals(
                self.db,
                adjustment.account_id,
                debits_delta=debits_delta,
                credits_delta=credits_delta,
            )

        if credits_delta or debits_delta:
            logger.info(
                "Adjustment %s changed account %s by debits=%+d credits=%+d",
                adjustment_id,
                adjustment.account_id,
                debits_delta,
                credits_delta,
            )

    def delete_adjustment(self, adjustment_id: int) -> None:
        """Delete an adjustment and fully reverse its effect.

        Raises:
            NotFoundError: If the adjustment doesn't exist
            BalanceError: If the reversal would break the account's constraint
        """
        adjustment = self._require_adjustment(adjustment_id)

        with self.db.transaction():
            apply_account_totals(
                self.db,
                adjustment.account_id,
                debits_delta=-(adjustment.debit_amount or 0),
                credits_delta=-(adjustment.credit_amount or 0),
            )
            self.db.delete_adjustment(adjustment_id)

        logger.info("Adjustment %s reversed on account %s", adjustment_id, adjustment.account_id)

    def create_adjustment_to_balance(self, account_id: int, target_balance: int, note: str) -> int:
        """Create the adjustment that brings the account's posted balance to ``target_balance``.

        The side is picked from the account's polarity: raising a cash balance
        is a debit, raising a credit card balance is a credit.

        Returns:
            Adjustment ID

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the account is already at the target balance
            BalanceError: If the target breaks the account's constraint
        """
        account = self._require_account(account_id)
        credit_amount, debit_amount = amounts_for_difference(
            account.kind, target_balance - posted_balance(account)
        )
        return self.create_adjustment(
            account_id, note=note, credit_amount=credit_amount, debit_amount=debit_amount
        )

    def update_adjustment_to_balance(
        self, adjustment_id: int, target_balance: int, note: Optional[str] = None
    ) -> None:
        """Rework an adjustment so the account's posted balance ends at ``target_balance``.

        The difference is measured from the balance the account would have
        without this adjustment.
        """
        adjustment = self._require_adjustment(adjustment_id)
        account = self._require_account(adjustment.account_id)
        base_balance = posted_balance(account) - net_effect(adjustment, account.kind)
        credit_amount, debit_amount = amounts_for_difference(
            account.kind, target_balance - base_balance
        )
        self.update_adjustment(
            adjustment_id, credit_amount=credit_amount, debit_amount=debit_amount, note=note
        )
