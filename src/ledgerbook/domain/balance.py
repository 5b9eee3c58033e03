"""Account balance model.

Every balance in the ledger is computed the same way: a debit-side sum and a
credit-side sum are combined according to the account kind's polarity. Debtor
accounts (cash, vendor) grow with debits; creditor accounts (credit card,
customer) grow with credits.
"""

import logging

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Account, AccountKind, FloorPolicy, Polarity
from ledgerbook.domain.errors import (
    BalanceError,
    NotFoundError,
    ValidationError,
    account_not_found,
    creditor_below_debits,
    negative_cash_balance,
)

logger = logging.getLogger(__name__)

_POLARITY = {
    AccountKind.CASH: Polarity.DEBTOR,
    AccountKind.VENDOR: Polarity.DEBTOR,
    AccountKind.CREDIT_CARD: Polarity.CREDITOR,
    AccountKind.CUSTOMER: Polarity.CREDITOR,
}

_FLOOR_POLICY = {
    AccountKind.CASH: FloorPolicy.NON_NEGATIVE,
    AccountKind.VENDOR: FloorPolicy.UNCONSTRAINED,
    AccountKind.CREDIT_CARD: FloorPolicy.NON_NEGATIVE,
    AccountKind.CUSTOMER: FloorPolicy.NON_NEGATIVE,
}


def polarity(kind: AccountKind) -> Polarity:
    """Return the polarity of an account kind."""
    return _POLARITY[kind]


def balance_floor_policy(kind: AccountKind) -> FloorPolicy:
    """Return whether accounts of this kind may carry a negative balance."""
    return _FLOOR_POLICY[kind]


def signed_balance(kind: AccountKind, debit_total: int, credit_total: int) -> int:
    """Combine a debit-side and credit-side total per the kind's polarity."""
    if polarity(kind) is Polarity.DEBTOR:
        return debit_total - credit_total
    return credit_total - debit_total


def posted_balance(account: Account) -> int:
    """Return the balance of everything already posted to the account."""
    return signed_balance(account.kind, account.debits, account.credits)


def seeded_totals(kind: AccountKind, amount: int) -> tuple[int, int]:
    """Return (debits, credits) that give a fresh account the posted balance ``amount``.

    The whole amount goes on the side that increases the balance for the
    kind's polarity and the other side is zeroed.

    Raises:
        ValidationError: If amount is negative
    """
    if amount < 0:
        raise ValidationError("Posted balance cannot be negative")
    if polarity(kind) is Polarity.DEBTOR:
        return amount, 0
    return 0, amount


def check_totals(kind: AccountKind, debits: int, credits: int) -> None:
    """Validate running totals against the kind's polarity and floor policy.

    Raises:
        BalanceError: If the totals would give a non-negative account a
            negative posted balance
    """
    if balance_floor_policy(kind) is FloorPolicy.UNCONSTRAINED:
        return
    if signed_balance(kind, debits, credits) >= 0:
        return
    if polarity(kind) is Polarity.DEBTOR:
        raise BalanceError(negative_cash_balance())
    raise BalanceError(creditor_below_debits())


def apply_account_totals(
    db: Database, account_id: int, debits_delta: int = 0, credits_delta: int = 0
) -> Account:
    """Increment an account's running totals after checking the balance constraint.

    Must be called inside ``db.transaction()`` whenever it is one of several
    mutations that belong together.

    Returns:
        Account entity with the new totals

    Raises:
        NotFoundError: If the account doesn't exist
        BalanceError: If the new totals break the account's constraint
    """
    account = db.get_account(account_id)
    if account is None:
        raise NotFoundError(account_not_found(account_id))
    if debits_delta == 0 and credits_delta == 0:
        return account

    check_totals(account.kind, account.debits + debits_delta, account.credits + credits_delta)
    db.increment_account_totals(
        account_id, debits_delta=debits_delta, credits_delta=credits_delta
    )
    logger.debug(
        "Account %s totals changed by debits=%+d credits=%+d",
        account_id,
        debits_delta,
        credits_delta,
    )
    updated = db.get_account(account_id)
    if updated is None:
        raise NotFoundError(account_not_found(account_id))
    return updated
