"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. Monetary fields are integers in minor units (cents); the
conversion to and from decimal amounts happens only at the input and display
boundary (see ``ledgerbook.utils.money``).
"""

from dataclasses import dataclass
from datetime import datetime, date
from enum import Enum
from typing import Optional


class AccountKind(str, Enum):
    """Closed set of account kinds."""

    CASH = "cash"
    VENDOR = "vendor"
    CREDIT_CARD = "credit_card"
    CUSTOMER = "customer"


class Polarity(Enum):
    """Which running total increases the "owed to me" balance."""

    DEBTOR = "debtor"
    CREDITOR = "creditor"


class FloorPolicy(Enum):
    """Whether the posted balance may drop below zero."""

    NON_NEGATIVE = "non_negative"
    UNCONSTRAINED = "unconstrained"


class TransferState(str, Enum):
    PENDING = "pending"
    POSTED = "posted"


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class Organization:
    """Organization that owns a set of accounts."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class CreditCardTerms:
    """Billing terms carried only by credit card accounts."""

    due_day: int
    statement_day: int
    credit_limit: int


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    organization_id: int
    name: str
    kind: AccountKind
    debits: int
    credits: int
    active: bool
    created_at: datetime
    credit_card: Optional[CreditCardTerms] = None


@dataclass(frozen=True)
class Transfer:
    """Movement of money from one account to another.

    Planned (not yet persisted) transfers have ``id`` and ``created_at`` set
    to None.
    """

    id: Optional[int]
    state: TransferState
    amount: int
    pending_on: date
    posted_on: Optional[date]
    debit_account_id: int
    credit_account_id: int
    schedule_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.state is TransferState.PENDING

    @property
    def is_posted(self) -> bool:
        return self.state is TransferState.POSTED


@dataclass(frozen=True)
class Schedule:
    """Rule that produces transfers on a set of calendar dates."""

    id: Optional[int]
    name: str
    amount: Optional[int]
    period: Optional[Period]
    frequency: Optional[int]
    starts_on: date
    ends_on: Optional[date]
    last_materialized_on: Optional[date]
    debit_account_id: int
    credit_account_id: int
    relative_account_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_recurring(self) -> bool:
        return self.period is not None


@dataclass(frozen=True)
class Adjustment:
    """Manual correction of an account's running totals."""

    id: int
    account_id: int
    credit_amount: Optional[int]
    debit_amount: Optional[int]
    note: str
    created_at: datetime
