"""Credit card billing calendar.

Pure helpers over ``CreditCardTerms``. A billing day past the end of a month
(e.g. the 31st in April) falls on that month's last day.
"""

from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from ledgerbook.domain.entities import CreditCardTerms
from ledgerbook.domain.errors import ValidationError


def validate_terms(terms: Optional[CreditCardTerms]) -> None:
    """Check presence and ranges of credit card terms.

    Raises:
        ValidationError: If terms are missing or out of range
    """
    if terms is None:
        raise ValidationError("Credit card accounts require due day, statement day and credit limit")
    for label, day in (("Due day", terms.due_day), ("Statement day", terms.statement_day)):
        if day is None:
            raise ValidationError(f"{label} is required for credit card accounts")
        if not 1 <= day <= 31:
            raise ValidationError(f"{label} must be between 1 and 31")
    if terms.credit_limit is None or terms.credit_limit <= 0:
        raise ValidationError("Credit limit must be greater than 0")


def _day_in_month(year: int, month: int, day: int) -> date:
    return date(year, month, 1) + relativedelta(day=day)


def _next_monthly(day: int, today: date, offset_days: int = 0) -> date:
    this_month = _day_in_month(today.year, today.month, day) - timedelta(days=offset_days)
    if this_month >= today:
        return this_month
    following = today.replace(day=1) + relativedelta(months=1)
    return _day_in_month(following.year, following.month, day) - timedelta(days=offset_days)


def next_statement_date(terms: CreditCardTerms, today: date) -> Optional[date]:
    """Next statement date on or after today."""
    if terms.statement_day is None:
        return None
    return _next_monthly(terms.statement_day, today)


def next_due_date(terms: CreditCardTerms, today: date) -> Optional[date]:
    """Next payment due date on or after today."""
    if terms.due_day is None:
        return None
    return _next_monthly(terms.due_day, today)


def next_payment_date(terms: CreditCardTerms, today: date) -> Optional[date]:
    """Day before the next statement date that is still on or after today."""
    if terms.statement_day is None:
        return None
    return _next_monthly(terms.statement_day, today, offset_days=1)


def days_until_statement(terms: CreditCardTerms, today: date) -> Optional[int]:
    statement = next_statement_date(terms, today)
    return None if statement is None else (statement - today).days


def days_until_due(terms: CreditCardTerms, today: date) -> Optional[int]:
    due = next_due_date(terms, today)
    return None if due is None else (due - today).days
