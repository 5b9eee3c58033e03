"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class BalanceError(DomainError):
    """A change would break an account's balance constraint."""


class ImmutableTransferError(DomainError):
    """Attempted change to a transfer that has already been posted."""


def organization_not_found(organization_id: int) -> str:
    """Return message for missing organization."""
    return f"Organization {organization_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transfer_not_found(transfer_id: int) -> str:
    """Return message for missing transfer."""
    return f"Transfer {transfer_id} not found"


def schedule_not_found(schedule_id: int) -> str:
    """Return message for missing schedule."""
    return f"Schedule {schedule_id} not found"


def adjustment_not_found(adjustment_id: int) -> str:
    """Return message for missing adjustment."""
    return f"Adjustment {adjustment_id} not found"


def same_accounts() -> str:
    """Return message for a transfer or schedule pointing at one account twice."""
    return "Credit account must be different from debit account"


def negative_cash_balance() -> str:
    return "Cash account cannot have a negative posted balance"


def creditor_below_debits() -> str:
    return "Creditor account cannot have credits less than debits"


def credit_card_below_debits() -> str:
    return "This transfer would cause credit card to have credits less than debits"


def posted_transfer_immutable() -> str:
    return "Posted transfers cannot be modified"


def account_delete_blocked(
    account_id: int, transfer_count: int, schedule_count: int, adjustment_count: int
) -> str:
    """Return message when account has dependent transfers, schedules or adjustments."""
    parts = []
    if transfer_count > 0:
        parts.append(f"{transfer_count} transfer{'s' if transfer_count != 1 else ''}")
    if schedule_count > 0:
        parts.append(f"{schedule_count} schedule{'s' if schedule_count != 1 else ''}")
    if adjustment_count > 0:
        parts.append(
            f"{adjustment_count} adjustment{'s' if adjustment_count != 1 else ''}"
        )
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please delete them first."
    )
