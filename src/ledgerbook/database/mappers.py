"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so that enum values and the flat
credit card columns never leak out of the database package.
"""

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    Adjustment as ORMAdjustment,
    Organization as ORMOrganization,
    Schedule as ORMSchedule,
    Transfer as ORMTransfer,
)


def organization_to_domain(orm_organization: ORMOrganization) -> domain.Organization:
    """Convert SQLAlchemy Organization model to domain Organization entity."""
    return domain.Organization(
        id=orm_organization.id,
        name=orm_organization.name,
        created_at=orm_organization.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    credit_card = None
    if orm_account.kind == domain.AccountKind.CREDIT_CARD.value:
        credit_card = domain.CreditCardTerms(
            due_day=orm_account.due_day,
            statement_day=orm_account.statement_day,
            credit_limit=orm_account.credit_limit,
        )
    return domain.Account(
        id=orm_account.id,
        organization_id=orm_account.organization_id,
        name=orm_account.name,
        kind=domain.AccountKind(orm_account.kind),
        debits=orm_account.debits,
        credits=orm_account.credits,
        active=orm_account.active,
        created_at=orm_account.created_at,
        credit_card=credit_card,
    )


def transfer_to_domain(orm_transfer: ORMTransfer) -> domain.Transfer:
    """Convert SQLAlchemy Transfer model to domain Transfer entity."""
    return domain.Transfer(
        id=orm_transfer.id,
        state=domain.TransferState(orm_transfer.state),
        amount=orm_transfer.amount,
        pending_on=orm_transfer.pending_on,
        posted_on=orm_transfer.posted_on,
        debit_account_id=orm_transfer.debit_account_id,
        credit_account_id=orm_transfer.credit_account_id,
        schedule_id=orm_transfer.schedule_id,
        created_at=orm_transfer.created_at,
    )


def schedule_to_domain(orm_schedule: ORMSchedule) -> domain.Schedule:
    """Convert SQLAlchemy Schedule model to domain Schedule entity."""
    return domain.Schedule(
        id=orm_schedule.id,
        name=orm_schedule.name,
        amount=orm_schedule.amount,
        period=domain.Period(orm_schedule.period) if orm_schedule.period else None,
        frequency=orm_schedule.frequency,
        starts_on=orm_schedule.starts_on,
        ends_on=orm_schedule.ends_on,
        last_materialized_on=orm_schedule.last_materialized_on,
        debit_account_id=orm_schedule.debit_account_id,
        credit_account_id=orm_schedule.credit_account_id,
        relative_account_id=orm_schedule.relative_account_id,
        created_at=orm_schedule.created_at,
    )


def adjustment_to_domain(orm_adjustment: ORMAdjustment) -> domain.Adjustment:
    """Convert SQLAlchemy Adjustment model to domain Adjustment entity."""
    return domain.Adjustment(
        id=orm_adjustment.id,
        account_id=orm_adjustment.account_id,
        credit_amount=orm_adjustment.credit_amount,
        debit_amount=orm_adjustment.debit_amount,
        note=orm_adjustment.note,
        created_at=orm_adjustment.created_at,
    )
