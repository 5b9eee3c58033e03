"""Utilities for resolving names or IDs to entity IDs."""

from typing import Optional

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.organization import OrganizationService


def resolve_organization(organization_service: OrganizationService, organization: str | int) -> int:
    """Resolve organization name or ID to organization ID.

    Raises:
        ValueError: If organization is not found
    """
    try:
        organization_id = int(organization)
    except (ValueError, TypeError):
        # Not a number, treat as name
        pass
    else:
        if organization_service.get_organization(organization_id) is None:
            raise ValueError(f"Organization ID {organization_id} not found")
        return organization_id

    for org in organization_service.list_organizations():
        if org.name == organization:
            return org.id

    raise ValueError(f"Organization '{organization}' not found")


def resolve_account(
    account_service: AccountService, account: str | int, organization_id: Optional[int] = None
) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)
        organization_id: Restrict name lookup to one organization

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found or the name is ambiguous
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        # Not a number, treat as name
        pass
    else:
        if account_service.get_account(account_id) is None:
            raise ValueError(f"Account ID {account_id} not found")
        return account_id

    matches = [
        acc
        for acc in account_service.list_accounts(organization_id=organization_id)
        if acc.name == account
    ]
    if len(matches) > 1:
        raise ValueError(
            f"Account name '{account}' exists in several organizations; use its ID"
        )
    if matches:
        return matches[0].id

    raise ValueError(f"Account '{account}' not found")
