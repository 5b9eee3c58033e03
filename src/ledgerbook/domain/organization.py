"""Organization domain service."""

from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    Account as AccountEntity,
    AccountKind,
    Organization as OrganizationEntity,
)
from ledgerbook.domain.errors import ConflictError, ValidationError


class OrganizationService:
    """Service for managing organizations."""

    def __init__(self, db: Database):
        self.db = db

    def create_organization(self, name: str) -> int:
        """Create a new organization.

        Raises:
            ValidationError: If name is blank
            ConflictError: If an organization with the name already exists
        """
        if not name or not name.strip():
            raise ValidationError("Organization name is required")
        name = name.strip()
        for org in self.db.list_organizations():
            if org.name == name:
                raise ConflictError(f"Organization with name '{name}' already exists")
        return self.db.create_organization(name)

    def get_organization(self, organization_id: int) -> Optional[OrganizationEntity]:
        return self.db.get_organization(organization_id)

    def list_organizations(self) -> list[OrganizationEntity]:
        return self.db.list_organizations()

    def first_cash_account(self, organization_id: int) -> Optional[AccountEntity]:
        """Return the organization's active cash account with the lowest ID."""
        accounts = self.db.list_accounts(
            organization_id=organization_id, kind=AccountKind.CASH, active=True
        )
        return accounts[0] if accounts else None
