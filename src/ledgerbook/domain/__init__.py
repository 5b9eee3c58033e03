"""Domain layer for ledgerbook application."""

_SERVICES = {
    "OrganizationService": "ledgerbook.domain.organization",
    "AccountService": "ledgerbook.domain.account",
    "TransferService": "ledgerbook.domain.transfer",
    "ScheduleService": "ledgerbook.domain.schedule",
    "AdjustmentService": "ledgerbook.domain.adjustment",
}

__all__ = list(_SERVICES)


# Import services lazily so that the database layer can import entities
# without pulling in the services that depend on it
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
