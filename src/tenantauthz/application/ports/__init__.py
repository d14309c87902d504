"""Application ports - interfaces for external adapters."""

from tenantauthz.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "UnitOfWork",
    "UnitOfWorkFactory",
]
