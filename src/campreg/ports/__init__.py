"""Ports layer - Service interfaces following Clean Architecture.

This layer defines the contracts that the business logic depends on.
Adapters in ``campreg.storage`` and ``campreg.auth`` implement them.
"""

from .auth_ports import IAuthenticator, IPasswordHasher
from .storage import DocumentStorePort, Filters

__all__ = [
    "DocumentStorePort",
    "Filters",
    "IAuthenticator",
    "IPasswordHasher",
]
