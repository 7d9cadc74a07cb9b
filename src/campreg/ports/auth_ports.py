"""Authentication ports: token issuance and credential hashing."""

from abc import ABC, abstractmethod

from campreg.models.auth import Principal


class IAuthenticator(ABC):
    """Issues and verifies signed identity tokens."""

    @abstractmethod
    def issue(self, principal: Principal) -> str:
        """Return a signed token for ``principal``."""

    @abstractmethod
    def verify(self, token: str) -> Principal | None:
        """Return the principal carried by a valid token, None otherwise."""


class IPasswordHasher(ABC):
    """One-way credential hashing."""

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """Return an opaque hash of ``plaintext``."""

    @abstractmethod
    def compare(self, plaintext: str, hashed: str) -> bool:
        """Return whether ``plaintext`` matches ``hashed``."""
