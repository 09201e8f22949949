"""Base store interface for token persistence backends."""
from abc import ABC, abstractmethod
from ..services.crypto.token_models import Token


class StoreError(Exception):
    """Raised when the persistence engine fails (network, permission, encoding)."""
    pass


class TokenNotFound(Exception):
    """Raised when no record exists for a token."""

    def __init__(self, token: str):
        super().__init__("token not found")
        self.token = token


class TokenStore(ABC):
    """
    Abstract interface for token store implementations.

    Records are keyed by Token.token. Implementations must support point
    lookup, upsert and delete by that key.
    """

    @abstractmethod
    async def create_token(self, token: Token) -> Token:
        """
        Persist a token, overwriting any record with the same key.

        Identity (id and timestamps) is assigned if not already set.

        Args:
            token: The token to persist, payload already encrypted

        Returns:
            The stored token

        Raises:
            StoreError: If the backend fails
        """
        pass

    @abstractmethod
    async def get_token(self, token: str) -> Token:
        """
        Fetch a token by its key.

        Args:
            token: The token string

        Returns:
            The stored token

        Raises:
            TokenNotFound: If no record exists
            StoreError: If the backend fails
        """
        pass

    @abstractmethod
    async def delete_token(self, token: Token) -> None:
        """
        Remove the record keyed by token.token. Removing an absent record
        is not an error.

        Raises:
            StoreError: If the backend fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the backend is healthy and accessible.

        Returns:
            True if backend is healthy, False otherwise
        """
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
