"""In-memory token store."""
import structlog
from .base import TokenStore, TokenNotFound
from ..logging import short_token
from ..services.crypto.token_models import Token

log = structlog.get_logger()


class InMemoryTokenStore(TokenStore):
    """
    Dict-backed implementation of the token store.

    Records are copied on the way in and out, so callers never hold a
    reference to the stored instance.
    """

    def __init__(self):
        self._store: dict[str, Token] = {}

    async def create_token(self, token: Token) -> Token:
        """Upsert token keyed by its token value."""
        token.assign_identity()
        self._store[token.token] = token.model_copy(deep=True)
        log.debug("token.stored", token=short_token(token.token), store="memory")
        return token

    async def get_token(self, token: str) -> Token:
        """Look up a token by key."""
        stored = self._store.get(token)
        if stored is None:
            raise TokenNotFound(token)
        return stored.model_copy(deep=True)

    async def delete_token(self, token: Token) -> None:
        """Remove a token if present."""
        self._store.pop(token.token, None)
        log.debug("token.removed", token=short_token(token.token), store="memory")

    async def health_check(self) -> bool:
        """In-memory store is always healthy."""
        return True

    def count(self) -> int:
        """Get count of stored tokens"""
        return len(self._store)

    def clear(self) -> None:
        """Clear all tokens from the store"""
        self._store.clear()
        log.info("store.cleared", store="memory")
