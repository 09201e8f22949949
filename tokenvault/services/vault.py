"""Vault service: tokenization and detokenization over a pluggable store."""
from typing import Optional
import structlog

from .crypto.crypto_service import CryptoService, CryptoError, get_crypto_service
from .crypto.token_models import CreateToken, Token
from ..adapters.base import TokenStore, TokenNotFound, StoreError
from ..adapters.memory import InMemoryTokenStore
from ..adapters.redis_store import RedisTokenStore
from ..config import get_settings
from ..logging import short_token

log = structlog.get_logger()


class BadRequest(Exception):
    """Raised when a required input is missing or empty"""
    pass


class VaultService:
    """
    Orchestrates the token lifecycle against a TokenStore.

    Every operation is fail-fast: the first error aborts the remaining
    steps and propagates unchanged.
    """

    def __init__(
        self,
        store: Optional[TokenStore] = None,
        crypto: Optional[CryptoService] = None,
        metrics=None,
    ):
        """
        Initialize VaultService

        Args:
            store: Token store (defaults to the configured backend)
            crypto: CryptoService (defaults to the process-wide instance)
            metrics: Optional Metrics instance for business counters
        """
        self._store = store if store is not None else create_default_store()
        self._crypto = crypto
        self._metrics = metrics

    @property
    def store(self) -> TokenStore:
        return self._store

    @property
    def crypto(self) -> CryptoService:
        if self._crypto is None:
            self._crypto = get_crypto_service()
        return self._crypto

    async def create_token(self, request: CreateToken) -> str:
        """
        Tokenize, encrypt and persist a payload

        Args:
            request: Caller-supplied token fields

        Returns:
            The token string

        Raises:
            CryptoInitError: If the vault key is unusable
            StoreError: If the store fails
        """
        token = Token(**request.model_dump())
        try:
            # Hash the plaintext; encrypt() replaces it
            token.tokenize()
            token.encrypt(self.crypto)
            stored = await self._store.create_token(token)
        except (CryptoError, StoreError) as e:
            self._record_error("create", e)
            raise

        log.info(
            "token.created",
            token=short_token(stored.token),
            token_type=stored.token_type,
            ttl=stored.ttl,
        )
        if self._metrics is not None:
            self._metrics.record_token_created(stored.token_type)
        return stored.token

    async def get_encrypted_token(self, token: str) -> Token:
        """
        Fetch a token with its payload blanked

        Raises:
            BadRequest: If token is empty
            TokenNotFound: If no record exists
        """
        stored = await self._fetch(token, "get_encrypted")
        stored.payload = ""
        log.info("token.read", token=short_token(token), view="encrypted")
        if self._metrics is not None:
            self._metrics.record_token_read("encrypted")
        return stored

    async def get_decrypted_token(self, token: str) -> Token:
        """
        Fetch a token with its payload replaced by the plaintext

        Raises:
            BadRequest: If token is empty
            TokenNotFound: If no record exists
            DecodeError: If the stored payload is not valid hex
            AuthenticationError: If the stored payload fails authentication
        """
        stored = await self._fetch(token, "get_decrypted")
        try:
            plaintext = stored.decrypt(self.crypto)
        except CryptoError as e:
            self._record_error("get_decrypted", e)
            log.error(
                "token.decrypt_failed",
                token=short_token(token),
                error_type=type(e).__name__,
            )
            raise

        stored.payload = plaintext
        log.info("token.read", token=short_token(token), view="decrypted")
        if self._metrics is not None:
            self._metrics.record_token_read("decrypted")
        return stored

    async def delete_token(self, token: str) -> None:
        """
        Delete a token after confirming it exists

        Raises:
            BadRequest: If token is empty
            TokenNotFound: If no record exists; the delete is not attempted
        """
        stored = await self._fetch(token, "delete")
        try:
            await self._store.delete_token(stored)
        except StoreError as e:
            self._record_error("delete", e)
            raise

        log.info("token.deleted", token=short_token(token))
        if self._metrics is not None:
            self._metrics.record_token_deleted()

    async def _fetch(self, token: str, operation: str) -> Token:
        if not token:
            self._record_error(operation, BadRequest())
            raise BadRequest("token is required")
        try:
            return await self._store.get_token(token)
        except (TokenNotFound, StoreError) as e:
            self._record_error(operation, e)
            log.info(
                "token.lookup_failed",
                token=short_token(token),
                operation=operation,
                error_type=type(e).__name__,
            )
            raise

    def _record_error(self, operation: str, error: Exception) -> None:
        if self._metrics is not None:
            self._metrics.record_operation_error(operation, type(error).__name__)


def create_default_store() -> TokenStore:
    """
    Create the default store based on configuration.

    Returns:
        TokenStore instance based on STORE_BACKEND setting
    """
    settings = get_settings()
    if settings.STORE_BACKEND == "redis":
        if not settings.REDIS_URL:
            log.warning(
                "store.fallback",
                requested="redis",
                actual="memory",
                reason="REDIS_URL not configured"
            )
            return InMemoryTokenStore()

        log.info("store.selected", type="redis", host=settings.REDIS_URL.host)
        return RedisTokenStore(redis_url=str(settings.REDIS_URL))
    else:
        log.info("store.selected", type="memory")
        return InMemoryTokenStore()
